"""Question → keyword → Wikipedia search → page extracts → answer.

``run_pipeline`` is the single public entry point.  Stages run strictly in
sequence; the first failing stage ends the run with a :class:`StageError`
whose ``exit_code`` identifies the stage.  Progress lines are printed to
stderr so stdout carries only the final answer.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import Enum

from wikirag.config import Settings
from wikirag.errors import NoMatchesError, StageError
from wikirag.llm.answer import answer_question
from wikirag.llm.keywords import extract_keyword
from wikirag.llm.pricing import format_usage
from wikirag.llm.providers import ChatProvider, ChatReply, get_provider
from wikirag.wiki.client import fetch_extracts, search_wikipedia
from wikirag.wiki.models import PageExtract, SearchResult

# Searched for when the model returns no keyword at all.
NO_KEYWORD_FALLBACK = "No response"

NO_MATCHES_EXIT_CODE = 5


class Stage(Enum):
    KEYWORD = ("keyword derivation", 1)
    SEARCH = ("Wikipedia search", 2)
    FETCH = ("page download", 3)
    ANSWER = ("answer generation", 4)

    def __init__(self, label: str, exit_code: int) -> None:
        self.label = label
        self.exit_code = exit_code


@dataclass
class PipelineResult:
    """Everything produced by one run."""

    question: str
    keyword: str
    results: list[SearchResult] = field(default_factory=list)
    pages: list[PageExtract] = field(default_factory=list)
    answer: str | None = None


def _log(message: str) -> None:
    print(message, file=sys.stderr)


def _log_usage(settings: Settings, reply: ChatReply) -> None:
    if reply.usage is not None:
        _log(f"[USAGE] {format_usage(settings.model, reply.usage)}")


async def run_pipeline(
    question: str,
    settings: Settings,
    provider: ChatProvider | None = None,
) -> PipelineResult:
    """Answer *question* from Wikipedia.

    Args:
        question: The user's question; surrounding whitespace is stripped.
        settings: Immutable run configuration.
        provider: Chat backend override.  Defaults to the provider serving
            ``settings.model``.

    Returns:
        The :class:`PipelineResult` of the run.  ``answer`` is ``None`` when
        the model produced no content.

    Raises:
        StageError: If any stage fails.
        NoMatchesError: If the search found no pages; the answer stage is
            not attempted.
    """
    question = question.strip()
    provider = provider or get_provider(settings)

    # ------------------------------------------------------------------
    # 1 — Keyword
    # ------------------------------------------------------------------
    _log(f"[KEYWORD] Deriving keyword using LLM model {settings.model_name} …")
    try:
        reply = await extract_keyword(question, settings, provider)
    except Exception as exc:
        raise StageError(Stage.KEYWORD, exc) from exc
    _log_usage(settings, reply)

    if reply.content is None:
        _log(f"[KEYWORD] Model returned no keyword; searching for {NO_KEYWORD_FALLBACK!r}.")
    keyword = reply.content if reply.content is not None else NO_KEYWORD_FALLBACK
    _log(f"[KEYWORD] Keyword found: {keyword}")
    result = PipelineResult(question=question, keyword=keyword)

    # ------------------------------------------------------------------
    # 2 — Search
    # ------------------------------------------------------------------
    _log(f"[SEARCH] Looking up {keyword!r} in Wikipedia …")
    try:
        result.results = await search_wikipedia(keyword, settings)
    except Exception as exc:
        raise StageError(Stage.SEARCH, exc) from exc

    if not result.results:
        raise NoMatchesError(keyword)
    _log(f"[SEARCH] {len(result.results)} result(s):")
    for hit in result.results:
        _log(f"[SEARCH] {hit.page_id:>10} | {hit.title}")

    # ------------------------------------------------------------------
    # 3 — Fetch
    # ------------------------------------------------------------------
    try:
        result.pages = await fetch_extracts(result.results, settings)
    except Exception as exc:
        raise StageError(Stage.FETCH, exc) from exc
    for page in result.pages:
        _log(f"[FETCH] Wikipedia page downloaded {page.title!r}: Size: {len(page.text)}")

    # ------------------------------------------------------------------
    # 4 — Answer
    # ------------------------------------------------------------------
    _log("[ANSWER] Answering question using Wikipedia pages and LLM model …")
    try:
        reply = await answer_question(result.pages, question, settings, provider)
    except Exception as exc:
        raise StageError(Stage.ANSWER, exc) from exc
    _log_usage(settings, reply)

    result.answer = reply.content
    return result
