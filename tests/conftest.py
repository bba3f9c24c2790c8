"""Shared fixtures.

No test talks to a real model or to Wikipedia: chat calls go through a
scripted provider and HTTP is intercepted with ``respx``.
"""

from __future__ import annotations

from typing import Callable, Iterable

import httpx
import pytest
import respx

from wikirag.config import Settings
from wikirag.llm.providers import ChatProvider, ChatReply

WIKI_HOST = "en.wikipedia.org"
WIKI_PATH = "/w/api.php"

_ENV_VARS = (
    "AI_MODEL",
    "VERBOSE",
    "WIKI_PAGES",
    "OPENAI_API_KEY",
    "OLLAMA_BASE_URL",
    "WIKIPEDIA_API_URL",
    "WIKIRAG_USER_AGENT",
    "REQUEST_TIMEOUT",
)


class ScriptedProvider(ChatProvider):
    """Chat provider that replays canned replies and records each request."""

    def __init__(self, settings: Settings, replies: Iterable[ChatReply | BaseException]) -> None:
        super().__init__(settings)
        self.replies = list(replies)
        self.calls: list[tuple[list, int]] = []

    def _build_llm(self, max_tokens: int):
        raise AssertionError("scripted provider never builds a real model")

    async def complete(self, messages, max_tokens):
        self.calls.append((messages, max_tokens))
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply


def wiki_handler(
    search: list[dict],
    extracts: dict[str, str],
) -> Callable[[httpx.Request], httpx.Response]:
    """Build a respx side effect serving search and extract queries.

    *search* is the raw ``query.search`` list; *extracts* maps page id to
    extract text.  Ids absent from *extracts* get an empty page map.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        params = request.url.params
        if params.get("list") == "search":
            return httpx.Response(200, json={"query": {"search": search}})

        page_id = params["pageids"]
        pages = {}
        if page_id in extracts:
            pages[page_id] = {
                "pageid": int(page_id),
                "title": f"Page {page_id}",
                "extract": extracts[page_id],
            }
        return httpx.Response(200, json={"batchcomplete": "", "query": {"pages": pages}})

    return handler


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment (and .env) out of the tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def settings() -> Settings:
    return Settings(openai_api_key="sk-test")


@pytest.fixture()
def scripted_provider() -> Callable[..., ScriptedProvider]:
    def _make(settings: Settings, *replies: ChatReply | BaseException) -> ScriptedProvider:
        return ScriptedProvider(settings, replies)

    return _make


@pytest.fixture()
def wiki_api():
    """Yield a respx route for the Wikipedia API; set ``side_effect`` in the test."""
    with respx.mock(assert_all_called=False) as router:
        yield router.route(host=WIKI_HOST, path=WIKI_PATH)
