"""Centralised settings for WikiRag.

All runtime configuration is resolved here in one place.  Values come from
environment variables or a `.env` file in the project root (loaded
automatically when this module is imported).

Build the settings once with :meth:`Settings.from_env` and pass the value
into each pipeline stage.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


class LlmProvider(str, Enum):
    """Backend serving language-model requests."""

    OPENAI = "openai"
    OLLAMA = "ollama"


class ModelChoice(Enum):
    """Allow-list of chat models, each bound to the provider that serves it."""

    GPT_4_TURBO = ("gpt-4-turbo", LlmProvider.OPENAI)
    GPT_35_TURBO = ("gpt-3.5-turbo", LlmProvider.OPENAI)
    GPT_4O = ("gpt-4o", LlmProvider.OPENAI)
    LLAMA3 = ("llama3", LlmProvider.OLLAMA)

    def __init__(self, model_name: str, provider: LlmProvider) -> None:
        self.model_name = model_name
        self.provider = provider

    @classmethod
    def default(cls) -> ModelChoice:
        return cls.GPT_35_TURBO


def parse_model(value: str | None) -> tuple[ModelChoice, str | None]:
    """Resolve an ``AI_MODEL`` value against the allow-list.

    Returns:
        ``(choice, warning)``.  *warning* is ``None`` when *value* is unset or
        recognised; otherwise the default model is returned together with a
        message naming the allowed models.
    """
    if not value:
        return ModelChoice.default(), None
    for choice in ModelChoice:
        if choice.model_name == value:
            return choice, None

    allowed = "\n".join(f"  - {c.model_name}" for c in ModelChoice)
    warning = (
        f"Unknown model {value} requested, falling back to "
        f"'{ModelChoice.default().model_name}'.\n"
        f"Only the following models are currently allowed:\n{allowed}"
    )
    return ModelChoice.default(), warning


def parse_wiki_pages(value: str | None) -> int:
    """Parse ``WIKI_PAGES``; anything that is not a positive integer gives 1."""
    if not value:
        return 1
    try:
        pages = int(value)
    except ValueError:
        return 1
    return max(pages, 1)


@dataclass(frozen=True)
class Settings:
    # ------------------------------------------------------------------
    # Chat model
    # ------------------------------------------------------------------
    model: ModelChoice = ModelChoice.GPT_35_TURBO
    openai_api_key: str = ""
    ollama_base_url: str = "http://localhost:11434"

    # ------------------------------------------------------------------
    # Wikipedia
    # ------------------------------------------------------------------
    wiki_pages: int = 1
    wikipedia_api_url: str = "https://en.wikipedia.org/w/api.php"
    user_agent: str = "WikiRag/0.1 (https://github.com/wikirag/wikirag)"
    request_timeout: float = 30.0

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    verbose: bool = False

    @property
    def model_name(self) -> str:
        return self.model.model_name

    @property
    def llm_provider(self) -> LlmProvider:
        return self.model.provider

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from *environ* (defaults to ``os.environ``).

        An unrecognised ``AI_MODEL`` is reported on stderr and replaced by
        the default model.
        """
        env = os.environ if environ is None else environ

        model, warning = parse_model(env.get("AI_MODEL"))
        if warning:
            print(warning, file=sys.stderr)

        return cls(
            model=model,
            openai_api_key=env.get("OPENAI_API_KEY", ""),
            ollama_base_url=env.get("OLLAMA_BASE_URL", cls.ollama_base_url),
            wiki_pages=parse_wiki_pages(env.get("WIKI_PAGES")),
            wikipedia_api_url=env.get("WIKIPEDIA_API_URL", cls.wikipedia_api_url),
            user_agent=env.get("WIKIRAG_USER_AGENT", cls.user_agent),
            request_timeout=float(env.get("REQUEST_TIMEOUT", cls.request_timeout)),
            verbose=bool(env.get("VERBOSE", "")),
        )
