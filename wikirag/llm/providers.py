"""Chat-model providers behind one request/response contract.

Providers
---------
``RemoteChatProvider``
    Hosted OpenAI models through ``langchain_openai.ChatOpenAI``.
    Requires ``OPENAI_API_KEY`` to be set.

``LocalChatProvider``
    Locally served models through ``langchain_ollama.ChatOllama``.
    Configure the server via ``OLLAMA_BASE_URL``.

Both take a list of LangChain messages and return a :class:`ChatReply`.
A fresh LangChain model is built per call.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx
import openai
from langchain_core.messages import BaseMessage, SystemMessage

from wikirag.config import LlmProvider, Settings
from wikirag.errors import ApiError, TransportError


@dataclass(frozen=True)
class Usage:
    """Token counts reported alongside a model response."""

    input_tokens: int
    output_tokens: int


@dataclass(frozen=True)
class ChatReply:
    """Model output; ``content`` is ``None`` when the model returned nothing."""

    content: str | None
    usage: Usage | None = None


def _reply_from_message(message: Any) -> ChatReply:
    """Convert a LangChain ``AIMessage`` into a :class:`ChatReply`."""
    raw = getattr(message, "content", None)
    content = raw.strip() if isinstance(raw, str) else None

    usage = None
    meta = getattr(message, "usage_metadata", None)
    if meta:
        usage = Usage(
            input_tokens=int(meta.get("input_tokens", 0)),
            output_tokens=int(meta.get("output_tokens", 0)),
        )
    return ChatReply(content=content or None, usage=usage)


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class ChatProvider(ABC):
    """Abstract base class for a chat-model backend."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @property
    def model_name(self) -> str:
        return self.settings.model_name

    @abstractmethod
    def _build_llm(self, max_tokens: int) -> Any:
        """Return a LangChain chat model capped at *max_tokens* output tokens."""

    def _prepare(self, messages: list[BaseMessage]) -> list[BaseMessage]:
        return messages

    async def complete(self, messages: list[BaseMessage], max_tokens: int) -> ChatReply:
        """Send *messages* and return the model's reply.

        Raises:
            TransportError: If the model server could not be reached.
            ApiError: For any other failure reported by the client.
        """
        llm = self._build_llm(max_tokens)
        try:
            message = await llm.ainvoke(self._prepare(messages))
        except (httpx.TransportError, openai.APIConnectionError) as exc:
            raise TransportError(f"{self.model_name}: {exc}") from exc
        except Exception as exc:
            raise ApiError(f"{self.model_name}: {exc}") from exc

        if self.settings.verbose:
            print(f"Raw response: {message!r}", file=sys.stderr)
        return _reply_from_message(message)


# ---------------------------------------------------------------------------
# Implementations
# ---------------------------------------------------------------------------

class RemoteChatProvider(ChatProvider):
    """OpenAI chat completions."""

    def _build_llm(self, max_tokens: int) -> Any:
        if not self.settings.openai_api_key:
            raise ApiError(
                "OPENAI_API_KEY environment variable is not set. "
                "Set it or switch to AI_MODEL=llama3."
            )

        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=self.model_name,
            api_key=self.settings.openai_api_key,
            max_tokens=max_tokens,
            timeout=self.settings.request_timeout,
        )


class LocalChatProvider(ChatProvider):
    """Ollama chat; the exchange is collapsed into a single system message."""

    def _build_llm(self, max_tokens: int) -> Any:
        from langchain_ollama import ChatOllama

        return ChatOllama(
            model=self.model_name,
            base_url=self.settings.ollama_base_url,
            num_predict=max_tokens,
        )

    def _prepare(self, messages: list[BaseMessage]) -> list[BaseMessage]:
        text = "\n".join(str(m.content) for m in messages)
        return [SystemMessage(content=text)]


def get_provider(settings: Settings) -> ChatProvider:
    """Return the provider serving ``settings.model``."""
    if settings.llm_provider is LlmProvider.OLLAMA:
        return LocalChatProvider(settings)
    return RemoteChatProvider(settings)
