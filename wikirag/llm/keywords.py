"""Keyword derivation: turn the user's question into one Wikipedia search term."""

from __future__ import annotations

from langchain_core.messages import HumanMessage, SystemMessage

from wikirag.config import Settings
from wikirag.llm.providers import ChatProvider, ChatReply, get_provider

KEYWORD_INSTRUCTION = (
    "Extract exactly one keyword from the user's question for a Wikipedia "
    "lookup, respond with just the single keyword."
)
KEYWORD_MAX_TOKENS = 32


async def extract_keyword(
    question: str,
    settings: Settings,
    provider: ChatProvider | None = None,
) -> ChatReply:
    """Ask the model for a single search keyword.

    The keyword is not validated; ``reply.content`` may be multi-word or
    ``None`` when the model said nothing.
    """
    provider = provider or get_provider(settings)
    messages = [
        SystemMessage(content=KEYWORD_INSTRUCTION),
        HumanMessage(content=question),
    ]
    return await provider.complete(messages, max_tokens=KEYWORD_MAX_TOKENS)
