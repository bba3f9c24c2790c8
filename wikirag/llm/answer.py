"""Answer generation from Wikipedia extracts."""

from __future__ import annotations

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from wikirag.config import Settings
from wikirag.llm.providers import ChatProvider, ChatReply, get_provider
from wikirag.wiki.models import PageExtract

ANSWER_MAX_TOKENS = 1000
CONTEXT_SOURCE_NAME = "Wikipedia"


def build_answer_messages(pages: list[PageExtract], question: str) -> list[BaseMessage]:
    """One named system message per extract, then the question as user content."""
    messages: list[BaseMessage] = [
        SystemMessage(content=page.text, name=CONTEXT_SOURCE_NAME) for page in pages
    ]
    messages.append(
        HumanMessage(
            content=(
                "Now answer the following question, using the information "
                f"in the provided text: {question}"
            )
        )
    )
    return messages


async def answer_question(
    pages: list[PageExtract],
    question: str,
    settings: Settings,
    provider: ChatProvider | None = None,
) -> ChatReply:
    provider = provider or get_provider(settings)
    messages = build_answer_messages(pages, question)
    return await provider.complete(messages, max_tokens=ANSWER_MAX_TOKENS)
