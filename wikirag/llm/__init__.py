"""Language-model package — providers, keyword and answer stages."""

from wikirag.llm.answer import answer_question
from wikirag.llm.keywords import extract_keyword
from wikirag.llm.providers import (
    ChatProvider,
    ChatReply,
    LocalChatProvider,
    RemoteChatProvider,
    Usage,
    get_provider,
)

__all__ = [
    "answer_question",
    "extract_keyword",
    "ChatProvider",
    "ChatReply",
    "LocalChatProvider",
    "RemoteChatProvider",
    "Usage",
    "get_provider",
]
