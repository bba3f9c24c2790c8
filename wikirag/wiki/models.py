"""Data models for the Wikipedia lookup stages."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SearchResult:
    """One page matched by a Wikipedia search, in relevance order."""

    page_id: str
    title: str


@dataclass(frozen=True)
class PageExtract:
    """Plain-text extract of a single Wikipedia page."""

    page_id: str
    title: str
    text: str
