"""Wikipedia package — search & page extracts."""

from wikirag.wiki.client import fetch_extract, fetch_extracts, search_wikipedia, select_pages
from wikirag.wiki.models import PageExtract, SearchResult

__all__ = [
    "search_wikipedia",
    "fetch_extract",
    "fetch_extracts",
    "select_pages",
    "SearchResult",
    "PageExtract",
]
