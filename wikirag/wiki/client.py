"""Async client for the Wikipedia query API.

Two calls are used:

``search_wikipedia``
    ``action=query&list=search`` → ordered list of :class:`SearchResult`.

``fetch_extract`` / ``fetch_extracts``
    ``action=query&prop=extracts&explaintext=true`` → plain-text page body,
    one page id per request.  ``fetch_extracts`` runs the requests
    concurrently but keeps result order.
"""

from __future__ import annotations

import asyncio
import sys
from typing import Any

import httpx

from wikirag.config import Settings
from wikirag.errors import ApiError, NotFoundError, TransportError
from wikirag.wiki.models import PageExtract, SearchResult


def _new_client(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent},
        timeout=settings.request_timeout,
        follow_redirects=True,
    )


async def _get_json(
    client: httpx.AsyncClient,
    settings: Settings,
    params: dict[str, str],
) -> Any:
    """GET the query API with *params* and decode the JSON body.

    Raises:
        TransportError: If the request never got a response.
        ApiError: On a non-2xx status or a body that is not JSON.
    """
    try:
        response = await client.get(settings.wikipedia_api_url, params=params)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise ApiError(
            f"Wikipedia returned HTTP {exc.response.status_code}"
        ) from exc
    except httpx.TransportError as exc:
        raise TransportError(f"Wikipedia request failed: {exc}") from exc

    if settings.verbose:
        print(f"Raw response: {response.text}", file=sys.stderr)

    try:
        return response.json()
    except ValueError as exc:
        raise ApiError(f"Malformed JSON from Wikipedia: {exc}") from exc


def _parse_search(data: Any) -> list[SearchResult]:
    try:
        entries = data["query"]["search"]
        return [
            SearchResult(page_id=str(entry["pageid"]), title=str(entry["title"]))
            for entry in entries
        ]
    except (KeyError, TypeError) as exc:
        raise ApiError(f"Unexpected search response from Wikipedia: {exc!r}") from exc


def _parse_extract(data: Any, page_id: str) -> str:
    try:
        pages = data["query"]["pages"]
    except (KeyError, TypeError) as exc:
        raise ApiError(f"Unexpected extract response from Wikipedia: {exc!r}") from exc

    # Pages are keyed by id, not ordered.
    page = pages.get(page_id) if isinstance(pages, dict) else None
    if not isinstance(page, dict) or "missing" in page or "extract" not in page:
        raise NotFoundError(page_id)
    return str(page["extract"])


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

async def search_wikipedia(keyword: str, settings: Settings) -> list[SearchResult]:
    """Search Wikipedia for *keyword*.

    An empty list is a legal outcome; deciding what to do about it is left
    to the caller.
    """
    params = {
        "action": "query",
        "list": "search",
        "srsearch": keyword,
        "format": "json",
    }
    async with _new_client(settings) as client:
        data = await _get_json(client, settings, params)
    return _parse_search(data)


async def fetch_extract(
    page_id: str,
    settings: Settings,
    client: httpx.AsyncClient | None = None,
) -> str:
    """Return the plain-text extract of page *page_id*.

    Raises:
        NotFoundError: If the response does not contain the requested page.
    """
    params = {
        "action": "query",
        "pageids": page_id,
        "prop": "extracts",
        "explaintext": "true",
        "format": "json",
    }
    if client is None:
        async with _new_client(settings) as own_client:
            data = await _get_json(own_client, settings, params)
    else:
        data = await _get_json(client, settings, params)
    return _parse_extract(data, page_id)


def select_pages(results: list[SearchResult], wiki_pages: int) -> list[SearchResult]:
    """Return the first ``min(wiki_pages, len(results))`` results (at least one requested)."""
    return results[: max(wiki_pages, 1)]


async def fetch_extracts(
    results: list[SearchResult],
    settings: Settings,
) -> list[PageExtract]:
    """Fetch the extracts of the top ``settings.wiki_pages`` *results*.

    Requests run concurrently over one client.  The returned list follows
    result order; if several requests fail, the error of the lowest index is
    raised.
    """
    selected = select_pages(results, settings.wiki_pages)
    if not selected:
        return []

    async with _new_client(settings) as client:
        outcomes = await asyncio.gather(
            *(fetch_extract(r.page_id, settings, client=client) for r in selected),
            return_exceptions=True,
        )

    pages: list[PageExtract] = []
    for result, outcome in zip(selected, outcomes):
        if isinstance(outcome, BaseException):
            raise outcome
        pages.append(PageExtract(page_id=result.page_id, title=result.title, text=outcome))
    return pages
