"""Exception types raised by the WikiRag pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wikirag.pipeline import Stage


class WikiRagError(Exception):
    """Base class for every error raised by WikiRag."""


class TransportError(WikiRagError):
    """The remote service could not be reached."""


class ApiError(WikiRagError):
    """The remote service answered with an error or an unusable payload."""


class NotFoundError(WikiRagError):
    """A requested Wikipedia page is absent from the extract response."""

    def __init__(self, page_id: str) -> None:
        super().__init__(f"Page not found: {page_id}")
        self.page_id = page_id


class NoMatchesError(WikiRagError):
    """The Wikipedia search returned no pages for the keyword."""

    def __init__(self, keyword: str) -> None:
        super().__init__(f"No Wikipedia pages matched {keyword!r}")
        self.keyword = keyword


class StageError(WikiRagError):
    """A pipeline stage failed; wraps the underlying cause."""

    def __init__(self, stage: Stage, cause: BaseException) -> None:
        super().__init__(str(cause))
        self.stage = stage
        self.cause = cause

    @property
    def exit_code(self) -> int:
        return self.stage.exit_code
