"""Exception types raised across the scraper."""
from __future__ import annotations


class ScraperError(Exception):
    """Base class for all scraper errors."""


class MissingHeaderError(ScraperError):
    """A mandatory column heading was not found on a page.

    Pages without the mandatory headings (cover sheets, summaries) are
    expected; callers skip the page rather than abort the document.
    """

    def __init__(self, label: str) -> None:
        super().__init__(f'the "{label}" column heading was not found')
        self.label = label


class DocumentError(ScraperError):
    """A document could not be fetched or opened."""

    def __init__(self, url: str, cause: BaseException | None = None) -> None:
        message = f"Could not read document {url}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
        self.url = url
        self.cause = cause


class StorageError(ScraperError):
    """A record could not be written to the store."""
