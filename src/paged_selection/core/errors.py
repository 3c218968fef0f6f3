"""Error taxonomy for paged selection sessions."""

from __future__ import annotations


class PagedSelectionError(Exception):
    """Base class for every error raised by paged_selection."""


class FetchError(PagedSelectionError):
    """The remote page source failed or returned a malformed page."""

    def __init__(self, message: str, page: int | None = None) -> None:
        super().__init__(message)
        self.page = page


class InvalidArgument(PagedSelectionError, ValueError):
    """Bad caller input. The rejected operation changed nothing."""


class BusyError(PagedSelectionError):
    """Another mutating operation is in flight on the same session."""


class StaleResponseError(PagedSelectionError):
    """A fetch completed after its session was reset; the result was dropped."""

    def __init__(self, message: str, page: int | None = None) -> None:
        super().__init__(message)
        self.page = page
