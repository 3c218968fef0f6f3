"""Core data structures: keys, selection, pages, errors."""

from .errors import (
    PagedSelectionError,
    FetchError,
    InvalidArgument,
    BusyError,
    StaleResponseError,
)
from .key_registry import KeyRegistry
from .selection_set import SelectionSet
from .page import Page, PaginationState, key_getter

__all__ = [
    "PagedSelectionError",
    "FetchError",
    "InvalidArgument",
    "BusyError",
    "StaleResponseError",
    "KeyRegistry",
    "SelectionSet",
    "Page",
    "PaginationState",
    "key_getter",
]
