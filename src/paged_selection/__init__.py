"""paged-selection: consistent row selection over lazily paginated collections."""

import logging

from ._version import __version__
from .api import TableSession
from .config import SessionConfig
from .core import (
    PagedSelectionError,
    FetchError,
    InvalidArgument,
    BusyError,
    StaleResponseError,
    KeyRegistry,
    SelectionSet,
    Page,
    PaginationState,
    key_getter,
)
from .pagination import PaginationController
from .selection import SelectionCoordinator, HeaderSelectionState
from .sources import ArtworkSource, Artwork

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "TableSession",
    "SessionConfig",
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
    "PaginationController",
    "SelectionCoordinator",
    "HeaderSelectionState",
    "ArtworkSource",
    "Artwork",
]
