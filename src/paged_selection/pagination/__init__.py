"""Page navigation over a lazily fetched remote collection."""

from .controller import PaginationController, FetchPage

__all__ = ["PaginationController", "FetchPage"]
