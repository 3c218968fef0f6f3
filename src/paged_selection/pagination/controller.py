"""PaginationController: fetches pages and tracks where the view is.

Only the displayed page is kept; earlier pages survive solely as keys in
the KeyRegistry. Every fetch is tagged with the session generation so a
response arriving after ``reset()`` is discarded instead of applied.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from contextlib import contextmanager
from typing import Any, Awaitable, Callable, Iterator

from ..core.errors import FetchError, StaleResponseError
from ..core.key_registry import KeyRegistry
from ..core.page import KeyFunc, Page, PaginationState
from ..core.validation import validate_page_number, validate_page_payload

logger = logging.getLogger(__name__)

FetchPage = Callable[[int], Awaitable[Mapping[str, Any]]]
LoadingCallback = Callable[[bool], Any]


class PaginationController:
    """Drives page requests against a ``fetch_page`` coroutine.

    Parameters
    ----------
    fetch_page : async callable ``fetch_page(page) -> {"items", "total_count"}``.
    registry : KeyRegistry that receives the keys of every applied page.
    key : function returning an item's unique key.
    page_size : fixed number of items per page.
    """

    def __init__(
        self,
        fetch_page: FetchPage,
        registry: KeyRegistry,
        key: KeyFunc,
        page_size: int = 10,
    ) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}.")
        self._fetch_page = fetch_page
        self._registry = registry
        self._key = key
        self._state = PaginationState(page_size=page_size)
        self._current: Page | None = None
        self._visited: set[int] = set()
        self._has_total = False
        self._generation = 0
        self._loading = False
        self._loading_callbacks: list[LoadingCallback] = []

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def state(self) -> PaginationState:
        return self._state

    @property
    def current_page(self) -> Page | None:
        """The displayed page, or None before the first navigation."""
        return self._current

    @property
    def key(self) -> KeyFunc:
        return self._key

    @property
    def page_size(self) -> int:
        return self._state.page_size

    @property
    def has_total(self) -> bool:
        """True once any fetch has completed, making total_count authoritative."""
        return self._has_total

    @property
    def page_count(self) -> int | None:
        return self._state.page_count if self._has_total else None

    @property
    def visited_pages(self) -> frozenset[int]:
        return frozenset(self._visited)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def loading(self) -> bool:
        return self._loading

    def on_loading(self, callback: LoadingCallback) -> None:
        """Register a callback: fn(loading)."""
        self._loading_callbacks.append(callback)

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    async def go_to_page(self, page: int) -> Page:
        """Fetch ``page``, make it the displayed page and register its keys.

        On failure nothing changes and the error propagates.
        """
        page = validate_page_number(page, self.page_count)
        result = await self.fetch(page)
        self.apply(result)
        return result

    async def fetch(self, page: int) -> Page:
        """Fetch and validate ``page`` without applying it.

        Raises FetchError for transport failures and malformed pages, and
        StaleResponseError when the session was reset while waiting.
        """
        generation = self._generation
        with self._loading_scope():
            logger.debug("Fetching page %d", page)
            try:
                payload = await self._fetch_page(page)
            except FetchError:
                logger.warning("Fetching page %d failed", page, exc_info=True)
                raise
            except Exception as exc:
                logger.warning("Fetching page %d failed: %s", page, exc)
                raise FetchError(
                    f"Fetching page {page} failed: {exc}", page=page,
                ) from exc

        if generation != self._generation:
            logger.warning("Discarding page %d fetched before session reset", page)
            raise StaleResponseError(
                f"Page {page} arrived after the session was reset.", page=page,
            )

        items, total = validate_page_payload(payload, page, self.page_size)
        result = Page(number=page, items=items, total_count=total)
        self._check_keys(result)
        return result

    def apply(self, page: Page, navigate: bool = True) -> None:
        """Record a fetched page: total, visited set, registry and (optionally) view."""
        self._state = dataclasses.replace(
            self._state,
            current_page=page.number if navigate else self._state.current_page,
            total_count=page.total_count,
        )
        self._has_total = True
        self._visited.add(page.number)
        if navigate:
            self._current = page
        self._registry.register_keys(
            page.keys(self._key), total_count=page.total_count,
        )

    def reset(self) -> None:
        """Forget pagination state and invalidate in-flight fetches."""
        self._generation += 1
        self._state = PaginationState(page_size=self.page_size)
        self._current = None
        self._visited.clear()
        self._has_total = False
        logger.debug("Pagination reset (generation %d)", self._generation)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _check_keys(self, page: Page) -> None:
        try:
            for key in page.keys(self._key):
                hash(key)
        except (KeyError, AttributeError, TypeError) as exc:
            raise FetchError(
                f"Page {page.number}: item without a usable key: {exc}",
                page=page.number,
            ) from exc

    @contextmanager
    def _loading_scope(self) -> Iterator[None]:
        self._set_loading(True)
        try:
            yield
        finally:
            self._set_loading(False)

    def _set_loading(self, loading: bool) -> None:
        self._loading = loading
        for cb in self._loading_callbacks:
            cb(loading)
