"""TableSession: the main user-facing API for a paginated, selectable table."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Hashable
from typing import Any

import pandas as pd

from .config import SessionConfig
from .core.key_registry import KeyRegistry
from .core.page import KeyFunc, Page, PaginationState, key_getter
from .core.selection_set import SelectionSet
from .pagination.controller import FetchPage, PaginationController
from .selection.coordinator import HeaderSelectionState, SelectionCoordinator

logger = logging.getLogger(__name__)


class TableSession:
    """One table view over a lazily fetched remote collection.

    Owns the KeyRegistry, SelectionSet and PaginationController for its
    lifetime; nothing is shared between sessions.

    Usage::

        import paged_selection as ps

        async with ps.ArtworkSource() as source:
            session = ps.TableSession(source)
            await session.open()
            await session.toggle_row("Nighthawks", True)
            await session.select_first_n("25")
            print(session.header_state(), session.current_frame())
    """

    def __init__(
        self,
        fetch_page: FetchPage,
        config: SessionConfig | None = None,
        key: KeyFunc | None = None,
        **config_params: Any,
    ) -> None:
        if config is None:
            config = SessionConfig(**config_params)
        elif config_params:
            values = {k: v for k, v in config.param.values().items() if k != "name"}
            config = SessionConfig(**{**values, **config_params})
        source_page_size = getattr(fetch_page, "page_size", None)
        if source_page_size is not None and source_page_size != config.page_size:
            raise ValueError(
                f"Page source serves {source_page_size} items per page but the "
                f"session expects {config.page_size}. Use the same page_size for both."
            )
        self.config = config
        self._fetch_page = fetch_page
        self._key = key if key is not None else key_getter(config.key_field)

        self._registry = KeyRegistry()
        self._selection = SelectionSet()
        self._controller = PaginationController(
            fetch_page, self._registry, self._key, page_size=config.page_size,
        )
        self.coordinator = SelectionCoordinator(
            self._controller,
            self._registry,
            self._selection,
            busy_policy=config.busy_policy,
        )

    # ------------------------------------------------------------------
    # View surface
    # ------------------------------------------------------------------

    def current_page(self) -> Page | None:
        return self._controller.current_page

    def pagination(self) -> PaginationState:
        return self._controller.state

    def is_selected(self, key: Hashable) -> bool:
        return self.coordinator.is_selected(key)

    def header_state(self) -> HeaderSelectionState:
        return self.coordinator.derive_header_state()

    @property
    def known_keys(self) -> frozenset:
        return self._registry.known_keys()

    @property
    def selected_keys(self) -> frozenset:
        return self._selection.keys

    def current_frame(self, columns: list[str] | None = None) -> pd.DataFrame:
        """Displayed page as a DataFrame with a leading boolean 'Selected' column."""
        page = self._controller.current_page
        if page is None:
            return pd.DataFrame(columns=["Selected"])
        df = page.to_frame(columns=columns)
        df.insert(0, "Selected", [k in self._selection for k in page.keys(self._key)])
        return df

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def open(self) -> Page:
        """Load the first page."""
        return await self.go_to_page(1)

    async def go_to_page(self, page: int) -> Page:
        return await self.coordinator.go_to_page(page)

    async def next_page(self) -> Page:
        return await self.go_to_page(self._controller.state.current_page + 1)

    async def previous_page(self) -> Page:
        return await self.go_to_page(self._controller.state.current_page - 1)

    async def toggle_row(self, key: Hashable, selected: bool) -> None:
        await self.coordinator.toggle_row(key, selected)

    async def toggle_select_all(self, selected: bool) -> None:
        await self.coordinator.toggle_select_all(selected)

    async def select_first_n(self, n: Any) -> tuple:
        return await self.coordinator.select_first_n(n)

    def reset(self) -> None:
        """Clear every key, selection and page; late responses are dropped."""
        self.coordinator.reset()
        logger.debug("Table session reset")

    async def close(self) -> None:
        """Reset and close the page source if it can be closed."""
        self.reset()
        aclose = getattr(self._fetch_page, "aclose", None)
        if aclose is not None:
            result = aclose()
            if inspect.isawaitable(result):
                await result

    async def __aenter__(self) -> TableSession:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def __repr__(self) -> str:
        state = self._controller.state
        return (
            f"TableSession(page={state.current_page}/{state.page_count}, "
            f"known={len(self._registry)}, selected={len(self._selection)})"
        )
