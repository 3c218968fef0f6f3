"""SelectionCoordinator: bulk selection and header state across pages.

Three notions of "all" meet here: the displayed page, the keys discovered
so far (KeyRegistry), and the remote collection (known only through its
total count). Select-all works on discovered keys; select-first-N fetches
unvisited pages until it can satisfy N.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Hashable
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, AsyncIterator

import param

from ..core.errors import (
    BusyError,
    InvalidArgument,
    PagedSelectionError,
    StaleResponseError,
)
from ..core.key_registry import KeyRegistry
from ..core.page import Page
from ..core.selection_set import SelectionSet
from ..core.validation import parse_positive_int
from ..pagination.controller import PaginationController

logger = logging.getLogger(__name__)


class HeaderSelectionState(str, Enum):
    """Tri-state of the header checkbox."""

    UNCHECKED = "unchecked"
    CHECKED = "checked"
    INDETERMINATE = "indeterminate"


def derive_header_state(
    registry: KeyRegistry,
    selection: SelectionSet,
) -> HeaderSelectionState:
    """Summarize the selection relative to the known keys.

    Checked needs every key of the remote collection selected, so a
    select-all over an incomplete registry stays indeterminate.
    """
    if len(selection) == 0:
        return HeaderSelectionState.UNCHECKED
    if (
        len(registry) > 0
        and registry.is_complete()
        and selection.issuperset(registry)
    ):
        return HeaderSelectionState.CHECKED
    return HeaderSelectionState.INDETERMINATE


class SelectionCoordinator(param.Parameterized):
    """Serialized selection operations over a paginated collection.

    Mutating operations are coroutines. Under ``busy_policy="queue"`` they
    wait for the operation in flight; under ``"reject"`` they raise
    BusyError. Failed operations leave selection, registry and pagination
    exactly as they were.

    The derived parameters below are recomputed after every change to the
    selection or the registry; a view watches them with
    ``coordinator.param.watch(fn, ["header_state"])``.
    """

    busy_policy = param.Selector(default="queue", objects=["queue", "reject"])

    # --- Derived state (recomputed, do not set) ---
    header_state = param.Selector(
        default=HeaderSelectionState.UNCHECKED,
        objects=list(HeaderSelectionState),
    )
    selected_count = param.Integer(default=0, bounds=(0, None))
    known_count = param.Integer(default=0, bounds=(0, None))
    is_complete = param.Boolean(default=False)

    # --- Idle / fetching ---
    state = param.Selector(default="idle", objects=["idle", "fetching"])
    status_text = param.String(default="")

    def __init__(
        self,
        controller: PaginationController,
        registry: KeyRegistry,
        selection: SelectionSet | None = None,
        **params,
    ):
        super().__init__(**params)
        self._controller = controller
        self._registry = registry
        self._selection = selection if selection is not None else SelectionSet()
        self._lock = asyncio.Lock()

        registry.on_change(lambda _registry: self._refresh())
        self._selection.on_change(lambda _selected: self._refresh())
        controller.on_loading(self._on_loading)
        self._refresh()

    @property
    def selection(self) -> SelectionSet:
        return self._selection

    @property
    def registry(self) -> KeyRegistry:
        return self._registry

    @property
    def controller(self) -> PaginationController:
        return self._controller

    def is_selected(self, key: Hashable) -> bool:
        return key in self._selection

    def derive_header_state(self) -> HeaderSelectionState:
        return derive_header_state(self._registry, self._selection)

    # ------------------------------------------------------------------
    # Mutating operations
    # ------------------------------------------------------------------

    async def go_to_page(self, page: int) -> Page:
        """Display ``page`` (1-based), registering its keys."""
        async with self._exclusive("change page"):
            return await self._reporting(self._controller.go_to_page(page))

    async def toggle_row(self, key: Hashable, selected: bool) -> None:
        """Select or deselect one known key. No fetch."""
        async with self._exclusive("toggle a row"):
            if key not in self._registry:
                raise self._fail(InvalidArgument(
                    f"Unknown key {key!r}: only keys from fetched pages can be "
                    f"selected."
                ))
            if selected:
                self._selection.add(key)
            else:
                self._selection.discard(key)

    async def toggle_select_all(self, selected: bool) -> None:
        """Select every known key, or clear the whole selection.

        Selecting all before every page was visited selects the keys known
        so far; the header then stays indeterminate.
        """
        async with self._exclusive("toggle all rows"):
            if not selected:
                self._selection.clear()
                logger.debug("Selection cleared")
                return
            self._selection.replace(self._registry.ordered_keys())
            if not self._registry.is_complete():
                logger.debug(
                    "Selected %d known keys of %s; unseen pages stay unselected",
                    len(self._registry), self._registry.total_count,
                )

    async def select_first_n(self, n: Any) -> tuple:
        """Add the first ``min(n, total_count)`` keys to the selection.

        Known keys are taken in registry order; when they fall short,
        unvisited pages are fetched one at a time in ascending page order
        starting from page 1. Fetched pages are committed only once the
        whole operation has succeeded. Existing selections are kept.

        Returns the keys chosen by this call.
        """
        try:
            n = parse_positive_int(n, "n")
        except InvalidArgument as exc:
            self._fail(exc)
            raise
        async with self._exclusive("select rows"):
            staged, chosen = await self._reporting(self._resolve_first_n(n))

            current = self._controller.current_page
            for page in staged:
                navigate = (
                    current is None
                    and page.number == self._controller.state.current_page
                )
                self._controller.apply(page, navigate=navigate)
            added = self._selection.update(chosen)
            logger.debug(
                "Selected first %d keys (%d new, %d page(s) fetched)",
                len(chosen), added, len(staged),
            )
            return chosen

    def reset(self) -> None:
        """Clear the session. In-flight fetches are discarded on arrival."""
        self._controller.reset()
        self._registry.clear()
        self._selection.clear()
        self.status_text = ""

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _resolve_first_n(self, n: int) -> tuple[list[Page], tuple]:
        controller = self._controller
        key = controller.key
        total = self._registry.total_count if controller.has_total else None
        target = n if total is None else min(n, total)

        chosen = dict.fromkeys(self._registry.ordered_keys()[:target])
        visited = set(controller.visited_pages)
        staged: list[Page] = []
        page_no = 1

        while len(chosen) < target:
            while page_no in visited:
                page_no += 1
            if total is not None and page_no > math.ceil(total / controller.page_size):
                break
            page = await controller.fetch(page_no)
            staged.append(page)
            visited.add(page_no)
            total = page.total_count
            target = min(n, total)
            for k in page.keys(key):
                if len(chosen) >= target:
                    break
                chosen.setdefault(k, None)

        return staged, tuple(chosen)[:target]

    @asynccontextmanager
    async def _exclusive(self, action: str) -> AsyncIterator[None]:
        if self.busy_policy == "reject" and self._lock.locked():
            raise BusyError(f"Cannot {action} while another operation is in flight.")
        generation = self._controller.generation
        async with self._lock:
            if generation != self._controller.generation:
                logger.warning("Dropping request to %s queued before session reset", action)
                raise self._fail(StaleResponseError(
                    f"Cannot {action}: the session was reset while it was queued."
                ))
            yield

    async def _reporting(self, coro):
        try:
            return await coro
        except PagedSelectionError as exc:
            self._fail(exc)
            raise

    def _fail(self, exc: PagedSelectionError) -> PagedSelectionError:
        self.status_text = f"Error: {exc}"
        return exc

    def _on_loading(self, loading: bool) -> None:
        self.param.update(
            state="fetching" if loading else "idle",
            status_text="Loading..." if loading else "",
        )

    def _refresh(self) -> None:
        self.param.update(
            header_state=self.derive_header_state(),
            selected_count=len(self._selection),
            known_count=len(self._registry),
            is_complete=self._registry.is_complete(),
        )
