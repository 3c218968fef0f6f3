"""SelectionSet: reactive container + callback registry for selected keys."""

from __future__ import annotations

from collections.abc import Hashable, Iterable
from typing import Any, Callable, Iterator


SelectionCallback = Callable[[frozenset], Any]


class SelectionSet:
    """Holds the selected keys and notifies registered callbacks.

    Selection is independent of pagination: it may hold keys whose page is
    not currently displayed. Callbacks only fire when membership actually
    changes.
    """

    def __init__(self) -> None:
        self._keys: dict[Hashable, None] = {}
        self._callbacks: list[SelectionCallback] = []

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __iter__(self) -> Iterator[Hashable]:
        return iter(tuple(self._keys))

    @property
    def keys(self) -> frozenset:
        """Current selection as a frozenset."""
        return frozenset(self._keys)

    def add(self, key: Hashable) -> None:
        if key not in self._keys:
            self._keys[key] = None
            self._notify()

    def discard(self, key: Hashable) -> None:
        if key in self._keys:
            del self._keys[key]
            self._notify()

    def update(self, keys: Iterable[Hashable]) -> int:
        """Add every key in ``keys``. Returns how many were newly selected."""
        before = len(self._keys)
        for key in keys:
            self._keys.setdefault(key, None)
        added = len(self._keys) - before
        if added:
            self._notify()
        return added

    def replace(self, keys: Iterable[Hashable]) -> None:
        """Make ``keys`` the whole selection."""
        new_keys = dict.fromkeys(keys)
        if new_keys.keys() == self._keys.keys():
            return
        self._keys = new_keys
        self._notify()

    def clear(self) -> None:
        """Clear the selection."""
        if self._keys:
            self._keys = {}
            self._notify()

    def issuperset(self, keys: Iterable[Hashable]) -> bool:
        return all(key in self._keys for key in keys)

    def on_change(self, callback: SelectionCallback) -> None:
        """Register a callback: fn(selected_keys)."""
        self._callbacks.append(callback)

    def _notify(self) -> None:
        selected = frozenset(self._keys)
        for cb in self._callbacks:
            cb(selected)

    def __repr__(self) -> str:
        return f"SelectionSet(selected={len(self._keys)})"
