"""KeyRegistry: every item key discovered so far in a table session."""

from __future__ import annotations

from collections.abc import Hashable, Iterable
from typing import Any, Callable, Iterator


RegistryCallback = Callable[["KeyRegistry"], Any]


class KeyRegistry:
    """Ordered, monotonically growing set of known keys.

    Keys keep the order in which they were first registered, which is the
    order pages were first visited (not necessarily page-index order).
    The registry only learns the remote total through ``register_keys``;
    until every page has been seen it is incomplete.
    """

    def __init__(self) -> None:
        self._keys: dict[Hashable, None] = {}
        self._total_count: int | None = None
        self._callbacks: list[RegistryCallback] = []

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __iter__(self) -> Iterator[Hashable]:
        return iter(tuple(self._keys))

    @property
    def total_count(self) -> int | None:
        """Remote collection size from the latest fetch, or None before any."""
        return self._total_count

    def register_keys(
        self,
        keys: Iterable[Hashable],
        total_count: int | None = None,
    ) -> int:
        """Union ``keys`` into the registry. Returns how many were new.

        Registering an already-known key is a no-op. ``total_count``, when
        given, replaces the remembered remote total.
        """
        before = len(self._keys)
        for key in keys:
            self._keys.setdefault(key, None)
        added = len(self._keys) - before
        total_changed = total_count is not None and total_count != self._total_count
        if total_count is not None:
            self._total_count = total_count
        if added or total_changed:
            self._notify()
        return added

    def known_keys(self) -> frozenset:
        """Read-only snapshot of every known key."""
        return frozenset(self._keys)

    def ordered_keys(self) -> tuple:
        """Known keys in first-registration order."""
        return tuple(self._keys)

    def is_complete(self) -> bool:
        """True once as many keys are known as the remote total reports."""
        if self._total_count is None:
            return False
        return len(self._keys) >= self._total_count

    def clear(self) -> None:
        """Forget every key and the remote total (session reset only)."""
        if not self._keys and self._total_count is None:
            return
        self._keys.clear()
        self._total_count = None
        self._notify()

    def on_change(self, callback: RegistryCallback) -> None:
        """Register a callback: fn(registry)."""
        self._callbacks.append(callback)

    def _notify(self) -> None:
        for cb in self._callbacks:
            cb(self)

    def __repr__(self) -> str:
        return f"KeyRegistry(known={len(self._keys)}, total={self._total_count})"
