"""Page and PaginationState: immutable snapshots of the paginated view."""

from __future__ import annotations

import dataclasses
import math
from collections.abc import Hashable, Mapping
from dataclasses import dataclass
from typing import Any, Callable, Iterator

import pandas as pd

from ..display_utils import prettify_name


KeyFunc = Callable[[Any], Hashable]


def key_getter(field: str) -> KeyFunc:
    """Return a function reading ``field`` from a mapping or an attribute."""

    def get_key(item: Any) -> Hashable:
        if isinstance(item, Mapping):
            try:
                return item[field]
            except KeyError:
                raise KeyError(
                    f"Item has no key field '{field}'. "
                    f"Available: {list(item.keys())}"
                ) from None
        try:
            return getattr(item, field)
        except AttributeError:
            raise KeyError(
                f"Item of type {type(item).__name__} has no key field '{field}'."
            ) from None

    get_key.__name__ = f"key_{field}"
    return get_key


def _as_record(item: Any) -> dict:
    if dataclasses.is_dataclass(item) and not isinstance(item, type):
        return dataclasses.asdict(item)
    if isinstance(item, Mapping):
        return dict(item)
    return dict(vars(item))


@dataclass(frozen=True)
class Page:
    """One fetched page: ordered items plus the collection total at fetch time."""

    number: int
    items: tuple
    total_count: int

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)

    def keys(self, key: KeyFunc) -> list:
        """Keys of the items on this page, in display order."""
        return [key(item) for item in self.items]

    def to_frame(
        self,
        columns: list[str] | None = None,
        pretty: bool = True,
    ) -> pd.DataFrame:
        """Return the page as a DataFrame, one row per item.

        Parameters
        ----------
        columns : fields to keep, in order. None keeps every field.
        pretty : rename columns to Title Case headers.
        """
        records = [_as_record(item) for item in self.items]
        df = pd.DataFrame.from_records(records, columns=columns)
        if pretty:
            df = df.rename(columns=lambda c: prettify_name(str(c)))
        return df


@dataclass(frozen=True)
class PaginationState:
    """Where the view is: current 1-based page, fixed page size, remote total."""

    current_page: int = 1
    page_size: int = 10
    total_count: int = 0

    @property
    def page_count(self) -> int:
        return math.ceil(self.total_count / self.page_size)

    def to_dict(self) -> dict:
        return {
            "current_page": self.current_page,
            "page_size": self.page_size,
            "total_count": self.total_count,
            "page_count": self.page_count,
        }
