"""Artwork: the record type displayed by the artworks table."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any


@dataclass(frozen=True)
class Artwork:
    """One artwork row as returned by the collection API."""

    id: int
    title: str
    place_of_origin: str | None = None
    artist_display: str | None = None
    inscriptions: str | None = None
    date_start: int | None = None
    date_end: int | None = None

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> Artwork:
        """Build an Artwork from one API record, ignoring unknown fields."""
        if not isinstance(raw, Mapping):
            raise TypeError(f"Expected a mapping, got {type(raw).__name__}.")
        missing = [name for name in ("id", "title") if name not in raw]
        if missing:
            raise KeyError(f"Artwork record is missing {missing}.")
        return cls(**{f.name: raw.get(f.name) for f in fields(cls)})


ARTWORK_FIELDS = tuple(f.name for f in fields(Artwork))
