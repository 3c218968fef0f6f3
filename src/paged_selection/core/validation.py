"""Input validation with clear error messages for table users."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from numbers import Integral
from typing import Any

from .errors import FetchError, InvalidArgument


def _is_int(value: Any) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool)


def parse_positive_int(value: Any, name: str = "n") -> int:
    """Parse a strictly positive integer from user input.

    Accepts ints and decimal strings (as typed into an input widget).
    Rejects booleans, floats, blank or non-numeric strings, and values < 1.
    """
    if _is_int(value):
        parsed = int(value)
    elif isinstance(value, str):
        text = value.strip()
        try:
            parsed = int(text, 10)
        except ValueError:
            raise InvalidArgument(
                f"{name} must be a positive integer, got {value!r}."
            ) from None
    else:
        raise InvalidArgument(
            f"{name} must be a positive integer, got {type(value).__name__} "
            f"{value!r}."
        )
    if parsed <= 0:
        raise InvalidArgument(f"{name} must be a positive integer, got {parsed}.")
    return parsed


def validate_page_number(page: Any, page_count: int | None = None) -> int:
    """Validate a 1-based page index, optionally against a known page count."""
    if not _is_int(page):
        raise InvalidArgument(
            f"Page number must be an integer, got {type(page).__name__} {page!r}."
        )
    page = int(page)
    if page < 1:
        raise InvalidArgument(f"Page numbers start at 1, got {page}.")
    if page_count is not None and page > max(page_count, 1):
        raise InvalidArgument(
            f"Page {page} is out of range; the collection has {page_count} page(s)."
        )
    return page


def validate_page_payload(
    payload: Any,
    page: int,
    page_size: int,
) -> tuple[tuple, int]:
    """Validate a ``fetch_page`` result and return ``(items, total_count)``.

    The payload must be a mapping with an ``items`` sequence and a
    non-negative integer ``total_count``. Every page before the last holds
    exactly ``page_size`` items; the last holds the remainder.
    """
    if not isinstance(payload, Mapping):
        raise FetchError(
            f"Page {page}: expected a mapping with 'items' and 'total_count', "
            f"got {type(payload).__name__}.",
            page=page,
        )
    if "items" not in payload:
        raise FetchError(f"Page {page}: response is missing 'items'.", page=page)
    items = payload["items"]
    if isinstance(items, (str, bytes)) or not isinstance(items, Sequence):
        raise FetchError(
            f"Page {page}: 'items' must be a sequence, got {type(items).__name__}.",
            page=page,
        )
    if len(items) > page_size:
        raise FetchError(
            f"Page {page}: got {len(items)} items, more than the page size "
            f"of {page_size}.",
            page=page,
        )
    total = payload.get("total_count")
    if not _is_int(total):
        raise FetchError(
            f"Page {page}: 'total_count' must be an integer, got {total!r}.",
            page=page,
        )
    if total < 0:
        raise FetchError(
            f"Page {page}: 'total_count' must be non-negative, got {total}.",
            page=page,
        )
    expected = max(0, min(page_size, total - (page - 1) * page_size))
    if len(items) < expected:
        raise FetchError(
            f"Page {page}: got {len(items)} items, expected {expected} for a "
            f"total of {total} at page size {page_size}.",
            page=page,
        )
    return tuple(items), int(total)
