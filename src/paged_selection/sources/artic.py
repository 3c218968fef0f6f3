"""ArtworkSource: page source backed by the Art Institute of Chicago API.

The API answers ``GET /api/v1/artworks?page=N&limit=L&fields=...`` with::

    {"pagination": {"total": 128000, ...}, "data": [{...}, ...]}

which is mapped to the ``{"items": [...], "total_count": int}`` shape a
PaginationController consumes.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.errors import FetchError
from .records import ARTWORK_FIELDS, Artwork

logger = logging.getLogger(__name__)

ARTIC_API_URL = "https://api.artic.edu/api/v1/artworks"


class ArtworkSource:
    """Async ``fetch_page`` implementation over HTTP.

    Usage::

        async with ArtworkSource() as source:
            session = TableSession(source)
            await session.open()
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        base_url: str = ARTIC_API_URL,
        page_size: int = 10,
        timeout: float = 10.0,
        fields: tuple[str, ...] = ARTWORK_FIELDS,
    ) -> None:
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(timeout=timeout)
        self.base_url = base_url
        self.page_size = page_size
        self.fields = fields

    async def __call__(self, page: int) -> dict[str, Any]:
        params = {
            "page": page,
            "limit": self.page_size,
            "fields": ",".join(self.fields),
        }
        try:
            response = await self._client.get(self.base_url, params=params)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as exc:
            raise FetchError(f"Request for page {page} failed: {exc}", page=page) from exc
        except ValueError as exc:
            raise FetchError(f"Page {page} is not valid JSON: {exc}", page=page) from exc

        try:
            records = body["data"]
            total = body["pagination"]["total"]
            items = [Artwork.from_api(raw) for raw in records]
        except (KeyError, TypeError) as exc:
            raise FetchError(
                f"Page {page} has an unexpected shape: {exc}", page=page,
            ) from exc
        logger.debug("Fetched %d artworks from page %d (total %s)", len(items), page, total)
        return {"items": items, "total_count": total}

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> ArtworkSource:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
