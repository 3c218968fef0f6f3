"""Shared test fixtures for paged-selection."""

import asyncio

import pytest


class FakeSource:
    """In-memory ``fetch_page`` coroutine over ``total`` titled items.

    Records every requested page. ``fail_on`` makes a page raise;
    ``gates`` makes a page wait on an asyncio.Event before answering.
    """

    def __init__(self, total=23, page_size=10, fail_on=(), gates=None):
        self.items = [
            {"id": i, "title": f"Artwork {i:03d}", "place_of_origin": "France"}
            for i in range(1, total + 1)
        ]
        self.page_size = page_size
        self.fail_on = set(fail_on)
        self.gates = gates or {}
        self.calls = []

    def title(self, index):
        """Key of the 1-based ``index``-th item."""
        return f"Artwork {index:03d}"

    async def __call__(self, page):
        self.calls.append(page)
        gate = self.gates.get(page)
        if gate is not None:
            await gate.wait()
        if page in self.fail_on:
            raise ConnectionError(f"page {page} unavailable")
        start = (page - 1) * self.page_size
        return {
            "items": self.items[start:start + self.page_size],
            "total_count": len(self.items),
        }


class BrokenSource:
    """Returns a fixed (usually malformed) payload for every page."""

    def __init__(self, payload):
        self.payload = payload

    async def __call__(self, page):
        return self.payload


@pytest.fixture
def source():
    """23 items, page size 10: pages of 10, 10 and 3."""
    return FakeSource(total=23)


@pytest.fixture
def source_25():
    return FakeSource(total=25)


@pytest.fixture
def run():
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run


@pytest.fixture
def make_source():
    """Factory for FakeSource with custom failures or gates."""
    return FakeSource


@pytest.fixture
def broken_source():
    return BrokenSource
