"""Shared test fixtures for the sitegallery test suite."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import aiosqlite
import pytest

from sitegallery.cache import TTLCache
from sitegallery.errors import ErrorCode, GalleryError
from sitegallery.service import WebsiteService
from sitegallery.store import SqliteDocumentStore

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Mapping

    from sitegallery.models.store import RawDocument
    from sitegallery.models.website import PageCursor


class FakeClock:
    """Manually advanced monotonic clock for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class UnavailableStore:
    """DocumentStoreProtocol implementation where every call fails."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def _fail(self, action: str) -> GalleryError:
        self.calls.append(action)
        return GalleryError(
            code=ErrorCode.STORE_UNAVAILABLE,
            message=f"store down during {action}",
            suggestion="retry later",
            recoverable=True,
        )

    async def add(self, data: Mapping[str, Any], *, doc_id: str | None = None) -> str:
        raise self._fail("add")

    async def get(self, doc_id: str) -> RawDocument | None:
        raise self._fail("get")

    async def query(
        self,
        order_by: str,
        *,
        start_after: PageCursor | None = None,
        limit: int | None = None,
    ) -> list[RawDocument]:
        raise self._fail("query")

    async def list_all(self) -> list[RawDocument]:
        raise self._fail("list_all")

    async def update(self, doc_id: str, *, increments=None, values=None) -> None:
        raise self._fail("update")


# Newest first: w3, w2, w5, w1, w4.  Most viewed first: w2, w5, w1, w3, w4.
SAMPLE_WEBSITES: dict[str, dict[str, Any]] = {
    "w1": {
        "name": "Acme CRM",
        "videoUrl": "https://cdn.example.com/w1.mp4",
        "url": "https://acme.example.com",
        "builtWith": "Next.js",
        "categories": ["SaaS", "AI"],
        "socialLinks": {"twitter": "@acme"},
        "views": 5,
        "uploadedAt": datetime(2024, 1, 1, tzinfo=UTC),
    },
    "w2": {
        "name": "Ledgerly",
        "videoUrl": "https://cdn.example.com/w2.mp4",
        "url": "https://ledgerly.example.com",
        "categories": ["saas"],
        "views": 10,
        "uploadedAt": datetime(2024, 2, 1, tzinfo=UTC),
    },
    "w3": {
        "name": "Studio Nine",
        "url": "https://nine.example.com",
        "categories": [" Design ", "custom-thing"],
        "views": 3,
        "uploadedAt": datetime(2024, 3, 1, tzinfo=UTC),
        "updatedAt": datetime(2024, 3, 5, 12, 30, tzinfo=UTC),
    },
    "w4": {
        "name": "Bare Page",
        "uploadedAt": datetime(2023, 12, 1, tzinfo=UTC),
    },
    "w5": {
        "name": "Folio",
        "url": "https://folio.example.com",
        "categories": ["Portfolio", "design"],
        "views": 7,
        "uploadedAt": datetime(2024, 1, 15, tzinfo=UTC),
    },
}


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def cache(clock: FakeClock) -> TTLCache:
    return TTLCache(60, clock=clock)


@pytest.fixture()
async def store() -> AsyncGenerator[SqliteDocumentStore, None]:
    """Empty in-memory document store."""
    async with aiosqlite.connect(":memory:") as db:
        doc_store = SqliteDocumentStore(db)
        await doc_store.init_db()
        yield doc_store


@pytest.fixture()
async def seeded_store(store: SqliteDocumentStore) -> SqliteDocumentStore:
    """Store holding SAMPLE_WEBSITES under their fixed ids."""
    for doc_id, data in SAMPLE_WEBSITES.items():
        await store.add(data, doc_id=doc_id)
    return store


@pytest.fixture()
async def service(
    seeded_store: SqliteDocumentStore, cache: TTLCache
) -> AsyncGenerator[WebsiteService, None]:
    svc = WebsiteService(seeded_store, cache)
    yield svc
    await svc.aclose()


@pytest.fixture()
def unavailable_store() -> UnavailableStore:
    return UnavailableStore()
