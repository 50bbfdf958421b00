"""Read-through caching, pagination and aggregation over the website collection.

WebsiteService is created once at startup and owns its TTLCache, so cache
lifetime equals service lifetime. Every read goes cache → store → mapper →
cache. Only ``get_website_by_id`` lets failures reach the caller; every other
operation logs and degrades to an empty result.

Known limitation: the category filter runs after the store has applied the
page limit, so a filtered page can hold fewer than ``limit`` websites (or
none) even when more matches exist further on.
"""

from __future__ import annotations

import asyncio
import math
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog

from sitegallery.cache import TTLCache
from sitegallery.categories import (
    ALL_CATEGORIES,
    canonical_lookup,
    has_category,
    normalize_category_name,
)
from sitegallery.errors import GalleryError, website_not_found
from sitegallery.mapper import convert_timestamps, map_website, map_website_detail, now_iso, to_iso
from sitegallery.models.website import (
    SORT_FIELDS,
    AdjacentWebsites,
    CategoryCount,
    PageCursor,
    Website,
    WebsiteDetail,
    WebsiteForSitemap,
    WebsitePage,
)

if TYPE_CHECKING:
    from sitegallery.models.website import OrderField, SortBy
    from sitegallery.protocols import CacheProtocol, DocumentStoreProtocol

log = structlog.get_logger()

CATEGORY_COUNTS_CACHE_KEY = "category-counts"
DEFAULT_ADJACENCY_WINDOW = 50

_EPOCH = datetime.min.replace(tzinfo=UTC)


def page_cache_key(
    sort_by: str,
    limit: int | None,
    cursor: PageCursor | None,
    category: str | None,
) -> str:
    # Prefixed components so that no category, cursor id or limit can collide
    # with the "no filter", "first page" or "no cap" sentinels.
    category_part = f"cat:{category}" if category else "cat*"
    cursor_part = f"after:{cursor.id}" if cursor else "first"
    limit_part = f"limit:{limit}" if limit is not None else "all"
    return f"websites-{category_part}-{sort_by}-{cursor_part}-{limit_part}"


def _order_value(data: dict[str, Any], order_by: OrderField) -> int | float | str | None:
    value = convert_timestamps(data.get(order_by))
    if isinstance(value, bool) or not isinstance(value, int | float | str):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _uploaded_key(website: Website) -> datetime:
    try:
        parsed = datetime.fromisoformat(website.uploaded_at)
    except ValueError:
        return _EPOCH
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def _sort_websites(websites: list[Website], sort_by: SortBy) -> None:
    if sort_by == "popular":
        websites.sort(key=lambda w: w.views, reverse=True)
    else:
        websites.sort(key=_uploaded_key, reverse=True)


class WebsiteService:
    """Gallery operations over a document store, fronted by a TTL cache."""

    def __init__(
        self,
        store: DocumentStoreProtocol,
        cache: CacheProtocol | None = None,
        *,
        adjacency_window: int = DEFAULT_ADJACENCY_WINDOW,
    ) -> None:
        self._store = store
        self._cache: CacheProtocol = cache if cache is not None else TTLCache()
        self._adjacency_window = adjacency_window
        self._background_tasks: set[asyncio.Task[None]] = set()

    @property
    def pending_tasks(self) -> frozenset[asyncio.Task[None]]:
        return frozenset(self._background_tasks)

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    async def get_websites(
        self,
        *,
        sort_by: SortBy = "latest",
        limit: int | None = None,
        cursor: PageCursor | None = None,
        category: str | None = None,
    ) -> WebsitePage:
        """Fetch one page of websites, newest or most viewed first.

        ``limit`` of 0 or less means no cap and an empty ``category`` means no
        filter. A cache hit is returned as stored. On a store failure the
        result is an empty page with no cursor.
        """
        if limit is not None and limit < 1:
            limit = None
        category = category or None

        cache_key = page_cache_key(sort_by, limit, cursor, category)
        cached = self._cache.get(cache_key)
        if cached is not None:
            log.debug("cache_hit", key=cache_key)
            return cached

        order_by = SORT_FIELDS[sort_by]
        try:
            start_after = await self._resolve_cursor(cursor, order_by) if cursor else None
            docs = await self._store.query(order_by, start_after=start_after, limit=limit)

            websites = [map_website(doc.id, doc.data) for doc in docs]
            last_cursor = None
            if docs:
                last = docs[-1]
                last_cursor = PageCursor(
                    id=last.id, order_by=order_by, value=_order_value(last.data, order_by)
                )
        except Exception:
            log.warning(
                "websites_fetch_failed",
                sort_by=sort_by,
                category=category,
                cursor_id=cursor.id if cursor else None,
                exc_info=True,
            )
            return WebsitePage()

        if category:
            websites = [w for w in websites if has_category(w.categories, category)]

        _sort_websites(websites, sort_by)

        page = WebsitePage(websites=websites, last_cursor=last_cursor)
        self._cache.set(cache_key, page)
        log.debug("websites_fetched", key=cache_key, fetched=len(docs), returned=len(websites))
        return page

    async def _resolve_cursor(self, cursor: PageCursor, order_by: OrderField) -> PageCursor:
        """Return a cursor positioned on ``order_by``.

        A cursor issued under another sort mode is re-read from the store to
        pick up the record's current value for ``order_by``.
        """
        if cursor.order_by == order_by:
            return cursor
        doc = await self._store.get(cursor.id)
        if doc is None:
            raise website_not_found(cursor.id)
        return PageCursor(id=doc.id, order_by=order_by, value=_order_value(doc.data, order_by))

    # ------------------------------------------------------------------
    # Single record
    # ------------------------------------------------------------------

    async def get_website_by_id(self, website_id: str) -> WebsiteDetail:
        """Fetch one website with the extended field set.

        Raises ``GalleryError(WEBSITE_NOT_FOUND)`` if no record exists. A cache
        miss also schedules a view increment, which is not awaited.
        """
        cache_key = f"website-{website_id}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            log.debug("cache_hit", key=cache_key)
            return cached

        try:
            doc = await self._store.get(website_id)
        except GalleryError as exc:
            log.warning("website_fetch_failed", website_id=website_id, code=exc.code)
            raise
        if doc is None:
            log.info("website_not_found", website_id=website_id)
            raise website_not_found(website_id)

        website = map_website_detail(doc.id, doc.data)
        self._cache.set(cache_key, website)
        self.schedule_view_increment(doc.id)
        return website

    # ------------------------------------------------------------------
    # Adjacency
    # ------------------------------------------------------------------

    async def get_adjacent_websites(
        self, website_id: str, sort_by: SortBy = "latest"
    ) -> AdjacentWebsites:
        """Return the neighbours of ``website_id`` within the first page.

        ``next`` is the entry ranked just above (newer or more viewed),
        ``prev`` the one just below. Both are ``None`` when the website is not
        among the first ``adjacency_window`` entries.
        """
        page = await self.get_websites(sort_by=sort_by, limit=self._adjacency_window)
        websites = page.websites
        index = next((i for i, w in enumerate(websites) if w.id == website_id), None)
        if index is None:
            return AdjacentWebsites()
        return AdjacentWebsites(
            prev=websites[index + 1] if index + 1 < len(websites) else None,
            next=websites[index - 1] if index > 0 else None,
        )

    # ------------------------------------------------------------------
    # View counter
    # ------------------------------------------------------------------

    def schedule_view_increment(self, website_id: str) -> asyncio.Task[None]:
        """Start ``increment_views`` as a detached task and return it.

        The task is tracked until it completes so ``aclose`` can wait for it.
        """
        task = asyncio.create_task(self.increment_views(website_id))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    async def increment_views(self, website_id: str) -> None:
        """Atomically add one view and stamp ``lastViewed``. Never raises."""
        if not website_id:
            log.warning("view_increment_skipped", reason="missing_id")
            return
        try:
            doc = await self._store.get(website_id)
            if doc is None:
                log.warning("view_increment_skipped", reason="not_found", website_id=website_id)
                return
            await self._store.update(
                website_id,
                increments={"views": 1},
                values={"lastViewed": now_iso()},
            )
        except Exception:
            log.warning("view_increment_failed", website_id=website_id, exc_info=True)
            return
        log.info("views_incremented", website_id=website_id)

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    async def get_category_counts(self) -> list[CategoryCount]:
        """Count websites per canonical category over the whole collection.

        Every canonical category is present, zero counts included. Category
        strings outside the canonical list are ignored.
        """
        cached = self._cache.get(CATEGORY_COUNTS_CACHE_KEY)
        if cached is not None:
            return cached

        try:
            page = await self.get_websites()

            counts = dict.fromkeys(ALL_CATEGORIES, 0)
            lookup = canonical_lookup()
            for site in page.websites:
                for cat in site.categories:
                    matched = lookup.get(normalize_category_name(cat))
                    if matched is not None:
                        counts[matched] += 1

            result = [CategoryCount(name=name, count=count) for name, count in counts.items()]
            # Case-insensitive first, matching locale-aware ordering ("About" < "AI")
            result.sort(key=lambda c: (c.name.casefold(), c.name))
        except Exception:
            log.warning("category_counts_failed", exc_info=True)
            return []

        self._cache.set(CATEGORY_COUNTS_CACHE_KEY, result)
        return result

    # ------------------------------------------------------------------
    # Sitemap
    # ------------------------------------------------------------------

    async def get_all_websites_for_sitemap(self) -> list[WebsiteForSitemap]:
        """List every website id with its last-updated time. Empty on failure."""
        try:
            docs = await self._store.list_all()
        except Exception:
            log.warning("sitemap_fetch_failed", exc_info=True)
            return []
        return [
            WebsiteForSitemap(id=doc.id, updated_at=to_iso(doc.data.get("updatedAt")))
            for doc in docs
        ]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Wait for in-flight view increments. Called at shutdown."""
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)
