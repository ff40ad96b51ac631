"""Pagination-reconciliation cache for the upstream search API.

The upstream only serves fixed-size, forward-only pages, while callers ask
for arbitrary (offset, limit) windows. This cache keeps one growable,
ordered buffer per (query, order) pair, fetches just enough upstream pages to
cover each window, and answers every window from that buffer.

Entry lifecycle:
- created lazily on the first request for its key;
- grown page by page, strictly in page order, never re-fetching a page;
- marked exhausted once the upstream reports no more pages (or an empty one);
- replaced by a fresh entry when a request arrives after the TTL elapsed.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.search.base import AbstractSearchTransport

logger = logging.getLogger(__name__)

CacheKey = tuple[str, str]

DEFAULT_PAGE_SIZE = 175
DEFAULT_TTL_SECONDS = 300.0


@dataclass
class CacheEntry:
    """Buffered results for one (query, order) pair.

    Attributes:
        created_at: Clock reading at creation; growth never updates it.
        items: Results in upstream order; append-only.
        total_count: Most recent upstream total (last page wins).
        exhausted: True once no further upstream pages exist.
    """

    created_at: float
    items: list[dict[str, Any]] = field(default_factory=list)
    total_count: int = 0
    exhausted: bool = False
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)


@dataclass(frozen=True)
class WindowResult:
    """A window of results plus pagination metadata."""

    items: list[dict[str, Any]]
    total_count: int
    has_more: bool


class PaginationCache:
    """Serves arbitrary result windows from incrementally fetched pages.

    Concurrent requests for the same key are single-flight: the entry lock
    covers the whole check-fetch-append-slice sequence, so a second caller
    waits for the first one's fetch and then reuses its items. Requests for
    different keys run concurrently; their upstream calls are still spaced
    by the shared rate limiter.

    Attributes:
        page_size: Number of items per upstream page.
        ttl_seconds: Entry lifetime measured from creation.
        max_entries: Maximum number of buffered keys (None for unlimited).
    """

    def __init__(
        self,
        transport: AbstractSearchTransport,
        rate_limiter: AbstractRateLimiter,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be >= 1")

        self._transport = transport
        self._rate_limiter = rate_limiter
        self.page_size = page_size
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        # Insertion order is creation order: expired keys are re-inserted.
        self._entries: OrderedDict[CacheKey, CacheEntry] = OrderedDict()
        self._windows = 0
        self._page_fetches = 0
        self._resets = 0
        self._evictions = 0

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"PaginationCache(page_size={self.page_size}, ttl_seconds={self.ttl_seconds}, "
            f"max_entries={self.max_entries}, entries={len(self._entries)}, "
            f"page_fetches={self._page_fetches})"
        )

    async def request_window(
        self,
        query: str,
        order: str,
        offset: int,
        limit: int,
    ) -> WindowResult:
        """Return ``limit`` results starting at ``offset`` for a query.

        Fetches only the upstream pages needed to cover the window that are
        not buffered yet. Failures from the transport propagate unchanged;
        pages appended before the failure stay in the buffer, so a retry
        resumes where the failed call stopped.

        Args:
            query: Non-empty upstream query string.
            order: Upstream sort key. Each order is cached separately.
            offset: Index of the first requested result (>= 0).
            limit: Number of requested results (>= 0).

        Returns:
            WindowResult with the (possibly shorter) slice, the latest
            upstream total and whether results exist past the window.

        Raises:
            ValueError: If query is empty or offset/limit are negative.
            UpstreamAppError: If an upstream fetch fails.
        """
        if not query:
            raise ValueError("query must be a non-empty string")
        if offset < 0:
            raise ValueError("offset must be >= 0")
        if limit < 0:
            raise ValueError("limit must be >= 0")

        key: CacheKey = (query, order)
        entry = self._get_or_create_entry(key)
        end = offset + limit

        async with entry.lock:
            fetched = await self._fill(key, entry, end)
            items = entry.items[offset:end]
            has_more = end < entry.total_count
            self._windows += 1

            logger.debug(
                "pagination.window",
                extra={
                    "offset": offset,
                    "limit": limit,
                    "returned": len(items),
                    "buffered": len(entry.items),
                    "total_count": entry.total_count,
                    "pages_fetched": fetched,
                    "exhausted": entry.exhausted,
                },
            )
            return WindowResult(items=items, total_count=entry.total_count, has_more=has_more)

    async def _fill(self, key: CacheKey, entry: CacheEntry, needed: int) -> int:
        """Grow ``entry`` until it holds ``needed`` items or is exhausted.

        Must be called with ``entry.lock`` held.

        Returns:
            Number of upstream pages fetched by this call.
        """
        query, order = key
        fetched = 0

        while not entry.exhausted and len(entry.items) < needed:
            # Full pages are always fetched in order, so the buffer length
            # identifies the next page.
            page_number = len(entry.items) // self.page_size + 1

            await self._rate_limiter.gate()
            page = await self._transport.fetch_page(query, order, page_number)
            fetched += 1
            self._page_fetches += 1

            if page is None or not page.items:
                entry.exhausted = True
                logger.info("pagination.exhausted", extra={"order": order, "page": page_number})
                break

            logger.info(
                "pagination.fetch_page",
                extra={
                    "order": order,
                    "page": page_number,
                    "page_items": len(page.items),
                    "has_more": page.has_more,
                    "total_count": page.total_count,
                },
            )

            entry.items.extend(page.items)
            entry.total_count = page.total_count

            if not page.has_more:
                entry.exhausted = True
            elif len(page.items) < self.page_size:
                logger.warning(
                    "pagination.short_page",
                    extra={
                        "page": page_number,
                        "page_items": len(page.items),
                        "page_size": self.page_size,
                    },
                )

        return fetched

    def _get_or_create_entry(self, key: CacheKey) -> CacheEntry:
        now = self._clock()
        entry = self._entries.get(key)

        if entry is not None and self._is_expired(entry, now):
            del self._entries[key]
            self._resets += 1
            logger.debug(
                "pagination.entry_expired",
                extra={"age_s": round(now - entry.created_at, 3), "buffered": len(entry.items)},
            )
            entry = None

        if entry is None:
            entry = CacheEntry(created_at=now)
            self._entries[key] = entry
            self._evict_if_over_capacity(now)

        return entry

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.created_at > self.ttl_seconds

    def _evict_if_over_capacity(self, now: float) -> None:
        if self.max_entries is None or len(self._entries) <= self.max_entries:
            return

        self._evict_expired_at(now)
        while len(self._entries) > self.max_entries:
            # popitem(last=False) drops the oldest-created entry
            self._entries.popitem(last=False)
            self._evictions += 1

    def _evict_expired_at(self, now: float) -> int:
        expired = [k for k, e in self._entries.items() if self._is_expired(e, now)]
        for key in expired:
            del self._entries[key]
        self._evictions += len(expired)
        return len(expired)

    def evict_expired(self) -> int:
        """Drop every entry whose TTL has elapsed.

        Expiry is otherwise only checked when a key is requested again; call
        this periodically when many distinct queries are served.

        Returns:
            Number of entries removed.
        """
        removed = self._evict_expired_at(self._clock())
        if removed:
            logger.info("pagination.evicted", extra={"removed": removed, "entries": len(self._entries)})
        return removed

    def get_entry(self, query: str, order: str) -> CacheEntry | None:
        """Return the buffered entry for a key without checking expiry."""
        return self._entries.get((query, order))

    def clear(self) -> None:
        """Remove all cached entries and reset counters."""
        self._entries.clear()
        self._windows = 0
        self._page_fetches = 0
        self._resets = 0
        self._evictions = 0

    def stats(self) -> dict[str, int | float | None]:
        """Return lightweight cache metrics without exposing results."""
        return {
            "page_size": self.page_size,
            "ttl_seconds": self.ttl_seconds,
            "max_entries": self.max_entries,
            "entries": len(self._entries),
            "buffered_items": sum(len(e.items) for e in self._entries.values()),
            "windows": self._windows,
            "page_fetches": self._page_fetches,
            "resets": self._resets,
            "evictions": self._evictions,
        }
