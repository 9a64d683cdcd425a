from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from brb_shorts.config import CATALOG_CACHE_TTL_SECONDS
from brb_shorts.models.channel import ChannelConfiguration
from brb_shorts.services.catalog_fetcher import CatalogFetcher

LOGGER = logging.getLogger("brb_shorts.catalog")

NEVER_REFRESHED = 0.0


@dataclass(frozen=True)
class CatalogCacheEntry:
    refreshed_at: float
    video_ids: tuple[str, ...]

    @property
    def populated(self) -> bool:
        return self.refreshed_at > NEVER_REFRESHED


EMPTY_ENTRY = CatalogCacheEntry(refreshed_at=NEVER_REFRESHED, video_ids=())


@dataclass(frozen=True)
class CatalogResult:
    video_ids: list[str]
    cached: bool

    @property
    def count(self) -> int:
        return len(self.video_ids)


class CatalogCache:
    """Single-entry, pull-refreshed cache of the configured channel's video ids.

    A successful refresh (including one that found nothing) is served for
    `ttl_seconds`. A failed refresh leaves the previous entry as it was, even
    when that entry is stale. There is no locking: concurrent misses may both
    refresh and the last write wins.
    """

    def __init__(
        self,
        fetcher: CatalogFetcher,
        *,
        ttl_seconds: int = CATALOG_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._fetcher = fetcher
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entry = EMPTY_ENTRY

    @property
    def entry(self) -> CatalogCacheEntry:
        return self._entry

    def is_fresh(self, now: float | None = None) -> bool:
        entry = self._entry
        if not entry.populated:
            return False
        current = self._clock() if now is None else now
        return current - entry.refreshed_at < self._ttl_seconds

    def get_catalog(self, config: ChannelConfiguration) -> CatalogResult:
        now = self._clock()
        if self.is_fresh(now):
            return CatalogResult(video_ids=list(self._entry.video_ids), cached=True)

        result = self._fetcher.refresh_catalog(config)
        self._entry = CatalogCacheEntry(refreshed_at=now, video_ids=tuple(result.video_ids))
        return CatalogResult(video_ids=list(result.video_ids), cached=False)

    def invalidate(self) -> None:
        if self._entry.populated:
            LOGGER.info("catalog cache_invalidated previous_count=%s", len(self._entry.video_ids))
        self._entry = EMPTY_ENTRY
