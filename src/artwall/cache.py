"""
Catalog Cache

Time-boxed memoization of the candidate identifier list of flat-list sources. Listing every
painting id of a large catalog is slow, while the list itself changes rarely, so one entry per
source is kept for CACHE_TTL seconds and refetched on the first use after it expires.

No locking: two callers that both find the entry stale will both refetch and the last writer wins.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_TTL = 60 * 60


@dataclass(frozen=True)
class CatalogCacheEntry:
    source_id: str
    identifiers: tuple
    fetched_at: float


class CatalogCache:
    def __init__(self, ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self.clock = clock
        self._entries: dict[str, CatalogCacheEntry] = {}

    def entry(self, source_id: str) -> CatalogCacheEntry:
        """Return the entry for source_id, or None if nothing is cached."""

        return self._entries.get(source_id)

    def is_fresh(self, entry: CatalogCacheEntry) -> bool:
        return self.clock() - entry.fetched_at < self.ttl

    def get_or_fetch(self, source_id: str, fetch: Callable[[], list]) -> list:
        """
        Return the cached identifiers for source_id if younger than the ttl. Otherwise call fetch,
        store the result with a fresh timestamp and return it. Errors raised by fetch propagate
        and leave nothing cached for source_id.
        """

        entry = self._entries.get(source_id)

        if entry is not None and self.is_fresh(entry):
            return list(entry.identifiers)

        if entry is not None:
            logger.debug("catalog cache for %s expired", source_id)
            del self._entries[source_id]

        identifiers = tuple(fetch())
        self._entries[source_id] = CatalogCacheEntry(
            source_id=source_id, identifiers=identifiers, fetched_at=self.clock()
        )
        logger.info("cached %d identifiers for %s", len(identifiers), source_id)

        return list(identifiers)

    def invalidate(self, source_id: str = None):
        """Drop the entry for source_id, or every entry if no source is given."""

        if source_id is None:
            self._entries.clear()
        else:
            self._entries.pop(source_id, None)
