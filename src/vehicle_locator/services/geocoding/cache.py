"""In-process TTL cache of resolved ZIP coordinates."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from ...models.domain import CacheEntry, Location, LocationSource

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=24)
DEFAULT_FALLBACK_TTL_RATIO = 0.2


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CoordinateCache:
    """Maps 5-digit ZIP codes to their last resolution.

    Expiry is lazy: ``get`` and ``has`` evict stale entries when they see them.
    Fallback-sourced entries expire after ``ttl * fallback_ttl_ratio`` so the
    provider is asked again sooner. The cache holds no authoritative data and
    may be cleared at any time.
    """

    def __init__(
        self,
        ttl: timedelta = DEFAULT_TTL,
        fallback_ttl_ratio: float = DEFAULT_FALLBACK_TTL_RATIO,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if ttl <= timedelta(0):
            raise ValueError("Cache TTL must be positive.")
        if not 0 < fallback_ttl_ratio <= 1:
            raise ValueError("fallback_ttl_ratio must be within (0, 1].")
        self.ttl = ttl
        self.fallback_ttl_ratio = fallback_ttl_ratio
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def ttl_for(self, source: LocationSource) -> timedelta:
        if source is LocationSource.FALLBACK:
            return self.ttl * self.fallback_ttl_ratio
        return self.ttl

    def is_expired(self, entry: CacheEntry, now: datetime | None = None) -> bool:
        now = now or self._clock()
        return now - entry.resolved_at > self.ttl_for(entry.source)

    def get(self, zip_code: str) -> CacheEntry | None:
        entry = self._entries.get(zip_code)
        if entry is None:
            return None
        if self.is_expired(entry):
            logger.debug(f"Cache entry for {zip_code} ({entry.source.value}) expired")
            # another request may have refreshed the key already
            if self._entries.get(zip_code) is entry:
                del self._entries[zip_code]
            return None
        return entry

    def has(self, zip_code: str) -> bool:
        return self.get(zip_code) is not None

    def put(self, zip_code: str, location: Location, source: LocationSource) -> CacheEntry:
        entry = CacheEntry(zip=zip_code, location=location, source=source, resolved_at=self._clock())
        self._entries[zip_code] = entry
        return entry

    def clear(self) -> int:
        removed = len(self._entries)
        self._entries.clear()
        return removed

    def entries(self) -> list[CacheEntry]:
        """Snapshot of every stored entry, expired ones included."""
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, zip_code: object) -> bool:
        return isinstance(zip_code, str) and self.has(zip_code)
