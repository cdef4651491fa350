"""
Infrastructure adapter: process-local TTL cache → ISeriesCache.

Entries expire once older than the TTL but are never evicted proactively;
an expired entry lingers until it is overwritten or the cache is cleared.
A single lock guards the map so several sessions may share one instance.
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from market_engine.domain.entities.market_data import DailyRecord
from market_engine.domain.ports.cache_port import ISeriesCache

CACHE_TTL = timedelta(minutes=5)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheEntry:
    series: tuple[DailyRecord, ...]
    stored_at: datetime


class InMemorySeriesCache(ISeriesCache):
    def __init__(
        self,
        ttl: timedelta = CACHE_TTL,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[list[DailyRecord]]:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or self._clock() - entry.stored_at > self._ttl:
            return None
        return list(entry.series)

    def set(self, key: str, series: list[DailyRecord]) -> None:
        entry = CacheEntry(series=tuple(series), stored_at=self._clock())
        with self._lock:
            self._entries[key] = entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
