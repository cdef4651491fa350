"""
Port (interface) for the time-bounded series cache.
Infrastructure adapters (e.g. InMemorySeriesCache) must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Optional

from market_engine.domain.entities.market_data import DailyRecord


class ISeriesCache(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[list[DailyRecord]]:
        """Return the series stored under *key*, or None when missing or expired."""
        ...

    @abstractmethod
    def set(self, key: str, series: list[DailyRecord]) -> None:
        """Store *series* under *key*, overwriting any previous entry."""
        ...

    @abstractmethod
    def clear(self) -> None: ...
