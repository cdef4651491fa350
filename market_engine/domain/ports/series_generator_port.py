"""
Port (interface) for synthetic series generators used as a retrieval fallback.
Infrastructure adapters (e.g. SyntheticSeriesGenerator) must implement this interface.
"""

from abc import ABC, abstractmethod

from market_engine.domain.entities.market_data import DailyRecord


class ISyntheticSeriesGenerator(ABC):
    @abstractmethod
    def generate(self, instrument: str, days: int) -> list[DailyRecord]:
        """Return exactly *days* consecutive daily records ending today."""
        ...
