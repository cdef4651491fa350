"""
Domain entities for daily market data, period rollups and retrieval queries.
Zero external dependencies: pure Python dataclasses only.
"""

import json
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from market_engine.domain.errors import MarketDataError


class Timeframe(str, Enum):
    DAY = "1d"
    WEEK = "1w"
    MONTH = "1m"


@dataclass(frozen=True)
class DailyRecord:
    """One calendar day of market activity for one instrument."""

    date: date
    open: float
    close: float
    high: float
    low: float
    volume: float
    volatility: float
    liquidity: float
    performance: float


@dataclass(frozen=True)
class AggregatedRecord(DailyRecord):
    """A week or month folded into one record; ``date`` is the period anchor."""

    timeframe: Timeframe = Timeframe.WEEK
    day_count: int = 0


@dataclass(frozen=True)
class QueryDescriptor:
    instrument: str
    start_date: date
    end_date: date
    timeframe: Timeframe = Timeframe.DAY
    include_volatility: bool = True
    include_liquidity: bool = True
    include_performance: bool = True

    @property
    def span_days(self) -> int:
        """Number of calendar days covered, inclusive of both ends."""
        return (self.end_date - self.start_date).days + 1

    def to_payload(self) -> dict:
        """Wire form sent as the retrieval request body."""
        return {
            "instrument": self.instrument,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "timeframe": Timeframe(self.timeframe).value,
            "includeVolatility": self.include_volatility,
            "includeLiquidity": self.include_liquidity,
            "includePerformance": self.include_performance,
        }

    def cache_key(self) -> str:
        return json.dumps(self.to_payload(), sort_keys=True, separators=(",", ":"))


@dataclass(frozen=True)
class Instrument:
    symbol: str
    name: str
    category: str


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one retrieval call: either records or an error value."""

    records: list[DailyRecord] = field(default_factory=list)
    error: Optional[MarketDataError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, records: list[DailyRecord]) -> "FetchResult":
        return cls(records=list(records))

    @classmethod
    def failure(cls, error: MarketDataError) -> "FetchResult":
        return cls(records=[], error=error)
