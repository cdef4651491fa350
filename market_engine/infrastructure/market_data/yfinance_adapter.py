"""
Infrastructure adapter: yfinance → IMarketDataProvider.
All yfinance-specific details (Ticker.history(), column names, the end-date
exclusivity) are confined here; the rest of the codebase depends only on
IMarketDataProvider. Volatility, liquidity and performance are never supplied
by Yahoo, so they are always derived.
"""

import logging
from datetime import timedelta

import yfinance as yf

from market_engine.domain.entities.market_data import (
    DailyRecord,
    FetchResult,
    Instrument,
    QueryDescriptor,
)
from market_engine.domain.errors import MarketDataError, TransportError
from market_engine.domain.ports.market_data_port import IMarketDataProvider
from market_engine.infrastructure.catalog.instruments import INSTRUMENT_CATALOG
from market_engine.infrastructure.market_data.payload_decoder import (
    derive_liquidity,
    derive_performance,
    derive_volatility,
)

logger = logging.getLogger(__name__)


class YFinanceMarketDataProvider(IMarketDataProvider):
    """Fetches daily bars from Yahoo Finance via the yfinance library."""

    def fetch_market_data(self, descriptor: QueryDescriptor) -> FetchResult:
        try:
            history = yf.Ticker(descriptor.instrument).history(
                start=descriptor.start_date.isoformat(),
                # yfinance treats ``end`` as exclusive
                end=(descriptor.end_date + timedelta(days=1)).isoformat(),
                interval="1d",
            )
        except Exception as exc:
            logger.warning("yfinance history for %s failed: %s", descriptor.instrument, exc)
            return FetchResult.failure(TransportError(str(exc)))

        if history is None:
            return FetchResult.failure(
                MarketDataError(f"No history returned for {descriptor.instrument!r}")
            )

        records = []
        for timestamp, row in history.iterrows():
            open_ = round(float(row["Open"]), 4)
            high = round(float(row["High"]), 4)
            low = round(float(row["Low"]), 4)
            close = round(float(row["Close"]), 4)
            volume = float(row["Volume"])
            records.append(
                DailyRecord(
                    date=timestamp.date(),
                    open=open_,
                    close=close,
                    high=high,
                    low=low,
                    volume=volume,
                    volatility=derive_volatility(high, low, close),
                    liquidity=derive_liquidity(volume, close),
                    performance=derive_performance(open_, close),
                )
            )
        return FetchResult.success(records)

    def fetch_instruments(self) -> list[Instrument]:
        # Yahoo has no listing endpoint; serve the local catalog.
        return list(INSTRUMENT_CATALOG)
