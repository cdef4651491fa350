"""
Infrastructure adapter: random-walk sample data → ISyntheticSeriesGenerator.

Produces a plausible daily price path for an instrument when live retrieval
is unavailable. The shape is fixed (one record per calendar day, ending
today, no gaps); the values are drawn from a numpy random Generator, seeded
when reproducible output is needed.
"""

from datetime import date, timedelta
from typing import Callable, Optional

import numpy as np

from market_engine.domain.entities.market_data import DailyRecord
from market_engine.domain.ports.series_generator_port import ISyntheticSeriesGenerator
from market_engine.infrastructure.catalog.instruments import price_profile
from market_engine.infrastructure.market_data.payload_decoder import derive_liquidity

CRYPTO_BASE_VOLUME = 100_000_000
EQUITY_BASE_VOLUME = 20_000_000


def _is_crypto(instrument: str) -> bool:
    # Crypto pairs trade through the weekend
    return "USD" in instrument


class SyntheticSeriesGenerator(ISyntheticSeriesGenerator):
    def __init__(
        self,
        seed: Optional[int] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._rng = np.random.default_rng(seed)
        self._today = today

    def generate(self, instrument: str, days: int) -> list[DailyRecord]:
        if days < 0:
            raise ValueError(f"days must be non-negative, got {days}")

        profile = price_profile(instrument)
        vol_mult = profile.volatility_multiplier
        crypto = _is_crypto(instrument)
        base_volume = CRYPTO_BASE_VOLUME if crypto else EQUITY_BASE_VOLUME
        weekend_volume_mult = 0.8 if crypto else 0.3
        today = self._today()
        rand = self._rng.random

        records: list[DailyRecord] = []
        previous_close = profile.base_price
        for offset in range(days - 1, -1, -1):
            day = today - timedelta(days=offset)
            is_weekend = day.weekday() >= 5

            daily_return = (rand() - 0.5) * 0.06 * vol_mult
            volatility = (0.005 + rand() * 0.04) * vol_mult

            open_ = previous_close * (1 + (rand() - 0.5) * 0.005)
            close = open_ * (1 + daily_return)
            intraday_range = abs(close - open_) + volatility * open_ * rand() * 2
            high = max(open_, close) + intraday_range * rand()
            low = min(open_, close) - intraday_range * rand()
            low = max(low, min(open_, close) * 0.5)

            volume = (
                base_volume
                * (0.5 + rand())
                * (weekend_volume_mult if is_weekend else 1.0)
                * (1 + volatility * 3)
            )
            open_, close = round(open_, 2), round(close, 2)
            high = round(max(high, open_, close), 2)
            low = round(min(low, open_, close), 2)

            records.append(
                DailyRecord(
                    date=day,
                    open=open_,
                    close=close,
                    high=high,
                    low=low,
                    volume=float(round(volume)),
                    volatility=round(volatility, 4),
                    liquidity=round(derive_liquidity(volume, close), 1),
                    performance=round((close - open_) / open_, 4) if open_ else 0.0,
                )
            )
            previous_close = close
        return records
