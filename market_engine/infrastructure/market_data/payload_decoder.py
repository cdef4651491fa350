"""
Decoder for provider payload items.

Upstream items spell their fields either long-form (``open``) or short-form
(``o``). pydantic's AliasChoices resolves the spelling, preferring the
long-form key when both are present, so the derivations below only ever see
a field as present or absent, never as a particular key. A JSON null counts
as absent, so a null long-form key falls through to the short form.
"""

import datetime as dt
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from market_engine.domain.entities.market_data import DailyRecord


def _alias(long_form: str, short_form: str) -> AliasChoices:
    return AliasChoices(long_form, short_form)


class ProviderBar(BaseModel):
    """One raw provider item, with its field spelling already resolved."""

    model_config = ConfigDict(extra="ignore")

    date: dt.date = Field(validation_alias=AliasChoices("timestamp", "date"))
    open: float = Field(default=0.0, validation_alias=_alias("open", "o"))
    close: float = Field(default=0.0, validation_alias=_alias("close", "c"))
    high: float = Field(default=0.0, validation_alias=_alias("high", "h"))
    low: float = Field(default=0.0, validation_alias=_alias("low", "l"))
    volume: float = Field(default=0.0, validation_alias=_alias("volume", "v"))
    volatility: Optional[float] = None
    liquidity: Optional[float] = None
    performance: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> Any:
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, str) and len(value) > 10:
            return dt.datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        return value

    def to_record(self) -> DailyRecord:
        return DailyRecord(
            date=self.date,
            open=self.open,
            close=self.close,
            high=self.high,
            low=self.low,
            volume=self.volume,
            volatility=(
                self.volatility
                if self.volatility is not None
                else derive_volatility(self.high, self.low, self.close)
            ),
            liquidity=(
                self.liquidity
                if self.liquidity is not None
                else derive_liquidity(self.volume, self.close)
            ),
            performance=(
                self.performance
                if self.performance is not None
                else derive_performance(self.open, self.close)
            ),
        )


def derive_volatility(high: float, low: float, close: float) -> float:
    """Intraday range as a percentage of the close."""
    if close == 0:
        return 0.0
    return (high - low) / close * 100


def derive_liquidity(volume: float, close: float) -> float:
    """Traded notional in millions, capped to the 0-100 score range."""
    if close == 0:
        return 0.0
    return min(volume * close / 1_000_000, 100.0)


def derive_performance(open_: float, close: float) -> float:
    if open_ == 0:
        return 0.0
    return (close - open_) / open_ * 100


def decode_items(items: list[dict]) -> list[DailyRecord]:
    """Decode raw provider items into domain records.

    Raises:
        pydantic.ValidationError: if an item has no usable date or a
        non-numeric price field.
    """
    return [ProviderBar.model_validate(item).to_record() for item in items]
