"""Tests for query descriptors and their cache fingerprints."""

from __future__ import annotations

import json
from datetime import date

from market_engine.domain.entities.market_data import QueryDescriptor, Timeframe


def test_cache_key_ignores_construction_order() -> None:
    first = {
        "instrument": "BTC-USD",
        "start_date": date(2024, 1, 1),
        "end_date": date(2024, 6, 30),
        "timeframe": Timeframe.WEEK,
        "include_volatility": True,
        "include_liquidity": False,
        "include_performance": True,
    }
    second = dict(reversed(list(first.items())))

    assert list(first) != list(second)
    assert QueryDescriptor(**first).cache_key() == QueryDescriptor(**second).cache_key()


def test_cache_key_changes_with_any_field() -> None:
    base = QueryDescriptor("SPY", date(2024, 1, 1), date(2024, 1, 31))

    assert base.cache_key() != QueryDescriptor("SPY", date(2024, 1, 1), date(2024, 2, 1)).cache_key()
    assert (
        base.cache_key()
        != QueryDescriptor(
            "SPY", date(2024, 1, 1), date(2024, 1, 31), include_liquidity=False
        ).cache_key()
    )


def test_payload_uses_wire_field_names() -> None:
    descriptor = QueryDescriptor("ETH-USD", date(2024, 2, 1), date(2024, 2, 29), Timeframe.MONTH)

    assert descriptor.to_payload() == {
        "instrument": "ETH-USD",
        "startDate": "2024-02-01",
        "endDate": "2024-02-29",
        "timeframe": "1m",
        "includeVolatility": True,
        "includeLiquidity": True,
        "includePerformance": True,
    }
    assert json.loads(descriptor.cache_key()) == descriptor.to_payload()


def test_span_days_is_inclusive() -> None:
    assert QueryDescriptor("SPY", date(2024, 1, 1), date(2024, 1, 1)).span_days == 1
    assert QueryDescriptor("SPY", date(2024, 1, 1), date(2024, 1, 30)).span_days == 30
