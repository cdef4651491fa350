"""Tests for weekly and monthly period aggregation."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from market_engine.domain.entities.market_data import AggregatedRecord, DailyRecord, Timeframe
from market_engine.domain.services.aggregation import (
    aggregate,
    aggregate_by_period,
    monthly_rollups_for_year,
    period_start,
    week_start,
    weekly_rollups_for_month,
)


def _record(day: date, open_: float, close: float, **overrides: float) -> DailyRecord:
    fields = {
        "date": day,
        "open": open_,
        "close": close,
        "high": max(open_, close) + 1,
        "low": min(open_, close) - 1,
        "volume": 1000.0,
        "volatility": 0.02,
        "liquidity": 50.0,
        "performance": (close - open_) / open_ if open_ else 0.0,
    }
    fields.update(overrides)
    return DailyRecord(**fields)


def test_two_day_rollup_matches_reference_values() -> None:
    records = [
        DailyRecord(date(2024, 1, 1), 100, 110, 112, 98, 1000, 0.05, 60, 0.1),
        DailyRecord(date(2024, 1, 2), 110, 105, 111, 103, 2000, 0.03, 70, -0.045),
    ]

    result = aggregate(records, date(2024, 1, 1), Timeframe.MONTH)

    assert isinstance(result, AggregatedRecord)
    assert result.date == date(2024, 1, 1)
    assert result.open == 100
    assert result.close == 105
    assert result.high == 112
    assert result.low == 98
    assert result.volume == 3000
    assert result.volatility == pytest.approx(0.04)
    assert result.liquidity == pytest.approx(65)
    assert result.performance == pytest.approx(0.05)
    assert result.timeframe == Timeframe.MONTH
    assert result.day_count == 2


def test_empty_subset_yields_no_rollup() -> None:
    assert aggregate([], date(2024, 1, 1)) is None


def test_high_and_low_are_extremes_across_the_month() -> None:
    start = date(2024, 3, 1)
    records = [
        _record(start + timedelta(days=i), 100 + i, 101 + i, high=150 + (i % 7), low=50 - (i % 5))
        for i in range(31)
    ]

    result = aggregate(records, start, Timeframe.MONTH)

    assert result.high == max(r.high for r in records)
    assert result.low == min(r.low for r in records)


def test_performance_uses_period_open_and_close_not_daily_mean() -> None:
    records = [
        _record(date(2024, 5, 5), 100, 120),
        _record(date(2024, 5, 6), 120, 90),
        _record(date(2024, 5, 7), 90, 99),
    ]

    result = aggregate(records, date(2024, 5, 5))

    assert result.performance == pytest.approx((99 - 100) / 100)
    mean_daily = sum(r.performance for r in records) / len(records)
    assert result.performance != pytest.approx(mean_daily)


def test_zero_open_gives_zero_performance() -> None:
    records = [_record(date(2024, 1, 7), 0.0, 5.0, low=0.0)]

    result = aggregate(records, date(2024, 1, 7))

    assert result.performance == 0


def test_anchor_is_period_start_even_without_data_on_that_day() -> None:
    records = [_record(date(2024, 2, 14), 10, 11)]

    result = aggregate(records, date(2024, 2, 1), Timeframe.MONTH)

    assert result.date == date(2024, 2, 1)


def test_aggregation_is_repeatable() -> None:
    records = [_record(date(2024, 1, d), 100 + d, 99 + d * 1.5) for d in range(1, 8)]

    assert aggregate(records, date(2024, 1, 1)) == aggregate(records, date(2024, 1, 1))


def test_weeks_start_on_sunday() -> None:
    # 2024-01-03 is a Wednesday
    assert week_start(date(2024, 1, 3)) == date(2023, 12, 31)
    assert week_start(date(2023, 12, 31)) == date(2023, 12, 31)
    assert week_start(date(2024, 1, 6)) == date(2023, 12, 31)
    assert period_start(date(2024, 1, 17), Timeframe.MONTH) == date(2024, 1, 1)
    assert period_start(date(2024, 1, 17), Timeframe.DAY) == date(2024, 1, 17)


def test_aggregate_by_period_groups_unsorted_input() -> None:
    records = [
        _record(date(2024, 2, 3), 30, 31),
        _record(date(2024, 1, 31), 10, 11),
        _record(date(2024, 2, 1), 20, 21),
    ]

    rollups = aggregate_by_period(records, Timeframe.MONTH)

    assert [r.date for r in rollups] == [date(2024, 1, 1), date(2024, 2, 1)]
    assert rollups[1].open == 20
    assert rollups[1].close == 31
    assert rollups[1].day_count == 2


def test_weekly_rollups_cover_every_week_of_the_month() -> None:
    records = [_record(date(2024, 1, d), 100, 101) for d in (2, 3, 16)]

    weeks = weekly_rollups_for_month(records, 2024, 1)

    anchors = [anchor for anchor, _ in weeks]
    assert anchors[0] == date(2023, 12, 31)
    assert anchors[-1] == date(2024, 1, 28)
    assert len(weeks) == 5
    by_anchor = dict(weeks)
    assert by_anchor[date(2023, 12, 31)].day_count == 2
    assert by_anchor[date(2024, 1, 7)] is None
    assert by_anchor[date(2024, 1, 14)].day_count == 1


def test_monthly_rollups_return_twelve_cells() -> None:
    records = [
        _record(date(2024, 3, 1), 50, 55),
        _record(date(2024, 3, 31), 55, 60),
        _record(date(2025, 1, 1), 70, 71),
    ]

    months = monthly_rollups_for_year(records, 2024)

    assert len(months) == 12
    assert months[0] == (date(2024, 1, 1), None)
    march = months[2][1]
    assert march.date == date(2024, 3, 1)
    assert march.open == 50
    assert march.close == 60
    assert march.performance == pytest.approx(0.2)
