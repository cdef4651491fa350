"""
Period aggregation: fold daily records into weekly or monthly rollups.
Pure functions over domain entities; no I/O and no external dependencies.

Weeks start on Sunday and months on their first day, matching how the
calendar grid lays out its cells.
"""

import calendar
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from market_engine.domain.entities.market_data import (
    AggregatedRecord,
    DailyRecord,
    Timeframe,
)


def aggregate(
    records: Sequence[DailyRecord],
    anchor_date: date,
    timeframe: Timeframe = Timeframe.WEEK,
) -> Optional[AggregatedRecord]:
    """Fold *records* (sorted ascending by date) into one period record.

    Returns None for an empty subset. Open comes from the first record and
    close from the last, so callers must pass records pre-sorted. Performance
    is the period return computed from the folded open and close, not the
    mean of daily performances.
    """
    if not records:
        return None

    first, last = records[0], records[-1]
    count = len(records)
    period_open = first.open
    period_close = last.close
    performance = (period_close - period_open) / period_open if period_open != 0 else 0.0

    return AggregatedRecord(
        date=anchor_date,
        open=period_open,
        close=period_close,
        high=max(r.high for r in records),
        low=min(r.low for r in records),
        volume=sum(r.volume for r in records),
        volatility=sum(r.volatility for r in records) / count,
        liquidity=sum(r.liquidity for r in records) / count,
        performance=performance,
        timeframe=timeframe,
        day_count=count,
    )


def week_start(day: date) -> date:
    # date.weekday() is Monday=0 .. Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def period_start(day: date, timeframe: Timeframe) -> date:
    """First calendar day of the period containing *day*."""
    if timeframe == Timeframe.WEEK:
        return week_start(day)
    if timeframe == Timeframe.MONTH:
        return day.replace(day=1)
    return day


def _records_between(records: Iterable[DailyRecord], start: date, end: date) -> list[DailyRecord]:
    return sorted((r for r in records if start <= r.date <= end), key=lambda r: r.date)


def aggregate_by_period(
    records: Iterable[DailyRecord],
    timeframe: Timeframe,
) -> list[AggregatedRecord]:
    """Group a daily series into consecutive periods, one rollup per period with data."""
    buckets: dict[date, list[DailyRecord]] = {}
    for record in sorted(records, key=lambda r: r.date):
        buckets.setdefault(period_start(record.date, timeframe), []).append(record)
    return [aggregate(bucket, anchor, timeframe) for anchor, bucket in sorted(buckets.items())]


def weekly_rollups_for_month(
    records: Iterable[DailyRecord],
    year: int,
    month: int,
) -> list[tuple[date, Optional[AggregatedRecord]]]:
    """Rollups for every Sunday-start week overlapping the given month.

    Weeks without data are returned with a None rollup so the caller can
    still render an empty cell for them.
    """
    records = list(records)
    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])

    weeks = []
    current = week_start(first)
    while current <= last:
        week_end = current + timedelta(days=6)
        subset = _records_between(records, current, week_end)
        weeks.append((current, aggregate(subset, current, Timeframe.WEEK)))
        current = week_end + timedelta(days=1)
    return weeks


def monthly_rollups_for_year(
    records: Iterable[DailyRecord],
    year: int,
) -> list[tuple[date, Optional[AggregatedRecord]]]:
    """Twelve (month anchor, rollup) pairs for *year*; None where a month has no data."""
    records = list(records)
    months = []
    for month in range(1, 13):
        first = date(year, month, 1)
        last = date(year, month, calendar.monthrange(year, month)[1])
        subset = _records_between(records, first, last)
        months.append((first, aggregate(subset, first, Timeframe.MONTH)))
    return months
