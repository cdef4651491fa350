"""
Use-case: turn a session's daily series into the cells of a calendar view.
Depends only on Domain services and entities; no infrastructure imports.
"""

from datetime import date
from typing import Iterable, Optional

from market_engine.domain.entities.market_data import AggregatedRecord, DailyRecord, Timeframe
from market_engine.domain.services.aggregation import (
    aggregate_by_period,
    monthly_rollups_for_year,
    weekly_rollups_for_month,
)


class BuildCalendarViewUseCase:
    def execute(
        self,
        records: Iterable[DailyRecord],
        timeframe: Timeframe,
        reference: date,
    ) -> list[tuple[date, Optional[DailyRecord]]]:
        """Return (cell anchor, record) pairs for the view around *reference*.

        - DAY:   one pair per day of reference's month that has data.
        - WEEK:  one pair per Sunday-start week overlapping reference's month.
        - MONTH: twelve pairs, one per month of reference's year.

        Cells without data carry None so they still render.
        """
        timeframe = Timeframe(timeframe)
        if timeframe == Timeframe.WEEK:
            return weekly_rollups_for_month(records, reference.year, reference.month)
        if timeframe == Timeframe.MONTH:
            return monthly_rollups_for_year(records, reference.year)
        return [
            (r.date, r)
            for r in sorted(records, key=lambda r: r.date)
            if (r.date.year, r.date.month) == (reference.year, reference.month)
        ]

    def periods(
        self, records: Iterable[DailyRecord], timeframe: Timeframe
    ) -> list[AggregatedRecord]:
        """One rollup per period of the whole series, oldest first."""
        return aggregate_by_period(records, Timeframe(timeframe))
