"""
Fiscal Calendar — map dates to fiscal-year labels and labels to windows.

A fiscal year starts on a configurable cutover day (6 April for the UK tax
year) and is labelled ``"{start_year}/{start_year + 1}"``. Ad-hoc reporting
spans (trailing 7 days, month-to-date, this/last fiscal year, ...) are built
here as plain ``FiscalWindow`` values.
"""

from __future__ import annotations

import logging
import re
from datetime import MAXYEAR, MINYEAR, date, datetime, time, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Iterable

from dateutil.relativedelta import relativedelta

from taxcentre.config import CalendarConfig
from taxcentre.exceptions import InvalidPeriodLabel
from taxcentre.models.period import END_OF_DAY, FiscalWindow, FiscalYearLabel

if TYPE_CHECKING:
    from taxcentre.models.financial import Expense, Invoice

logger = logging.getLogger("taxcentre.analyzers.fiscal_calendar")

_LABEL_RE = re.compile(r"^\s*(\d+)\s*/\s*(\d+)\s*$")


class TimeSpan(str, Enum):
    """Preset reporting spans offered by the dashboard."""

    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"
    LAST_YEAR = "1y"
    MONTH_TO_DATE = "mtd"
    THIS_FISCAL_YEAR = "tfy"
    LAST_FISCAL_YEAR = "lfy"
    ALL_TIME = "all"


SPAN_LABELS: dict[TimeSpan, str] = {
    TimeSpan.LAST_7_DAYS: "7 Days",
    TimeSpan.LAST_30_DAYS: "30 Days",
    TimeSpan.LAST_90_DAYS: "90 Days",
    TimeSpan.LAST_YEAR: "1 Year",
    TimeSpan.MONTH_TO_DATE: "MTD",
    TimeSpan.THIS_FISCAL_YEAR: "This Fin. Year",
    TimeSpan.LAST_FISCAL_YEAR: "Last Fin. Year",
    TimeSpan.ALL_TIME: "All Time",
}


class FiscalCalendar:
    """
    Fiscal-year arithmetic for one jurisdiction.

    Example usage:
        calendar = FiscalCalendar()
        calendar.fiscal_year_of(date(2023, 4, 5))   # "2022/2023"
        calendar.fiscal_year_of(date(2023, 4, 6))   # "2023/2024"
        window = calendar.bounds_of("2023/2024")    # 2023-04-06 .. 2024-04-05 23:59:59.999
    """

    def __init__(self, config: CalendarConfig | None = None):
        config = config or CalendarConfig()
        self.start_month = config.start_month
        self.start_day = config.start_day

    def start_year_of(self, value: date | datetime) -> int:
        """Calendar year in which the fiscal year containing ``value`` began."""
        if (value.month, value.day) >= (self.start_month, self.start_day):
            return value.year
        return value.year - 1

    def fiscal_year_of(self, value: date | datetime) -> FiscalYearLabel:
        start_year = self.start_year_of(value)
        return FiscalYearLabel(f"{start_year}/{start_year + 1}")

    def parse_start_year(self, label: str) -> int:
        """Leading year ``Y`` of a ``"Y/Y+1"`` label."""
        if not isinstance(label, str):
            raise InvalidPeriodLabel(label)
        match = _LABEL_RE.match(label)
        if not match:
            raise InvalidPeriodLabel(label)
        start_year, end_year = int(match.group(1)), int(match.group(2))
        if end_year != start_year + 1:
            raise InvalidPeriodLabel(label)
        return start_year

    def bounds_of(self, label: str) -> FiscalWindow:
        """Window for a fiscal-year label, inclusive of the whole last day.

        Years whose window would start or end outside ``date``'s range (a start
        year below 1, or 9999 and later) are rejected with ``InvalidPeriodLabel``.
        """
        start_year = self.parse_start_year(label)
        if not MINYEAR <= start_year < MAXYEAR:
            raise InvalidPeriodLabel(label)
        start = date(start_year, self.start_month, self.start_day)
        end = date(start_year + 1, self.start_month, self.start_day) - timedelta(days=1)
        return FiscalWindow(
            start=datetime.combine(start, time.min),
            end=datetime.combine(end, END_OF_DAY),
            label=f"{start_year}/{start_year + 1}",
        )

    def window_of(self, value: date | datetime) -> FiscalWindow:
        """Full fiscal-year window containing ``value``."""
        return self.bounds_of(self.fiscal_year_of(value))

    def previous(self, label: str) -> FiscalYearLabel:
        start_year = self.parse_start_year(label) - 1
        return FiscalYearLabel(f"{start_year}/{start_year + 1}")

    def next(self, label: str) -> FiscalYearLabel:
        start_year = self.parse_start_year(label) + 1
        return FiscalYearLabel(f"{start_year}/{start_year + 1}")

    def available_years(
        self,
        invoices: Iterable[Invoice],
        expenses: Iterable[Expense],
        today: date | None = None,
    ) -> list[FiscalYearLabel]:
        """Every fiscal year touched by a record, plus the current one, newest first."""
        today = today or date.today()
        years = {self.fiscal_year_of(today)}
        years.update(self.fiscal_year_of(inv.issue_date) for inv in invoices)
        years.update(
            self.fiscal_year_of(exp.start_date) for exp in expenses if exp.start_date is not None
        )
        return sorted(years, reverse=True)

    # ------------------------------------------------------------------ #
    # Ad-hoc spans
    # ------------------------------------------------------------------ #

    def window_for(
        self,
        span: TimeSpan | str,
        now: datetime | None = None,
    ) -> FiscalWindow:
        """Build the window for a preset span ending at ``now``.

        Trailing spans start at midnight ``today`` minus the span; "last fiscal
        year" is the full previous fiscal year; "all" has no lower bound.
        """
        span = TimeSpan(span)
        now = now or datetime.now()
        today = now.date()
        label = SPAN_LABELS[span]

        if span == TimeSpan.LAST_FISCAL_YEAR:
            window = self.bounds_of(self.previous(self.fiscal_year_of(today)))
            return window.model_copy(update={"label": label})

        if span == TimeSpan.LAST_7_DAYS:
            start = today - timedelta(days=7)
        elif span == TimeSpan.LAST_30_DAYS:
            start = today - relativedelta(months=1)
        elif span == TimeSpan.LAST_90_DAYS:
            start = today - relativedelta(months=3)
        elif span == TimeSpan.LAST_YEAR:
            start = today - relativedelta(years=1)
        elif span == TimeSpan.MONTH_TO_DATE:
            start = today.replace(day=1)
        elif span == TimeSpan.THIS_FISCAL_YEAR:
            start = self.window_of(today).start_date
        else:
            return FiscalWindow(start=datetime.min, end=now, label=label)

        logger.debug("Span %s resolved to %s .. %s", span.value, start, now)
        return FiscalWindow(start=datetime.combine(start, time.min), end=now, label=label)


_DEFAULT = FiscalCalendar()


def fiscal_year_of(value: date | datetime) -> FiscalYearLabel:
    """Fiscal-year label for ``value`` using the UK cutover."""
    return _DEFAULT.fiscal_year_of(value)


def bounds_of(label: str) -> FiscalWindow:
    """Window for a fiscal-year label using the UK cutover."""
    return _DEFAULT.bounds_of(label)
