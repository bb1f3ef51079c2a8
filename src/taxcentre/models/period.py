"""
Reporting windows.

A ``FiscalWindow`` is an inclusive ``[start, end]`` instant range. Fiscal-year
windows end at 23:59:59.999 on their final day, so
anything dated on that day is inside. Ad-hoc windows (trailing days,
month-to-date) are built directly as values and never go through labels.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import NewType

from pydantic import BaseModel, ConfigDict, model_validator

FiscalYearLabel = NewType("FiscalYearLabel", str)

END_OF_DAY = time(23, 59, 59, 999000)


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


class FiscalWindow(BaseModel):
    """An inclusive reporting window."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime
    label: str | None = None

    @model_validator(mode="after")
    def _check_order(self) -> FiscalWindow:
        if self.start > self.end:
            raise ValueError(f"window start {self.start} is after end {self.end}")
        return self

    @classmethod
    def between(cls, start: date, end: date, label: str | None = None) -> FiscalWindow:
        """Window covering whole days ``start`` through ``end``."""
        return cls(
            start=datetime.combine(start, time.min),
            end=datetime.combine(end, END_OF_DAY),
            label=label,
        )

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()

    def contains(self, value: date | datetime) -> bool:
        """True if ``value`` (a date means its midnight) lies inside the window."""
        moment = _as_datetime(value)
        return self.start <= moment <= self.end

    def overlaps(self, start: date, end: date) -> bool:
        """True if the whole-day interval ``[start, end]`` touches the window."""
        return (
            _as_datetime(start) <= self.end
            and datetime.combine(end, END_OF_DAY) >= self.start
        )

    def __str__(self) -> str:
        if self.label:
            return self.label
        return f"{self.start_date.isoformat()} to {self.end_date.isoformat()}"
