"""
Subscription Amortizer — expand recurring expenses into billing occurrences.

A subscription bills on its start date and then every calendar month or
calendar year after it. Only occurrences that fall inside a reporting window
count toward that window. This is a simulation rather than a closed-form
count because month lengths vary. Two stepping rules are supported (see
``MonthStep``):

- ``rollover`` (default): each date is the previous one plus a calendar
  month, and days the next month lacks spill over, so a subscription started
  on Jan 31 bills on Jan 31, Mar 3, Apr 3, ... and an annual one started on
  Feb 29 renews on Mar 1 in common years.
- ``clamp``: occurrence ``k`` is ``start + k months`` clamped to the end of
  shorter months, so Jan 31, Feb 28 (29), Mar 31, Apr 30, ...

Occurrences are generated lazily and generation stops at the first date past
the bound, so open-ended subscriptions never materialize more than the window
needs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterator

from dateutil.relativedelta import relativedelta

from taxcentre.config import MonthStep
from taxcentre.models.financial import BillingCycle, Expense
from taxcentre.models.period import FiscalWindow

logger = logging.getLogger("taxcentre.analyzers.subscriptions")

ZERO = Decimal("0")

_CYCLE_MONTHS = {
    BillingCycle.MONTHLY: 1,
    BillingCycle.ANNUALLY: 12,
}


@dataclass(frozen=True)
class PaymentPeriod:
    """One billing date of an expense, for attachment/receipt tracking."""

    date: date
    label: str


def _roll_forward(current: date, months: int) -> date:
    # Same day number ``months`` later; days past that month's end spill over.
    first = current.replace(day=1) + relativedelta(months=months)
    return first + timedelta(days=current.day - 1)


def occurrences(
    start: date,
    cycle: BillingCycle | str,
    until: date,
    step: MonthStep | str = MonthStep.ROLLOVER,
) -> Iterator[date]:
    """Yield billing dates from ``start`` up to and including ``until``.

    Generation also ends at the last date the calendar can represent.
    """
    months = _CYCLE_MONTHS[BillingCycle(cycle)]
    rollover = MonthStep(step) == MonthStep.ROLLOVER
    k = 0
    current = start
    while current <= until:
        yield current
        k += 1
        try:
            if rollover:
                current = _roll_forward(current, months)
            else:
                current = start + relativedelta(months=months * k)
        except (OverflowError, ValueError):
            return


class SubscriptionAmortizer:
    """
    Sum the billing occurrences of a subscription that fall in a window.

    Example usage:
        amortizer = SubscriptionAmortizer()
        window = FiscalWindow.between(date(2023, 1, 1), date(2023, 3, 31))
        amortizer.amortize(date(2023, 1, 15), None, "monthly", Decimal("10"), window)
        # Decimal("30") -- Jan 15, Feb 15, Mar 15
    """

    def __init__(self, step: MonthStep | str = MonthStep.ROLLOVER):
        self.step = MonthStep(step)

    def occurrences_in(
        self,
        start: date,
        end: date | None,
        cycle: BillingCycle | str,
        window: FiscalWindow,
    ) -> Iterator[date]:
        """Billing dates inside ``window``; an open end means "still running"."""
        window_end = window.end_date
        if end is None:
            end = window_end
        if start > window_end or end < window.start_date:
            return
        bound = min(end, window_end)
        for occurrence in occurrences(start, cycle, bound, self.step):
            if window.contains(occurrence):
                yield occurrence

    def amortize(
        self,
        start: date,
        end: date | None,
        cycle: BillingCycle | str,
        amount: Decimal,
        window: FiscalWindow,
    ) -> Decimal:
        """Amount recognized in ``window``: ``amount`` per occurrence inside it."""
        total = ZERO
        count = 0
        for _ in self.occurrences_in(start, end, cycle, window):
            total += amount
            count += 1
        logger.debug(
            "Amortized %s %s from %s over %s: %d occurrence(s), %s",
            cycle, amount, start, window, count, total,
        )
        return total

    def payment_schedule(self, expense: Expense, today: date | None = None) -> list[PaymentPeriod]:
        """Every billing date up to the end date (or today), newest first.

        A manual expense has a single period on its expense date.
        """
        if expense.start_date is None:
            return []
        if not expense.is_subscription or expense.billing_cycle is None:
            return [PaymentPeriod(date=expense.start_date, label="Invoice(s)")]

        until = expense.end_date or today or date.today()
        periods = [
            PaymentPeriod(date=d, label=d.strftime("%B %Y"))
            for d in occurrences(expense.start_date, expense.billing_cycle, until, self.step)
        ]
        periods.reverse()
        return periods

    def lifetime_spend(self, expense: Expense, today: date | None = None) -> Decimal:
        """Total billed so far: one charge per billing date up to min(end, today)."""
        if not expense.is_subscription or expense.billing_cycle is None or expense.start_date is None:
            return ZERO
        today = today or date.today()
        if expense.start_date > today:
            return ZERO
        until = min(expense.end_date, today) if expense.end_date else today
        cycles = sum(1 for _ in occurrences(expense.start_date, expense.billing_cycle, until, self.step))
        return expense.base_amount * cycles

    @staticmethod
    def monthly_equivalent(expense: Expense) -> Decimal:
        """Recurring cost per month; annual subscriptions are spread over 12."""
        if expense.billing_cycle == BillingCycle.MONTHLY:
            return expense.base_amount
        if expense.billing_cycle == BillingCycle.ANNUALLY:
            return expense.base_amount / 12
        return ZERO


def amortize(
    start: date,
    end: date | None,
    cycle: BillingCycle | str,
    amount: Decimal,
    window: FiscalWindow,
    step: MonthStep | str = MonthStep.ROLLOVER,
) -> Decimal:
    """Convenience wrapper around :meth:`SubscriptionAmortizer.amortize`."""
    return SubscriptionAmortizer(step).amortize(start, end, cycle, amount, window)
