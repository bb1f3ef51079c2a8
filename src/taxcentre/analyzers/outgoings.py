"""
Outgoings — recurring cost and upcoming payment views over expenses.

These complement the period summary: what the active subscriptions cost per
month, what is due before the end of this month, and how much was spent in a
span split between one-off and recurring charges. Records are screened the
same way the period aggregator screens them, so ``skip`` mode leaves invalid
expenses out of every figure here too.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable

from taxcentre.analyzers.expense_recognizer import (
    ExpenseRecognizer,
    derive_status,
    screen_records,
    validate_expense,
)
from taxcentre.analyzers.subscriptions import SubscriptionAmortizer, occurrences
from taxcentre.config import ErrorMode, MonthStep, TaxCentreConfig
from taxcentre.models.financial import Expense, ExpenseStatus, ExpenseType
from taxcentre.models.period import FiscalWindow
from taxcentre.models.summary import SkippedRecord

logger = logging.getLogger("taxcentre.analyzers.outgoings")

ZERO = Decimal("0")


@dataclass(frozen=True)
class ExpectedPayment:
    """An expense charge due later this month."""

    expense: Expense
    due_date: date


@dataclass
class OutgoingsReport:
    """Recurring-cost overview."""

    recurring_monthly_cost: Decimal = ZERO
    total_spend: Decimal = ZERO
    subscription_spend: Decimal = ZERO
    expected_payments: list[ExpectedPayment] = field(default_factory=list)
    skipped: list[SkippedRecord] = field(default_factory=list)

    @property
    def projected_annual_cost(self) -> Decimal:
        return self.recurring_monthly_cost * 12

    @property
    def one_time_spend(self) -> Decimal:
        return self.total_spend - self.subscription_spend


def recurring_monthly_cost(expenses: Iterable[Expense], today: date | None = None) -> Decimal:
    """Monthly cost of every currently active subscription."""
    today = today or date.today()
    return sum(
        (
            SubscriptionAmortizer.monthly_equivalent(exp)
            for exp in expenses
            if exp.type == ExpenseType.SUBSCRIPTION
            and derive_status(exp, today) == ExpenseStatus.ACTIVE
        ),
        ZERO,
    )


def expected_payments_this_month(
    expenses: Iterable[Expense],
    today: date | None = None,
    step: MonthStep | str = MonthStep.ROLLOVER,
) -> list[ExpectedPayment]:
    """Charges falling between ``today`` and the end of the month, soonest first.

    Manual expenses are due on their date; subscriptions on their next billing
    date, if that lands this month. Ended and inactive expenses are ignored.
    """
    today = today or date.today()
    month_end = today.replace(day=calendar.monthrange(today.year, today.month)[1])
    due: list[ExpectedPayment] = []

    for exp in expenses:
        if exp.start_date is None:
            continue
        if derive_status(exp, today) == ExpenseStatus.INACTIVE:
            continue
        if exp.start_date > month_end:
            continue
        if exp.end_date is not None and exp.end_date < today:
            continue

        if exp.type == ExpenseType.MANUAL:
            if today <= exp.start_date <= month_end:
                due.append(ExpectedPayment(expense=exp, due_date=exp.start_date))
        elif exp.billing_cycle is not None:
            for occurrence in occurrences(exp.start_date, exp.billing_cycle, month_end, step):
                if occurrence >= today:
                    due.append(ExpectedPayment(expense=exp, due_date=occurrence))
                    break

    due.sort(key=lambda p: p.due_date)
    return due


def spend_in_window(
    expenses: Iterable[Expense],
    window: FiscalWindow,
    recognizer: ExpenseRecognizer | None = None,
) -> tuple[Decimal, Decimal]:
    """(total recognized spend, subscription-only spend) for ``window``."""
    recognizer = recognizer or ExpenseRecognizer()
    total = ZERO
    subscriptions = ZERO
    for exp in expenses:
        amount = recognizer.recognize(exp, window)
        total += amount
        if exp.type == ExpenseType.SUBSCRIPTION:
            subscriptions += amount
    return total, subscriptions


def build_outgoings(
    expenses: list[Expense],
    window: FiscalWindow,
    today: date | None = None,
    *,
    config: TaxCentreConfig | None = None,
    error_mode: ErrorMode | str | None = None,
) -> OutgoingsReport:
    """Assemble the outgoings overview for a span.

    Raises:
        InconsistentExpense / NegativeAmount: in ``fail`` mode, on the
        first invalid expense.
    """
    config = config or TaxCentreConfig()
    mode = ErrorMode(error_mode) if error_mode is not None else config.error_mode
    today = today or date.today()
    step = config.calendar.month_step

    skipped: list[SkippedRecord] = []
    valid = screen_records(expenses, validate_expense, "expense", mode, skipped)

    recognizer = ExpenseRecognizer(SubscriptionAmortizer(step))
    total, subscriptions = spend_in_window(valid, window, recognizer)
    report = OutgoingsReport(
        recurring_monthly_cost=recurring_monthly_cost(valid, today),
        total_spend=total,
        subscription_spend=subscriptions,
        expected_payments=expected_payments_this_month(valid, today, step),
        skipped=skipped,
    )
    logger.info(
        "Outgoings for %s: spend %s, recurring %s/month, %d payment(s) due (%d skipped)",
        window, report.total_spend, report.recurring_monthly_cost,
        len(report.expected_payments), len(skipped),
    )
    return report
