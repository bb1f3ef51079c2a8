"""
Expense Recognizer — how much of one expense belongs to one window.

- Manual expenses are date-gated: the full base amount counts if the expense
  date falls in the window, nothing otherwise.
- Subscriptions are amortized: one charge per billing occurrence inside the
  window (see ``subscriptions``).

Also home to record validation and the derived display status, which is
purely a function of the record's dates and today's date and never feeds the
money math.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Iterable

from taxcentre.analyzers.subscriptions import SubscriptionAmortizer
from taxcentre.config import ErrorMode
from taxcentre.exceptions import InconsistentExpense, NegativeAmount, TaxCentreError
from taxcentre.models.financial import Expense, ExpenseStatus, ExpenseType, Invoice
from taxcentre.models.period import FiscalWindow
from taxcentre.models.summary import SkippedRecord

logger = logging.getLogger("taxcentre.analyzers.expense_recognizer")

ZERO = Decimal("0")


def validate_expense(expense: Expense) -> None:
    """Raise a typed error if ``expense`` cannot be recognized safely."""
    if not (expense.name or expense.description):
        raise InconsistentExpense(expense.id, "needs a name or a description")
    if expense.start_date is None:
        raise InconsistentExpense(expense.id, "missing start date")
    if expense.end_date is not None and expense.end_date < expense.start_date:
        raise InconsistentExpense(expense.id, "end date is before start date")
    if expense.type == ExpenseType.SUBSCRIPTION and expense.billing_cycle is None:
        raise InconsistentExpense(expense.id, "subscription has no billing cycle")
    if expense.type == ExpenseType.MANUAL and expense.billing_cycle is not None:
        raise InconsistentExpense(expense.id, "manual expense must not have a billing cycle")
    if expense.amount < 0:
        raise NegativeAmount(expense.id, "amount", expense.amount)
    if expense.base_amount < 0:
        raise NegativeAmount(expense.id, "base_amount", expense.base_amount)


def validate_invoice(invoice: Invoice) -> None:
    if invoice.amount < 0:
        raise NegativeAmount(invoice.id, "amount", invoice.amount)


def screen_records(
    records: Iterable[Any],
    validate: Callable[[Any], None],
    record_type: str,
    mode: ErrorMode | str,
    skipped: list[SkippedRecord],
) -> list[Any]:
    """Records that pass ``validate``.

    In ``fail`` mode the first invalid record raises; in ``skip`` mode it is
    logged, appended to ``skipped`` and left out.
    """
    mode = ErrorMode(mode)
    valid = []
    for record in records:
        try:
            validate(record)
        except TaxCentreError as e:
            if mode == ErrorMode.FAIL:
                raise
            logger.warning("Skipping %s %s: %s", record_type, record.id, e.message)
            skipped.append(
                SkippedRecord(record_id=record.id, record_type=record_type, reason=e.message)
            )
            continue
        valid.append(record)
    return valid


def derive_status(expense: Expense, today: date | None = None) -> ExpenseStatus:
    """Display status: a subscription is inactive once its end date has passed,
    a manual expense is completed once its date has arrived."""
    today = today or date.today()
    if expense.type == ExpenseType.SUBSCRIPTION:
        if expense.end_date is not None and expense.end_date < today:
            return ExpenseStatus.INACTIVE
        return ExpenseStatus.ACTIVE
    if expense.start_date is not None and expense.start_date <= today:
        return ExpenseStatus.COMPLETED
    return ExpenseStatus.UPCOMING


class ExpenseRecognizer:
    """Recognize expense amounts against reporting windows."""

    def __init__(self, amortizer: SubscriptionAmortizer | None = None):
        self.amortizer = amortizer or SubscriptionAmortizer()

    def recognize(self, expense: Expense, window: FiscalWindow) -> Decimal:
        """Portion of ``expense`` attributable to ``window``.

        Raises:
            InconsistentExpense: malformed record.
            NegativeAmount: negative monetary field.
        """
        validate_expense(expense)

        if expense.type == ExpenseType.MANUAL:
            amount = expense.base_amount if window.contains(expense.start_date) else ZERO
        else:
            amount = self.amortizer.amortize(
                expense.start_date,
                expense.end_date,
                expense.billing_cycle,
                expense.base_amount,
                window,
            )

        logger.debug("Recognized %s for expense %s in %s", amount, expense.id, window)
        return amount

    @staticmethod
    def overlaps(expense: Expense, window: FiscalWindow) -> bool:
        """Whether the expense's active interval touches the window.

        A manual expense's interval is its single date; an open-ended
        subscription runs to the end of the window.
        """
        if expense.start_date is None:
            return False
        if expense.type == ExpenseType.MANUAL:
            return window.contains(expense.start_date)
        effective_end = expense.end_date or window.end_date
        return window.overlaps(expense.start_date, effective_end)


def recognize_expense(expense: Expense, window: FiscalWindow) -> Decimal:
    """Recognized amount of ``expense`` in ``window``."""
    return ExpenseRecognizer().recognize(expense, window)
