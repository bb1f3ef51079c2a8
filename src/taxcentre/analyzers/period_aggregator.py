"""
Period Aggregator — revenue, recognized expenses, estimated tax and net
profit for one reporting window.

Pipeline:
1. Validate records (fail on the first bad one, or skip and report it).
2. Paid invoices issued inside the window make up revenue.
3. Those invoices are walked chronologically through the progressive tax
   estimator; the running "already earned" total either restarts at each
   fiscal year (``TaxAnchor.FISCAL_YEAR``) or at the window start
   (``TaxAnchor.WINDOW``).
4. Every expense is recognized against the window (manual: date-gated,
   subscription: amortized), independent of its display status.
5. net profit = revenue - recognized expenses - estimated tax.
6. Detail rows are the expenses active during the window that match the
   search text.

The aggregator holds no state between calls and never writes a record, so
several windows can be summarized concurrently without coordination.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence

from taxcentre.analyzers.expense_recognizer import (
    ExpenseRecognizer,
    screen_records,
    validate_expense,
    validate_invoice,
)
from taxcentre.analyzers.fiscal_calendar import FiscalCalendar
from taxcentre.analyzers.subscriptions import SubscriptionAmortizer
from taxcentre.analyzers.tax_estimator import ProgressiveTaxEstimator, TaxStep
from taxcentre.config import ErrorMode, FeeConfig, TaxAnchor, TaxCentreConfig
from taxcentre.models.financial import Expense, ExpenseType, Invoice, InvoiceStatus
from taxcentre.models.period import FiscalWindow
from taxcentre.models.summary import (
    InvoiceTaxLine,
    PeriodSummary,
    Receivables,
    SkippedRecord,
)

logger = logging.getLogger("taxcentre.analyzers.period_aggregator")

ZERO = Decimal("0")
UNCATEGORIZED = "Uncategorized"


def processing_fee(amount: Decimal, fees: FeeConfig) -> Decimal:
    """Card-processing fee for an invoice; fees above the waiver cap count as 0."""
    fee = amount * fees.percentage + fees.fixed
    if fees.waive_above is not None and fee > fees.waive_above:
        return ZERO
    return fee


class PeriodAggregator:
    """
    Reduce invoices and expenses to a ``PeriodSummary`` for one window.

    Example usage:
        aggregator = PeriodAggregator()
        window = aggregator.calendar.bounds_of("2023/2024")
        summary = aggregator.aggregate(invoices, expenses, window, search="software")
        summary.revenue, summary.recognized_expenses, summary.net_profit
    """

    def __init__(self, config: TaxCentreConfig | None = None):
        self.config = config or TaxCentreConfig()
        self.calendar = FiscalCalendar(self.config.calendar)
        self.estimator = ProgressiveTaxEstimator(self.config.tax)
        self.recognizer = ExpenseRecognizer(SubscriptionAmortizer(self.config.calendar.month_step))

    @property
    def error_mode(self) -> ErrorMode:
        return self.config.error_mode

    def aggregate(
        self,
        invoices: Sequence[Invoice],
        expenses: Sequence[Expense],
        window: FiscalWindow,
        search: str = "",
        *,
        today: date | None = None,
        error_mode: ErrorMode | str | None = None,
    ) -> PeriodSummary:
        """Summarize ``window``.

        Args:
            invoices: Snapshot of every invoice (any status, any date).
            expenses: Snapshot of every expense.
            window: Reporting window.
            search: Case-insensitive filter for the detail rows only.
            today: Reference date for overdue receivables.
            error_mode: Override the configured error mode for this call.

        Raises:
            InconsistentExpense / NegativeAmount: in ``fail`` mode, on the
            first invalid record.
        """
        mode = ErrorMode(error_mode) if error_mode is not None else self.error_mode
        today = today or date.today()
        skipped: list[SkippedRecord] = []

        valid_invoices = screen_records(invoices, validate_invoice, "invoice", mode, skipped)
        valid_expenses = screen_records(expenses, validate_expense, "expense", mode, skipped)

        # 1-2. Revenue
        paid = [
            inv for inv in valid_invoices
            if inv.status == InvoiceStatus.PAID and window.contains(inv.issue_date)
        ]
        revenue = sum((inv.amount for inv in paid), ZERO)

        # 3. Tax, chronologically
        steps = self._tax_steps(paid, valid_invoices)
        invoice_lines = [
            InvoiceTaxLine(
                invoice_id=step.invoice.id,
                issue_date=step.invoice.issue_date,
                amount=step.invoice.amount,
                already_earned=step.already_earned,
                income_tax=step.result.income_tax,
                social_contribution=step.result.social_contribution,
                processing_fee=processing_fee(step.invoice.amount, self.config.fees),
            )
            for step in steps
        ]
        income_tax = sum((line.income_tax for line in invoice_lines), ZERO)
        social_contribution = sum((line.social_contribution for line in invoice_lines), ZERO)

        # 4-5. Expenses
        one_time = ZERO
        subscription = ZERO
        by_category: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for expense in valid_expenses:
            amount = self.recognizer.recognize(expense, window)
            if not amount:
                continue
            if expense.type == ExpenseType.MANUAL:
                one_time += amount
            else:
                subscription += amount
            by_category[expense.category or UNCATEGORIZED] += amount

        # 7. Detail rows
        detail_rows = [
            exp for exp in valid_expenses
            if self.recognizer.overlaps(exp, window) and exp.matches(search)
        ]

        summary = PeriodSummary(
            window=window,
            search=search,
            revenue=revenue,
            recognized_expenses=one_time + subscription,
            income_tax=income_tax,
            social_contribution=social_contribution,
            one_time_expenses=one_time,
            subscription_expenses=subscription,
            expenses_by_category=dict(sorted(by_category.items())),
            receivables=self.receivables(valid_invoices, window, today),
            invoice_lines=invoice_lines,
            detail_rows=detail_rows,
            skipped=skipped,
        )
        logger.info(
            "Summarized %s: revenue %s, expenses %s, tax %s, net %s (%d skipped)",
            window, summary.revenue, summary.recognized_expenses,
            summary.estimated_tax, summary.net_profit, len(skipped),
        )
        return summary

    def summarize_years(
        self,
        invoices: Sequence[Invoice],
        expenses: Sequence[Expense],
        labels: Iterable[str],
        search: str = "",
        *,
        today: date | None = None,
    ) -> dict[str, PeriodSummary]:
        """One independent summary per fiscal-year label."""
        return {
            label: self.aggregate(
                invoices, expenses, self.calendar.bounds_of(label), search, today=today
            )
            for label in labels
        }

    @staticmethod
    def receivables(
        invoices: Iterable[Invoice],
        window: FiscalWindow,
        today: date,
    ) -> Receivables:
        """Unpaid positions of invoices issued in the window."""
        outstanding = ZERO
        overdue = ZERO
        for inv in invoices:
            if not window.contains(inv.issue_date):
                continue
            if inv.status in (InvoiceStatus.SENT, InvoiceStatus.OVERDUE):
                outstanding += inv.amount
            if inv.status == InvoiceStatus.OVERDUE or (
                inv.status == InvoiceStatus.SENT
                and inv.due_date is not None
                and inv.due_date < today
            ):
                overdue += inv.amount
        return Receivables(outstanding=outstanding, overdue=overdue)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _tax_steps(self, paid_in_window: list[Invoice], all_invoices: list[Invoice]) -> list[TaxStep]:
        if self.config.tax.anchor == TaxAnchor.WINDOW:
            return list(self.estimator.walk(paid_in_window))

        # Anchor each invoice to its true fiscal year-to-date position,
        # including paid invoices that precede the window.
        wanted = {id(inv) for inv in paid_in_window}
        years = {self.calendar.fiscal_year_of(inv.issue_date) for inv in paid_in_window}
        by_year: dict[str, list[Invoice]] = defaultdict(list)
        for inv in all_invoices:
            if inv.status != InvoiceStatus.PAID:
                continue
            label = self.calendar.fiscal_year_of(inv.issue_date)
            if label in years:
                by_year[label].append(inv)

        steps: list[TaxStep] = []
        for label in sorted(by_year):
            steps.extend(
                step for step in self.estimator.walk(by_year[label]) if id(step.invoice) in wanted
            )
        return steps


def aggregate(
    invoices: Sequence[Invoice],
    expenses: Sequence[Expense],
    window: FiscalWindow,
    search: str = "",
    config: TaxCentreConfig | None = None,
) -> PeriodSummary:
    """Summarize one window with default (or given) configuration."""
    return PeriodAggregator(config).aggregate(invoices, expenses, window, search)
