"""
Period summary model — totals, per-invoice tax lines, detail rows.

A summary is recomputed from scratch for every window/filter and never
cached, so it carries no generation timestamp: identical inputs produce
identical (``==``) summaries.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from taxcentre.models.financial import Expense
from taxcentre.models.period import FiscalWindow

ZERO = Decimal("0")


class InvoiceTaxLine(BaseModel):
    """Estimated tax attributable to a single paid invoice."""

    invoice_id: str
    issue_date: date
    amount: Decimal
    already_earned: Decimal = Field(description="Freelance income earned earlier in the year")
    income_tax: Decimal = ZERO
    social_contribution: Decimal = ZERO
    processing_fee: Decimal = ZERO

    @property
    def total_tax(self) -> Decimal:
        return self.income_tax + self.social_contribution

    @property
    def take_home(self) -> Decimal:
        return self.amount - self.processing_fee - self.total_tax


class SkippedRecord(BaseModel):
    """A record excluded from the totals in ``skip`` error mode."""

    record_id: str | None
    record_type: str  # "invoice" or "expense"
    reason: str


class Receivables(BaseModel):
    """Unpaid invoice positions inside the window."""

    outstanding: Decimal = ZERO
    overdue: Decimal = ZERO


class PeriodSummary(BaseModel):
    """Everything the presentation layer needs for one reporting window."""

    window: FiscalWindow
    search: str = ""
    revenue: Decimal = ZERO
    recognized_expenses: Decimal = ZERO
    income_tax: Decimal = ZERO
    social_contribution: Decimal = ZERO
    one_time_expenses: Decimal = ZERO
    subscription_expenses: Decimal = ZERO
    expenses_by_category: dict[str, Decimal] = Field(default_factory=dict)
    receivables: Receivables = Field(default_factory=Receivables)
    invoice_lines: list[InvoiceTaxLine] = Field(default_factory=list)
    detail_rows: list[Expense] = Field(default_factory=list)
    skipped: list[SkippedRecord] = Field(default_factory=list)

    @property
    def estimated_tax(self) -> Decimal:
        return self.income_tax + self.social_contribution

    @property
    def net_profit(self) -> Decimal:
        return self.revenue - self.recognized_expenses - self.estimated_tax

    @property
    def taxable_profit(self) -> Decimal:
        """Turnover less allowable expenses, before tax."""
        return self.revenue - self.recognized_expenses

    def to_markdown(self, currency: str = "GBP") -> str:
        """Export summary as Markdown."""
        from taxcentre.exporters.markdown import render_markdown

        return render_markdown(self, currency=currency)

    def to_json(self) -> str:
        """Export summary as JSON."""
        return self.model_dump_json(indent=2)

    def to_dict(self) -> dict[str, Any]:
        """Export summary as dictionary."""
        return self.model_dump()
