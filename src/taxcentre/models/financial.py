"""
Financial records — invoices and expenses as delivered by the record stores.

Records are read-only snapshots. The models are deliberately permissive so a
malformed row can still be loaded and then rejected by the engine with a
typed error naming its id (see ``taxcentre.analyzers.expense_recognizer``).
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class InvoiceStatus(str, Enum):
    """Invoice lifecycle states. Only PAID counts toward revenue and tax."""

    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"


class ExpenseType(str, Enum):
    MANUAL = "manual"
    SUBSCRIPTION = "subscription"


class BillingCycle(str, Enum):
    MONTHLY = "monthly"
    ANNUALLY = "annually"


class ExpenseStatus(str, Enum):
    """Display-only lifecycle status, always derived from dates."""

    UPCOMING = "upcoming"
    COMPLETED = "completed"
    ACTIVE = "active"
    INACTIVE = "inactive"


class Invoice(BaseModel):
    """An issued invoice (receivable)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    issue_date: date
    amount: Decimal
    status: InvoiceStatus = InvoiceStatus.DRAFT
    due_date: date | None = None
    invoice_number: str | None = None
    project: str | None = None

    @property
    def is_paid(self) -> bool:
        return self.status == InvoiceStatus.PAID


class Expense(BaseModel):
    """A one-off (manual) or recurring (subscription) expense.

    ``base_amount`` is the amount in the reporting currency and is the only
    amount the engine ever sums; ``amount``/``currency`` keep the original
    figure for display. Accepts ``amount_gbp`` as an input alias.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str | None = None
    description: str | None = None
    amount: Decimal = Decimal("0")
    currency: str | None = None
    base_amount: Decimal = Field(
        default=Decimal("0"),
        validation_alias=AliasChoices("base_amount", "amount_gbp"),
    )
    category: str = ""
    start_date: date | None = None
    end_date: date | None = None
    type: ExpenseType = ExpenseType.MANUAL
    billing_cycle: BillingCycle | None = None

    @property
    def is_subscription(self) -> bool:
        return self.type == ExpenseType.SUBSCRIPTION

    @property
    def display_name(self) -> str:
        return self.name or self.description or ""

    @property
    def status(self) -> ExpenseStatus:
        """Derived display status as of today."""
        from taxcentre.analyzers.expense_recognizer import derive_status

        return derive_status(self, date.today())

    def matches(self, search: str) -> bool:
        """Case-insensitive substring match on name, description or category."""
        if not search:
            return True
        needle = search.lower()
        return any(
            needle in (text or "").lower()
            for text in (self.name, self.description, self.category)
        )


class LedgerSnapshot(BaseModel):
    """Everything the engine consumes: flat invoice and expense lists.

    This is what connectors produce and analyzers consume.
    """

    invoices: list[Invoice] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    source: str = "unknown"

    def merge(self, other: LedgerSnapshot) -> LedgerSnapshot:
        return LedgerSnapshot(
            invoices=[*self.invoices, *other.invoices],
            expenses=[*self.expenses, *other.expenses],
            source=f"{self.source}+{other.source}" if self.source != "unknown" else other.source,
        )
