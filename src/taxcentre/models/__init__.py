"""Record, window and summary models."""

from taxcentre.models.financial import (
    BillingCycle,
    Expense,
    ExpenseStatus,
    ExpenseType,
    Invoice,
    InvoiceStatus,
    LedgerSnapshot,
)
from taxcentre.models.period import FiscalWindow, FiscalYearLabel
from taxcentre.models.summary import InvoiceTaxLine, PeriodSummary, Receivables, SkippedRecord

__all__ = [
    "BillingCycle",
    "Expense",
    "ExpenseStatus",
    "ExpenseType",
    "FiscalWindow",
    "FiscalYearLabel",
    "Invoice",
    "InvoiceStatus",
    "InvoiceTaxLine",
    "LedgerSnapshot",
    "PeriodSummary",
    "Receivables",
    "SkippedRecord",
]
