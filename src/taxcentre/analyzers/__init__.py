"""
taxcentre analyzers — pure computation modules.

Fiscal-period resolution, subscription amortization, expense recognition,
progressive tax estimation and the period aggregation that combines them.
None of them perform I/O or keep state between calls.
"""

from taxcentre.analyzers.expense_recognizer import (
    ExpenseRecognizer,
    derive_status,
    recognize_expense,
    screen_records,
    validate_expense,
    validate_invoice,
)
from taxcentre.analyzers.fiscal_calendar import (
    FiscalCalendar,
    TimeSpan,
    bounds_of,
    fiscal_year_of,
)
from taxcentre.analyzers.outgoings import (
    ExpectedPayment,
    OutgoingsReport,
    build_outgoings,
    expected_payments_this_month,
    recurring_monthly_cost,
    spend_in_window,
)
from taxcentre.analyzers.period_aggregator import PeriodAggregator, aggregate, processing_fee
from taxcentre.analyzers.subscriptions import (
    PaymentPeriod,
    SubscriptionAmortizer,
    amortize,
    occurrences,
)
from taxcentre.analyzers.tax_estimator import (
    ProgressiveTaxEstimator,
    TaxEstimationResult,
    TaxStep,
    estimate_invoice_tax,
)

__all__ = [
    "ExpectedPayment",
    "ExpenseRecognizer",
    "FiscalCalendar",
    "OutgoingsReport",
    "PaymentPeriod",
    "PeriodAggregator",
    "ProgressiveTaxEstimator",
    "SubscriptionAmortizer",
    "TaxEstimationResult",
    "TaxStep",
    "TimeSpan",
    "aggregate",
    "amortize",
    "bounds_of",
    "build_outgoings",
    "derive_status",
    "estimate_invoice_tax",
    "expected_payments_this_month",
    "fiscal_year_of",
    "occurrences",
    "processing_fee",
    "recognize_expense",
    "recurring_monthly_cost",
    "screen_records",
    "spend_in_window",
    "validate_expense",
    "validate_invoice",
]
