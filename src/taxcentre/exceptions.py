"""
Error taxonomy for the aggregation engine.

All errors are local validation failures. None of them are retried: the
engine is pure computation and has no transient failure mode.
"""

from __future__ import annotations


class TaxCentreError(ValueError):
    """Base class for every error raised by taxcentre."""

    def __init__(self, message: str, record_id: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.record_id = record_id


class InvalidPeriodLabel(TaxCentreError):
    """A fiscal-year label could not be parsed."""

    def __init__(self, label: object) -> None:
        super().__init__(f"Invalid fiscal-year label: {label!r}")
        self.label = label


class InconsistentExpense(TaxCentreError):
    """An expense record violates the shape rules of its type."""

    def __init__(self, record_id: str | None, reason: str) -> None:
        super().__init__(f"Expense {record_id or '<no id>'}: {reason}", record_id)
        self.reason = reason


class NegativeAmount(TaxCentreError):
    """A monetary field is below zero."""

    def __init__(self, record_id: str | None, field_name: str, amount: object) -> None:
        label = record_id or "<no id>"
        super().__init__(f"{label}: {field_name} must not be negative (got {amount})", record_id)
        self.field_name = field_name
        self.amount = amount
