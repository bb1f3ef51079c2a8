"""
Progressive Tax Estimator — marginal income tax and social contribution
attributable to one more invoice.

Liability is order dependent: each invoice is taxed at the marginal position
reached by the baseline income plus everything already earned earlier in the
fiscal year. The reference definition walks the invoice one whole currency
unit at a time::

    for i in 1 .. floor(amount):
        total = baseline + already_earned + i
        income_tax          += rate of the income-tax band containing total
        social_contribution += rate of the contribution band containing total

``TaxMethod.PER_UNIT`` runs that loop literally. ``TaxMethod.INTEGRAL`` (the
default) counts how many of those units land in each band and multiplies by
the band rate, which gives the same Decimal result in O(bands).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Iterator, Sequence

from taxcentre.config import TaxBand, TaxConfig, TaxMethod
from taxcentre.exceptions import NegativeAmount
from taxcentre.models.financial import Invoice

logger = logging.getLogger("taxcentre.analyzers.tax_estimator")

ZERO = Decimal("0")


@dataclass(frozen=True)
class TaxEstimationResult:
    """Liability for a single invoice."""

    income_tax: Decimal = ZERO
    social_contribution: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.income_tax + self.social_contribution

    def __add__(self, other: TaxEstimationResult) -> TaxEstimationResult:
        return TaxEstimationResult(
            income_tax=self.income_tax + other.income_tax,
            social_contribution=self.social_contribution + other.social_contribution,
        )


@dataclass(frozen=True)
class TaxStep:
    """One invoice in a chronological walk, with the running total before it."""

    invoice: Invoice
    already_earned: Decimal
    result: TaxEstimationResult


def rate_at(bands: Sequence[TaxBand], income: Decimal) -> Decimal:
    """Rate of the band containing ``income``; 0 outside every band."""
    for band in bands:
        if band.contains(income):
            return band.rate
    return ZERO


def _per_unit(bands: Sequence[TaxBand], start: Decimal, units: int) -> Decimal:
    total = ZERO
    for i in range(1, units + 1):
        total += rate_at(bands, start + i)
    return total


def _integral(bands: Sequence[TaxBand], start: Decimal, units: int) -> Decimal:
    # Units i in [1, units] with floor < start + i <= ceiling.
    total = ZERO
    for band in bands:
        first = max(1, math.floor(band.floor - start) + 1)
        last = units if band.ceiling is None else min(units, math.floor(band.ceiling - start))
        if last >= first:
            total += band.rate * (last - first + 1)
    return total


class ProgressiveTaxEstimator:
    """
    Estimate per-invoice liability against ordered income bands.

    Example usage:
        estimator = ProgressiveTaxEstimator()          # England 2024/25 defaults
        result = estimator.estimate(Decimal("1000"), already_earned=Decimal("0"))
        result.income_tax, result.social_contribution
    """

    def __init__(self, config: TaxConfig | None = None):
        self.config = config or TaxConfig()
        self.income_tax_bands = list(self.config.income_tax_bands)
        self.social_contribution_bands = list(self.config.social_contribution_bands)
        self.method = self.config.method

    @property
    def baseline_income(self) -> Decimal:
        return self.config.baseline_income

    def estimate(
        self,
        invoice_amount: Decimal,
        baseline: Decimal | None = None,
        already_earned: Decimal = ZERO,
    ) -> TaxEstimationResult:
        """Incremental liability of one invoice.

        Args:
            invoice_amount: Invoice amount; only whole units are taxed.
            baseline: Non-freelance income; defaults to the configured baseline.
            already_earned: Freelance income earned earlier in the same year.

        Raises:
            NegativeAmount: any input below zero.
        """
        invoice_amount = Decimal(invoice_amount)
        baseline = self.baseline_income if baseline is None else Decimal(baseline)
        already_earned = Decimal(already_earned)
        for name, value in (
            ("invoice_amount", invoice_amount),
            ("baseline", baseline),
            ("already_earned", already_earned),
        ):
            if value < 0:
                raise NegativeAmount(None, name, value)

        start = baseline + already_earned
        units = math.floor(invoice_amount)
        accumulate = _per_unit if self.method == TaxMethod.PER_UNIT else _integral

        result = TaxEstimationResult(
            income_tax=accumulate(self.income_tax_bands, start, units),
            social_contribution=accumulate(self.social_contribution_bands, start, units),
        )
        logger.debug(
            "Tax on %s from position %s: income tax %s, contribution %s",
            invoice_amount, start, result.income_tax, result.social_contribution,
        )
        return result

    def walk(
        self,
        invoices: Iterable[Invoice],
        already_earned: Decimal = ZERO,
        baseline: Decimal | None = None,
    ) -> Iterator[TaxStep]:
        """Estimate invoices in issue-date order, carrying the running total.

        Ties keep their original order.
        """
        running = Decimal(already_earned)
        for invoice in sorted(invoices, key=lambda inv: inv.issue_date):
            result = self.estimate(invoice.amount, baseline=baseline, already_earned=running)
            yield TaxStep(invoice=invoice, already_earned=running, result=result)
            running += invoice.amount

    def total_for(self, invoices: Iterable[Invoice], already_earned: Decimal = ZERO) -> TaxEstimationResult:
        """Summed liability of ``invoices`` processed chronologically."""
        total = TaxEstimationResult()
        for step in self.walk(invoices, already_earned):
            total = total + step.result
        return total


def estimate_invoice_tax(
    invoice_amount: Decimal,
    baseline: Decimal | None = None,
    already_earned: Decimal = ZERO,
    config: TaxConfig | None = None,
) -> TaxEstimationResult:
    """Quick per-invoice estimate with default (or given) bands."""
    return ProgressiveTaxEstimator(config).estimate(invoice_amount, baseline, already_earned)
