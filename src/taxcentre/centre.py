"""
TaxCentre — main orchestrator.

The TaxCentre class is the top-level entry point that loads records through
the configured connectors and runs the period analyzers over them.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from taxcentre.analyzers.fiscal_calendar import FiscalCalendar, TimeSpan
from taxcentre.analyzers.outgoings import OutgoingsReport, build_outgoings
from taxcentre.analyzers.period_aggregator import PeriodAggregator
from taxcentre.analyzers.tax_estimator import ProgressiveTaxEstimator, TaxEstimationResult
from taxcentre.config import ErrorMode, TaxCentreConfig
from taxcentre.connectors.registry import ConnectorRegistry
from taxcentre.models.financial import LedgerSnapshot
from taxcentre.models.period import FiscalWindow, FiscalYearLabel
from taxcentre.models.summary import PeriodSummary

logger = logging.getLogger("taxcentre")


@dataclass
class TaxCentre:
    """Top-level orchestrator for taxcentre.

    Usage::

        from taxcentre import TaxCentre

        centre = TaxCentre.from_config("taxcentre.yaml")
        snapshot = centre.load_sync()
        summary = centre.tax_year(snapshot, "2023/2024")
        print(summary.to_markdown())

    The TaxCentre coordinates:
    - **Connectors**: Load invoice and expense snapshots from record stores.
    - **Calendar**: Resolve fiscal years and preset spans into windows.
    - **Aggregator**: Revenue, recognized expenses, tax and net profit.
    """

    config: TaxCentreConfig = field(default_factory=TaxCentreConfig)
    connector_registry: ConnectorRegistry = field(default_factory=ConnectorRegistry)
    _aggregator: PeriodAggregator | None = field(default=None, init=False, repr=False)

    @classmethod
    def from_config(cls, config_path: str | None = None, **overrides: Any) -> TaxCentre:
        """Create a TaxCentre instance from a config file or keyword arguments."""
        config = TaxCentreConfig.load(config_path, **overrides)
        instance = cls(config=config)
        instance._setup()
        return instance

    def _setup(self) -> None:
        """Initialize connectors and analyzers."""
        self.connector_registry = ConnectorRegistry()
        self.connector_registry.auto_discover(self.config)
        self._aggregator = PeriodAggregator(self.config)
        logger.info(
            "TaxCentre initialized with %d connectors",
            len(self.connector_registry),
        )

    @property
    def aggregator(self) -> PeriodAggregator:
        if self._aggregator is None:
            self._aggregator = PeriodAggregator(self.config)
        return self._aggregator

    @property
    def calendar(self) -> FiscalCalendar:
        return self.aggregator.calendar

    @property
    def estimator(self) -> ProgressiveTaxEstimator:
        return self.aggregator.estimator

    async def load(self) -> LedgerSnapshot:
        """Pull and merge records from every configured connector."""
        snapshot = await self.connector_registry.pull_all()
        logger.info(
            "Loaded %d invoices and %d expenses", len(snapshot.invoices), len(snapshot.expenses)
        )
        return snapshot

    def load_sync(self) -> LedgerSnapshot:
        """Synchronous wrapper around :meth:`load`."""
        return asyncio.run(self.load())

    def summarize(
        self,
        snapshot: LedgerSnapshot,
        window: FiscalWindow,
        search: str = "",
        today: date | None = None,
    ) -> PeriodSummary:
        """Summarize an explicit window."""
        return self.aggregator.aggregate(
            snapshot.invoices, snapshot.expenses, window, search, today=today
        )

    def tax_year(
        self,
        snapshot: LedgerSnapshot,
        label: str,
        search: str = "",
        today: date | None = None,
    ) -> PeriodSummary:
        """Summarize a fiscal year by label, e.g. ``"2023/2024"``."""
        return self.summarize(snapshot, self.calendar.bounds_of(label), search, today)

    def span(
        self,
        snapshot: LedgerSnapshot,
        span: TimeSpan | str,
        search: str = "",
        now: datetime | None = None,
    ) -> PeriodSummary:
        """Summarize a preset span such as ``"7d"`` or ``"tfy"``."""
        now = now or datetime.now()
        window = self.calendar.window_for(span, now)
        return self.summarize(snapshot, window, search, now.date())

    def available_years(self, snapshot: LedgerSnapshot, today: date | None = None) -> list[FiscalYearLabel]:
        return self.calendar.available_years(snapshot.invoices, snapshot.expenses, today)

    def outgoings(
        self,
        snapshot: LedgerSnapshot,
        span: TimeSpan | str = TimeSpan.ALL_TIME,
        now: datetime | None = None,
        error_mode: ErrorMode | str | None = None,
    ) -> OutgoingsReport:
        """Recurring costs, spend in a span and payments due this month.

        Invalid expenses are handled per the configured error mode.
        """
        now = now or datetime.now()
        window = self.calendar.window_for(span, now)
        return build_outgoings(
            snapshot.expenses, window, now.date(), config=self.config, error_mode=error_mode
        )

    def invoice_tax(self, amount: Any, already_earned: Any = 0) -> TaxEstimationResult:
        """Estimate tax on a prospective invoice at the configured baseline."""
        return self.estimator.estimate(amount, already_earned=already_earned)
