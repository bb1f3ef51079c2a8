"""
taxcentre configuration management.

Supports loading from YAML files, environment variables, and keyword overrides.
All jurisdictional constants (fiscal-year cutover, tax and contribution bands,
baseline income) live here rather than in the analyzers.
"""

from __future__ import annotations

import os
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class TaxMethod(str, Enum):
    """How the progressive estimator walks the bands."""

    INTEGRAL = "integral"  # closed-form sum over overlapping band ranges
    PER_UNIT = "per_unit"  # literal whole-unit loop


class TaxAnchor(str, Enum):
    """Where the "already earned this year" running total starts."""

    FISCAL_YEAR = "fiscal_year"
    WINDOW = "window"


class ErrorMode(str, Enum):
    """What the aggregator does with an invalid record."""

    FAIL = "fail"
    SKIP = "skip"


class MonthStep(str, Enum):
    """How a billing date on a day the next month lacks (29th-31st) moves forward."""

    ROLLOVER = "rollover"  # overflow days spill into the following month: Jan 31 -> Mar 3
    CLAMP = "clamp"  # pinned to the start day, clamped to month end: Jan 31 -> Feb 28 -> Mar 31


class TaxBand(BaseModel):
    """A slice of cumulative income taxed at one rate.

    The band covers ``floor < income <= ceiling``; ``ceiling=None`` is open-ended.
    """

    model_config = ConfigDict(frozen=True)

    floor: Decimal = Field(default=Decimal("0"), ge=0)
    ceiling: Decimal | None = None
    rate: Decimal = Field(ge=0, le=1)

    @model_validator(mode="after")
    def _check_range(self) -> TaxBand:
        if self.ceiling is not None and self.ceiling <= self.floor:
            raise ValueError(f"band ceiling {self.ceiling} must exceed floor {self.floor}")
        return self

    def contains(self, income: Decimal) -> bool:
        if income <= self.floor:
            return False
        return self.ceiling is None or income <= self.ceiling


def _bands(*rows: tuple[str, str | None, str]) -> list[TaxBand]:
    return [
        TaxBand(
            floor=Decimal(lo),
            ceiling=Decimal(hi) if hi is not None else None,
            rate=Decimal(rate),
        )
        for lo, hi, rate in rows
    ]


# England 2024/2025
DEFAULT_INCOME_TAX_BANDS = _bands(
    ("0", "12570", "0"),
    ("12570", "50270", "0.20"),
    ("50270", "125140", "0.40"),
    ("125140", None, "0.45"),
)

# Class 4 National Insurance 2024/2025
DEFAULT_SOCIAL_CONTRIBUTION_BANDS = _bands(
    ("0", "12570", "0"),
    ("12570", "50270", "0.06"),
    ("50270", None, "0.02"),
)

# 43000 salary plus 8%
DEFAULT_BASELINE_INCOME = Decimal("46440")


class CalendarConfig(BaseModel):
    """Fiscal-year cutover. Defaults to the UK tax year (6 April)."""

    start_month: int = Field(default=4, ge=1, le=12)
    start_day: int = Field(default=6, ge=1, le=28, description="Kept <= 28 so every year has the day")
    month_step: MonthStep = Field(
        default=MonthStep.ROLLOVER,
        description="Billing-date stepping for subscriptions started on the 29th-31st",
    )


class TaxConfig(BaseModel):
    """Progressive tax and social-contribution model."""

    baseline_income: Decimal = Field(
        default=DEFAULT_BASELINE_INCOME,
        ge=0,
        description="Non-freelance income (e.g. salary) earned in every fiscal year",
    )
    income_tax_bands: list[TaxBand] = Field(default_factory=lambda: list(DEFAULT_INCOME_TAX_BANDS))
    social_contribution_bands: list[TaxBand] = Field(
        default_factory=lambda: list(DEFAULT_SOCIAL_CONTRIBUTION_BANDS)
    )
    method: TaxMethod = TaxMethod.INTEGRAL
    anchor: TaxAnchor = TaxAnchor.FISCAL_YEAR

    @field_validator("income_tax_bands", "social_contribution_bands")
    @classmethod
    def _check_ordering(cls, bands: list[TaxBand]) -> list[TaxBand]:
        for prev, band in zip(bands, bands[1:]):
            if prev.ceiling is None or band.floor < prev.ceiling:
                raise ValueError("bands must be ordered and must not overlap")
        return bands


class FeeConfig(BaseModel):
    """Payment-processing fee used for per-invoice take-home figures."""

    percentage: Decimal = Field(default=Decimal("0.025"), ge=0, le=1)
    fixed: Decimal = Field(default=Decimal("0.20"), ge=0)
    waive_above: Decimal | None = Field(
        default=Decimal("50"),
        description="Fees larger than this are treated as waived (0)",
    )


class ConnectorConfig(BaseModel):
    """Configuration for a single record source."""

    type: str = Field(description="Connector type: file, or a dotted class path")
    enabled: bool = True
    credentials: dict[str, Any] = Field(default_factory=dict)
    options: dict[str, Any] = Field(default_factory=dict)


class TaxCentreConfig(BaseModel):
    """Root configuration for taxcentre."""

    calendar: CalendarConfig = Field(default_factory=CalendarConfig)
    tax: TaxConfig = Field(default_factory=TaxConfig)
    fees: FeeConfig = Field(default_factory=FeeConfig)
    connectors: list[ConnectorConfig] = Field(default_factory=list)
    error_mode: ErrorMode = ErrorMode.FAIL

    # Output settings
    currency: str = Field(default="GBP")
    locale: str = Field(default="en_GB")

    @classmethod
    def load(cls, config_path: str | None = None, **overrides: Any) -> TaxCentreConfig:
        """Load configuration from file, env vars, and overrides.

        Priority: overrides > env vars > config file > defaults.
        """
        data: dict[str, Any] = {}

        # 1. Load from YAML file if provided
        if config_path:
            path = Path(config_path)
            if path.exists():
                with open(path) as f:
                    data = yaml.safe_load(f) or {}

        # 2. Override from environment variables
        env_baseline = os.environ.get("TAXCENTRE_BASELINE_INCOME")
        env_anchor = os.environ.get("TAXCENTRE_TAX_ANCHOR")
        env_mode = os.environ.get("TAXCENTRE_ERROR_MODE")
        env_currency = os.environ.get("TAXCENTRE_CURRENCY")

        if env_baseline or env_anchor:
            tax = data.get("tax", {})
            if env_baseline:
                tax["baseline_income"] = env_baseline
            if env_anchor:
                tax["anchor"] = env_anchor.lower()
            data["tax"] = tax

        if env_mode:
            data["error_mode"] = env_mode.lower()
        if env_currency:
            data["currency"] = env_currency.upper()

        # 3. Apply keyword overrides
        data.update(overrides)

        return cls.model_validate(data)
