"""Tests for configuration management."""

from decimal import Decimal
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from taxcentre.config import (
    CalendarConfig,
    ErrorMode,
    MonthStep,
    TaxAnchor,
    TaxBand,
    TaxCentreConfig,
    TaxConfig,
    TaxMethod,
)


class TestConfig:
    def test_default_config(self) -> None:
        config = TaxCentreConfig()
        assert config.calendar.start_month == 4
        assert config.calendar.start_day == 6
        assert config.tax.baseline_income == Decimal("46440")
        assert config.tax.method == TaxMethod.INTEGRAL
        assert config.tax.anchor == TaxAnchor.FISCAL_YEAR
        assert config.error_mode == ErrorMode.FAIL
        assert config.calendar.month_step == MonthStep.ROLLOVER
        assert config.currency == "GBP"
        assert len(config.tax.income_tax_bands) == 4
        assert len(config.tax.social_contribution_bands) == 3

    def test_load_from_yaml(self, tmp_path: Path) -> None:
        yaml_content = {
            "calendar": {"start_month": 1, "start_day": 1, "month_step": "clamp"},
            "tax": {
                "baseline_income": 0,
                "anchor": "window",
                "income_tax_bands": [
                    {"floor": 0, "ceiling": 10000, "rate": 0},
                    {"floor": 10000, "rate": "0.25"},
                ],
            },
            "connectors": [{"type": "file", "options": {"file_path": "ledger.json"}}],
        }
        config_file = tmp_path / "taxcentre.yaml"
        config_file.write_text(yaml.dump(yaml_content))

        config = TaxCentreConfig.load(str(config_file))
        assert config.calendar.start_month == 1
        assert config.calendar.month_step == MonthStep.CLAMP
        assert config.tax.baseline_income == 0
        assert config.tax.anchor == TaxAnchor.WINDOW
        assert config.tax.income_tax_bands[1].ceiling is None
        assert config.tax.income_tax_bands[1].rate == Decimal("0.25")
        assert len(config.connectors) == 1

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        config = TaxCentreConfig.load(str(tmp_path / "absent.yaml"))
        assert config == TaxCentreConfig()

    def test_load_with_overrides(self) -> None:
        config = TaxCentreConfig.load(None, currency="EUR", error_mode="skip")
        assert config.currency == "EUR"
        assert config.error_mode == ErrorMode.SKIP

    def test_env_var_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TAXCENTRE_BASELINE_INCOME", "30000")
        monkeypatch.setenv("TAXCENTRE_TAX_ANCHOR", "WINDOW")
        monkeypatch.setenv("TAXCENTRE_ERROR_MODE", "skip")
        monkeypatch.setenv("TAXCENTRE_CURRENCY", "usd")

        config = TaxCentreConfig.load()
        assert config.tax.baseline_income == Decimal("30000")
        assert config.tax.anchor == TaxAnchor.WINDOW
        assert config.error_mode == ErrorMode.SKIP
        assert config.currency == "USD"

    def test_overrides_beat_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TAXCENTRE_CURRENCY", "USD")
        assert TaxCentreConfig.load(currency="GBP").currency == "GBP"


class TestValidation:
    def test_band_ceiling_must_exceed_floor(self) -> None:
        with pytest.raises(ValidationError):
            TaxBand(floor=Decimal("100"), ceiling=Decimal("100"), rate=Decimal("0.2"))

    def test_rate_bounds(self) -> None:
        with pytest.raises(ValidationError):
            TaxBand(floor=0, ceiling=10, rate=Decimal("1.5"))

    def test_overlapping_bands_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TaxConfig(
                income_tax_bands=[
                    TaxBand(floor=0, ceiling=1000, rate=0),
                    TaxBand(floor=500, rate=Decimal("0.2")),
                ]
            )

    def test_open_band_must_be_last(self) -> None:
        with pytest.raises(ValidationError):
            TaxConfig(
                income_tax_bands=[
                    TaxBand(floor=0, rate=0),
                    TaxBand(floor=1000, rate=Decimal("0.2")),
                ]
            )

    def test_negative_baseline_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TaxConfig(baseline_income=Decimal("-1"))

    def test_start_day_limited(self) -> None:
        with pytest.raises(ValidationError):
            CalendarConfig(start_day=30)

    def test_band_contains(self) -> None:
        band = TaxBand(floor=Decimal("12570"), ceiling=Decimal("50270"), rate=Decimal("0.2"))
        assert not band.contains(Decimal("12570"))
        assert band.contains(Decimal("12570.01"))
        assert band.contains(Decimal("50270"))
        assert not band.contains(Decimal("50270.01"))
