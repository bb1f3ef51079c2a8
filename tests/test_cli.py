"""Tests for the command-line interface."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from taxcentre import __version__
from taxcentre.cli import app

runner = CliRunner()

LEDGER = {
    "invoices": [{"id": "inv-1", "issue_date": "2023-05-01", "amount": 1000, "status": "paid"}],
    "expenses": [
        {"id": "exp-1", "name": "Keyboard", "amount_gbp": 200, "start_date": "2023-05-10"},
        {"id": "exp-2", "name": "Undated", "amount_gbp": 10},
    ],
}


@pytest.fixture
def ledger(tmp_path: Path) -> str:
    file = tmp_path / "ledger.json"
    file.write_text(json.dumps(LEDGER))
    return str(file)


class TestCli:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_invoice_tax(self) -> None:
        result = runner.invoke(app, ["invoice-tax", "--amount", "1000"])
        assert result.exit_code == 0
        assert "£200.00" in result.output
        assert "£60.00" in result.output

    def test_invoice_tax_rejects_text(self) -> None:
        result = runner.invoke(app, ["invoice-tax", "--amount", "lots"])
        assert result.exit_code == 1

    def test_invoice_tax_negative(self) -> None:
        result = runner.invoke(app, ["invoice-tax", "--amount=-5"])
        assert result.exit_code == 1
        assert "negative" in result.output

    def test_summary_fails_on_invalid_record(self, ledger: str) -> None:
        result = runner.invoke(app, ["summary", "--data", ledger, "--tax-year", "2023/2024"])
        assert result.exit_code == 1
        assert "exp-2" in result.output

    def test_summary_skip_invalid(self, ledger: str, tmp_path: Path) -> None:
        output = tmp_path / "summary.md"
        result = runner.invoke(
            app,
            ["summary", "--data", ledger, "--tax-year", "2023/2024", "--skip-invalid", "--output", str(output)],
        )
        assert result.exit_code == 0
        assert "£1,000.00" in result.output
        assert "Skipped expense exp-2" in result.output
        assert "£540.00" in output.read_text()

    def test_summary_json_output(self, ledger: str, tmp_path: Path) -> None:
        output = tmp_path / "summary.json"
        result = runner.invoke(
            app,
            ["summary", "-d", ledger, "-y", "2023/2024", "--skip-invalid", "-o", str(output)],
        )
        assert result.exit_code == 0
        assert json.loads(output.read_text())["window"]["label"] == "2023/2024"

    def test_summary_bad_label(self, ledger: str) -> None:
        result = runner.invoke(app, ["summary", "--data", ledger, "--tax-year", "2023"])
        assert result.exit_code == 1
        assert "Invalid fiscal-year label" in result.output

    def test_summary_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["summary", "--data", str(tmp_path / "absent.json")])
        assert result.exit_code == 1

    def test_years(self, ledger: str) -> None:
        result = runner.invoke(app, ["years", "--data", ledger])
        assert result.exit_code == 0
        assert "2023/2024" in result.output

    def test_outgoings(self, tmp_path: Path) -> None:
        file = tmp_path / "ledger.json"
        file.write_text(json.dumps({"expenses": [LEDGER["expenses"][0]]}))
        result = runner.invoke(app, ["outgoings", "--data", str(file)])
        assert result.exit_code == 0
        assert "Total Spend" in result.output
        assert "£200.00" in result.output

    def test_outgoings_fails_on_invalid_record(self, ledger: str) -> None:
        result = runner.invoke(app, ["outgoings", "--data", ledger])
        assert result.exit_code == 1
        assert "exp-2" in result.output

    def test_outgoings_skip_invalid(self, ledger: str) -> None:
        result = runner.invoke(app, ["outgoings", "--data", ledger, "--skip-invalid"])
        assert result.exit_code == 0
        assert "£200.00" in result.output
        assert "Skipped expense exp-2" in result.output
