"""Tests for the file connector."""

import json
from decimal import Decimal
from pathlib import Path

import pytest
import yaml

from taxcentre.connectors.file_connector import FileConnector
from taxcentre.models.financial import ExpenseType, InvoiceStatus

SAMPLE = {
    "invoices": [
        {"id": "inv-1", "issue_date": "2023-05-01", "amount": 1000, "status": "paid", "invoice_number": "INV-001"},
        {"id": "inv-2", "issue_date": "2023-06-01", "amount": "250.50", "status": "sent", "due_date": "2023-07-01"},
    ],
    "expenses": [
        {"id": "exp-1", "name": "Keyboard", "amount": 200, "amount_gbp": 200, "start_date": "2023-05-10"},
        {
            "id": "exp-2",
            "name": "Figma",
            "amount": 15,
            "currency": "USD",
            "amount_gbp": 12,
            "type": "subscription",
            "billing_cycle": "monthly",
            "start_date": "2023-01-15",
            "attachments_count": 2,
        },
    ],
}


@pytest.fixture
def json_file(tmp_path: Path) -> str:
    file = tmp_path / "ledger.json"
    file.write_text(json.dumps(SAMPLE))
    return str(file)


@pytest.fixture
def yaml_file(tmp_path: Path) -> str:
    file = tmp_path / "ledger.yaml"
    file.write_text(yaml.dump(SAMPLE))
    return str(file)


class TestFileConnector:
    @pytest.mark.asyncio
    async def test_pull_json(self, json_file: str) -> None:
        snapshot = await FileConnector(file_path=json_file).pull()

        assert len(snapshot.invoices) == 2
        assert len(snapshot.expenses) == 2
        assert snapshot.source == "file:ledger.json"
        assert snapshot.invoices[0].status == InvoiceStatus.PAID
        assert snapshot.invoices[1].amount == Decimal("250.50")

    @pytest.mark.asyncio
    async def test_pull_yaml(self, yaml_file: str) -> None:
        snapshot = await FileConnector(file_path=yaml_file).pull()

        assert snapshot.source == "file:ledger.yaml"
        figma = snapshot.expenses[1]
        assert figma.type == ExpenseType.SUBSCRIPTION
        assert figma.base_amount == Decimal("12")

    @pytest.mark.asyncio
    async def test_custom_keys(self, tmp_path: Path) -> None:
        file = tmp_path / "export.json"
        file.write_text(json.dumps({"sales": SAMPLE["invoices"], "costs": []}))
        connector = FileConnector(file_path=str(file), invoices_key="sales", expenses_key="costs")
        snapshot = await connector.pull()
        assert len(snapshot.invoices) == 2
        assert snapshot.expenses == []

    @pytest.mark.asyncio
    async def test_missing_file(self) -> None:
        with pytest.raises(FileNotFoundError):
            await FileConnector(file_path="/nonexistent/ledger.json").pull()

    @pytest.mark.asyncio
    async def test_invalid_row_names_record(self, tmp_path: Path) -> None:
        file = tmp_path / "bad.json"
        file.write_text(json.dumps({"invoices": [{"id": "inv-9", "issue_date": "not a date", "amount": 1}]}))
        with pytest.raises(ValueError, match="inv-9"):
            await FileConnector(file_path=str(file)).pull()

    @pytest.mark.asyncio
    async def test_non_object_file(self, tmp_path: Path) -> None:
        file = tmp_path / "list.json"
        file.write_text("[]")
        with pytest.raises(ValueError):
            await FileConnector(file_path=str(file)).pull()

    @pytest.mark.asyncio
    async def test_validate_credentials(self, json_file: str) -> None:
        assert await FileConnector(file_path=json_file).validate_credentials() is True
        assert await FileConnector(file_path="/nonexistent.json").validate_credentials() is False

    @pytest.mark.asyncio
    async def test_health_check(self, json_file: str) -> None:
        health = await FileConnector(file_path=json_file).health_check()
        assert health == {"connector": "file", "healthy": True, "error": None}

    def test_file_path_from_options(self) -> None:
        connector = FileConnector(credentials={}, **{"file_path": "ledger.json"})
        assert connector.file_path == "ledger.json"
