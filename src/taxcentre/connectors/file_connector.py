"""
File Connector — load a ledger snapshot from a JSON or YAML export.

The file holds two flat lists, as exported from the record stores::

    {"invoices": [{"id": "...", "issue_date": "2023-05-01", "amount": 1000, "status": "paid"}],
     "expenses": [{"id": "...", "name": "Figma", "amount_gbp": 12, "type": "subscription", ...}]}

Unknown columns (attachment counts, entity ids, stored statuses) are ignored.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from taxcentre.connectors.base import BaseConnector
from taxcentre.models.financial import Expense, Invoice, LedgerSnapshot

logger = logging.getLogger("taxcentre.connectors.file")

_YAML_SUFFIXES = {".yaml", ".yml"}


class FileConnector(BaseConnector):
    """Load invoices and expenses from a JSON/YAML file.

    Usage::

        connector = FileConnector(file_path="ledger.json")
        snapshot = await connector.pull()
    """

    name = "file"
    description = "Load invoices and expenses from a JSON or YAML snapshot"

    def __init__(
        self,
        credentials: dict[str, Any] | None = None,
        file_path: str | None = None,
        **options: Any,
    ) -> None:
        super().__init__(credentials, **options)
        creds = credentials or {}
        self.file_path = file_path or options.get("file_path") or creds.get("file_path", "")
        self.invoices_key = options.get("invoices_key", "invoices")
        self.expenses_key = options.get("expenses_key", "expenses")
        self.encoding = options.get("encoding", "utf-8")

    async def pull(self) -> LedgerSnapshot:
        """Read and parse the snapshot file."""
        path = Path(self.file_path)
        if not path.exists():
            raise FileNotFoundError(f"Snapshot file not found: {self.file_path}")

        raw = self._read(path)
        invoices = self._parse_rows(raw.get(self.invoices_key) or [], Invoice, "invoice")
        expenses = self._parse_rows(raw.get(self.expenses_key) or [], Expense, "expense")

        logger.info(
            "Loaded %d invoices and %d expenses from %s", len(invoices), len(expenses), path.name
        )
        return LedgerSnapshot(invoices=invoices, expenses=expenses, source=f"file:{path.name}")

    async def validate_credentials(self) -> bool:
        """Check if the snapshot file exists and is readable."""
        path = Path(self.file_path)
        return path.exists() and path.is_file()

    def _read(self, path: Path) -> dict[str, Any]:
        text = path.read_text(encoding=self.encoding)
        if path.suffix.lower() in _YAML_SUFFIXES:
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"{path.name}: expected an object with invoice/expense lists")
        return data

    @staticmethod
    def _parse_rows(rows: list[dict[str, Any]], model: type, kind: str) -> list[Any]:
        parsed = []
        for i, row in enumerate(rows):
            try:
                parsed.append(model.model_validate(row))
            except ValidationError as e:
                raise ValueError(f"Invalid {kind} row {i} ({row.get('id', '<no id>')}): {e}") from e
        return parsed
