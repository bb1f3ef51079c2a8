"""Tests for the connector registry."""

import pytest

from taxcentre.config import ConnectorConfig, TaxCentreConfig
from taxcentre.connectors.base import BaseConnector
from taxcentre.connectors.file_connector import FileConnector
from taxcentre.connectors.registry import ConnectorRegistry
from taxcentre.models.financial import Expense, LedgerSnapshot


class MockConnector(BaseConnector):
    """A simple mock connector for testing."""

    name = "mock"
    description = "Mock connector"

    async def pull(self) -> LedgerSnapshot:
        return LedgerSnapshot(expenses=[Expense(id="e1", name="Mock")], source="mock")

    async def validate_credentials(self) -> bool:
        return True


class TestConnectorRegistry:
    def test_register_connector(self) -> None:
        registry = ConnectorRegistry()
        connector = MockConnector()
        registry.register(connector)

        assert len(registry) == 1
        assert registry.get("mock") is connector

    def test_duplicate_names_are_kept(self) -> None:
        registry = ConnectorRegistry()
        registry.register(MockConnector())
        registry.register(MockConnector())

        assert len(registry.active_connectors) == 2

    def test_get_nonexistent(self) -> None:
        assert ConnectorRegistry().get("nonexistent") is None

    def test_auto_discover_file(self) -> None:
        config = TaxCentreConfig(
            connectors=[ConnectorConfig(type="file", options={"file_path": "ledger.json"})]
        )
        registry = ConnectorRegistry()
        registry.auto_discover(config)

        connector = registry.get("file")
        assert isinstance(connector, FileConnector)
        assert connector.file_path == "ledger.json"

    def test_auto_discover_skips_disabled(self) -> None:
        config = TaxCentreConfig(connectors=[ConnectorConfig(type="file", enabled=False)])
        registry = ConnectorRegistry()
        registry.auto_discover(config)
        assert len(registry) == 0

    def test_auto_discover_plugin_path(self) -> None:
        config = TaxCentreConfig(connectors=[ConnectorConfig(type=f"{__name__}.MockConnector")])
        registry = ConnectorRegistry()
        registry.auto_discover(config)
        assert isinstance(registry.get("mock"), MockConnector)

    def test_unknown_connector_is_skipped(self) -> None:
        config = TaxCentreConfig(connectors=[ConnectorConfig(type="nonexistent_connector_type")])
        registry = ConnectorRegistry()
        registry.auto_discover(config)
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_pull_all_merges(self) -> None:
        registry = ConnectorRegistry()
        registry.register(MockConnector())
        registry.register(MockConnector())

        snapshot = await registry.pull_all()
        assert len(snapshot.expenses) == 2
        assert snapshot.source == "mock+mock"

    @pytest.mark.asyncio
    async def test_pull_all_empty(self) -> None:
        snapshot = await ConnectorRegistry().pull_all()
        assert snapshot.invoices == []
        assert snapshot.expenses == []
