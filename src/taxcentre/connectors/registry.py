"""
Connector Registry — discovers and manages record sources.

Supports auto-discovery from config and manual registration of custom connectors.
"""

from __future__ import annotations

import asyncio
import importlib
import logging

from taxcentre.config import ConnectorConfig, TaxCentreConfig
from taxcentre.connectors.base import BaseConnector
from taxcentre.models.financial import LedgerSnapshot

logger = logging.getLogger("taxcentre.connectors.registry")

# Built-in connector type mapping
_BUILTIN_CONNECTORS: dict[str, str] = {
    "file": "taxcentre.connectors.file_connector.FileConnector",
    "json": "taxcentre.connectors.file_connector.FileConnector",
    "yaml": "taxcentre.connectors.file_connector.FileConnector",
}


class ConnectorRegistry:
    """Manages all active record sources.

    Supports:
    - Auto-discovery from config file.
    - Manual registration of custom connectors.
    - Plugin-style connector loading by dotted class path.
    """

    def __init__(self) -> None:
        self._connectors: dict[str, BaseConnector] = {}

    def __len__(self) -> int:
        return len(self._connectors)

    @property
    def active_connectors(self) -> list[BaseConnector]:
        """Return all active connectors."""
        return list(self._connectors.values())

    def register(self, connector: BaseConnector, key: str | None = None) -> None:
        """Register a connector instance."""
        key = key or connector.name
        if key in self._connectors:
            key = f"{key}:{len(self._connectors)}"
        self._connectors[key] = connector
        logger.info("Registered connector: %s", key)

    def get(self, name: str) -> BaseConnector | None:
        """Get a connector by name."""
        return self._connectors.get(name)

    def auto_discover(self, config: TaxCentreConfig) -> None:
        """Auto-discover and register connectors from config."""
        for conn_config in config.connectors:
            if not conn_config.enabled:
                continue
            connector = self._create_connector(conn_config)
            if connector:
                self.register(connector)

    async def pull_all(self) -> LedgerSnapshot:
        """Pull every connector concurrently and merge the snapshots."""
        snapshots = await asyncio.gather(*(c.pull() for c in self.active_connectors))
        merged = LedgerSnapshot()
        for snapshot in snapshots:
            merged = merged.merge(snapshot)
        return merged

    def _create_connector(self, config: ConnectorConfig) -> BaseConnector | None:
        """Instantiate a connector from config."""
        connector_path = _BUILTIN_CONNECTORS.get(config.type)
        if not connector_path:
            # Try loading as a fully qualified class path (plugin support)
            connector_path = config.type

        try:
            module_path, class_name = connector_path.rsplit(".", 1)
            module = importlib.import_module(module_path)
            connector_cls = getattr(module, class_name)
            return connector_cls(credentials=config.credentials, **config.options)
        except (ImportError, AttributeError, ValueError) as e:
            logger.error("Cannot load connector '%s': %s", config.type, e)
            return None
