"""Connectors package — record sources."""
from taxcentre.connectors.base import BaseConnector
from taxcentre.connectors.file_connector import FileConnector
from taxcentre.connectors.registry import ConnectorRegistry

__all__ = [
    "BaseConnector",
    "ConnectorRegistry",
    "FileConnector",
]
