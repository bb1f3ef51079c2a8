"""
Base connector — abstract interface for all record sources.

Connectors are the bridge between taxcentre and the stores that hold
invoices and expenses. They deliver a flat ``LedgerSnapshot``; the analyzers
never issue I/O themselves.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from taxcentre.models.financial import LedgerSnapshot


class BaseConnector(ABC):
    """Abstract base class for all record sources.

    To create a new connector, subclass this and implement:
    - `name`: Unique connector identifier.
    - `pull()`: Async method that returns a LedgerSnapshot.
    - `validate_credentials()`: Check if the source is reachable.

    Example::

        class SupabaseConnector(BaseConnector):
            name = "supabase"

            async def pull(self) -> LedgerSnapshot:
                # Query the invoices and expenses tables
                ...

            async def validate_credentials(self) -> bool:
                # Check API keys, etc.
                ...
    """

    name: str = "base"
    description: str = "Base connector"

    def __init__(self, credentials: dict[str, Any] | None = None, **options: Any) -> None:
        self.credentials = credentials or {}
        self.options = options

    @abstractmethod
    async def pull(self) -> LedgerSnapshot:
        """Load every invoice and expense from the source."""
        ...

    @abstractmethod
    async def validate_credentials(self) -> bool:
        """Validate that the source is accessible."""
        ...

    async def health_check(self) -> dict[str, Any]:
        """Check connector health and connectivity."""
        try:
            valid = await self.validate_credentials()
            return {"connector": self.name, "healthy": valid, "error": None}
        except Exception as e:
            return {"connector": self.name, "healthy": False, "error": str(e)}
