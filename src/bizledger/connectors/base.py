"""
Base connector — abstract interface for all record sources.

Connectors are the bridge between BizLedger and wherever cash-book records
live: spreadsheet exports, document-store dumps, or lists already fetched by
the application. They normalise records into a LedgerDataset.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from bizledger.connectors.normalize import NumericPolicy

if TYPE_CHECKING:
    from bizledger.models.financial import LedgerDataset


class BaseConnector(ABC):
    """Abstract base class for all record connectors.

    To create a new connector, subclass this and implement:
    - `name`: Unique connector identifier.
    - `pull()`: Async method that returns a LedgerDataset.
    - `validate_credentials()`: Check the source is reachable.

    Example::

        class SheetConnector(BaseConnector):
            name = "sheet"

            async def pull(self) -> LedgerDataset:
                rows = await fetch_rows()
                return LedgerDataset(transactions=records_to_transactions(rows))

            async def validate_credentials(self) -> bool:
                return True
    """

    name: str = "base"
    description: str = "Base connector"

    def __init__(self, credentials: dict[str, Any] | None = None, **options: Any) -> None:
        self.credentials = credentials or {}
        self.options = options
        self.numeric_policy = NumericPolicy(options.get("numeric_policy", NumericPolicy.LENIENT))

    @abstractmethod
    async def pull(self) -> LedgerDataset:
        """Pull records from the source.

        Returns:
            Normalized LedgerDataset.
        """
        ...

    @abstractmethod
    async def validate_credentials(self) -> bool:
        """Validate that the source is accessible."""
        ...

    async def health_check(self) -> dict[str, Any]:
        """Report whether the source is reachable, without raising."""
        status: dict[str, Any] = {"connector": self.name, "healthy": False, "error": None}
        try:
            status["healthy"] = await self.validate_credentials()
        except Exception as e:  # noqa: BLE001
            status["error"] = str(e)
        return status
