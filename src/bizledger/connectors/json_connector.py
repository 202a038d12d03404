"""
JSON Connector — records exported from the document store, or handed over in memory.

Accepts either a JSON file holding a list of record documents (optionally
wrapped as ``{"records": [...]}``) or a ``records`` list passed directly, e.g.
documents the application already fetched.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from bizledger.connectors.base import BaseConnector
from bizledger.connectors.normalize import records_to_transactions
from bizledger.models.financial import LedgerDataset

logger = logging.getLogger("bizledger.connectors.json")


class JSONConnector(BaseConnector):
    """Load cash-book records from JSON documents.

    Usage::

        connector = JSONConnector(file_path="financialRecords.json")
        dataset = await connector.pull()

        connector = JSONConnector(records=[{"date": "2024-01-05", "inflow": 100}])
    """

    name = "json"
    description = "Load records from a JSON export or an in-memory list"

    def __init__(
        self,
        credentials: dict[str, Any] | None = None,
        file_path: str | None = None,
        records: list[Mapping[str, Any]] | None = None,
        **options: Any,
    ) -> None:
        super().__init__(credentials, **options)
        creds = credentials or {}
        self.file_path = file_path or options.get("file_path") or creds.get("file_path", "")
        self.records = records if records is not None else options.get("records")
        self.encoding = options.get("encoding", "utf-8")

    async def pull(self) -> LedgerDataset:
        """Normalise the records into a LedgerDataset."""
        if self.records is not None:
            raw_records = list(self.records)
            source = "json:memory"
        else:
            path = Path(self.file_path)
            if not path.exists():
                raise FileNotFoundError(f"JSON file not found: {self.file_path}")
            raw_records = self._read_file(path)
            source = f"json:{path.name}"

        transactions = records_to_transactions(raw_records, self.numeric_policy)
        dataset = LedgerDataset.from_transactions(transactions, source=source)

        logger.info("Loaded %d of %d records from %s", len(transactions), len(raw_records), source)
        return dataset

    async def validate_credentials(self) -> bool:
        if self.records is not None:
            return True
        path = Path(self.file_path)
        return path.exists() and path.is_file()

    def _read_file(self, path: Path) -> list[Mapping[str, Any]]:
        with open(path, encoding=self.encoding) as f:
            data = json.load(f)

        if isinstance(data, Mapping):
            data = data.get("records", [])
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of records in {path.name}")
        return [r for r in data if isinstance(r, Mapping)]
