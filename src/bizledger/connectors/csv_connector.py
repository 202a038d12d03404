"""
CSV Connector — import cash-book records from CSV files.

The simplest way to get started: any CSV with a date column and inflow /
outflow columns (or a single signed amount column) works.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import pandas as pd

from bizledger.connectors.base import BaseConnector
from bizledger.connectors.normalize import coerce_amount, records_to_transactions
from bizledger.models.financial import LedgerDataset

logger = logging.getLogger("bizledger.connectors.csv")

# Lowercased header variants per record field, most common first
_COLUMN_ALIASES: dict[str, list[str]] = {
    "date": ["date", "transaction_date", "txn_date", "posted_date", "posting_date", "trans_date"],
    "details": ["details", "description", "memo", "narrative", "note", "reference", "desc"],
    "inflow": ["inflow", "credit", "money_in", "deposit", "receipts"],
    "outflow": ["outflow", "debit", "money_out", "withdrawal", "payments"],
    "amount": ["amount", "net_amount", "value", "total"],
    "currency": ["currency", "currency_code", "ccy"],
    "payment_method": ["payment_method", "paymentmethod", "method", "channel"],
    "id": ["id", "record_id", "reference_id"],
}


def detect_columns(columns: Iterable[str]) -> dict[str, str]:
    """Map record fields to the first matching column name."""
    available = set(columns)
    col_map: dict[str, str] = {}
    for field, aliases in _COLUMN_ALIASES.items():
        match = next((a for a in aliases if a in available), None)
        if match is not None:
            col_map[field] = match
    return col_map


class CSVConnector(BaseConnector):
    """Import cash-book records from CSV files.

    Usage::

        connector = CSVConnector(file_path="records.csv")
        dataset = await connector.pull()

    Column names are matched case-insensitively against common aliases. A
    single signed ``amount`` column is split into inflow (positive) and
    outflow (negative) when no inflow / outflow columns exist.
    """

    name = "csv"
    description = "Import cash-book records from CSV files"

    def __init__(
        self,
        credentials: dict[str, Any] | None = None,
        file_path: str | None = None,
        **options: Any,
    ) -> None:
        super().__init__(credentials, **options)
        # explicit argument, then options, then credentials
        self.file_path = file_path or options.get("file_path") or self.credentials.get("file_path", "")
        self.encoding = options.get("encoding", "utf-8")
        self.delimiter = options.get("delimiter", ",")

    async def pull(self) -> LedgerDataset:
        """Read and parse the CSV file into a LedgerDataset."""
        path = Path(self.file_path)
        if not path.exists():
            raise FileNotFoundError(f"CSV file not found: {self.file_path}")

        df = pd.read_csv(path, encoding=self.encoding, delimiter=self.delimiter, dtype=str)
        df.columns = df.columns.str.strip().str.lower()

        col_map = detect_columns(df.columns)
        if "date" not in col_map:
            logger.warning("CSV %s has no date column", path.name)
            return LedgerDataset(source=f"csv:{path.name}")

        records = self._to_records(df, col_map)
        transactions = records_to_transactions(records, self.numeric_policy)

        dataset = LedgerDataset.from_transactions(transactions, source=f"csv:{path.name}")

        skipped = len(records) - len(transactions)
        if skipped:
            logger.warning("Skipped %d unreadable rows in %s", skipped, path.name)
        logger.info("Parsed %d transactions from %s", len(transactions), path.name)
        return dataset

    async def validate_credentials(self) -> bool:
        """True when the CSV file exists."""
        return Path(self.file_path).is_file()

    def _to_records(self, df: pd.DataFrame, col_map: dict[str, str]) -> list[dict[str, Any]]:
        """Rename columns to record fields, splitting a signed amount if needed."""
        split_amount = "amount" in col_map and "inflow" not in col_map and "outflow" not in col_map
        fields = [f for f in col_map if f != "amount" or split_amount]

        subset = df[[col_map[f] for f in fields]].rename(columns={col_map[f]: f for f in fields})
        records = subset.astype(object).where(subset.notna(), None).to_dict(orient="records")

        if split_amount:
            for i, record in enumerate(records):
                amount = coerce_amount(record.pop("amount"), self.numeric_policy, field="amount", index=i)
                record["inflow"] = amount if amount > 0 else 0.0
                record["outflow"] = -amount if amount < 0 else 0.0
        return records
