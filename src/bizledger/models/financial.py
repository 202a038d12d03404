"""
Financial data models — cash-book records, currency tags, datasets.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CurrencyTag(BaseModel):
    """How to label and format amounts in one currency."""

    model_config = ConfigDict(frozen=True)

    code: str
    symbol: str
    locale: str
    label: str | None = None


class Transaction(BaseModel):
    """A single cash-book line: money in, money out, or both."""

    id: str | None = None
    date: date
    details: str = ""
    inflow: float = 0.0
    outflow: float = 0.0
    currency: CurrencyTag | None = None
    payment_method: str | None = None
    raw_data: dict[str, Any] = Field(default_factory=dict, exclude=True)

    @property
    def net(self) -> float:
        return self.inflow - self.outflow

    @property
    def is_inflow(self) -> bool:
        return self.inflow > 0


class LedgerDataset(BaseModel):
    """Records loaded from one or more sources.

    This is what connectors produce and the aggregator consumes.
    """

    transactions: list[Transaction] = Field(default_factory=list)
    period_start: date | None = None
    period_end: date | None = None
    source: str = "unknown"
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def total_inflow(self) -> float:
        return sum(t.inflow for t in self.transactions)

    @property
    def total_outflow(self) -> float:
        return sum(t.outflow for t in self.transactions)

    @classmethod
    def from_transactions(cls, transactions: list[Transaction], source: str = "unknown") -> LedgerDataset:
        """Dataset whose period spans the given records."""
        dataset = cls(transactions=list(transactions), source=source)
        dataset._update_period()
        return dataset

    def extend(self, other: LedgerDataset) -> None:
        """Merge another dataset's records into this one."""
        self.transactions.extend(other.transactions)
        self._update_period()

    def _update_period(self) -> None:
        if self.transactions:
            self.period_start = min(t.date for t in self.transactions)
            self.period_end = max(t.date for t in self.transactions)
