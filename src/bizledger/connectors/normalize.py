"""
Record normalisation — turn raw document-store / CSV rows into Transactions.

Amounts are read under an explicit :class:`NumericPolicy`:

- ``lenient`` (default): anything that is not a number becomes ``0.0``, so
  one bad line never aborts a whole report. A date that cannot be parsed
  skips the record with a warning.
- ``strict``: either problem raises :class:`RecordValidationError`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any

import pandas as pd

from bizledger.analyzers.currency import currency_from_value
from bizledger.models.financial import CurrencyTag, Transaction

logger = logging.getLogger("bizledger.connectors.normalize")

# Field name variants seen in stored records, first match wins.
_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "date": ("date", "transaction_date", "txn_date", "posted_date"),
    "details": ("details", "description", "memo", "narrative", "note"),
    "inflow": ("inflow", "credit", "money_in", "income"),
    "outflow": ("outflow", "debit", "money_out", "expense"),
    "currency": ("currency", "currency_code"),
    "payment_method": ("payment_method", "paymentMethod", "method"),
    "id": ("id", "_id", "record_id"),
}


class NumericPolicy(str, Enum):
    """What to do with amounts that are not numbers."""

    LENIENT = "lenient"
    STRICT = "strict"


class RecordValidationError(ValueError):
    """A raw record could not be read under the strict policy."""

    def __init__(self, field: str, value: Any, index: int | None = None) -> None:
        self.field = field
        self.value = value
        self.index = index
        where = f"record {index}" if index is not None else "record"
        super().__init__(f"{where}: invalid {field} {value!r}")


def _pick(raw: Mapping[str, Any], field: str) -> Any:
    for alias in _FIELD_ALIASES[field]:
        if alias in raw:
            return raw[alias]
    return None


def _is_missing(value: Any) -> bool:
    if value is None or value is pd.NaT:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return isinstance(value, float) and math.isnan(value)


def coerce_amount(
    value: Any,
    policy: NumericPolicy = NumericPolicy.LENIENT,
    *,
    field: str = "amount",
    index: int | None = None,
) -> float:
    """Read an amount. Missing values are always ``0.0``.

    Strings may carry thousands separators (``"1,250.50"``). Under the
    lenient policy anything else unparseable is ``0.0``.
    """
    if _is_missing(value):
        return 0.0
    if isinstance(value, bool):
        value = int(value)
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).replace(",", "").strip())
        except ValueError:
            number = math.nan

    if math.isnan(number) or math.isinf(number):
        if policy == NumericPolicy.STRICT:
            raise RecordValidationError(field, value, index)
        logger.debug("Coercing non-numeric %s %r to 0", field, value)
        return 0.0
    return number


def parse_date(value: Any) -> date | None:
    """Read a calendar day from a date, datetime, timestamp or string."""
    if _is_missing(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            pass
        try:
            parsed = pd.to_datetime(text)
        except (ValueError, TypeError, OverflowError):
            return None
        return None if pd.isna(parsed) else parsed.date()
    return None


def record_to_transaction(
    raw: Mapping[str, Any],
    policy: NumericPolicy = NumericPolicy.LENIENT,
    *,
    index: int | None = None,
    default_currency: CurrencyTag | None = None,
) -> Transaction | None:
    """Build a Transaction from one raw record.

    Returns None when the record is skipped (lenient policy, bad date).
    ``default_currency`` is only applied when given; otherwise a record
    without a currency keeps ``currency=None`` and the aggregator decides.
    """
    raw_date = _pick(raw, "date")
    txn_date = parse_date(raw_date)
    if txn_date is None:
        if policy == NumericPolicy.STRICT:
            raise RecordValidationError("date", raw_date, index)
        logger.warning("Skipping record %s with unreadable date %r", index, raw_date)
        return None

    details = _pick(raw, "details")
    method = _pick(raw, "payment_method")
    record_id = _pick(raw, "id")
    currency = currency_from_value(_pick(raw, "currency")) or default_currency

    return Transaction(
        id=None if _is_missing(record_id) else str(record_id),
        date=txn_date,
        details="" if _is_missing(details) else str(details),
        inflow=coerce_amount(_pick(raw, "inflow"), policy, field="inflow", index=index),
        outflow=coerce_amount(_pick(raw, "outflow"), policy, field="outflow", index=index),
        currency=currency,
        payment_method=None if _is_missing(method) else str(method),
        raw_data=dict(raw),
    )


def records_to_transactions(
    records: Iterable[Mapping[str, Any]],
    policy: NumericPolicy = NumericPolicy.LENIENT,
    *,
    default_currency: CurrencyTag | None = None,
) -> list[Transaction]:
    """Normalise a batch of raw records, dropping skipped ones."""
    transactions: list[Transaction] = []
    for i, raw in enumerate(records):
        txn = record_to_transaction(raw, policy, index=i, default_currency=default_currency)
        if txn is not None:
            transactions.append(txn)
    return transactions
