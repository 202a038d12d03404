"""
Period Aggregator — group cash-book records by period with a running balance.

For a list of transactions and a granularity the aggregator produces:
1. **Period buckets** — inflow, outflow, net and transaction count per
   week / month / quarter / year.
2. **Running balance** — starting and ending balance of every bucket,
   carried forward in chronological order, plus the balance after each
   individual record.
3. **Global totals** — inflow and outflow over the whole input.
4. **Reporting currency** — the tag every amount above is expressed in.

Pure computation: no I/O and no caching. Results are rebuilt from scratch on
every call and the caller's list is never reordered.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from bizledger.analyzers.currency import resolve_currency
from bizledger.analyzers.periods import Granularity, WeeklyPolicy, period_key
from bizledger.models.financial import CurrencyTag, Transaction

logger = logging.getLogger("bizledger.analyzers.aggregator")

# Payment methods always reported, even with a zero count.
DEFAULT_PAYMENT_METHODS: tuple[str, ...] = ("Cash", "Bank")
FALLBACK_PAYMENT_METHOD = "Cash"


def _money(value: float) -> Decimal:
    # str() keeps 0.1 as 0.1 instead of its binary expansion
    amount = Decimal(str(value))
    if not amount.is_finite():
        logger.debug("Treating non-finite amount %r as 0", value)
        return Decimal("0")
    return amount


@dataclass
class PeriodBucket:
    """Records that share one period key."""

    period_key: str
    currency: CurrencyTag
    starting_balance: float = 0.0
    ending_balance: float = 0.0
    total_inflow: float = 0.0
    total_outflow: float = 0.0
    transactions: list[Transaction] = field(default_factory=list)
    balances: list[float] = field(default_factory=list)  # after each transaction
    payment_methods: dict[str, int] = field(
        default_factory=lambda: dict.fromkeys(DEFAULT_PAYMENT_METHODS, 0)
    )

    @property
    def net(self) -> float:
        return float(_money(self.total_inflow) - _money(self.total_outflow))

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)

    def entries(self) -> list[tuple[Transaction, float]]:
        """Each transaction paired with the running balance after it."""
        return list(zip(self.transactions, self.balances))


@dataclass
class AggregationResult:
    """Buckets in chronological order plus global totals."""

    granularity: Granularity
    weekly_policy: WeeklyPolicy
    report_currency: CurrencyTag
    buckets: list[PeriodBucket] = field(default_factory=list)
    total_inflow: float = 0.0
    total_outflow: float = 0.0
    transaction_count: int = 0

    @property
    def net(self) -> float:
        return float(_money(self.total_inflow) - _money(self.total_outflow))

    @property
    def closing_balance(self) -> float:
        return self.buckets[-1].ending_balance if self.buckets else 0.0

    @property
    def is_empty(self) -> bool:
        return not self.buckets

    def get(self, key: str) -> PeriodBucket | None:
        for bucket in self.buckets:
            if bucket.period_key == key:
                return bucket
        return None

    def display_order(self) -> list[PeriodBucket]:
        """Most recent period first."""
        return sorted(self.buckets, key=lambda b: b.period_key, reverse=True)

    def chart_series(self) -> list[dict[str, Any]]:
        """Chronological points for inflow / outflow / net charts."""
        return [
            {
                "period": b.period_key,
                "inflow": b.total_inflow,
                "outflow": b.total_outflow,
                "net": b.net,
            }
            for b in sorted(self.buckets, key=lambda b: b.period_key)
        ]

    def payment_method_totals(self) -> dict[str, int]:
        totals = dict.fromkeys(DEFAULT_PAYMENT_METHODS, 0)
        for bucket in self.buckets:
            for method, count in bucket.payment_methods.items():
                totals[method] = totals.get(method, 0) + count
        return totals


def filter_transactions(
    transactions: Iterable[Transaction],
    *,
    search: str | None = None,
    start: date | None = None,
    end: date | None = None,
) -> list[Transaction]:
    """Keep records matching every given filter.

    Args:
        search: Case-insensitive substring of ``details``.
        start: First day included.
        end: Last day included.
    """
    needle = search.strip().lower() if search else ""
    kept: list[Transaction] = []
    for txn in transactions:
        if needle and needle not in txn.details.lower():
            continue
        if start is not None and txn.date < start:
            continue
        if end is not None and txn.date > end:
            continue
        kept.append(txn)
    return kept


class PeriodAggregator:
    """Summarise transactions into period buckets.

    Usage::

        aggregator = PeriodAggregator(default_currency=usd)
        result = aggregator.aggregate(transactions, Granularity.QUARTERLY)
        for bucket in result.display_order():
            print(bucket.period_key, bucket.net, bucket.ending_balance)
    """

    def __init__(
        self,
        default_currency: CurrencyTag | None = None,
        weekly_policy: WeeklyPolicy | str | None = WeeklyPolicy.MONTH_RELATIVE,
    ) -> None:
        self.default_currency = resolve_currency(default_currency)
        self.weekly_policy = WeeklyPolicy.parse(weekly_policy)

    def report_currency(self, transactions: Sequence[Transaction]) -> CurrencyTag:
        """Currency of the first record, or the default."""
        first = transactions[0].currency if transactions else None
        return resolve_currency(first, self.default_currency)

    def aggregate(
        self,
        transactions: Iterable[Transaction],
        granularity: Granularity | str | None = Granularity.MONTHLY,
        *,
        weekly_policy: WeeklyPolicy | str | None = None,
    ) -> AggregationResult:
        """Group ``transactions`` into buckets and carry the balance forward.

        Args:
            transactions: Records already filtered by the caller.
            granularity: Bucket width; ``None`` means monthly.
            weekly_policy: Overrides the aggregator's weekly scheme for this call.

        Returns:
            AggregationResult with buckets in chronological order.
        """
        records = list(transactions)
        gran = Granularity.parse(granularity)
        policy = self.weekly_policy if weekly_policy is None else WeeklyPolicy.parse(weekly_policy)
        currency = self.report_currency(records)

        # sorted() returns a new list and is stable for same-day records
        ordered = sorted(records, key=lambda t: t.date)

        buckets: dict[str, PeriodBucket] = {}
        inflows: dict[str, Decimal] = {}
        outflows: dict[str, Decimal] = {}
        running = Decimal("0")
        total_in = Decimal("0")
        total_out = Decimal("0")

        for txn in ordered:
            key = period_key(txn.date, gran, weekly_policy=policy)
            bucket = buckets.get(key)
            if bucket is None:
                bucket = PeriodBucket(
                    period_key=key,
                    currency=currency,
                    starting_balance=float(running),
                )
                buckets[key] = bucket
                inflows[key] = Decimal("0")
                outflows[key] = Decimal("0")

            inflow = _money(txn.inflow)
            outflow = _money(txn.outflow)
            running += inflow - outflow
            inflows[key] += inflow
            outflows[key] += outflow
            total_in += inflow
            total_out += outflow

            bucket.transactions.append(txn)
            bucket.balances.append(float(running))
            bucket.ending_balance = float(running)
            method = txn.payment_method or FALLBACK_PAYMENT_METHOD
            bucket.payment_methods[method] = bucket.payment_methods.get(method, 0) + 1

        for key, bucket in buckets.items():
            bucket.total_inflow = float(inflows[key])
            bucket.total_outflow = float(outflows[key])

        logger.debug(
            "Aggregated %d transactions into %d %s buckets",
            len(ordered),
            len(buckets),
            gran.value,
        )

        return AggregationResult(
            granularity=gran,
            weekly_policy=policy,
            report_currency=currency,
            buckets=list(buckets.values()),
            total_inflow=float(total_in),
            total_outflow=float(total_out),
            transaction_count=len(ordered),
        )


# Convenience function
def aggregate(
    transactions: Iterable[Transaction],
    granularity: Granularity | str | None = Granularity.MONTHLY,
    *,
    weekly_policy: WeeklyPolicy | str | None = WeeklyPolicy.MONTH_RELATIVE,
    default_currency: CurrencyTag | None = None,
) -> AggregationResult:
    """Quick aggregation with a throwaway :class:`PeriodAggregator`."""
    aggregator = PeriodAggregator(default_currency=default_currency, weekly_policy=weekly_policy)
    return aggregator.aggregate(transactions, granularity)
