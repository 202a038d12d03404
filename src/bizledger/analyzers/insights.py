"""
Summary insights — short, human-readable observations about an aggregation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from bizledger.analyzers.aggregator import FALLBACK_PAYMENT_METHOD, AggregationResult
from bizledger.analyzers.currency import format_currency

logger = logging.getLogger("bizledger.analyzers.insights")


@dataclass
class Insight:
    """One observation shown next to a summary."""

    kind: str  # "positive", "negative", "info"
    title: str
    description: str
    value: float | None = None


def generate_insights(result: AggregationResult) -> list[Insight]:
    """Derive insights from an aggregation. Empty input gives no insights."""
    if result.transaction_count == 0:
        return []

    currency = result.report_currency
    insights: list[Insight] = []

    net = result.net
    insights.append(
        Insight(
            kind="positive" if net >= 0 else "negative",
            title="Profitable Period" if net >= 0 else "Deficit Period",
            description=f"Net {'surplus' if net >= 0 else 'deficit'} of {format_currency(abs(net), currency)}",
            value=net,
        )
    )

    # Ties keep the earliest period
    best = None
    for bucket in result.buckets:
        if best is None or bucket.net > best.net:
            best = bucket
    if best is not None:
        insights.append(
            Insight(
                kind="info",
                title=f"Best {result.granularity.value.capitalize()}",
                description=f"{best.period_key} with {format_currency(best.net, currency)} net",
                value=best.net,
            )
        )

    inflow_count = sum(1 for b in result.buckets for t in b.transactions if t.inflow > 0)
    avg_inflow = result.total_inflow / (inflow_count or 1)
    insights.append(
        Insight(
            kind="info",
            title="Average Inflow",
            description=f"{format_currency(avg_inflow, currency)} per transaction",
            value=avg_inflow,
        )
    )

    method, count = FALLBACK_PAYMENT_METHOD, 0
    for name, used in result.payment_method_totals().items():
        if used > count:
            method, count = name, used
    insights.append(
        Insight(
            kind="info",
            title="Preferred Payment Method",
            description=f"{method} used in {count} transaction(s)",
            value=float(count),
        )
    )

    change = period_change(result)
    if change is not None:
        insights.append(
            Insight(
                kind="positive" if change >= 0 else "negative",
                title="Period Change",
                description=f"{'+' if change >= 0 else ''}{change:.1f}% from previous period",
                value=change,
            )
        )

    return insights


def period_change(result: AggregationResult) -> float | None:
    """Percent change in net between the two latest periods.

    None with fewer than two periods or when the earlier net is zero.
    """
    if len(result.buckets) < 2:
        return None
    ordered = sorted(result.buckets, key=lambda b: b.period_key)
    previous, current = ordered[-2], ordered[-1]
    if previous.net == 0:
        logger.debug("Skipping period change: %s has zero net", previous.period_key)
        return None
    return (current.net - previous.net) / abs(previous.net) * 100
