"""
Markdown summary exporter.

Generates a readable Markdown report from an AggregationResult, suitable for
GitHub, Notion, or any Markdown viewer.
"""

from __future__ import annotations

from bizledger.analyzers.aggregator import AggregationResult
from bizledger.analyzers.currency import format_currency
from bizledger.analyzers.insights import Insight

_INSIGHT_MARKERS = {"positive": "▲", "negative": "▼", "info": "•"}


def render_markdown(
    result: AggregationResult,
    insights: list[Insight] | None = None,
    *,
    title: str = "Financial Summary",
    include_transactions: bool = False,
) -> str:
    """Render an aggregation (and optional insights) as Markdown."""
    currency = result.report_currency

    def money(value: float) -> str:
        return format_currency(value, currency)

    lines: list[str] = []

    # Header
    lines.append(f"# {title}")
    lines.append("")
    lines.append(f"*Period: {result.granularity.value.capitalize()} · Currency: {currency.code}*")
    lines.append("")

    # Totals
    lines.append("## Totals")
    lines.append("")
    lines.append("| Metric | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| **Total Inflow** | {money(result.total_inflow)} |")
    lines.append(f"| **Total Outflow** | {money(result.total_outflow)} |")
    lines.append(f"| **Net** | {money(result.net)} |")
    lines.append(f"| **Transactions** | {result.transaction_count} |")
    lines.append("")

    if insights:
        lines.append("## Insights")
        lines.append("")
        for insight in insights:
            marker = _INSIGHT_MARKERS.get(insight.kind, "•")
            lines.append(f"- {marker} **{insight.title}**: {insight.description}")
        lines.append("")

    lines.append("## Period Breakdown")
    lines.append("")
    if result.is_empty:
        lines.append("*No records in this period.*")
        lines.append("")
        return "\n".join(lines)

    lines.append("| Period | Inflow | Outflow | Net | Opening | Closing | Count |")
    lines.append("|--------|-------:|--------:|----:|--------:|--------:|------:|")
    for b in result.display_order():
        lines.append(
            f"| {b.period_key} | {money(b.total_inflow)} | {money(b.total_outflow)} "
            f"| {money(b.net)} | {money(b.starting_balance)} | {money(b.ending_balance)} "
            f"| {b.transaction_count} |"
        )
    lines.append("")

    if include_transactions:
        for b in result.display_order():
            lines.append(f"### {b.period_key}")
            lines.append("")
            lines.append("| Date | Details | Inflow | Outflow | Balance |")
            lines.append("|------|---------|-------:|--------:|--------:|")
            for txn, balance in b.entries():
                inflow = money(txn.inflow) if txn.inflow else ""
                outflow = money(txn.outflow) if txn.outflow else ""
                details = txn.details.replace("|", "\\|")
                lines.append(f"| {txn.date} | {details} | {inflow} | {outflow} | {money(balance)} |")
            lines.append("")

    lines.append("---")
    lines.append("*Generated by BizLedger*")
    return "\n".join(lines)
