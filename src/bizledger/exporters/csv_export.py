"""
CSV summary exporter.

One row per period, most recent first, amounts with two decimals.
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from bizledger.analyzers.aggregator import AggregationResult

SUMMARY_COLUMNS = [
    "Period",
    "Inflow",
    "Outflow",
    "Net",
    "Transaction Count",
    "Cash Transactions",
    "Bank Transactions",
]


def summary_frame(result: AggregationResult) -> pd.DataFrame:
    """Period summary as a DataFrame with the export column names."""
    rows = [
        {
            "Period": b.period_key,
            "Inflow": b.total_inflow,
            "Outflow": b.total_outflow,
            "Net": b.net,
            "Transaction Count": b.transaction_count,
            "Cash Transactions": b.payment_methods.get("Cash", 0),
            "Bank Transactions": b.payment_methods.get("Bank", 0),
        }
        for b in result.display_order()
    ]
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def render_csv(result: AggregationResult) -> str:
    """Render the period summary as CSV text."""
    return summary_frame(result).to_csv(index=False, float_format="%.2f", lineterminator="\n")


def write_csv(result: AggregationResult, path: str | Path) -> Path:
    """Write the period summary to ``path`` and return it."""
    out = Path(path)
    out.write_text(render_csv(result), encoding="utf-8")
    return out
