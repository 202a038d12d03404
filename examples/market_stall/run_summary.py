"""
Example: Summarise a market stall's cash book.

Run:
    python examples/market_stall/run_summary.py

Quarterly instead of monthly:
    python examples/market_stall/run_summary.py --quarterly

Or via CLI:
    bizledger summary --config examples/market_stall/bizledger.yaml
    bizledger weeks --csv examples/market_stall/records.csv
    bizledger budget --json examples/market_stall/budgets.json
"""

import asyncio
import sys
from pathlib import Path

# Get the directory where this script lives
SCRIPT_DIR = Path(__file__).parent.resolve()
CSV_PATH = SCRIPT_DIR / "records.csv"

from bizledger import BizLedger
from bizledger.analyzers.currency import format_currency
from bizledger.config import BizLedgerConfig, ConnectorConfig


async def main() -> None:
    granularity = "quarterly" if "--quarterly" in sys.argv else "monthly"

    config = BizLedgerConfig(
        default_currency="NGN",
        connectors=[ConnectorConfig(type="csv", options={"file_path": str(CSV_PATH)})],
    )
    ledger = BizLedger(config=config)
    ledger._setup()

    report = await ledger.report(granularity)
    result = report.result
    money = lambda v: format_currency(v, result.report_currency)  # noqa: E731

    print(f"Market stall — {granularity} summary")
    print("=" * 60)
    print(f"{'Period':<10} {'Inflow':>12} {'Outflow':>12} {'Net':>12} {'Closing':>12}")
    for bucket in result.display_order():
        print(
            f"{bucket.period_key:<10} {money(bucket.total_inflow):>12} "
            f"{money(bucket.total_outflow):>12} {money(bucket.net):>12} "
            f"{money(bucket.ending_balance):>12}"
        )
    print("-" * 60)
    print(f"Closing balance: {money(result.closing_balance)}")

    print("\nInsights:")
    for insight in report.insights:
        print(f"  {insight.title}: {insight.description}")


if __name__ == "__main__":
    asyncio.run(main())
