"""
BizLedger CLI — command-line interface.

Usage:
    bizledger summary --csv records.csv --period quarterly
    bizledger summary --json financialRecords.json --search rent -o summary.csv
    bizledger weeks --csv records.csv
    bizledger budget --json budgets.json --status Active
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from bizledger import __version__

app = typer.Typer(
    name="bizledger",
    help="BizLedger — cash-book summaries for small businesses",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()

# --log-level given on the command line wins over the config file
_state: dict[str, str | None] = {"log_level": None}


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold]BizLedger[/bold] v{__version__}")
        raise typer.Exit()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Logging level: DEBUG, INFO, WARNING, ERROR (default from config)",
    ),
) -> None:
    """BizLedger — group records by period and track the running balance."""
    _state["log_level"] = log_level
    _configure_logging(log_level or "WARNING")


def _to_date(value: datetime | None) -> date | None:
    return value.date() if value is not None else None


def _build_ledger(
    config: str | None,
    csv: str | None,
    json_file: str | None,
    currency: str | None,
    strict: bool,
):
    """BizLedger from an optional config file plus command-line sources."""
    from bizledger.analyzers.currency import get_currency
    from bizledger.config import BizLedgerConfig, ConnectorConfig
    from bizledger.connectors.normalize import NumericPolicy
    from bizledger.ledger import BizLedger

    config_path = config if config and Path(config).exists() else None
    try:
        cfg = BizLedgerConfig.load(config_path)
    except ValueError as e:
        console.print(f"[red]Error: Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(1) from None
    if _state["log_level"] is None:
        _configure_logging(cfg.log_level)

    connectors = list(cfg.connectors)
    if csv:
        connectors.append(ConnectorConfig(type="csv", options={"file_path": csv}))
    if json_file:
        connectors.append(ConnectorConfig(type="json", options={"file_path": json_file}))
    if not connectors:
        console.print("[red]Error: Provide --csv, --json or a config file with connectors[/red]")
        raise typer.Exit(1)

    update: dict = {"connectors": connectors}
    if currency:
        tag = get_currency(currency)
        if tag is None:
            console.print(f"[red]Error: Unsupported currency '{currency}'[/red]")
            raise typer.Exit(1)
        update["default_currency"] = tag
    if strict:
        update["report"] = cfg.report.model_copy(update={"numeric_policy": NumericPolicy.STRICT})

    ledger = BizLedger(config=cfg.model_copy(update=update))
    ledger._setup()
    return ledger


@app.command()
def summary(
    csv: str = typer.Option(None, "--csv", help="Path to CSV file with records"),
    json_file: str = typer.Option(None, "--json", help="Path to JSON export of records"),
    config: str = typer.Option(None, "--config", "-c", help="Path to config file"),
    period: str = typer.Option(
        None,
        "--period",
        "-p",
        help="weekly, monthly, quarterly or annual (default from config)",
    ),
    weekly_policy: str = typer.Option(
        None,
        "--weekly-policy",
        help="month_relative, monday_aligned or year_relative",
    ),
    search: str = typer.Option(None, "--search", "-s", help="Only records whose details contain this text"),
    start: datetime = typer.Option(None, "--start", formats=["%Y-%m-%d"], help="First day included"),
    end: datetime = typer.Option(None, "--end", formats=["%Y-%m-%d"], help="Last day included"),
    currency: str = typer.Option(None, "--currency", help="Default currency code, e.g. USD"),
    strict: bool = typer.Option(False, "--strict", help="Fail on unreadable amounts instead of counting them as 0"),
    output: str = typer.Option(None, "--output", "-o", help="Write the summary to a .csv or .md file"),
    transactions: bool = typer.Option(False, "--transactions", help="Include records in Markdown output"),
) -> None:
    """Summarise records by period with totals, balances and insights."""
    from bizledger.analyzers.periods import Granularity, WeeklyPolicy
    from bizledger.connectors.normalize import RecordValidationError

    try:
        granularity = Granularity.parse(period) if period else None
        policy = WeeklyPolicy.parse(weekly_policy) if weekly_policy else None
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from None

    ledger = _build_ledger(config, csv, json_file, currency, strict)

    try:
        report = ledger.report_sync(
            granularity,
            weekly_policy=policy,
            search=search,
            start=_to_date(start),
            end=_to_date(end),
        )
    except (FileNotFoundError, RecordValidationError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from None

    _display_summary(report)
    if output:
        _save_summary(report, output, include_transactions=transactions)


@app.command()
def weeks(
    csv: str = typer.Option(None, "--csv", help="Path to CSV file with records"),
    json_file: str = typer.Option(None, "--json", help="Path to JSON export of records"),
    config: str = typer.Option(None, "--config", "-c", help="Path to config file"),
    policy: str = typer.Option(
        "monday_aligned",
        "--policy",
        help="monday_aligned, year_relative or month_relative",
    ),
    currency: str = typer.Option(None, "--currency", help="Default currency code, e.g. USD"),
) -> None:
    """Weekly cash book: every record with the balance after it."""
    from bizledger.analyzers.currency import format_currency
    from bizledger.analyzers.periods import (
        Granularity,
        WeeklyPolicy,
        monday_week_range,
        year_week_range,
    )
    from bizledger.connectors.normalize import RecordValidationError

    try:
        weekly_policy = WeeklyPolicy.parse(policy)
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from None

    ledger = _build_ledger(config, csv, json_file, currency, strict=False)
    try:
        report = ledger.report_sync(Granularity.WEEKLY, weekly_policy=weekly_policy)
    except (FileNotFoundError, RecordValidationError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from None

    result = report.result
    if result.is_empty:
        console.print("[dim]No records found.[/dim]")
        return

    cur = result.report_currency
    for bucket in result.display_order():
        if weekly_policy == WeeklyPolicy.MONDAY_ALIGNED:
            first, last = monday_week_range(bucket.period_key)
            heading = f"Week of {first:%b %d} - {last:%b %d, %Y}"
        elif weekly_policy == WeeklyPolicy.YEAR_RELATIVE:
            first, last = year_week_range(bucket.period_key)
            heading = f"{bucket.period_key} ({first:%b %d} - {last:%b %d})"
        else:
            heading = bucket.period_key

        table = Table(title=heading, show_lines=False)
        table.add_column("Date")
        table.add_column("Details")
        table.add_column("Inflow", justify="right", style="green")
        table.add_column("Outflow", justify="right", style="red")
        table.add_column("Balance", justify="right", style="bold")
        for txn, balance in bucket.entries():
            table.add_row(
                str(txn.date),
                txn.details,
                format_currency(txn.inflow, cur) if txn.inflow else "",
                format_currency(txn.outflow, cur) if txn.outflow else "",
                format_currency(balance, cur),
            )
        table.caption = (
            f"Opening {format_currency(bucket.starting_balance, cur)} · "
            f"Net {format_currency(bucket.net, cur)} · "
            f"Closing {format_currency(bucket.ending_balance, cur)}"
        )
        console.print(table)


@app.command()
def budget(
    json_file: str = typer.Option(..., "--json", help="Path to JSON export of budgets"),
    search: str = typer.Option(None, "--search", "-s", help="Only budgets whose name contains this text"),
    status: str = typer.Option("All", "--status", help="All, Active, Draft or Completed"),
) -> None:
    """Show planned vs actual totals for each budget."""
    from bizledger.analyzers.budget import Budget, VarianceStatus, filter_budgets
    from bizledger.analyzers.currency import format_currency

    path = Path(json_file)
    if not path.exists():
        console.print(f"[red]Error: JSON file not found: {json_file}[/red]")
        raise typer.Exit(1)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: Not valid JSON in {json_file}: {escape(str(e))}[/red]")
        raise typer.Exit(1) from None
    if isinstance(data, dict):
        data = data.get("budgets", [])
    if not isinstance(data, list):
        console.print(f"[red]Error: Expected a list of budgets in {json_file}[/red]")
        raise typer.Exit(1)
    budgets = [Budget.from_record(raw) for raw in data if isinstance(raw, dict)]

    try:
        selected = filter_budgets(budgets, search=search, status=status)
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from None

    table = Table(title="Budgets", show_lines=True)
    table.add_column("Name", style="bold")
    table.add_column("Status")
    table.add_column("Allocated", justify="right")
    table.add_column("Actual", justify="right")
    table.add_column("Variance", justify="right")

    colors = {VarianceStatus.UNDER: "green", VarianceStatus.OVER: "red", VarianceStatus.ON: "white"}
    for b in selected:
        totals = b.totals()
        color = colors[totals.variance_status]
        sign = "+" if totals.variance >= 0 else "-"
        table.add_row(
            b.name,
            b.status.value,
            format_currency(totals.total_allocated, totals.currency),
            format_currency(totals.total_actual, totals.currency),
            f"[{color}]{sign}{format_currency(abs(totals.variance), totals.currency)}[/{color}]",
        )
    console.print(table)


@app.command()
def currencies() -> None:
    """List supported currencies."""
    from bizledger.analyzers.currency import SUPPORTED_CURRENCIES, format_currency

    table = Table(title="Supported Currencies")
    table.add_column("Code", style="bold cyan")
    table.add_column("Name")
    table.add_column("Symbol")
    table.add_column("Example", justify="right")

    for tag in SUPPORTED_CURRENCIES:
        table.add_row(tag.code, tag.label or tag.code, tag.symbol, format_currency(1234.5, tag))

    console.print(table)


def _display_summary(report) -> None:  # noqa: ANN001
    """Display summary totals, insights and the period table."""
    from bizledger.analyzers.currency import format_currency

    result = report.result
    cur = result.report_currency

    console.print(Panel.fit(
        f"[bold blue]BizLedger[/bold blue] — {result.granularity.value.capitalize()} summary",
        subtitle=f"{report.source} · {cur.code}",
    ))

    totals = Table(title="Totals", show_lines=True)
    totals.add_column("Metric", style="bold")
    totals.add_column("Value", justify="right")
    totals.add_row("Total Inflow", format_currency(result.total_inflow, cur))
    totals.add_row("Total Outflow", format_currency(result.total_outflow, cur))
    totals.add_row("Net", format_currency(result.net, cur))
    totals.add_row("Transactions", str(result.transaction_count))
    console.print(totals)

    if report.insights:
        console.print("[bold]Insights:[/bold]")
        colors = {"positive": "green", "negative": "red", "info": "blue"}
        for insight in report.insights:
            color = colors.get(insight.kind, "white")
            console.print(f"  [{color}]{insight.title}[/{color}]: {insight.description}")
        console.print()

    if result.is_empty:
        console.print("[dim]No records match the filters.[/dim]")
        return

    table = Table(title="Periods")
    table.add_column("Period", style="bold")
    table.add_column("Inflow", justify="right", style="green")
    table.add_column("Outflow", justify="right", style="red")
    table.add_column("Net", justify="right")
    table.add_column("Closing", justify="right")
    table.add_column("Count", justify="right")
    for b in result.display_order():
        table.add_row(
            b.period_key,
            format_currency(b.total_inflow, cur),
            format_currency(b.total_outflow, cur),
            format_currency(b.net, cur),
            format_currency(b.ending_balance, cur),
            str(b.transaction_count),
        )
    console.print(table)


def _save_summary(report, output: str, *, include_transactions: bool = False) -> None:  # noqa: ANN001
    """Save summary to file."""
    from bizledger.exporters.csv_export import render_csv
    from bizledger.exporters.markdown import render_markdown

    path = Path(output)
    if path.suffix == ".csv":
        content = render_csv(report.result)
    else:
        content = render_markdown(
            report.result,
            report.insights,
            include_transactions=include_transactions,
        )

    path.write_text(content, encoding="utf-8")
    console.print(f"[green]✓[/green] Summary saved to [bold]{path}[/bold]")


if __name__ == "__main__":
    app()
