"""Implementation of 'finflow trend' command.

Monthly outflow and cash flow series.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from finflow.cli.utils import build_provider, format_currency, load_settings
from finflow.core.exceptions import SnapshotError
from finflow.engine.aggregator import monthly_cash_flow

console = Console()


def trend_command(
    fill_gaps: bool = typer.Option(
        None,
        "--fill-gaps/--no-fill-gaps",
        help="Show months without activity (default: from config)",
    ),
    snapshot: Path = typer.Option(
        None,
        "--snapshot",
        "-s",
        help="Snapshot JSON file (default: from config)",
    ),
    config: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to finflow.yaml",
    ),
) -> None:
    """Show inflow, outflow and net per month, oldest first."""
    settings = load_settings(config, console)
    provider = build_provider(settings, snapshot)

    try:
        transactions, _, _, _ = provider.load()
    except SnapshotError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if fill_gaps is None:
        fill_gaps = settings.fill_trend_gaps

    flows = monthly_cash_flow(transactions, fill_gaps=fill_gaps)
    if not flows:
        console.print("[yellow]No transactions found[/yellow]")
        raise typer.Exit(0)

    currency = settings.currency

    table = Table(title="Monthly Trend", show_header=True)
    table.add_column("Month")
    table.add_column("Outflow", justify="right")
    table.add_column("Inflow", justify="right")
    table.add_column("Net", justify="right")

    for flow in flows:
        style = "green" if flow.net >= 0 else "red"
        table.add_row(
            flow.label,
            format_currency(flow.outflow, currency),
            format_currency(flow.inflow, currency),
            f"[{style}]{format_currency(flow.net, currency)}[/{style}]",
        )

    console.print(table)
