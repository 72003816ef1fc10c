"""Implementation of 'finflow status' command.

Shows the dashboard snapshot for a month.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from finflow.cli.utils import (
    STATUS_STYLES,
    build_provider,
    format_currency,
    format_percentage,
    load_settings,
    resolve_reference_date,
)
from finflow.core.exceptions import SnapshotError
from finflow.engine.periods import format_month, month_key

console = Console()


def status_command(
    reference: str = typer.Option(
        None,
        "--date",
        "-d",
        help="Reference date, YYYY-MM-DD (default: today)",
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
    """Show dashboard status for the month of the reference date.

    Displays all-time totals, this month's inflow and outflow, budget
    status, top categories, recent transactions and budget alerts.
    """
    settings = load_settings(config, console)
    reference_date = resolve_reference_date(reference, console)
    provider = build_provider(settings, snapshot)

    try:
        data = provider.get_dashboard_data(reference_date)
    except SnapshotError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    snap = data.snapshot
    currency = data.currency

    console.print()
    console.print(
        Panel(f"[bold]Status for {format_month(month_key(reference_date))}[/bold]", style="cyan")
    )
    console.print()

    # Totals
    console.print("[bold]All Time[/bold]")
    console.print(f"  Inflow:   {format_currency(snap.total_inflow, currency):>14}")
    console.print(f"  Outflow:  {format_currency(snap.total_outflow, currency):>14}")
    balance_style = "green" if snap.net_balance >= 0 else "red"
    console.print(
        f"  [{balance_style}]Balance:  {format_currency(snap.net_balance, currency):>14}[/{balance_style}]"
    )
    console.print()

    console.print("[bold]This Month[/bold]")
    console.print(f"  Inflow:   {format_currency(snap.monthly_inflow, currency):>14}")
    console.print(f"  Outflow:  {format_currency(snap.monthly_outflow, currency):>14}")
    console.print()

    # Budget status
    status = snap.budget_status
    if status.total_budget > 0:
        console.print("[bold]Budget[/bold]")
        console.print(f"  Budget:   {format_currency(status.total_budget, currency):>14}")
        console.print(
            f"  Spent:    {format_currency(status.total_spent, currency):>14}"
            f"  ({format_percentage(status.percentage)})"
        )
        if status.over_budget_categories:
            console.print(f"  [red]Over budget in {status.over_budget_categories} categories[/red]")
        console.print()

    # Top categories
    if data.category_breakdown:
        console.print("[bold]Top Categories[/bold]")
        for item in data.category_breakdown[: settings.top_categories]:
            console.print(
                f"  {item.name}: {format_currency(item.amount, currency):>12}"
                f" ({format_percentage(item.share)})"
            )
        console.print()

    # Recent transactions
    if snap.recent_transactions:
        table = Table(title="Recent Transactions", show_header=True)
        table.add_column("Date")
        table.add_column("Description")
        table.add_column("Category")
        table.add_column("Amount", justify="right")
        for tx in snap.recent_transactions:
            sign = "+" if tx.is_inflow else "-"
            style = "green" if tx.is_inflow else "red"
            table.add_row(
                tx.date.date().isoformat(),
                tx.description,
                settings.category_name(tx.category),
                f"[{style}]{sign}{format_currency(tx.amount, currency)}[/{style}]",
            )
        console.print(table)
        console.print()
    else:
        console.print("[yellow]No transactions found[/yellow]")
        console.print()

    # Alerts
    if snap.alerts:
        console.print("[bold yellow]⚠ Alerts[/bold yellow]")
        for alert in snap.alerts:
            style = STATUS_STYLES[alert.status]
            console.print(f"  [{style}]- {alert.message}[/{style}]")
        console.print()

    if data.rejections:
        console.print(f"[dim]{len(data.rejections)} records skipped as invalid[/dim]")
