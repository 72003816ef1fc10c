"""Implementation of 'finflow budgets' command.

Budget vs actual for every category with a budget.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
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


def budgets_command(
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
    """Show budget utilization for the month of the reference date.

    Yearly budgets are compared as monthly equivalents (amount / 12).
    """
    settings = load_settings(config, console)
    reference_date = resolve_reference_date(reference, console)
    provider = build_provider(settings, snapshot)

    try:
        data = provider.get_dashboard_data(reference_date)
    except SnapshotError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    utilizations = data.snapshot.budgets
    if not utilizations:
        console.print("[yellow]No budgets defined[/yellow]")
        raise typer.Exit(0)

    currency = data.currency
    table = Table(
        title=f"Budgets for {format_month(month_key(reference_date))}",
        show_header=True,
    )
    table.add_column("Category")
    table.add_column("Budget", justify="right")
    table.add_column("Spent", justify="right")
    table.add_column("Remaining", justify="right")
    table.add_column("Used", justify="right")
    table.add_column("Status")

    for u in utilizations:
        style = STATUS_STYLES[u.status]
        table.add_row(
            settings.category_name(u.category),
            format_currency(u.budget_amount, currency),
            format_currency(u.spent_amount, currency),
            format_currency(u.remaining, currency),
            format_percentage(u.percentage),
            f"[{style}]{u.status.value.replace('_', ' ')}[/{style}]",
        )

    console.print(table)

    status = data.snapshot.budget_status
    console.print(
        f"Total: {format_currency(status.total_spent, currency)} of "
        f"{format_currency(status.total_budget, currency)} "
        f"({format_percentage(status.percentage)})"
    )
