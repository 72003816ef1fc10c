"""Implementation of 'finflow report' command.

Writes the dashboard data as a JSON document:
1. Overview - totals, monthly inflow/outflow, budget status
2. Categories - top categories and breakdown
3. Budgets - budget vs actual, alerts
4. Trends - monthly outflow and cash flow
5. Transactions - recent activity, rejected records
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from finflow.cli.utils import build_provider, load_settings, resolve_reference_date
from finflow.core.exceptions import SnapshotError
from finflow.dashboard import generate_dashboard_json, save_dashboard
from finflow.engine.periods import month_key

console = Console()


def report_command(
    reference: str = typer.Option(
        None,
        "--date",
        "-d",
        help="Reference date, YYYY-MM-DD (default: today)",
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file path (default: reports/<YYYY-MM>.json)",
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
    """Generate a JSON dashboard export for the month of the reference date."""
    settings = load_settings(config, console)
    reference_date = resolve_reference_date(reference, console)
    provider = build_provider(settings, snapshot)

    try:
        data = provider.get_dashboard_data(reference_date)
    except SnapshotError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if not data.snapshot.recent_transactions:
        console.print("[yellow]No transactions found[/yellow]")
        # Still write the export (it will hold zero values)

    if output:
        output_path = output
    else:
        output_path = Path(settings.reports_dir) / f"{month_key(reference_date).key}.json"

    save_dashboard(generate_dashboard_json(data), output_path)

    console.print(f"[green]Report generated:[/green] {output_path}")
    if data.rejections:
        console.print(f"[yellow]{len(data.rejections)} records skipped as invalid[/yellow]")
