"""Shared helpers for CLI commands."""

from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from finflow.core.config import FinflowConfig, load_config
from finflow.core.exceptions import ConfigError, InvalidReferenceDateError
from finflow.core.log import configure_logging
from finflow.core.models import BudgetState
from finflow.dashboard import DashboardDataProvider, JsonSnapshotSource
from finflow.engine.periods import coerce_reference_date

CURRENCY_SYMBOLS = {"INR": "₹", "EUR": "€", "USD": "$", "GBP": "£"}

STATUS_STYLES = {
    BudgetState.ON_TRACK: "green",
    BudgetState.WARNING: "yellow",
    BudgetState.OVER: "red",
}


def format_currency(amount: Decimal, currency: str) -> str:
    """Format an amount for display, e.g. ``₹1,234.50``."""
    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    if amount < 0:
        return f"-{symbol}{abs(amount):,.2f}"
    return f"{symbol}{amount:,.2f}"


def format_percentage(value: Decimal) -> str:
    return f"{value:.1f}%"


def load_settings(config_path: Path | None, console: Console) -> FinflowConfig:
    """Load config and set up logging, exiting on error."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    configure_logging(config.log_level)
    return config


def resolve_reference_date(value: str | None, console: Console) -> datetime:
    """Parse --date, defaulting to today; exits on invalid input."""
    if value is None:
        return coerce_reference_date(date.today())
    try:
        return coerce_reference_date(value)
    except InvalidReferenceDateError:
        console.print(f"[red]Error:[/red] Invalid date '{value}'. Use YYYY-MM-DD")
        raise typer.Exit(1)


def build_provider(
    config: FinflowConfig,
    snapshot: Path | None,
) -> DashboardDataProvider:
    """Data provider over the snapshot file (option overrides config)."""
    source = JsonSnapshotSource(snapshot or Path(config.snapshot_path))
    return DashboardDataProvider(source, config)
