"""FinFlow command line entry point."""

import typer

from finflow.cli.budgets import budgets_command
from finflow.cli.report import report_command
from finflow.cli.status import status_command
from finflow.cli.trend import trend_command

app = typer.Typer(
    name="finflow",
    help="Personal finance analytics over a transaction/budget snapshot.",
    no_args_is_help=True,
)

app.command(name="status")(status_command)
app.command(name="budgets")(budgets_command)
app.command(name="trend")(trend_command)
app.command(name="report")(report_command)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
