"""Main CLI entry point for RentRecon."""

import typer
from rich.console import Console

from rentrecon import __version__
from rentrecon.utils.logging import configure_logging

# Reconciliation CLI lives in the reconciliation package to keep the top-level commands lean.
from ..reconciliation.cli import app as recon_app

# Create main app and console
app = typer.Typer(
    name="rentrecon",
    help="🏠 Payment reconciliation for rental billing",
    add_completion=True,
    rich_markup_mode="rich",
    no_args_is_help=True,  # Show help when no command is provided
)
console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]RentRecon[/bold blue] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        envvar="RENTRECON_LOG_LEVEL",
        help="Log level: DEBUG, INFO, WARNING, ERROR",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        envvar="RENTRECON_JSON_LOGS",
        help="Emit JSON log lines (for log shippers)",
    ),
) -> None:
    """
    RentRecon - match tenant payments to invoices.

    Reconciles M-Pesa and bank payments against outstanding invoices using
    fuzzy matching on phone, amount, reference and name.
    """
    configure_logging(log_level=log_level, json_logs=json_logs, dev_mode=not json_logs)


# Register command groups
app.add_typer(recon_app, name="recon", help="💰 Payment reconciliation")


if __name__ == "__main__":
    app()
