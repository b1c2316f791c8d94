"""Payment reconciliation CLI commands.

Provides commands for batch reconciliation, single-payment matching and
duplicate payment detection over payment/invoice files.
"""

import json
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from ...exceptions import ConfigurationError, RecordImportError
from ...utils.logging import get_logger, set_correlation_id
from ..domain.enums import MatchType
from ..domain.models import Invoice, Payment
from ..domain.value_objects import MatchResult, ReconciliationSummary
from ..infrastructure.importers import ImporterFactory, RecordKind
from ..matchers.payment_matcher import PaymentMatcher
from ..metrics import record_cli_command

app = typer.Typer(name="recon", help="💰 Payment reconciliation")
console = Console()
logger = get_logger(__name__)

MATCH_TYPE_STYLES = {
    MatchType.EXACT: "green",
    MatchType.FUZZY: "cyan",
    MatchType.PARTIAL: "yellow",
    MatchType.NONE: "red",
}


# ============================================================================
# Helpers
# ============================================================================


def _fail(command: str, message: str) -> NoReturn:
    console.print(f"[red]✗ {message}[/]")
    record_cli_command(command, "error")
    raise typer.Exit(1)


def _load_records(
    command: str, file_path: Path, record_kind: RecordKind, skip_invalid: bool
) -> list[Any]:
    """Import a payment or invoice file, exiting on file or row errors."""
    try:
        importer = ImporterFactory.create(file_path, record_kind)
        result = importer.import_records()
    except RecordImportError as e:
        logger.error("cli_import_failed", file=str(file_path), error=str(e))
        _fail(command, str(e))

    if result.errors:
        console.print(f"[yellow]⚠ {result.error_count} invalid row(s) in {file_path.name}:[/]")
        for error in result.errors[:5]:  # Show first 5
            console.print(f"  • {error}")
        if not skip_invalid:
            _fail(command, "Fix the rows above or pass --skip-invalid")

    return result.records


def _build_matcher(
    command: str, fuzzy_threshold: Optional[float], tolerance: Optional[float]
) -> PaymentMatcher:
    overrides: dict[str, float] = {}
    if fuzzy_threshold is not None:
        overrides["fuzzy_threshold"] = fuzzy_threshold
    if tolerance is not None:
        overrides["amount_tolerance_percent"] = tolerance

    try:
        return PaymentMatcher(**overrides)
    except ConfigurationError as e:
        _fail(command, str(e))


def _format_amount(amount: int) -> str:
    return f"{amount:,}"


def _match_type_cell(match_type: MatchType) -> str:
    style = MATCH_TYPE_STYLES[match_type]
    return f"[{style}]{match_type.value}[/]"


def _results_table(results: list[MatchResult]) -> Table:
    table = Table(title="🔍 Match Results", show_header=True)
    table.add_column("Payment", style="bold")
    table.add_column("Amount", justify="right")
    table.add_column("Invoice")
    table.add_column("Type")
    table.add_column("Confidence", justify="right")
    table.add_column("Reasons", style="dim")

    for result in results:
        invoice_cell = result.invoice.id if result.invoice else "-"
        if result.invoice is not None and result.match_type == MatchType.NONE:
            invoice_cell = f"[dim]({result.invoice.id})[/]"
        table.add_row(
            result.payment.id,
            _format_amount(result.payment.amount),
            invoice_cell,
            _match_type_cell(result.match_type),
            f"{result.confidence:.0%}",
            ", ".join(result.reasons) or "-",
        )
    return table


def _summary_table(summary: ReconciliationSummary) -> Table:
    table = Table(title="📊 Reconciliation Summary", show_header=True)
    table.add_column("Metric", style="cyan", width=22)
    table.add_column("Value", justify="right", style="bold")

    table.add_row("💳 Payments", str(summary.total_payments))
    table.add_row("✅ Matched", f"[green]{summary.matched_payments}[/]")
    table.add_row("🟡 Partial", f"[yellow]{summary.partial_matches}[/]")
    table.add_row("❌ Unmatched", f"[red]{summary.unmatched_payments}[/]")
    table.add_row("🔁 Duplicate groups", str(len(summary.duplicate_groups)))
    table.add_row("━" * 22, "━" * 12)
    table.add_row("💰 Received", _format_amount(summary.total_amount_received))
    table.add_row("🧾 Matched amount", _format_amount(summary.total_amount_matched))
    table.add_row("📈 Match rate", f"{summary.match_rate:.0%}")
    return table


def _duplicates_table(groups: list[list[Payment]]) -> Table:
    table = Table(title="🔁 Suspected Duplicates", show_header=True)
    table.add_column("Group", justify="right")
    table.add_column("Payment", style="bold")
    table.add_column("Transaction")
    table.add_column("Amount", justify="right")
    table.add_column("Date")

    for index, group in enumerate(groups, start=1):
        for payment in group:
            table.add_row(
                str(index),
                payment.id,
                payment.transaction_id,
                _format_amount(payment.amount),
                payment.transaction_date.strftime("%Y-%m-%d %H:%M"),
            )
    return table


# ============================================================================
# COMMAND 1: reconcile
# ============================================================================


@app.command()
def reconcile(
    payments_file: Path = typer.Argument(..., help="Payments file (CSV, JSON or M-Pesa C2B)"),
    invoices_file: Path = typer.Argument(..., help="Invoices file (CSV or JSON)"),
    fuzzy_threshold: Optional[float] = typer.Option(
        None, "--fuzzy-threshold", "-t", help="Minimum confidence to auto-accept a match"
    ),
    tolerance: Optional[float] = typer.Option(
        None, "--tolerance", help="Amount tolerance as % of the invoice balance"
    ),
    skip_invalid: bool = typer.Option(
        False, "--skip-invalid", help="Ignore rows that fail validation"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the summary as JSON"),
):
    """🔄 Reconcile a payment batch against outstanding invoices.

    Examples:
        # Reconcile an M-Pesa dump against this month's invoices
        rentrecon recon reconcile c2b.json invoices.csv

        # Stricter auto-acceptance, machine-readable output
        rentrecon recon reconcile payments.csv invoices.csv -t 0.85 --json
    """
    command = "reconcile"
    set_correlation_id()

    matcher = _build_matcher(command, fuzzy_threshold, tolerance)
    payments: list[Payment] = _load_records(command, payments_file, RecordKind.PAYMENT, skip_invalid)
    invoices: list[Invoice] = _load_records(command, invoices_file, RecordKind.INVOICE, skip_invalid)

    summary = matcher.reconcile(payments, invoices)
    record_cli_command(command)

    if as_json:
        typer.echo(json.dumps(summary.to_dict(), indent=2))
        return

    console.print(_summary_table(summary))
    if summary.results:
        console.print(_results_table(summary.results))
    if summary.duplicate_groups:
        console.print(_duplicates_table(summary.duplicate_groups))
    if summary.review_queue:
        console.print(f"\n[yellow]⚠ {len(summary.review_queue)} payment(s) need manual review[/]")


# ============================================================================
# COMMAND 2: match
# ============================================================================


@app.command()
def match(
    payments_file: Path = typer.Argument(..., help="Payments file (CSV, JSON or M-Pesa C2B)"),
    invoices_file: Path = typer.Argument(..., help="Invoices file (CSV or JSON)"),
    payment_id: str = typer.Option(..., "--payment", "-p", help="Payment id to match"),
    fuzzy_threshold: Optional[float] = typer.Option(
        None, "--fuzzy-threshold", "-t", help="Minimum confidence to auto-accept a match"
    ),
    tolerance: Optional[float] = typer.Option(
        None, "--tolerance", help="Amount tolerance as % of the invoice balance"
    ),
    skip_invalid: bool = typer.Option(
        False, "--skip-invalid", help="Ignore rows that fail validation"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """🎯 Find the best invoice for a single payment and explain the score."""
    command = "match"
    set_correlation_id()

    matcher = _build_matcher(command, fuzzy_threshold, tolerance)
    payments: list[Payment] = _load_records(command, payments_file, RecordKind.PAYMENT, skip_invalid)
    invoices: list[Invoice] = _load_records(command, invoices_file, RecordKind.INVOICE, skip_invalid)

    payment = next((p for p in payments if p.id == payment_id), None)
    if payment is None:
        _fail(command, f"Payment {payment_id} not found in {payments_file.name}")

    result = matcher.match_one(payment, invoices)
    record_cli_command(command)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    console.print(_results_table([result]))

    if result.field_matches:
        table = Table(title="Field Scores", show_header=True)
        table.add_column("Field", style="cyan")
        table.add_column("Matched")
        table.add_column("Score", justify="right")
        for field_match in result.field_matches:
            table.add_row(
                field_match.field.label,
                "✓" if field_match.matched else "✗",
                f"{field_match.score:.2f}",
            )
        console.print(table)


# ============================================================================
# COMMAND 3: duplicates
# ============================================================================


@app.command()
def duplicates(
    payments_file: Path = typer.Argument(..., help="Payments file (CSV, JSON or M-Pesa C2B)"),
    skip_invalid: bool = typer.Option(
        False, "--skip-invalid", help="Ignore rows that fail validation"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the groups as JSON"),
):
    """🔁 List payments that look like the same money sent twice."""
    command = "duplicates"
    set_correlation_id()

    matcher = _build_matcher(command, None, None)
    payments: list[Payment] = _load_records(command, payments_file, RecordKind.PAYMENT, skip_invalid)

    groups = matcher.find_duplicates(payments)
    record_cli_command(command)

    if as_json:
        typer.echo(json.dumps([[p.id for p in group] for group in groups], indent=2))
        return

    if not groups:
        console.print("[green]✓ No suspected duplicates[/]")
        return

    console.print(_duplicates_table(groups))
