"""Journal (Libro Diario), ledger (Libro Mayor) and mapping gap commands."""

import csv

import click

from clinicbooks.cli.error_handling import handle_domain_error
from clinicbooks.cli.formatting import format_amount_cell, format_currency, format_date
from clinicbooks.cli.year_option import year_option
from clinicbooks.domain.errors import UpstreamFetchError
from clinicbooks.domain.journal import sort_for_display
from clinicbooks.domain.journal_service import JournalService
from clinicbooks.domain.ledger import apply_opening_balances
from clinicbooks.domain.report import (
    JOURNAL_HEADERS,
    LEDGER_HEADERS,
    filter_entries,
    filter_ledger,
    journal_rows,
    ledger_rows,
    ledger_totals,
    row_values,
)


def _load_snapshot(ctx, year: int):
    service = JournalService(ctx.obj["db"])
    try:
        return service.build_snapshot(year)
    except UpstreamFetchError as e:
        handle_domain_error(ctx, e)


def _warn_skipped(snapshot) -> None:
    for skipped in snapshot.skipped_records:
        click.echo(f"Warning: skipped {skipped.record_kind} {skipped.document_ref}: {skipped.reason}", err=True)


@click.command("journal")
@year_option
@click.option("--search", help="Filter by account code, account name or document")
@click.option("--verbose", "-v", is_flag=True, help="Show transaction type and document columns")
@click.pass_context
def show_journal(ctx, year: int, search: str | None, verbose: bool):
    """Show the general journal (Libro Diario) of a fiscal year.

    Entries are listed newest first.

    Examples:
        clinicbooks journal --year 2026
        clinicbooks journal --search 430
    """
    snapshot = _load_snapshot(ctx, year)
    _warn_skipped(snapshot)

    entries = sort_for_display(filter_entries(snapshot.entries, search or ""))
    if not entries:
        click.echo(f"No journal entries for {year}.")
        return

    click.echo(f"\nLibro Diario {year}: {len(entries)} line(s)")
    if verbose:
        header = (
            f"{'Fecha':<11} {'Asiento':>7} {'Tipo':<8} {'Doc':<12} {'Cuenta':<9} "
            f"{'Nombre':<24} {'Concepto':<20} {'Debe':>14} {'Haber':>14}"
        )
    else:
        header = (
            f"{'Fecha':<11} {'Asiento':>7} {'Cuenta':<9} {'Nombre':<24} "
            f"{'Concepto':<20} {'Debe':>14} {'Haber':>14}"
        )
    click.echo("-" * len(header))
    click.echo(header)
    click.echo("-" * len(header))

    for e in entries:
        debit = format_amount_cell(e.debit_amount)
        credit = format_amount_cell(e.credit_amount)
        if verbose:
            click.echo(
                f"{format_date(e.date):<11} {e.transaction_id:>7} {e.transaction_type.value:<8} "
                f"{e.document_ref[:12]:<12} {e.account_code:<9} {e.account_name[:24]:<24} "
                f"{e.description[:20]:<20} {debit:>14} {credit:>14}"
            )
        else:
            click.echo(
                f"{format_date(e.date):<11} {e.transaction_id:>7} {e.account_code:<9} "
                f"{e.account_name[:24]:<24} {e.description[:20]:<20} {debit:>14} {credit:>14}"
            )

    if snapshot.mapping_gaps:
        click.echo(
            f"\n{len(snapshot.mapping_gaps)} expense(s) without account mapping. "
            f"Run 'clinicbooks gaps --year {year}' for details."
        )


@click.command("ledger")
@year_option
@click.option("--search", help="Filter by account code or name")
@click.option("--with-opening", is_flag=True, help="Include the year's opening balances")
@click.pass_context
def show_ledger(ctx, year: int, search: str | None, with_opening: bool):
    """Show the general ledger (Libro Mayor) of a fiscal year."""
    snapshot = _load_snapshot(ctx, year)
    _warn_skipped(snapshot)

    ledger = snapshot.ledger
    if with_opening:
        ledger = apply_opening_balances(ledger, snapshot.opening_balances)
    rows = ledger_rows(filter_ledger(ledger, search or ""))
    if not rows:
        click.echo(f"No ledger accounts for {year}.")
        return

    click.echo(f"\nLibro Mayor {year}")
    header = f"{'Cuenta':<9} {'Nombre':<32} {'Suma Debe':>16} {'Suma Haber':>16} {'Saldo':>16}"
    click.echo("-" * len(header))
    click.echo(header)
    click.echo("-" * len(header))
    for row in rows:
        click.echo(
            f"{row.account_code:<9} {row.account_name[:32]:<32} {format_currency(row.total_debit):>16} "
            f"{format_currency(row.total_credit):>16} {format_currency(row.balance):>16}"
        )
    totals = ledger_totals(rows)
    click.echo("-" * len(header))
    click.echo(
        f"{'':<9} {'TOTALES:':<32} {format_currency(totals.total_debit):>16} "
        f"{format_currency(totals.total_credit):>16} {format_currency(totals.balance):>16}"
    )


@click.command("gaps")
@year_option
@click.pass_context
def show_gaps(ctx, year: int):
    """List expenses whose type has no account in the expense catalog."""
    snapshot = _load_snapshot(ctx, year)
    gaps = snapshot.mapping_gaps
    if not gaps:
        click.echo(f"No mapping gaps for {year}.")
        return

    click.echo(f"\nMovimientos sin mapeo {year}: {len(gaps)}")
    click.echo("-" * 70)
    click.echo(f"{'Fecha':<11} {'Documento':<16} {'Concepto':<24} {'Importe':>16}")
    click.echo("-" * 70)
    for gap in gaps:
        click.echo(
            f"{format_date(gap.date):<11} {gap.document_ref[:16]:<16} "
            f"{(gap.concept_label or '(sin tipo)')[:24]:<24} {format_currency(gap.amount):>16}"
        )


@click.command("export")
@click.argument("book", type=click.Choice(["journal", "ledger"]))
@year_option
@click.option("--with-opening", is_flag=True, help="Include opening balances (ledger only)")
@click.option(
    "--output",
    "-o",
    type=click.File("w", encoding="utf-8", lazy=True),
    default="-",
    help="Output CSV file (defaults to stdout)",
)
@click.pass_context
def export_book(ctx, book: str, year: int, with_opening: bool, output):
    """Export the journal or the ledger as CSV rows for report generators.

    Examples:
        clinicbooks export journal --year 2026 -o libro_diario_2026.csv
        clinicbooks export ledger --with-opening -o libro_mayor.csv
    """
    snapshot = _load_snapshot(ctx, year)

    writer = csv.writer(output, delimiter=";")
    if book == "journal":
        writer.writerow(JOURNAL_HEADERS)
        for row in journal_rows(sort_for_display(snapshot.entries)):
            writer.writerow(row_values(row))
    else:
        ledger = snapshot.ledger
        if with_opening:
            ledger = apply_opening_balances(ledger, snapshot.opening_balances)
        writer.writerow(LEDGER_HEADERS)
        for row in ledger_rows(ledger):
            writer.writerow(row_values(row))


def register_commands(cli):
    """Register book commands with main CLI."""
    cli.add_command(show_journal)
    cli.add_command(show_ledger)
    cli.add_command(show_gaps)
    cli.add_command(export_book)
