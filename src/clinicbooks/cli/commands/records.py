"""Income, expense and opening balance entry commands."""

import click

from clinicbooks.cli.error_handling import handle_domain_error
from clinicbooks.cli.formatting import format_currency, format_date
from clinicbooks.cli.year_option import year_option
from clinicbooks.domain.entities import ZERO
from clinicbooks.domain.errors import DomainError
from clinicbooks.domain.journal import TREASURY_ACCOUNTS
from clinicbooks.domain.records import RecordService
from clinicbooks.utils.amount_parser import parse_amount
from clinicbooks.utils.date_parser import parse_date

PAYMENT_METHODS = sorted(TREASURY_ACCOUNTS)


def _parse_or_exit(ctx, parser, value, label):
    if value is None:
        return None
    try:
        return parser(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@click.group("income")
def income_group():
    """Manage patient invoices."""
    pass


@income_group.command("add")
@click.option("--invoice", required=True, help="Invoice number (e.g., F001)")
@click.option("--date", "issue_date", required=True, help="Issue date (YYYY-MM-DD, DD/MM/YYYY or 'today')")
@click.option("--client", required=True, help="Client (patient) name")
@click.option("--total", required=True, help="Total amount including VAT (e.g., 121,00)")
@click.option("--vat", help="VAT quota (defaults to total minus base, or 0)")
@click.option("--base", help="Tax base (defaults to total minus VAT)")
@click.option("--payment", help=f"Payment method ({', '.join(PAYMENT_METHODS)})")
@click.option("--treatment", help="Treatment name, used to pick the revenue account")
@click.pass_context
def add_income(ctx, invoice, issue_date, client, total, vat, base, payment, treatment):
    """Add a patient invoice.

    Examples:
        clinicbooks income add --invoice F001 --date 2026-03-10 --client "Ana Ruiz" --total 121 --vat 21 --payment Tarjeta
    """
    service = RecordService(ctx.obj["db"])
    parsed_date = _parse_or_exit(ctx, parse_date, issue_date, "date")
    total_amount = _parse_or_exit(ctx, parse_amount, total, "total")
    vat_quota = _parse_or_exit(ctx, parse_amount, vat, "VAT quota")
    tax_base = _parse_or_exit(ctx, parse_amount, base, "tax base")

    try:
        income_id = service.create_income(
            invoice_number=invoice,
            issue_date=parsed_date,
            client_name=client,
            total_amount=total_amount,
            vat_quota=vat_quota,
            tax_base=tax_base,
            payment_method=payment,
            treatment_name=treatment,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Added income {invoice} of {format_currency(total_amount)} "
        f"on {format_date(parsed_date)} (ID: {income_id})"
    )


@income_group.command("list")
@year_option
@click.pass_context
def list_incomes(ctx, year: int):
    """List the patient invoices of a fiscal year."""
    incomes = RecordService(ctx.obj["db"]).list_incomes(year)
    if not incomes:
        click.echo(f"No incomes for {year}.")
        return
    for inc in incomes:
        click.echo(
            f"{format_date(inc.issue_date)} | {inc.invoice_number or '':<10} | {inc.client_name or '':<24} | "
            f"{format_currency(inc.total_amount):>14} | {inc.payment_method or ''}"
        )


@click.group("expense")
def expense_group():
    """Manage provider invoices."""
    pass


@expense_group.command("add")
@click.option("--invoice", required=True, help="Provider invoice number")
@click.option("--date", "issue_date", required=True, help="Issue date (YYYY-MM-DD, DD/MM/YYYY or 'today')")
@click.option("--provider", required=True, help="Provider name")
@click.option("--total", required=True, help="Total payment including VAT")
@click.option("--vat", help="VAT quota (defaults to total minus base, or 0)")
@click.option("--base", help="Tax base (defaults to total minus VAT)")
@click.option("--type", "expense_type", help="Expense type, used to pick the expense account")
@click.option("--payment", help=f"Payment method ({', '.join(PAYMENT_METHODS)})")
@click.pass_context
def add_expense(ctx, invoice, issue_date, provider, total, vat, base, expense_type, payment):
    """Add a provider invoice.

    Examples:
        clinicbooks expense add --invoice P-9 --date 2026-03-11 --provider "Lab XY" --total 242 --vat 42 --type Laboratorio --payment Efectivo
    """
    service = RecordService(ctx.obj["db"])
    parsed_date = _parse_or_exit(ctx, parse_date, issue_date, "date")
    total_payment = _parse_or_exit(ctx, parse_amount, total, "total")
    vat_quota = _parse_or_exit(ctx, parse_amount, vat, "VAT quota")
    tax_base = _parse_or_exit(ctx, parse_amount, base, "tax base")

    try:
        expense_id = service.create_expense(
            provider_invoice_number=invoice,
            issue_date=parsed_date,
            provider_name=provider,
            total_payment=total_payment,
            vat_quota=vat_quota,
            tax_base=tax_base,
            expense_type_label=expense_type,
            payment_method=payment,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Added expense {invoice} of {format_currency(total_payment)} "
        f"on {format_date(parsed_date)} (ID: {expense_id})"
    )


@expense_group.command("list")
@year_option
@click.pass_context
def list_expenses(ctx, year: int):
    """List the provider invoices of a fiscal year."""
    expenses = RecordService(ctx.obj["db"]).list_expenses(year)
    if not expenses:
        click.echo(f"No expenses for {year}.")
        return
    for exp in expenses:
        click.echo(
            f"{format_date(exp.issue_date)} | {exp.provider_invoice_number or '':<10} | "
            f"{exp.provider_name or '':<24} | {format_currency(exp.total_payment):>14} | "
            f"{exp.expense_type_label or ''}"
        )


@click.command("opening")
@click.argument("account_code")
@click.option("--name", help="Account name")
@click.option("--debit", help="Opening debit balance")
@click.option("--credit", help="Opening credit balance")
@year_option
@click.pass_context
def add_opening(ctx, account_code, name, debit, credit, year):
    """Record the opening balance of an account (Asiento de apertura).

    Examples:
        clinicbooks opening 57200000 --name "Banco" --debit 15000 --year 2026
    """
    service = RecordService(ctx.obj["db"])
    debit_balance = _parse_or_exit(ctx, parse_amount, debit, "debit") or ZERO
    credit_balance = _parse_or_exit(ctx, parse_amount, credit, "credit") or ZERO
    try:
        service.create_opening_balance(
            fiscal_year=year,
            account_code=account_code,
            account_name=name,
            debit_balance=debit_balance,
            credit_balance=credit_balance,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded opening balance for {account_code} in {year}")


def register_commands(cli):
    """Register record commands with main CLI."""
    cli.add_command(income_group)
    cli.add_command(expense_group)
    cli.add_command(add_opening)
