"""Catalog management commands."""

import click

from clinicbooks.cli.error_handling import handle_domain_error
from clinicbooks.domain.catalog import CatalogService
from clinicbooks.domain.entities import CategoryType
from clinicbooks.domain.errors import DomainError


@click.group("catalog")
def catalog_group():
    """Manage treatment, expense type and account catalogs."""
    pass


@catalog_group.command("add-treatment")
@click.argument("name")
@click.argument("account_code")
@click.pass_context
def add_treatment(ctx, name: str, account_code: str):
    """Map a treatment to its revenue account.

    Examples:
        clinicbooks catalog add-treatment "Limpieza" 70500001
    """
    service = CatalogService(ctx.obj["db"])
    try:
        service.add_treatment(name=name, account_code=account_code)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Treatment '{name}' -> {account_code.strip()}")


@catalog_group.command("add-expense-type")
@click.argument("name")
@click.argument("account_code")
@click.pass_context
def add_expense_type(ctx, name: str, account_code: str):
    """Map an expense type to its expense account.

    Examples:
        clinicbooks catalog add-expense-type "Laboratorio" 60700000
    """
    service = CatalogService(ctx.obj["db"])
    try:
        service.add_expense_type(name=name, account_code=account_code)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Expense type '{name}' -> {account_code.strip()}")


@catalog_group.command("add-account")
@click.argument("account_code")
@click.argument("name")
@click.option(
    "--type",
    "category_type",
    type=click.Choice([c.value for c in CategoryType]),
    help="Concept category",
)
@click.pass_context
def add_account(ctx, account_code: str, name: str, category_type: str | None):
    """Give an account code a display name.

    Examples:
        clinicbooks catalog add-account 57200001 "Banco Tarjeta"
    """
    service = CatalogService(ctx.obj["db"])
    try:
        service.add_account(
            concept_name=name,
            account_code=account_code,
            category_type=CategoryType(category_type) if category_type else None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Account {account_code.strip()} named '{name}'")


@catalog_group.command("list")
@click.pass_context
def list_catalogs(ctx):
    """Show all catalog mappings."""
    service = CatalogService(ctx.obj["db"])

    sections = [
        ("Treatments", [(r.name, r.account_code) for r in service.list_treatments()]),
        ("Expense types", [(r.name, r.account_code) for r in service.list_expense_types()]),
        ("Accounts", [(r.account_code, r.concept_name) for r in service.list_accounts()]),
    ]
    for title, rows in sections:
        click.echo(f"\n{title}:")
        click.echo("-" * 60)
        if not rows:
            click.echo("  (none)")
        for key, value in rows:
            click.echo(f"  {key or '':<30} {value or ''}")


def register_commands(cli):
    """Register catalog commands with main CLI."""
    cli.add_command(catalog_group)
