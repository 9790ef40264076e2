"""Text formatting helpers for CLI output."""

from datetime import date
from decimal import Decimal


def format_currency(amount: Decimal) -> str:
    """Format an amount the Spanish way, e.g. '1.234,56 €'."""
    text = f"{amount:,.2f}"
    return text.replace(",", "_").replace(".", ",").replace("_", ".") + " €"


def format_amount_cell(amount: Decimal) -> str:
    """Format a debit/credit cell, '-' for zero."""
    return format_currency(amount) if amount else "-"


def format_date(value: date) -> str:
    """Format a date as dd/mm/yyyy."""
    return value.strftime("%d/%m/%Y")
