"""Shared --year option for commands working on a fiscal year."""

import click

from clinicbooks.utils.date_parser import current_fiscal_year


def year_option(func):
    """Add a --year option defaulting to the current fiscal year."""
    return click.option(
        "--year",
        type=click.IntRange(1900, 9999),
        default=current_fiscal_year,
        show_default="current year",
        help="Fiscal year",
    )(func)
