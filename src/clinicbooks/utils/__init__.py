"""Utility functions for clinicbooks."""

from clinicbooks.utils.date_parser import parse_date, fiscal_year_range
from clinicbooks.utils.amount_parser import parse_amount

__all__ = ["parse_date", "fiscal_year_range", "parse_amount"]
