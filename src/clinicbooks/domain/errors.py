"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class MalformedRecordError(DomainError):
    """A source record lacks a field the journal cannot do without."""


class UpstreamFetchError(DomainError):
    """Reading source data from the store failed.

    Aborts the whole derivation for the requested fiscal year.
    """


def missing_issue_date(record_kind: str, document_ref: str) -> str:
    """Return message for a record without issue date."""
    return f"{record_kind.capitalize()} {document_ref} has no issue date"


def upstream_fetch_failed(source: str, fiscal_year: int, error: Exception) -> str:
    """Return message for a failed read against the store."""
    return f"Could not load {source} for fiscal year {fiscal_year}: {error}"


def duplicate_catalog_name(table: str, name: str) -> str:
    """Return message for a catalog name that already exists."""
    return f"'{name}' already exists in {table}"


def invalid_account_code(account_code: str) -> str:
    """Return message for a malformed account code."""
    return f"Invalid account code '{account_code}': expected digits only"


def duplicate_invoice_number(invoice_number: str, fiscal_year: int) -> str:
    """Return message for an invoice number already used in the period."""
    return f"Invoice '{invoice_number}' already exists for fiscal year {fiscal_year}"
