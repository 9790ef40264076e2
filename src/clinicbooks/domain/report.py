"""Plain row projections of the journal and ledger for report generators.

Rows carry everything an exporter needs (Libro Diario / Libro Mayor) so it
can format without deriving anything again.
"""

from collections.abc import Iterable, Mapping
from dataclasses import astuple, dataclass, fields
from datetime import date
from decimal import Decimal

from clinicbooks.domain.entities import ZERO, LedgerAccountSummary, LedgerEntry


@dataclass(frozen=True)
class JournalRow:
    """One Libro Diario line."""

    date: date
    transaction_id: int
    account_code: str
    account_name: str
    description: str
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class LedgerRow:
    """One Libro Mayor account line."""

    account_code: str
    account_name: str
    total_debit: Decimal
    total_credit: Decimal
    balance: Decimal


@dataclass(frozen=True)
class LedgerTotals:
    """Footer totals of a Libro Mayor."""

    total_debit: Decimal
    total_credit: Decimal
    balance: Decimal


JOURNAL_HEADERS = tuple(f.name for f in fields(JournalRow))
LEDGER_HEADERS = tuple(f.name for f in fields(LedgerRow))


def journal_rows(entries: Iterable[LedgerEntry]) -> list[JournalRow]:
    """Project entries to journal rows, keeping their order."""
    return [
        JournalRow(
            date=e.date,
            transaction_id=e.transaction_id,
            account_code=e.account_code,
            account_name=e.account_name,
            description=e.description,
            debit=e.debit_amount,
            credit=e.credit_amount,
        )
        for e in entries
    ]


def ledger_rows(ledger: Mapping[str, LedgerAccountSummary]) -> list[LedgerRow]:
    """Project a ledger to rows sorted by account code."""
    return [
        LedgerRow(
            account_code=s.account_code,
            account_name=s.account_name,
            total_debit=s.total_debit,
            total_credit=s.total_credit,
            balance=s.balance,
        )
        for s in sorted(ledger.values(), key=lambda s: s.account_code)
    ]


def ledger_totals(rows: Iterable[LedgerRow]) -> LedgerTotals:
    """Sum debit and credit columns of ledger rows."""
    total_debit = ZERO
    total_credit = ZERO
    for row in rows:
        total_debit += row.total_debit
        total_credit += row.total_credit
    return LedgerTotals(
        total_debit=total_debit,
        total_credit=total_credit,
        balance=total_debit - total_credit,
    )


def row_values(row: JournalRow | LedgerRow) -> tuple:
    """Return a row as a plain tuple in header order."""
    return astuple(row)


def filter_entries(entries: Iterable[LedgerEntry], term: str) -> list[LedgerEntry]:
    """Keep entries matching a search term.

    Matches when the account code contains the term, or the account name or
    document reference contains it ignoring case.
    """
    needle = (term or "").strip().lower()
    if not needle:
        return list(entries)
    return [
        e
        for e in entries
        if needle in e.account_code
        or needle in e.account_name.lower()
        or needle in e.document_ref.lower()
    ]


def filter_ledger(
    ledger: Mapping[str, LedgerAccountSummary], term: str
) -> dict[str, LedgerAccountSummary]:
    """Keep accounts whose code or name matches a search term."""
    needle = (term or "").strip().lower()
    if not needle:
        return dict(ledger)
    return {
        code: s
        for code, s in ledger.items()
        if needle in code or needle in s.account_name.lower()
    }
