"""Domain model entities for clinicbooks.

Source records (incomes, expenses, dictionary rows) are read-only facts
loaded from the store. Ledger entries, account summaries and mapping gaps
are derived on every journal run and never persisted.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Optional

ZERO = Decimal("0")


def normalize_concept(name: Optional[str]) -> str:
    """Normalize a catalog key: trimmed and lower-cased."""
    return str(name or "").strip().lower()


@dataclass(frozen=True)
class IncomeRecord:
    """Patient invoice as stored upstream."""

    invoice_number: Optional[str] = None
    issue_date: Optional[date] = None
    client_name: Optional[str] = None
    total_amount: Decimal = ZERO
    vat_quota: Decimal = ZERO
    tax_base: Decimal = ZERO
    payment_method: Optional[str] = None
    treatment_name: Optional[str] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class ExpenseRecord:
    """Provider invoice as stored upstream."""

    provider_invoice_number: Optional[str] = None
    issue_date: Optional[date] = None
    provider_name: Optional[str] = None
    total_payment: Decimal = ZERO
    vat_quota: Decimal = ZERO
    tax_base: Decimal = ZERO
    expense_type_label: Optional[str] = None
    payment_method: Optional[str] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class CatalogRow:
    """Row of the treatment or expense-type catalog."""

    name: Optional[str]
    account_code: Optional[str]
    id: Optional[int] = None


class CategoryType(str, Enum):
    """Scope of an accounting-map concept."""

    INCOME = "Income"
    EXPENSE = "Expense"


@dataclass(frozen=True)
class AccountingMapRow:
    """Row of the accounting map (account code to display name)."""

    concept_name: Optional[str]
    account_code: Optional[str]
    category_type: Optional[str] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class OpeningBalance:
    """Opening balance of one account for a fiscal year."""

    fiscal_year: int
    account_code: str
    account_name: Optional[str]
    debit_balance: Decimal = ZERO
    credit_balance: Decimal = ZERO
    description: Optional[str] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class CatalogSnapshot:
    """Lookup maps built from the dictionary tables for one derivation."""

    treatment_accounts: Mapping[str, str] = field(default_factory=dict)
    expense_accounts: Mapping[str, str] = field(default_factory=dict)
    account_names: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze the maps so a pass can never mutate its own snapshot
        for name in ("treatment_accounts", "expense_accounts", "account_names"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    def treatment_account(self, treatment_name: Optional[str]) -> Optional[str]:
        """Revenue account for a treatment, or None if unmapped."""
        return self.treatment_accounts.get(normalize_concept(treatment_name))

    def expense_account(self, expense_type_label: Optional[str]) -> Optional[str]:
        """Expense account for an expense type, or None if unmapped."""
        return self.expense_accounts.get(normalize_concept(expense_type_label))

    def account_name(self, account_code: str, default: str) -> str:
        """Display name for an account code."""
        return self.account_names.get(account_code) or default


class TransactionType(str, Enum):
    """Kind of journal transaction."""

    INVOICE = "FACTURA"
    COLLECTION = "COBRO"
    PAYMENT = "PAGO"


@dataclass(frozen=True)
class LedgerEntry:
    """One line of the general journal."""

    transaction_id: int
    date: date
    transaction_type: TransactionType
    document_ref: str
    account_code: str
    account_name: str
    description: str
    debit_amount: Decimal = ZERO
    credit_amount: Decimal = ZERO


@dataclass(frozen=True)
class LedgerAccountSummary:
    """Debit/credit totals of one account over a period."""

    account_code: str
    account_name: str
    total_debit: Decimal = ZERO
    total_credit: Decimal = ZERO
    balance: Decimal = ZERO

    def post(self, debit: Decimal, credit: Decimal) -> "LedgerAccountSummary":
        """Return a copy with the amounts accumulated and the balance recomputed."""
        total_debit = self.total_debit + debit
        total_credit = self.total_credit + credit
        return replace(
            self,
            total_debit=total_debit,
            total_credit=total_credit,
            balance=total_debit - total_credit,
        )


@dataclass(frozen=True)
class MappingGap:
    """Expense whose category has no account in the expense catalog."""

    date: date
    document_ref: str
    concept_label: str
    amount: Decimal


@dataclass(frozen=True)
class SkippedRecord:
    """Source record left out of the journal because it is malformed."""

    record_kind: str
    document_ref: str
    reason: str


@dataclass(frozen=True)
class JournalSnapshot:
    """Complete derived state for one fiscal year."""

    fiscal_year: int
    entries: tuple[LedgerEntry, ...]
    ledger: Mapping[str, LedgerAccountSummary]
    mapping_gaps: tuple[MappingGap, ...]
    skipped_records: tuple[SkippedRecord, ...] = ()
    opening_balances: tuple[OpeningBalance, ...] = ()
