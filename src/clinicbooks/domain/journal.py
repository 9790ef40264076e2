"""Journal (Libro Diario) synthesis from income and expense records.

Every income produces an invoice transaction (client against revenue and
output VAT) followed by a collection transaction (treasury against client).
Every expense produces an invoice transaction (expense and input VAT
against provider) followed by a payment transaction (provider against
treasury). Transaction ids are allocated densely from 1: incomes first,
then expenses, both in input order.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from clinicbooks.domain.aux_account import client_account, provider_account
from clinicbooks.domain.entities import (
    ZERO,
    CatalogSnapshot,
    ExpenseRecord,
    IncomeRecord,
    LedgerEntry,
    MappingGap,
    SkippedRecord,
    TransactionType,
)
from clinicbooks.domain.errors import MalformedRecordError, missing_issue_date
from clinicbooks.logging_config import get_logger

logger = get_logger("journal")

DEFAULT_REVENUE_ACCOUNT = "70500000"
DEFAULT_EXPENSE_ACCOUNT = "62900000"
VAT_OUTPUT_ACCOUNT = "47700000"
VAT_INPUT_ACCOUNT = "47200000"
DEFAULT_TREASURY_ACCOUNT = "57299999"

# Payment method -> treasury account (exact, case-sensitive match)
TREASURY_ACCOUNTS = {
    "Tarjeta": "57200001",
    "Transferencia": "57200000",
    "Efectivo": "57000000",
    "Domiciliación": "57200000",
}

VAT_OUTPUT_NAME = "H.P. IVA Repercutido"
VAT_INPUT_NAME = "H.P. IVA Soportado"
DEFAULT_REVENUE_NAME = "Ventas"
DEFAULT_TREASURY_NAME = "Tesorería"
DEFAULT_DOCUMENT_REF = "S/N"
DEFAULT_CLIENT_NAME = "Cliente Varios"
DEFAULT_PROVIDER_NAME = "Proveedor"

BALANCE_TOLERANCE = Decimal("1e-9")


def _text(value: Any) -> str:
    return str(value or "").strip()


def _amount(value: Any) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def treasury_account(payment_method: Optional[str]) -> str:
    """Resolve the treasury account for a payment method."""
    return TREASURY_ACCOUNTS.get(_text(payment_method), DEFAULT_TREASURY_ACCOUNT)


def validate_income(record: IncomeRecord) -> None:
    """Raise MalformedRecordError if the income cannot be journalized."""
    if record.issue_date is None:
        doc = _text(record.invoice_number or DEFAULT_DOCUMENT_REF)
        raise MalformedRecordError(missing_issue_date("income", doc))


def validate_expense(record: ExpenseRecord) -> None:
    """Raise MalformedRecordError if the expense cannot be journalized."""
    if record.issue_date is None:
        doc = _text(record.provider_invoice_number or DEFAULT_DOCUMENT_REF)
        raise MalformedRecordError(missing_issue_date("expense", doc))


@dataclass(frozen=True)
class SynthesisResult:
    """Output of one journal synthesis pass."""

    entries: tuple[LedgerEntry, ...]
    mapping_gaps: tuple[MappingGap, ...]
    skipped_records: tuple[SkippedRecord, ...] = ()


class JournalBuilder:
    """Accumulates ledger entries while allocating transaction ids."""

    def __init__(self, catalogs: CatalogSnapshot):
        self.catalogs = catalogs
        self.entries: list[LedgerEntry] = []
        self.mapping_gaps: list[MappingGap] = []
        self.skipped_records: list[SkippedRecord] = []
        self._next_id = 1

    @property
    def transaction_count(self) -> int:
        return self._next_id - 1

    def _new_transaction(self) -> int:
        transaction_id = self._next_id
        self._next_id += 1
        return transaction_id

    def _line(
        self,
        transaction_id: int,
        entry_date: date,
        transaction_type: TransactionType,
        doc: str,
        account_code: str,
        account_name: str,
        description: str,
        debit: Decimal = ZERO,
        credit: Decimal = ZERO,
    ) -> None:
        self.entries.append(
            LedgerEntry(
                transaction_id=transaction_id,
                date=entry_date,
                transaction_type=transaction_type,
                document_ref=doc,
                account_code=account_code,
                account_name=account_name,
                description=description,
                debit_amount=debit,
                credit_amount=credit,
            )
        )

    def _skip(self, record_kind: str, doc: str, error: MalformedRecordError) -> None:
        logger.warning("Skipping %s %s: %s", record_kind, doc, error)
        self.skipped_records.append(
            SkippedRecord(record_kind=record_kind, document_ref=doc, reason=str(error))
        )

    def add_income(self, record: IncomeRecord) -> None:
        """Journalize one income: invoice, then collection."""
        doc = _text(record.invoice_number or DEFAULT_DOCUMENT_REF)
        try:
            validate_income(record)
        except MalformedRecordError as e:
            self._skip("income", doc, e)
            return

        entry_date = record.issue_date
        # Defaults cover empty values only; whitespace-only text trims to ""
        client = _text(record.client_name or DEFAULT_CLIENT_NAME)
        total = _amount(record.total_amount)
        base = _amount(record.tax_base)
        vat = _amount(record.vat_quota)

        revenue_code = self.catalogs.treatment_account(record.treatment_name) or DEFAULT_REVENUE_ACCOUNT
        client_code = client_account(client)
        treasury_code = treasury_account(record.payment_method)
        treasury_name = self.catalogs.account_name(treasury_code, DEFAULT_TREASURY_NAME)

        invoice_id = self._new_transaction()
        kind = TransactionType.INVOICE
        self._line(invoice_id, entry_date, kind, doc, client_code, client, f"Fra. {doc}", debit=total)
        self._line(
            invoice_id,
            entry_date,
            kind,
            doc,
            revenue_code,
            self.catalogs.account_name(revenue_code, DEFAULT_REVENUE_NAME),
            f"Base {doc}",
            credit=base,
        )
        if vat > 0:
            self._line(
                invoice_id, entry_date, kind, doc, VAT_OUTPUT_ACCOUNT, VAT_OUTPUT_NAME, f"IVA {doc}", credit=vat
            )

        collection_id = self._new_transaction()
        kind = TransactionType.COLLECTION
        self._line(collection_id, entry_date, kind, doc, treasury_code, treasury_name, f"Cobro {doc}", debit=total)
        self._line(collection_id, entry_date, kind, doc, client_code, client, f"Cobro {doc}", credit=total)

    def add_expense(self, record: ExpenseRecord) -> None:
        """Journalize one expense: invoice, then payment."""
        doc = _text(record.provider_invoice_number or DEFAULT_DOCUMENT_REF)
        try:
            validate_expense(record)
        except MalformedRecordError as e:
            self._skip("expense", doc, e)
            return

        entry_date = record.issue_date
        provider = _text(record.provider_name or DEFAULT_PROVIDER_NAME)
        label = _text(record.expense_type_label)
        total = _amount(record.total_payment)
        base = _amount(record.tax_base)
        vat = _amount(record.vat_quota)

        expense_code = self.catalogs.expense_account(label)
        if not expense_code:
            expense_code = DEFAULT_EXPENSE_ACCOUNT
            self.mapping_gaps.append(
                MappingGap(date=entry_date, document_ref=doc, concept_label=label, amount=total)
            )
        provider_code = provider_account(provider)
        treasury_code = treasury_account(record.payment_method)
        treasury_name = self.catalogs.account_name(treasury_code, DEFAULT_TREASURY_NAME)

        invoice_id = self._new_transaction()
        kind = TransactionType.INVOICE
        self._line(
            invoice_id,
            entry_date,
            kind,
            doc,
            expense_code,
            self.catalogs.account_name(expense_code, label),
            f"Gasto {doc}",
            debit=base,
        )
        if vat > 0:
            self._line(
                invoice_id, entry_date, kind, doc, VAT_INPUT_ACCOUNT, VAT_INPUT_NAME, f"IVA {doc}", debit=vat
            )
        self._line(invoice_id, entry_date, kind, doc, provider_code, provider, f"Fra. {doc}", credit=total)

        payment_id = self._new_transaction()
        kind = TransactionType.PAYMENT
        self._line(payment_id, entry_date, kind, doc, provider_code, provider, f"Pago {doc}", debit=total)
        self._line(payment_id, entry_date, kind, doc, treasury_code, treasury_name, f"Pago {doc}", credit=total)

    def result(self) -> SynthesisResult:
        return SynthesisResult(
            entries=tuple(self.entries),
            mapping_gaps=tuple(self.mapping_gaps),
            skipped_records=tuple(self.skipped_records),
        )


def synthesize(
    incomes: Iterable[IncomeRecord],
    expenses: Iterable[ExpenseRecord],
    catalogs: CatalogSnapshot,
) -> SynthesisResult:
    """Derive the journal for a set of income and expense records.

    Args:
        incomes: Income records, in the order they should be numbered
        expenses: Expense records, numbered after all incomes
        catalogs: Catalog snapshot used to resolve accounts and names

    Returns:
        SynthesisResult with entries ordered by transaction id, the mapping
        gaps found among expenses and any records skipped as malformed
    """
    builder = JournalBuilder(catalogs)
    for income in incomes:
        builder.add_income(income)
    for expense in expenses:
        builder.add_expense(expense)

    result = builder.result()
    logger.info(
        "Synthesized %d journal lines (%d transactions), %d mapping gaps, %d skipped records",
        len(result.entries),
        builder.transaction_count,
        len(result.mapping_gaps),
        len(result.skipped_records),
    )
    return result


def sort_for_display(entries: Iterable[LedgerEntry]) -> list[LedgerEntry]:
    """Order entries newest first, then by transaction id descending.

    Lines of the same transaction keep their relative order.
    """
    return sorted(entries, key=lambda e: (e.date, e.transaction_id), reverse=True)


def transaction_totals(entries: Iterable[LedgerEntry]) -> dict[int, tuple[Decimal, Decimal]]:
    """Sum debits and credits per transaction id."""
    totals: dict[int, list[Decimal]] = defaultdict(lambda: [ZERO, ZERO])
    for entry in entries:
        totals[entry.transaction_id][0] += entry.debit_amount
        totals[entry.transaction_id][1] += entry.credit_amount
    return {txn_id: (debit, credit) for txn_id, (debit, credit) in totals.items()}


def unbalanced_transactions(entries: Sequence[LedgerEntry]) -> list[int]:
    """Return ids of transactions whose debits and credits differ."""
    return [
        txn_id
        for txn_id, (debit, credit) in sorted(transaction_totals(entries).items())
        if abs(debit - credit) > BALANCE_TOLERANCE
    ]
