"""Tests for ledger aggregation."""

from datetime import date
from decimal import Decimal

from clinicbooks.domain.entities import (
    CatalogSnapshot,
    LedgerAccountSummary,
    LedgerEntry,
    OpeningBalance,
    TransactionType,
)
from clinicbooks.domain.journal import synthesize
from clinicbooks.domain.ledger import aggregate, apply_opening_balances, post_entry


def _entry(code, name, debit="0", credit="0", txn_id=1):
    return LedgerEntry(
        transaction_id=txn_id,
        date=date(2026, 2, 1),
        transaction_type=TransactionType.INVOICE,
        document_ref="D1",
        account_code=code,
        account_name=name,
        description="d",
        debit_amount=Decimal(debit),
        credit_amount=Decimal(credit),
    )


def test_aggregate_sums_per_account():
    ledger = aggregate(
        [
            _entry("57200000", "Banco", debit="100"),
            _entry("70500000", "Ventas", credit="100"),
            _entry("57200000", "Banco", credit="30", txn_id=2),
            _entry("62900000", "Gastos", debit="30", txn_id=2),
        ]
    )

    assert list(ledger) == ["57200000", "70500000", "62900000"]
    bank = ledger["57200000"]
    assert bank.total_debit == Decimal("100")
    assert bank.total_credit == Decimal("30")
    assert bank.balance == Decimal("70")
    assert ledger["70500000"].balance == Decimal("-100")


def test_first_account_name_wins():
    ledger = aggregate(
        [
            _entry("43012345", "Ana Ruiz", debit="10"),
            _entry("43012345", "Juan Gil", credit="10"),
        ]
    )
    assert ledger["43012345"].account_name == "Ana Ruiz"


def test_balance_correct_after_each_post():
    ledger = {}
    summary = post_entry(ledger, _entry("57000000", "Caja", debit="50"))
    assert summary.balance == Decimal("50")
    summary = post_entry(ledger, _entry("57000000", "Caja", credit="80"))
    assert summary.balance == Decimal("-30")
    assert ledger["57000000"] == summary


def test_summary_post_returns_new_summary():
    summary = LedgerAccountSummary(account_code="1", account_name="x")
    updated = summary.post(Decimal("5"), Decimal("2"))
    assert summary.total_debit == Decimal("0")
    assert updated.total_debit == Decimal("5")
    assert updated.total_credit == Decimal("2")
    assert updated.balance == Decimal("3")


def test_conservation_over_synthesized_period(ana_income, lab_expense, sample_catalogs):
    entries = synthesize([ana_income], [lab_expense], sample_catalogs).entries
    ledger = aggregate(entries)

    total_debit = sum((s.total_debit for s in ledger.values()), Decimal("0"))
    total_credit = sum((s.total_credit for s in ledger.values()), Decimal("0"))
    assert total_debit == total_credit
    assert sum((s.balance for s in ledger.values()), Decimal("0")) == Decimal("0")


def test_aggregate_idempotent(ana_income, lab_expense):
    entries = synthesize([ana_income], [lab_expense], CatalogSnapshot()).entries
    assert aggregate(entries) == aggregate(entries)


def test_empty_period():
    assert aggregate([]) == {}


class TestOpeningBalances:
    """Opening balances are injected on a copy of the ledger."""

    def test_existing_account_accumulates(self):
        ledger = aggregate([_entry("57200000", "Banco", debit="100")])
        opening = OpeningBalance(
            fiscal_year=2026,
            account_code="57200000",
            account_name="Banco Apertura",
            debit_balance=Decimal("1000"),
        )

        result = apply_opening_balances(ledger, [opening])

        assert result["57200000"].total_debit == Decimal("1100")
        assert result["57200000"].balance == Decimal("1100")
        assert result["57200000"].account_name == "Banco"
        # Journal-only ledger untouched
        assert ledger["57200000"].total_debit == Decimal("100")

    def test_new_account_added(self):
        opening = OpeningBalance(
            fiscal_year=2026,
            account_code=" 10000000 ",
            account_name="Capital social",
            credit_balance=Decimal("3000"),
        )
        result = apply_opening_balances({}, [opening])

        capital = result["10000000"]
        assert capital.account_name == "Capital social"
        assert capital.total_credit == Decimal("3000")
        assert capital.balance == Decimal("-3000")
