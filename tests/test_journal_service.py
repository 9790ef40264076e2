"""Tests for the journal service and the displayed journal state."""

import logging
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from clinicbooks.domain.aux_account import client_account
from clinicbooks.domain.errors import UpstreamFetchError, ValidationError
from clinicbooks.domain.journal_service import JournalView


def _broken(*args, **kwargs):
    raise OperationalError("SELECT", {}, Exception("database is locked"))


@pytest.fixture
def clinic_year(record_service, sample_catalogs):
    """A fiscal year with one income, two expenses and an opening balance."""
    record_service.create_income(
        invoice_number="F001",
        issue_date=date(2026, 3, 10),
        client_name="Ana Ruiz",
        total_amount=Decimal("121"),
        vat_quota=Decimal("21"),
        payment_method="Tarjeta",
        treatment_name="Limpieza dental",
    )
    record_service.create_expense(
        provider_invoice_number="P-9",
        issue_date=date(2026, 3, 11),
        provider_name="Lab XY",
        total_payment=Decimal("242"),
        vat_quota=Decimal("42"),
        expense_type_label="Rarísimo",
        payment_method="Efectivo",
    )
    record_service.create_expense(
        provider_invoice_number="P-10",
        issue_date=date(2026, 4, 1),
        provider_name="Lab XY",
        total_payment=Decimal("100"),
        expense_type_label="laboratorio",
        payment_method="Transferencia",
    )
    # Other year, must not show up
    record_service.create_income("F900", date(2025, 12, 31), "Otro", Decimal("50"))
    record_service.create_opening_balance(2026, "57200000", "Banco", Decimal("1000"))


class TestJournalService:
    """Deriving the books of a fiscal year from the store."""

    def test_build_snapshot(self, journal_service, clinic_year):
        snapshot = journal_service.build_snapshot(2026)

        assert snapshot.fiscal_year == 2026
        assert {e.document_ref for e in snapshot.entries} == {"F001", "P-9", "P-10"}
        assert max(e.transaction_id for e in snapshot.entries) == 6
        assert snapshot.entries[1].account_code == "70500001"
        assert snapshot.skipped_records == ()
        assert [o.account_code for o in snapshot.opening_balances] == ["57200000"]

    def test_expense_type_resolved_from_catalog(self, journal_service, clinic_year):
        entries = journal_service.get_journal(2026)
        p10 = [e for e in entries if e.document_ref == "P-10"]
        assert p10[0].account_code == "60700000"
        assert p10[0].account_name == "Trabajos Laboratorio"

    def test_get_mapping_gaps(self, journal_service, clinic_year):
        gaps = journal_service.get_mapping_gaps(2026)
        assert [(g.document_ref, g.concept_label, g.amount) for g in gaps] == [
            ("P-9", "Rarísimo", Decimal("242")),
        ]

    def test_get_ledger(self, journal_service, clinic_year):
        ledger = journal_service.get_ledger(2026)
        client = ledger[client_account("Ana Ruiz")]
        assert client.balance == Decimal("0")
        assert "57200000" in ledger
        assert ledger["57200000"].total_credit == Decimal("100")
        assert ledger["57200000"].total_debit == Decimal("0")

    def test_get_ledger_with_opening(self, journal_service, clinic_year):
        ledger = journal_service.get_ledger(2026, include_opening=True)
        assert ledger["57200000"].total_debit == Decimal("1000")
        assert ledger["57200000"].balance == Decimal("900")

    def test_empty_year(self, journal_service, clinic_year):
        snapshot = journal_service.build_snapshot(2024)
        assert snapshot.entries == ()
        assert dict(snapshot.ledger) == {}
        assert snapshot.mapping_gaps == ()

    def test_derivation_is_repeatable(self, journal_service, clinic_year):
        assert journal_service.build_snapshot(2026) == journal_service.build_snapshot(2026)

    def test_fetch_failure_aborts(self, journal_service, temp_db, clinic_year, monkeypatch, caplog):
        monkeypatch.setattr(temp_db, "list_expenses", _broken)

        with caplog.at_level(logging.ERROR, logger="clinicbooks"):
            with pytest.raises(UpstreamFetchError, match="expenses"):
                journal_service.build_snapshot(2026)
        assert "expenses" in caplog.text


class TestJournalView:
    """Only the latest requested year may be published."""

    def test_refresh_publishes_snapshot(self, journal_service, clinic_year):
        view = JournalView(journal_service)
        assert view.refresh(2026) is True
        assert view.active_year == 2026
        assert view.snapshot.fiscal_year == 2026
        assert view.error is None
        assert view.loading is False

    def test_stale_result_discarded(self, journal_service, clinic_year):
        view = JournalView(journal_service)
        old_ticket = view.select_year(2025)
        new_ticket = view.select_year(2026)

        assert view.publish(old_ticket, snapshot=journal_service.build_snapshot(2025)) is False
        assert view.snapshot is None
        assert view.loading is True

        assert view.publish(new_ticket, snapshot=journal_service.build_snapshot(2026)) is True
        assert view.snapshot.fiscal_year == 2026

    def test_late_result_does_not_replace_newer(self, journal_service, clinic_year):
        view = JournalView(journal_service)
        old_ticket = view.select_year(2025)
        view.refresh(2026)

        assert view.publish(old_ticket, snapshot=journal_service.build_snapshot(2025)) is False
        assert view.snapshot.fiscal_year == 2026

    def test_error_keeps_previous_snapshot(self, journal_service, temp_db, clinic_year, monkeypatch):
        view = JournalView(journal_service)
        view.refresh(2026)
        previous = view.snapshot

        monkeypatch.setattr(temp_db, "list_incomes", _broken)
        assert view.refresh() is True

        assert isinstance(view.error, UpstreamFetchError)
        assert view.snapshot is previous
        assert view.loading is False

    def test_unexpected_error_clears_loading(self, journal_service, clinic_year):
        view = JournalView(journal_service)
        view.refresh(2026)
        previous = view.snapshot

        # Year 0 has no calendar range
        with pytest.raises(ValueError):
            view.refresh(0)

        assert view.loading is False
        assert view.error is None
        assert view.snapshot is previous

    def test_refresh_without_year(self, journal_service):
        with pytest.raises(ValidationError):
            JournalView(journal_service).refresh()
