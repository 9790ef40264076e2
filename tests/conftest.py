"""Shared pytest fixtures for clinicbooks tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal

import pytest

from clinicbooks.database.factories import create_sqlite_database
from clinicbooks.domain.catalog import CatalogService
from clinicbooks.domain.entities import ExpenseRecord, IncomeRecord
from clinicbooks.domain.journal_service import JournalService
from clinicbooks.domain.records import RecordService
from clinicbooks.logging_config import reset_logging


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo logging configuration done by CLI invocations."""
    yield
    reset_logging()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def catalog_service(temp_db):
    """Create a CatalogService with a temporary database."""
    return CatalogService(temp_db)


@pytest.fixture
def record_service(temp_db):
    """Create a RecordService with a temporary database."""
    return RecordService(temp_db)


@pytest.fixture
def journal_service(temp_db):
    """Create a JournalService with a temporary database."""
    return JournalService(temp_db)


@pytest.fixture
def sample_catalogs(catalog_service):
    """Register a small set of treatments, expense types and account names."""
    catalog_service.add_treatment("Limpieza dental", "70500001")
    catalog_service.add_treatment("Ortodoncia", "70500002")
    catalog_service.add_expense_type("Laboratorio", "60700000")
    catalog_service.add_expense_type("Alquiler", "62100000")
    catalog_service.add_account("Ingresos Limpieza", "70500001")
    catalog_service.add_account("Trabajos Laboratorio", "60700000")
    catalog_service.add_account("Banco Tarjeta", "57200001")
    return catalog_service.load_snapshot()


@pytest.fixture
def ana_income():
    """Income used in the simple income scenario."""
    return IncomeRecord(
        invoice_number="F001",
        issue_date=date(2026, 3, 10),
        client_name="Ana Ruiz",
        total_amount=Decimal("121.00"),
        vat_quota=Decimal("21.00"),
        tax_base=Decimal("100.00"),
        payment_method="Tarjeta",
    )


@pytest.fixture
def lab_expense():
    """Expense with an expense type missing from every catalog."""
    return ExpenseRecord(
        provider_invoice_number="P-9",
        issue_date=date(2026, 3, 11),
        provider_name="Lab XY",
        total_payment=Decimal("242.00"),
        vat_quota=Decimal("42.00"),
        tax_base=Decimal("200.00"),
        expense_type_label="Rarísimo",
        payment_method="Efectivo",
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
