"""Tests for catalog resolution and the catalog service."""

import pytest

from clinicbooks.domain.catalog import build_catalog_snapshot, validate_account_code
from clinicbooks.domain.entities import AccountingMapRow, CatalogRow, CategoryType
from clinicbooks.domain.errors import ConflictError, ValidationError


def test_keys_are_trimmed_and_lower_cased():
    snapshot = build_catalog_snapshot(
        [CatalogRow(name="  Limpieza Dental ", account_code="70500001")],
        [CatalogRow(name="LABORATORIO", account_code="60700000")],
        [],
    )
    assert snapshot.treatment_accounts == {"limpieza dental": "70500001"}
    assert snapshot.expense_accounts == {"laboratorio": "60700000"}
    assert snapshot.treatment_account("limpieza DENTAL  ") == "70500001"
    assert snapshot.expense_account(" Laboratorio") == "60700000"


def test_rows_without_name_are_skipped():
    snapshot = build_catalog_snapshot(
        [CatalogRow(name=None, account_code="70500001"), CatalogRow(name="  ", account_code="70500002")],
        [CatalogRow(name="", account_code="60700000")],
        [AccountingMapRow(concept_name="Sin código", account_code=None)],
    )
    assert dict(snapshot.treatment_accounts) == {}
    assert dict(snapshot.expense_accounts) == {}
    assert dict(snapshot.account_names) == {}


def test_rows_without_account_code_are_unmapped():
    snapshot = build_catalog_snapshot([], [CatalogRow(name="Varios", account_code="")], [])
    assert snapshot.expense_account("Varios") is None


def test_duplicate_keys_last_row_wins():
    snapshot = build_catalog_snapshot(
        [],
        [
            CatalogRow(name="Alquiler", account_code="62100000"),
            CatalogRow(name="alquiler ", account_code="62100001"),
        ],
        [
            AccountingMapRow(concept_name="Banco", account_code="57200000"),
            AccountingMapRow(concept_name="Banco Principal", account_code="57200000"),
        ],
    )
    assert snapshot.expense_account("ALQUILER") == "62100001"
    assert snapshot.account_name("57200000", "Tesorería") == "Banco Principal"


def test_account_name_default():
    snapshot = build_catalog_snapshot([], [], [])
    assert snapshot.account_name("57299999", "Tesorería") == "Tesorería"


def test_snapshot_maps_are_read_only():
    snapshot = build_catalog_snapshot([CatalogRow(name="A", account_code="1")], [], [])
    with pytest.raises(TypeError):
        snapshot.treatment_accounts["b"] = "2"


def test_validate_account_code():
    assert validate_account_code(" 70500000 ") == "70500000"
    with pytest.raises(ValidationError):
        validate_account_code("705-000")
    with pytest.raises(ValidationError):
        validate_account_code("")


class TestCatalogService:
    """Tests for CatalogService against the database."""

    def test_load_snapshot(self, catalog_service, sample_catalogs):
        snapshot = catalog_service.load_snapshot()
        assert snapshot.treatment_account("Ortodoncia") == "70500002"
        assert snapshot.expense_account("laboratorio") == "60700000"
        assert snapshot.account_name("57200001", "x") == "Banco Tarjeta"

    def test_duplicate_treatment_rejected(self, catalog_service):
        catalog_service.add_treatment("Ortodoncia", "70500002")
        with pytest.raises(ConflictError):
            catalog_service.add_treatment(" ortodoncia", "70500003")

    def test_duplicate_expense_type_rejected(self, catalog_service):
        catalog_service.add_expense_type("Alquiler", "62100000")
        with pytest.raises(ConflictError):
            catalog_service.add_expense_type("ALQUILER", "62100000")

    def test_empty_name_rejected(self, catalog_service):
        with pytest.raises(ValidationError):
            catalog_service.add_treatment("  ", "70500000")

    def test_add_account_with_category(self, catalog_service):
        catalog_service.add_account("Ventas", "70500000", CategoryType.INCOME)
        rows = catalog_service.list_accounts()
        assert len(rows) == 1
        assert rows[0].category_type == "Income"
        assert rows[0].account_code == "70500000"
