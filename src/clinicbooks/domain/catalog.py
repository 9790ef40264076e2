"""Catalog resolution: dictionary tables to account lookup maps."""

from collections.abc import Iterable
from typing import Optional

from clinicbooks.database.base import Database
from clinicbooks.domain.entities import (
    AccountingMapRow,
    CatalogRow,
    CatalogSnapshot,
    CategoryType,
    normalize_concept,
)
from clinicbooks.domain.errors import (
    ConflictError,
    ValidationError,
    duplicate_catalog_name,
    invalid_account_code,
)


def _concept_map(rows: Iterable[CatalogRow]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for row in rows:
        key = normalize_concept(row.name)
        code = str(row.account_code or "").strip()
        if not key or not code:
            continue
        mapping[key] = code
    return mapping


def build_catalog_snapshot(
    treatments: Iterable[CatalogRow],
    expense_types: Iterable[CatalogRow],
    accounting_map: Iterable[AccountingMapRow],
) -> CatalogSnapshot:
    """Build the lookup maps used by one journal derivation.

    Rows are applied in source order, so a later duplicate key replaces an
    earlier one. Rows without a name (or without an account code) are
    ignored.

    Args:
        treatments: Treatment catalog rows (treatment -> revenue account)
        expense_types: Expense catalog rows (expense type -> expense account)
        accounting_map: Accounting map rows (account code -> display name)

    Returns:
        Immutable CatalogSnapshot
    """
    account_names: dict[str, str] = {}
    for row in accounting_map:
        code = str(row.account_code or "").strip()
        if not code:
            continue
        account_names[code] = str(row.concept_name or "").strip()

    return CatalogSnapshot(
        treatment_accounts=_concept_map(treatments),
        expense_accounts=_concept_map(expense_types),
        account_names=account_names,
    )


def validate_account_code(account_code: str) -> str:
    """Return the trimmed account code or raise ValidationError."""
    code = (account_code or "").strip()
    if not code.isdigit():
        raise ValidationError(invalid_account_code(account_code))
    return code


class CatalogService:
    """Service for maintaining and resolving the accounting catalogs."""

    def __init__(self, db: Database):
        """Initialize catalog service.

        Args:
            db: Database instance
        """
        self.db = db

    def load_snapshot(self) -> CatalogSnapshot:
        """Read the three dictionary tables and build a snapshot."""
        return build_catalog_snapshot(
            self.db.list_treatment_catalog(),
            self.db.list_expense_catalog(),
            self.db.list_accounting_map(),
        )

    def add_treatment(self, name: str, account_code: str) -> int:
        """Register a treatment and the revenue account it is booked to.

        Raises:
            ValidationError: If the name is empty or the code is not numeric
            ConflictError: If the treatment already exists
        """
        name = self._require_name(name)
        code = validate_account_code(account_code)
        existing = {normalize_concept(row.name) for row in self.db.list_treatment_catalog()}
        if normalize_concept(name) in existing:
            raise ConflictError(duplicate_catalog_name("treatment catalog", name))
        return self.db.add_treatment(name=name, account_code=code)

    def add_expense_type(self, name: str, account_code: str) -> int:
        """Register an expense type and its expense account.

        Raises:
            ValidationError: If the name is empty or the code is not numeric
            ConflictError: If the expense type already exists
        """
        name = self._require_name(name)
        code = validate_account_code(account_code)
        existing = {normalize_concept(row.name) for row in self.db.list_expense_catalog()}
        if normalize_concept(name) in existing:
            raise ConflictError(duplicate_catalog_name("expense catalog", name))
        return self.db.add_expense_type(name=name, account_code=code)

    def add_account(
        self,
        concept_name: str,
        account_code: str,
        category_type: Optional[CategoryType] = None,
    ) -> int:
        """Give an account code a display name in the accounting map."""
        concept_name = self._require_name(concept_name)
        code = validate_account_code(account_code)
        return self.db.add_accounting_map_entry(
            concept_name=concept_name,
            account_code=code,
            category_type=category_type.value if category_type is not None else None,
        )

    def list_treatments(self) -> list[CatalogRow]:
        return self.db.list_treatment_catalog()

    def list_expense_types(self) -> list[CatalogRow]:
        return self.db.list_expense_catalog()

    def list_accounts(self) -> list[AccountingMapRow]:
        return self.db.list_accounting_map()

    @staticmethod
    def _require_name(name: str) -> str:
        clean = (name or "").strip()
        if not clean:
            raise ValidationError("Name cannot be empty")
        return clean
