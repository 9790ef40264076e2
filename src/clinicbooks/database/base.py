"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from clinicbooks.domain.entities import (
    AccountingMapRow,
    CatalogRow,
    ExpenseRecord,
    IncomeRecord,
    OpeningBalance,
)


class Database(ABC):
    """Abstract database interface for clinicbooks."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Dictionary tables
    @abstractmethod
    def list_treatment_catalog(self) -> list[CatalogRow]:
        """List treatment catalog rows in insertion order."""
        pass

    @abstractmethod
    def list_expense_catalog(self) -> list[CatalogRow]:
        """List expense catalog rows in insertion order."""
        pass

    @abstractmethod
    def list_accounting_map(self) -> list[AccountingMapRow]:
        """List accounting map rows in insertion order."""
        pass

    @abstractmethod
    def add_treatment(self, name: str, account_code: str) -> int:
        """Add a treatment catalog row. Returns row ID."""
        pass

    @abstractmethod
    def add_expense_type(self, name: str, account_code: str) -> int:
        """Add an expense catalog row. Returns row ID."""
        pass

    @abstractmethod
    def add_accounting_map_entry(
        self, concept_name: str, account_code: str, category_type: Optional[str] = None
    ) -> int:
        """Add an accounting map row. Returns row ID."""
        pass

    # Source records
    @abstractmethod
    def list_incomes(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[IncomeRecord]:
        """List incomes issued within the date range (inclusive), in insertion order."""
        pass

    @abstractmethod
    def list_expenses(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[ExpenseRecord]:
        """List expenses issued within the date range (inclusive), in insertion order."""
        pass

    @abstractmethod
    def income_exists(self, invoice_number: str, start_date: date, end_date: date) -> bool:
        """Check if an income with this invoice number exists in the range."""
        pass

    @abstractmethod
    def create_income(
        self,
        invoice_number: str,
        issue_date: date,
        client_name: str,
        total_amount: Decimal,
        vat_quota: Decimal,
        tax_base: Decimal,
        payment_method: Optional[str] = None,
        treatment_name: Optional[str] = None,
    ) -> int:
        """Create an income record. Returns income ID."""
        pass

    @abstractmethod
    def create_expense(
        self,
        provider_invoice_number: str,
        issue_date: date,
        provider_name: str,
        total_payment: Decimal,
        vat_quota: Decimal,
        tax_base: Decimal,
        expense_type_label: Optional[str] = None,
        payment_method: Optional[str] = None,
    ) -> int:
        """Create an expense record. Returns expense ID."""
        pass

    # Opening balances
    @abstractmethod
    def list_opening_balances(self, fiscal_year: int) -> list[OpeningBalance]:
        """List opening balances of a fiscal year."""
        pass

    @abstractmethod
    def create_opening_balance(
        self,
        fiscal_year: int,
        account_code: str,
        account_name: Optional[str],
        debit_balance: Decimal,
        credit_balance: Decimal,
        description: Optional[str] = None,
    ) -> int:
        """Create an opening balance row. Returns row ID."""
        pass
