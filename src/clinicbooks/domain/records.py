"""Income and expense record domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from clinicbooks.database.base import Database
from clinicbooks.domain.entities import ZERO, ExpenseRecord, IncomeRecord, OpeningBalance
from clinicbooks.domain.errors import (
    ConflictError,
    ValidationError,
    duplicate_invoice_number,
)
from clinicbooks.domain.catalog import validate_account_code
from clinicbooks.utils.date_parser import fiscal_year_range


def _split_amounts(
    total: Decimal, vat_quota: Optional[Decimal], tax_base: Optional[Decimal]
) -> tuple[Decimal, Decimal]:
    """Complete VAT quota and tax base so that total == base + VAT."""
    if vat_quota is None and tax_base is None:
        return ZERO, total
    if vat_quota is None:
        vat_quota = total - tax_base
    if tax_base is None:
        tax_base = total - vat_quota
    if vat_quota < 0 or tax_base < 0:
        raise ValidationError("VAT quota and tax base cannot be negative")
    if tax_base + vat_quota != total:
        raise ValidationError(
            f"Tax base {tax_base} plus VAT {vat_quota} does not match total {total}"
        )
    return vat_quota, tax_base


class RecordService:
    """Service for entering and listing income and expense records."""

    def __init__(self, db: Database):
        """Initialize record service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_income(
        self,
        invoice_number: str,
        issue_date: date,
        client_name: str,
        total_amount: Decimal,
        vat_quota: Optional[Decimal] = None,
        tax_base: Optional[Decimal] = None,
        payment_method: Optional[str] = None,
        treatment_name: Optional[str] = None,
    ) -> int:
        """Create an income record.

        Missing VAT quota or tax base are derived from the total.

        Returns:
            Income ID

        Raises:
            ValidationError: If fields are missing or amounts are inconsistent
            ConflictError: If the invoice number is already used in the fiscal year
        """
        invoice_number = (invoice_number or "").strip()
        if not invoice_number:
            raise ValidationError("Invoice number cannot be empty")
        if total_amount <= 0:
            raise ValidationError("Total amount must be positive")
        vat_quota, tax_base = _split_amounts(total_amount, vat_quota, tax_base)

        start, end = fiscal_year_range(issue_date.year)
        if self.db.income_exists(invoice_number, start, end):
            raise ConflictError(duplicate_invoice_number(invoice_number, issue_date.year))

        return self.db.create_income(
            invoice_number=invoice_number,
            issue_date=issue_date,
            client_name=(client_name or "").strip(),
            total_amount=total_amount,
            vat_quota=vat_quota,
            tax_base=tax_base,
            payment_method=payment_method,
            treatment_name=treatment_name,
        )

    def create_expense(
        self,
        provider_invoice_number: str,
        issue_date: date,
        provider_name: str,
        total_payment: Decimal,
        vat_quota: Optional[Decimal] = None,
        tax_base: Optional[Decimal] = None,
        expense_type_label: Optional[str] = None,
        payment_method: Optional[str] = None,
    ) -> int:
        """Create an expense record.

        Returns:
            Expense ID

        Raises:
            ValidationError: If fields are missing or amounts are inconsistent
        """
        provider_invoice_number = (provider_invoice_number or "").strip()
        if not provider_invoice_number:
            raise ValidationError("Provider invoice number cannot be empty")
        if total_payment <= 0:
            raise ValidationError("Total payment must be positive")
        vat_quota, tax_base = _split_amounts(total_payment, vat_quota, tax_base)

        return self.db.create_expense(
            provider_invoice_number=provider_invoice_number,
            issue_date=issue_date,
            provider_name=(provider_name or "").strip(),
            total_payment=total_payment,
            vat_quota=vat_quota,
            tax_base=tax_base,
            expense_type_label=expense_type_label,
            payment_method=payment_method,
        )

    def create_opening_balance(
        self,
        fiscal_year: int,
        account_code: str,
        account_name: Optional[str],
        debit_balance: Decimal = ZERO,
        credit_balance: Decimal = ZERO,
        description: Optional[str] = None,
    ) -> int:
        """Record the opening balance of an account for a fiscal year."""
        code = validate_account_code(account_code)
        if debit_balance < 0 or credit_balance < 0:
            raise ValidationError("Opening balances cannot be negative")
        return self.db.create_opening_balance(
            fiscal_year=fiscal_year,
            account_code=code,
            account_name=account_name,
            debit_balance=debit_balance,
            credit_balance=credit_balance,
            description=description,
        )

    def list_incomes(self, fiscal_year: int) -> list[IncomeRecord]:
        start, end = fiscal_year_range(fiscal_year)
        return self.db.list_incomes(start_date=start, end_date=end)

    def list_expenses(self, fiscal_year: int) -> list[ExpenseRecord]:
        start, end = fiscal_year_range(fiscal_year)
        return self.db.list_expenses(start_date=start, end_date=end)

    def list_opening_balances(self, fiscal_year: int) -> list[OpeningBalance]:
        return self.db.list_opening_balances(fiscal_year)
