"""Mapper functions to convert SQLAlchemy models into domain records.

This is the one place where stored rows become canonical domain records:
missing amounts become zero and text fields are passed through as stored.
"""

from decimal import Decimal
from typing import Optional

from clinicbooks.domain import entities as domain
from clinicbooks.database.models import (
    AccountingMap as ORMAccountingMap,
    Expense as ORMExpense,
    ExpenseCatalog as ORMExpenseCatalog,
    Income as ORMIncome,
    OpeningBalanceRow as ORMOpeningBalance,
    TreatmentCatalog as ORMTreatmentCatalog,
)


def _amount(value: Optional[Decimal]) -> Decimal:
    return Decimal(value) if value is not None else domain.ZERO


def catalog_row_to_domain(
    orm_row: ORMTreatmentCatalog | ORMExpenseCatalog,
) -> domain.CatalogRow:
    """Convert a treatment or expense catalog row to a domain CatalogRow."""
    return domain.CatalogRow(
        id=orm_row.id,
        name=orm_row.name,
        account_code=orm_row.account_code,
    )


def accounting_map_to_domain(orm_row: ORMAccountingMap) -> domain.AccountingMapRow:
    """Convert an accounting map row to a domain AccountingMapRow."""
    return domain.AccountingMapRow(
        id=orm_row.id,
        concept_name=orm_row.concept_name,
        account_code=orm_row.account_code,
        category_type=orm_row.category_type,
    )


def income_to_domain(orm_income: ORMIncome) -> domain.IncomeRecord:
    """Convert SQLAlchemy Income model to domain IncomeRecord."""
    return domain.IncomeRecord(
        id=orm_income.id,
        invoice_number=orm_income.invoice_number,
        issue_date=orm_income.issue_date,
        client_name=orm_income.client_name,
        total_amount=_amount(orm_income.total_amount),
        vat_quota=_amount(orm_income.vat_quota),
        tax_base=_amount(orm_income.tax_base),
        payment_method=orm_income.payment_method,
        treatment_name=orm_income.treatment_name,
    )


def expense_to_domain(orm_expense: ORMExpense) -> domain.ExpenseRecord:
    """Convert SQLAlchemy Expense model to domain ExpenseRecord."""
    return domain.ExpenseRecord(
        id=orm_expense.id,
        provider_invoice_number=orm_expense.provider_invoice_number,
        issue_date=orm_expense.issue_date,
        provider_name=orm_expense.provider_name,
        total_payment=_amount(orm_expense.total_payment),
        vat_quota=_amount(orm_expense.vat_quota),
        tax_base=_amount(orm_expense.tax_base),
        expense_type_label=orm_expense.expense_type_label,
        payment_method=orm_expense.payment_method,
    )


def opening_balance_to_domain(orm_row: ORMOpeningBalance) -> domain.OpeningBalance:
    """Convert an opening balance row to a domain OpeningBalance."""
    return domain.OpeningBalance(
        id=orm_row.id,
        fiscal_year=orm_row.fiscal_year,
        account_code=orm_row.account_code,
        account_name=orm_row.account_name,
        debit_balance=_amount(orm_row.debit_balance),
        credit_balance=_amount(orm_row.credit_balance),
        description=orm_row.description,
    )
