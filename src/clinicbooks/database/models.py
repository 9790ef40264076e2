"""SQLAlchemy models for clinicbooks database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Numeric,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class TreatmentCatalog(Base):
    """Treatment to revenue account dictionary."""

    __tablename__ = "treatment_catalog"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=True)
    account_code = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class ExpenseCatalog(Base):
    """Expense type to expense account dictionary."""

    __tablename__ = "expense_catalog"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=True)
    account_code = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class AccountingMap(Base):
    """Account code to display name dictionary."""

    __tablename__ = "accounting_map"

    id = Column(Integer, primary_key=True)
    concept_name = Column(String, nullable=True)
    account_code = Column(String, nullable=True)
    category_type = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Income(Base):
    """Patient invoice model."""

    __tablename__ = "incomes"

    id = Column(Integer, primary_key=True)
    invoice_number = Column(String, nullable=True)
    # Nullable: rows imported upstream may lack a date and are skipped by the journal
    issue_date = Column(Date, nullable=True, index=True)
    client_name = Column(String, nullable=True)
    total_amount = Column(Numeric(12, 2), nullable=True)
    vat_quota = Column(Numeric(12, 2), nullable=True)
    tax_base = Column(Numeric(12, 2), nullable=True)
    payment_method = Column(String, nullable=True)
    treatment_name = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Expense(Base):
    """Provider invoice model."""

    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True)
    provider_invoice_number = Column(String, nullable=True)
    issue_date = Column(Date, nullable=True, index=True)
    provider_name = Column(String, nullable=True)
    total_payment = Column(Numeric(12, 2), nullable=True)
    vat_quota = Column(Numeric(12, 2), nullable=True)
    tax_base = Column(Numeric(12, 2), nullable=True)
    expense_type_label = Column(String, nullable=True)
    payment_method = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class OpeningBalanceRow(Base):
    """Opening balance of an account for a fiscal year."""

    __tablename__ = "opening_balances"

    id = Column(Integer, primary_key=True)
    fiscal_year = Column(Integer, nullable=False, index=True)
    account_code = Column(String, nullable=False)
    account_name = Column(String, nullable=True)
    debit_balance = Column(Numeric(12, 2), nullable=True)
    credit_balance = Column(Numeric(12, 2), nullable=True)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
