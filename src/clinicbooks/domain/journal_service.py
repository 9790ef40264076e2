"""Journal domain service: fetch a fiscal year and derive its books."""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from clinicbooks.database.base import Database
from clinicbooks.domain.catalog import build_catalog_snapshot
from clinicbooks.domain.entities import (
    CatalogSnapshot,
    ExpenseRecord,
    IncomeRecord,
    JournalSnapshot,
    LedgerAccountSummary,
    LedgerEntry,
    MappingGap,
    OpeningBalance,
)
from clinicbooks.domain.errors import (
    UpstreamFetchError,
    ValidationError,
    upstream_fetch_failed,
)
from clinicbooks.domain.journal import synthesize
from clinicbooks.domain.ledger import aggregate, apply_opening_balances
from clinicbooks.logging_config import get_logger
from clinicbooks.utils.date_parser import fiscal_year_range

logger = get_logger("journal_service")

T = TypeVar("T")


@dataclass(frozen=True)
class PeriodData:
    """Everything read from the store for one fiscal year."""

    fiscal_year: int
    catalogs: CatalogSnapshot
    incomes: tuple[IncomeRecord, ...]
    expenses: tuple[ExpenseRecord, ...]
    opening_balances: tuple[OpeningBalance, ...] = ()


def derive_snapshot(period: PeriodData) -> JournalSnapshot:
    """Derive journal, ledger and mapping gaps from fetched period data."""
    result = synthesize(period.incomes, period.expenses, period.catalogs)
    return JournalSnapshot(
        fiscal_year=period.fiscal_year,
        entries=result.entries,
        ledger=aggregate(result.entries),
        mapping_gaps=result.mapping_gaps,
        skipped_records=result.skipped_records,
        opening_balances=period.opening_balances,
    )


class JournalService:
    """Service exposing the derived books of a fiscal year."""

    def __init__(self, db: Database):
        """Initialize journal service.

        Args:
            db: Database instance
        """
        self.db = db

    def _fetch(self, source: str, fiscal_year: int, query: Callable[[], T]) -> T:
        try:
            return query()
        except (SQLAlchemyError, OSError) as e:
            logger.error("Fetching %s for %d failed: %s", source, fiscal_year, e)
            raise UpstreamFetchError(upstream_fetch_failed(source, fiscal_year, e)) from e

    def load_period(self, fiscal_year: int) -> PeriodData:
        """Read catalogs and the year's records from the store.

        Raises:
            UpstreamFetchError: If any of the reads fails
        """
        start, end = fiscal_year_range(fiscal_year)
        treatments = self._fetch("treatment_catalog", fiscal_year, self.db.list_treatment_catalog)
        expense_types = self._fetch("expense_catalog", fiscal_year, self.db.list_expense_catalog)
        accounting_map = self._fetch("accounting_map", fiscal_year, self.db.list_accounting_map)
        incomes = self._fetch(
            "incomes", fiscal_year, lambda: self.db.list_incomes(start_date=start, end_date=end)
        )
        expenses = self._fetch(
            "expenses", fiscal_year, lambda: self.db.list_expenses(start_date=start, end_date=end)
        )
        openings = self._fetch(
            "opening_balances", fiscal_year, lambda: self.db.list_opening_balances(fiscal_year)
        )
        return PeriodData(
            fiscal_year=fiscal_year,
            catalogs=build_catalog_snapshot(treatments, expense_types, accounting_map),
            incomes=tuple(incomes),
            expenses=tuple(expenses),
            opening_balances=tuple(openings),
        )

    def build_snapshot(self, fiscal_year: int) -> JournalSnapshot:
        """Fetch a fiscal year and derive its complete snapshot."""
        snapshot = derive_snapshot(self.load_period(fiscal_year))
        logger.debug(
            "Derived %d entries over %d accounts for %d",
            len(snapshot.entries),
            len(snapshot.ledger),
            fiscal_year,
        )
        return snapshot

    def get_journal(self, fiscal_year: int) -> list[LedgerEntry]:
        """Journal entries of the year, ordered by transaction id."""
        return list(self.build_snapshot(fiscal_year).entries)

    def get_ledger(
        self, fiscal_year: int, include_opening: bool = False
    ) -> dict[str, LedgerAccountSummary]:
        """Ledger of the year, optionally including opening balances."""
        snapshot = self.build_snapshot(fiscal_year)
        if include_opening:
            return apply_opening_balances(snapshot.ledger, snapshot.opening_balances)
        return dict(snapshot.ledger)

    def get_mapping_gaps(self, fiscal_year: int) -> list[MappingGap]:
        """Expenses of the year whose type has no catalog account."""
        return list(self.build_snapshot(fiscal_year).mapping_gaps)


class JournalView:
    """Currently displayed journal state, with a single writer.

    Each request for a year gets a ticket. A result is published only when
    its ticket is still the latest one, so a slow load of an earlier year
    never replaces the data of the year selected afterwards. Publication
    swaps the whole snapshot at once.
    """

    def __init__(self, service: JournalService):
        self.service = service
        self._lock = threading.Lock()
        self._ticket = 0
        self._active_year: Optional[int] = None
        self._snapshot: Optional[JournalSnapshot] = None
        self._error: Optional[UpstreamFetchError] = None
        self._loading = False

    @property
    def active_year(self) -> Optional[int]:
        return self._active_year

    @property
    def snapshot(self) -> Optional[JournalSnapshot]:
        return self._snapshot

    @property
    def error(self) -> Optional[UpstreamFetchError]:
        return self._error

    @property
    def loading(self) -> bool:
        return self._loading

    def select_year(self, fiscal_year: int) -> int:
        """Make a year the active selection and return the request ticket."""
        with self._lock:
            self._ticket += 1
            self._active_year = fiscal_year
            self._loading = True
            return self._ticket

    def publish(
        self,
        ticket: int,
        snapshot: Optional[JournalSnapshot] = None,
        error: Optional[UpstreamFetchError] = None,
    ) -> bool:
        """Publish the outcome of a request.

        Returns:
            True if the outcome was applied, False if the ticket was stale
        """
        with self._lock:
            if ticket != self._ticket:
                logger.info("Discarding stale journal result (ticket %d, current %d)", ticket, self._ticket)
                return False
            if error is not None:
                self._error = error
            else:
                self._snapshot = snapshot
                self._error = None
            self._loading = False
            return True

    def _end_loading(self, ticket: int) -> None:
        with self._lock:
            if ticket == self._ticket:
                self._loading = False

    def refresh(self, fiscal_year: Optional[int] = None) -> bool:
        """Load and derive a year, then publish it if still current.

        Unexpected errors propagate after the loading flag is cleared.

        Args:
            fiscal_year: Year to load; defaults to the active year

        Returns:
            True if the result (snapshot or error) was published
        """
        year = fiscal_year if fiscal_year is not None else self._active_year
        if year is None:
            raise ValidationError("No fiscal year selected")
        ticket = self.select_year(year)
        try:
            snapshot = self.service.build_snapshot(year)
        except UpstreamFetchError as e:
            return self.publish(ticket, error=e)
        except Exception:
            self._end_loading(ticket)
            raise
        return self.publish(ticket, snapshot=snapshot)
