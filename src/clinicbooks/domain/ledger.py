"""General ledger (Libro Mayor) aggregation."""

from collections.abc import Iterable, Mapping

from clinicbooks.domain.entities import LedgerAccountSummary, LedgerEntry, OpeningBalance


def post_entry(
    ledger: dict[str, LedgerAccountSummary], entry: LedgerEntry
) -> LedgerAccountSummary:
    """Accumulate one entry into the ledger in place.

    The account name comes from the first entry seen for a code and is never
    overwritten by later entries.

    Returns:
        The updated summary for the entry's account
    """
    summary = ledger.get(entry.account_code)
    if summary is None:
        summary = LedgerAccountSummary(
            account_code=entry.account_code, account_name=entry.account_name
        )
    summary = summary.post(entry.debit_amount, entry.credit_amount)
    ledger[entry.account_code] = summary
    return summary


def aggregate(entries: Iterable[LedgerEntry]) -> dict[str, LedgerAccountSummary]:
    """Fold journal entries into per-account summaries.

    Args:
        entries: Journal entries of one period

    Returns:
        Dict of account code to summary, in order of first appearance
    """
    ledger: dict[str, LedgerAccountSummary] = {}
    for entry in entries:
        post_entry(ledger, entry)
    return ledger


def apply_opening_balances(
    ledger: Mapping[str, LedgerAccountSummary],
    opening_balances: Iterable[OpeningBalance],
) -> dict[str, LedgerAccountSummary]:
    """Return a copy of the ledger with opening balances added.

    Accounts that only appear in the opening balances are appended with the
    opening row's account name.
    """
    result = dict(ledger)
    for opening in opening_balances:
        code = opening.account_code.strip()
        summary = result.get(code)
        if summary is None:
            summary = LedgerAccountSummary(
                account_code=code, account_name=(opening.account_name or "").strip()
            )
        result[code] = summary.post(opening.debit_balance, opening.credit_balance)
    return result
