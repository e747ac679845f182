"""General-ledger balance computation.

Ledgers are projections over posted journal entries and are recomputed on
every query. Balances are signed debit minus credit and rounded after every
arithmetic step.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, Optional, Sequence

from huvudbok.database.base import Database
from huvudbok.domain.entities import (
    Account,
    AccountLedger,
    EntryStatus,
    JournalEntry,
    JournalLine,
    LedgerEntry,
)
from huvudbok.domain.errors import (
    NotFoundError,
    account_not_found,
    fiscal_year_not_found,
)
from huvudbok.domain.money import add, round_amount

logger = logging.getLogger(__name__)

PostedLine = tuple[JournalEntry, JournalLine]


def posting_order(posted: PostedLine) -> tuple[date, int]:
    """Sort key for ledger rows: entry date, then verification number."""
    entry, _ = posted
    return (entry.entry_date, entry.verification_number or 0)


def iter_posted_lines(
    entries: Iterable[JournalEntry],
    fiscal_year_id: Optional[int] = None,
) -> Iterable[PostedLine]:
    """Yield (entry, line) pairs of posted entries, optionally for one fiscal year."""
    for entry in entries:
        if entry.status != EntryStatus.POSTED or entry.entry_date is None:
            continue
        if fiscal_year_id is not None and entry.fiscal_year_id != fiscal_year_id:
            continue
        for line in entry.lines:
            yield entry, line


def by_account_number(account: Account) -> str:
    return account.account_number


def in_range(day: date, start_date: Optional[date], end_date: Optional[date]) -> bool:
    if start_date is not None and day < start_date:
        return False
    if end_date is not None and day > end_date:
        return False
    return True


def require_known_accounts(accounts: Iterable[Account], account_ids: Iterable[int]) -> None:
    """Raise NotFoundError for the first account ID missing from accounts."""
    known = {account.id for account in accounts}
    missing = sorted(set(account_ids) - known)
    if missing:
        raise NotFoundError(account_not_found(missing[0]))


def compute_opening_balance(
    entries: Iterable[JournalEntry],
    account_id: int,
    start_date: Optional[date],
    fiscal_year_id: Optional[int] = None,
) -> Decimal:
    """Signed balance of an account from posted lines dated before start_date.

    Without a start date there is nothing to carry forward and the opening
    balance is zero.
    """
    balance = round_amount(Decimal(0))
    if start_date is None:
        return balance

    for entry, line in iter_posted_lines(entries, fiscal_year_id):
        if line.account_id == account_id and entry.entry_date < start_date:
            balance = add(balance, line.signed_amount)
    return balance


def build_account_ledger(
    account: Account,
    entries: Sequence[JournalEntry],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    fiscal_year_id: Optional[int] = None,
) -> AccountLedger:
    """Build the ledger for one account over [start_date, end_date].

    Args:
        account: Account to build the ledger for
        entries: Journal entries of the organization, in any order
        start_date: Optional inclusive start date; earlier lines form the
            opening balance
        end_date: Optional inclusive end date
        fiscal_year_id: Optional fiscal year restriction for both the
            opening balance and the rows

    Returns:
        AccountLedger with rows in (entry_date, verification_number) order
    """
    opening_balance = compute_opening_balance(entries, account.id, start_date, fiscal_year_id)

    posted = sorted(
        (
            (entry, line)
            for entry, line in iter_posted_lines(entries, fiscal_year_id)
            if line.account_id == account.id and in_range(entry.entry_date, start_date, end_date)
        ),
        key=posting_order,
    )

    running_balance = opening_balance
    total_debit = round_amount(Decimal(0))
    total_credit = round_amount(Decimal(0))
    rows = []
    for entry, line in posted:
        running_balance = add(running_balance, line.signed_amount)
        total_debit = add(total_debit, line.debit_amount)
        total_credit = add(total_credit, line.credit_amount)
        rows.append(
            LedgerEntry(
                journal_entry_id=entry.id,
                entry_date=entry.entry_date,
                verification_number=entry.verification_number,
                entry_description=entry.description,
                line_description=line.description,
                debit=round_amount(line.debit_amount),
                credit=round_amount(line.credit_amount),
                running_balance=running_balance,
            )
        )

    closing_balance = rows[-1].running_balance if rows else opening_balance
    return AccountLedger(
        account=account,
        opening_balance=opening_balance,
        entries=tuple(rows),
        total_debit=total_debit,
        total_credit=total_credit,
        closing_balance=closing_balance,
        start_date=start_date,
        end_date=end_date,
    )


def build_general_ledger(
    accounts: Iterable[Account],
    entries: Sequence[JournalEntry],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    fiscal_year_id: Optional[int] = None,
    sort_key: Optional[Callable[[Account], object]] = None,
) -> list[AccountLedger]:
    """Build ledgers for every account with at least one line in range.

    Each account is computed independently. Results are ordered by
    sort_key, which defaults to the account number.

    Raises:
        NotFoundError: If a posted line references an account not in accounts
    """
    active_ids = {
        line.account_id
        for entry, line in iter_posted_lines(entries, fiscal_year_id)
        if line.account_id is not None and in_range(entry.entry_date, start_date, end_date)
    }
    accounts = list(accounts)
    require_known_accounts(accounts, active_ids)
    if sort_key is None:
        sort_key = by_account_number

    selected = sorted((acc for acc in accounts if acc.id in active_ids), key=sort_key)
    return [
        build_account_ledger(account, entries, start_date, end_date, fiscal_year_id)
        for account in selected
    ]


class LedgerService:
    """Service answering general-ledger queries from the store."""

    def __init__(self, db: Database, organization_id: str):
        """Initialize ledger service.

        Args:
            db: Database instance
            organization_id: Organization whose books are read
        """
        self.db = db
        self.organization_id = organization_id

    def _posted_entries(self, fiscal_year_id: Optional[int]) -> list[JournalEntry]:
        if fiscal_year_id is not None:
            fiscal_year = self.db.get_fiscal_year(fiscal_year_id)
            if fiscal_year is None or fiscal_year.organization_id != self.organization_id:
                raise NotFoundError(fiscal_year_not_found(fiscal_year_id))
        return self.db.list_journal_entries(
            organization_id=self.organization_id,
            fiscal_year_id=fiscal_year_id,
            status=EntryStatus.POSTED,
        )

    def get_account_ledger(
        self,
        account_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        fiscal_year_id: Optional[int] = None,
    ) -> AccountLedger:
        """Get the ledger for one account.

        Raises:
            NotFoundError: If the account or fiscal year does not exist
        """
        account = self.db.get_account(account_id)
        if account is None or account.organization_id != self.organization_id:
            raise NotFoundError(account_not_found(account_id))

        entries = self._posted_entries(fiscal_year_id)
        ledger = build_account_ledger(account, entries, start_date, end_date, fiscal_year_id)
        logger.debug(
            "Ledger for account %s: %d rows, closing %s",
            account.account_number,
            len(ledger.entries),
            ledger.closing_balance,
        )
        return ledger

    def get_general_ledger(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        fiscal_year_id: Optional[int] = None,
        sort_key: Optional[Callable[[Account], object]] = None,
    ) -> list[AccountLedger]:
        """Get ledgers for all accounts with activity in the range.

        Raises:
            NotFoundError: If the fiscal year does not exist
        """
        entries = self._posted_entries(fiscal_year_id)
        accounts = self.db.list_accounts(self.organization_id)
        ledgers = build_general_ledger(
            accounts, entries, start_date, end_date, fiscal_year_id, sort_key
        )
        logger.debug("General ledger: %d accounts with activity", len(ledgers))
        return ledgers
