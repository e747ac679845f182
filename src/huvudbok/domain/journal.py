"""Journal entry validation and posting."""

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional, Sequence

from huvudbok.database.base import Database
from huvudbok.domain.entities import (
    EntryStatus,
    EntryTotals,
    JournalEntry,
    JournalLine,
    ValidationResult,
)
from huvudbok.domain.errors import (
    NotFoundError,
    ValidationError,
    ValidationReason,
    account_not_found,
    entry_unbalanced,
    fiscal_year_not_found,
    invalid_status,
    journal_entry_not_found,
)
from huvudbok.domain.fiscal_year import check_entry_date, find_for_date
from huvudbok.domain.money import add, is_within_tolerance, round_amount

logger = logging.getLogger(__name__)

MIN_POSTABLE_LINES = 2
AMOUNT_FIELDS = ("debit_amount", "credit_amount")


def compute_totals(lines: Iterable[JournalLine]) -> EntryTotals:
    """Compute the live balance state of a set of lines.

    Totals are rounded after every addition; the entry is balanced when the
    difference is strictly less than 0.01.
    """
    total_debit = round_amount(Decimal(0))
    total_credit = round_amount(Decimal(0))
    for line in lines:
        total_debit = add(total_debit, line.debit_amount)
        total_credit = add(total_credit, line.credit_amount)

    difference = round_amount(total_debit - total_credit)
    return EntryTotals(
        total_debit=total_debit,
        total_credit=total_credit,
        difference=difference,
        is_balanced=is_within_tolerance(difference),
    )


def is_postable_line(line: JournalLine) -> bool:
    """A line counts when it has an account and a positive amount."""
    return line.account_id is not None and line.has_amount


def postable_lines(lines: Iterable[JournalLine]) -> list[JournalLine]:
    """Drop empty lines and renumber the rest in their current order."""
    kept = [line for line in lines if is_postable_line(line)]
    return [replace(line, line_order=index) for index, line in enumerate(kept)]


def edit_line(line: JournalLine, field: str, value: Any) -> JournalLine:
    """Apply a single field edit to a draft line.

    Entering a non-zero debit clears the credit and vice versa, so the last
    written side wins. Amounts are never summed.
    """
    edited = replace(line, **{field: value})
    if field in AMOUNT_FIELDS and value:
        other = "credit_amount" if field == "debit_amount" else "debit_amount"
        edited = replace(edited, **{other: round_amount(Decimal(0))})
    return edited


def validate_for_post(entry: JournalEntry) -> ValidationResult:
    """Decide whether a draft entry may be posted.

    Checks run in a fixed order and the first failure is reported.
    """
    totals = compute_totals(entry.lines)

    def reject(reason: ValidationReason, message: str) -> ValidationResult:
        return ValidationResult(is_valid=False, totals=totals, reason=reason, message=message)

    if entry.entry_date is None:
        return reject(ValidationReason.MISSING_DATE, "Entry date is required")

    for line in entry.lines:
        if line.debit_amount < 0 or line.credit_amount < 0:
            return reject(
                ValidationReason.NEGATIVE_AMOUNT,
                f"Line {line.line_order + 1} has a negative amount",
            )
        if line.debit_amount > 0 and line.credit_amount > 0:
            return reject(
                ValidationReason.BOTH_SIDES,
                f"Line {line.line_order + 1} has both a debit and a credit amount",
            )

    if len(postable_lines(entry.lines)) < MIN_POSTABLE_LINES:
        return reject(
            ValidationReason.INSUFFICIENT_LINES,
            "Journal entry must have at least two lines with an account and an amount",
        )

    for line in entry.lines:
        if line.account_id is None and line.has_amount:
            return reject(
                ValidationReason.MISSING_ACCOUNT,
                f"Line {line.line_order + 1} has an amount but no account",
            )

    if not totals.is_balanced:
        return reject(
            ValidationReason.UNBALANCED,
            entry_unbalanced(totals.total_debit, totals.total_credit),
        )

    if entry.status != EntryStatus.DRAFT:
        return reject(
            ValidationReason.NOT_DRAFT,
            invalid_status(entry.id, entry.status.value, EntryStatus.DRAFT.value),
        )

    return ValidationResult(is_valid=True, totals=totals)


class JournalService:
    """Service for drafting, posting and voiding journal entries."""

    def __init__(self, db: Database, organization_id: str):
        """Initialize journal service.

        Args:
            db: Database instance
            organization_id: Organization the entries belong to
        """
        self.db = db
        self.organization_id = organization_id

    def _resolve_fiscal_year_id(
        self, fiscal_year_id: Optional[int], entry_date: Optional[date]
    ) -> Optional[int]:
        if fiscal_year_id is not None:
            fiscal_year = self.db.get_fiscal_year(fiscal_year_id)
            if fiscal_year is None or fiscal_year.organization_id != self.organization_id:
                raise NotFoundError(fiscal_year_not_found(fiscal_year_id))
            return fiscal_year_id
        if entry_date is None:
            return None
        fiscal_year = find_for_date(self.db.list_fiscal_years(self.organization_id), entry_date)
        return fiscal_year.id if fiscal_year is not None else None

    def create_draft(
        self,
        entry_date: Optional[date],
        lines: Sequence[JournalLine],
        description: str = "",
        fiscal_year_id: Optional[int] = None,
    ) -> int:
        """Save a draft entry. Drafts may be unbalanced.

        When fiscal_year_id is omitted the fiscal year containing entry_date
        is used.

        Returns:
            Journal entry ID

        Raises:
            NotFoundError: If fiscal_year_id does not exist
        """
        resolved_fiscal_year_id = self._resolve_fiscal_year_id(fiscal_year_id, entry_date)
        entry_id = self.db.create_journal_entry(
            organization_id=self.organization_id,
            fiscal_year_id=resolved_fiscal_year_id,
            entry_date=entry_date,
            description=description,
            lines=list(lines),
        )
        logger.debug("Created draft journal entry %s", entry_id)
        return entry_id

    def update_draft(
        self,
        entry_id: int,
        entry_date: Optional[date],
        lines: Sequence[JournalLine],
        description: str = "",
        fiscal_year_id: Optional[int] = None,
    ) -> None:
        """Replace a draft's date, description and lines.

        Raises:
            NotFoundError: If the entry does not exist
            ValidationError: If the entry is no longer a draft
        """
        entry = self.require_entry(entry_id)
        if entry.status != EntryStatus.DRAFT:
            raise ValidationError(
                ValidationReason.NOT_DRAFT,
                invalid_status(entry_id, entry.status.value, EntryStatus.DRAFT.value),
            )
        resolved_fiscal_year_id = self._resolve_fiscal_year_id(fiscal_year_id, entry_date)
        self.db.update_journal_entry(
            entry_id=entry_id,
            fiscal_year_id=resolved_fiscal_year_id,
            entry_date=entry_date,
            description=description,
            lines=list(lines),
        )

    def get_entry(self, entry_id: int) -> Optional[JournalEntry]:
        """Get journal entry by ID, or None if it is not in this organization."""
        entry = self.db.get_journal_entry(entry_id)
        if entry is None or entry.organization_id != self.organization_id:
            return None
        return entry

    def require_entry(self, entry_id: int) -> JournalEntry:
        """Get journal entry by ID.

        Raises:
            NotFoundError: If the entry does not exist in this organization
        """
        entry = self.get_entry(entry_id)
        if entry is None:
            raise NotFoundError(journal_entry_not_found(entry_id))
        return entry

    def list_entries(
        self,
        fiscal_year_id: Optional[int] = None,
        status: Optional[EntryStatus] = None,
    ) -> list[JournalEntry]:
        """List entries ordered by date and verification number."""
        return self.db.list_journal_entries(
            organization_id=self.organization_id,
            fiscal_year_id=fiscal_year_id,
            status=status,
        )

    def post(self, entry_id: int) -> JournalEntry:
        """Post a draft entry.

        The entry must pass validation, lie inside an open fiscal year and
        reference existing accounts. Empty lines are dropped before posting.
        The store assigns the verification number; a conflicting number is
        propagated and posting is not retried.

        Returns:
            The posted entry

        Raises:
            NotFoundError: If the entry, its fiscal year or an account is unknown
            ValidationError: If the entry cannot be posted
            ConflictError: If the verification number is already taken
        """
        entry = self.require_entry(entry_id)

        result = validate_for_post(entry)
        if not result.is_valid:
            raise ValidationError(result.reason, result.message)

        fiscal_year_id = self._resolve_fiscal_year_id(entry.fiscal_year_id, entry.entry_date)
        if fiscal_year_id is None:
            raise ValidationError(
                ValidationReason.OUTSIDE_FISCAL_YEAR,
                f"No fiscal year covers entry date {entry.entry_date}",
            )
        check_entry_date(self.db.get_fiscal_year(fiscal_year_id), entry.entry_date)

        lines = postable_lines(entry.lines)
        for line in lines:
            account = self.db.get_account(line.account_id)
            if account is None or account.organization_id != self.organization_id:
                raise NotFoundError(account_not_found(line.account_id))

        self.db.update_journal_entry(
            entry_id=entry_id,
            fiscal_year_id=fiscal_year_id,
            entry_date=entry.entry_date,
            description=entry.description,
            lines=lines,
        )
        verification_number = self.db.post_journal_entry(entry_id)
        logger.info(
            "Posted journal entry %s as verification %s (%s)",
            entry_id,
            verification_number,
            result.totals.total_debit,
        )
        return self.require_entry(entry_id)

    def create_and_post(
        self,
        entry_date: date,
        lines: Sequence[JournalLine],
        description: str = "",
        fiscal_year_id: Optional[int] = None,
    ) -> JournalEntry:
        """Save a draft and post it immediately.

        The draft is kept when posting fails so it can be corrected.
        """
        entry_id = self.create_draft(
            entry_date=entry_date,
            lines=lines,
            description=description,
            fiscal_year_id=fiscal_year_id,
        )
        return self.post(entry_id)

    def void(self, entry_id: int, reason: Optional[str] = None) -> JournalEntry:
        """Void a posted entry. The entry is kept and can never be posted again.

        Raises:
            NotFoundError: If the entry does not exist
            ValidationError: If the entry is not posted
        """
        entry = self.require_entry(entry_id)
        if entry.status != EntryStatus.POSTED:
            raise ValidationError(
                ValidationReason.NOT_POSTED,
                invalid_status(entry_id, entry.status.value, EntryStatus.POSTED.value),
            )
        self.db.void_journal_entry(entry_id, reason)
        logger.info(
            "Voided verification %s (entry %s): %s",
            entry.verification_number,
            entry_id,
            reason or "no reason given",
        )
        return self.require_entry(entry_id)
