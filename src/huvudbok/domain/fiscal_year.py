"""Fiscal year domain service."""

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional, Sequence

from huvudbok.database.base import Database
from huvudbok.domain.entities import FiscalYear
from huvudbok.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    ValidationReason,
    entry_date_outside,
    fiscal_year_closed,
    fiscal_year_not_found,
    overlapping_fiscal_year,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookkeepingContext:
    """Organization and fiscal year selection threaded through core calls."""

    organization_id: str
    fiscal_year_id: Optional[int] = None

    def with_fiscal_year(self, fiscal_year_id: Optional[int]) -> "BookkeepingContext":
        return replace(self, fiscal_year_id=fiscal_year_id)


def select_default(fiscal_years: Sequence[FiscalYear]) -> Optional[int]:
    """Pick the fiscal year to use when nothing is selected.

    The first open year in the given order wins. If every year is closed,
    the most recently created one is used.

    Args:
        fiscal_years: Fiscal years in display order

    Returns:
        Fiscal year ID, or None if there are no fiscal years
    """
    if not fiscal_years:
        return None

    for fiscal_year in fiscal_years:
        if not fiscal_year.is_closed:
            return fiscal_year.id

    latest = max(fiscal_years, key=lambda fy: (fy.created_at, fy.start_date))
    return latest.id


def check_entry_date(fiscal_year: FiscalYear, entry_date: date) -> None:
    """Check that an entry may be posted on entry_date into fiscal_year.

    Raises:
        ValidationError: If the date is outside the year or the year is closed
    """
    if not fiscal_year.contains(entry_date):
        raise ValidationError(
            ValidationReason.OUTSIDE_FISCAL_YEAR,
            entry_date_outside(
                entry_date, fiscal_year.name, fiscal_year.start_date, fiscal_year.end_date
            ),
        )
    if fiscal_year.is_closed:
        raise ValidationError(
            ValidationReason.FISCAL_YEAR_CLOSED, fiscal_year_closed(fiscal_year.name)
        )


def find_for_date(fiscal_years: Sequence[FiscalYear], day: date) -> Optional[FiscalYear]:
    """Return the fiscal year containing day, if any."""
    for fiscal_year in fiscal_years:
        if fiscal_year.contains(day):
            return fiscal_year
    return None


class FiscalYearManager:
    """Service for an organization's accounting periods."""

    def __init__(self, db: Database, organization_id: str):
        """Initialize fiscal year manager.

        Args:
            db: Database instance
            organization_id: Organization whose periods are managed
        """
        self.db = db
        self.organization_id = organization_id

    def create_fiscal_year(self, name: str, start_date: date, end_date: date) -> int:
        """Create an open fiscal year.

        Raises:
            ValidationError: If start_date is after end_date
            ConflictError: If the period overlaps an existing fiscal year
        """
        if start_date > end_date:
            raise ValidationError(
                ValidationReason.INVALID_PERIOD,
                f"Fiscal year start {start_date} is after end {end_date}",
            )

        for existing in self.list_fiscal_years():
            if start_date <= existing.end_date and existing.start_date <= end_date:
                raise ConflictError(
                    overlapping_fiscal_year(existing.name, existing.start_date, existing.end_date)
                )

        fiscal_year_id = self.db.create_fiscal_year(
            organization_id=self.organization_id,
            name=name,
            start_date=start_date,
            end_date=end_date,
        )
        logger.info(
            "Created fiscal year '%s' (%s - %s) for organization %s",
            name,
            start_date,
            end_date,
            self.organization_id,
        )
        return fiscal_year_id

    def get_fiscal_year(self, fiscal_year_id: int) -> Optional[FiscalYear]:
        """Get fiscal year by ID, or None if it is not in this organization."""
        fiscal_year = self.db.get_fiscal_year(fiscal_year_id)
        if fiscal_year is None or fiscal_year.organization_id != self.organization_id:
            return None
        return fiscal_year

    def require_fiscal_year(self, fiscal_year_id: int) -> FiscalYear:
        """Get fiscal year by ID.

        Raises:
            NotFoundError: If the fiscal year does not exist in this organization
        """
        fiscal_year = self.get_fiscal_year(fiscal_year_id)
        if fiscal_year is None:
            raise NotFoundError(fiscal_year_not_found(fiscal_year_id))
        return fiscal_year

    def list_fiscal_years(self) -> list[FiscalYear]:
        """List fiscal years, most recent start date first."""
        return self.db.list_fiscal_years(self.organization_id)

    def find_for_date(self, day: date) -> Optional[FiscalYear]:
        """Return the fiscal year containing day, if any."""
        return find_for_date(self.list_fiscal_years(), day)

    def resolve_context(self, context: BookkeepingContext) -> BookkeepingContext:
        """Fill in the default fiscal year when the context has none selected.

        An existing selection is kept as is.
        """
        if context.fiscal_year_id is not None:
            return context
        return context.with_fiscal_year(select_default(self.list_fiscal_years()))

    def close(self, fiscal_year_id: int) -> None:
        """Close a fiscal year so no new entries can be posted into it.

        Raises:
            NotFoundError: If the fiscal year does not exist
            ValidationError: If it is already closed
        """
        fiscal_year = self.require_fiscal_year(fiscal_year_id)
        if fiscal_year.is_closed:
            raise ValidationError(
                ValidationReason.INVALID_TRANSITION,
                f"Fiscal year '{fiscal_year.name}' is already closed",
            )
        self.db.set_fiscal_year_closed(fiscal_year_id, True)
        logger.info("Closed fiscal year '%s' (ID %s)", fiscal_year.name, fiscal_year_id)

    def reopen(self, fiscal_year_id: int) -> None:
        """Reopen a closed fiscal year.

        Raises:
            NotFoundError: If the fiscal year does not exist
            ValidationError: If it is not closed
        """
        fiscal_year = self.require_fiscal_year(fiscal_year_id)
        if not fiscal_year.is_closed:
            raise ValidationError(
                ValidationReason.INVALID_TRANSITION,
                f"Fiscal year '{fiscal_year.name}' is not closed",
            )
        self.db.set_fiscal_year_closed(fiscal_year_id, False)
        logger.info("Reopened fiscal year '%s' (ID %s)", fiscal_year.name, fiscal_year_id)
