"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from datetime import date

# Import entities directly to avoid circular import through domain/__init__.py
from huvudbok.domain.entities import (
    Account,
    AccountClass,
    EntryStatus,
    FiscalYear,
    JournalEntry,
    JournalLine,
    JournalTemplate,
)


class Database(ABC):
    """Abstract database interface for huvudbok.

    Every method is scoped by organization where the data is. Implementations
    must enforce uniqueness of verification numbers per organization.
    """

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

    # Account operations
    @abstractmethod
    def create_account(
        self,
        organization_id: str,
        account_number: str,
        name: str,
        account_class: AccountClass,
        name_en: Optional[str] = None,
    ) -> int:
        """Create a chart-of-accounts entry. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_number(self, organization_id: str, account_number: str) -> Optional[Account]:
        """Get account by BAS account number."""
        pass

    @abstractmethod
    def list_accounts(self, organization_id: str) -> list[Account]:
        """List accounts ordered by account number."""
        pass

    # Fiscal year operations
    @abstractmethod
    def create_fiscal_year(
        self, organization_id: str, name: str, start_date: date, end_date: date
    ) -> int:
        """Create an open fiscal year. Returns fiscal year ID."""
        pass

    @abstractmethod
    def get_fiscal_year(self, fiscal_year_id: int) -> Optional[FiscalYear]:
        """Get fiscal year by ID."""
        pass

    @abstractmethod
    def list_fiscal_years(self, organization_id: str) -> list[FiscalYear]:
        """List fiscal years, most recent start date first."""
        pass

    @abstractmethod
    def set_fiscal_year_closed(self, fiscal_year_id: int, is_closed: bool) -> None:
        """Close or reopen a fiscal year."""
        pass

    # Journal entry operations
    @abstractmethod
    def create_journal_entry(
        self,
        organization_id: str,
        fiscal_year_id: Optional[int],
        entry_date: Optional[date],
        description: str,
        lines: Sequence[JournalLine],
    ) -> int:
        """Create a draft journal entry with its lines. Returns entry ID."""
        pass

    @abstractmethod
    def update_journal_entry(
        self,
        entry_id: int,
        fiscal_year_id: Optional[int],
        entry_date: Optional[date],
        description: str,
        lines: Sequence[JournalLine],
    ) -> None:
        """Replace a draft entry's header fields and lines."""
        pass

    @abstractmethod
    def get_journal_entry(self, entry_id: int) -> Optional[JournalEntry]:
        """Get journal entry with lines ordered by line_order."""
        pass

    @abstractmethod
    def list_journal_entries(
        self,
        organization_id: str,
        fiscal_year_id: Optional[int] = None,
        status: Optional[EntryStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[JournalEntry]:
        """List journal entries with optional filters.

        Args:
            organization_id: Organization scope
            fiscal_year_id: Optional fiscal year filter
            status: Optional status filter
            start_date: Optional inclusive start date filter
            end_date: Optional inclusive end date filter
        """
        pass

    @abstractmethod
    def post_journal_entry(
        self, entry_id: int, verification_number: Optional[int] = None
    ) -> int:
        """Mark a draft as posted and assign its verification number.

        When verification_number is None the next number in the
        organization's sequence is used. Returns the assigned number.

        Raises:
            ConflictError: If the number is already taken in the organization
        """
        pass

    @abstractmethod
    def void_journal_entry(self, entry_id: int, reason: Optional[str] = None) -> None:
        """Mark a posted entry as voided."""
        pass

    # Journal template operations
    @abstractmethod
    def create_template(
        self,
        organization_id: str,
        name: str,
        description: str,
        default_description: Optional[str],
        lines: Sequence[JournalLine],
    ) -> int:
        """Create a journal template with its lines. Returns template ID.

        Raises:
            ConflictError: If the name is already used in the organization
        """
        pass

    @abstractmethod
    def get_template(self, template_id: int) -> Optional[JournalTemplate]:
        """Get template with lines ordered by line_order."""
        pass

    @abstractmethod
    def list_templates(self, organization_id: str) -> list[JournalTemplate]:
        """List templates, most used first, then by name."""
        pass

    @abstractmethod
    def update_template(
        self,
        template_id: int,
        name: str,
        description: str,
        default_description: Optional[str],
        lines: Optional[Sequence[JournalLine]] = None,
    ) -> None:
        """Update a template; lines are replaced only when given.

        Raises:
            ConflictError: If the new name is already used in the organization
        """
        pass

    @abstractmethod
    def delete_template(self, template_id: int) -> None:
        """Delete a template and its lines."""
        pass

    @abstractmethod
    def record_template_usage(self, template_id: int) -> None:
        """Increment the template's use count and stamp last_used_at."""
        pass
