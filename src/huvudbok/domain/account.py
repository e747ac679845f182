"""Chart-of-accounts domain service."""

import logging
import re
from typing import Optional

from huvudbok.database.base import Database
from huvudbok.domain.bas_chart import BAS_STARTER_CHART
from huvudbok.domain.entities import Account as AccountEntity, AccountClass
from huvudbok.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    ValidationReason,
    account_not_found,
    account_number_not_found,
    duplicate_account_number,
)

logger = logging.getLogger(__name__)

ACCOUNT_NUMBER_PATTERN = re.compile(r"^[1-8]\d{3}$")


class AccountService:
    """Service for the organization's chart of accounts."""

    def __init__(self, db: Database, organization_id: str):
        """Initialize account service.

        Args:
            db: Database instance
            organization_id: Organization whose chart is managed
        """
        self.db = db
        self.organization_id = organization_id

    def create_account(
        self, account_number: str, name: str, name_en: Optional[str] = None
    ) -> int:
        """Add an account to the chart.

        The account class is derived from the leading digits of the number.

        Args:
            account_number: 4-digit BAS account number (1000-8999)
            name: Swedish account name
            name_en: Optional English name

        Returns:
            Account ID

        Raises:
            ValidationError: If the account number is not a BAS number
            ConflictError: If the account number already exists
        """
        account_number = account_number.strip()
        if not ACCOUNT_NUMBER_PATTERN.match(account_number):
            raise ValidationError(
                ValidationReason.INVALID_ACCOUNT_NUMBER,
                f"Invalid account number '{account_number}': expected 1000-8999",
            )

        if self.db.get_account_by_number(self.organization_id, account_number) is not None:
            raise ConflictError(duplicate_account_number(account_number))

        account_id = self.db.create_account(
            organization_id=self.organization_id,
            account_number=account_number,
            name=name,
            account_class=AccountClass.from_account_number(account_number),
            name_en=name_en,
        )
        logger.debug("Created account %s '%s' (ID %s)", account_number, name, account_id)
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID, or None if it is not in this organization."""
        account = self.db.get_account(account_id)
        if account is None or account.organization_id != self.organization_id:
            return None
        return account

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID.

        Raises:
            NotFoundError: If the account does not exist in this organization
        """
        account = self.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def get_account_by_number(self, account_number: str) -> Optional[AccountEntity]:
        """Get account by BAS number."""
        return self.db.get_account_by_number(self.organization_id, account_number)

    def require_account_by_number(self, account_number: str) -> AccountEntity:
        """Get account by BAS number.

        Raises:
            NotFoundError: If no account has this number
        """
        account = self.get_account_by_number(account_number)
        if account is None:
            raise NotFoundError(account_number_not_found(account_number))
        return account

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts ordered by account number."""
        return self.db.list_accounts(self.organization_id)

    def seed_bas_accounts(self) -> tuple[int, int]:
        """Add the BAS starter chart to the organization.

        Accounts whose number already exists are left untouched, so seeding
        can be repeated after some accounts were added by hand.

        Returns:
            Tuple of (created, skipped) counts
        """
        existing = {account.account_number for account in self.list_accounts()}
        created = 0
        for account_number, name, name_en in BAS_STARTER_CHART:
            if account_number in existing:
                continue
            self.create_account(account_number, name, name_en)
            created += 1

        skipped = len(BAS_STARTER_CHART) - created
        logger.info(
            "Seeded BAS chart for %s: %d created, %d already present",
            self.organization_id,
            created,
            skipped,
        )
        return created, skipped
