"""Utility for resolving account references to IDs."""

from huvudbok.domain.account import ACCOUNT_NUMBER_PATTERN, AccountService
from huvudbok.domain.errors import NotFoundError, account_number_not_found


def resolve_account(account_service: AccountService, account: str) -> int:
    """Resolve a BAS account number or account name to an account ID.

    Args:
        account_service: AccountService instance
        account: 4-digit account number ("1930") or exact account name,
            compared case-insensitively

    Returns:
        Account ID

    Raises:
        NotFoundError: If no account matches
    """
    account = account.strip()
    if ACCOUNT_NUMBER_PATTERN.match(account):
        return account_service.require_account_by_number(account).id

    wanted = account.casefold()
    for acc in account_service.list_accounts():
        if acc.name.casefold() == wanted:
            return acc.id

    raise NotFoundError(account_number_not_found(account))
