"""CLI helpers for account resolution."""

from __future__ import annotations

import click
from huvudbok.cli.error_handling import handle_domain_error
from huvudbok.domain.account import AccountService
from huvudbok.domain.errors import DomainError
from huvudbok.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str
) -> int:
    """Resolve account number or name, or exit with a CLI error."""
    try:
        return resolve_account(account_service, account)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
