"""Shared domain error messages and error types."""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


class ValidationReason(str, Enum):
    """Reason codes reported when an entry or period operation is rejected."""

    MISSING_DATE = "missing_date"
    NEGATIVE_AMOUNT = "negative_amount"
    BOTH_SIDES = "both_sides"
    INSUFFICIENT_LINES = "insufficient_lines"
    MISSING_ACCOUNT = "missing_account"
    UNBALANCED = "unbalanced"
    NOT_DRAFT = "not_draft"
    NOT_POSTED = "not_posted"
    OUTSIDE_FISCAL_YEAR = "outside_fiscal_year"
    FISCAL_YEAR_CLOSED = "fiscal_year_closed"
    INVALID_PERIOD = "invalid_period"
    INVALID_TRANSITION = "invalid_transition"
    INVALID_ACCOUNT_NUMBER = "invalid_account_number"
    INVALID_TEMPLATE = "invalid_template"


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    def __init__(self, reason: ValidationReason, message: str):
        super().__init__(message)
        self.reason = reason


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def account_number_not_found(account_number: str) -> str:
    """Return message for missing account by BAS number."""
    return f"Account number '{account_number}' not found"


def fiscal_year_not_found(fiscal_year_id: int) -> str:
    """Return message for missing fiscal year."""
    return f"Fiscal year {fiscal_year_id} not found"


def journal_entry_not_found(entry_id: int) -> str:
    """Return message for missing journal entry."""
    return f"Journal entry {entry_id} not found"


def template_not_found(template_id: int) -> str:
    """Return message for missing journal template."""
    return f"Template {template_id} not found"


def duplicate_template_name(name: str) -> str:
    """Return message when a template name is already taken."""
    return f"Template '{name}' already exists"


def duplicate_account_number(account_number: str) -> str:
    """Return message when an account number is already in the chart."""
    return f"Account number '{account_number}' already exists"


def duplicate_verification_number(organization_id: str, number: int) -> str:
    """Return message when a verification number was taken concurrently."""
    return (
        f"Verification number {number} is already used in organization "
        f"'{organization_id}'"
    )


def overlapping_fiscal_year(name: str, start_date: date, end_date: date) -> str:
    """Return message when a new period overlaps an existing one."""
    return (
        f"Fiscal year overlaps existing fiscal year '{name}' "
        f"({start_date} - {end_date})"
    )


def entry_unbalanced(total_debit: Decimal, total_credit: Decimal) -> str:
    """Return message for an entry whose debit and credit totals differ."""
    return (
        f"Entry is not balanced. Debit: {total_debit:.2f}, "
        f"Credit: {total_credit:.2f}, Difference: {total_debit - total_credit:.2f}"
    )


def entry_date_outside(entry_date: date, name: str, start_date: date, end_date: date) -> str:
    """Return message for an entry dated outside its fiscal year."""
    return (
        f"Entry date {entry_date} is outside fiscal year '{name}' "
        f"({start_date} - {end_date})"
    )


def fiscal_year_closed(name: str) -> str:
    """Return message when posting into a closed fiscal year."""
    return f"Fiscal year '{name}' is closed"


def invalid_status(entry_id: Optional[int], status: str, expected: str) -> str:
    """Return message for an entry in the wrong lifecycle state."""
    label = f"Journal entry {entry_id}" if entry_id is not None else "Journal entry"
    return f"{label} is {status}; only {expected} entries can do this"
