"""Domain layer for huvudbok application.

Services are imported from their own modules (``huvudbok.domain.journal``,
``huvudbok.domain.ledger``, ...) so the database layer can import entities
without pulling the services in.
"""

from huvudbok.domain.entities import (
    Account,
    AccountClass,
    EntryStatus,
    FiscalYear,
    JournalEntry,
    JournalLine,
    JournalTemplate,
    VatDirection,
)
from huvudbok.domain.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
    ValidationReason,
)

__all__ = [
    "Account",
    "AccountClass",
    "EntryStatus",
    "FiscalYear",
    "JournalEntry",
    "JournalLine",
    "JournalTemplate",
    "VatDirection",
    "ConflictError",
    "DomainError",
    "NotFoundError",
    "ValidationError",
    "ValidationReason",
]
