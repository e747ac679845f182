"""Domain model entities for huvudbok.

These are pure data classes representing bookkeeping concepts, independent of
database schema. Amounts are Decimal; parsing of user input happens before
values reach these classes.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

from huvudbok.domain.errors import ValidationReason

ZERO = Decimal("0.00")


class AccountClass(str, Enum):
    """Account class derived from the BAS account number."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"

    @classmethod
    def from_account_number(cls, account_number: str) -> "AccountClass":
        """Classify a 4-digit BAS account number.

        1xxx assets, 2000-2099 equity, 2100-2999 liabilities, 3xxx revenue,
        4xxx-7xxx expenses, 8000-8399 financial income, 8400-8999 financial
        expenses, appropriations and tax.
        """
        number = int(account_number[:4])
        if number < 2000:
            return cls.ASSET
        if number < 2100:
            return cls.EQUITY
        if number < 3000:
            return cls.LIABILITY
        if number < 4000:
            return cls.REVENUE
        if number < 8000:
            return cls.EXPENSE
        if number < 8400:
            return cls.REVENUE
        return cls.EXPENSE

    @property
    def is_debit_normal(self) -> bool:
        """Whether a debit increases the account's natural balance."""
        return self in (AccountClass.ASSET, AccountClass.EXPENSE)


class EntryStatus(str, Enum):
    """Journal entry lifecycle state."""

    DRAFT = "draft"
    POSTED = "posted"
    VOIDED = "voided"


class VatDirection(str, Enum):
    """Side of the VAT return a line belongs to."""

    OUTPUT = "output"
    INPUT = "input"


@dataclass(frozen=True)
class Account:
    """Chart-of-accounts entry."""

    id: int
    organization_id: str
    account_number: str
    name: str
    name_en: Optional[str]
    account_class: AccountClass


@dataclass(frozen=True)
class FiscalYear:
    """Accounting period (räkenskapsår); end_date is inclusive."""

    id: int
    organization_id: str
    name: str
    start_date: date
    end_date: date
    is_closed: bool
    created_at: datetime
    closed_at: Optional[datetime] = None

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class JournalLine:
    """A single debit or credit line of a journal entry."""

    account_id: Optional[int]
    debit_amount: Decimal = ZERO
    credit_amount: Decimal = ZERO
    description: Optional[str] = None
    line_order: int = 0
    vat_rate: Optional[Decimal] = None
    vat_base: Optional[Decimal] = None
    vat_amount: Optional[Decimal] = None
    vat_direction: Optional[VatDirection] = None

    @property
    def has_amount(self) -> bool:
        return self.debit_amount > 0 or self.credit_amount > 0

    @property
    def signed_amount(self) -> Decimal:
        """Debit minus credit."""
        return self.debit_amount - self.credit_amount


@dataclass(frozen=True)
class JournalEntry:
    """Journal entry (verifikation) with its lines."""

    id: Optional[int]
    organization_id: str
    fiscal_year_id: Optional[int]
    entry_date: Optional[date]
    description: str = ""
    verification_number: Optional[int] = None
    status: EntryStatus = EntryStatus.DRAFT
    lines: tuple[JournalLine, ...] = ()
    created_at: Optional[datetime] = None
    posted_at: Optional[datetime] = None
    voided_at: Optional[datetime] = None
    void_reason: Optional[str] = None

    @property
    def is_posted(self) -> bool:
        return self.status == EntryStatus.POSTED


@dataclass(frozen=True)
class JournalTemplate:
    """Reusable set of journal lines for recurring entries.

    Template lines use the JournalLine shape; their amounts may be zero or
    unbalanced and are completed on the draft created from the template.
    """

    id: int
    organization_id: str
    name: str
    description: str = ""
    default_description: Optional[str] = None
    lines: tuple[JournalLine, ...] = ()
    use_count: int = 0
    last_used_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class EntryTotals:
    """Live balance state of a set of journal lines."""

    total_debit: Decimal
    total_credit: Decimal
    difference: Decimal
    is_balanced: bool


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of checking whether a draft may be posted."""

    is_valid: bool
    totals: EntryTotals
    reason: Optional[ValidationReason] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class LedgerEntry:
    """One general-ledger row for a journal line touching an account."""

    journal_entry_id: Optional[int]
    entry_date: date
    verification_number: Optional[int]
    entry_description: str
    line_description: Optional[str]
    debit: Decimal
    credit: Decimal
    running_balance: Decimal


@dataclass(frozen=True)
class AccountLedger:
    """General ledger for one account over a date range."""

    account: Account
    opening_balance: Decimal
    entries: tuple[LedgerEntry, ...]
    total_debit: Decimal
    total_credit: Decimal
    closing_balance: Decimal
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass(frozen=True)
class VatGroup:
    """VAT totals for one tax rate on one side of the return."""

    rate: Decimal
    tax_base: Decimal
    vat_amount: Decimal
    transaction_count: int


@dataclass(frozen=True)
class VatSection:
    """Output or input side of a VAT report."""

    rate_groups: tuple[VatGroup, ...] = field(default_factory=tuple)
    total: Decimal = ZERO


@dataclass(frozen=True)
class VatReport:
    """Statutory VAT summary (momsrapport) for a date range."""

    start_date: date
    end_date: date
    output_vat: VatSection
    input_vat: VatSection
    net_vat: Decimal

    @property
    def is_payable(self) -> bool:
        """True when VAT is owed to the tax authority, False for a refund."""
        return self.net_vat >= 0
