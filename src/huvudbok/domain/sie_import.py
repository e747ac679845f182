"""SIE4 import domain service.

SIE (Standard Import Export) type 4 files are line-based: every record starts
with a #LABEL followed by space-separated fields, where fields may be quoted
strings or {} object lists. Vouchers (#VER) own the #TRANS records inside
the braces that follow them.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

from huvudbok.database.base import Database
from huvudbok.domain.account import AccountService
from huvudbok.domain.entities import JournalLine
from huvudbok.domain.errors import DomainError
from huvudbok.domain.fiscal_year import FiscalYearManager, find_for_date
from huvudbok.domain.journal import JournalService
from huvudbok.domain.money import round_amount

logger = logging.getLogger(__name__)

SIE_ENCODING = "cp437"
TOKEN_PATTERN = re.compile(r'"(?:\\.|[^"\\])*"|\{[^}]*\}|[^\s"{}]+')
SIE_ACCOUNT_PATTERN = re.compile(r"^\d{4,6}$")


@dataclass(frozen=True)
class SieFiscalYear:
    index: int
    start_date: date
    end_date: date

    @property
    def name(self) -> str:
        if self.start_date.year == self.end_date.year:
            return str(self.start_date.year)
        return f"{self.start_date.year}/{self.end_date.year}"


@dataclass(frozen=True)
class SieAccount:
    account_number: str
    name: str


@dataclass(frozen=True)
class SieBalance:
    """An #IB, #UB or #RES record. Positive amounts are debit balances."""

    year_index: int
    account_number: str
    amount: Decimal


@dataclass(frozen=True)
class SieTransaction:
    account_number: str
    amount: Decimal
    description: Optional[str] = None


@dataclass
class SieVoucher:
    series: str
    number: Optional[int]
    voucher_date: date
    text: str
    transactions: list[SieTransaction] = field(default_factory=list)


@dataclass
class SieDocument:
    """Parsed content of a SIE4 file."""

    flag: Optional[int] = None
    program: Optional[str] = None
    company_name: Optional[str] = None
    organization_number: Optional[str] = None
    fiscal_years: list[SieFiscalYear] = field(default_factory=list)
    accounts: list[SieAccount] = field(default_factory=list)
    opening_balances: list[SieBalance] = field(default_factory=list)
    closing_balances: list[SieBalance] = field(default_factory=list)
    result_balances: list[SieBalance] = field(default_factory=list)
    vouchers: list[SieVoucher] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def fiscal_year(self, index: int) -> Optional[SieFiscalYear]:
        for fiscal_year in self.fiscal_years:
            if fiscal_year.index == index:
                return fiscal_year
        return None


@dataclass(frozen=True)
class SieValidation:
    errors: list[str]
    warnings: list[str]

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass
class SieImportResult:
    """Counts of what an import created or skipped."""

    accounts_created: int = 0
    accounts_skipped: int = 0
    fiscal_years_created: int = 0
    fiscal_years_skipped: int = 0
    opening_balance_entry_id: Optional[int] = None
    vouchers_imported: int = 0
    vouchers_failed: int = 0
    errors: list[str] = field(default_factory=list)


def tokenize(rest: str) -> list[str]:
    """Split the fields of a SIE record, unquoting strings."""
    tokens = []
    for token in TOKEN_PATTERN.findall(rest):
        if token.startswith('"'):
            token = re.sub(r"\\(.)", r"\1", token[1:-1])
        tokens.append(token)
    return tokens


def parse_sie_date(value: str) -> date:
    """Parse a YYYYMMDD date.

    Raises:
        ValueError: If the value is not a valid date
    """
    return datetime.strptime(value, "%Y%m%d").date()


def parse_sie_amount(value: str) -> Decimal:
    """Parse a SIE amount (period decimal separator).

    Raises:
        ValueError: If the value is not a number
    """
    try:
        return Decimal(value)
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {value}") from None


def _parse_balance(fields: list[str]) -> SieBalance:
    if len(fields) < 3:
        raise ValueError("expected year index, account and amount")
    return SieBalance(
        year_index=int(fields[0]),
        account_number=fields[1],
        amount=parse_sie_amount(fields[2]),
    )


def _parse_record(document: SieDocument, label: str, fields: list[str], voucher: Optional[SieVoucher]):
    """Apply one record to the document. Returns the voucher now open, if any."""
    if label == "FLAGGA":
        document.flag = int(fields[0])
    elif label == "PROGRAM":
        document.program = " ".join(fields)
    elif label == "FNAMN":
        document.company_name = fields[0]
    elif label == "ORGNR":
        document.organization_number = fields[0]
    elif label == "RAR":
        document.fiscal_years.append(
            SieFiscalYear(
                index=int(fields[0]),
                start_date=parse_sie_date(fields[1]),
                end_date=parse_sie_date(fields[2]),
            )
        )
    elif label == "KONTO":
        document.accounts.append(SieAccount(account_number=fields[0], name=fields[1]))
    elif label == "IB":
        document.opening_balances.append(_parse_balance(fields))
    elif label == "UB":
        document.closing_balances.append(_parse_balance(fields))
    elif label == "RES":
        document.result_balances.append(_parse_balance(fields))
    elif label == "VER":
        voucher = SieVoucher(
            series=fields[0],
            number=int(fields[1]) if len(fields) > 1 and fields[1] else None,
            voucher_date=parse_sie_date(fields[2]),
            text=fields[3] if len(fields) > 3 else "",
        )
        document.vouchers.append(voucher)
        return voucher
    elif label == "TRANS":
        if voucher is None:
            raise ValueError("#TRANS outside a voucher")
        # #TRANS account {objects} amount [date] [text] ...
        text = fields[4] if len(fields) > 4 else None
        voucher.transactions.append(
            SieTransaction(
                account_number=fields[0],
                amount=parse_sie_amount(fields[2]),
                description=text or None,
            )
        )
    return voucher


def parse_sie4(text: str) -> SieDocument:
    """Parse SIE4 text.

    Unknown record types are ignored. A malformed record is reported in
    document.errors and parsing continues with the next line.

    Args:
        text: Decoded file content

    Returns:
        SieDocument
    """
    document = SieDocument()
    voucher: Optional[SieVoucher] = None
    in_voucher_block = False

    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if line == "{":
            in_voucher_block = voucher is not None
            continue
        if line == "}":
            in_voucher_block = False
            voucher = None
            continue
        if not line.startswith("#"):
            continue

        label, _, rest = line[1:].partition(" ")
        label = label.upper()
        try:
            fields = tokenize(rest)
            if label == "TRANS" and not in_voucher_block:
                raise ValueError("#TRANS outside a voucher")
            voucher = _parse_record(document, label, fields, voucher)
        except (ValueError, IndexError) as e:
            document.errors.append(f"Line {line_number}: #{label}: {e}")

    return document


def read_sie_file(path: str) -> SieDocument:
    """Read and parse a SIE4 file stored in the PC8 (CP437) character set.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    sie_path = Path(path)
    if not sie_path.exists():
        raise FileNotFoundError(f"SIE file not found: {path}")
    with open(sie_path, "r", encoding=SIE_ENCODING) as f:
        return parse_sie4(f.read())


def validate_sie(document: SieDocument) -> SieValidation:
    """Check a parsed document before import."""
    errors = list(document.errors)
    warnings = []

    if not document.company_name:
        warnings.append("Company name not found in file")
    if not document.accounts:
        errors.append("No accounts found in file")

    seen = set()
    for account in document.accounts:
        if account.account_number in seen:
            warnings.append(f"Duplicate account number: {account.account_number}")
        seen.add(account.account_number)
        if not SIE_ACCOUNT_PATTERN.match(account.account_number):
            warnings.append(f"Invalid account number format: {account.account_number}")

    return SieValidation(errors=errors, warnings=warnings)


class SieImportService:
    """Service for importing a SIE4 document into an organization."""

    def __init__(self, db: Database, organization_id: str):
        """Initialize SIE import service.

        Args:
            db: Database instance
            organization_id: Organization receiving the data
        """
        self.db = db
        self.organization_id = organization_id
        self.account_service = AccountService(db, organization_id)
        self.fiscal_year_manager = FiscalYearManager(db, organization_id)
        self.journal_service = JournalService(db, organization_id)

    def import_document(
        self,
        document: SieDocument,
        import_opening_balances: bool = True,
        import_vouchers: bool = True,
    ) -> SieImportResult:
        """Import accounts, fiscal years, opening balances and vouchers.

        Existing accounts and fiscal years with identical dates are kept.
        Vouchers that fail to post are reported in result.errors and the
        rest of the import continues.

        Returns:
            SieImportResult
        """
        result = SieImportResult()
        self._import_accounts(document, result)
        self._import_fiscal_years(document, result)

        if import_opening_balances:
            self._import_opening_balances(document, result)
        if import_vouchers:
            self._import_vouchers(document, result)

        logger.info(
            "SIE import for %s: %d accounts, %d fiscal years, %d vouchers (%d failed)",
            self.organization_id,
            result.accounts_created,
            result.fiscal_years_created,
            result.vouchers_imported,
            result.vouchers_failed,
        )
        return result

    def _import_accounts(self, document: SieDocument, result: SieImportResult) -> None:
        for sie_account in document.accounts:
            if self.account_service.get_account_by_number(sie_account.account_number) is not None:
                result.accounts_skipped += 1
                continue
            try:
                self.account_service.create_account(sie_account.account_number, sie_account.name)
            except DomainError as e:
                result.errors.append(f"Account {sie_account.account_number}: {e}")
                result.accounts_skipped += 1
                continue
            result.accounts_created += 1

    def _import_fiscal_years(self, document: SieDocument, result: SieImportResult) -> None:
        existing = {
            (fy.start_date, fy.end_date) for fy in self.fiscal_year_manager.list_fiscal_years()
        }
        for sie_year in sorted(document.fiscal_years, key=lambda fy: fy.start_date):
            if (sie_year.start_date, sie_year.end_date) in existing:
                result.fiscal_years_skipped += 1
                continue
            try:
                self.fiscal_year_manager.create_fiscal_year(
                    sie_year.name, sie_year.start_date, sie_year.end_date
                )
            except DomainError as e:
                result.errors.append(f"Fiscal year {sie_year.name}: {e}")
                result.fiscal_years_skipped += 1
                continue
            result.fiscal_years_created += 1

    def _lines(self, transactions: list[tuple[str, Decimal, Optional[str]]]) -> list[JournalLine]:
        lines = []
        for order, (account_number, amount, description) in enumerate(transactions):
            account = self.account_service.require_account_by_number(account_number)
            amount = round_amount(amount)
            lines.append(
                JournalLine(
                    account_id=account.id,
                    debit_amount=amount if amount > 0 else round_amount(Decimal(0)),
                    credit_amount=-amount if amount < 0 else round_amount(Decimal(0)),
                    description=description,
                    line_order=order,
                )
            )
        return lines

    def _import_opening_balances(self, document: SieDocument, result: SieImportResult) -> None:
        current_year = document.fiscal_year(0)
        balances = [
            balance
            for balance in document.opening_balances
            if balance.year_index == 0 and balance.amount != 0
        ]
        if current_year is None or not balances:
            return

        fiscal_year = find_for_date(
            self.fiscal_year_manager.list_fiscal_years(), current_year.start_date
        )
        if fiscal_year is None:
            result.errors.append("Opening balances: no fiscal year for year 0")
            return

        try:
            lines = self._lines(
                [(balance.account_number, balance.amount, None) for balance in balances]
            )
            entry = self.journal_service.create_and_post(
                entry_date=fiscal_year.start_date,
                lines=lines,
                description="Ingående balanser",
                fiscal_year_id=fiscal_year.id,
            )
        except DomainError as e:
            result.errors.append(f"Opening balances: {e}")
            return
        result.opening_balance_entry_id = entry.id

    def _import_vouchers(self, document: SieDocument, result: SieImportResult) -> None:
        for voucher in document.vouchers:
            label = f"{voucher.series}{voucher.number if voucher.number is not None else ''}"
            try:
                lines = self._lines(
                    [(t.account_number, t.amount, t.description) for t in voucher.transactions]
                )
                self.journal_service.create_and_post(
                    entry_date=voucher.voucher_date,
                    lines=lines,
                    description=voucher.text,
                )
            except DomainError as e:
                result.errors.append(f"Voucher {label}: {e}")
                result.vouchers_failed += 1
                continue
            result.vouchers_imported += 1
