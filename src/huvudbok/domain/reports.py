"""Financial statements: account balances, balance sheet and income statement.

Groups follow the BAS account ranges used in the Swedish ÅRL layouts.
Balances are recomputed from posted entries on every call.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from huvudbok.database.base import Database
from huvudbok.domain.entities import Account, EntryStatus, JournalEntry
from huvudbok.domain.errors import NotFoundError, fiscal_year_not_found
from huvudbok.domain.ledger import in_range, iter_posted_lines, require_known_accounts
from huvudbok.domain.money import add, is_within_tolerance, round_amount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountBalance:
    """Per-account totals; balance is on the account's normal side."""

    account: Account
    total_debit: Decimal
    total_credit: Decimal
    balance: Decimal


@dataclass(frozen=True)
class GroupDefinition:
    key: str
    name: str
    name_en: str
    first: int
    last: int
    debit_normal: bool
    section: str = ""

    def covers(self, account: Account) -> bool:
        return self.first <= int(account.account_number[:4]) <= self.last


@dataclass(frozen=True)
class StatementLine:
    account: Account
    amount: Decimal
    comparative_amount: Decimal


@dataclass(frozen=True)
class StatementGroup:
    key: str
    name: str
    name_en: str
    section: str
    lines: tuple[StatementLine, ...]
    total: Decimal
    comparative_total: Decimal


@dataclass(frozen=True)
class BalanceSheet:
    """Balansräkning as of a date."""

    as_of_date: date
    comparative_date: Optional[date]
    groups: tuple[StatementGroup, ...]
    result_for_period: Decimal
    comparative_result_for_period: Decimal
    total_assets: Decimal
    total_equity_and_liabilities: Decimal
    comparative_total_assets: Decimal
    comparative_total_equity_and_liabilities: Decimal

    @property
    def is_balanced(self) -> bool:
        return is_within_tolerance(self.total_assets - self.total_equity_and_liabilities)

    def section(self, name: str) -> tuple[StatementGroup, ...]:
        return tuple(group for group in self.groups if group.section == name)


@dataclass(frozen=True)
class IncomeStatement:
    """Resultaträkning for a period."""

    start_date: date
    end_date: date
    groups: tuple[StatementGroup, ...]
    operating_result: Decimal
    result_after_financial_items: Decimal
    result_before_tax: Decimal
    net_result: Decimal
    comparative_net_result: Decimal

    def group(self, key: str) -> StatementGroup:
        for group in self.groups:
            if group.key == key:
                return group
        raise KeyError(key)


ASSETS = "assets"
EQUITY_AND_LIABILITIES = "equity_and_liabilities"

BALANCE_SHEET_GROUPS = (
    GroupDefinition("intangible_assets", "Immateriella anläggningstillgångar", "Intangible assets", 1000, 1099, True, ASSETS),
    GroupDefinition("tangible_assets", "Materiella anläggningstillgångar", "Tangible assets", 1100, 1299, True, ASSETS),
    GroupDefinition("financial_assets", "Finansiella anläggningstillgångar", "Financial assets", 1300, 1399, True, ASSETS),
    GroupDefinition("inventory", "Varulager m.m.", "Inventory", 1400, 1499, True, ASSETS),
    GroupDefinition("receivables", "Kortfristiga fordringar", "Short-term receivables", 1500, 1799, True, ASSETS),
    GroupDefinition("short_term_investments", "Kortfristiga placeringar", "Short-term investments", 1800, 1899, True, ASSETS),
    GroupDefinition("cash_and_bank", "Kassa och bank", "Cash and bank", 1900, 1999, True, ASSETS),
    GroupDefinition("restricted_equity", "Bundet eget kapital", "Restricted equity", 2000, 2089, False, EQUITY_AND_LIABILITIES),
    GroupDefinition("unrestricted_equity", "Fritt eget kapital", "Non-restricted equity", 2090, 2099, False, EQUITY_AND_LIABILITIES),
    GroupDefinition("untaxed_reserves", "Obeskattade reserver", "Untaxed reserves", 2100, 2199, False, EQUITY_AND_LIABILITIES),
    GroupDefinition("provisions", "Avsättningar", "Provisions", 2200, 2299, False, EQUITY_AND_LIABILITIES),
    GroupDefinition("long_term_liabilities", "Långfristiga skulder", "Long-term liabilities", 2300, 2399, False, EQUITY_AND_LIABILITIES),
    GroupDefinition("short_term_liabilities", "Kortfristiga skulder", "Short-term liabilities", 2400, 2999, False, EQUITY_AND_LIABILITIES),
)

INCOME_STATEMENT_GROUPS = (
    GroupDefinition("net_sales", "Nettoomsättning", "Net sales", 3000, 3799, False),
    GroupDefinition("other_operating_income", "Övriga rörelseintäkter", "Other operating income", 3800, 3999, False),
    GroupDefinition("goods_for_resale", "Handelsvaror", "Goods for resale", 4000, 4999, True),
    GroupDefinition("other_external_expenses", "Övriga externa kostnader", "Other external expenses", 5000, 6999, True),
    GroupDefinition("personnel_costs", "Personalkostnader", "Personnel costs", 7000, 7699, True),
    GroupDefinition("depreciation", "Av- och nedskrivningar", "Depreciation and amortization", 7700, 7899, True),
    GroupDefinition("other_operating_expenses", "Övriga rörelsekostnader", "Other operating expenses", 7900, 7999, True),
    GroupDefinition("financial_income", "Finansiella intäkter", "Financial income", 8000, 8399, False),
    GroupDefinition("financial_expenses", "Finansiella kostnader", "Financial expenses", 8400, 8799, True),
    GroupDefinition("appropriations", "Bokslutsdispositioner", "Appropriations", 8800, 8899, False),
    GroupDefinition("income_tax", "Skatt på årets resultat", "Income tax", 8900, 8999, True),
)

OPERATING_REVENUE = ("net_sales", "other_operating_income")
OPERATING_EXPENSES = (
    "goods_for_resale",
    "other_external_expenses",
    "personnel_costs",
    "depreciation",
    "other_operating_expenses",
)


def signed_balances(
    entries: Iterable[JournalEntry],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    fiscal_year_id: Optional[int] = None,
) -> dict[int, tuple[Decimal, Decimal]]:
    """Map account ID to (total debit, total credit) of posted lines in range."""
    totals: dict[int, tuple[Decimal, Decimal]] = {}
    zero = round_amount(Decimal(0))
    for entry, line in iter_posted_lines(entries, fiscal_year_id):
        if line.account_id is None or not in_range(entry.entry_date, start_date, end_date):
            continue
        debit, credit = totals.get(line.account_id, (zero, zero))
        totals[line.account_id] = (add(debit, line.debit_amount), add(credit, line.credit_amount))
    return totals


def _normal_amount(debit: Decimal, credit: Decimal, debit_normal: bool) -> Decimal:
    return round_amount(debit - credit if debit_normal else credit - debit)


def compute_account_balances(
    accounts: Iterable[Account],
    entries: Sequence[JournalEntry],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    fiscal_year_id: Optional[int] = None,
) -> list[AccountBalance]:
    """Per-account debit/credit totals for accounts with activity in range.

    Raises:
        NotFoundError: If a posted line references an account not in accounts
    """
    accounts = list(accounts)
    totals = signed_balances(entries, start_date, end_date, fiscal_year_id)
    require_known_accounts(accounts, totals)
    balances = []
    for account in sorted(accounts, key=lambda acc: acc.account_number):
        if account.id not in totals:
            continue
        debit, credit = totals[account.id]
        balances.append(
            AccountBalance(
                account=account,
                total_debit=debit,
                total_credit=credit,
                balance=_normal_amount(debit, credit, account.account_class.is_debit_normal),
            )
        )
    return balances


def _build_groups(
    definitions: Sequence[GroupDefinition],
    accounts: Sequence[Account],
    current: dict[int, tuple[Decimal, Decimal]],
    comparative: dict[int, tuple[Decimal, Decimal]],
) -> tuple[StatementGroup, ...]:
    zero = round_amount(Decimal(0))
    groups = []
    for definition in definitions:
        lines = []
        total = zero
        comparative_total = zero
        for account in accounts:
            if not definition.covers(account):
                continue
            if account.id not in current and account.id not in comparative:
                continue
            amount = _normal_amount(*current.get(account.id, (zero, zero)), definition.debit_normal)
            comparative_amount = _normal_amount(
                *comparative.get(account.id, (zero, zero)), definition.debit_normal
            )
            lines.append(StatementLine(account, amount, comparative_amount))
            total = add(total, amount)
            comparative_total = add(comparative_total, comparative_amount)
        groups.append(
            StatementGroup(
                key=definition.key,
                name=definition.name,
                name_en=definition.name_en,
                section=definition.section,
                lines=tuple(lines),
                total=total,
                comparative_total=comparative_total,
            )
        )
    return tuple(groups)


def _result_for_period(
    accounts: Sequence[Account], totals: dict[int, tuple[Decimal, Decimal]]
) -> Decimal:
    """Credit-positive result of income statement accounts (3xxx-8xxx)."""
    result = round_amount(Decimal(0))
    for account in accounts:
        if int(account.account_number[:4]) < 3000 or account.id not in totals:
            continue
        debit, credit = totals[account.id]
        result = add(result, credit - debit)
    return result


def _section_total(groups: Iterable[StatementGroup], section: str, comparative: bool = False) -> Decimal:
    total = round_amount(Decimal(0))
    for group in groups:
        if group.section == section:
            total = add(total, group.comparative_total if comparative else group.total)
    return total


def build_balance_sheet(
    accounts: Sequence[Account],
    entries: Sequence[JournalEntry],
    as_of_date: date,
    comparative_date: Optional[date] = None,
    fiscal_year_id: Optional[int] = None,
) -> BalanceSheet:
    """Build the balance sheet as of a date.

    The result of income statement accounts that has not been closed to
    equity is reported as result_for_period and counted with equity, so a
    complete set of balanced entries yields a balanced sheet.
    """
    accounts = sorted(accounts, key=lambda acc: acc.account_number)
    current = signed_balances(entries, end_date=as_of_date, fiscal_year_id=fiscal_year_id)
    comparative = (
        signed_balances(entries, end_date=comparative_date) if comparative_date is not None else {}
    )

    require_known_accounts(accounts, current.keys() | comparative.keys())
    groups = _build_groups(BALANCE_SHEET_GROUPS, accounts, current, comparative)
    result = _result_for_period(accounts, current)
    comparative_result = _result_for_period(accounts, comparative)

    return BalanceSheet(
        as_of_date=as_of_date,
        comparative_date=comparative_date,
        groups=groups,
        result_for_period=result,
        comparative_result_for_period=comparative_result,
        total_assets=_section_total(groups, ASSETS),
        total_equity_and_liabilities=add(_section_total(groups, EQUITY_AND_LIABILITIES), result),
        comparative_total_assets=_section_total(groups, ASSETS, comparative=True),
        comparative_total_equity_and_liabilities=add(
            _section_total(groups, EQUITY_AND_LIABILITIES, comparative=True), comparative_result
        ),
    )


def _income_statement_results(totals: dict[str, Decimal]) -> tuple[Decimal, Decimal, Decimal, Decimal]:
    revenue = round_amount(Decimal(0))
    for key in OPERATING_REVENUE:
        revenue = add(revenue, totals[key])
    expenses = round_amount(Decimal(0))
    for key in OPERATING_EXPENSES:
        expenses = add(expenses, totals[key])

    operating_result = round_amount(revenue - expenses)
    after_financial = round_amount(
        operating_result + totals["financial_income"] - totals["financial_expenses"]
    )
    before_tax = add(after_financial, totals["appropriations"])
    net_result = round_amount(before_tax - totals["income_tax"])
    return operating_result, after_financial, before_tax, net_result


def build_income_statement(
    accounts: Sequence[Account],
    entries: Sequence[JournalEntry],
    start_date: date,
    end_date: date,
    comparative_start_date: Optional[date] = None,
    comparative_end_date: Optional[date] = None,
    fiscal_year_id: Optional[int] = None,
) -> IncomeStatement:
    """Build the income statement for [start_date, end_date].

    Revenue groups are credit-positive and expense groups debit-positive;
    the result lines combine them.
    """
    accounts = sorted(accounts, key=lambda acc: acc.account_number)
    current = signed_balances(entries, start_date, end_date, fiscal_year_id)
    comparative = {}
    if comparative_start_date is not None and comparative_end_date is not None:
        comparative = signed_balances(entries, comparative_start_date, comparative_end_date)

    require_known_accounts(accounts, current.keys() | comparative.keys())
    groups = _build_groups(INCOME_STATEMENT_GROUPS, accounts, current, comparative)
    operating_result, after_financial, before_tax, net_result = _income_statement_results(
        {group.key: group.total for group in groups}
    )
    comparative_net_result = _income_statement_results(
        {group.key: group.comparative_total for group in groups}
    )[3]

    return IncomeStatement(
        start_date=start_date,
        end_date=end_date,
        groups=groups,
        operating_result=operating_result,
        result_after_financial_items=after_financial,
        result_before_tax=before_tax,
        net_result=net_result,
        comparative_net_result=comparative_net_result,
    )


class FinancialReportService:
    """Service producing financial statements from the store."""

    def __init__(self, db: Database, organization_id: str):
        """Initialize financial report service.

        Args:
            db: Database instance
            organization_id: Organization to report on
        """
        self.db = db
        self.organization_id = organization_id

    def _load(self, fiscal_year_id: Optional[int]) -> tuple[list[Account], list[JournalEntry]]:
        if fiscal_year_id is not None:
            fiscal_year = self.db.get_fiscal_year(fiscal_year_id)
            if fiscal_year is None or fiscal_year.organization_id != self.organization_id:
                raise NotFoundError(fiscal_year_not_found(fiscal_year_id))
        accounts = self.db.list_accounts(self.organization_id)
        entries = self.db.list_journal_entries(
            organization_id=self.organization_id, status=EntryStatus.POSTED
        )
        return accounts, entries

    def get_account_balances(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        fiscal_year_id: Optional[int] = None,
    ) -> list[AccountBalance]:
        """Account totals for accounts with activity in range."""
        accounts, entries = self._load(fiscal_year_id)
        return compute_account_balances(accounts, entries, start_date, end_date, fiscal_year_id)

    def get_balance_sheet(
        self,
        as_of_date: date,
        comparative_date: Optional[date] = None,
        fiscal_year_id: Optional[int] = None,
    ) -> BalanceSheet:
        """Balance sheet as of a date, optionally with a comparative date."""
        accounts, entries = self._load(fiscal_year_id)
        sheet = build_balance_sheet(accounts, entries, as_of_date, comparative_date, fiscal_year_id)
        if not sheet.is_balanced:
            logger.warning(
                "Balance sheet as of %s does not balance: assets %s, equity and liabilities %s",
                as_of_date,
                sheet.total_assets,
                sheet.total_equity_and_liabilities,
            )
        return sheet

    def get_income_statement(
        self,
        start_date: date,
        end_date: date,
        comparative_start_date: Optional[date] = None,
        comparative_end_date: Optional[date] = None,
        fiscal_year_id: Optional[int] = None,
    ) -> IncomeStatement:
        """Income statement for a period, optionally with a comparative period."""
        accounts, entries = self._load(fiscal_year_id)
        return build_income_statement(
            accounts,
            entries,
            start_date,
            end_date,
            comparative_start_date,
            comparative_end_date,
            fiscal_year_id,
        )
