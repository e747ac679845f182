"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the domain entities stay stable
when the schema changes.
"""

from decimal import Decimal
from typing import Optional, Union

from huvudbok.domain import entities as domain
from huvudbok.database.models import (
    Account as ORMAccount,
    FiscalYear as ORMFiscalYear,
    JournalEntry as ORMJournalEntry,
    JournalLine as ORMJournalLine,
    JournalTemplate as ORMJournalTemplate,
    JournalTemplateLine as ORMJournalTemplateLine,
)


def _decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(value).quantize(Decimal("0.01"))


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        organization_id=orm_account.organization_id,
        account_number=orm_account.account_number,
        name=orm_account.name,
        name_en=orm_account.name_en,
        account_class=domain.AccountClass(orm_account.account_class),
    )


def fiscal_year_to_domain(orm_fiscal_year: ORMFiscalYear) -> domain.FiscalYear:
    """Convert SQLAlchemy FiscalYear model to domain FiscalYear entity."""
    return domain.FiscalYear(
        id=orm_fiscal_year.id,
        organization_id=orm_fiscal_year.organization_id,
        name=orm_fiscal_year.name,
        start_date=orm_fiscal_year.start_date,
        end_date=orm_fiscal_year.end_date,
        is_closed=orm_fiscal_year.is_closed,
        created_at=orm_fiscal_year.created_at,
        closed_at=orm_fiscal_year.closed_at,
    )


def journal_line_to_domain(
    orm_line: Union[ORMJournalLine, ORMJournalTemplateLine],
) -> domain.JournalLine:
    """Convert a SQLAlchemy entry or template line to a domain JournalLine.

    Both tables share the line columns.
    """
    return domain.JournalLine(
        account_id=orm_line.account_id,
        debit_amount=_decimal(orm_line.debit_amount),
        credit_amount=_decimal(orm_line.credit_amount),
        description=orm_line.description,
        line_order=orm_line.line_order,
        vat_rate=_decimal(orm_line.vat_rate),
        vat_base=_decimal(orm_line.vat_base),
        vat_amount=_decimal(orm_line.vat_amount),
        vat_direction=(
            domain.VatDirection(orm_line.vat_direction) if orm_line.vat_direction else None
        ),
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model to domain JournalEntry entity."""
    lines = sorted(orm_entry.lines, key=lambda line: line.line_order)
    return domain.JournalEntry(
        id=orm_entry.id,
        organization_id=orm_entry.organization_id,
        fiscal_year_id=orm_entry.fiscal_year_id,
        entry_date=orm_entry.entry_date,
        description=orm_entry.description,
        verification_number=orm_entry.verification_number,
        status=domain.EntryStatus(orm_entry.status),
        lines=tuple(journal_line_to_domain(line) for line in lines),
        created_at=orm_entry.created_at,
        posted_at=orm_entry.posted_at,
        voided_at=orm_entry.voided_at,
        void_reason=orm_entry.void_reason,
    )


def journal_line_to_orm(line: domain.JournalLine, line_order: int) -> ORMJournalLine:
    """Build a SQLAlchemy JournalLine from a domain line."""
    return ORMJournalLine(
        account_id=line.account_id,
        debit_amount=line.debit_amount,
        credit_amount=line.credit_amount,
        description=line.description,
        line_order=line_order,
        vat_rate=line.vat_rate,
        vat_base=line.vat_base,
        vat_amount=line.vat_amount,
        vat_direction=line.vat_direction.value if line.vat_direction else None,
    )


def template_to_domain(orm_template: ORMJournalTemplate) -> domain.JournalTemplate:
    """Convert SQLAlchemy JournalTemplate model to domain JournalTemplate entity."""
    lines = sorted(orm_template.lines, key=lambda line: line.line_order)
    return domain.JournalTemplate(
        id=orm_template.id,
        organization_id=orm_template.organization_id,
        name=orm_template.name,
        description=orm_template.description,
        default_description=orm_template.default_description,
        lines=tuple(journal_line_to_domain(line) for line in lines),
        use_count=orm_template.use_count,
        last_used_at=orm_template.last_used_at,
        created_at=orm_template.created_at,
        updated_at=orm_template.updated_at,
    )


def template_line_to_orm(line: domain.JournalLine, line_order: int) -> ORMJournalTemplateLine:
    """Build a SQLAlchemy JournalTemplateLine from a domain line."""
    return ORMJournalTemplateLine(
        account_id=line.account_id,
        debit_amount=line.debit_amount,
        credit_amount=line.credit_amount,
        description=line.description,
        line_order=line_order,
        vat_rate=line.vat_rate,
        vat_base=line.vat_base,
        vat_amount=line.vat_amount,
        vat_direction=line.vat_direction.value if line.vat_direction else None,
    )
