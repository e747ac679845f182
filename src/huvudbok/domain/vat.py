"""VAT aggregation for the statutory VAT report (momsrapport)."""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from huvudbok.database.base import Database
from huvudbok.domain.entities import (
    EntryStatus,
    JournalEntry,
    JournalLine,
    VatDirection,
    VatGroup,
    VatReport,
    VatSection,
)
from huvudbok.domain.errors import NotFoundError, fiscal_year_not_found
from huvudbok.domain.ledger import in_range, iter_posted_lines
from huvudbok.domain.money import add, round_amount

logger = logging.getLogger(__name__)


def line_direction(line: JournalLine) -> VatDirection:
    """Side of the return a VAT line belongs to.

    An explicit direction wins; otherwise credit lines are sales (output VAT)
    and debit lines are purchases (input VAT).
    """
    if line.vat_direction is not None:
        return line.vat_direction
    if line.credit_amount > 0:
        return VatDirection.OUTPUT
    return VatDirection.INPUT


@dataclass
class _GroupTotals:
    tax_base: Decimal
    vat_amount: Decimal
    transaction_count: int = 0


def _build_section(groups: dict[Decimal, _GroupTotals]) -> VatSection:
    rate_groups = tuple(
        VatGroup(
            rate=rate,
            tax_base=totals.tax_base,
            vat_amount=totals.vat_amount,
            transaction_count=totals.transaction_count,
        )
        for rate, totals in sorted(groups.items(), key=lambda item: item[0], reverse=True)
        if totals.transaction_count > 0
    )
    total = round_amount(Decimal(0))
    for group in rate_groups:
        total = add(total, group.vat_amount)
    return VatSection(rate_groups=rate_groups, total=total)


def aggregate_vat(
    entries: Iterable[JournalEntry],
    start_date: date,
    end_date: date,
    fiscal_year_id: Optional[int] = None,
) -> VatReport:
    """Group line-level VAT of posted entries by rate and direction.

    Args:
        entries: Journal entries in any order; drafts and voided entries are
            ignored
        start_date: Inclusive start of the reporting period
        end_date: Inclusive end of the reporting period
        fiscal_year_id: Optional fiscal year restriction

    Returns:
        VatReport with rate groups in descending rate order. A positive or
        zero net_vat is payable, a negative one is refundable.
    """
    sides: dict[VatDirection, dict[Decimal, _GroupTotals]] = {
        VatDirection.OUTPUT: {},
        VatDirection.INPUT: {},
    }

    for entry, line in iter_posted_lines(entries, fiscal_year_id):
        if line.vat_rate is None or not in_range(entry.entry_date, start_date, end_date):
            continue

        rate = round_amount(line.vat_rate)
        groups = sides[line_direction(line)]
        totals = groups.setdefault(
            rate, _GroupTotals(tax_base=round_amount(Decimal(0)), vat_amount=round_amount(Decimal(0)))
        )
        totals.tax_base = add(totals.tax_base, line.vat_base or Decimal(0))
        totals.vat_amount = add(totals.vat_amount, line.vat_amount or Decimal(0))
        totals.transaction_count += 1

    output_vat = _build_section(sides[VatDirection.OUTPUT])
    input_vat = _build_section(sides[VatDirection.INPUT])
    return VatReport(
        start_date=start_date,
        end_date=end_date,
        output_vat=output_vat,
        input_vat=input_vat,
        net_vat=round_amount(output_vat.total - input_vat.total),
    )


class VatService:
    """Service producing VAT reports from the store."""

    def __init__(self, db: Database, organization_id: str):
        """Initialize VAT service.

        Args:
            db: Database instance
            organization_id: Organization whose VAT is reported
        """
        self.db = db
        self.organization_id = organization_id

    def get_vat_report(
        self, start_date: date, end_date: date, fiscal_year_id: Optional[int] = None
    ) -> VatReport:
        """Build the VAT report for [start_date, end_date].

        Raises:
            NotFoundError: If fiscal_year_id does not exist
        """
        if fiscal_year_id is not None:
            fiscal_year = self.db.get_fiscal_year(fiscal_year_id)
            if fiscal_year is None or fiscal_year.organization_id != self.organization_id:
                raise NotFoundError(fiscal_year_not_found(fiscal_year_id))

        entries = self.db.list_journal_entries(
            organization_id=self.organization_id,
            fiscal_year_id=fiscal_year_id,
            status=EntryStatus.POSTED,
            start_date=start_date,
            end_date=end_date,
        )
        report = aggregate_vat(entries, start_date, end_date, fiscal_year_id)
        logger.debug(
            "VAT report %s - %s: output %s, input %s, net %s",
            start_date,
            end_date,
            report.output_vat.total,
            report.input_vat.total,
            report.net_vat,
        )
        return report
