"""Parsing of journal line specifications given on the command line."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from huvudbok.utils.amount_parser import parse_amount

EMPTY_AMOUNT = ("", "-")


@dataclass(frozen=True)
class LineSpec:
    account: str
    debit: Decimal
    credit: Decimal
    vat_rate: Optional[Decimal] = None
    vat_base: Optional[Decimal] = None
    vat_amount: Optional[Decimal] = None


def _amount(value: str) -> Decimal:
    if value in EMPTY_AMOUNT:
        return Decimal("0.00")
    return parse_amount(value)


def parse_line_spec(spec: str) -> LineSpec:
    """Parse "ACCOUNT:DEBIT:CREDIT[:VAT_RATE:VAT_BASE:VAT_AMOUNT]".

    Empty fields or "-" mean zero, so "3011::1000:25:800:200" is a credit
    line with 25 % VAT.

    Raises:
        ValueError: If the field count or an amount is invalid
    """
    fields = [field.strip() for field in spec.split(":")]
    if len(fields) not in (3, 6):
        raise ValueError(
            f"Invalid line '{spec}': expected ACCOUNT:DEBIT:CREDIT or "
            "ACCOUNT:DEBIT:CREDIT:VAT_RATE:VAT_BASE:VAT_AMOUNT"
        )
    if not fields[0]:
        raise ValueError(f"Invalid line '{spec}': account is required")

    line = LineSpec(account=fields[0], debit=_amount(fields[1]), credit=_amount(fields[2]))
    if len(fields) == 6:
        line = LineSpec(
            account=line.account,
            debit=line.debit,
            credit=line.credit,
            vat_rate=parse_amount(fields[3]),
            vat_base=_amount(fields[4]),
            vat_amount=_amount(fields[5]),
        )
    return line
