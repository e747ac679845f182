"""Tests for amount and journal line parsing."""

import pytest
from decimal import Decimal

from huvudbok.utils.amount_parser import parse_amount
from huvudbok.utils.line_parser import parse_line_spec


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1234.56", "1234.56"),
        ("1234,56", "1234.56"),
        ("1\u00a0234,56", "1234.56"),
        ("1 234,56", "1234.56"),
        ("1.234,56", "1234.56"),
        ("1,234.56", "1234.56"),
        ("-500", "-500"),
        ("500 kr", "500"),
        ("500 SEK", "500"),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == Decimal(expected)


@pytest.mark.parametrize("text", ["", "   ", "abc", "12,34,56.7.8"])
def test_parse_amount_invalid(text):
    with pytest.raises(ValueError):
        parse_amount(text)


def test_line_spec_debit():
    line = parse_line_spec("1930:1000:")
    assert line.account == "1930"
    assert line.debit == Decimal("1000")
    assert line.credit == Decimal("0.00")
    assert line.vat_rate is None


def test_line_spec_with_vat():
    line = parse_line_spec("3011::1000:25:800:200")
    assert line.credit == Decimal("1000")
    assert line.vat_rate == Decimal("25")
    assert line.vat_base == Decimal("800")
    assert line.vat_amount == Decimal("200")


def test_line_spec_dash_means_zero():
    line = parse_line_spec("5010:-:300,50")
    assert line.debit == Decimal("0.00")
    assert line.credit == Decimal("300.50")


@pytest.mark.parametrize("spec", ["1930", "1930:1:2:3", ":100:"])
def test_line_spec_invalid(spec):
    with pytest.raises(ValueError):
        parse_line_spec(spec)
