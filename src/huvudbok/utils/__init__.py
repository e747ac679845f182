"""Utility functions for huvudbok."""

from huvudbok.utils.date_parser import parse_date
from huvudbok.utils.amount_parser import parse_amount
from huvudbok.utils.account_resolver import resolve_account
from huvudbok.utils.line_parser import parse_line_spec

__all__ = ["parse_date", "parse_amount", "resolve_account", "parse_line_spec"]
