"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles Swedish and plain formats:
    - "1234.56"
    - "1234,56"
    - "1 234,56" (space or non-breaking space as thousands separator)
    - "1.234,56"
    - "1,234.56"
    - "-500", "500 kr", "500 SEK"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    original = amount_str
    amount_str = re.sub(r"(?i)\s*(kr|sek)\.?$", "", amount_str.strip())
    amount_str = re.sub(r"\s", "", amount_str)

    if "," in amount_str and "." in amount_str:
        # Whichever separator comes last is the decimal separator
        if amount_str.rfind(",") > amount_str.rfind("."):
            amount_str = amount_str.replace(".", "").replace(",", ".")
        else:
            amount_str = amount_str.replace(",", "")
    elif "," in amount_str:
        amount_str = amount_str.replace(",", ".")

    try:
        return Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{original}'") from None
