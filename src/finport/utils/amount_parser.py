"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

CENTS = Decimal("0.01")


def parse_amount(amount_str: str, decimal_comma: bool = False) -> Decimal:
    """Parse an amount string into a Decimal rounded to cents.

    Handles various formats:
    - "123.45"
    - "£123.45"
    - "-123.45"
    - "-$123.45"
    - "123.45-" (trailing minus)
    - "1,234.56"
    - "(123.45)" (negative in parentheses)
    - "1.234,56" when decimal_comma is set

    Args:
        amount_str: Amount string
        decimal_comma: Read "," as the decimal point and "." as a thousands separator

    Returns:
        Decimal amount with two decimal places

    Raises:
        ValueError: If amount string is empty, not a number, NaN or infinite
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    original = amount_str
    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1].strip()

    # Remove currency symbols, thousands separators and inner spaces
    if decimal_comma:
        amount_str = re.sub(r"[$€£¥.\s]", "", amount_str).replace(",", ".")
    else:
        amount_str = re.sub(r"[$€£¥,\s]", "", amount_str)

    if is_negative and (amount_str.startswith(("-", "+")) or amount_str.endswith("-")):
        raise ValueError(f"Could not parse amount '{original.strip()}'")

    if amount_str.endswith("-") and not amount_str.startswith("-"):
        is_negative = True
        amount_str = amount_str[:-1]
    elif amount_str.startswith("-"):
        is_negative = True
        amount_str = amount_str[1:]
    elif amount_str.startswith("+"):
        amount_str = amount_str[1:]

    # One sign marker only: "--5" and "+-5" are rejected
    if amount_str.startswith(("-", "+")) or amount_str.endswith("-"):
        raise ValueError(f"Could not parse amount '{original.strip()}'")

    try:
        amount = Decimal(amount_str)
        if not amount.is_finite():
            raise ValueError(f"Amount '{original.strip()}' is not a finite number")
        amount = amount.quantize(CENTS)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{original.strip()}'")

    return -amount if is_negative else amount


def parse_optional_amount(amount_str: str | None, decimal_comma: bool = False) -> Decimal:
    """Parse an amount cell where an empty value means zero."""
    if amount_str is None or not amount_str.strip():
        return Decimal("0.00")
    return parse_amount(amount_str, decimal_comma=decimal_comma)


def looks_like_amount(value: str) -> bool:
    """Return True if value parses as an amount."""
    try:
        parse_amount(value)
    except ValueError:
        return False
    return True
