"""Amount parsing and formatting utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a non-negative Decimal.

    Handles various formats:
    - "1500"
    - "1,234.56"
    - "¥1,500"
    - "$123.45"

    Journal amounts are always entered as positive debit or credit values, so
    signs and parenthesized negatives are rejected.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is negative
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    if amount_str.startswith("(") and amount_str.endswith(")"):
        raise ValueError(f"Amount must not be negative: '{amount_str}'")

    # Remove currency symbols and thousands separators
    cleaned = re.sub(r"[$€£¥￥]", "", amount_str).replace(",", "").strip()

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if amount < 0:
        raise ValueError(f"Amount must not be negative: '{amount_str}'")
    return amount


def format_amount(amount: Decimal) -> str:
    """Format an amount with thousands separators.

    Integral amounts (the common case for JPY) are shown without decimals.
    """
    if amount == amount.to_integral_value():
        return f"{int(amount):,}"
    return f"{amount:,.2f}"
