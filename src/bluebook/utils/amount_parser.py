"""Amount parsing utilities.

Amounts are whole yen. Fractions are rejected rather than rounded.
"""

import re
from decimal import Decimal, InvalidOperation


def parse_amount(amount_str: str, allow_negative: bool = False) -> int:
    """Parse an amount string into whole yen.

    Handles various formats:
    - "1000"
    - "1,000"
    - "¥1,000" / "￥1,000" / "1,000円"
    - "△1,000" or "(1,000)" (negative, only with ``allow_negative``)

    Args:
        amount_str: Amount string
        allow_negative: Whether negative amounts are accepted

    Returns:
        Amount in yen

    Raises:
        ValueError: If amount string cannot be parsed, has a fraction, or is
            negative when negatives are not allowed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove whitespace
    amount_str = amount_str.strip()

    # Handle parentheses and triangle notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]
    elif amount_str.startswith("△") or amount_str.startswith("▲"):
        is_negative = True
        amount_str = amount_str[1:]

    # Remove currency symbols and separators
    amount_str = re.sub(r"[¥￥円,\s]", "", amount_str)

    try:
        value = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}'") from e

    if not value.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if value !=value.to_integral_value():
        raise ValueError(f"Amount must be a whole number of yen: '{amount_str}'")

    amount = int(value)
    if is_negative:
        amount = -amount
    if amount < 0 and not allow_negative:
        raise ValueError(f"Amount cannot be negative: {amount}")
    return amount


def parse_ratio(ratio_str: str) -> int:
    """Parse a percentage such as "60" or "60%" into an int between 0 and 100.

    Raises:
        ValueError: If the value is not a whole percentage in range
    """
    text = ratio_str.strip().rstrip("%").strip()
    if not text.isdigit():
        raise ValueError(f"Could not parse ratio '{ratio_str}'")
    ratio = int(text)
    if ratio > 100:
        raise ValueError(f"Ratio must be between 0 and 100, got {ratio}")
    return ratio
