"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(value: str | int | float | Decimal) -> Decimal:
    """Parse an amount from an API payload into a Decimal.

    Handles various inputs:
    - 123.45 (JSON number; floats go through str() so 0.1 stays 0.1)
    - "123.45"
    - "123,45 €"
    - "1,234.56"
    - "1.234,56"

    Args:
        value: Amount as number or string

    Returns:
        Decimal amount

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, bool):
        raise ValueError(f"Could not parse amount {value!r}")
    if isinstance(value, Decimal):
        return _finite(value)
    if isinstance(value, (int, float)):
        return _finite(Decimal(str(value)))

    if not value or not value.strip():
        raise ValueError("Empty amount string")

    # Remove currency symbols and whitespace
    amount_str = re.sub(r"[$€£¥\s]", "", value)

    # Decide which separator is the decimal one
    if "," in amount_str and "." in amount_str:
        if amount_str.rfind(",") > amount_str.rfind("."):
            amount_str = amount_str.replace(".", "").replace(",", ".")
        else:
            amount_str = amount_str.replace(",", "")
    elif "," in amount_str:
        amount_str = amount_str.replace(",", ".")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{value}': {e}")
    return _finite(amount)


def _finite(amount: Decimal) -> Decimal:
    if not amount.is_finite():
        raise ValueError(f"Amount must be a finite number, got {amount}")
    return amount
