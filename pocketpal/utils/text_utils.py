# pocketpal/utils/text_utils.py
import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from pocketpal.core.errors import ValidationError


def parse_amount(text: Optional[str], field: str = "amount") -> Decimal:
    """Turns user input like "12.50", "$12.50" or "12,50" into a non-negative Decimal.
    Ex: "$1,234.50" -> Decimal("1234.50")
    Ex: "18,50" -> Decimal("18.50")
    """
    if text is None or not str(text).strip():
        raise ValidationError(f"Please enter an {field}")

    cleaned = str(text).strip().lstrip("$").strip()
    # "1,234.50" uses the comma as thousands separator; "18,50" as decimal separator
    if "," in cleaned and "." in cleaned:
        cleaned = cleaned.replace(",", "")
    elif re.fullmatch(r"\d+,\d{1,2}", cleaned):
        cleaned = cleaned.replace(",", ".")

    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        raise ValidationError(f"'{text}' is not a valid {field}")

    if not value.is_finite() or value < 0:
        raise ValidationError(f"'{text}' is not a valid {field}")
    return value


def format_money(value: Decimal) -> str:
    """Formats an amount as dollars, with the sign in front for negatives."""
    value = Decimal(value)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"
