"""
Numeric Parsing and Display Formatting

Every calculator field accepts free-form text ("$250,000", "12%", half-typed
values). All arithmetic goes through parse_amount first so a malformed field
can never break a calculation.
"""

import math
import re
from typing import Any

_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_LEADING_NUMBER = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


def parse_amount(raw: Any) -> float:
    """
    Convert user input into a finite number.

    Strips everything except digits, '.' and '-', then reads the longest
    leading decimal number from what is left ("1.2.3" reads as 1.2).

    Args:
        raw: Any value, typically the text of an input field

    Returns:
        Parsed value, or 0.0 when nothing numeric can be read
    """
    if raw is None or isinstance(raw, bool):
        return 0.0

    if isinstance(raw, (int, float)):
        value = float(raw)
        return value if math.isfinite(value) else 0.0

    cleaned = _NON_NUMERIC.sub("", str(raw))
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return 0.0

    value = float(match.group(0))
    return value if math.isfinite(value) else 0.0


def to_input_text(value: Any) -> str:
    """
    Render a number the way it is written back into a text field.

    Whole numbers lose their trailing ".0" (33000.0 -> "33000").
    """
    amount = parse_amount(value)
    if amount.is_integer():
        return str(int(amount))
    return f"{amount:.10f}".rstrip("0").rstrip(".")


def format_money(value: Any) -> str:
    """Thousands-grouped amount with at most 2 decimals ("1,234.5")."""
    amount = round(parse_amount(value), 2)
    if amount == 0:
        amount = 0.0  # avoid "-0"
    text = f"{amount:,.2f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_percent(ratio: Any) -> str:
    """Ratio rendered as a percentage with 1 decimal (0.1574 -> "15.7%")."""
    return f"{parse_amount(ratio) * 100:.1f}%"
