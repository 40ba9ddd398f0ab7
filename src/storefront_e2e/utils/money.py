"""
Money helpers: parsing displayed prices and comparing them in integer cents.

"$  9.00" -> 9.0
"$ 0.00"  -> 0.0
"$9.00"   -> 9.0
"""

import math
import re

from ..core.errors import ParseError

_NON_MONEY_CHARS = re.compile(r"[^0-9.]")


def parse_money(text: str) -> float:
    """Strip everything except digits and '.', then convert. Raises ParseError instead of returning 0/NaN."""
    cleaned = _NON_MONEY_CHARS.sub("", text or "")
    try:
        return float(cleaned)
    except ValueError:
        raise ParseError(text, what=f'money (cleaned: "{cleaned}")') from None


def to_cents(amount: float) -> int:
    """Round to the nearest cent, halves upward, to avoid float drift (0.1 + 0.2)."""
    return math.floor(amount * 100 + 0.5)


def cents_to_dollars(cents: int) -> float:
    return cents / 100


def format_money(amount: float) -> str:
    return f"${to_cents(amount) / 100:.2f}"
