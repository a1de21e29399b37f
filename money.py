"""Milliunit conversion helpers for YNAB amounts.

YNAB stores every amount as an integer number of milliunits (1000 per
currency unit). Amounts stay integers until they are rendered for the
caller; only ``format_currency`` produces a display string.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

MILLIUNITS_PER_UNIT = 1000

_CENT = Decimal("0.01")
_WHOLE = Decimal(1)

Number = Union[int, float, Decimal, str]


def _as_decimal(amount: Number) -> Decimal:
    # str() keeps 1.005 as the literal the caller wrote instead of its binary expansion
    if isinstance(amount, float):
        return Decimal(str(amount))
    return Decimal(amount)


def to_milliunits(amount: Number) -> int:
    """Convert a currency amount to milliunits.

    Halves round away from zero (``decimal.ROUND_HALF_UP``), so
    ``0.0005`` becomes ``1`` and ``-0.0005`` becomes ``-1``.
    """
    scaled = _as_decimal(amount).scaleb(3)
    return int(scaled.quantize(_WHOLE, rounding=ROUND_HALF_UP))


def to_decimal(milliunits: int) -> Decimal:
    """Convert milliunits to an exact ``Decimal`` currency amount."""
    return Decimal(int(milliunits)).scaleb(-3)


def format_currency(milliunits: Optional[int]) -> Optional[str]:
    """Render milliunits as a USD display string, e.g. ``-$1,234.50``."""
    if milliunits is None:
        return None

    cents = to_decimal(milliunits).quantize(_CENT, rounding=ROUND_HALF_UP)
    text = f"${abs(cents):,.2f}"
    if cents < 0:
        return f"-{text}"
    return text


def parse_currency(text: str) -> int:
    """Parse a ``format_currency`` string back into milliunits."""
    cleaned = text.strip().replace(",", "").replace("$", "")
    try:
        return to_milliunits(Decimal(cleaned))
    except InvalidOperation:
        raise ValueError(f"Not a currency amount: {text!r}") from None
