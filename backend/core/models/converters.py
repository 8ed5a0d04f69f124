"""Converters between wire/float values and core models.

Core models keep every price and size in Decimal. Values arriving as float
(JSON payloads, CSV files, literals in driver code) go through ``to_decimal``
so that dollar thresholds compare exactly: ``Decimal(str(9.98))`` is 9.98,
``Decimal(9.98)`` is not.
"""

from decimal import Decimal
from typing import Any

from core.models.hand import Hand


def to_decimal(value: Any) -> Decimal:
    """Convert an int, float, str or Decimal to Decimal.

    Raises:
        decimal.InvalidOperation: If a string cannot be parsed.
    """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def hand_to_dict(hand: Hand) -> dict[str, Any]:
    """Convert a hand to a JSON-friendly dict (floats, not Decimals)."""
    return {
        "price": float(hand.price),
        "size_sol": float(hand.size_sol),
        "locked": hand.locked,
    }
