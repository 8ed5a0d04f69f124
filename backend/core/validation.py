"""Boundary validation for observed prices.

The core assumes every price is a finite, strictly positive Decimal.
Collaborators (price feed, CSV replay) call ``validate_price`` before a
value is handed to the pointer or the hand store.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from core.models.converters import to_decimal


class InvalidPriceError(ValueError):
    """Raised when an observed price is not a finite positive number."""

    def __init__(self, value: Any, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid price {value!r}: {reason}")


def validate_price(value: Any) -> Decimal:
    """Return ``value`` as a Decimal, rejecting degenerate prices.

    Raises:
        InvalidPriceError: If the value is missing, not numeric, NaN,
            infinite, zero or negative.
    """
    if value is None or isinstance(value, bool):
        raise InvalidPriceError(value, "not a number")

    try:
        price = to_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidPriceError(value, "not a number")

    if not price.is_finite():
        raise InvalidPriceError(value, "not finite")
    if price <= 0:
        raise InvalidPriceError(value, "must be positive")
    return price
