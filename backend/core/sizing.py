"""Buy sizing and on-chain base unit conversions."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal

LAMPORTS_PER_SOL = 1_000_000_000
USDC_UNITS_PER_USD = 1_000_000  # USDC has 6 decimals


@dataclass(frozen=True)
class BuySize:
    """Size of one buy step, in USD spent and SOL received."""

    usd: Decimal
    sol: Decimal


def buy_size(price: Decimal, size_pct: Decimal) -> BuySize:
    """Compute the size of a buy step at ``price``.

    ``sol = (price * size_pct) / price``, which always equals ``size_pct``:
    the SOL size of a hand does not vary with price. Kept as is.
    """
    usd = price * size_pct
    sol = usd / price
    return BuySize(usd=usd, sol=sol)


def to_lamports(size_sol: Decimal) -> int:
    """SOL -> lamports, truncated toward zero."""
    return int((size_sol * LAMPORTS_PER_SOL).to_integral_value(rounding=ROUND_DOWN))


def to_usdc_units(usd: Decimal) -> int:
    """USD -> USDC base units, truncated toward zero."""
    return int((usd * USDC_UNITS_PER_USD).to_integral_value(rounding=ROUND_DOWN))
