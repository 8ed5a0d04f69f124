"""Pointer signal model."""

from enum import Enum


class PointerSignal(str, Enum):
    """Signal emitted by the pointer on a threshold crossing."""

    BUY_STEP = "buy_step"  # Price dropped buy_trigger below the reference
    SELL_STEP = "sell_step"  # Price rose sell_trigger above the reference

    @property
    def is_buy(self) -> bool:
        return self is PointerSignal.BUY_STEP
