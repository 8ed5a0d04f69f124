"""Floating reference price ("pointer").

The pointer holds one reference price. Every observed price is compared
against it; a drop of at least ``buy_trigger`` emits BUY_STEP, a rise of at
least ``sell_trigger`` emits SELL_STEP. The reference then walks to the
triggering price, so the next signal is measured from there (a ratchet, not
a fixed baseline). A move far beyond a trigger still emits one signal.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from core.models.config import StrategyConfig
from core.models.signal import PointerSignal

logger = logging.getLogger(__name__)


class Pointer:
    """Emit at most one buy/sell step per observed price."""

    def __init__(self, buy_trigger: Decimal, sell_trigger: Decimal):
        """
        Args:
            buy_trigger: USD drop from the reference that fires BUY_STEP
            sell_trigger: USD rise from the reference that fires SELL_STEP
        """
        if buy_trigger <= 0 or sell_trigger <= 0:
            raise ValueError("Pointer triggers must be positive")
        self.buy_trigger = buy_trigger
        self.sell_trigger = sell_trigger
        self._reference_price: Decimal | None = None

    @classmethod
    def from_config(cls, config: StrategyConfig) -> Pointer:
        return cls(config.buy_trigger_usd, config.sell_trigger_usd)

    @property
    def reference_price(self) -> Decimal | None:
        """Current anchor, ``None`` until the first update."""
        return self._reference_price

    def update(self, current_price: Decimal) -> PointerSignal | None:
        """Evaluate a new price.

        The first call only anchors the reference and never signals.
        The reference is left untouched when no trigger is crossed.
        """
        reference = self._reference_price
        if reference is None:
            self._reference_price = current_price
            logger.debug("Pointer anchored at %s", current_price)
            return None

        diff = current_price - reference

        if diff <= -self.buy_trigger:
            self._reference_price = current_price
            return PointerSignal.BUY_STEP

        if diff >= self.sell_trigger:
            self._reference_price = current_price
            return PointerSignal.SELL_STEP

        return None
