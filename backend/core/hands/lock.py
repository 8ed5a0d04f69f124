"""Lock policy for open hands.

A locked hand is not eligible for automatic sale until the market price has
risen ``UNLOCK_RISE_USD`` above that hand's own entry price. This is a static
per-hand take-profit, independent of the pointer's reference walk.

``is_locked`` uses a narrower band (``LOCK_BAND_USD``) than ``unlock_batch``.
The two values have not been reconciled and are kept as separate constants;
nothing in the trading loop calls ``is_locked``.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable

from core.models.hand import Hand

logger = logging.getLogger(__name__)

LOCK_BAND_USD = Decimal("0.2")
UNLOCK_RISE_USD = Decimal("0.5")


class LockRules:
    """Stateless rules evaluated against the hand store and a price."""

    @staticmethod
    def is_locked(hand: Hand, price: Decimal) -> bool:
        """Advisory check, does not mutate the hand."""
        return hand.locked and price < hand.price + LOCK_BAND_USD

    @staticmethod
    def unlock_batch(
        hands: list[Hand],
        price: Decimal,
        on_unlock: Callable[[Hand], None] | None = None,
    ) -> list[Hand]:
        """Unlock every locked hand whose entry is ``UNLOCK_RISE_USD`` below ``price``.

        Args:
            hands: Hands to scan, in store (open) order
            price: Current SOL price
            on_unlock: Optional hook called once per newly unlocked hand

        Returns:
            Newly unlocked hands in encounter order. Hands that were never
            locked, or already unlocked, are never returned.
        """
        unlocked: list[Hand] = []

        for hand in hands:
            if hand.locked and price >= hand.price + UNLOCK_RISE_USD:
                hand.locked = False
                unlocked.append(hand)
                if on_unlock is not None:
                    on_unlock(hand)

        if unlocked:
            logger.debug("Unlocked %d hands at %s", len(unlocked), price)
        return unlocked
