"""Hand manager: the ordered store of open hands.

The first ``FREE_HAND_SLOTS`` hands ever opened are created unlocked; every
later hand is created locked. The decision is made once per open, from the
number of unlocked opens so far, and is never revisited. Hands are never
removed: a sold hand stays in the store with ``locked`` cleared.

Notable moments (hand opened, batch ready, hand unlocked) are emitted as
events to registered callbacks rather than written to the console.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from core.hands.lock import LockRules
from core.models.events import (
    BatchReady,
    HandEvent,
    HandEventCallback,
    HandOpened,
    HandUnlocked,
)
from core.models.hand import Hand

logger = logging.getLogger(__name__)

FREE_HAND_SLOTS = 2
DEFAULT_BATCH_SIZE = 10


class HandManager:
    """Own the hands of one trading pair and decide their lock state."""

    def __init__(self, batch_size: int = DEFAULT_BATCH_SIZE):
        """
        Args:
            batch_size: Emit BatchReady every time the hand count is a
                multiple of this value
        """
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.batch_size = batch_size

        self._hands: list[Hand] = []
        self._free_hands = 0

        self._event_callbacks: list[HandEventCallback] = []

    def on_event(self, callback: HandEventCallback) -> None:
        """Register callback for hand events.

        Note: Duplicate callbacks are ignored.
        """
        if callback not in self._event_callbacks:
            self._event_callbacks.append(callback)

    def off_event(self, callback: HandEventCallback) -> None:
        """Unregister callback for hand events."""
        if callback in self._event_callbacks:
            self._event_callbacks.remove(callback)

    def _emit(self, event: HandEvent) -> None:
        for callback in self._event_callbacks:
            try:
                callback(event)
            except Exception as e:
                logger.error(f"Hand event callback error: {e}")

    def _should_lock(self) -> bool:
        if self._free_hands < FREE_HAND_SLOTS:
            self._free_hands += 1
            return False
        return True

    def open_hand(self, price: Decimal, size_sol: Decimal) -> Hand:
        """Append a new hand and decide its lock state.

        Args:
            price: Entry price of SOL (USD)
            size_sol: Amount of SOL bought

        Returns:
            The hand that was added
        """
        locked = self._should_lock()
        hand = Hand(price=price, size_sol=size_sol, locked=locked)
        self._hands.append(hand)

        self._emit(HandOpened(hand=hand, total_hands=len(self._hands)))

        if len(self._hands) % self.batch_size == 0:
            self._emit(BatchReady(batch_size=self.batch_size, total_hands=len(self._hands)))

        return hand

    def unlock_eligible(self, price: Decimal) -> list[Hand]:
        """Unlock locked hands that rose enough above their entry.

        Returns:
            Newly unlocked hands in open order (the hands to sell this tick)
        """
        return LockRules.unlock_batch(
            self._hands,
            price,
            on_unlock=lambda hand: self._emit(HandUnlocked(hand=hand, price=price)),
        )

    def total_locked(self) -> int:
        """Number of hands currently locked."""
        return sum(1 for hand in self._hands if hand.locked)

    @property
    def hands(self) -> tuple[Hand, ...]:
        """All hands in open order (read-only view of the store)."""
        return tuple(self._hands)

    @property
    def total_hands(self) -> int:
        return len(self._hands)

    @property
    def free_hands(self) -> int:
        """Unlocked slots consumed so far (never exceeds FREE_HAND_SLOTS)."""
        return self._free_hands

    def snapshot_lines(self) -> list[str]:
        """Human-readable listing of the store, one line per hand."""
        if not self._hands:
            return ["No hands currently open."]

        lines = ["Current hands:"]
        for i, hand in enumerate(self._hands, start=1):
            lines.append(
                f"  Hand {i} -> {hand.size_sol:.6f} SOL @ ${hand.price:.6f} | Locked: {hand.locked}"
            )
        lines.append(f"Total locked hands: {self.total_locked()}")
        return lines
