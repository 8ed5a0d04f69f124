"""Hand store events.

The hand store never writes to the console. Anything an operator might want
to see (hand opened, batch ready, hand unlocked) is emitted as one of these
events to the callbacks registered with HandManager.on_event().
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Union

from core.models.hand import Hand


@dataclass(frozen=True)
class HandOpened:
    """A hand was appended to the store.

    Attributes:
        hand: The new hand (its ``locked`` flag is the lock decision).
        total_hands: Number of hands in the store after the open.
    """

    hand: Hand
    total_hands: int


@dataclass(frozen=True)
class BatchReady:
    """The number of opened hands reached a multiple of the batch size."""

    batch_size: int
    total_hands: int


@dataclass(frozen=True)
class HandUnlocked:
    """A locked hand rose far enough above its entry to become sellable."""

    hand: Hand
    price: Decimal  # Price that triggered the unlock


HandEvent = Union[HandOpened, BatchReady, HandUnlocked]
HandEventCallback = Callable[[HandEvent], None]
