"""Hand store and lock policy."""

from core.hands.lock import LOCK_BAND_USD, UNLOCK_RISE_USD, LockRules
from core.hands.manager import FREE_HAND_SLOTS, HandManager

__all__ = [
    "LOCK_BAND_USD",
    "UNLOCK_RISE_USD",
    "LockRules",
    "FREE_HAND_SLOTS",
    "HandManager",
]
