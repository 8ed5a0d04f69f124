"""Core data models."""

from core.models.config import StrategyConfig
from core.models.converters import hand_to_dict, to_decimal
from core.models.events import BatchReady, HandEvent, HandOpened, HandUnlocked
from core.models.hand import Hand
from core.models.signal import PointerSignal

__all__ = [
    "StrategyConfig",
    "hand_to_dict",
    "to_decimal",
    "BatchReady",
    "HandEvent",
    "HandOpened",
    "HandUnlocked",
    "Hand",
    "PointerSignal",
]
