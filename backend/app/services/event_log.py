"""Log sink for hand store events."""

import logging

from core.models.events import BatchReady, HandEvent, HandOpened, HandUnlocked

logger = logging.getLogger(__name__)


def log_hand_event(event: HandEvent) -> None:
    """Write a hand event to the application log."""
    if isinstance(event, HandOpened):
        hand = event.hand
        logger.info(
            "Hand opened: %.6f SOL @ $%.6f | Locked: %s | Total hands: %d",
            hand.size_sol,
            hand.price,
            hand.locked,
            event.total_hands,
        )
    elif isinstance(event, BatchReady):
        logger.info("Batch ready to sell %d hands! (total %d)", event.batch_size, event.total_hands)
    elif isinstance(event, HandUnlocked):
        logger.info(
            "Hand unlocked: %.6f SOL @ $%.6f (price $%.6f)",
            event.hand.size_sol,
            event.hand.price,
            event.price,
        )
