"""Business services."""

from app.services.event_log import log_hand_event
from app.services.order_service import OrderResult, OrderSide, SwapExecutor
from app.services.price_feed import PriceFeed
from app.services.trader import TickReport, Trader

__all__ = [
    "log_hand_event",
    "OrderResult",
    "OrderSide",
    "SwapExecutor",
    "PriceFeed",
    "TickReport",
    "Trader",
]
