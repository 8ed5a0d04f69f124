"""Per-tick orchestration of pointer, hand store and lock policy.

StrategyCore is the single owner of one Pointer and one HandManager. A driver
(live trader or backtest) feeds it one validated price per tick:

1. ``evaluate(price)`` unlocks eligible hands *before* the pointer sees the
   price, so a hand unlocked this tick can be sold this tick.
2. The driver sells the returned hands and, on BUY_STEP, executes a buy.
3. ``record_buy(price, size_sol)`` opens the hand once the buy went through.

Separate trading pairs need separate StrategyCore instances.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from core.hands.manager import HandManager
from core.models.config import StrategyConfig
from core.models.hand import Hand
from core.models.signal import PointerSignal
from core.pointer import Pointer
from core.sizing import BuySize, buy_size


@dataclass
class TickDecision:
    """Result of evaluating one price.

    Attributes:
        price: Price that was evaluated.
        buy_size: Size a buy step would have at this price.
        to_sell: Hands unlocked this tick, in open order.
        signal: Pointer signal, if any.
    """

    price: Decimal
    buy_size: BuySize
    to_sell: list[Hand] = field(default_factory=list)
    signal: PointerSignal | None = None

    @property
    def should_buy(self) -> bool:
        return self.signal is PointerSignal.BUY_STEP


class StrategyCore:
    """Decision core for one trading pair."""

    def __init__(self, config: StrategyConfig | None = None):
        self.config = config or StrategyConfig()
        self.pointer = Pointer.from_config(self.config)
        self.hands = HandManager(batch_size=self.config.batch_size)

    def evaluate(self, price: Decimal) -> TickDecision:
        """Run the unlock scan, then the pointer, for one price."""
        to_sell = self.hands.unlock_eligible(price)
        signal = self.pointer.update(price)
        return TickDecision(
            price=price,
            buy_size=buy_size(price, self.config.buy_size_pct),
            to_sell=to_sell,
            signal=signal,
        )

    def record_buy(self, price: Decimal, size_sol: Decimal) -> Hand:
        """Open a hand for an executed buy."""
        return self.hands.open_hand(price, size_sol)
