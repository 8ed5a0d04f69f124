"""Statistics for backtest results.

Fills are simulated at the tick price: a buy fill opens a hand at the
price that triggered BUY_STEP, a sell fill closes an unlocked hand at the
price that unlocked it. Hands still held at the end are marked to the last
price.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from core.models.hand import Hand


@dataclass(frozen=True)
class Fill:
    """One simulated swap."""

    side: str  # "buy" or "sell"
    tick: int
    price: Decimal
    size_sol: Decimal
    entry_price: Decimal | None = None  # hand entry, sells only
    timestamp: datetime | None = None

    @property
    def usd(self) -> Decimal:
        return self.price * self.size_sol

    @property
    def pnl(self) -> Decimal:
        if self.side != "sell" or self.entry_price is None:
            return Decimal("0")
        return (self.price - self.entry_price) * self.size_sol


@dataclass
class BacktestResult:
    """Complete backtest results."""

    # Metadata
    source: str
    buy_trigger_usd: Decimal
    sell_trigger_usd: Decimal
    buy_size_pct: Decimal
    batch_size: int
    start_time: datetime | None = None
    end_time: datetime | None = None

    # Replay
    ticks: int = 0
    first_price: Decimal | None = None
    last_price: Decimal | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None

    # Pointer
    buy_steps: int = 0
    sell_steps: int = 0

    # Hands
    hands_opened: int = 0
    hands_sold: int = 0
    hands_locked: int = 0
    hands_held: int = 0  # opened and not sold
    batches_ready: int = 0

    # PnL (USD)
    invested_usd: Decimal = Decimal("0")
    realized_pnl_usd: Decimal = Decimal("0")
    unrealized_pnl_usd: Decimal = Decimal("0")

    fills: list[Fill] = field(default_factory=list)

    @property
    def total_pnl_usd(self) -> Decimal:
        return self.realized_pnl_usd + self.unrealized_pnl_usd


class StatisticsCalculator:
    """Calculate backtest statistics from fills and final hands."""

    def calculate(
        self,
        result: BacktestResult,
        hands: tuple[Hand, ...],
        sold: list[Hand],
    ) -> BacktestResult:
        """
        Args:
            result: Result holding the replay counters and fills
            hands: All hands in the store at the end of the replay
            sold: Hands that were unlocked and sold during the replay

        Returns:
            The same result with hand and PnL statistics filled in
        """
        buys = [f for f in result.fills if f.side == "buy"]
        sells = [f for f in result.fills if f.side == "sell"]

        # Sold hands stay in the store with locked=False, so they can only
        # be told apart from free hands by identity.
        sold_ids = {id(h) for h in sold}
        held = [h for h in hands if id(h) not in sold_ids]

        result.hands_opened = len(hands)
        result.hands_sold = len(sold)
        result.hands_locked = sum(1 for h in hands if h.locked)
        result.hands_held = len(held)

        result.invested_usd = sum((f.usd for f in buys), Decimal("0"))
        result.realized_pnl_usd = sum((f.pnl for f in sells), Decimal("0"))
        if result.last_price is not None:
            result.unrealized_pnl_usd = sum(
                (h.unrealized_pnl(result.last_price) for h in held), Decimal("0")
            )
        return result
