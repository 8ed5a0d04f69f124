"""BacktestRunner: replays a price series through the decision core.

Completely independent of app/. Uses:
- backtest/price_source for the price series
- core/ for pure business logic

Every tick follows the live loop order: unlock scan, sells, pointer update,
buy. Fills are simulated at the tick price and always succeed.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from core.engine import StrategyCore
from core.models.config import StrategyConfig
from core.models.events import BatchReady, HandEvent
from core.models.hand import Hand
from core.models.signal import PointerSignal

from backtest.price_source import PricePoint
from backtest.stats import BacktestResult, Fill, StatisticsCalculator

logger = logging.getLogger(__name__)


@dataclass
class BacktestConfig:
    """Configuration for a backtest run."""

    source: str
    strategy: StrategyConfig = field(default_factory=StrategyConfig)


class BacktestRunner:
    """Run one backtest over an in-memory price series."""

    def __init__(self, config: BacktestConfig, prices: list[PricePoint]):
        self.config = config
        self._prices = prices

    def run(self) -> BacktestResult:
        """Execute the replay and compute statistics."""
        start_time = time.time()
        strategy = self.config.strategy

        core = StrategyCore(strategy)
        result = BacktestResult(
            source=self.config.source,
            buy_trigger_usd=strategy.buy_trigger_usd,
            sell_trigger_usd=strategy.sell_trigger_usd,
            buy_size_pct=strategy.buy_size_pct,
            batch_size=strategy.batch_size,
        )

        def on_event(event: HandEvent) -> None:
            if isinstance(event, BatchReady):
                result.batches_ready += 1

        core.hands.on_event(on_event)
        sold: list[Hand] = []

        for tick, point in enumerate(self._prices, start=1):
            price = point.price
            decision = core.evaluate(price)

            for hand in decision.to_sell:
                result.fills.append(
                    Fill(
                        side="sell",
                        tick=tick,
                        price=price,
                        size_sol=hand.size_sol,
                        entry_price=hand.price,
                        timestamp=point.timestamp,
                    )
                )
                sold.append(hand)

            if decision.signal is PointerSignal.BUY_STEP:
                result.buy_steps += 1
                core.record_buy(price, decision.buy_size.sol)
                result.fills.append(
                    Fill(
                        side="buy",
                        tick=tick,
                        price=price,
                        size_sol=decision.buy_size.sol,
                        timestamp=point.timestamp,
                    )
                )
            elif decision.signal is PointerSignal.SELL_STEP:
                result.sell_steps += 1

            result.ticks = tick
            result.min_price = price if result.min_price is None else min(result.min_price, price)
            result.max_price = price if result.max_price is None else max(result.max_price, price)

        if self._prices:
            result.first_price = self._prices[0].price
            result.last_price = self._prices[-1].price
            result.start_time = self._prices[0].timestamp
            result.end_time = self._prices[-1].timestamp

        StatisticsCalculator().calculate(result, core.hands.hands, sold)

        elapsed = time.time() - start_time
        logger.info(
            f"Backtest completed in {elapsed:.2f}s: {result.ticks} ticks, "
            f"{result.buy_steps} buys, {result.hands_sold} sells"
        )
        return result
