"""Trader: the live polling loop around the decision core.

Per tick:
1. Fetch the SOL price (validated by the price feed)
2. Unlock eligible hands and sell each of them (failed sells are retried
   on the next tick)
3. Update the pointer; on BUY_STEP buy and open a hand
4. Log the hand listing

A failed sell does not end the tick; other collaborator failures
(PriceFeedError, SwapError) do. Either way the tick counts as failed and is
logged; after ``max_consecutive_failures`` failed ticks in a row the loop
gives up and re-raises the last one. Other exceptions propagate.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from app.clients.errors import PriceFeedError, SwapError
from app.services.order_service import OrderResult, SwapExecutor
from app.services.price_feed import PriceFeed
from core.engine import StrategyCore, TickDecision
from core.models.hand import Hand
from core.models.signal import PointerSignal

logger = logging.getLogger(__name__)


@dataclass
class TickReport:
    """What happened during one tick."""

    decision: TickDecision
    sells: list[OrderResult] = field(default_factory=list)
    buy: OrderResult | None = None
    opened: Hand | None = None
    failed_sells: list[Hand] = field(default_factory=list)


class Trader:
    """Drive a StrategyCore from a price feed and a swap executor."""

    def __init__(
        self,
        core: StrategyCore,
        price_feed: PriceFeed,
        executor: SwapExecutor,
        poll_interval: float = 2.0,
        max_consecutive_failures: int = 5,
    ):
        self.core = core
        self.price_feed = price_feed
        self.executor = executor
        self.poll_interval = poll_interval
        self.max_consecutive_failures = max_consecutive_failures

        self._consecutive_failures = 0
        self._ticks = 0
        self._pending_sells: list[Hand] = []

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def pending_sells(self) -> tuple[Hand, ...]:
        """Unlocked hands whose sell failed, retried first on the next tick."""
        return tuple(self._pending_sells)

    async def tick(self) -> TickReport:
        """Run one decision cycle.

        Each hand is sold on its own. A hand whose sell fails stays queued
        for the next tick; the buy step still runs, then the last sell
        error is re-raised so the tick counts as failed.
        """
        price = await self.price_feed.get_price()
        self._ticks += 1

        decision = self.core.evaluate(price)
        logger.info(
            "Price tick: $%.6f | Buy size: %.2f USD -> %.6f SOL",
            price,
            decision.buy_size.usd,
            decision.buy_size.sol,
        )
        report = TickReport(decision=decision)

        to_sell = self._pending_sells + decision.to_sell
        self._pending_sells = []
        sell_error: SwapError | None = None

        for hand in to_sell:
            logger.info("Selling %.6f SOL from hand @ $%.6f", hand.size_sol, hand.price)
            try:
                report.sells.append(await self.executor.sell(hand.size_sol))
            except SwapError as e:
                logger.error("Sell failed for hand @ $%.6f, retrying next tick: %s", hand.price, e)
                self._pending_sells.append(hand)
                report.failed_sells.append(hand)
                sell_error = e

        if decision.signal is PointerSignal.BUY_STEP:
            logger.info("BUY STEP triggered")
            report.buy = await self.executor.buy(decision.buy_size.usd)
            report.opened = self.core.record_buy(price, decision.buy_size.sol)
        elif decision.signal is PointerSignal.SELL_STEP:
            logger.info("SELL STEP triggered")

        for line in self.core.hands.snapshot_lines():
            logger.info(line)
        if self._pending_sells:
            logger.warning("Hands waiting for sell retry: %d", len(self._pending_sells))

        if sell_error is not None:
            raise sell_error
        return report

    async def run(self, stop_event: asyncio.Event | None = None) -> None:
        """Poll until ``stop_event`` is set."""
        stop_event = stop_event or asyncio.Event()

        while not stop_event.is_set():
            try:
                await self.tick()
                self._consecutive_failures = 0
            except (PriceFeedError, SwapError) as e:
                self._consecutive_failures += 1
                logger.warning(
                    "Tick failed (%d/%d): %s",
                    self._consecutive_failures,
                    self.max_consecutive_failures,
                    e,
                )
                if self._consecutive_failures >= self.max_consecutive_failures:
                    logger.error("Too many consecutive failures, stopping trader")
                    raise

            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.poll_interval)
            except asyncio.TimeoutError:
                pass

        logger.info(f"Trader stopped after {self._ticks} ticks")
