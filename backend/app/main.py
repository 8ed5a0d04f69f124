"""Main application entry point."""

import asyncio
import logging
import signal
import sys

# Configure logging FIRST, before any other imports
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)

# Reduce noise from third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("asyncio").setLevel(logging.WARNING)

from app.clients import (
    JupiterClient,
    PriceFeedError,
    SolanaRpcClient,
    SwapError,
    load_keypair,
)
from app.config import get_settings
from app.services import PriceFeed, SwapExecutor, Trader, log_hand_event
from app.trading_config import load_trading_config
from core.engine import StrategyCore

logger = logging.getLogger(__name__)


async def run_trader() -> None:
    """Build the trader from configuration and run it until SIGINT/SIGTERM."""
    trading_config = load_trading_config()
    settings = get_settings()
    strategy = trading_config.strategy

    logger.info("JUP_API_KEY loaded: %s", bool(settings.jup_api_key))
    logger.info("Fixed triggers:")
    logger.info("  BUY_TRIGGER_USD = $%s", strategy.buy_trigger_usd)
    logger.info("  SELL_TRIGGER_USD = $%s", strategy.sell_trigger_usd)
    logger.info("  BUY_SIZE_PCT = %.2f%%", strategy.buy_size_pct * 100)

    jupiter = JupiterClient(
        api_key=settings.jup_api_key,
        price_url=settings.jupiter_price_url,
        swap_url=settings.jupiter_swap_url,
        timeout=settings.http_timeout,
    )
    rpc: SolanaRpcClient | None = None
    keypair = None

    if trading_config.dry_run:
        logger.warning("Dry-run mode: swaps are simulated, nothing is signed or sent")
    else:
        keypair = load_keypair(settings.wallet_private_key)
        rpc = SolanaRpcClient(
            settings.rpc_url,
            timeout=settings.http_timeout,
            confirm_timeout=settings.confirm_timeout,
            poll_interval=settings.confirm_poll_interval,
        )
        logger.warning("LIVE trading as %s - USE WITH CAUTION", keypair.pubkey())

    core = StrategyCore(strategy)
    core.hands.on_event(log_hand_event)

    trader = Trader(
        core=core,
        price_feed=PriceFeed(jupiter),
        executor=SwapExecutor(
            jupiter=jupiter,
            rpc=rpc,
            keypair=keypair,
            slippage_bps=trading_config.slippage_bps,
            dry_run=trading_config.dry_run,
        ),
        poll_interval=trading_config.poll_interval,
        max_consecutive_failures=trading_config.max_consecutive_failures,
    )

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # Windows: fall back to KeyboardInterrupt
            pass

    try:
        await trader.run(stop_event)
    finally:
        await jupiter.close()
        if rpc:
            await rpc.close()


def main() -> int:
    """Run the application."""
    try:
        asyncio.run(run_trader())
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except (PriceFeedError, SwapError) as e:
        logger.error(f"Trader aborted: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
