"""Trading configuration loaded from trading.yaml.

Supports:
- Strategy parameters (triggers, buy size, batch size)
- Loop parameters (poll interval, failure budget)
- Execution parameters (slippage, dry-run)
- No YAML file = defaults, dry-run on
"""

import logging
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from core.models.config import StrategyConfig

logger = logging.getLogger(__name__)


class TradingConfig(BaseModel):
    """Top-level trading.yaml configuration."""

    strategy: StrategyConfig = StrategyConfig()

    # Driver loop
    poll_interval: float = Field(default=2.0, gt=0)  # seconds between price ticks
    max_consecutive_failures: int = Field(default=5, ge=1)

    # Execution
    slippage_bps: int = Field(default=50, ge=0, le=10_000)
    dry_run: bool = True  # simulate swaps, never sign or send


_DEFAULT_PATH = Path(__file__).parent.parent / "trading.yaml"


def load_trading_config(path: Path | None = None) -> TradingConfig:
    """Load trading config from YAML file.

    Falls back to defaults (dry-run) if file doesn't exist.
    """
    config_path = path or _DEFAULT_PATH

    # Load .env into os.environ so Settings can see the wallet and API keys
    env_path = config_path.parent / ".env"
    load_dotenv(env_path, override=False)

    if not config_path.exists():
        logger.info("No trading.yaml found at %s, using defaults (dry-run)", config_path)
        return TradingConfig()

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    config = TradingConfig(**raw)
    logger.info(
        "Loaded trading config: buy_trigger=%s sell_trigger=%s size_pct=%s batch=%d dry_run=%s",
        config.strategy.buy_trigger_usd,
        config.strategy.sell_trigger_usd,
        config.strategy.buy_size_pct,
        config.strategy.batch_size,
        config.dry_run,
    )
    return config
