"""Strategy configuration model."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class StrategyConfig(BaseModel):
    """Strategy parameters, fixed for the lifetime of the process.

    Triggers are absolute USD moves of the SOL price, not percentages.
    """

    model_config = ConfigDict(frozen=True)

    # Pointer triggers (USD)
    buy_trigger_usd: Decimal = Field(default=Decimal("0.02"), gt=0)
    sell_trigger_usd: Decimal = Field(default=Decimal("0.03"), gt=0)

    # Buy size as a fraction of the SOL price (see core.sizing.buy_size)
    buy_size_pct: Decimal = Field(default=Decimal("0.005"), gt=0)

    # Emit a BatchReady event every N opened hands
    batch_size: int = Field(default=10, gt=0)
