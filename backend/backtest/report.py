"""Report formatting for backtest results.

Outputs results to console (formatted tables) and JSON files.
"""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal

from backtest.stats import BacktestResult


class DecimalEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, Decimal):
            return float(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


def _money(value: Decimal | None) -> str:
    return "-" if value is None else f"${value:,.4f}"


class ReportFormatter:
    """Format backtest results for display and export."""

    @staticmethod
    def print_console(result: BacktestResult) -> None:
        """Print formatted report to console."""
        print("\n" + "=" * 60)
        print("  BACKTEST RESULTS: Pointer / Hands")
        print("=" * 60)
        print(f"  Source: {result.source}")
        if result.start_time and result.end_time:
            print(f"  Period: {result.start_time:%Y-%m-%d %H:%M} → {result.end_time:%Y-%m-%d %H:%M}")
        print(
            f"  Triggers: buy -${result.buy_trigger_usd}  sell +${result.sell_trigger_usd}"
            f"  size {result.buy_size_pct * 100:.2f}%  batch {result.batch_size}"
        )

        print("\n" + "-" * 60)
        print("  PRICES")
        print("-" * 60)
        print(f"  Ticks:          {result.ticks}")
        print(f"  First / last:   {_money(result.first_price)} / {_money(result.last_price)}")
        print(f"  Min / max:      {_money(result.min_price)} / {_money(result.max_price)}")

        print("\n" + "-" * 60)
        print("  SIGNALS & HANDS")
        print("-" * 60)
        print(f"  Buy steps:      {result.buy_steps}")
        print(f"  Sell steps:     {result.sell_steps}")
        print(f"  Hands opened:   {result.hands_opened}")
        print(f"  Hands sold:     {result.hands_sold}")
        print(f"  Hands held:     {result.hands_held} ({result.hands_locked} locked)")
        print(f"  Batches ready:  {result.batches_ready}")

        print("\n" + "-" * 60)
        print("  PNL (USD)")
        print("-" * 60)
        print(f"  Invested:       {_money(result.invested_usd)}")
        print(f"  Realized:       {result.realized_pnl_usd:+,.6f}")
        print(f"  Unrealized:     {result.unrealized_pnl_usd:+,.6f}")
        print(f"  Total:          {result.total_pnl_usd:+,.6f}")

        print("\n" + "=" * 60)

    @staticmethod
    def to_dict(result: BacktestResult) -> dict:
        """Convert results to JSON-serializable dict."""
        return {
            "metadata": {
                "source": result.source,
                "start_time": result.start_time,
                "end_time": result.end_time,
                "buy_trigger_usd": result.buy_trigger_usd,
                "sell_trigger_usd": result.sell_trigger_usd,
                "buy_size_pct": result.buy_size_pct,
                "batch_size": result.batch_size,
            },
            "prices": {
                "ticks": result.ticks,
                "first": result.first_price,
                "last": result.last_price,
                "min": result.min_price,
                "max": result.max_price,
            },
            "overall": {
                "buy_steps": result.buy_steps,
                "sell_steps": result.sell_steps,
                "hands_opened": result.hands_opened,
                "hands_sold": result.hands_sold,
                "hands_held": result.hands_held,
                "hands_locked": result.hands_locked,
                "batches_ready": result.batches_ready,
                "invested_usd": result.invested_usd,
                "realized_pnl_usd": result.realized_pnl_usd,
                "unrealized_pnl_usd": result.unrealized_pnl_usd,
                "total_pnl_usd": result.total_pnl_usd,
            },
            "fills": [
                {
                    "side": f.side,
                    "tick": f.tick,
                    "price": f.price,
                    "size_sol": f.size_sol,
                    "entry_price": f.entry_price,
                    "timestamp": f.timestamp,
                }
                for f in result.fills
            ],
        }

    @staticmethod
    def save_json(result: BacktestResult, path: str) -> None:
        """Save results to JSON file."""
        data = ReportFormatter.to_dict(result)
        with open(path, "w") as f:
            json.dump(data, f, indent=2, cls=DecimalEncoder)
        print(f"\n  Results saved to {path}")
