"""CLI entry point for the backtesting system.

Completely independent of app/. Replays a CSV price series through core/.

Usage:
    python -m backtest --prices sol_prices.csv
    python -m backtest --prices sol_prices.csv --buy-trigger 0.50 --sell-trigger 0.43
    python -m backtest --prices sol_prices.csv --output result.json
"""

import argparse
import logging
import os
import sys
from decimal import Decimal, InvalidOperation

# Add backend to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pydantic import ValidationError

from core.models.config import StrategyConfig

from backtest.price_source import CsvPriceSource
from backtest.report import ReportFormatter
from backtest.runner import BacktestConfig, BacktestRunner

_DEFAULTS = StrategyConfig()


def parse_decimal(value: str) -> Decimal:
    """Parse a CLI number as Decimal."""
    try:
        return Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"Invalid number: {value}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Backtest the pointer/hands strategy on a price series",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m backtest --prices sol_prices.csv
  python -m backtest --prices sol_prices.csv --buy-trigger 0.50 --sell-trigger 0.43
  python -m backtest --prices sol_prices.csv --output result.json
        """,
    )
    parser.add_argument(
        "--prices",
        type=str,
        required=True,
        help="CSV file with a 'price' column (optional 'timestamp')",
    )
    parser.add_argument(
        "--buy-trigger",
        type=parse_decimal,
        default=_DEFAULTS.buy_trigger_usd,
        help=f"USD drop that fires a buy step (default: {_DEFAULTS.buy_trigger_usd})",
    )
    parser.add_argument(
        "--sell-trigger",
        type=parse_decimal,
        default=_DEFAULTS.sell_trigger_usd,
        help=f"USD rise that fires a sell step (default: {_DEFAULTS.sell_trigger_usd})",
    )
    parser.add_argument(
        "--size-pct",
        type=parse_decimal,
        default=_DEFAULTS.buy_size_pct,
        help=f"Buy size as a fraction of price (default: {_DEFAULTS.buy_size_pct})",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=_DEFAULTS.batch_size,
        help=f"Hands per batch notification (default: {_DEFAULTS.batch_size})",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output file path for JSON results",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        strategy = StrategyConfig(
            buy_trigger_usd=args.buy_trigger,
            sell_trigger_usd=args.sell_trigger,
            buy_size_pct=args.size_pct,
            batch_size=args.batch_size,
        )
    except ValidationError as e:
        print(f"Error: invalid strategy parameters\n{e}")
        return 1

    source = CsvPriceSource(args.prices)
    try:
        prices = source.load()
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    runner = BacktestRunner(
        config=BacktestConfig(source=args.prices, strategy=strategy),
        prices=prices,
    )

    print(f"\nReplaying {len(prices)} prices from {args.prices}...")
    result = runner.run()

    ReportFormatter.print_console(result)

    if args.output:
        ReportFormatter.save_json(result, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
