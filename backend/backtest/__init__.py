"""Backtesting system for the pointer/hands strategy.

Fully independent of app/, only depends on core/ for business logic.
Prices are replayed from a CSV file; swaps are simulated at the tick price.

Usage:
    python -m backtest --prices sol_prices.csv
"""

from backtest.runner import BacktestConfig, BacktestRunner
from backtest.stats import BacktestResult

__all__ = ["BacktestConfig", "BacktestRunner", "BacktestResult"]
