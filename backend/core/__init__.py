"""Core decision logic for the pointer/hand strategy.

This package contains pure business logic with no I/O dependencies
(no network, wallet or blockchain access). It is shared between the
live trader (app/) and the offline replay (backtest/).
"""
