"""Hand (open position) model."""

from decimal import Decimal

from pydantic import BaseModel


class Hand(BaseModel):
    """One discrete opened buy, tracked with its own entry price and lock state.

    Hands are created by HandManager.open_hand() and never removed. A sold
    hand stays in the store with ``locked`` cleared.
    """

    price: Decimal  # Entry price of SOL (USD)
    size_sol: Decimal  # Amount of SOL held by this hand
    locked: bool

    @property
    def cost_usd(self) -> Decimal:
        """USD spent to open this hand."""
        return self.price * self.size_sol

    def unrealized_pnl(self, current_price: Decimal) -> Decimal:
        """PnL of the hand if it were sold at ``current_price``."""
        return (current_price - self.price) * self.size_sol
