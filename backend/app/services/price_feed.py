"""SOL/USD price feed backed by the Jupiter price API."""

import logging
from decimal import Decimal

from app.clients.errors import PriceFeedError, SwapError
from app.clients.jupiter import JupiterClient
from app.constants import WSOL_MINT
from core.validation import InvalidPriceError, validate_price

logger = logging.getLogger(__name__)


class PriceFeed:
    """Fetch and validate the current SOL price.

    Every returned price is a finite positive Decimal; anything else is
    raised as PriceFeedError before it can reach the decision core.
    """

    def __init__(self, client: JupiterClient, mint: str = WSOL_MINT):
        self._client = client
        self.mint = mint
        self.last_price: Decimal | None = None

    async def get_price(self) -> Decimal:
        try:
            raw = await self._client.get_usd_price(self.mint)
        except SwapError as e:
            raise PriceFeedError(f"Price fetch failed: {e}") from e

        try:
            price = validate_price(raw)
        except InvalidPriceError as e:
            raise PriceFeedError(str(e)) from e

        self.last_price = price
        return price
