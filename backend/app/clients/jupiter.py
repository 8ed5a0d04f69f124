"""Jupiter REST client: SOL price, swap quotes and swap transactions."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from app.clients.errors import (
    InvalidAmountError,
    JupiterApiError,
    NetworkTimeoutError,
    SerializationError,
)
from app.clients.jupiter_types import PriorityLevel, QuoteResponse, SwapResponse
from app.constants import MAX_COMPUTE_LAMPORTS, WSOL_MINT

logger = logging.getLogger(__name__)


class JupiterClient:
    """Jupiter price and swap API client."""

    PRICE_URL = "https://api.jup.ag/price/v3"
    SWAP_URL = "https://lite-api.jup.ag/swap/v1"

    def __init__(
        self,
        api_key: str = "",
        price_url: str | None = None,
        swap_url: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            api_key: Optional Jupiter API key (sent as x-api-key)
            price_url: Price API endpoint (default PRICE_URL)
            swap_url: Swap API base URL (default SWAP_URL)
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (for testing)
        """
        self.api_key = api_key
        self.price_url = price_url or self.PRICE_URL
        self.swap_url = (swap_url or self.SWAP_URL).rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {}
            if self.api_key:
                headers["x-api-key"] = self.api_key
            self._client = httpx.AsyncClient(
                headers=headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Make an API request and decode the JSON body.

        Raises:
            NetworkTimeoutError: On timeouts and transport failures
            JupiterApiError: On non-2xx responses
            SerializationError: If the body is not JSON
        """
        client = await self._get_client()
        try:
            response = await client.request(method, url, params=params, json=json)
        except httpx.TimeoutException as e:
            raise NetworkTimeoutError(f"Jupiter request timed out: {url}") from e
        except httpx.TransportError as e:
            raise NetworkTimeoutError(f"Jupiter request failed: {e}") from e

        if not response.is_success:
            raise JupiterApiError(response.text, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise SerializationError(f"Invalid JSON from {url}") from e

    async def get_usd_price(self, mint: str = WSOL_MINT) -> Any:
        """Fetch the raw USD price of a token.

        Returns:
            The ``usdPrice`` value as sent by the API (unvalidated)

        Raises:
            SerializationError: If the response has no price for ``mint``
        """
        data = await self._request("GET", self.price_url, params={"ids": mint})
        try:
            return data[mint]["usdPrice"]
        except (KeyError, TypeError) as e:
            raise SerializationError(f"No usdPrice for {mint} in price response") from e

    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        slippage_bps: int,
    ) -> QuoteResponse:
        """
        Request a swap quote.

        Args:
            input_mint: Mint of the token spent
            output_mint: Mint of the token received
            amount: Amount of input token in base units
            slippage_bps: Max slippage in basis points

        Returns:
            QuoteResponse (stamped with its receive time)
        """
        if amount <= 0:
            raise InvalidAmountError(amount)

        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": amount,
            "slippageBps": slippage_bps,
        }
        data = await self._request("GET", f"{self.swap_url}/quote", params=params)

        try:
            quote = QuoteResponse.model_validate(data)
        except ValidationError as e:
            raise SerializationError(f"Malformed quote response: {e}") from e

        logger.debug(
            "Quote %s -> %s: in=%s out=%s via %s",
            input_mint,
            output_mint,
            quote.in_amount,
            quote.out_amount,
            ",".join(quote.route_labels) or "?",
        )
        return quote

    async def build_swap_tx(
        self,
        quote: QuoteResponse,
        user_pubkey: str,
        priority: PriorityLevel,
    ) -> str:
        """
        Build an unsigned swap transaction for a quote.

        Returns:
            Base64 serialized VersionedTransaction
        """
        body = {
            "quoteResponse": quote.to_payload(),
            "userPublicKey": user_pubkey,
            "dynamicComputeUnitLimit": True,
            "dynamicSlippage": True,
            "prioritizationFeeLamports": {
                "priorityLevelWithMaxLamports": {
                    "maxLamports": MAX_COMPUTE_LAMPORTS,
                    "priorityLevel": priority.value,
                },
            },
        }
        data = await self._request("POST", f"{self.swap_url}/swap", json=body)

        try:
            swap = SwapResponse.model_validate(data)
        except ValidationError as e:
            raise SerializationError(f"Malformed swap response: {e}") from e
        return swap.swap_transaction
