"""Solana JSON-RPC client: sign, send and confirm swap transactions.

Jupiter returns swap transactions unsigned. They are deserialized with
solders, signed with the wallet keypair and broadcast base64 encoded via
``sendTransaction``; confirmation is polled with ``getSignatureStatuses``.
"""

import asyncio
import base64
import binascii
import itertools
import logging
from typing import Any

import httpx
from solders.keypair import Keypair
from solders.transaction import VersionedTransaction

from app.clients.errors import (
    NetworkTimeoutError,
    RpcError,
    SerializationError,
    SigningError,
)

logger = logging.getLogger(__name__)

_CONFIRMED = ("confirmed", "finalized")


def load_keypair(private_key: str) -> Keypair:
    """Load a wallet keypair from its base58 secret.

    Raises:
        SigningError: If the secret is empty or malformed
    """
    if not private_key:
        raise SigningError("WALLET_PRIVATE_KEY is not set")
    try:
        return Keypair.from_base58_string(private_key)
    except Exception as e:
        raise SigningError(f"Invalid wallet private key: {e}") from e


def sign_transaction(base64_tx: str, keypair: Keypair) -> VersionedTransaction:
    """Decode a base64 transaction and sign its message with ``keypair``.

    Raises:
        SerializationError: If the payload is not a valid transaction
        SigningError: If the keypair cannot sign the message
    """
    try:
        raw = base64.b64decode(base64_tx, validate=True)
    except (binascii.Error, ValueError) as e:
        raise SerializationError("Swap transaction is not valid base64") from e

    try:
        tx = VersionedTransaction.from_bytes(raw)
    except Exception as e:
        raise SerializationError(f"Cannot deserialize swap transaction: {e}") from e

    try:
        return VersionedTransaction(tx.message, [keypair])
    except Exception as e:
        raise SigningError(f"Cannot sign swap transaction: {e}") from e


class SolanaRpcClient:
    """Minimal Solana JSON-RPC client."""

    def __init__(
        self,
        rpc_url: str,
        timeout: float = 10.0,
        confirm_timeout: float = 60.0,
        poll_interval: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            rpc_url: Solana RPC endpoint
            timeout: Per-request timeout in seconds
            confirm_timeout: Max seconds to wait for confirmation
            poll_interval: Seconds between signature status polls
            transport: Optional httpx transport (for testing)
        """
        self.rpc_url = rpc_url
        self.timeout = timeout
        self.confirm_timeout = confirm_timeout
        self.poll_interval = poll_interval
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._ids = itertools.count(1)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _call(self, method: str, params: list[Any]) -> Any:
        """Invoke a JSON-RPC method and return its ``result``."""
        client = await self._get_client()
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        try:
            response = await client.post(self.rpc_url, json=payload)
        except httpx.TimeoutException as e:
            raise NetworkTimeoutError(f"RPC {method} timed out") from e
        except httpx.TransportError as e:
            raise NetworkTimeoutError(f"RPC {method} failed: {e}") from e

        if not response.is_success:
            raise RpcError(f"{method} HTTP {response.status_code}: {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise SerializationError(f"Invalid JSON from RPC {method}") from e

        if data.get("error"):
            error = data["error"]
            message = error.get("message", error) if isinstance(error, dict) else error
            raise RpcError(f"{method}: {message}")
        return data.get("result")

    async def send_transaction(self, tx: VersionedTransaction) -> str:
        """Broadcast a signed transaction.

        Returns:
            Transaction signature (base58)
        """
        encoded = base64.b64encode(bytes(tx)).decode("ascii")
        signature = await self._call(
            "sendTransaction",
            [encoded, {"encoding": "base64", "preflightCommitment": "confirmed"}],
        )
        if not isinstance(signature, str):
            raise SerializationError("sendTransaction returned no signature")
        return signature

    async def confirm_transaction(self, signature: str) -> None:
        """Wait until ``signature`` is confirmed.

        Raises:
            RpcError: If the transaction failed on chain
            NetworkTimeoutError: If not confirmed within confirm_timeout
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.confirm_timeout

        while True:
            result = await self._call(
                "getSignatureStatuses",
                [[signature], {"searchTransactionHistory": False}],
            )
            statuses = (result or {}).get("value") or [None]
            status = statuses[0]

            if status is not None:
                if status.get("err") is not None:
                    raise RpcError(f"Transaction {signature} failed: {status['err']}")
                if status.get("confirmationStatus") in _CONFIRMED:
                    return

            if loop.time() >= deadline:
                raise NetworkTimeoutError(
                    f"Transaction {signature} not confirmed after {self.confirm_timeout:.0f}s"
                )
            await asyncio.sleep(self.poll_interval)

    async def sign_and_send(self, base64_tx: str, keypair: Keypair) -> str:
        """Sign a Jupiter swap transaction, send it and wait for confirmation."""
        signed = sign_transaction(base64_tx, keypair)
        signature = await self.send_transaction(signed)
        logger.info(f"Transaction sent: {signature}")
        await self.confirm_transaction(signature)
        return signature
