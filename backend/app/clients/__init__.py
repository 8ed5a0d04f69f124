"""Price, swap and RPC clients."""

from app.clients.errors import (
    InvalidAmountError,
    JupiterApiError,
    NetworkTimeoutError,
    PriceFeedError,
    QuoteExpiredError,
    RpcError,
    SerializationError,
    SigningError,
    SwapError,
)
from app.clients.jupiter import JupiterClient
from app.clients.jupiter_types import PriorityLevel, QuoteResponse, SwapResponse
from app.clients.solana_rpc import SolanaRpcClient, load_keypair, sign_transaction

__all__ = [
    "InvalidAmountError",
    "JupiterApiError",
    "NetworkTimeoutError",
    "PriceFeedError",
    "QuoteExpiredError",
    "RpcError",
    "SerializationError",
    "SigningError",
    "SwapError",
    "JupiterClient",
    "PriorityLevel",
    "QuoteResponse",
    "SwapResponse",
    "SolanaRpcClient",
    "load_keypair",
    "sign_transaction",
]
