"""Typed failures raised by the price, swap and RPC clients.

The decision core never sees these. The trader loop catches them per tick
and decides whether to keep going or abort.
"""


class PriceFeedError(Exception):
    """Price could not be fetched or was not a valid price."""


class SwapError(Exception):
    """Base class for quote, swap build, signing and broadcast failures."""


class InvalidAmountError(SwapError):
    def __init__(self, amount: int = 0):
        self.amount = amount
        super().__init__(f"Invalid amount: {amount}")


class QuoteExpiredError(SwapError):
    def __init__(self, age_ms: float, max_age_ms: float):
        self.age_ms = age_ms
        self.max_age_ms = max_age_ms
        super().__init__(f"Quote expired: {age_ms:.0f}ms old (max {max_age_ms:.0f}ms)")


class JupiterApiError(SwapError):
    def __init__(self, body: str, status_code: int | None = None):
        self.body = body
        self.status_code = status_code
        super().__init__(f"Jupiter API error ({status_code}): {body}")


class NetworkTimeoutError(SwapError):
    def __init__(self, message: str = "Network timeout"):
        super().__init__(message)


class RpcError(SwapError):
    def __init__(self, message: str):
        self.message = message
        super().__init__(f"RPC error: {message}")


class SerializationError(SwapError):
    def __init__(self, message: str = "Serialization error"):
        super().__init__(message)


class SigningError(SwapError):
    def __init__(self, message: str = "Signing error"):
        super().__init__(message)
