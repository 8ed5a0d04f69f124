"""Swap execution service using Jupiter and Solana RPC.

Buys spend USDC for SOL, sells spend SOL for USDC. In dry-run mode orders
are simulated and nothing is quoted, signed or sent.
"""

import logging
import time
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from solders.keypair import Keypair

from app.clients.errors import QuoteExpiredError
from app.clients.jupiter import JupiterClient
from app.clients.jupiter_types import PriorityLevel, QuoteResponse
from app.clients.solana_rpc import SolanaRpcClient
from app.constants import DEFAULT_SLIPPAGE_BPS, MAX_QUOTE_AGE_MS, USDC_MINT, WSOL_MINT
from core.sizing import to_lamports, to_usdc_units

logger = logging.getLogger(__name__)


class OrderSide(str, Enum):
    """Order side enum."""
    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class OrderResult:
    """Outcome of one executed (or simulated) swap."""

    side: OrderSide
    amount: int  # input amount in base units (USDC units for buys, lamports for sells)
    signature: str
    simulated: bool = False


class SwapExecutor:
    """
    Execute SOL/USDC swaps through Jupiter.

    Supports:
    - Buys at HIGH priority (USDC -> SOL)
    - Sells at MEDIUM priority (SOL -> USDC)
    - Dry-run simulation
    """

    def __init__(
        self,
        jupiter: JupiterClient | None = None,
        rpc: SolanaRpcClient | None = None,
        keypair: Keypair | None = None,
        slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
        dry_run: bool = True,
        max_quote_age_ms: float = MAX_QUOTE_AGE_MS,
    ):
        """
        Args:
            jupiter: Jupiter client (required unless dry_run)
            rpc: Solana RPC client (required unless dry_run)
            keypair: Wallet keypair (required unless dry_run)
            slippage_bps: Max slippage in basis points
            dry_run: Simulate orders instead of trading (default True for safety)
            max_quote_age_ms: Reject quotes older than this before signing the swap
        """
        if not dry_run and (jupiter is None or rpc is None or keypair is None):
            raise ValueError("Live trading requires jupiter, rpc and keypair")

        self._jupiter = jupiter
        self._rpc = rpc
        self._keypair = keypair
        self.slippage_bps = slippage_bps
        self.dry_run = dry_run
        self.max_quote_age_ms = max_quote_age_ms
        self._sim_counter = 0

    @property
    def pubkey(self) -> str | None:
        return str(self._keypair.pubkey()) if self._keypair else None

    async def buy(self, usd_amount: Decimal) -> OrderResult:
        """
        Buy SOL with ``usd_amount`` of USDC.

        Returns:
            OrderResult with the transaction signature
        """
        amount = to_usdc_units(usd_amount)
        logger.info(f"Placing BUY swap: {usd_amount:.2f} USDC ({amount} units)")
        return await self._swap(OrderSide.BUY, USDC_MINT, WSOL_MINT, amount, PriorityLevel.HIGH)

    async def sell(self, size_sol: Decimal) -> OrderResult:
        """
        Sell ``size_sol`` SOL for USDC.

        Returns:
            OrderResult with the transaction signature
        """
        amount = to_lamports(size_sol)
        logger.info(f"Placing SELL swap: {size_sol:.6f} SOL ({amount} lamports)")
        return await self._swap(OrderSide.SELL, WSOL_MINT, USDC_MINT, amount, PriorityLevel.MEDIUM)

    async def _swap(
        self,
        side: OrderSide,
        input_mint: str,
        output_mint: str,
        amount: int,
        priority: PriorityLevel,
    ) -> OrderResult:
        if self.dry_run:
            self._sim_counter += 1
            logger.warning("Dry-run mode - simulating %s swap", side.value)
            return OrderResult(
                side=side,
                amount=amount,
                signature=f"SIMULATED-{side.value}-{self._sim_counter}",
                simulated=True,
            )

        quote = await self._jupiter.get_quote(input_mint, output_mint, amount, self.slippage_bps)

        tx = await self._jupiter.build_swap_tx(quote, self.pubkey, priority)
        # Quote must still be fresh when the built swap is signed
        self._check_quote_age(quote)
        signature = await self._rpc.sign_and_send(tx, self._keypair)

        logger.info(f"{side.value.upper()} executed | tx: {signature}")
        return OrderResult(side=side, amount=amount, signature=signature)

    def _check_quote_age(self, quote: QuoteResponse) -> None:
        age = quote.age_ms(time.monotonic())
        if age > self.max_quote_age_ms:
            raise QuoteExpiredError(age, self.max_quote_age_ms)
