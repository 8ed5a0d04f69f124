"""Token mints and execution limits."""

WSOL_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"

# Upper bound for priority fee spend per swap
MAX_COMPUTE_LAMPORTS = 1_000_000

# Quotes older than this are rejected before the built swap is signed
MAX_QUOTE_AGE_MS = 2_000

DEFAULT_SLIPPAGE_BPS = 50
