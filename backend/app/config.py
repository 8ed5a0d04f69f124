"""Application configuration."""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Solana
    rpc_url: str = "https://api.mainnet-beta.solana.com"
    wallet_private_key: str = ""  # base58 keypair, required for live trading

    # Jupiter API
    jup_api_key: str = ""
    jupiter_price_url: str = "https://api.jup.ag/price/v3"
    jupiter_swap_url: str = "https://lite-api.jup.ag/swap/v1"

    # HTTP
    http_timeout: float = 10.0

    # Transaction confirmation
    confirm_timeout: float = 60.0
    confirm_poll_interval: float = 1.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
