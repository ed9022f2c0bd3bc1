"""
Marketplace configuration.

All values come from environment variables (optionally loaded from a local
.env file). Defaults point at the Monad testnet deployment of the
marketplace contract.
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

DEFAULT_CONTRACT_ADDRESS = "0x6408b1A5234b0c18727001ab5931FDf511D56ADb"
DEFAULT_RPC_URL = "https://testnet-rpc.monad.xyz"
DEFAULT_CHAIN_ID = 10143
DEFAULT_CHAIN_NAME = "Monad Testnet"
DEFAULT_CURRENCY_SYMBOL = "MON"
DEFAULT_EXPLORER_URL = "https://explorer.monad.xyz"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the chain gateway, retries and the app shell."""
    rpc_url: str = DEFAULT_RPC_URL
    contract_address: str = DEFAULT_CONTRACT_ADDRESS
    chain_id: int = DEFAULT_CHAIN_ID
    chain_name: str = DEFAULT_CHAIN_NAME
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    explorer_url: str = DEFAULT_EXPLORER_URL
    wallet_private_key: Optional[str] = None

    read_retry_attempts: int = 3
    read_retry_delay: float = 1.0
    read_retry_max_delay: float = 10.0
    order_fetch_delay: float = 0.5
    receipt_poll_interval: float = 2.0
    gas_margin_percent: int = 20

    app_url: str = "https://web3-marketplace.com"
    farcaster_header: str = ""
    farcaster_payload: str = ""
    farcaster_signature: str = ""

    def explorer_tx_url(self, tx_hash: str) -> str:
        return f"{self.explorer_url.rstrip('/')}/tx/{tx_hash}"


def load_settings() -> Settings:
    """Build settings from the environment (no caching)."""
    load_dotenv()

    settings = Settings(
        rpc_url=os.environ.get("MARKETPLACE_RPC_URL", DEFAULT_RPC_URL),
        contract_address=os.environ.get("MARKETPLACE_CONTRACT_ADDRESS", DEFAULT_CONTRACT_ADDRESS),
        chain_id=_env_int("MARKETPLACE_CHAIN_ID", DEFAULT_CHAIN_ID),
        chain_name=os.environ.get("MARKETPLACE_CHAIN_NAME", DEFAULT_CHAIN_NAME),
        currency_symbol=os.environ.get("MARKETPLACE_CURRENCY_SYMBOL", DEFAULT_CURRENCY_SYMBOL),
        explorer_url=os.environ.get("MARKETPLACE_EXPLORER_URL", DEFAULT_EXPLORER_URL),
        wallet_private_key=os.environ.get("WALLET_PRIVATE_KEY") or None,
        read_retry_attempts=_env_int("READ_RETRY_ATTEMPTS", 3),
        read_retry_delay=_env_float("READ_RETRY_DELAY", 1.0),
        read_retry_max_delay=_env_float("READ_RETRY_MAX_DELAY", 10.0),
        order_fetch_delay=_env_float("ORDER_FETCH_DELAY", 0.5),
        receipt_poll_interval=_env_float("RECEIPT_POLL_INTERVAL", 2.0),
        gas_margin_percent=_env_int("GAS_MARGIN_PERCENT", 20),
        app_url=os.environ.get("APP_URL", "https://web3-marketplace.com"),
        farcaster_header=os.environ.get("FARCASTER_HEADER", ""),
        farcaster_payload=os.environ.get("FARCASTER_PAYLOAD", ""),
        farcaster_signature=os.environ.get("FARCASTER_SIGNATURE", ""),
    )

    if settings.read_retry_attempts < 1:
        raise ValueError("READ_RETRY_ATTEMPTS must be at least 1")
    if settings.gas_margin_percent < 0:
        raise ValueError("GAS_MARGIN_PERCENT must not be negative")
    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get settings (cached for the process lifetime)."""
    return load_settings()
