"""
Wallet adapter.

Wraps an ``AsyncWeb3`` provider plus the signing account. Two modes:
- a local private key (``WALLET_PRIVATE_KEY``) signs transactions in-process
- otherwise the node's first unlocked account signs (``eth_sendTransaction``)

The adapter only knows about accounts, networks, gas and transactions;
contract semantics live in ``marketplace.chain.gateway``.
"""
import asyncio
from typing import Any, Dict, Optional

from eth_account import Account
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import TransactionNotFound

from marketplace.config import Settings
from marketplace.errors import WalletNotInstalledError, WrongNetworkError, classify_error
from marketplace.logging import get_logger, sanitize_address_for_logging

logger = get_logger(__name__)


class Web3Wallet:
    """Account access, network checks and transaction submission."""

    def __init__(self, settings: Settings, w3: Optional[AsyncWeb3] = None):
        self.settings = settings
        self._w3 = w3
        self._account = Account.from_key(settings.wallet_private_key) if settings.wallet_private_key else None
        self._address: Optional[str] = self._account.address if self._account else None

    @property
    def w3(self) -> AsyncWeb3:
        """Get the provider (lazy initialization)."""
        if self._w3 is None:
            if not self.settings.rpc_url:
                raise WalletNotInstalledError()
            self._w3 = AsyncWeb3(AsyncHTTPProvider(self.settings.rpc_url))
        return self._w3

    @property
    def address(self) -> Optional[str]:
        """Connected account, if ``request_accounts`` has run (or a key is configured)."""
        return self._address

    async def request_accounts(self) -> str:
        """Resolve the signing account address."""
        if self._address:
            return self._address
        try:
            accounts = await self.w3.eth.accounts
        except Exception as e:
            logger.error(f"Failed to request accounts: {e}")
            raise WalletNotInstalledError() from e
        if not accounts:
            raise WalletNotInstalledError("The wallet provider exposes no accounts")
        self._address = AsyncWeb3.to_checksum_address(accounts[0])
        logger.info(f"Connected account {sanitize_address_for_logging(self._address)}")
        return self._address

    async def get_chain_id(self) -> int:
        try:
            return int(await self.w3.eth.chain_id)
        except Exception as e:
            raise classify_error(e) from e

    async def ensure_network(self) -> int:
        """Refuse to continue unless connected to the configured chain."""
        chain_id = await self.get_chain_id()
        if chain_id != self.settings.chain_id:
            logger.warning(f"Wrong network: connected to {chain_id}, expected {self.settings.chain_id}")
            raise WrongNetworkError(self.settings.chain_name, chain_id)
        return chain_id

    async def ensure_ready(self) -> str:
        """Account and network check run before every write."""
        address = await self.request_accounts()
        await self.ensure_network()
        return address

    async def estimate_gas(self, call, value: int = 0) -> int:
        """Estimate gas for a bound contract function call."""
        sender = await self.request_accounts()
        return int(await call.estimate_gas({"from": sender, "value": value}))

    async def send_transaction(self, call, value: int, gas: int) -> str:
        """Sign and submit a contract call; returns the transaction hash (0x...)."""
        sender = await self.request_accounts()
        params: Dict[str, Any] = {"from": sender, "value": value, "gas": gas}

        if self._account is None:
            tx_hash = await call.transact(params)
        else:
            params["nonce"] = await self.w3.eth.get_transaction_count(sender, "pending")
            params["chainId"] = self.settings.chain_id
            tx = await call.build_transaction(params)
            signed = self._account.sign_transaction(tx)
            tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)

        tx_hex = AsyncWeb3.to_hex(tx_hash)
        logger.info(f"Transaction sent: {sanitize_address_for_logging(tx_hex)}")
        return tx_hex

    async def wait_for_receipt(self, tx_hash: str) -> Dict[str, Any]:
        """
        Poll until the transaction is included in a block.

        No timeout: a stalled network keeps the caller waiting.
        """
        while True:
            try:
                receipt = await self.w3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                receipt = None
            if receipt is not None:
                return dict(receipt)
            await asyncio.sleep(self.settings.receipt_poll_interval)

    async def confirmations(self, block_number: Optional[int]) -> int:
        if block_number is None:
            return 0
        latest = await self.w3.eth.block_number
        return max(1, int(latest) - int(block_number) + 1)

    def contract(self, address: str, abi: list):
        return self.w3.eth.contract(address=AsyncWeb3.to_checksum_address(address), abi=abi)

    async def aclose(self) -> None:
        """Close the provider's HTTP session if one was opened."""
        if self._w3 is None:
            return
        provider = self._w3.provider
        disconnect = getattr(provider, "disconnect", None)
        if disconnect is not None:
            await disconnect()
