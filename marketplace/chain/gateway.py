"""
Marketplace contract gateway.

Typed client over the single marketplace ABI. Reads run under the shared
``RetryPolicy``; every write follows the same sequence:

    estimate gas -> +margin -> sign/send -> wait for block inclusion

and reports its progress through an optional callback so callers can
track per-operation state.
"""
import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence, Union

from marketplace.config import Settings
from marketplace.errors import (
    ERROR_ORDER_NOT_FOUND,
    ERROR_PRODUCT_NOT_FOUND,
    ExecutionRevertedError,
    MarketplaceError,
    NotFoundError,
    classify_error,
)
from marketplace.logging import get_logger, sanitize_address_for_logging
from marketplace.services.money import with_gas_margin
from .abi import MARKETPLACE_ABI
from .models import Order, OrderStatus, Product, ShippingInfo, TxResult, TxStage
from .retry import RetryPolicy
from .wallet import Web3Wallet

logger = get_logger(__name__)

ProgressCallback = Callable[[TxStage, Optional[str]], Union[None, Awaitable[None]]]


async def _notify(callback: Optional[ProgressCallback], stage: TxStage, tx_hash: Optional[str] = None) -> None:
    if callback is None:
        return
    result = callback(stage, tx_hash)
    if asyncio.iscoroutine(result):
        await result


class MarketplaceGateway:
    """Every contract interaction of the storefront."""

    def __init__(
        self,
        wallet: Web3Wallet,
        settings: Settings,
        contract=None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.wallet = wallet
        self.settings = settings
        self._contract = contract
        self.retry_policy = retry_policy or RetryPolicy.from_settings(settings)

    @property
    def contract(self):
        """Bound contract (lazy initialization)."""
        if self._contract is None:
            self._contract = self.wallet.contract(self.settings.contract_address, MARKETPLACE_ABI)
        return self._contract

    # ==================== READS ====================

    async def _read(self, name: str, *args):
        async def call():
            return await getattr(self.contract.functions, name)(*args).call()

        try:
            return await self.retry_policy.run(call)
        except (MarketplaceError, NotFoundError):
            raise
        except Exception as e:
            logger.error(f"Contract read {name} failed: {e}")
            raise classify_error(e) from e

    async def get_all_products(self) -> List[Product]:
        raw_products = await self._read("getAllProducts")
        return [Product.from_chain(raw) for raw in raw_products]

    async def next_product_id(self) -> int:
        return int(await self._read("nextProductId"))

    async def get_product(self, product_id: int) -> Product:
        try:
            raw = await self._read("getProductDetails", product_id)
        except ExecutionRevertedError as e:
            raise NotFoundError(ERROR_PRODUCT_NOT_FOUND) from e
        product = Product.from_chain(raw)
        # Unknown ids come back as zeroed structs
        if product.id != product_id or int(product.seller, 16) == 0:
            raise NotFoundError(ERROR_PRODUCT_NOT_FOUND)
        return product

    async def is_registered_seller(self, address: str) -> bool:
        return bool(await self._read("registeredSellers", address))

    async def get_order(self, order_id: int, with_shipping: bool = False) -> Order:
        try:
            raw = await self._read("getOrderDetails", order_id)
        except ExecutionRevertedError as e:
            raise NotFoundError(ERROR_ORDER_NOT_FOUND) from e
        order = Order.from_chain(raw)
        if int(order.buyer, 16) == 0:
            raise NotFoundError(ERROR_ORDER_NOT_FOUND)
        if with_shipping:
            order.shipping = await self.get_shipping_info(order_id)
        return order

    async def get_buyer_order_ids(self, buyer: str) -> List[int]:
        return [int(order_id) for order_id in await self._read("getBuyerOrders", buyer)]

    async def get_seller_order_ids(self, seller: str) -> List[int]:
        return [int(order_id) for order_id in await self._read("getSellerOrders", seller)]

    async def get_shipping_info(self, order_id: int) -> Optional[ShippingInfo]:
        return ShippingInfo.from_chain(await self._read("getShippingInfo", order_id))

    async def get_orders(self, order_ids: Sequence[int], with_shipping: bool = False) -> List[Order]:
        """
        Fetch order details one at a time.

        Reads are sequential with a fixed pause between them to stay under
        public RPC rate limits.
        """
        orders = []
        for index, order_id in enumerate(order_ids):
            if index and self.settings.order_fetch_delay > 0:
                await asyncio.sleep(self.settings.order_fetch_delay)
            orders.append(await self.get_order(order_id, with_shipping=with_shipping))
        return orders

    # ==================== WRITES ====================

    async def _transact(
        self,
        name: str,
        *args,
        value: int = 0,
        on_progress: Optional[ProgressCallback] = None,
    ) -> TxResult:
        call = getattr(self.contract.functions, name)(*args)
        try:
            await _notify(on_progress, TxStage.ESTIMATING)
            estimate = await self.wallet.estimate_gas(call, value=value)
            gas_limit = with_gas_margin(estimate, self.settings.gas_margin_percent)

            await _notify(on_progress, TxStage.AWAITING_SIGNATURE)
            tx_hash = await self.wallet.send_transaction(call, value=value, gas=gas_limit)

            await _notify(on_progress, TxStage.PENDING, tx_hash)
            receipt = await self.wallet.wait_for_receipt(tx_hash)
        except MarketplaceError:
            raise
        except Exception as e:
            logger.error(f"Contract write {name} failed: {e}")
            raise classify_error(e) from e

        if int(receipt.get("status", 0)) != 1:
            logger.warning(f"{name} reverted in block {receipt.get('blockNumber')}: {sanitize_address_for_logging(tx_hash)}")
            raise ExecutionRevertedError()

        block_number = receipt.get("blockNumber")
        try:
            confirmations = await self.wallet.confirmations(block_number)
        except Exception as e:
            logger.warning(f"Could not read confirmations for {sanitize_address_for_logging(tx_hash)}: {e}")
            confirmations = 1

        logger.info(f"{name} confirmed in block {block_number}: {sanitize_address_for_logging(tx_hash)}")
        return TxResult(
            tx_hash=tx_hash,
            block_number=block_number,
            gas_used=receipt.get("gasUsed"),
            gas_limit=gas_limit,
            confirmations=confirmations,
        )

    async def place_order(
        self,
        product_ids: Sequence[int],
        quantities: Sequence[int],
        value_wei: int,
        on_progress: Optional[ProgressCallback] = None,
    ) -> TxResult:
        return await self._transact(
            "placeOrder",
            list(product_ids),
            list(quantities),
            value=value_wei,
            on_progress=on_progress,
        )

    async def register_as_seller(self, on_progress: Optional[ProgressCallback] = None) -> TxResult:
        return await self._transact("registerAsSeller", on_progress=on_progress)

    async def add_product(
        self, name: str, price_wei: int, stock: int, on_progress: Optional[ProgressCallback] = None
    ) -> TxResult:
        return await self._transact("addProduct", name, price_wei, stock, on_progress=on_progress)

    async def update_product(
        self,
        product_id: int,
        name: str,
        price_wei: int,
        stock: int,
        available: bool,
        on_progress: Optional[ProgressCallback] = None,
    ) -> TxResult:
        return await self._transact(
            "updateProduct", product_id, name, price_wei, stock, available, on_progress=on_progress
        )

    async def update_order_status(
        self, order_id: int, status: OrderStatus, on_progress: Optional[ProgressCallback] = None
    ) -> TxResult:
        return await self._transact("updateOrderStatus", order_id, status.code, on_progress=on_progress)

    async def add_shipping_info(
        self, order_id: int, shipping: ShippingInfo, on_progress: Optional[ProgressCallback] = None
    ) -> TxResult:
        return await self._transact("addShippingInfo", order_id, *shipping.as_args(), on_progress=on_progress)
