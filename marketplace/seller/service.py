"""
Seller dashboard operations.

Each operation is an independent request/response cycle against the
contract: registration, product management and incoming order handling.
Product deletion only flips the availability flag; products are never
removed on chain.
"""
from typing import List, Optional

from marketplace.catalog.service import ProductCatalog
from marketplace.chain.gateway import MarketplaceGateway
from marketplace.chain.models import Order, OrderStatus, Product, TxResult
from marketplace.errors import (
    ERROR_INVALID_NAME,
    ERROR_INVALID_PRICE,
    ERROR_INVALID_STOCK,
    ERROR_NOT_SELLER,
    ERROR_ORDER_NOT_FOUND,
    ERROR_PRODUCT_NOT_FOUND,
    InvalidInputError,
    NotFoundError,
)
from marketplace.events import EventBus, MarketplaceEvent
from marketplace.logging import get_logger, sanitize_address_for_logging, sanitize_string_for_logging
from marketplace.orders.status import can_transition, next_statuses
from marketplace.services.money import parse_amount, to_base_units

logger = get_logger(__name__)


def _validate_product_fields(name: str, price: str, stock: int) -> tuple[str, int]:
    name = (name or "").strip()
    if not name:
        raise InvalidInputError(ERROR_INVALID_NAME)
    amount = parse_amount(price, field="price")
    if amount <= 0:
        raise InvalidInputError(ERROR_INVALID_PRICE)
    if isinstance(stock, bool) or not isinstance(stock, int) or stock <= 0:
        raise InvalidInputError(ERROR_INVALID_STOCK)
    return name, to_base_units(amount)


class SellerService:
    """Operations of the connected account acting as a seller."""

    def __init__(self, gateway: MarketplaceGateway, catalog: ProductCatalog, events: EventBus):
        self.gateway = gateway
        self.catalog = catalog
        self.events = events

    async def _address(self) -> str:
        return await self.gateway.wallet.request_accounts()

    # ==================== REGISTRATION ====================

    async def is_registered(self, address: Optional[str] = None) -> bool:
        address = address or await self._address()
        return await self.gateway.is_registered_seller(address)

    async def register(self) -> bool:
        """Register the connected account; returns the re-checked status."""
        address = await self.gateway.wallet.ensure_ready()
        if await self.gateway.is_registered_seller(address):
            logger.info(f"{sanitize_address_for_logging(address)} is already a registered seller")
            return True

        await self.gateway.register_as_seller()
        registered = await self.gateway.is_registered_seller(address)
        if registered:
            await self.events.emit(MarketplaceEvent.SELLER_REGISTERED, {"seller": address})
        return registered

    async def _require_registered(self) -> str:
        address = await self.gateway.wallet.ensure_ready()
        if not await self.gateway.is_registered_seller(address):
            raise InvalidInputError(ERROR_NOT_SELLER)
        return address

    # ==================== PRODUCTS ====================

    async def list_own_products(self) -> List[Product]:
        """All products (available or not) listed by the connected seller."""
        address = await self._address()
        await self.catalog.refresh()
        return await self.catalog.products_by_seller(address)

    async def _own_product(self, product_id: int, address: str) -> Product:
        product = await self.gateway.get_product(product_id)
        if product.seller.lower() != address.lower():
            raise NotFoundError(ERROR_PRODUCT_NOT_FOUND)
        return product

    async def add_product(self, name: str, price: str, stock: int) -> TxResult:
        name, price_wei = _validate_product_fields(name, price, stock)
        await self._require_registered()

        result = await self.gateway.add_product(name, price_wei, stock)
        logger.info(f"Product added: {sanitize_string_for_logging(name)} ({sanitize_address_for_logging(result.tx_hash)})")
        await self.events.emit(MarketplaceEvent.PRODUCT_ADDED, {"name": name, "tx_hash": result.tx_hash})
        return result

    async def update_product(
        self,
        product_id: int,
        name: str,
        price: str,
        stock: int,
        available: bool,
    ) -> TxResult:
        name, price_wei = _validate_product_fields(name, price, stock)
        address = await self._require_registered()
        await self._own_product(product_id, address)

        result = await self.gateway.update_product(product_id, name, price_wei, stock, available)
        await self.events.emit(
            MarketplaceEvent.PRODUCT_UPDATED,
            {"product_id": product_id, "available": available, "tx_hash": result.tx_hash},
        )
        return result

    async def delete_product(self, product_id: int) -> TxResult:
        """Hide a product by marking it unavailable."""
        address = await self._require_registered()
        product = await self._own_product(product_id, address)

        result = await self.gateway.update_product(
            product.id, product.name, product.price_wei, product.stock, False
        )
        await self.events.emit(
            MarketplaceEvent.PRODUCT_UPDATED,
            {"product_id": product.id, "available": False, "tx_hash": result.tx_hash},
        )
        return result

    # ==================== ORDERS ====================

    async def list_own_orders(self) -> List[Order]:
        """Incoming orders, newest first, with shipping info."""
        address = await self._address()
        order_ids = await self.gateway.get_seller_order_ids(address)
        orders = await self.gateway.get_orders(order_ids, with_shipping=True)
        return sorted(orders, key=lambda order: (order.timestamp, order.id), reverse=True)

    def available_actions(self, order: Order) -> List[OrderStatus]:
        return next_statuses(order.status)

    async def update_order_status(self, order_id: int, status: OrderStatus) -> TxResult:
        address = await self.gateway.wallet.ensure_ready()
        order = await self.gateway.get_order(order_id)
        if order.seller.lower() != address.lower():
            raise NotFoundError(ERROR_ORDER_NOT_FOUND)

        allowed, reason = can_transition(order.status, status)
        if not allowed:
            logger.warning(f"Cannot update order {order_id} status: {reason}")
            raise InvalidInputError(reason)

        result = await self.gateway.update_order_status(order_id, status)
        logger.info(f"Order {order_id}: {order.status.value} -> {status.value}")
        await self.events.emit(
            MarketplaceEvent.ORDER_STATUS_CHANGED,
            {"order_id": order_id, "status": status.value, "previous": order.status.value},
        )
        return result
