"""Buyer order history and delivery information."""
from typing import List

from marketplace.chain.gateway import MarketplaceGateway
from marketplace.chain.models import Order, ShippingInfo, TxResult
from marketplace.errors import ERROR_ORDER_NOT_FOUND, NotFoundError
from marketplace.events import EventBus, MarketplaceEvent
from marketplace.logging import get_logger, sanitize_address_for_logging

logger = get_logger(__name__)


class OrderHistory:
    """Orders placed by the connected account."""

    def __init__(self, gateway: MarketplaceGateway, events: EventBus):
        self.gateway = gateway
        self.events = events

    async def list_orders(self) -> List[Order]:
        """All orders of the connected buyer, newest first."""
        buyer = await self.gateway.wallet.request_accounts()
        order_ids = await self.gateway.get_buyer_order_ids(buyer)
        logger.info(f"Loading {len(order_ids)} orders for {sanitize_address_for_logging(buyer)}")
        orders = await self.gateway.get_orders(order_ids)
        return sorted(orders, key=lambda order: (order.timestamp, order.id), reverse=True)

    async def get_order(self, order_id: int) -> Order:
        """Order details with shipping info; only the buyer's own orders."""
        buyer = await self.gateway.wallet.request_accounts()
        order = await self.gateway.get_order(order_id, with_shipping=True)
        if order.buyer.lower() != buyer.lower():
            raise NotFoundError(ERROR_ORDER_NOT_FOUND)
        return order

    async def add_shipping_info(self, order_id: int, shipping: ShippingInfo) -> TxResult:
        """Submit the delivery address for one of the buyer's orders."""
        await self.gateway.wallet.ensure_ready()
        order = await self.get_order(order_id)
        result = await self.gateway.add_shipping_info(order.id, shipping)
        await self.events.emit(MarketplaceEvent.SHIPPING_INFO_ADDED, {"order_id": order.id})
        return result
