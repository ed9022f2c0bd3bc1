"""Product catalog: the storefront's cached view of on-chain products."""
from typing import Any, Callable, Dict, List, Optional

from marketplace.chain.gateway import MarketplaceGateway
from marketplace.chain.models import Product
from marketplace.errors import MarketplaceError
from marketplace.events import EventBus, MarketplaceEvent
from marketplace.logging import get_logger

logger = get_logger(__name__)

REFRESH_EVENTS = (
    MarketplaceEvent.PRODUCT_ADDED,
    MarketplaceEvent.PRODUCT_UPDATED,
    MarketplaceEvent.ORDER_PLACED,
)


class ProductCatalog:
    """
    Last fetched product snapshot plus its loading/error state.

    Refreshes itself whenever a product is added or updated, or an order
    changes stock.
    """

    def __init__(self, gateway: MarketplaceGateway, events: EventBus):
        self.gateway = gateway
        self.events = events
        self._products: List[Product] = []
        self.loading = False
        self.loaded = False
        self.last_error: Optional[MarketplaceError] = None
        self._unsubscribers: List[Callable[[], None]] = [
            events.subscribe(event, self._on_change) for event in REFRESH_EVENTS
        ]

    @property
    def products(self) -> List[Product]:
        return list(self._products)

    async def _on_change(self, event: MarketplaceEvent, payload: Dict[str, Any]) -> None:
        logger.debug(f"Refreshing catalog after {event.value}")
        await self.refresh()

    async def refresh(self) -> List[Product]:
        """Re-read all products from the contract."""
        self.loading = True
        try:
            products = await self.gateway.get_all_products()
        except MarketplaceError as e:
            self.last_error = e
            logger.error(f"Error loading products: {e.message}")
            raise
        finally:
            self.loading = False

        self._products = products
        self.loaded = True
        self.last_error = None
        logger.info(f"Loaded {len(products)} products")
        return self.products

    async def list_products(self, include_unavailable: bool = True) -> List[Product]:
        if not self.loaded:
            await self.refresh()
        if include_unavailable:
            return self.products
        return [product for product in self._products if product.available]

    async def get_product(self, product_id: int) -> Product:
        """Fresh product details (stock matters at purchase time)."""
        return await self.gateway.get_product(product_id)

    async def products_by_seller(self, seller: str) -> List[Product]:
        products = await self.list_products()
        return [product for product in products if product.seller.lower() == seller.lower()]

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
