"""
Shared Dependencies for Routers

Lazy-loaded singletons wired together once per process. Routes receive
them through ``Depends`` so tests can swap any of them with
``app.dependency_overrides``.
"""
from typing import Optional, TYPE_CHECKING

from marketplace.cart import CartStore, get_cart_store
from marketplace.config import Settings, get_settings
from marketplace.events import EventBus, get_event_bus

if TYPE_CHECKING:
    from marketplace.catalog import ProductCatalog
    from marketplace.chain.gateway import MarketplaceGateway
    from marketplace.chain.wallet import Web3Wallet
    from marketplace.orders import OrderHistory
    from marketplace.purchase import PurchaseFlow
    from marketplace.seller import SellerService


# ==================== LAZY SINGLETONS ====================

_wallet: Optional["Web3Wallet"] = None
_gateway: Optional["MarketplaceGateway"] = None
_catalog: Optional["ProductCatalog"] = None
_purchase_flow: Optional["PurchaseFlow"] = None
_seller_service: Optional["SellerService"] = None
_order_history: Optional["OrderHistory"] = None


def get_settings_dep() -> Settings:
    return get_settings()


def get_cart() -> CartStore:
    return get_cart_store()


def get_events() -> EventBus:
    return get_event_bus()


def get_wallet() -> "Web3Wallet":
    """Get or create the wallet adapter (lazy loaded)"""
    global _wallet
    if _wallet is None:
        from marketplace.chain.wallet import Web3Wallet
        _wallet = Web3Wallet(get_settings())
    return _wallet


def get_gateway() -> "MarketplaceGateway":
    """Get or create the contract gateway (lazy loaded)"""
    global _gateway
    if _gateway is None:
        from marketplace.chain.gateway import MarketplaceGateway
        _gateway = MarketplaceGateway(get_wallet(), get_settings())
    return _gateway


def get_catalog() -> "ProductCatalog":
    """Get or create the product catalog (lazy loaded)"""
    global _catalog
    if _catalog is None:
        from marketplace.catalog import ProductCatalog
        _catalog = ProductCatalog(get_gateway(), get_event_bus())
    return _catalog


def get_purchase_flow() -> "PurchaseFlow":
    """Get or create the purchase flow (lazy loaded)"""
    global _purchase_flow
    if _purchase_flow is None:
        from marketplace.purchase import PurchaseFlow
        _purchase_flow = PurchaseFlow(get_gateway(), get_cart_store(), get_catalog(), get_event_bus())
    return _purchase_flow


def get_seller_service() -> "SellerService":
    """Get or create the seller service (lazy loaded)"""
    global _seller_service
    if _seller_service is None:
        from marketplace.seller import SellerService
        _seller_service = SellerService(get_gateway(), get_catalog(), get_event_bus())
    return _seller_service


def get_order_history() -> "OrderHistory":
    """Get or create the buyer order history (lazy loaded)"""
    global _order_history
    if _order_history is None:
        from marketplace.orders import OrderHistory
        _order_history = OrderHistory(get_gateway(), get_event_bus())
    return _order_history


# ==================== SHUTDOWN HELPERS ====================

async def shutdown_services():
    """Cleanly close singleton services (provider sessions, subscriptions)."""
    global _wallet, _gateway, _catalog, _purchase_flow, _seller_service, _order_history
    if _catalog is not None:
        _catalog.close()
    if _wallet is not None:
        await _wallet.aclose()
    _wallet = _gateway = _catalog = _purchase_flow = _seller_service = _order_history = None
