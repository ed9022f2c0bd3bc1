"""
Web3 Marketplace Core

This package contains the storefront components:
- cart: single-seller in-memory cart store
- chain: wallet adapter and typed marketplace contract gateway
- catalog: product list snapshot
- purchase: on-chain order submission flow
- seller: seller registration, products and incoming orders
- orders: buyer order history, delivery info, status progression
- routers: FastAPI routes

Note: Imports are lazy so that importing the package does not pull in web3.
"""

__all__ = [
    "get_settings",
    "get_cart_store",
    "get_event_bus",
]


def __getattr__(name):
    """Lazy attribute access."""
    if name == "get_settings":
        from marketplace.config import get_settings
        return get_settings
    elif name == "get_cart_store":
        from marketplace.cart import get_cart_store
        return get_cart_store
    elif name == "get_event_bus":
        from marketplace.events import get_event_bus
        return get_event_bus
    raise AttributeError(f"module 'marketplace' has no attribute '{name}'")
