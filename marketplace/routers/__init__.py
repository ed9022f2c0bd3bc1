"""
Marketplace API Routers

Each router handles one area of the storefront.
"""
from .cart import router as cart_router
from .orders import router as orders_router
from .products import router as products_router
from .purchases import router as purchases_router
from .seller import router as seller_router
from .session import manifest_router, router as session_router

__all__ = [
    "cart_router",
    "orders_router",
    "products_router",
    "purchases_router",
    "seller_router",
    "session_router",
    "manifest_router",
]
