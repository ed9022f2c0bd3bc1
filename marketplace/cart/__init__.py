"""Cart package: models, pure reducer, and the store facade."""
from .models import CartItem, CartProduct, CartState, EMPTY_CART
from .store import CartStore, get_cart_store

__all__ = [
    "CartItem",
    "CartProduct",
    "CartState",
    "EMPTY_CART",
    "CartStore",
    "get_cart_store",
]
