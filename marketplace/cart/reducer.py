"""
Pure cart transitions.

Every function takes a ``CartState`` and returns a new one; nothing here
mutates its input or fails. The single-seller rule lives only in this module.
"""
from typing import Iterable

from .models import CartItem, CartProduct, CartState, EMPTY_CART, same_seller


def add_to_cart(state: CartState, product: CartProduct) -> CartState:
    """
    Add one unit of ``product``.

    A product from another seller silently replaces the whole cart.
    No stock check: stock is validated by the contract at purchase time.
    """
    if state.is_empty or state.seller is None:
        return CartState(items=(CartItem.from_product(product),), seller=product.seller)

    if not same_seller(state.seller, product.seller):
        return CartState(items=(CartItem.from_product(product),), seller=product.seller)

    existing = state.find(product.product_id)
    if existing is not None:
        items = tuple(
            item.with_quantity(item.quantity + 1) if item.product_id == product.product_id else item
            for item in state.items
        )
        return CartState(items=items, seller=state.seller)

    return CartState(items=state.items + (CartItem.from_product(product),), seller=state.seller)


def remove_from_cart(state: CartState, product_id: int) -> CartState:
    """Drop a line; removing the last line unsets the seller."""
    items = tuple(item for item in state.items if item.product_id != product_id)
    if not items:
        return EMPTY_CART
    return CartState(items=items, seller=state.seller)


def update_quantity(state: CartState, product_id: int, quantity: int) -> CartState:
    """Overwrite a line's quantity; anything below 1 removes the line."""
    if quantity < 1:
        return remove_from_cart(state, product_id)

    if state.find(product_id) is None:
        return state

    items = tuple(
        item.with_quantity(quantity) if item.product_id == product_id else item
        for item in state.items
    )
    return CartState(items=items, seller=state.seller)


def remove_items(state: CartState, product_ids: Iterable[int]) -> CartState:
    """Drop several lines at once (purchased items after checkout)."""
    purchased = set(product_ids)
    items = tuple(item for item in state.items if item.product_id not in purchased)
    if not items:
        return EMPTY_CART
    return CartState(items=items, seller=state.seller)


def clear_cart(state: CartState) -> CartState:
    return EMPTY_CART
