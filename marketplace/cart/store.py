"""Process-wide cart store with change subscriptions."""
from typing import Callable, Iterable, List, Optional, Tuple

from marketplace.logging import get_logger, sanitize_address_for_logging
from . import reducer
from .models import CartItem, CartProduct, CartState, EMPTY_CART

logger = get_logger(__name__)

CartListener = Callable[[CartState], None]


class CartStore:
    """
    Holds the current ``CartState`` and funnels every change through the
    pure functions in ``reducer``.

    Features:
    - Single-seller invariant enforced by the reducer
    - Totals recomputed from the current state on every read
    - Synchronous change notification to subscribers
    - In-memory only (lost on restart)
    """

    def __init__(self, initial: Optional[CartState] = None):
        self._state = initial or EMPTY_CART
        self._listeners: List[CartListener] = []

    @property
    def state(self) -> CartState:
        return self._state

    @property
    def items(self) -> Tuple[CartItem, ...]:
        return self._state.items

    @property
    def seller(self) -> Optional[str]:
        return self._state.seller

    @property
    def total_items(self) -> int:
        return self._state.total_items

    @property
    def total_price(self) -> str:
        return self._state.total_price

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a change listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def add_to_cart(self, product: CartProduct) -> CartState:
        if self._state.seller is not None and product.seller.lower() != self._state.seller.lower():
            logger.info(
                f"Different seller {sanitize_address_for_logging(product.seller)} detected, "
                f"replacing cart of {sanitize_address_for_logging(self._state.seller)}"
            )
        return self._dispatch(reducer.add_to_cart(self._state, product))

    def remove_from_cart(self, product_id: int) -> CartState:
        return self._dispatch(reducer.remove_from_cart(self._state, product_id))

    def update_quantity(self, product_id: int, quantity: int) -> CartState:
        return self._dispatch(reducer.update_quantity(self._state, product_id, quantity))

    def remove_items(self, product_ids: Iterable[int]) -> CartState:
        return self._dispatch(reducer.remove_items(self._state, product_ids))

    def clear_cart(self) -> CartState:
        return self._dispatch(reducer.clear_cart(self._state))

    def _dispatch(self, new_state: CartState) -> CartState:
        self._state = new_state
        logger.debug(f"Cart updated: items={new_state.total_items}, total={new_state.total_price}")

        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception as e:
                logger.warning(f"Cart listener {listener!r} failed: {e}", exc_info=True)
        return new_state


# Singleton instance
_cart_store: Optional[CartStore] = None


def get_cart_store() -> CartStore:
    """Get CartStore singleton."""
    global _cart_store
    if _cart_store is None:
        _cart_store = CartStore()
    return _cart_store
