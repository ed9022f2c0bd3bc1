"""
Marketplace event bus.

Typed replacement for ad hoc refresh signals: services emit a
``MarketplaceEvent`` after a confirmed write, and interested components
(the product catalog, mostly) subscribe to refresh their snapshots.
"""
import inspect
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from marketplace.logging import get_logger

logger = get_logger(__name__)


class MarketplaceEvent(str, Enum):
    PRODUCT_ADDED = "product.added"
    PRODUCT_UPDATED = "product.updated"
    ORDER_PLACED = "order.placed"
    ORDER_STATUS_CHANGED = "order.status.changed"
    SHIPPING_INFO_ADDED = "order.shipping.added"
    SELLER_REGISTERED = "seller.registered"


EventHandler = Callable[[MarketplaceEvent, Dict[str, Any]], Union[None, Awaitable[None]]]


class EventBus:
    """In-process observer registry. Handlers may be sync or async."""

    def __init__(self):
        self._handlers: Dict[MarketplaceEvent, List[EventHandler]] = {}

    def subscribe(self, event: MarketplaceEvent, handler: EventHandler) -> Callable[[], None]:
        """Subscribe to an event; returns an unsubscribe function."""
        handlers = self._handlers.setdefault(event, [])
        handlers.append(handler)

        def unsubscribe() -> None:
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def handler_count(self, event: MarketplaceEvent) -> int:
        return len(self._handlers.get(event, []))

    async def emit(self, event: MarketplaceEvent, payload: Optional[Dict[str, Any]] = None) -> None:
        """
        Deliver an event to every handler in subscription order.

        A failing handler is logged and does not stop delivery to the rest.
        """
        payload = payload or {}
        for handler in list(self._handlers.get(event, [])):
            try:
                result = handler(event, payload)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.warning(f"Handler for {event.value} failed: {e}", exc_info=True)
        logger.debug(f"Emitted {event.value}")


_event_bus: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """Get EventBus singleton."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus
