"""
Orders Router

Buyer order history and shipping information.
"""
from fastapi import APIRouter, Depends

from marketplace.config import Settings
from .deps import get_order_history, get_settings_dep
from .errors import SERVICE_ERRORS, to_http_exception
from .models import ShippingInfoRequest

router = APIRouter(tags=["orders"])


def _order_payload(order) -> dict:
    data = order.model_dump(mode="json")
    data["total_paid_wei"] = str(order.total_paid_wei)
    data["total_items"] = order.total_items
    data["placed_at"] = order.placed_at.isoformat()
    return data


@router.get("/orders")
async def list_orders(history=Depends(get_order_history)):
    """Orders placed by the connected account, newest first."""
    try:
        orders = await history.list_orders()
    except SERVICE_ERRORS as e:
        raise to_http_exception(e) from e
    return {"orders": [_order_payload(order) for order in orders], "count": len(orders)}


@router.get("/orders/{order_id}")
async def get_order(order_id: int, history=Depends(get_order_history)):
    try:
        order = await history.get_order(order_id)
    except SERVICE_ERRORS as e:
        raise to_http_exception(e) from e
    return _order_payload(order)


@router.post("/orders/{order_id}/shipping")
async def add_shipping_info(
    order_id: int,
    request: ShippingInfoRequest,
    history=Depends(get_order_history),
    settings: Settings = Depends(get_settings_dep),
):
    """Attach a delivery address to one of the buyer's orders."""
    try:
        result = await history.add_shipping_info(order_id, request)
    except SERVICE_ERRORS as e:
        raise to_http_exception(e) from e

    data = result.model_dump()
    data["explorer_url"] = settings.explorer_tx_url(result.tx_hash)
    return data
