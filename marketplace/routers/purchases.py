"""
Purchases Router

Checkout (whole cart) and Buy Now (single product). Both block until the
transaction is confirmed or fails; a failed attempt is reported with the
HTTP status of its error category and the attempt itself in the detail.
"""
from fastapi import APIRouter, Depends, HTTPException

from marketplace.config import Settings
from marketplace.logging import get_logger
from .deps import get_purchase_flow, get_settings_dep
from .errors import CATEGORY_STATUS_CODES, SERVICE_ERRORS, to_http_exception
from .models import BuyNowRequest

logger = get_logger(__name__)

router = APIRouter(tags=["purchases"])


def _attempt_response(attempt, settings: Settings) -> dict:
    data = attempt.to_dict()
    data["currency"] = settings.currency_symbol
    data["explorer_url"] = settings.explorer_tx_url(attempt.tx_hash) if attempt.tx_hash else None
    if not attempt.succeeded:
        raise HTTPException(status_code=CATEGORY_STATUS_CODES[attempt.error.category], detail=data)
    return data


@router.post("/purchases/checkout")
async def checkout(flow=Depends(get_purchase_flow), settings: Settings = Depends(get_settings_dep)):
    """Buy everything in the cart as one order."""
    try:
        attempt = await flow.checkout()
    except SERVICE_ERRORS as e:
        raise to_http_exception(e) from e

    return _attempt_response(attempt, settings)


@router.post("/purchases/buy-now")
async def buy_now(
    request: BuyNowRequest,
    flow=Depends(get_purchase_flow),
    settings: Settings = Depends(get_settings_dep),
):
    """Buy a single product without touching the cart contents."""
    try:
        attempt = await flow.buy_now(request.product_id, request.quantity)
    except SERVICE_ERRORS as e:
        raise to_http_exception(e) from e

    return _attempt_response(attempt, settings)


@router.get("/purchases/{product_id}/state")
async def purchase_state(product_id: int, flow=Depends(get_purchase_flow)):
    """Purchase state of a product (idle unless an order for it is in flight)."""
    return {"product_id": product_id, "state": flow.state_for(product_id).value}
