"""
Seller Router

Registration, product management and incoming orders for the connected
account. Writes return the confirmed transaction.
"""
from fastapi import APIRouter, Depends

from marketplace.config import Settings
from marketplace.logging import get_logger
from .deps import get_seller_service, get_settings_dep
from .errors import SERVICE_ERRORS, to_http_exception
from .models import OrderStatusRequest, ProductRequest, UpdateProductRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/seller", tags=["seller"])


def _tx_response(result, settings: Settings) -> dict:
    data = result.model_dump()
    data["explorer_url"] = settings.explorer_tx_url(result.tx_hash)
    return data


def _order_payload(order, seller) -> dict:
    data = order.model_dump(mode="json")
    data["total_paid_wei"] = str(order.total_paid_wei)
    data["total_items"] = order.total_items
    data["actions"] = [status.value for status in seller.available_actions(order)]
    return data


# ==================== REGISTRATION ====================

@router.get("/status")
async def seller_status(seller=Depends(get_seller_service)):
    """Whether the connected account is a registered seller."""
    try:
        registered = await seller.is_registered()
    except SERVICE_ERRORS as e:
        raise to_http_exception(e) from e
    return {"registered": registered}


@router.post("/register")
async def register_seller(seller=Depends(get_seller_service)):
    """Register the connected account (no-op when already registered)."""
    try:
        registered = await seller.register()
    except SERVICE_ERRORS as e:
        raise to_http_exception(e) from e
    return {"registered": registered}


# ==================== PRODUCTS ====================

@router.get("/products")
async def list_seller_products(seller=Depends(get_seller_service)):
    try:
        products = await seller.list_own_products()
    except SERVICE_ERRORS as e:
        raise to_http_exception(e) from e

    return {
        "products": [{**product.model_dump(), "price_wei": str(product.price_wei)} for product in products],
        "count": len(products),
    }


@router.post("/products")
async def add_product(
    request: ProductRequest,
    seller=Depends(get_seller_service),
    settings: Settings = Depends(get_settings_dep),
):
    """List a new product."""
    try:
        result = await seller.add_product(request.name, request.price, request.stock)
    except SERVICE_ERRORS as e:
        raise to_http_exception(e) from e
    return _tx_response(result, settings)


@router.put("/products/{product_id}")
async def update_product(
    product_id: int,
    request: UpdateProductRequest,
    seller=Depends(get_seller_service),
    settings: Settings = Depends(get_settings_dep),
):
    try:
        result = await seller.update_product(
            product_id, request.name, request.price, request.stock, request.available
        )
    except SERVICE_ERRORS as e:
        raise to_http_exception(e) from e
    return _tx_response(result, settings)


@router.delete("/products/{product_id}")
async def delete_product(
    product_id: int,
    seller=Depends(get_seller_service),
    settings: Settings = Depends(get_settings_dep),
):
    """Hide a product (marks it unavailable on chain)."""
    try:
        result = await seller.delete_product(product_id)
    except SERVICE_ERRORS as e:
        raise to_http_exception(e) from e
    return _tx_response(result, settings)


# ==================== ORDERS ====================

@router.get("/orders")
async def list_seller_orders(seller=Depends(get_seller_service)):
    """Incoming orders with shipping info and allowed next statuses."""
    try:
        orders = await seller.list_own_orders()
    except SERVICE_ERRORS as e:
        raise to_http_exception(e) from e

    return {"orders": [_order_payload(order, seller) for order in orders], "count": len(orders)}


@router.post("/orders/{order_id}/status")
async def update_order_status(
    order_id: int,
    request: OrderStatusRequest,
    seller=Depends(get_seller_service),
    settings: Settings = Depends(get_settings_dep),
):
    try:
        result = await seller.update_order_status(order_id, request.status)
    except SERVICE_ERRORS as e:
        raise to_http_exception(e) from e

    logger.info(f"Order {order_id} set to {request.status.value}")
    return _tx_response(result, settings)
