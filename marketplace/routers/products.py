"""
Products Router

Product listing backed by the catalog snapshot. Each product carries the
purchase state of any in-flight order for it so clients can disable the
matching "Buy Now" affordance.
"""
from fastapi import APIRouter, Depends, HTTPException

from marketplace.config import Settings
from marketplace.logging import get_logger
from .deps import get_catalog, get_purchase_flow, get_settings_dep
from .errors import SERVICE_ERRORS, to_http_exception

logger = get_logger(__name__)

router = APIRouter(tags=["products"])


def _product_payload(product, flow, settings: Settings) -> dict:
    data = product.model_dump()
    data["price_wei"] = str(product.price_wei)
    data["currency"] = settings.currency_symbol
    data["in_stock"] = product.purchasable
    data["purchase_state"] = flow.state_for(product.id).value
    return data


@router.get("/products")
async def list_products(
    available_only: bool = False,
    catalog=Depends(get_catalog),
    flow=Depends(get_purchase_flow),
    settings: Settings = Depends(get_settings_dep),
):
    """List products from the last snapshot (loaded on first use)."""
    try:
        products = await catalog.list_products(include_unavailable=not available_only)
    except SERVICE_ERRORS as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.error(f"Failed to list products: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to load products")

    return {
        "products": [_product_payload(product, flow, settings) for product in products],
        "count": len(products),
    }


@router.post("/products/refresh")
async def refresh_products(
    catalog=Depends(get_catalog),
    flow=Depends(get_purchase_flow),
    settings: Settings = Depends(get_settings_dep),
):
    """Force a re-read of all products from the contract."""
    try:
        products = await catalog.refresh()
    except SERVICE_ERRORS as e:
        raise to_http_exception(e) from e

    return {
        "products": [_product_payload(product, flow, settings) for product in products],
        "count": len(products),
    }


@router.get("/products/{product_id}")
async def get_product(
    product_id: int,
    catalog=Depends(get_catalog),
    flow=Depends(get_purchase_flow),
    settings: Settings = Depends(get_settings_dep),
):
    """Fresh product details."""
    try:
        product = await catalog.get_product(product_id)
    except SERVICE_ERRORS as e:
        raise to_http_exception(e) from e

    return _product_payload(product, flow, settings)
