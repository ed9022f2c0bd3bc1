"""
Cart Router

Thin HTTP surface over the process-wide ``CartStore``. Cart operations
never fail; only the product lookup for "add" can.
"""
from fastapi import APIRouter, Depends

from marketplace.cart import CartProduct, CartStore
from marketplace.config import Settings
from marketplace.errors import ERROR_PRODUCT_UNAVAILABLE, InvalidInputError
from marketplace.logging import get_logger
from .deps import get_cart, get_catalog, get_settings_dep
from .errors import SERVICE_ERRORS, to_http_exception
from .models import AddToCartRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(tags=["cart"])


def _format_cart_response(cart: CartStore, settings: Settings) -> dict:
    data = cart.state.to_dict()
    data["currency"] = settings.currency_symbol
    return data


@router.get("/cart")
async def get_cart_contents(cart: CartStore = Depends(get_cart), settings: Settings = Depends(get_settings_dep)):
    """Current cart with derived totals."""
    return _format_cart_response(cart, settings)


@router.post("/cart/items")
async def add_to_cart(
    request: AddToCartRequest,
    cart: CartStore = Depends(get_cart),
    catalog=Depends(get_catalog),
    settings: Settings = Depends(get_settings_dep),
):
    """Add one unit of an available product (replaces the cart if the seller differs)."""
    try:
        product = await catalog.get_product(request.product_id)
        if not product.available:
            raise InvalidInputError(ERROR_PRODUCT_UNAVAILABLE)
    except SERVICE_ERRORS as e:
        raise to_http_exception(e) from e

    cart.add_to_cart(
        CartProduct(product_id=product.id, name=product.name, price=product.price, seller=product.seller)
    )
    return _format_cart_response(cart, settings)


@router.patch("/cart/items/{product_id}")
async def update_cart_item(
    product_id: int,
    request: UpdateCartItemRequest,
    cart: CartStore = Depends(get_cart),
    settings: Settings = Depends(get_settings_dep),
):
    """Set a line's quantity (< 1 removes it)."""
    cart.update_quantity(product_id, request.quantity)
    return _format_cart_response(cart, settings)


@router.delete("/cart/items/{product_id}")
async def remove_cart_item(
    product_id: int,
    cart: CartStore = Depends(get_cart),
    settings: Settings = Depends(get_settings_dep),
):
    """Remove a line from the cart."""
    cart.remove_from_cart(product_id)
    return _format_cart_response(cart, settings)


@router.delete("/cart")
async def clear_cart(cart: CartStore = Depends(get_cart), settings: Settings = Depends(get_settings_dep)):
    """Empty the cart."""
    cart.clear_cart()
    return _format_cart_response(cart, settings)
