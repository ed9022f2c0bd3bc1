"""
Marketplace API Pydantic Models

Request bodies shared by the routers.
"""
from pydantic import BaseModel, Field

from marketplace.chain.models import OrderStatus, ShippingInfo


# ==================== CART MODELS ====================

class AddToCartRequest(BaseModel):
    product_id: int


class UpdateCartItemRequest(BaseModel):
    quantity: int  # < 1 removes the item


# ==================== PURCHASE MODELS ====================

class BuyNowRequest(BaseModel):
    product_id: int
    quantity: int = 1


# ==================== SELLER MODELS ====================

class ProductRequest(BaseModel):
    name: str
    price: str = Field(description="Price in whole units, e.g. '0.1'")
    stock: int


class UpdateProductRequest(ProductRequest):
    available: bool = True


class OrderStatusRequest(BaseModel):
    status: OrderStatus


# ==================== ORDER MODELS ====================

class ShippingInfoRequest(ShippingInfo):
    pass
