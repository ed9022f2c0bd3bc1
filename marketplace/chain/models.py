"""
Pydantic Models - snapshots of on-chain marketplace entities.

These are read-only copies taken after each fetch; the contract owns the
authoritative state.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field, field_validator

from marketplace.services.money import from_base_units


# ============================================================
# Enums
# ============================================================

class OrderStatus(str, Enum):
    """
    Order status lifecycle (stored on chain as uint8).

    Flow:
        Pending -> Accepted -> Shipped -> Delivered
        Pending/Accepted -> Cancelled
    """
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @property
    def code(self) -> int:
        return ORDER_STATUS_CODES[self]

    @classmethod
    def from_code(cls, code: int) -> "OrderStatus":
        try:
            return _STATUS_BY_CODE[int(code)]
        except KeyError:
            raise ValueError(f"Unknown order status code: {code}")


ORDER_STATUS_CODES = {
    OrderStatus.PENDING: 0,
    OrderStatus.ACCEPTED: 1,
    OrderStatus.SHIPPED: 2,
    OrderStatus.DELIVERED: 3,
    OrderStatus.CANCELLED: 4,
}
_STATUS_BY_CODE = {code: status for status, code in ORDER_STATUS_CODES.items()}


class TxStage(str, Enum):
    """Progress of a single write transaction."""
    ESTIMATING = "estimating"
    AWAITING_SIGNATURE = "awaiting_signature"
    PENDING = "pending"


# ============================================================
# Entities
# ============================================================

class Product(BaseModel):
    id: int
    seller: str
    name: str
    price: str  # whole units, e.g. "0.1"
    price_wei: int
    available: bool
    stock: int

    @classmethod
    def from_chain(cls, raw: Sequence) -> "Product":
        """Build from the (id, seller, name, price, available, stock) tuple."""
        product_id, seller, name, price_wei, available, stock = raw
        return cls(
            id=int(product_id),
            seller=str(seller),
            name=str(name),
            price=from_base_units(price_wei),
            price_wei=int(price_wei),
            available=bool(available),
            stock=int(stock),
        )

    @property
    def purchasable(self) -> bool:
        return self.available and self.stock > 0


class ShippingInfo(BaseModel):
    """Delivery address attached to an order."""
    street: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    zip_code: str = Field(min_length=1)
    country: str = Field(min_length=1)

    @field_validator("street", "city", "state", "zip_code", "country")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @classmethod
    def from_chain(cls, raw: Sequence) -> Optional["ShippingInfo"]:
        """Empty strings on chain mean no shipping info was submitted."""
        street, city, state, zip_code, country = (str(part) for part in raw)
        if not any(part.strip() for part in (street, city, state, zip_code, country)):
            return None
        return cls(street=street, city=city, state=state, zip_code=zip_code, country=country)

    def as_args(self) -> List[str]:
        return [self.street, self.city, self.state, self.zip_code, self.country]


class Order(BaseModel):
    id: int
    buyer: str
    seller: str
    product_ids: List[int]
    quantities: List[int]
    total_paid: str
    total_paid_wei: int
    status: OrderStatus
    timestamp: int
    shipping: Optional[ShippingInfo] = None

    @classmethod
    def from_chain(cls, raw: Sequence) -> "Order":
        """Build from the getOrderDetails output tuple."""
        order_id, buyer, seller, product_ids, quantities, total_wei, status, timestamp = raw
        return cls(
            id=int(order_id),
            buyer=str(buyer),
            seller=str(seller),
            product_ids=[int(p) for p in product_ids],
            quantities=[int(q) for q in quantities],
            total_paid=from_base_units(total_wei),
            total_paid_wei=int(total_wei),
            status=OrderStatus.from_code(status),
            timestamp=int(timestamp),
        )

    @property
    def placed_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    @property
    def total_items(self) -> int:
        return sum(self.quantities)


class TxResult(BaseModel):
    """Outcome of a confirmed write."""
    tx_hash: str
    block_number: Optional[int] = None
    gas_used: Optional[int] = None
    gas_limit: int
    confirmations: int = 1
