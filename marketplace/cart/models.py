"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Optional, Tuple

from marketplace.services.money import format_decimal, multiply, total


def same_seller(a: Optional[str], b: Optional[str]) -> bool:
    """Compare seller addresses; hex addresses are case-insensitive."""
    if a is None or b is None:
        return a is b
    return a.lower() == b.lower()


@dataclass(frozen=True)
class CartProduct:
    """A product as offered for adding to the cart."""
    product_id: int
    name: str
    price: str  # decimal string in whole units ("0.1")
    seller: str


@dataclass(frozen=True)
class CartItem:
    """Single line in the cart."""
    product_id: int
    name: str
    price: str
    seller: str
    quantity: int = 1

    @classmethod
    def from_product(cls, product: CartProduct, quantity: int = 1) -> "CartItem":
        return cls(
            product_id=product.product_id,
            name=product.name,
            price=product.price,
            seller=product.seller,
            quantity=quantity,
        )

    @property
    def line_total(self) -> Decimal:
        """Price for all units of this line."""
        return multiply(self.price, self.quantity)

    def with_quantity(self, quantity: int) -> "CartItem":
        return replace(self, quantity=quantity)

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "price": self.price,
            "seller": self.seller,
            "quantity": self.quantity,
            "line_total": format_decimal(self.line_total),
        }


@dataclass(frozen=True)
class CartState:
    """
    Immutable cart snapshot.

    All items belong to ``seller``; an empty cart has no seller.
    Totals are derived on every access, never stored.
    """
    items: Tuple[CartItem, ...] = field(default_factory=tuple)
    seller: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def total_items(self) -> int:
        """Total number of units in cart."""
        return sum(item.quantity for item in self.items)

    @property
    def total_amount(self) -> Decimal:
        """Exact sum of price x quantity."""
        return total(item.line_total for item in self.items)

    @property
    def total_price(self) -> str:
        """Total as a fixed-point decimal string ("0.2")."""
        return format_decimal(self.total_amount)

    def find(self, product_id: int) -> Optional[CartItem]:
        return next((item for item in self.items if item.product_id == product_id), None)

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.items],
            "seller": self.seller,
            "total_items": self.total_items,
            "total_price": self.total_price,
        }


EMPTY_CART = CartState()
