"""
Purchase Flow

Turns cart lines (or a single "Buy Now" selection) for one seller into one
``placeOrder`` transaction and reconciles local state with the outcome.

State machine per attempt:

    Idle -> Estimating -> AwaitingSignature -> Pending -> Confirmed
                                                       -> Reverted
                                                       -> Rejected
                                                       -> Failed

Terminal states hand the products back to Idle. Nothing is retried.
A confirmed checkout removes the purchased lines from the cart; Buy Now
never touches the cart.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from marketplace.cart.models import CartItem
from marketplace.cart.store import CartStore
from marketplace.catalog.service import ProductCatalog
from marketplace.chain.gateway import MarketplaceGateway
from marketplace.chain.models import TxResult, TxStage
from marketplace.errors import (
    ERROR_CART_EMPTY,
    ERROR_INVALID_QUANTITY,
    ERROR_PRODUCT_UNAVAILABLE,
    ERROR_PURCHASE_IN_PROGRESS,
    ErrorCategory,
    InvalidInputError,
    MarketplaceError,
    PurchaseInProgressError,
    classify_error,
)
from marketplace.events import EventBus, MarketplaceEvent
from marketplace.logging import get_logger, sanitize_address_for_logging
from marketplace.services.money import from_base_units, to_base_units

logger = get_logger(__name__)

SUCCESS_NOTICE = "Your purchase was completed successfully."


class PurchaseState(str, Enum):
    IDLE = "idle"
    ESTIMATING = "estimating"
    AWAITING_SIGNATURE = "awaiting_signature"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REVERTED = "reverted"
    REJECTED = "rejected"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset(
    {PurchaseState.CONFIRMED, PurchaseState.REVERTED, PurchaseState.REJECTED, PurchaseState.FAILED}
)

_STAGE_TO_STATE = {
    TxStage.ESTIMATING: PurchaseState.ESTIMATING,
    TxStage.AWAITING_SIGNATURE: PurchaseState.AWAITING_SIGNATURE,
    TxStage.PENDING: PurchaseState.PENDING,
}

_ALLOWED = {
    PurchaseState.IDLE: {PurchaseState.ESTIMATING} | (TERMINAL_STATES - {PurchaseState.CONFIRMED}),
    PurchaseState.ESTIMATING: {PurchaseState.AWAITING_SIGNATURE} | TERMINAL_STATES,
    PurchaseState.AWAITING_SIGNATURE: {PurchaseState.PENDING} | TERMINAL_STATES,
    PurchaseState.PENDING: set(TERMINAL_STATES),
}


@dataclass(frozen=True)
class OrderLine:
    product_id: int
    price: str
    quantity: int

    @property
    def value_wei(self) -> int:
        return to_base_units(self.price) * self.quantity


@dataclass
class PurchaseAttempt:
    """One submission of one order."""
    lines: Tuple[OrderLine, ...]
    seller: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    state: PurchaseState = PurchaseState.IDLE
    history: List[PurchaseState] = field(default_factory=lambda: [PurchaseState.IDLE])
    tx_hash: Optional[str] = None
    result: Optional[TxResult] = None
    error: Optional[MarketplaceError] = None
    notice: Optional[str] = None
    started_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def product_ids(self) -> List[int]:
        return [line.product_id for line in self.lines]

    @property
    def quantities(self) -> List[int]:
        return [line.quantity for line in self.lines]

    @property
    def value_wei(self) -> int:
        return sum(line.value_wei for line in self.lines)

    @property
    def total_price(self) -> str:
        return from_base_units(self.value_wei)

    @property
    def succeeded(self) -> bool:
        return self.state == PurchaseState.CONFIRMED

    @property
    def confirmations(self) -> int:
        return self.result.confirmations if self.result else 0

    def transition(self, new_state: PurchaseState) -> None:
        allowed = _ALLOWED.get(self.state, set())
        if new_state not in allowed:
            raise RuntimeError(f"Invalid purchase transition {self.state.value} -> {new_state.value}")
        self.state = new_state
        self.history.append(new_state)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "state": self.state.value,
            "history": [state.value for state in self.history],
            "product_ids": self.product_ids,
            "quantities": self.quantities,
            "seller": self.seller,
            "total_price": self.total_price,
            "value_wei": str(self.value_wei),
            "tx_hash": self.tx_hash,
            "confirmations": self.confirmations,
            "error": self.error.to_dict() if self.error else None,
            "notice": self.notice,
            "started_at": self.started_at,
        }


def _terminal_state_for(error: MarketplaceError) -> PurchaseState:
    if error.category == ErrorCategory.USER_REJECTED:
        return PurchaseState.REJECTED
    if error.category in (ErrorCategory.EXECUTION_REVERTED, ErrorCategory.GAS_LIMIT_EXCEEDED):
        return PurchaseState.REVERTED
    return PurchaseState.FAILED


class PurchaseFlow:
    """Checkout and Buy Now against the marketplace contract."""

    def __init__(
        self,
        gateway: MarketplaceGateway,
        cart: CartStore,
        catalog: ProductCatalog,
        events: EventBus,
    ):
        self.gateway = gateway
        self.cart = cart
        self.catalog = catalog
        self.events = events
        self._active: Dict[int, PurchaseAttempt] = {}
        self.last_attempt: Optional[PurchaseAttempt] = None

    def state_for(self, product_id: int) -> PurchaseState:
        """Current purchase state of a product (Idle when nothing is in flight)."""
        attempt = self._active.get(product_id)
        return attempt.state if attempt else PurchaseState.IDLE

    def in_progress(self) -> List[int]:
        return sorted(self._active)

    async def checkout(self) -> PurchaseAttempt:
        """Buy every line in the cart as one order."""
        items: Iterable[CartItem] = self.cart.items
        lines = tuple(OrderLine(item.product_id, item.price, item.quantity) for item in items)
        if not lines:
            raise InvalidInputError(ERROR_CART_EMPTY)
        return await self._submit(lines, seller=self.cart.seller, from_cart=True)

    async def buy_now(self, product_id: int, quantity: int = 1) -> PurchaseAttempt:
        """Buy a single product directly from the product list."""
        product = await self.catalog.get_product(product_id)
        if not product.available:
            raise InvalidInputError(ERROR_PRODUCT_UNAVAILABLE)
        if quantity < 1 or quantity > product.stock:
            raise InvalidInputError(ERROR_INVALID_QUANTITY)
        lines = (OrderLine(product.id, product.price, quantity),)
        return await self._submit(lines, seller=product.seller)

    async def _submit(
        self, lines: Tuple[OrderLine, ...], seller: Optional[str], from_cart: bool = False
    ) -> PurchaseAttempt:
        busy = [line.product_id for line in lines if line.product_id in self._active]
        if busy:
            raise PurchaseInProgressError(ERROR_PURCHASE_IN_PROGRESS)

        attempt = PurchaseAttempt(lines=lines, seller=seller)
        self.last_attempt = attempt
        for line in lines:
            self._active[line.product_id] = attempt

        try:
            await self._run(attempt, from_cart)
        finally:
            for line in lines:
                self._active.pop(line.product_id, None)
        return attempt

    async def _run(self, attempt: PurchaseAttempt, from_cart: bool) -> None:
        logger.info(
            f"Purchase {attempt.id[:8]}: products={attempt.product_ids} quantities={attempt.quantities} "
            f"value={attempt.total_price} seller={sanitize_address_for_logging(attempt.seller)}"
        )

        def on_progress(stage: TxStage, tx_hash: Optional[str]) -> None:
            attempt.transition(_STAGE_TO_STATE[stage])
            if tx_hash:
                attempt.tx_hash = tx_hash

        try:
            await self.gateway.wallet.ensure_ready()
            attempt.result = await self.gateway.place_order(
                attempt.product_ids,
                attempt.quantities,
                attempt.value_wei,
                on_progress=on_progress,
            )
        except Exception as e:
            error = classify_error(e)
            attempt.error = error
            attempt.transition(_terminal_state_for(error))
            logger.warning(f"Purchase {attempt.id[:8]} ended {attempt.state.value}: {error.message}")
            return

        attempt.tx_hash = attempt.result.tx_hash
        attempt.transition(PurchaseState.CONFIRMED)
        attempt.notice = SUCCESS_NOTICE
        if from_cart:
            self.cart.remove_items(attempt.product_ids)
        await self.events.emit(
            MarketplaceEvent.ORDER_PLACED,
            {
                "product_ids": attempt.product_ids,
                "quantities": attempt.quantities,
                "tx_hash": attempt.tx_hash,
            },
        )
        logger.info(f"Purchase {attempt.id[:8]} confirmed: {sanitize_address_for_logging(attempt.tx_hash)}")
