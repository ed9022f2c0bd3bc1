"""
Order Status Progression

Orders only move forward:

    Pending -> Accepted -> Shipped -> Delivered
    Pending / Accepted -> Cancelled

Sellers are offered exactly the next valid actions; any other transition is
refused before a transaction is sent.
"""
from typing import Dict, List, Optional, Tuple

from marketplace.chain.models import OrderStatus

TRANSITIONS: Dict[OrderStatus, List[OrderStatus]] = {
    OrderStatus.PENDING: [OrderStatus.ACCEPTED, OrderStatus.CANCELLED],
    OrderStatus.ACCEPTED: [OrderStatus.SHIPPED, OrderStatus.CANCELLED],
    OrderStatus.SHIPPED: [OrderStatus.DELIVERED],
    OrderStatus.DELIVERED: [],  # Final state
    OrderStatus.CANCELLED: [],  # Final state
}

FINAL_STATES = frozenset(status for status, allowed in TRANSITIONS.items() if not allowed)


def next_statuses(current: OrderStatus) -> List[OrderStatus]:
    """Statuses a seller may move the order to from ``current``."""
    return list(TRANSITIONS.get(current, []))


def can_transition(current: OrderStatus, target: OrderStatus) -> Tuple[bool, Optional[str]]:
    """
    Check if an order can move from ``current`` to ``target``.

    Returns:
        (can_transition, reason_if_not)
    """
    allowed = TRANSITIONS.get(current, [])
    if target not in allowed:
        allowed_names = [status.value for status in allowed]
        return False, f"Cannot transition from '{current.value}' to '{target.value}'. Allowed: {allowed_names}"
    return True, None


def is_final(status: OrderStatus) -> bool:
    return status in FINAL_STATES
