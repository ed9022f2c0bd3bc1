"""Order processing module."""
from .status import TRANSITIONS, can_transition, next_statuses, is_final
from .history import OrderHistory

__all__ = [
    "TRANSITIONS",
    "can_transition",
    "next_statuses",
    "is_final",
    "OrderHistory",
]
