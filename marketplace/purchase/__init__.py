"""Purchase flow package."""
from .flow import OrderLine, PurchaseAttempt, PurchaseFlow, PurchaseState, SUCCESS_NOTICE

__all__ = [
    "OrderLine",
    "PurchaseAttempt",
    "PurchaseFlow",
    "PurchaseState",
    "SUCCESS_NOTICE",
]
