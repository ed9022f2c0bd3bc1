"""Chain package: wallet adapter, contract gateway and snapshot models."""
from .models import Order, OrderStatus, Product, ShippingInfo, TxResult, TxStage
from .retry import RetryPolicy

__all__ = [
    "Order",
    "OrderStatus",
    "Product",
    "ShippingInfo",
    "TxResult",
    "TxStage",
    "RetryPolicy",
]
