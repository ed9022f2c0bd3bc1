# Services Module
from .money import (
    to_decimal,
    to_base_units,
    from_base_units,
    format_decimal,
    format_amount,
    multiply,
    add,
    total,
    parse_amount,
    with_gas_margin,
)

__all__ = [
    "to_decimal",
    "to_base_units",
    "from_base_units",
    "format_decimal",
    "format_amount",
    "multiply",
    "add",
    "total",
    "parse_amount",
    "with_gas_margin",
]
