"""
Money Utilities - Safe Decimal operations for on-chain amounts.

Prices travel through the storefront as decimal strings in whole units of
the native currency ("0.1") and reach the contract as integers in base
units (18-decimal fixed point). Floats are never used in between.
"""
from decimal import Context, Decimal, InvalidOperation, ROUND_DOWN, localcontext
from typing import Iterable, Union

from marketplace.errors import InvalidInputError

# Native currency decimals (wei per ether)
NATIVE_DECIMALS = 18
BASE_UNIT_PRECISION = Decimal(1).scaleb(-NATIVE_DECIMALS)

# Wide enough for uint256 values with 18 fractional digits
MONEY_CONTEXT = Context(prec=100)

Amount = Union[str, int, float, Decimal, None]


def to_decimal(value: Amount) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal):
        return value

    try:
        if isinstance(value, float):
            # Use string representation to preserve precision
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def parse_amount(value: Amount, field: str = "amount") -> Decimal:
    """
    Strictly parse a user-supplied decimal amount.

    Unlike ``to_decimal`` this rejects garbage instead of treating it as zero.

    Raises:
        InvalidInputError: not a finite number or more than 18 decimals
    """
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError, TypeError):
            raise InvalidInputError(f"{field} must be a decimal number, got {value!r}")
    if not amount.is_finite():
        raise InvalidInputError(f"{field} must be a finite number")
    with localcontext(MONEY_CONTEXT):
        if amount != amount.quantize(BASE_UNIT_PRECISION, rounding=ROUND_DOWN):
            raise InvalidInputError(f"{field} supports at most {NATIVE_DECIMALS} decimal places")
    return amount


def to_base_units(value: Amount, decimals: int = NATIVE_DECIMALS) -> int:
    """
    Convert a decimal amount to integer base units (e.g. "0.1" -> 10**17 wei).

    Args:
        value: Amount in whole units
        decimals: Token decimals (18 for the native currency)

    Returns:
        Amount in base units

    Raises:
        InvalidInputError: the amount cannot be represented exactly
    """
    amount = parse_amount(value)
    with localcontext(MONEY_CONTEXT):
        scaled = amount.scaleb(decimals)
        if scaled != scaled.to_integral_value():
            raise InvalidInputError(f"Amount {value!r} has more than {decimals} decimal places")
        return int(scaled)


def from_base_units(value: int, decimals: int = NATIVE_DECIMALS) -> str:
    """Convert integer base units to a plain decimal string (10**17 -> "0.1")."""
    with localcontext(MONEY_CONTEXT):
        return format_decimal(Decimal(int(value)).scaleb(-decimals))


def format_decimal(value: Amount) -> str:
    """
    Render a Decimal as a fixed-point string: no exponent, no trailing zeros.

    Values are truncated to 18 fractional digits; zero renders as "0".
    """
    with localcontext(MONEY_CONTEXT):
        decimal_value = to_decimal(value).quantize(BASE_UNIT_PRECISION, rounding=ROUND_DOWN)
        if decimal_value == 0:
            return "0"
        return format(decimal_value.normalize(), "f")


def format_amount(value: Amount, symbol: str = "MON") -> str:
    """Format an amount with the currency symbol ("0.25 MON")."""
    return f"{format_decimal(value)} {symbol}"


def add(a: Amount, b: Amount) -> Decimal:
    """Safe addition of monetary values."""
    with localcontext(MONEY_CONTEXT):
        return to_decimal(a) + to_decimal(b)


def multiply(value: Amount, factor: Amount) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    with localcontext(MONEY_CONTEXT):
        return to_decimal(value) * to_decimal(factor)


def total(values: Iterable[Amount]) -> Decimal:
    """Exact sum of monetary values."""
    result = Decimal("0")
    for value in values:
        result = add(result, value)
    return result


def with_gas_margin(estimate: int, margin_percent: int = 20) -> int:
    """
    Apply a safety margin to a gas estimate using integer math.

    The default 20% margin is ``estimate * 12 // 10``.
    """
    return int(estimate) * (100 + margin_percent) // 100
