"""
Marketplace error taxonomy.

Wallet and contract failures arrive as free-form exceptions (web3 RPC errors,
provider errors, reverted calls). ``classify_error`` maps them by message onto
a fixed set of categories with human-readable messages; services raise the
resulting ``MarketplaceError`` subclasses and routers render them.
"""
import re
from enum import Enum
from typing import Optional

from web3.exceptions import ContractLogicError


class ErrorCategory(str, Enum):
    WALLET_NOT_INSTALLED = "wallet_not_installed"
    USER_REJECTED = "user_rejected"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    GAS_LIMIT_EXCEEDED = "gas_limit_exceeded"
    EXECUTION_REVERTED = "execution_reverted"
    WRONG_NETWORK = "wrong_network"
    UNKNOWN = "unknown"


# User-facing messages
ERROR_WALLET_NOT_INSTALLED = "No wallet is available. Configure a wallet provider to use this feature"
ERROR_USER_REJECTED = "Transaction was rejected. Please try again."
ERROR_INSUFFICIENT_FUNDS = "Insufficient funds to cover the price and gas"
ERROR_GAS_LIMIT = "Transaction ran out of gas"
ERROR_REVERTED = "Transaction reverted by the contract"
ERROR_WRONG_NETWORK = "Please connect to {chain_name} to use this marketplace"
ERROR_UNKNOWN = "Transaction failed"

# Input / lookup errors
ERROR_PRODUCT_NOT_FOUND = "Product not found"
ERROR_PRODUCT_UNAVAILABLE = "Product is not available"
ERROR_ORDER_NOT_FOUND = "Order not found"
ERROR_CART_EMPTY = "Cart is empty"
ERROR_INVALID_QUANTITY = "Quantity must be between 1 and the available stock"
ERROR_INVALID_STOCK = "Stock must be a positive number"
ERROR_INVALID_PRICE = "Price must be a positive amount"
ERROR_INVALID_NAME = "Product name is required"
ERROR_NOT_SELLER = "Register as a seller first"
ERROR_PURCHASE_IN_PROGRESS = "A purchase for this product is already in progress"


class MarketplaceError(Exception):
    """Base error carrying a category and a message safe to show users."""

    category: ErrorCategory = ErrorCategory.UNKNOWN
    default_message: str = ERROR_UNKNOWN

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"category": self.category.value, "message": self.message}


class WalletNotInstalledError(MarketplaceError):
    category = ErrorCategory.WALLET_NOT_INSTALLED
    default_message = ERROR_WALLET_NOT_INSTALLED


class UserRejectedError(MarketplaceError):
    category = ErrorCategory.USER_REJECTED
    default_message = ERROR_USER_REJECTED


class InsufficientFundsError(MarketplaceError):
    category = ErrorCategory.INSUFFICIENT_FUNDS
    default_message = ERROR_INSUFFICIENT_FUNDS


class GasLimitExceededError(MarketplaceError):
    category = ErrorCategory.GAS_LIMIT_EXCEEDED
    default_message = ERROR_GAS_LIMIT


class ExecutionRevertedError(MarketplaceError):
    category = ErrorCategory.EXECUTION_REVERTED
    default_message = ERROR_REVERTED

    def __init__(self, reason: Optional[str] = None):
        self.reason = reason
        message = f"{ERROR_REVERTED}: {reason}" if reason else ERROR_REVERTED
        super().__init__(message)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["reason"] = self.reason
        return data


class WrongNetworkError(MarketplaceError):
    category = ErrorCategory.WRONG_NETWORK

    def __init__(self, chain_name: str, actual_chain_id: Optional[int] = None):
        self.chain_name = chain_name
        self.actual_chain_id = actual_chain_id
        super().__init__(ERROR_WRONG_NETWORK.format(chain_name=chain_name))


class UnknownChainError(MarketplaceError):
    category = ErrorCategory.UNKNOWN


class InvalidInputError(ValueError):
    """Rejected user input (quantities, prices, form fields)."""


class NotFoundError(LookupError):
    """A product or order id that the contract does not know."""


class PurchaseInProgressError(RuntimeError):
    """A purchase touching the same product is already awaiting the wallet."""


_REJECTED_MARKERS = ("user rejected", "user denied", "action_rejected", "rejected by user", "'code': 4001", "code=4001")
_FUNDS_MARKERS = ("insufficient funds", "insufficient balance")
_GAS_MARKERS = ("out of gas", "gas required exceeds", "intrinsic gas too low", "exceeds block gas limit", "gas limit")
_REVERT_MARKERS = ("execution reverted", "reverted", "revert")
_NO_WALLET_MARKERS = ("cannot connect", "connection refused", "no accounts", "could not connect", "not connected")

_REASON_PATTERNS = (
    re.compile(r"reverted with reason string '([^']*)'", re.IGNORECASE),
    re.compile(r"execution reverted:\s*([^\"'}\n]+)", re.IGNORECASE),
    re.compile(r"reason[=:]\s*\"?([^\",}]+)", re.IGNORECASE),
)


def extract_revert_reason(message: str) -> Optional[str]:
    """Best-effort extraction of a revert reason string from an error message."""
    for pattern in _REASON_PATTERNS:
        match = pattern.search(message)
        if match:
            reason = match.group(1).strip().strip(".")
            if reason:
                return reason
    return None


def classify_error(exc: BaseException) -> MarketplaceError:
    """
    Map any wallet/contract exception onto the marketplace error taxonomy.

    Already-classified errors are returned unchanged. Matching is done on the
    lower-cased message, in order of specificity.
    """
    if isinstance(exc, MarketplaceError):
        return exc

    message = str(exc) or exc.__class__.__name__
    lowered = message.lower()

    # Includes panic and custom errors, whose messages carry no revert marker
    if isinstance(exc, ContractLogicError):
        reason = extract_revert_reason(message)
        if reason is None and "revert" not in lowered:
            reason = message.strip() or None
        return ExecutionRevertedError(reason)
    if any(marker in lowered for marker in _REJECTED_MARKERS):
        return UserRejectedError()
    if any(marker in lowered for marker in _FUNDS_MARKERS):
        return InsufficientFundsError()
    if any(marker in lowered for marker in _GAS_MARKERS):
        return GasLimitExceededError()
    if any(marker in lowered for marker in _REVERT_MARKERS):
        return ExecutionRevertedError(extract_revert_reason(message))
    if any(marker in lowered for marker in _NO_WALLET_MARKERS):
        return WalletNotInstalledError()
    return UnknownChainError(f"{ERROR_UNKNOWN}: {message}")
