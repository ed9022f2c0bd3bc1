"""Tests for error classification"""
import pytest
from web3.exceptions import ContractCustomError, ContractLogicError, ContractPanicError

from marketplace.errors import (
    ErrorCategory,
    ExecutionRevertedError,
    MarketplaceError,
    UnknownChainError,
    WrongNetworkError,
    classify_error,
    extract_revert_reason,
)


@pytest.mark.parametrize(
    "message, category",
    [
        ("MetaMask Tx Signature: User denied transaction signature.", ErrorCategory.USER_REJECTED),
        ("{'code': 4001, 'message': 'rejected'}", ErrorCategory.USER_REJECTED),
        ("insufficient funds for gas * price + value", ErrorCategory.INSUFFICIENT_FUNDS),
        ("gas required exceeds allowance (30000000)", ErrorCategory.GAS_LIMIT_EXCEEDED),
        ("out of gas", ErrorCategory.GAS_LIMIT_EXCEEDED),
        ("execution reverted: Insufficient stock", ErrorCategory.EXECUTION_REVERTED),
        ("Could not connect to http://127.0.0.1:8545", ErrorCategory.WALLET_NOT_INSTALLED),
        ("something odd happened", ErrorCategory.UNKNOWN),
    ],
)
def test_classify_error_by_message(message, category):
    error = classify_error(Exception(message))

    assert isinstance(error, MarketplaceError)
    assert error.category == category


def test_classify_error_keeps_classified_errors():
    original = WrongNetworkError("Monad Testnet", 1)

    assert classify_error(original) is original


def test_contract_logic_error_is_a_revert():
    error = classify_error(ContractLogicError("execution reverted: Not the seller"))

    assert error.category == ErrorCategory.EXECUTION_REVERTED
    assert error.reason == "Not the seller"


@pytest.mark.parametrize(
    "exc",
    [
        ContractPanicError("Panic error 0x11: Arithmetic underflow or overflow."),
        ContractCustomError("0x82b42900"),
    ],
)
def test_panic_and_custom_errors_are_reverts(exc):
    error = classify_error(exc)

    assert isinstance(error, ExecutionRevertedError)
    assert error.category == ErrorCategory.EXECUTION_REVERTED
    assert error.reason


def test_unknown_error_keeps_message():
    error = classify_error(RuntimeError("boom"))

    assert isinstance(error, UnknownChainError)
    assert "boom" in error.message


@pytest.mark.parametrize(
    "message, reason",
    [
        ("VM Exception: reverted with reason string 'Not enough stock'", "Not enough stock"),
        ("execution reverted: Only seller can update", "Only seller can update"),
        ("execution reverted", None),
    ],
)
def test_extract_revert_reason(message, reason):
    assert extract_revert_reason(message) == reason


def test_reverted_error_to_dict_includes_reason():
    data = ExecutionRevertedError("Product not available").to_dict()

    assert data["category"] == "execution_reverted"
    assert data["reason"] == "Product not available"
    assert "Product not available" in data["message"]


def test_wrong_network_message_names_chain():
    error = WrongNetworkError("Monad Testnet", 1)

    assert "Monad Testnet" in error.message
    assert error.category == ErrorCategory.WRONG_NETWORK
