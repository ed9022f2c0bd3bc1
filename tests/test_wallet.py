"""Tests for the wallet adapter"""
import pytest
from dataclasses import replace
from unittest.mock import AsyncMock, Mock

from web3.exceptions import TransactionNotFound

from marketplace.chain.wallet import Web3Wallet
from marketplace.errors import WalletNotInstalledError, WrongNetworkError

# Well-known development key (first Hardhat/Anvil account)
DEV_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
DEV_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


async def _value(value):
    return value


@pytest.fixture
def mock_w3():
    w3 = Mock()
    w3.eth = Mock()
    return w3


@pytest.mark.asyncio
async def test_request_accounts_uses_local_key(settings, mock_w3):
    wallet = Web3Wallet(replace(settings, wallet_private_key=DEV_KEY), w3=mock_w3)

    assert await wallet.request_accounts() == DEV_ADDRESS
    assert wallet.address == DEV_ADDRESS


@pytest.mark.asyncio
async def test_request_accounts_uses_node_account(settings, mock_w3):
    mock_w3.eth.accounts = _value(["0x" + "c" * 40])
    wallet = Web3Wallet(settings, w3=mock_w3)

    address = await wallet.request_accounts()

    assert address.lower() == "0x" + "c" * 40


@pytest.mark.asyncio
async def test_request_accounts_without_accounts(settings, mock_w3):
    mock_w3.eth.accounts = _value([])
    wallet = Web3Wallet(settings, w3=mock_w3)

    with pytest.raises(WalletNotInstalledError):
        await wallet.request_accounts()


def test_missing_rpc_url_means_no_wallet(settings):
    wallet = Web3Wallet(replace(settings, rpc_url=""))

    with pytest.raises(WalletNotInstalledError):
        wallet.w3


@pytest.mark.asyncio
async def test_ensure_network_rejects_other_chain(settings, mock_w3):
    wallet = Web3Wallet(settings, w3=mock_w3)
    wallet.get_chain_id = AsyncMock(return_value=1)

    with pytest.raises(WrongNetworkError) as exc_info:
        await wallet.ensure_network()

    assert exc_info.value.actual_chain_id == 1


@pytest.mark.asyncio
async def test_ensure_ready_returns_address(settings, mock_w3):
    wallet = Web3Wallet(replace(settings, wallet_private_key=DEV_KEY), w3=mock_w3)
    wallet.get_chain_id = AsyncMock(return_value=settings.chain_id)

    assert await wallet.ensure_ready() == DEV_ADDRESS


@pytest.mark.asyncio
async def test_wait_for_receipt_polls_until_mined(settings, mock_w3):
    mock_w3.eth.get_transaction_receipt = AsyncMock(
        side_effect=[TransactionNotFound("not yet"), None, {"status": 1, "blockNumber": 7}]
    )
    wallet = Web3Wallet(settings, w3=mock_w3)

    receipt = await wallet.wait_for_receipt("0x" + "ab" * 32)

    assert receipt["blockNumber"] == 7
    assert mock_w3.eth.get_transaction_receipt.await_count == 3


@pytest.mark.asyncio
async def test_send_transaction_signs_locally(settings, mock_w3):
    wallet = Web3Wallet(replace(settings, wallet_private_key=DEV_KEY), w3=mock_w3)
    wallet._account = Mock(address=DEV_ADDRESS)
    wallet._account.sign_transaction.return_value = Mock(raw_transaction=b"\x02raw")
    mock_w3.eth.get_transaction_count = AsyncMock(return_value=11)
    mock_w3.eth.send_raw_transaction = AsyncMock(return_value=bytes.fromhex("ab" * 32))
    call = Mock()
    call.build_transaction = AsyncMock(return_value={"to": "0x" + "d" * 40, "data": "0x"})

    tx_hash = await wallet.send_transaction(call, value=10, gas=21_000)

    assert tx_hash == "0x" + "ab" * 32
    params = call.build_transaction.await_args.args[0]
    assert params["nonce"] == 11
    assert params["gas"] == 21_000
    assert params["chainId"] == settings.chain_id
    mock_w3.eth.send_raw_transaction.assert_awaited_once_with(b"\x02raw")


@pytest.mark.asyncio
async def test_send_transaction_through_node_account(settings, mock_w3):
    mock_w3.eth.accounts = _value(["0x" + "c" * 40])
    wallet = Web3Wallet(settings, w3=mock_w3)
    call = Mock()
    call.transact = AsyncMock(return_value=bytes.fromhex("cd" * 32))

    tx_hash = await wallet.send_transaction(call, value=0, gas=50_000)

    assert tx_hash == "0x" + "cd" * 32
    assert call.transact.await_args.args[0]["gas"] == 50_000


@pytest.mark.asyncio
async def test_confirmations(settings, mock_w3):
    mock_w3.eth.block_number = _value(45)
    wallet = Web3Wallet(settings, w3=mock_w3)

    assert await wallet.confirmations(42) == 4
    assert await wallet.confirmations(None) == 0
