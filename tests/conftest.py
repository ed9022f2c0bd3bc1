"""Pytest configuration and fixtures"""
import os
import pytest
from unittest.mock import Mock, AsyncMock

# Set test environment variables
os.environ.setdefault("MARKETPLACE_RPC_URL", "http://127.0.0.1:8545")
os.environ.setdefault("READ_RETRY_DELAY", "0")
os.environ.setdefault("READ_RETRY_MAX_DELAY", "0")
os.environ.setdefault("ORDER_FETCH_DELAY", "0")
os.environ.setdefault("RECEIPT_POLL_INTERVAL", "0")

SELLER_A = "0x" + "a" * 40
SELLER_B = "0x" + "b" * 40
BUYER = "0x" + "c" * 40
ZERO_ADDRESS = "0x" + "0" * 40
TX_HASH = "0x" + "ab" * 32

ONE_TENTH = 10**17


class FakeFunctions:
    """
    Stand-in for ``contract.functions``.

    ``results[name]`` is returned from ``.call()``; an exception instance is
    raised instead, and a callable is invoked with the call's arguments.
    Every bound call is recorded in ``calls`` as ``(name, args)``.
    """

    def __init__(self):
        self.results = {}
        self.calls = []

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)

        def bind(*args):
            self.calls.append((name, args))

            async def call(*_):
                result = self.results[name]
                if isinstance(result, BaseException):
                    raise result
                if callable(result):
                    return result(*args)
                return result

            bound = Mock(name=f"{name}{args}")
            bound.fn_name = name
            bound.args = args
            bound.call = call
            return bound

        return bind

    def called(self, name):
        return [args for fn_name, args in self.calls if fn_name == name]


class FakeContract:
    def __init__(self):
        self.functions = FakeFunctions()


def product_tuple(product_id=1, seller=SELLER_A, name="Widget", price_wei=ONE_TENTH, available=True, stock=5):
    return (product_id, seller, name, price_wei, available, stock)


def order_tuple(
    order_id=1,
    buyer=BUYER,
    seller=SELLER_A,
    product_ids=(1,),
    quantities=(2,),
    total_wei=2 * ONE_TENTH,
    status=0,
    timestamp=1_700_000_000,
):
    return (order_id, buyer, seller, list(product_ids), list(quantities), total_wei, status, timestamp)


EMPTY_SHIPPING = ("", "", "", "", "")


@pytest.fixture
def settings():
    """Settings with every delay disabled"""
    from marketplace.config import Settings

    return Settings(
        rpc_url="http://127.0.0.1:8545",
        read_retry_attempts=3,
        read_retry_delay=0,
        read_retry_max_delay=0,
        order_fetch_delay=0,
        receipt_poll_interval=0,
    )


@pytest.fixture
def fake_wallet():
    """Mock wallet adapter connected as BUYER on the expected chain"""
    wallet = Mock()
    wallet.address = BUYER
    wallet.request_accounts = AsyncMock(return_value=BUYER)
    wallet.ensure_ready = AsyncMock(return_value=BUYER)
    wallet.get_chain_id = AsyncMock(return_value=10143)
    wallet.estimate_gas = AsyncMock(return_value=100_000)
    wallet.send_transaction = AsyncMock(return_value=TX_HASH)
    wallet.wait_for_receipt = AsyncMock(return_value={"status": 1, "blockNumber": 42, "gasUsed": 90_000})
    wallet.confirmations = AsyncMock(return_value=1)
    return wallet


@pytest.fixture
def fake_contract():
    """Contract with a small catalog of two products from SELLER_A"""
    contract = FakeContract()
    products = {
        1: product_tuple(1, name="Widget", price_wei=ONE_TENTH, stock=5),
        2: product_tuple(2, name="Gadget", price_wei=25 * 10**16, stock=3),
    }
    contract.functions.results.update(
        {
            "getAllProducts": lambda: list(products.values()),
            "getProductDetails": lambda product_id: products.get(
                product_id, product_tuple(0, ZERO_ADDRESS, "", 0, False, 0)
            ),
            "registeredSellers": False,
            "getBuyerOrders": [],
            "getSellerOrders": [],
            "getShippingInfo": EMPTY_SHIPPING,
        }
    )
    contract.products = products
    return contract


@pytest.fixture
def events():
    from marketplace.events import EventBus

    return EventBus()


@pytest.fixture
def gateway(fake_wallet, settings, fake_contract):
    from marketplace.chain.gateway import MarketplaceGateway

    return MarketplaceGateway(fake_wallet, settings, contract=fake_contract)


@pytest.fixture
def catalog(gateway, events):
    from marketplace.catalog import ProductCatalog

    catalog = ProductCatalog(gateway, events)
    yield catalog
    catalog.close()


@pytest.fixture
def cart_store():
    from marketplace.cart import CartStore

    return CartStore()
