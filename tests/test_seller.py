"""Tests for seller dashboard operations"""
import pytest

from marketplace.chain.models import OrderStatus
from marketplace.errors import ERROR_INVALID_STOCK, InvalidInputError, NotFoundError
from marketplace.events import MarketplaceEvent
from marketplace.seller import SellerService

from conftest import BUYER, ONE_TENTH, SELLER_A, SELLER_B, order_tuple, product_tuple


@pytest.fixture
def seller_wallet(fake_wallet):
    fake_wallet.request_accounts.return_value = SELLER_A
    fake_wallet.ensure_ready.return_value = SELLER_A
    return fake_wallet


@pytest.fixture
def registered(fake_contract):
    fake_contract.functions.results["registeredSellers"] = lambda address: address.lower() == SELLER_A
    return fake_contract


@pytest.fixture
def seller(gateway, catalog, events, seller_wallet):
    return SellerService(gateway, catalog, events)


# ==================== REGISTRATION ====================

@pytest.mark.asyncio
async def test_register_new_seller(seller, fake_contract, events):
    statuses = iter([False, True])
    fake_contract.functions.results["registeredSellers"] = lambda address: next(statuses)
    registered_events = []
    events.subscribe(MarketplaceEvent.SELLER_REGISTERED, lambda event, payload: registered_events.append(payload))

    assert await seller.register() is True
    assert fake_contract.functions.called("registerAsSeller") == [()]
    assert registered_events == [{"seller": SELLER_A}]


@pytest.mark.asyncio
async def test_register_already_registered_sends_nothing(seller, registered, seller_wallet):
    assert await seller.register() is True

    assert registered.functions.called("registerAsSeller") == []
    seller_wallet.send_transaction.assert_not_awaited()


@pytest.mark.asyncio
async def test_is_registered(seller, registered):
    assert await seller.is_registered() is True
    assert await seller.is_registered(BUYER) is False


# ==================== PRODUCTS ====================

@pytest.mark.asyncio
async def test_add_product(seller, registered, events):
    added = []
    events.subscribe(MarketplaceEvent.PRODUCT_ADDED, lambda event, payload: added.append(payload))

    result = await seller.add_product("  Lamp  ", "0.1", 4)

    assert registered.functions.called("addProduct") == [("Lamp", ONE_TENTH, 4)]
    assert added[0]["name"] == "Lamp"
    assert added[0]["tx_hash"] == result.tx_hash
    # The catalog refreshes on PRODUCT_ADDED
    assert registered.functions.called("getAllProducts")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "name, price, stock",
    [
        ("", "0.1", 1),
        ("   ", "0.1", 1),
        ("Lamp", "0", 1),
        ("Lamp", "-1", 1),
        ("Lamp", "abc", 1),
        ("Lamp", "0.0000000000000000001", 1),
        ("Lamp", "0.1", 0),
        ("Lamp", "0.1", -3),
    ],
)
async def test_add_product_validation(seller, registered, seller_wallet, name, price, stock):
    with pytest.raises(InvalidInputError):
        await seller.add_product(name, price, stock)

    seller_wallet.send_transaction.assert_not_awaited()


@pytest.mark.asyncio
async def test_stock_error_message(seller, registered):
    with pytest.raises(InvalidInputError, match=ERROR_INVALID_STOCK):
        await seller.add_product("Lamp", "0.1", 0)


@pytest.mark.asyncio
async def test_add_product_requires_registration(seller, fake_contract):
    with pytest.raises(InvalidInputError):
        await seller.add_product("Lamp", "0.1", 1)

    assert fake_contract.functions.called("addProduct") == []


@pytest.mark.asyncio
async def test_update_product(seller, registered, events):
    updated = []
    events.subscribe(MarketplaceEvent.PRODUCT_UPDATED, lambda event, payload: updated.append(payload))

    await seller.update_product(1, "Widget v2", "0.2", 9, True)

    assert registered.functions.called("updateProduct") == [(1, "Widget v2", 2 * ONE_TENTH, 9, True)]
    assert updated[0]["product_id"] == 1


@pytest.mark.asyncio
async def test_update_foreign_product_is_refused(seller, registered):
    registered.products[3] = product_tuple(3, seller=SELLER_B)

    with pytest.raises(NotFoundError):
        await seller.update_product(3, "Mine now", "0.1", 1, True)

    assert registered.functions.called("updateProduct") == []


@pytest.mark.asyncio
async def test_delete_product_marks_unavailable(seller, registered):
    await seller.delete_product(2)

    assert registered.functions.called("updateProduct") == [(2, "Gadget", 25 * 10**16, 3, False)]


@pytest.mark.asyncio
async def test_list_own_products(seller, registered):
    registered.products[3] = product_tuple(3, seller=SELLER_B)
    registered.products[4] = product_tuple(4, seller=SELLER_A.upper().replace("0X", "0x"), available=False)

    products = await seller.list_own_products()

    assert [product.id for product in products] == [1, 2, 4]


# ==================== ORDERS ====================

@pytest.mark.asyncio
async def test_list_own_orders_newest_first(seller, registered):
    timestamps = {1: 1_700_000_000, 2: 1_700_000_500, 3: 1_699_999_000}
    registered.functions.results["getSellerOrders"] = [1, 2, 3]
    registered.functions.results["getOrderDetails"] = lambda order_id: order_tuple(
        order_id, timestamp=timestamps[order_id]
    )

    orders = await seller.list_own_orders()

    assert [order.id for order in orders] == [2, 1, 3]
    assert registered.functions.called("getShippingInfo") == [(1,), (2,), (3,)]
    assert seller.available_actions(orders[0]) == [OrderStatus.ACCEPTED, OrderStatus.CANCELLED]


@pytest.mark.asyncio
async def test_update_order_status_forward(seller, registered, events):
    registered.functions.results["getOrderDetails"] = lambda order_id: order_tuple(order_id, status=0)
    changes = []
    events.subscribe(MarketplaceEvent.ORDER_STATUS_CHANGED, lambda event, payload: changes.append(payload))

    await seller.update_order_status(1, OrderStatus.ACCEPTED)

    assert registered.functions.called("updateOrderStatus") == [(1, 1)]
    assert changes == [{"order_id": 1, "status": "Accepted", "previous": "Pending"}]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "current, target",
    [
        (0, OrderStatus.DELIVERED),
        (0, OrderStatus.SHIPPED),
        (2, OrderStatus.CANCELLED),
        (3, OrderStatus.PENDING),
        (4, OrderStatus.ACCEPTED),
    ],
)
async def test_update_order_status_refuses_invalid_transition(seller, registered, current, target):
    registered.functions.results["getOrderDetails"] = lambda order_id: order_tuple(order_id, status=current)

    with pytest.raises(InvalidInputError):
        await seller.update_order_status(1, target)

    assert registered.functions.called("updateOrderStatus") == []


@pytest.mark.asyncio
async def test_update_order_status_of_other_seller(seller, registered):
    registered.functions.results["getOrderDetails"] = lambda order_id: order_tuple(order_id, seller=SELLER_B)

    with pytest.raises(NotFoundError):
        await seller.update_order_status(1, OrderStatus.ACCEPTED)
