"""Tests for the marketplace event bus"""
import pytest

from marketplace.events import EventBus, MarketplaceEvent


@pytest.mark.asyncio
async def test_sync_and_async_handlers_receive_payload():
    bus = EventBus()
    received = []

    def sync_handler(event, payload):
        received.append(("sync", event, payload))

    async def async_handler(event, payload):
        received.append(("async", event, payload))

    bus.subscribe(MarketplaceEvent.PRODUCT_ADDED, sync_handler)
    bus.subscribe(MarketplaceEvent.PRODUCT_ADDED, async_handler)

    await bus.emit(MarketplaceEvent.PRODUCT_ADDED, {"name": "Widget"})

    assert received == [
        ("sync", MarketplaceEvent.PRODUCT_ADDED, {"name": "Widget"}),
        ("async", MarketplaceEvent.PRODUCT_ADDED, {"name": "Widget"}),
    ]


@pytest.mark.asyncio
async def test_handlers_only_receive_their_event():
    bus = EventBus()
    received = []
    bus.subscribe(MarketplaceEvent.ORDER_PLACED, lambda event, payload: received.append(event))

    await bus.emit(MarketplaceEvent.PRODUCT_UPDATED)

    assert received == []


@pytest.mark.asyncio
async def test_failing_handler_does_not_stop_delivery():
    bus = EventBus()
    received = []

    async def broken(event, payload):
        raise RuntimeError("handler bug")

    bus.subscribe(MarketplaceEvent.ORDER_PLACED, broken)
    bus.subscribe(MarketplaceEvent.ORDER_PLACED, lambda event, payload: received.append(payload))

    await bus.emit(MarketplaceEvent.ORDER_PLACED, {"tx_hash": "0x1"})

    assert received == [{"tx_hash": "0x1"}]


@pytest.mark.asyncio
async def test_unsubscribe():
    bus = EventBus()
    received = []
    unsubscribe = bus.subscribe(MarketplaceEvent.SELLER_REGISTERED, lambda event, payload: received.append(1))

    assert bus.handler_count(MarketplaceEvent.SELLER_REGISTERED) == 1
    unsubscribe()
    unsubscribe()
    await bus.emit(MarketplaceEvent.SELLER_REGISTERED)

    assert received == []
    assert bus.handler_count(MarketplaceEvent.SELLER_REGISTERED) == 0
