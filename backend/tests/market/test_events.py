"""Tests for the EventHub fan-out channel."""

import asyncio

import pytest

from pricefeed.market.events import EventHub
from pricefeed.market.models import MarketEvent


def _event(symbol: str) -> MarketEvent:
    return MarketEvent(kind="update", symbol=symbol)


@pytest.mark.asyncio
class TestEventHub:
    async def test_every_stream_sees_every_event(self):
        hub = EventHub()
        first, second = hub.stream(), hub.stream()

        hub.publish(_event("AAPL"))

        assert (await anext(first)).symbol == "AAPL"
        assert (await anext(second)).symbol == "AAPL"

    async def test_events_keep_publish_order(self):
        hub = EventHub()
        stream = hub.stream()
        for symbol in ("A", "B", "C"):
            hub.publish(_event(symbol))

        assert [(await anext(stream)).symbol for _ in range(3)] == ["A", "B", "C"]

    async def test_stream_only_sees_events_after_it_attached(self):
        hub = EventHub()
        hub.publish(_event("EARLY"))
        stream = hub.stream()
        hub.publish(_event("LATE"))

        assert stream.pending() == 1
        assert (await anext(stream)).symbol == "LATE"

    async def test_publish_with_no_streams(self):
        EventHub().publish(_event("AAPL"))

    async def test_full_stream_drops_oldest(self):
        hub = EventHub(max_queue=2)
        stream = hub.stream()
        for symbol in ("A", "B", "C"):
            hub.publish(_event(symbol))

        assert stream.pending() == 2
        assert (await anext(stream)).symbol == "B"
        assert (await anext(stream)).symbol == "C"

    async def test_close_stream_detaches_and_ends_iteration(self):
        hub = EventHub()
        stream = hub.stream()
        hub.publish(_event("AAPL"))

        stream.close()
        hub.publish(_event("MSFT"))

        assert len(hub) == 0
        assert stream.closed
        assert [event.symbol async for event in stream] == ["AAPL"]

    async def test_close_hub_wakes_waiting_consumer(self):
        hub = EventHub()
        stream = hub.stream()

        async def consume():
            return [event async for event in stream]

        consumer = asyncio.create_task(consume())
        await asyncio.sleep(0)
        hub.close()

        assert await asyncio.wait_for(consumer, 1.0) == []
        assert len(hub) == 0

    async def test_close_is_idempotent(self):
        hub = EventHub()
        stream = hub.stream()
        stream.close()
        stream.close()
        hub.close()
        assert stream.pending() == 1  # A single end marker

    async def test_stream_after_close_is_already_ended(self):
        hub = EventHub()
        hub.close()
        stream = hub.stream()

        assert hub.closed
        assert stream.closed
        assert len(hub) == 0
        with pytest.raises(StopAsyncIteration):
            await asyncio.wait_for(anext(stream), 0.5)

    async def test_publish_after_close_reaches_nobody(self):
        hub = EventHub()
        hub.close()
        stream = hub.stream()
        hub.publish(_event("AAPL"))
        assert [event async for event in stream] == []
