"""Tests for EventBus."""

import asyncio
from datetime import datetime, timezone

import pytest

from responder.event_bus import new_bus_message
from responder.models import BusMessage, Topic


class TestEventBusSubscribe:
    """Tests for EventBus subscription."""

    @pytest.mark.asyncio
    async def test_subscribe_single_handler(self, event_bus):
        """Test subscribing a single handler."""

        async def handler(msg: BusMessage):
            pass

        event_bus.subscribe(Topic.INBOUND, handler)
        assert len(event_bus._subscribers[Topic.INBOUND]) == 1
        assert event_bus._subscribers[Topic.HANDOFF] == []

    @pytest.mark.asyncio
    async def test_subscribe_multiple_handlers(self, event_bus):
        """Test subscribing multiple handlers to same topic."""

        async def handler1(msg: BusMessage):
            pass

        async def handler2(msg: BusMessage):
            pass

        event_bus.subscribe(Topic.INBOUND, handler1)
        event_bus.subscribe(Topic.INBOUND, handler2)

        assert len(event_bus._subscribers[Topic.INBOUND]) == 2


class TestEventBusPublish:
    """Tests for EventBus publishing."""

    @pytest.mark.asyncio
    async def test_publish_calls_all_subscribers(self, event_bus):
        """Test publishing to several subscribers of one topic."""
        calls = []

        async def handler1(msg: BusMessage):
            calls.append(("h1", msg.payload))

        async def handler2(msg: BusMessage):
            calls.append(("h2", msg.payload))

        event_bus.subscribe(Topic.INBOUND, handler1)
        event_bus.subscribe(Topic.INBOUND, handler2)

        await event_bus.publish(new_bus_message(Topic.INBOUND, {"n": 1}, source="test"))

        assert sorted(calls) == [("h1", {"n": 1}), ("h2", {"n": 1})]

    @pytest.mark.asyncio
    async def test_publish_only_to_matching_topic(self, event_bus):
        calls = []

        async def handler(msg: BusMessage):
            calls.append(msg)

        event_bus.subscribe(Topic.HANDOFF, handler)
        await event_bus.publish(new_bus_message(Topic.INBOUND, {}, source="test"))

        assert calls == []

    @pytest.mark.asyncio
    async def test_publish_without_subscribers(self, event_bus):
        """Test publishing to a topic nobody listens to."""
        await event_bus.publish(new_bus_message(Topic.HANDOFF, {}, source="test"))

    @pytest.mark.asyncio
    async def test_publish_assigns_missing_id(self, event_bus):
        msg = BusMessage(
            id="",
            topic=Topic.INBOUND,
            payload={},
            source="test",
            timestamp=datetime.now(timezone.utc),
        )
        await event_bus.publish(msg)
        assert msg.id

    @pytest.mark.asyncio
    async def test_handler_error_is_isolated(self, event_bus):
        """Test that one failing handler does not affect the others."""
        calls = []

        async def failing(msg: BusMessage):
            raise RuntimeError("boom")

        async def working(msg: BusMessage):
            calls.append(msg)

        event_bus.subscribe(Topic.INBOUND, failing)
        event_bus.subscribe(Topic.INBOUND, working)

        await event_bus.publish(new_bus_message(Topic.INBOUND, {}, source="test"))

        assert len(calls) == 1
        assert event_bus.failures == 1


class TestEventBusDispatch:
    """Tests for detached publishing."""

    @pytest.mark.asyncio
    async def test_dispatch_returns_before_handlers_finish(self, event_bus):
        started = asyncio.Event()
        release = asyncio.Event()
        done = []

        async def slow(msg: BusMessage):
            started.set()
            await release.wait()
            done.append(msg)

        event_bus.subscribe(Topic.INBOUND, slow)
        event_bus.dispatch(new_bus_message(Topic.INBOUND, {}, source="test"))

        assert done == []
        assert event_bus.dispatched == 1

        await started.wait()
        release.set()
        await event_bus.drain()

        assert len(done) == 1

    @pytest.mark.asyncio
    async def test_drain_waits_for_chained_dispatches(self, event_bus):
        """Test that work dispatched from a handler is drained too."""
        seen = []

        async def on_inbound(msg: BusMessage):
            event_bus.dispatch(new_bus_message(Topic.HANDOFF, msg.payload, source="test"))

        async def on_handoff(msg: BusMessage):
            await asyncio.sleep(0)
            seen.append(msg.payload)

        event_bus.subscribe(Topic.INBOUND, on_inbound)
        event_bus.subscribe(Topic.HANDOFF, on_handoff)

        event_bus.dispatch(new_bus_message(Topic.INBOUND, {"chat": "c1"}, source="test"))
        await event_bus.drain()

        assert seen == [{"chat": "c1"}]
        assert event_bus.dispatched == 2

    @pytest.mark.asyncio
    async def test_drain_counts_failures(self, event_bus):
        async def failing(msg: BusMessage):
            raise ValueError("bad")

        event_bus.subscribe(Topic.HANDOFF, failing)
        event_bus.dispatch(new_bus_message(Topic.HANDOFF, {}, source="test"))
        await event_bus.drain()

        assert event_bus.failures == 1
