"""
Tests for the application event bus.
"""
import pytest

from gameforge.core.events import EventBus


class TestEventBus:
    """Test publish/subscribe and lifecycle."""

    @pytest.mark.asyncio
    async def test_publish_reaches_subscribers_in_order(self):
        bus = EventBus()
        calls = []
        bus.subscribe("cart.changed", lambda payload: calls.append(("first", payload)))
        bus.subscribe("cart.changed", lambda payload: calls.append(("second", payload)))

        delivered = await bus.publish("cart.changed", {"user_id": "user-1"})

        assert delivered == 2
        assert calls == [("first", {"user_id": "user-1"}), ("second", {"user_id": "user-1"})]

    @pytest.mark.asyncio
    async def test_async_subscriber_is_awaited(self):
        bus = EventBus()
        calls = []

        async def handler(payload):
            calls.append(payload)

        bus.subscribe("purchases.changed", handler)
        await bus.publish("purchases.changed", {"count": 2})

        assert calls == [{"count": 2}]

    @pytest.mark.asyncio
    async def test_topics_are_isolated(self):
        bus = EventBus()
        calls = []
        bus.subscribe("cart.changed", calls.append)

        delivered = await bus.publish("catalog.changed")

        assert delivered == 0
        assert calls == []

    @pytest.mark.asyncio
    async def test_unsubscribe(self):
        bus = EventBus()
        calls = []
        unsubscribe = bus.subscribe("cart.changed", calls.append)

        unsubscribe()
        await bus.publish("cart.changed", {"user_id": "user-1"})

        assert calls == []
        assert bus.subscriber_count("cart.changed") == 0

    @pytest.mark.asyncio
    async def test_failing_subscriber_does_not_stop_others(self):
        """Test one broken subscriber is skipped without raising."""
        bus = EventBus()
        calls = []

        def broken(payload):
            raise RuntimeError("boom")

        bus.subscribe("cart.changed", broken)
        bus.subscribe("cart.changed", calls.append)

        delivered = await bus.publish("cart.changed", {"user_id": "user-1"})

        assert delivered == 1
        assert calls == [{"user_id": "user-1"}]

    @pytest.mark.asyncio
    async def test_close_drops_subscribers(self):
        bus = EventBus()
        calls = []
        bus.subscribe("cart.changed", calls.append)

        bus.close()
        delivered = await bus.publish("cart.changed", {"user_id": "user-1"})

        assert bus.closed is True
        assert delivered == 0
        assert calls == []
        assert bus.subscriber_count() == 0

    def test_subscribe_after_close_raises(self):
        bus = EventBus()
        bus.close()

        with pytest.raises(RuntimeError):
            bus.subscribe("cart.changed", lambda payload: None)

    def test_buses_do_not_share_subscribers(self):
        """Test each bus owns its own registry."""
        first = EventBus()
        second = EventBus()
        first.subscribe("cart.changed", lambda payload: None)

        assert first.subscriber_count() == 1
        assert second.subscriber_count() == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
