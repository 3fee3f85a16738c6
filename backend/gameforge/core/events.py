"""
Application event bus.

A single EventBus is created by the startup hook, stored on ``app.state``
and closed by the shutdown hook. Services publish topic events after
successful writes; caches subscribe to drop stale entries.
"""
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

CART_CHANGED = "cart.changed"
PURCHASES_CHANGED = "purchases.changed"
CATALOG_CHANGED = "catalog.changed"

Subscriber = Callable[[Dict[str, Any]], Union[None, Awaitable[None]]]


class EventBus:
    """Topic based publish/subscribe with an explicit lifecycle."""

    def __init__(self):
        self._subscribers: Dict[str, List[Subscriber]] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, topic: str, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for a topic.

        Returns a function that removes this subscription again.
        """
        if self._closed:
            raise RuntimeError("Cannot subscribe to a closed event bus")

        # Replace the list so a publish in progress keeps its own snapshot
        self._subscribers[topic] = self._subscribers.get(topic, []) + [callback]
        logger.debug(f"Subscribed to '{topic}' ({len(self._subscribers[topic])} subscribers)")

        def unsubscribe():
            remaining = [cb for cb in self._subscribers.get(topic, []) if cb is not callback]
            if remaining:
                self._subscribers[topic] = remaining
            else:
                self._subscribers.pop(topic, None)

        return unsubscribe

    def subscriber_count(self, topic: Optional[str] = None) -> int:
        if topic is not None:
            return len(self._subscribers.get(topic, []))
        return sum(len(callbacks) for callbacks in self._subscribers.values())

    async def publish(self, topic: str, payload: Optional[Dict[str, Any]] = None) -> int:
        """
        Deliver an event to every subscriber of the topic, in subscription order.

        A failing subscriber is logged and skipped. Returns the number of
        subscribers that handled the event.
        """
        if self._closed:
            logger.debug(f"Dropping '{topic}' event, bus is closed")
            return 0

        payload = payload or {}
        delivered = 0
        for callback in self._subscribers.get(topic, []):
            try:
                result = callback(payload)
                if inspect.isawaitable(result):
                    await result
                delivered += 1
            except Exception as e:
                logger.error(f"Subscriber for '{topic}' failed: {e}")
        return delivered

    def close(self):
        """Drop all subscribers. Later publishes are ignored."""
        self._subscribers = {}
        self._closed = True
        logger.info("Event bus closed")
