"""
Read-through cache for the sources of the cart view.

Only raw cart rows (per user) and the catalog snapshot are cached; totals
are always derived again from them. Entries are replaced or dropped, never
modified in place, and are dropped when the event bus reports a change.

A read that was in flight while the user's cart was invalidated returns
its rows to the caller but does not store them. The row map is bounded:
expired entries are dropped on every write and the oldest entries are
evicted beyond ``max_users``.
"""
import logging
import time
from collections import OrderedDict
from typing import Callable, Dict, List, Optional, Tuple
from motor.motor_asyncio import AsyncIOMotorDatabase

from gameforge.core.config import settings
from gameforge.core.events import CART_CHANGED, CATALOG_CHANGED, EventBus
from gameforge.models.cart import CartLineItem
from gameforge.models.catalog import CatalogSnapshot
from gameforge.services.cart_service import CartService
from gameforge.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)


class CartReadCache:
    """TTL cache of cart rows keyed by user id plus one catalog snapshot."""

    def __init__(
        self,
        cart_ttl: Optional[float] = None,
        catalog_ttl: Optional[float] = None,
        max_users: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.cart_ttl = settings.CART_CACHE_TTL_SECONDS if cart_ttl is None else cart_ttl
        self.catalog_ttl = settings.CATALOG_CACHE_TTL_SECONDS if catalog_ttl is None else catalog_ttl
        self.max_users = settings.CART_CACHE_MAX_USERS if max_users is None else max_users
        self._clock = clock
        # Insertion order equals expiry order, the front expires first
        self._carts: "OrderedDict[str, Tuple[float, Tuple[CartLineItem, ...]]]" = OrderedDict()
        self._catalog: Optional[Tuple[float, CatalogSnapshot]] = None
        self._catalog_generation = 0
        # Only users with a read in flight appear here
        self._readers: Dict[str, int] = {}
        self._generations: Dict[str, int] = {}
        self._unsubscribers: List[Callable[[], None]] = []

    def __len__(self) -> int:
        return len(self._carts)

    async def get_items(self, user_id: str, db: AsyncIOMotorDatabase) -> List[CartLineItem]:
        """Cart rows for a user; read failures propagate and are not cached."""
        entry = self._carts.get(user_id)
        if entry and entry[0] > self._clock():
            return list(entry[1])

        generation = self._generations.get(user_id, 0)
        self._readers[user_id] = self._readers.get(user_id, 0) + 1
        try:
            items = await CartService.get_items(user_id, db)
            if self._generations.get(user_id, 0) == generation:
                self._store(user_id, items)
            else:
                logger.debug(f"Cart of user {user_id} changed during read, not caching")
            return items
        finally:
            self._end_read(user_id)

    async def get_catalog(self, db: AsyncIOMotorDatabase) -> CatalogSnapshot:
        """Catalog snapshot shared by every user."""
        if self._catalog and self._catalog[0] > self._clock():
            return self._catalog[1]

        generation = self._catalog_generation
        snapshot = await CatalogService.get_snapshot(db)
        if self._catalog_generation == generation:
            self._catalog = (self._clock() + self.catalog_ttl, snapshot)
        return snapshot

    def invalidate_user(self, user_id: str):
        if user_id in self._readers:
            self._generations[user_id] = self._generations.get(user_id, 0) + 1
        if self._carts.pop(user_id, None) is not None:
            logger.debug(f"Dropped cached cart of user {user_id}")

    def invalidate_catalog(self):
        self._catalog_generation += 1
        self._catalog = None

    def clear(self):
        self._carts.clear()
        self._catalog = None

    def attach(self, events: EventBus):
        """Subscribe invalidation handlers to the event bus."""
        self._unsubscribers.append(
            events.subscribe(CART_CHANGED, lambda payload: self.invalidate_user(payload.get("user_id", "")))
        )
        self._unsubscribers.append(
            events.subscribe(CATALOG_CHANGED, lambda payload: self.invalidate_catalog())
        )

    def detach(self):
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def _store(self, user_id: str, items: List[CartLineItem]):
        now = self._clock()
        self._carts.pop(user_id, None)
        self._carts[user_id] = (now + self.cart_ttl, tuple(items))

        while self._carts:
            oldest_user, (expires_at, _) = next(iter(self._carts.items()))
            if expires_at > now and len(self._carts) <= self.max_users:
                break
            del self._carts[oldest_user]

    def _end_read(self, user_id: str):
        remaining = self._readers[user_id] - 1
        if remaining:
            self._readers[user_id] = remaining
        else:
            del self._readers[user_id]
            self._generations.pop(user_id, None)
