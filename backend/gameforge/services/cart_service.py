import logging
from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from gameforge.core.database import next_sequence
from gameforge.core.events import CART_CHANGED, EventBus
from gameforge.models.cart import CartLineItem
from gameforge.utils.helpers import to_document

logger = logging.getLogger(__name__)


class CartService:
    """Service for cart line item storage."""

    @staticmethod
    async def get_items(user_id: str, db: AsyncIOMotorDatabase) -> List[CartLineItem]:
        """Get a user's cart rows in insertion order."""
        documents = await db.cart_items.find({"user_id": user_id}).sort(
            [("created_at", 1), ("seq", 1)]
        ).to_list(length=None)
        return [CartLineItem(**document) for document in documents]

    @staticmethod
    async def add_item(
        user_id: str,
        asset_id: Optional[str],
        bundle_id: Optional[str],
        quantity: int,
        db: AsyncIOMotorDatabase,
        events: Optional[EventBus] = None
    ) -> CartLineItem:
        """
        Add an asset or bundle to the cart.

        Every call creates a new row; an existing row for the same
        asset/bundle is left untouched.
        """
        if bool(asset_id) == bool(bundle_id):
            raise ValueError("Exactly one of asset_id or bundle_id must be set")

        item = CartLineItem(
            user_id=user_id,
            asset_id=asset_id or None,
            bundle_id=bundle_id or None,
            quantity=quantity
        )
        item.seq = await next_sequence(db, "cart_items")
        await db.cart_items.insert_one(to_document(item))

        logger.info(
            f"Added {'asset ' + asset_id if asset_id else 'bundle ' + bundle_id} "
            f"x{quantity} to cart of user {user_id} (item {item.id})"
        )
        await CartService._notify(user_id, events)
        return item

    @staticmethod
    async def remove_item(
        user_id: str,
        item_id: str,
        db: AsyncIOMotorDatabase,
        events: Optional[EventBus] = None
    ) -> bool:
        """
        Remove one row from a user's cart.

        Returns False when the row does not exist or belongs to another user.
        """
        result = await db.cart_items.delete_one({"_id": item_id, "user_id": user_id})
        removed = result.deleted_count > 0

        if removed:
            logger.info(f"Removed item {item_id} from cart of user {user_id}")
        else:
            logger.info(f"Item {item_id} not in cart of user {user_id}, nothing to remove")

        await CartService._notify(user_id, events)
        return removed

    @staticmethod
    async def clear_cart(
        user_id: str,
        db: AsyncIOMotorDatabase,
        events: Optional[EventBus] = None
    ) -> int:
        """Remove every row from a user's cart. Returns the number removed."""
        result = await db.cart_items.delete_many({"user_id": user_id})

        logger.info(f"Cleared cart of user {user_id} ({result.deleted_count} items)")
        await CartService._notify(user_id, events)
        return result.deleted_count

    @staticmethod
    async def _notify(user_id: str, events: Optional[EventBus]):
        if events is not None:
            await events.publish(CART_CHANGED, {"user_id": user_id})
