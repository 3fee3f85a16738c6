"""
Cart aggregation: joins cart rows with the catalog and derives totals.

``enhance_cart_items`` and ``build_cart_view`` are pure; ``get_cart_view``
adds the reads and turns a failed cart read into an error view.
"""
import logging
from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from gameforge.models.cart import CartLineItem
from gameforge.models.catalog import CatalogSnapshot
from gameforge.schemas.cart import CartView, EnhancedCartItem
from gameforge.services.cart_cache import CartReadCache
from gameforge.services.cart_service import CartService
from gameforge.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

UNKNOWN_ASSET = "Unknown Asset"
UNKNOWN_BUNDLE = "Unknown Bundle"
UNKNOWN_ITEM = "Unknown Item"


def enhance_cart_item(item: CartLineItem, snapshot: CatalogSnapshot) -> EnhancedCartItem:
    """Resolve one cart row against the catalog."""
    fields = {
        "id": item.id,
        "user_id": item.user_id,
        "asset_id": item.asset_id,
        "bundle_id": item.bundle_id,
        "quantity": item.quantity,
        "created_at": item.created_at,
    }

    # Rows referencing both or neither break the exclusive-or and stay unknown
    if item.has_single_reference and item.asset_id:
        asset = snapshot.assets.get(item.asset_id)
        name = asset.name if asset else UNKNOWN_ASSET
        price = asset.price if asset else 0
        thumbnail = asset.thumbnail if asset else ""
        item_type = "asset"
    elif item.has_single_reference and item.bundle_id:
        bundle = snapshot.bundles.get(item.bundle_id)
        name = bundle.name if bundle else UNKNOWN_BUNDLE
        price = bundle.price if bundle else 0
        thumbnail = bundle.thumbnail if bundle else ""
        item_type = "bundle"
    else:
        name, price, thumbnail, item_type = UNKNOWN_ITEM, 0, "", "unknown"

    return EnhancedCartItem(
        **fields,
        type=item_type,
        name=name,
        price=price,
        thumbnail=thumbnail,
        line_total=price * item.quantity,
    )


def enhance_cart_items(items: List[CartLineItem], snapshot: CatalogSnapshot) -> List[EnhancedCartItem]:
    return [enhance_cart_item(item, snapshot) for item in items]


def build_cart_view(user_id: str, items: List[CartLineItem], snapshot: CatalogSnapshot) -> CartView:
    """Derive the display-ready cart from rows and a catalog snapshot."""
    enhanced = enhance_cart_items(items, snapshot)
    return CartView(
        user_id=user_id,
        status="success",
        items=enhanced,
        item_count=sum(item.quantity for item in items),
        total_price=sum(item.line_total for item in enhanced),
        is_empty=len(items) == 0,
    )


class CartAggregator:
    """Builds cart views for users, reading through an optional cache."""

    @staticmethod
    async def get_cart_view(
        user_id: str,
        db: AsyncIOMotorDatabase,
        cache: Optional[CartReadCache] = None
    ) -> CartView:
        """
        Get the enhanced cart of a user.

        Returns an idle empty view without reading anything when no user id
        is given, and an error view when the cart rows cannot be read.
        """
        if not user_id:
            return CartView()

        try:
            if cache is not None:
                items = await cache.get_items(user_id, db)
            else:
                items = await CartService.get_items(user_id, db)
        except Exception as e:
            logger.error(f"Failed to read cart of user {user_id}: {e}")
            return CartView(user_id=user_id, status="error", error="Failed to fetch cart items")

        if cache is not None:
            snapshot = await cache.get_catalog(db)
        else:
            snapshot = await CatalogService.get_snapshot(db)

        return build_cart_view(user_id, items, snapshot)
