"""
Checkout service - turns a resolved cart into purchase records.

Checkout is confirmation-only: no payment is captured and every record is
written with status "completed". Records are persisted one at a time, in
cart order, each awaited before the next. The cart is cleared only after
every record was written. There is no transaction across the writes: a
failure at item k leaves records 1..k-1 in the ledger and the cart intact.
"""
import logging
from typing import Any, Dict, List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from gameforge.core.events import PURCHASES_CHANGED, EventBus
from gameforge.models.purchase import PurchaseRecord, PurchaseStatus
from gameforge.schemas.cart import EnhancedCartItem
from gameforge.services.cart_service import CartService
from gameforge.services.purchase_ledger import PurchaseLedger
from gameforge.utils.helpers import format_currency

logger = logging.getLogger(__name__)

CHECKOUT_FAILED_MESSAGE = "Checkout failed. Please try again or contact support."


class CheckoutService:
    """Service for the cart checkout workflow."""

    @staticmethod
    def build_purchase(user_id: str, item: EnhancedCartItem) -> PurchaseRecord:
        """Purchase draft for one cart item: unit price times quantity."""
        return PurchaseRecord(
            user_id=user_id,
            asset_id=item.asset_id or None,
            bundle_id=item.bundle_id or None,
            amount=item.price * item.quantity,
            status=PurchaseStatus.COMPLETED
        )

    @staticmethod
    async def checkout(
        user_id: str,
        items: List[EnhancedCartItem],
        db: AsyncIOMotorDatabase,
        events: Optional[EventBus] = None
    ) -> Dict[str, Any]:
        """
        Create one purchase record per cart item, then empty the cart.

        Args:
            user_id: Owner of the cart
            items: Cart items already resolved by the cart aggregator
            db: Database instance
            events: Event bus notified once the checkout completes

        Returns:
            {"success": True, "message", "purchases", "total_amount"} when every
            step succeeded, otherwise {"success": False, "message"}.
        """
        if not user_id:
            return {"success": False, "message": "A user is required to check out"}

        if not items:
            return {"success": False, "message": "Cart is empty"}

        logger.info(f"Starting checkout for user {user_id} with {len(items)} items")

        purchases = []
        for position, item in enumerate(items, start=1):
            draft = CheckoutService.build_purchase(user_id, item)
            try:
                purchases.append(await PurchaseLedger.create_purchase(draft, db))
            except Exception as e:
                logger.error(
                    f"Checkout for user {user_id} failed at item {position}/{len(items)} "
                    f"(cart item {item.id}): {e}. {len(purchases)} purchase records were "
                    f"already written, cart left intact"
                )
                return {"success": False, "message": CHECKOUT_FAILED_MESSAGE}

        try:
            await CartService.clear_cart(user_id, db, events)
        except Exception as e:
            logger.error(
                f"Checkout for user {user_id} wrote {len(purchases)} purchase records "
                f"but could not clear the cart: {e}"
            )
            return {"success": False, "message": CHECKOUT_FAILED_MESSAGE}

        if events is not None:
            await events.publish(PURCHASES_CHANGED, {"user_id": user_id, "count": len(purchases)})

        total_amount = sum(purchase.amount for purchase in purchases)
        logger.info(
            f"Checkout completed for user {user_id}: {len(purchases)} purchases, "
            f"total {format_currency(total_amount)}"
        )

        return {
            "success": True,
            "message": "Checkout successful! Your purchases have been completed.",
            "purchases": purchases,
            "total_amount": total_amount
        }
