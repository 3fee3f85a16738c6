import logging
from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from gameforge.core.events import PURCHASES_CHANGED, EventBus
from gameforge.models.purchase import PurchaseRecord
from gameforge.utils.helpers import to_document

logger = logging.getLogger(__name__)


class PurchaseLedger:
    """Append-only store of purchase records. Records are never updated or deleted."""

    @staticmethod
    async def create_purchase(
        record: PurchaseRecord,
        db: AsyncIOMotorDatabase,
        events: Optional[EventBus] = None
    ) -> PurchaseRecord:
        """Append one purchase record to the ledger."""
        await db.purchases.insert_one(to_document(record))

        logger.info(
            f"Recorded purchase {record.id} for user {record.user_id}: "
            f"amount={record.amount} status={record.status.value}"
        )
        if events is not None:
            await events.publish(PURCHASES_CHANGED, {"user_id": record.user_id, "count": 1})
        return record

    @staticmethod
    async def list_purchases(user_id: str, db: AsyncIOMotorDatabase) -> List[PurchaseRecord]:
        """Get a user's purchase history, oldest first."""
        documents = await db.purchases.find({"user_id": user_id}).sort("created_at", 1).to_list(length=None)
        return [PurchaseRecord(**document) for document in documents]
