import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from gameforge.api.deps import get_db, get_events
from gameforge.core.events import EventBus
from gameforge.models.purchase import PurchaseRecord
from gameforge.schemas.purchase import CreatePurchaseRequest, PurchaseResponse
from gameforge.services.purchase_ledger import PurchaseLedger

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=PurchaseResponse, status_code=status.HTTP_201_CREATED)
async def create_purchase(
    request: CreatePurchaseRequest,
    db: AsyncIOMotorDatabase = Depends(get_db),
    events: EventBus = Depends(get_events)
):
    """Append a single purchase record to the ledger."""
    record = PurchaseRecord(**request.model_dump())
    try:
        created = await PurchaseLedger.create_purchase(record, db, events)
    except Exception as e:
        logger.error(f"Error creating purchase for user {request.user_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create purchase"
        )
    return PurchaseResponse(**created.model_dump())


@router.get("/{user_id}", response_model=List[PurchaseResponse])
async def get_purchases(
    user_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """Get the purchase history of a user, oldest first."""
    try:
        purchases = await PurchaseLedger.list_purchases(user_id, db)
    except Exception as e:
        logger.error(f"Error fetching purchases for user {user_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch purchases"
        )
    return [PurchaseResponse(**purchase.model_dump()) for purchase in purchases]
