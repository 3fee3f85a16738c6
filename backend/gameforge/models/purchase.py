"""Purchase ledger model for MongoDB."""

from datetime import datetime
from typing import Optional
from enum import Enum
from pydantic import BaseModel, Field

from gameforge.utils.helpers import generate_id, get_current_timestamp


class PurchaseStatus(str, Enum):
    """Purchase status enumeration."""
    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"


class PurchaseRecord(BaseModel):
    """Append-only ledger entry for one former cart line item."""
    id: str = Field(default_factory=generate_id, alias="_id")
    user_id: str
    asset_id: Optional[str] = None
    bundle_id: Optional[str] = None
    amount: int = Field(ge=0)  # Unit price * quantity, in cents
    status: PurchaseStatus = PurchaseStatus.COMPLETED
    created_at: datetime = Field(default_factory=get_current_timestamp)

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "user_id": "user-1",
                "asset_id": "asset-music-1",
                "amount": 2598,
                "status": "completed"
            }
        }
