from typing import List, Literal, Optional
from datetime import datetime
from pydantic import BaseModel, Field, model_validator

from gameforge.models.purchase import PurchaseStatus


class CreatePurchaseRequest(BaseModel):
    """Schema for appending a single purchase record."""
    user_id: str = Field(min_length=1)
    asset_id: Optional[str] = None
    bundle_id: Optional[str] = None
    amount: int = Field(ge=0)  # Cents
    status: Literal["completed", "pending", "failed"] = "completed"

    @model_validator(mode="after")
    def check_single_reference(self):
        if self.asset_id and self.bundle_id:
            raise ValueError("A purchase references an asset or a bundle, not both")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user-1",
                "bundle_id": "bundle-1",
                "amount": 4999,
                "status": "completed"
            }
        }


class PurchaseResponse(BaseModel):
    """Schema for purchase record response."""
    id: str
    user_id: str
    asset_id: Optional[str] = None
    bundle_id: Optional[str] = None
    amount: int
    status: PurchaseStatus
    created_at: datetime

    class Config:
        from_attributes = True


class CheckoutResponse(BaseModel):
    """Schema for a successful checkout."""
    message: str
    purchases: List[PurchaseResponse]
    total_amount: int
