from typing import List, Literal, Optional
from datetime import datetime
from pydantic import BaseModel, Field, model_validator


class AddToCartRequest(BaseModel):
    """Schema for adding an asset or a bundle to a user's cart."""
    user_id: str = Field(min_length=1)
    asset_id: Optional[str] = None
    bundle_id: Optional[str] = None
    quantity: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def check_single_reference(self):
        if bool(self.asset_id) == bool(self.bundle_id):
            raise ValueError("Exactly one of asset_id or bundle_id must be set")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user-1",
                "asset_id": "asset-music-1",
                "quantity": 1
            }
        }


class CartItemResponse(BaseModel):
    """Schema for a raw cart row."""
    id: str
    user_id: str
    asset_id: Optional[str] = None
    bundle_id: Optional[str] = None
    quantity: int
    created_at: datetime

    class Config:
        from_attributes = True


class EnhancedCartItem(CartItemResponse):
    """Cart row joined with the catalog fields it resolves to."""
    type: Literal["asset", "bundle", "unknown"]
    name: str
    price: int  # Unit price in cents, 0 when unresolved
    thumbnail: str = ""
    line_total: int


class CartView(BaseModel):
    """Display-ready cart: enhanced rows plus derived totals."""
    user_id: str = ""
    status: Literal["idle", "success", "error"] = "idle"
    error: Optional[str] = None
    items: List[EnhancedCartItem] = Field(default_factory=list)
    item_count: int = 0
    total_price: int = 0
    is_empty: bool = True


class CartMutationResponse(BaseModel):
    """Notification text returned by cart mutations."""
    message: str
    item: Optional[CartItemResponse] = None
    removed: Optional[int] = None
