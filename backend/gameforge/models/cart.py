from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from gameforge.utils.helpers import generate_id, get_current_timestamp


class CartLineItem(BaseModel):
    """One cart row: a quantity of a single asset or bundle."""
    id: str = Field(default_factory=generate_id, alias="_id")
    user_id: str
    asset_id: Optional[str] = None
    bundle_id: Optional[str] = None
    quantity: int = Field(default=1, ge=1)
    seq: int = 0
    created_at: datetime = Field(default_factory=get_current_timestamp)

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "user_id": "user-1",
                "asset_id": "asset-music-1",
                "quantity": 1,
                "created_at": "2024-01-01T00:00:00"
            }
        }

    @property
    def has_single_reference(self) -> bool:
        """True when exactly one of asset_id / bundle_id is set."""
        return bool(self.asset_id) != bool(self.bundle_id)
