from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel

from gameforge.models.catalog import AssetCategory


class AssetResponse(BaseModel):
    """Schema for asset response."""
    id: str
    name: str
    description: str
    category: AssetCategory
    price: int
    original_price: Optional[int] = None
    thumbnail: str
    file_url: str
    preview_url: Optional[str] = None
    tags: List[str]
    downloads: int
    rating: int
    review_count: int
    file_size: str
    format: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BundleResponse(BaseModel):
    """Schema for bundle response."""
    id: str
    name: str
    description: str
    price: int
    original_price: Optional[int] = None
    discount: int
    thumbnail: str
    asset_ids: List[str]
    downloads: int
    rating: int
    review_count: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
