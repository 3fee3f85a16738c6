from datetime import datetime
from typing import Dict, List, Optional
from enum import Enum
from pydantic import BaseModel, Field

from gameforge.utils.helpers import generate_id, get_current_timestamp


class AssetCategory(str, Enum):
    """Asset store category enumeration."""
    MUSIC = "music"
    GRAPHICS = "graphics"
    SOUNDS = "sounds"
    TOOLS = "tools"
    SCRIPTS = "scripts"


class CatalogAsset(BaseModel):
    """Purchasable asset. Prices are integer cents."""
    id: str = Field(default_factory=generate_id, alias="_id")
    name: str
    description: str = ""
    category: AssetCategory
    price: int = Field(ge=0)
    original_price: Optional[int] = None  # Pre-discount price
    thumbnail: str = ""
    file_url: str = ""
    preview_url: Optional[str] = None  # Audio/video preview
    tags: List[str] = Field(default_factory=list)
    downloads: int = 0
    rating: int = 0  # Stars * 100, e.g. 450 = 4.5 stars
    review_count: int = 0
    file_size: str = ""
    format: str = ""
    created_at: datetime = Field(default_factory=get_current_timestamp)
    updated_at: datetime = Field(default_factory=get_current_timestamp)

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "name": "Retro Chiptune Pack",
                "description": "Twenty 8-bit loops for platformers",
                "category": "music",
                "price": 1299,
                "thumbnail": "https://example.com/chiptune.jpg",
                "file_url": "/assets/music/retro-chiptune-pack.zip",
                "tags": ["8-bit", "retro"],
                "file_size": "45.2 MB",
                "format": "MP3, WAV"
            }
        }


class CatalogBundle(BaseModel):
    """Discounted group of assets sold as one item. Prices are integer cents."""
    id: str = Field(default_factory=generate_id, alias="_id")
    name: str
    description: str = ""
    price: int = Field(ge=0)
    original_price: Optional[int] = None  # Sum of the bundled asset prices
    discount: int = Field(default=0, ge=0, le=100)  # Percentage
    thumbnail: str = ""
    asset_ids: List[str] = Field(default_factory=list)
    downloads: int = 0
    rating: int = 0
    review_count: int = 0
    created_at: datetime = Field(default_factory=get_current_timestamp)
    updated_at: datetime = Field(default_factory=get_current_timestamp)

    class Config:
        populate_by_name = True


class CatalogSnapshot(BaseModel):
    """Id-keyed view of the whole catalog used for cart resolution."""
    assets: Dict[str, CatalogAsset] = Field(default_factory=dict)
    bundles: Dict[str, CatalogBundle] = Field(default_factory=dict)

    @classmethod
    def from_lists(cls, assets: List[CatalogAsset], bundles: List[CatalogBundle]) -> "CatalogSnapshot":
        return cls(
            assets={asset.id: asset for asset in assets},
            bundles={bundle.id: bundle for bundle in bundles},
        )
