import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from gameforge.api.deps import get_db
from gameforge.models.catalog import AssetCategory
from gameforge.schemas.catalog import AssetResponse, BundleResponse
from gameforge.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/assets", response_model=List[AssetResponse])
async def get_assets(
    category: Optional[AssetCategory] = None,
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Get all assets in the store.

    Filters:
    - category: music, graphics, sounds, tools or scripts
    """
    try:
        assets = await CatalogService.list_assets(db, category=category)
    except Exception as e:
        logger.error(f"Error fetching assets (category={category}): {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch assets"
        )
    return [AssetResponse(**asset.model_dump()) for asset in assets]


@router.get("/assets/{asset_id}", response_model=AssetResponse)
async def get_asset(asset_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    """Get a single asset by id."""
    try:
        asset = await CatalogService.get_asset(asset_id, db)
    except Exception as e:
        logger.error(f"Error fetching asset {asset_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch asset"
        )

    if not asset:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Asset not found"
        )
    return AssetResponse(**asset.model_dump())


@router.get("/bundles", response_model=List[BundleResponse])
async def get_bundles(db: AsyncIOMotorDatabase = Depends(get_db)):
    """Get all asset bundles."""
    try:
        bundles = await CatalogService.list_bundles(db)
    except Exception as e:
        logger.error(f"Error fetching bundles: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch bundles"
        )
    return [BundleResponse(**bundle.model_dump()) for bundle in bundles]


@router.get("/bundles/{bundle_id}", response_model=BundleResponse)
async def get_bundle(bundle_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    """Get a single bundle by id."""
    try:
        bundle = await CatalogService.get_bundle(bundle_id, db)
    except Exception as e:
        logger.error(f"Error fetching bundle {bundle_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch bundle"
        )

    if not bundle:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Bundle not found"
        )
    return BundleResponse(**bundle.model_dump())
