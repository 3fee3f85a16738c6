"""
Catalog service: read access to the asset store's assets and bundles.

The catalog is read-only from the cart's point of view. Snapshot reads
never raise; a failed read degrades to an empty catalog so that cart
items resolve to the "unknown" fallback instead of failing.
"""
import logging
from datetime import timedelta
from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from gameforge.core.events import CATALOG_CHANGED, EventBus
from gameforge.models.catalog import AssetCategory, CatalogAsset, CatalogBundle, CatalogSnapshot
from gameforge.utils.helpers import get_current_timestamp, to_document

logger = logging.getLogger(__name__)


class CatalogService:
    """Service for asset and bundle catalog reads."""

    @staticmethod
    async def list_assets(
        db: AsyncIOMotorDatabase,
        category: Optional[AssetCategory] = None
    ) -> List[CatalogAsset]:
        """Get all assets, optionally filtered by category."""
        query = {}
        if category:
            query["category"] = AssetCategory(category).value

        documents = await db.assets.find(query).to_list(length=None)
        return [CatalogAsset(**document) for document in documents]

    @staticmethod
    async def get_asset(asset_id: str, db: AsyncIOMotorDatabase) -> Optional[CatalogAsset]:
        """Get a single asset by id."""
        document = await db.assets.find_one({"_id": asset_id})
        return CatalogAsset(**document) if document else None

    @staticmethod
    async def list_bundles(db: AsyncIOMotorDatabase) -> List[CatalogBundle]:
        """Get all asset bundles."""
        documents = await db.bundles.find({}).to_list(length=None)
        return [CatalogBundle(**document) for document in documents]

    @staticmethod
    async def get_bundle(bundle_id: str, db: AsyncIOMotorDatabase) -> Optional[CatalogBundle]:
        """Get a single bundle by id."""
        document = await db.bundles.find_one({"_id": bundle_id})
        return CatalogBundle(**document) if document else None

    @staticmethod
    async def get_snapshot(db: AsyncIOMotorDatabase) -> CatalogSnapshot:
        """
        Load the whole catalog keyed by id.

        Each collection is read independently; a failing read is logged
        and contributes nothing to the snapshot.
        """
        try:
            assets = await CatalogService.list_assets(db)
        except Exception as e:
            logger.warning(f"Asset catalog read failed, resolving without assets: {e}")
            assets = []

        try:
            bundles = await CatalogService.list_bundles(db)
        except Exception as e:
            logger.warning(f"Bundle catalog read failed, resolving without bundles: {e}")
            bundles = []

        return CatalogSnapshot.from_lists(assets, bundles)

    @staticmethod
    async def seed_catalog(db: AsyncIOMotorDatabase, events: Optional[EventBus] = None) -> int:
        """
        Insert the sample catalog when no assets or bundles exist yet.

        Returns the number of inserted documents.
        """
        if await db.assets.count_documents({}) or await db.bundles.count_documents({}):
            logger.info("Catalog already populated, skipping seed")
            return 0

        assets, bundles = sample_catalog()
        await db.assets.insert_many([to_document(asset) for asset in assets])
        await db.bundles.insert_many([to_document(bundle) for bundle in bundles])

        logger.info(f"Seeded catalog with {len(assets)} assets and {len(bundles)} bundles")
        if events is not None:
            await events.publish(CATALOG_CHANGED, {"assets": len(assets), "bundles": len(bundles)})
        return len(assets) + len(bundles)


def sample_catalog():
    """Sample assets and bundles for development databases."""
    now = get_current_timestamp()

    def days_ago(days: int):
        return now - timedelta(days=days)

    assets = [
        CatalogAsset(
            id="asset-music-1",
            name="Epic Fantasy Orchestra",
            description="Sweeping orchestral piece with strings, brass and choir for fantasy games.",
            category=AssetCategory.MUSIC,
            price=2999,
            original_price=3499,
            thumbnail="https://images.unsplash.com/photo-1493225457124-a3eb161ffa5f?w=400&h=300",
            file_url="/assets/music/epic-fantasy-orchestra.mp3",
            preview_url="/assets/previews/epic-fantasy-preview.mp3",
            tags=["orchestral", "fantasy", "epic", "cinematic", "loop"],
            downloads=8420,
            rating=480,
            review_count=156,
            file_size="12.5 MB",
            format="MP3, WAV",
            created_at=days_ago(45),
            updated_at=days_ago(45),
        ),
        CatalogAsset(
            id="asset-music-2",
            name="Cyberpunk Synthwave Pack",
            description="Five retro-futuristic synthwave tracks for cyberpunk and sci-fi games.",
            category=AssetCategory.MUSIC,
            price=1999,
            thumbnail="https://images.unsplash.com/photo-1598300042247-d088f8ab3a91?w=400&h=300",
            file_url="/assets/music/cyberpunk-synthwave-pack.zip",
            preview_url="/assets/previews/cyberpunk-preview.mp3",
            tags=["synthwave", "cyberpunk", "electronic", "retro", "pack"],
            downloads=5210,
            rating=450,
            review_count=89,
            file_size="45.2 MB",
            format="MP3, OGG",
            created_at=days_ago(20),
            updated_at=days_ago(20),
        ),
        CatalogAsset(
            id="asset-graphics-1",
            name="Medieval Castle Tileset",
            description="2D tileset for medieval castles: walls, towers, gates. 32x32 pixel art.",
            category=AssetCategory.GRAPHICS,
            price=1499,
            thumbnail="https://images.unsplash.com/photo-1520637836862-4d197d17c17a?w=400&h=300",
            file_url="/assets/graphics/medieval-castle-tileset.zip",
            tags=["medieval", "castle", "tileset", "2D", "pixel-art"],
            downloads=6750,
            rating=470,
            review_count=124,
            file_size="15.3 MB",
            format="PNG, Unity Package",
            created_at=days_ago(35),
            updated_at=days_ago(35),
        ),
        CatalogAsset(
            id="asset-graphics-2",
            name="Sci-Fi UI Elements",
            description="Futuristic buttons, panels, progress bars and HUD components.",
            category=AssetCategory.GRAPHICS,
            price=999,
            thumbnail="https://images.unsplash.com/photo-1518709268805-4e9042af2176?w=400&h=300",
            file_url="/assets/graphics/scifi-ui-elements.psd",
            tags=["sci-fi", "UI", "HUD", "futuristic"],
            downloads=9340,
            rating=455,
            review_count=178,
            file_size="28.1 MB",
            format="PSD, PNG",
            created_at=days_ago(28),
            updated_at=days_ago(28),
        ),
        CatalogAsset(
            id="asset-sounds-1",
            name="Combat Sound Effects",
            description="Sword clashes, impacts and spell casts for action games.",
            category=AssetCategory.SOUNDS,
            price=1299,
            thumbnail="https://images.unsplash.com/photo-1511512578047-dfb367046420?w=400&h=300",
            file_url="/assets/sounds/combat-sfx.zip",
            tags=["combat", "sfx", "action"],
            downloads=7100,
            rating=460,
            review_count=97,
            file_size="32.0 MB",
            format="WAV, OGG",
            created_at=days_ago(15),
            updated_at=days_ago(15),
        ),
        CatalogAsset(
            id="asset-scripts-1",
            name="Platformer Controller",
            description="Tight, configurable 2D character controller with coyote time and jump buffering.",
            category=AssetCategory.SCRIPTS,
            price=0,
            thumbnail="https://images.unsplash.com/photo-1555066931-4365d14bab8c?w=400&h=300",
            file_url="/assets/scripts/platformer-controller.unitypackage",
            tags=["controller", "2D", "platformer", "free"],
            downloads=21400,
            rating=490,
            review_count=512,
            file_size="0.4 MB",
            format="Unity Package",
            created_at=days_ago(90),
            updated_at=days_ago(90),
        ),
    ]

    bundles = [
        CatalogBundle(
            id="bundle-1",
            name="Complete Indie Game Starter Pack",
            description="Music, sound effects, UI elements and scripts for a first indie game.",
            price=4999,
            original_price=8999,
            discount=44,
            thumbnail="https://images.unsplash.com/photo-1556438064-2d7646166914?w=400&h=300",
            asset_ids=["asset-music-2", "asset-sounds-1", "asset-graphics-2", "asset-scripts-1"],
            downloads=1250,
            rating=475,
            review_count=89,
            created_at=days_ago(35),
            updated_at=days_ago(35),
        ),
        CatalogBundle(
            id="bundle-2",
            name="Premium AAA Audio Collection",
            description="Orchestral music and high-fidelity sound effects.",
            price=9999,
            original_price=14999,
            discount=33,
            thumbnail="https://images.unsplash.com/photo-1493225457124-a3eb161ffa5f?w=400&h=300",
            asset_ids=["asset-music-1", "asset-music-2", "asset-sounds-1"],
            downloads=456,
            rating=495,
            review_count=45,
            created_at=days_ago(60),
            updated_at=days_ago(60),
        ),
    ]

    return assets, bundles
