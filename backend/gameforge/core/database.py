import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ReturnDocument
from gameforge.core.config import settings

logger = logging.getLogger(__name__)

# Global MongoDB client
_client: AsyncIOMotorClient = None
_database: AsyncIOMotorDatabase = None


async def connect_to_mongo():
    """Connect to MongoDB."""
    global _client, _database
    # Read datetimes back as UTC-aware
    _client = AsyncIOMotorClient(settings.MONGODB_URI, tz_aware=True)
    _database = _client[settings.MONGODB_DB_NAME]
    logger.info(f"Connected to MongoDB: {settings.MONGODB_DB_NAME}")


async def close_mongo_connection():
    """Close MongoDB connection."""
    global _client, _database
    if _client:
        _client.close()
        _client = None
        _database = None
        logger.info("Closed MongoDB connection")


async def ensure_indexes(db: AsyncIOMotorDatabase):
    """Create the indexes the cart and ledger queries rely on."""
    await db.cart_items.create_index([("user_id", 1), ("created_at", 1), ("seq", 1)])
    await db.purchases.create_index([("user_id", 1), ("created_at", 1)])
    await db.assets.create_index("category")


async def next_sequence(db: AsyncIOMotorDatabase, name: str) -> int:
    """Atomically increment and return the named counter."""
    counter = await db.counters.find_one_and_update(
        {"_id": name},
        {"$inc": {"seq": 1}},
        upsert=True,
        return_document=ReturnDocument.AFTER
    )
    return counter["seq"]


def get_database() -> AsyncIOMotorDatabase:
    """Get MongoDB database instance."""
    return _database
