from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from gameforge.core.database import get_database
from gameforge.core.events import EventBus
from gameforge.services.cart_cache import CartReadCache


async def get_db() -> AsyncIOMotorDatabase:
    """Dependency to get database instance."""
    return get_database()


async def get_events(request: Request) -> EventBus:
    """Dependency to get the application event bus created at startup."""
    return request.app.state.events


async def get_cart_cache(request: Request) -> CartReadCache:
    """Dependency to get the shared cart read cache."""
    return request.app.state.cart_cache
