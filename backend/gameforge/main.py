from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from gameforge.core.config import settings
from gameforge.core.database import connect_to_mongo, close_mongo_connection, ensure_indexes, get_database
from gameforge.core.events import EventBus
from gameforge.api.routes import catalog, cart, purchases
from gameforge.services.cart_cache import CartReadCache
from gameforge.services.catalog_service import CatalogService

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Backend API for the GameForge asset store - catalog, shopping cart, checkout and purchase history",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    logger.info("Starting up GameForge store backend...")
    await connect_to_mongo()

    app.state.events = EventBus()
    app.state.cart_cache = CartReadCache()
    app.state.cart_cache.attach(app.state.events)

    db = get_database()
    await ensure_indexes(db)
    if settings.SEED_CATALOG:
        await CatalogService.seed_catalog(db, app.state.events)
    logger.info("GameForge store backend started successfully")


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up services on shutdown."""
    logger.info("Shutting down GameForge store backend...")
    app.state.cart_cache.detach()
    app.state.cart_cache.clear()
    app.state.events.close()
    await close_mongo_connection()
    logger.info("GameForge store backend shut down successfully")


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "gameforge-store",
        "version": "1.0.0"
    }


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.PROJECT_NAME,
        "version": "1.0.0",
        "description": "GameForge Store API",
        "docs": "/docs",
        "health": "/health"
    }


# Include routers
app.include_router(catalog.router, prefix=settings.API_V1_PREFIX, tags=["Catalog"])
app.include_router(cart.router, prefix=f"{settings.API_V1_PREFIX}/cart", tags=["Cart"])
app.include_router(purchases.router, prefix=f"{settings.API_V1_PREFIX}/purchases", tags=["Purchases"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
