from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # MongoDB Configuration
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "gameforge_db"

    # Cache Configuration
    CART_CACHE_TTL_SECONDS: int = 30
    CATALOG_CACHE_TTL_SECONDS: int = 300
    CART_CACHE_MAX_USERS: int = 1024

    # Catalog
    SEED_CATALOG: bool = True  # Insert sample assets/bundles into an empty catalog

    # Application Settings
    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:5000"]
    API_V1_PREFIX: str = "/api"
    PROJECT_NAME: str = "GameForge Store"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
