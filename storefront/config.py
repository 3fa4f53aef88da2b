from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the storefront service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Hosting platforms expose the connection string under different names
    DATABASE_URL: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "DATABASE_URL", "POSTGRES_URL", "POSTGRES_PRISMA_URL"
        ),
    )

    PLATFORM: str = "unknown"
    ENVIRONMENT: str = "development"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # Connection pool
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: float = 10.0
    # Maximum connection age in seconds (QueuePool has no idle timeout)
    DB_POOL_RECYCLE: int = 1800
    DB_CONNECT_TIMEOUT: int = 10

    # Startup initialization
    DB_INIT_MAX_RETRIES: int = Field(default=3, ge=1)
    DB_INIT_TIMEOUT: float = Field(default=15.0, ge=0)
    DB_INIT_BACKOFF: float = Field(default=2.0, ge=0)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
