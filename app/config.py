from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List, Optional
from pydantic import Field, model_validator
from pydantic_settings import SettingsConfigDict

class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables.
    """
    # Application
    APP_ENV: str = "development"
    DEBUG: bool = False
    APP_NAME: str = "Mining Materials Dashboard"
    APP_VERSION: str = "1.0.0"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # PostgreSQL
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "postgres"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_SCHEMA: Optional[str] = None
    POSTGRES_POOL_MIN: int = Field(default=1, ge=1)
    POSTGRES_POOL_MAX: int = Field(default=10, ge=1)

    # Reports
    REPORT_MAX_WORKERS: int = Field(default=4, ge=1)
    TOP_PRODUCERS_LIMIT: int = Field(default=5, ge=1)
    # Stock prices are read for STOCK_PRICE_YEAR, months after STOCK_PRICE_AFTER_MONTH
    STOCK_PRICE_YEAR: int = 2025
    STOCK_PRICE_AFTER_MONTH: int = Field(default=6, ge=0, le=11)

    # HTTP
    CORS_ORIGINS: List[str] = ["*"]

    # Dashboard
    API_BASE_URL: str = "http://localhost:8000"

    @model_validator(mode="after")
    def require_password_in_production(self):
        if self.APP_ENV == "production" and self.POSTGRES_PASSWORD in (None, ""):
            raise ValueError("Missing PostgreSQL settings in production: ['POSTGRES_PASSWORD']")
        return self

    @model_validator(mode="after")
    def check_pool_bounds(self):
        if self.POSTGRES_POOL_MAX < self.POSTGRES_POOL_MIN:
            raise ValueError("POSTGRES_POOL_MAX must be >= POSTGRES_POOL_MIN")
        return self

    @property
    def postgres_conninfo(self) -> str:
        """libpq connection string built from the POSTGRES_* settings."""
        parts = [
            f"host={self.POSTGRES_HOST}",
            f"port={self.POSTGRES_PORT}",
            f"dbname={self.POSTGRES_DB}",
            f"user={self.POSTGRES_USER}",
        ]
        if self.POSTGRES_PASSWORD:
            parts.append(f"password={self.POSTGRES_PASSWORD}")
        if self.POSTGRES_SCHEMA:
            parts.append(f"options='-c search_path={self.POSTGRES_SCHEMA}'")
        return " ".join(parts)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False
    )

@lru_cache
def get_settings() -> Settings:
    """
    Cached settings instance to avoid repeated env loading.
    """
    return Settings()

settings = get_settings()
