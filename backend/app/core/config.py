"""Core configuration settings loaded from environment variables."""
from functools import lru_cache
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Core
    APP_ENV: Literal["development", "staging", "production"] = "development"
    APP_NAME: str = "Growth Manager"
    API_V1_PREFIX: str = "/api/v1"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./growth_manager.db"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    # Data warehouse
    # "http" talks to the warehouse gateway; "mock" generates synthetic rows
    WAREHOUSE_PROVIDER: Literal["http", "mock"] = "mock"
    WAREHOUSE_BASE_URL: str = "http://localhost:5001/api/bigquery"
    WAREHOUSE_API_TOKEN: str = ""
    WAREHOUSE_TIMEOUT_SECONDS: float = 30.0

    # Sync
    SYNC_INTERVAL_MINUTES: int = 0  # 0 disables the periodic sync job
    SEED_DEMO_DATA: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
