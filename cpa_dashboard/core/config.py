"""Application configuration using Pydantic settings."""

from typing import Any, Literal

from pydantic import Field, RedisDsn, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "CPA Dashboard API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Redis
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str | None = None
    REDIS_URL: RedisDsn | None = Field(default=None, validate_default=True)

    @field_validator("REDIS_URL", mode="before")
    @classmethod
    def assemble_redis_connection(cls, v: str | None, info: Any) -> str:
        """Build Redis URL from components if not provided."""
        if isinstance(v, str):
            return v

        data = info.data
        password_part = f":{data.get('REDIS_PASSWORD')}@" if data.get("REDIS_PASSWORD") else ""
        return f"redis://{password_part}{data.get('REDIS_HOST')}:{data.get('REDIS_PORT')}/{data.get('REDIS_DB')}"

    # Saved API configuration lives under this key (same name the dashboard used in local storage)
    CONFIG_STORAGE_KEY: str = "clickdealer_config"

    # CORS
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",  # Local dashboard frontend
        "http://localhost:8000",
    ]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list[str] = ["*"]
    CORS_ALLOW_HEADERS: list[str] = ["*"]

    # ClickDealer API
    CLICKDEALER_DEFAULT_ENDPOINT: str = "https://api.clickdealer.com/api/v1"
    CLICKDEALER_TIMEOUT: float = 15.0

    # Sync
    SYNC_INTERVAL_SECONDS: float = 30.0
    # "merge" keeps records missing from the latest response, "replace" mirrors it exactly
    SYNC_MODE: Literal["merge", "replace"] = "merge"

    # Dashboard
    RECENT_ACTIVITY_LIMIT: int = 5
    CURRENCY_SYMBOL: str = "$"


settings = Settings()
