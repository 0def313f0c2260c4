"""Durable storage of the ClickDealer API configuration."""

from typing import Any

import structlog
from pydantic import ValidationError

from cpa_dashboard.core.config import settings
from cpa_dashboard.models.configuration import Configuration

logger = structlog.get_logger()


class ConfigStore:
    """Keeps the saved configuration under a single Redis key."""

    def __init__(self, redis: Any, key: str | None = None):
        self.redis = redis
        self.key = key or settings.CONFIG_STORAGE_KEY
        self.logger = logger.bind(component="config_store", key=self.key)

    async def load(self) -> Configuration | None:
        """Return the saved configuration, or None if nothing usable is stored."""
        raw = await self.redis.get(self.key)
        if raw is None:
            return None

        try:
            config = Configuration.from_storage(raw)
        except ValidationError:
            self.logger.warning("stored_configuration_unreadable")
            return None

        self.logger.info("configuration_loaded", **config.masked().model_dump())
        return config

    async def save(self, config: Configuration) -> None:
        await self.redis.set(self.key, config.to_storage())
        self.logger.info("configuration_saved", **config.masked().model_dump())

    async def clear(self) -> None:
        await self.redis.delete(self.key)
        self.logger.info("configuration_cleared")
