"""ClickDealer API configuration entered through the settings form."""

import json

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from cpa_dashboard.core.config import settings


class ConfigurationInvalid(ValueError):
    """A required configuration field is missing."""

    def __init__(self, message: str = "Please fill in all required fields"):
        super().__init__(message)
        self.message = message


class MaskedConfiguration(BaseModel):
    """Configuration view that is safe to display or log."""

    api_key_set: bool
    api_key_hint: str | None = None
    affiliate_id: str
    api_endpoint: str


class Configuration(BaseModel):
    """Credentials and endpoint used to poll the ClickDealer API."""

    model_config = ConfigDict(frozen=True)

    api_key: SecretStr
    affiliate_id: str
    api_endpoint: str = Field(default_factory=lambda: settings.CLICKDEALER_DEFAULT_ENDPOINT)

    @field_validator("affiliate_id", mode="before")
    @classmethod
    def strip_affiliate_id(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v

    @field_validator("api_endpoint", mode="before")
    @classmethod
    def normalize_endpoint(cls, v: str | None) -> str:
        """Fall back to the default endpoint and drop any trailing slash."""
        if not v or not str(v).strip():
            return settings.CLICKDEALER_DEFAULT_ENDPOINT
        return str(v).strip().rstrip("/")

    def ensure_complete(self) -> "Configuration":
        """Raise ConfigurationInvalid unless the API key and affiliate ID are filled in."""
        if not self.api_key.get_secret_value().strip() or not self.affiliate_id:
            raise ConfigurationInvalid()
        return self

    def masked(self) -> MaskedConfiguration:
        key = self.api_key.get_secret_value()
        return MaskedConfiguration(
            api_key_set=bool(key),
            api_key_hint=f"••••{key[-4:]}" if len(key) > 4 else None,
            affiliate_id=self.affiliate_id,
            api_endpoint=self.api_endpoint,
        )

    def to_storage(self) -> str:
        """Serialize with the API key in clear text, for the config store only."""
        return json.dumps(
            {
                "api_key": self.api_key.get_secret_value(),
                "affiliate_id": self.affiliate_id,
                "api_endpoint": self.api_endpoint,
            }
        )

    @classmethod
    def from_storage(cls, raw: str) -> "Configuration":
        return cls.model_validate_json(raw)
