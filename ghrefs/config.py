"""Configuration module using Pydantic Settings."""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Client settings loaded from ``GH_*`` environment variables and .env file.

    Attributes:
        token: Personal access token, sent as a Bearer token.
        user: Username for Basic authentication.
        password: Password for Basic authentication.
        user_agent: User-Agent header value.
        api_url: Base URL of the REST API.
        raw_url: Base URL serving raw file contents.
        timeout: Request timeout in seconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="GH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Authentication
    token: Optional[str] = Field(default=None, description="Bearer token")
    user: Optional[str] = Field(default=None, description="Basic auth user")
    password: Optional[str] = Field(default=None, description="Basic auth password")

    # Transport
    user_agent: str = Field(default="gh", description="User-Agent header")
    api_url: str = Field(
        default="https://api.github.com",
        description="REST API base URL",
    )
    raw_url: str = Field(
        default="https://raw.githubusercontent.com",
        description="Raw file contents base URL",
    )
    timeout: float = Field(default=30.0, description="Request timeout in seconds")

    @field_validator("api_url", "raw_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if not isinstance(v, str):
            return v
        return v.strip().rstrip("/")


# Global settings instance
_settings: Optional[ClientSettings] = None


def get_settings() -> ClientSettings:
    """Get the global settings instance.

    Returns:
        ClientSettings instance.
    """
    global _settings
    if _settings is None:
        _settings = ClientSettings()
    return _settings
