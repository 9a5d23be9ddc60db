"""
Configuration management for the Page Rules client.
"""

from typing import Optional

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class APIConfig(BaseModel):
    """Cloudflare API configuration."""
    api_token: Optional[str] = Field(None, description="Cloudflare API token")
    api_email: Optional[str] = Field(None, description="Account email for legacy API key auth")
    api_key: Optional[str] = Field(None, description="Global API key for legacy auth")
    api_url: str = Field(
        "https://api.cloudflare.com/client/v4",
        description="Cloudflare API base URL"
    )
    timeout: float = Field(30.0, description="Per-request timeout in seconds")
    max_retries: int = Field(3, description="Transport retries for idempotent GET requests")

    @model_validator(mode="after")
    def check_credentials(self):
        """Require either an API token or an email and API key pair."""
        if self.api_token:
            return self
        if self.api_email and self.api_key:
            return self
        raise ValueError("either api_token or both api_email and api_key must be set")


class Settings(BaseSettings):
    """Main configuration settings, read from CLOUDFLARE_PAGERULES_* variables."""
    api: APIConfig
    debug: bool = Field(False, description="Enable debug logging")

    model_config = SettingsConfigDict(
        env_prefix="CLOUDFLARE_PAGERULES_",
        env_nested_delimiter="__",
    )
