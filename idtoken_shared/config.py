"""
Shared configuration management for the ID token verifier.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


GOOGLE_CERTS_URL = "https://www.googleapis.com/oauth2/v3/certs"


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="IDTOKEN_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")


class VerifierConfig(BaseConfig):
    """Settings for the key cache and the verifier."""

    # Remote key set
    certs_url: str = Field(default=GOOGLE_CERTS_URL)
    refresh_lead_time_seconds: float = Field(default=3600.0, ge=0)
    fetch_timeout_seconds: float = Field(default=10.0, gt=0)

    # Static key set; takes precedence over certs_url when set
    static_certs_path: Optional[str] = Field(default=None)


def get_config(**overrides) -> VerifierConfig:
    """Get verifier configuration from the environment."""
    return VerifierConfig(**overrides)
