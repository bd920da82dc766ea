# src/jwt_signer/config.py
"""
Configuration module for loading environment variables using pydantic-settings.
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PUBLISHED_NAME = "http.jwt_signer.digest_str"


class Environment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """
    Settings for the JWT signer.

    The signer is configured either from a directive file or from the
    ``duration``, ``secret`` and ``claims_json`` values directly.
    """

    # Core settings
    environment: Environment = Field(default=Environment.DEVELOPMENT)
    root_path: str = ""
    log_level: str = "INFO"

    # Signer configuration
    directive_file: Optional[Path] = None
    duration: Optional[str] = None
    secret: Optional[str] = None
    claims_json: Optional[str] = None
    published_name: str = DEFAULT_PUBLISHED_NAME

    # Consumers of the issued token
    redirect_url: Optional[str] = None
    response_header: Optional[str] = None

    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    model_config = SettingsConfigDict(
        env_prefix="JWT_SIGNER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Create a global instance of the settings
settings = Settings()
