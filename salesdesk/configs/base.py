"""
Shared settings base.

The top-level Settings reads the project .env file through
DotEnvSettings; section classes read their own prefixed variables.

Dependencies: pydantic_settings
System role: Foundation for .env-backed configuration classes
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "staging", "production"]


class DotEnvSettings(BaseSettings):
    """Settings loaded from environment variables and the .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Environment = Field(
        default="development",
        description="Deployment environment; production hides the interactive API docs",
    )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"
