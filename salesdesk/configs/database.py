"""
Database configuration.

The API and workers share one database. A full URL (POSTGRES_URL) wins
over the individual fields; tests point it at SQLite.

Dependencies: pydantic, pydantic_settings
System role: Database connection configuration for the ORM
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Connection and pool settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="POSTGRES_",
        case_sensitive=False,
        extra="ignore",
    )

    url: str | None = Field(default=None, description="Async SQLAlchemy URL; overrides the fields below")
    host: str = Field(default="localhost")
    port: int = Field(default=5432)
    user: str = Field(default="postgres")
    password: str = Field(default="postgres")
    db: str = Field(default="salesdesk", description="Database name")
    require_ssl: bool = Field(default=False, description="Append ssl=require for managed Postgres")

    pool_size: int = Field(default=10, ge=1)
    max_overflow: int = Field(default=20, ge=0)
    pool_timeout: int = Field(default=30, ge=1, description="Seconds to wait for a pooled connection")
    echo_sql: bool = Field(default=False, description="Log every SQL statement")

    @property
    def is_sqlite(self) -> bool:
        return self.async_database_url.startswith("sqlite")

    @property
    def async_database_url(self) -> str:
        """SQLAlchemy URL for the async engine (asyncpg unless overridden)."""
        if self.url:
            return self.url
        query = "?ssl=require" if self.require_ssl else ""
        return f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.db}{query}"
