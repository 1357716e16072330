"""
Retrieval configuration.

Similarity thresholds and result caps for catalog search and support
chat.

Dependencies: pydantic, pydantic_settings
System role: Retrieval engine tuning
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrievalSettings(BaseSettings):
    """Settings for similarity search."""

    model_config = SettingsConfigDict(
        env_prefix="RETRIEVAL_",
        case_sensitive=False,
        extra="ignore",
    )

    catalog_threshold: float = Field(default=0.3, description="Minimum similarity for catalog search")
    chat_threshold: float = Field(default=0.5, description="Minimum similarity for chat context chunks")
    default_match_count: int = Field(default=6, ge=1, description="Results returned when unspecified")
    chat_match_count: int = Field(default=3, ge=1, description="Chunks used as chat context")
    max_match_count: int = Field(default=50, ge=1, description="Upper bound on returned results")
    chat_history_window: int = Field(default=6, ge=0, description="Prior chat turns sent to the model")
