"""
Generative model configuration.

Model names and sampling parameters for the Gemini chat and embedding
models used by identification, analysis, search and chat.

Dependencies: pydantic, pydantic_settings
System role: LLM and embedding model configuration
"""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class GenAISettings(BaseSettings):
    """Gemini model configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GENAI_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: SecretStr | None = Field(
        default=None,
        description="Google Generative AI API key",
    )
    model_name: str = Field(
        default="gemini-1.5-flash-latest",
        description="Chat model used for identification, analysis and chat",
    )
    identification_temperature: float = Field(
        default=0.2,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for product identification",
    )
    analysis_temperature: float = Field(
        default=0.4,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for per-product analysis",
    )
    chat_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for support chat and generative search",
    )
    max_output_tokens: int = Field(
        default=8192,
        description="Maximum tokens generated per call",
    )
    embedding_model: str = Field(
        default="models/text-embedding-004",
        description="Embedding model name",
    )
    embedding_dimension: int | None = Field(
        default=768,
        description="Expected embedding dimension; None disables the check",
    )
