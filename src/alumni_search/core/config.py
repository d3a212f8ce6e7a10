"""Configuration for the search engine with pydantic-based settings."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SearchConfig(BaseModel):
    """Tuning knobs for search and recommendation.

    Attributes:
        default_top_k: Number of hits returned when the caller gives no limit
        max_top_k: Upper bound applied to any caller-supplied limit
        recommend_top_k: Number of jobs returned for a profile recommendation
        suggest_top_n: Number of jobs returned for a resume suggestion
        embed_workers: Size of the worker pool used for batch embedding
        min_resume_chars: Shortest resume text accepted for suggestions
    """

    default_top_k: int = Field(
        default=10, gt=0, description="Hits returned when no limit is given"
    )
    max_top_k: int = Field(
        default=100, gt=0, description="Upper bound for caller-supplied limits"
    )
    recommend_top_k: int = Field(
        default=12, gt=0, description="Jobs returned for a profile recommendation"
    )
    suggest_top_n: int = Field(
        default=10, gt=0, description="Jobs returned for a resume suggestion"
    )
    embed_workers: int = Field(
        default=4, gt=0, le=64, description="Concurrent embedding calls in batches"
    )
    min_resume_chars: int = Field(
        default=20, ge=1, description="Shortest resume text accepted"
    )

    @model_validator(mode="after")
    def validate_limits(self) -> "SearchConfig":
        """Validate that default_top_k <= max_top_k."""
        if self.default_top_k > self.max_top_k:
            raise ValueError(
                f"default_top_k ({self.default_top_k}) must be <= "
                f"max_top_k ({self.max_top_k})"
            )
        return self

    def clamp_top_k(self, top_k: Optional[int]) -> int:
        """Resolve a caller-supplied limit against the defaults."""
        if top_k is None:
            return self.default_top_k
        return max(0, min(int(top_k), self.max_top_k))


class EmbeddingSettings(BaseSettings):
    """Configuration for the embedding provider.

    A missing API key is allowed here; embed calls fail fast until it is set.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    openai_api_key: Optional[str] = Field(
        default=None, description="Credential for the remote embedding service"
    )
    embedding_provider: Literal["openai", "local"] = Field(
        default="openai", description="Embedding backend: 'openai' or 'local'"
    )
    embedding_model: str = Field(
        default="text-embedding-3-small", description="Remote embedding model name"
    )
    embedding_base_url: Optional[str] = Field(
        default=None, description="Base URL of an OpenAI-compatible endpoint"
    )
    embedding_timeout: float = Field(
        default=30.0, gt=0, description="Request timeout in seconds"
    )
    embedding_max_retries: int = Field(
        default=0, ge=0, description="Client-level retries before failing"
    )
    local_embedding_model: str = Field(
        default="all-MiniLM-L6-v2", description="sentence-transformers model name"
    )
    local_embedding_device: Optional[str] = Field(
        default=None, description="Torch device for the local model, e.g. 'cpu'"
    )

    @field_validator("openai_api_key")
    @classmethod
    def blank_key_is_missing(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty credential as unset."""
        if v is not None and not v.strip():
            return None
        return v

    def is_configured(self) -> bool:
        """Check if the remote provider has a credential."""
        return self.openai_api_key is not None


class StorageSettings(BaseSettings):
    """Locations of the persisted vector index and job cache."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    vector_store_path: str = Field(
        default="data/vector-store.json", description="Persisted vector index file"
    )
    job_index_path: str = Field(
        default="data/jobIndex.json", description="Persisted job embedding cache"
    )
    strict_dimension: bool = Field(
        default=False, description="Reject vectors whose length differs from the store"
    )


class AppSettings(BaseSettings):
    """HTTP server and logging settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8080, gt=0, description="Bind port")
    log_level: str = Field(default="INFO", description="loguru level name")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate the log level name."""
        valid = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
        level = v.upper()
        if level not in valid:
            raise ValueError(f"log_level must be one of {valid}, got {v}")
        return level


def get_embedding_settings() -> EmbeddingSettings:
    """Get embedding configuration from environment variables."""
    return EmbeddingSettings()


def get_storage_settings() -> StorageSettings:
    """Get storage configuration from environment variables."""
    return StorageSettings()
