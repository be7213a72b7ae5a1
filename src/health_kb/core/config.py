"""Configuration for the knowledge store with pydantic-based settings."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RedisConfig(BaseSettings):
    """Configuration for Redis connectivity."""

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: Optional[str] = Field(default=None, description="Redis connection URL")
    host: Optional[str] = Field(default=None, description="Redis server host")
    port: int = Field(default=6379, description="Redis server port")
    db: int = Field(default=0, ge=0, description="Redis database number")
    password: Optional[str] = Field(default=None, description="Redis password")

    def is_configured(self) -> bool:
        """Check if Redis is configured."""
        return self.url is not None or self.host is not None

    def is_url_based(self) -> bool:
        """Check if Redis is configured using URL."""
        return self.url is not None


class GeminiConfig(BaseSettings):
    """Configuration for the Gemini embedding endpoint."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: Optional[str] = Field(default=None, description="Gemini API key")
    model: str = Field(
        default="text-embedding-004", description="Gemini embedding model name"
    )
    api_base: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Generative Language API base URL",
    )
    timeout: float = Field(
        default=10.0, gt=0, description="HTTP timeout for embedding requests (seconds)"
    )

    def is_configured(self) -> bool:
        """Check if a Gemini API key is available."""
        return bool(self.api_key)


class StorageBackendConfig(BaseModel):
    """Configuration for the snapshot storage backend.

    Attributes:
        backend_type: Type of storage backend ('memory', 'file' or 'redis')
        path: Directory holding snapshot files (required if backend_type='file')
        redis: Redis connection configuration (required if backend_type='redis')
        prefix: Key prefix for the redis backend
    """

    backend_type: Literal["memory", "file", "redis"] = Field(
        default="memory", description="Storage backend type: 'memory', 'file' or 'redis'"
    )
    path: Optional[str] = Field(
        default=None, description="Snapshot directory (required if backend_type='file')"
    )
    redis: Optional[RedisConfig] = Field(
        default=None,
        description="Redis configuration (required if backend_type='redis')",
    )
    prefix: str = Field(
        default="health_kb:", description="Key prefix for storage backend"
    )

    @model_validator(mode="after")
    def validate_backend_requirements(self) -> "StorageBackendConfig":
        """Ensure file path or Redis config is provided for the chosen backend."""
        if self.backend_type == "file" and not self.path:
            raise ValueError("path is required when backend_type='file'")
        if self.backend_type == "redis" and self.redis is None:
            # Auto-create from environment
            self.redis = RedisConfig()
            if not self.redis.is_configured():
                raise ValueError(
                    "Redis configuration required when backend_type='redis'. "
                    "Set REDIS_URL or REDIS_HOST environment variable."
                )
        return self


class EmbeddingConfig(BaseModel):
    """Configuration for the primary embedding provider.

    Attributes:
        provider: 'pseudo' uses only the deterministic fallback,
            'sentence_transformers' a local model, 'gemini' the remote API
        model_name: sentence-transformers model (ignored by other providers)
        gemini: Gemini settings (used if provider='gemini')
    """

    provider: Literal["pseudo", "sentence_transformers", "gemini"] = Field(
        default="pseudo", description="Primary embedding provider"
    )
    model_name: str = Field(
        default="all-mpnet-base-v2", description="sentence-transformers model name"
    )
    gemini: Optional[GeminiConfig] = Field(
        default=None, description="Gemini configuration (used if provider='gemini')"
    )

    @model_validator(mode="after")
    def validate_gemini_required(self) -> "EmbeddingConfig":
        """Load Gemini settings from the environment when not given."""
        if self.provider == "gemini" and self.gemini is None:
            self.gemini = GeminiConfig()
        return self


class KnowledgeStoreConfig(BaseModel):
    """Configuration for the knowledge store.

    Attributes:
        embedding_dimension: Length of every vector in the store
        default_top_k: Results returned by search when top_k is not given
        embedding_timeout: Seconds allowed for one provider call before
            falling back; None disables the timeout
        slot_name: Name of the persisted snapshot slot
        storage: Storage backend configuration
        embedding: Embedding provider configuration
    """

    embedding_dimension: int = Field(
        default=768, gt=0, description="Dimension of embedding vectors"
    )
    default_top_k: int = Field(
        default=3, gt=0, description="Number of results returned by search"
    )
    embedding_timeout: Optional[float] = Field(
        default=10.0, gt=0, description="Timeout for a provider call (seconds)"
    )
    slot_name: str = Field(
        default="vectorStore", description="Name of the persisted snapshot slot"
    )
    storage: StorageBackendConfig = Field(default_factory=StorageBackendConfig)
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)

    @field_validator("slot_name")
    @classmethod
    def validate_slot_name(cls, v: str) -> str:
        """Slot names become file names and redis keys."""
        if not v or not v.strip():
            raise ValueError("slot_name must not be empty")
        if "/" in v or "\\" in v or v in {".", ".."}:
            raise ValueError(f"slot_name must not contain path separators, got {v!r}")
        return v


class AppSettings(BaseSettings):
    """Environment settings for the HTTP service (HEALTH_KB_* variables)."""

    model_config = SettingsConfigDict(
        env_prefix="HEALTH_KB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    embedding_dimension: int = Field(default=768, gt=0)
    embedding_provider: Literal["pseudo", "sentence_transformers", "gemini"] = "pseudo"
    embedding_model: str = "all-mpnet-base-v2"
    embedding_timeout: float = Field(default=10.0, gt=0)
    storage_backend: Literal["memory", "file", "redis"] = "file"
    storage_path: str = "./data"
    slot_name: str = "vectorStore"
    log_level: str = "INFO"

    def to_store_config(self) -> KnowledgeStoreConfig:
        """Build the store configuration these settings describe."""
        return KnowledgeStoreConfig(
            embedding_dimension=self.embedding_dimension,
            embedding_timeout=self.embedding_timeout,
            slot_name=self.slot_name,
            storage=StorageBackendConfig(
                backend_type=self.storage_backend,
                path=self.storage_path if self.storage_backend == "file" else None,
            ),
            embedding=EmbeddingConfig(
                provider=self.embedding_provider,
                model_name=self.embedding_model,
            ),
        )
