"""Core components for the knowledge store."""

from health_kb.core.config import (
    AppSettings,
    EmbeddingConfig,
    GeminiConfig,
    KnowledgeStoreConfig,
    RedisConfig,
    StorageBackendConfig,
)
from health_kb.core.errors import (
    KnowledgeStoreError,
    PersistenceWarning,
    ProviderError,
    ValidationError,
)
from health_kb.core.models import SearchResult, VectorRecord
from health_kb.core.search import cosine_similarity, rank_records
from health_kb.core.store import KnowledgeStore

__all__ = [
    "KnowledgeStore",
    "AppSettings",
    "EmbeddingConfig",
    "GeminiConfig",
    "KnowledgeStoreConfig",
    "RedisConfig",
    "StorageBackendConfig",
    "KnowledgeStoreError",
    "PersistenceWarning",
    "ProviderError",
    "ValidationError",
    "SearchResult",
    "VectorRecord",
    "cosine_similarity",
    "rank_records",
]
