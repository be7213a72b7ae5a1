"""
Health Knowledge Store

An embedding-based knowledge store for free-text health documents with
exact similarity search and durable snapshot persistence.

Features:
- Cosine-similarity top-K retrieval with deterministic tie-breaking
- Write-through persistence to memory, file or Redis slots
- Pluggable embedding providers (Gemini, sentence-transformers)
- Deterministic character-code fallback when the provider is unavailable
"""

from health_kb.core.config import KnowledgeStoreConfig
from health_kb.core.errors import (
    PersistenceWarning,
    ProviderError,
    ValidationError,
)
from health_kb.core.models import SearchResult, VectorRecord
from health_kb.core.search import cosine_similarity
from health_kb.core.store import KnowledgeStore
from health_kb.embedding.fallback import pseudo_embed

__version__ = "0.1.0"
__all__ = [
    "KnowledgeStore",
    "KnowledgeStoreConfig",
    "VectorRecord",
    "SearchResult",
    "ValidationError",
    "ProviderError",
    "PersistenceWarning",
    "cosine_similarity",
    "pseudo_embed",
]
