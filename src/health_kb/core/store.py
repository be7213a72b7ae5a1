"""Knowledge store: embedding-based document retrieval with write-through persistence."""

from __future__ import annotations

import dataclasses
import logging
import threading
from collections import Counter
from collections.abc import Sequence
from typing import Any

from health_kb.core.config import KnowledgeStoreConfig
from health_kb.core.errors import ValidationError
from health_kb.core.models import SearchResult, VectorRecord, validate_metadata
from health_kb.core.search import rank_records
from health_kb.core.storage.base import StorageBackend
from health_kb.core.storage.snapshot import SnapshotPersistence
from health_kb.core.utils import generate_record_id
from health_kb.embedding.base import EmbeddingFunction
from health_kb.embedding.resilient import ResilientEmbedding

logger = logging.getLogger(__name__)


class KnowledgeStore:
    """Store of health documents searchable by semantic similarity.

    Every document is embedded once when added. Searches embed the query and
    rank all stored documents by cosine similarity (exact linear scan).
    The full collection is written to the persistence slot after every
    mutation and read back once at construction.

    Embedding never fails from the caller's point of view: provider errors
    and timeouts fall back to a deterministic character-code embedding.
    Only invalid input raises (ValidationError).

    The in-memory collection and its persisted mirror are guarded by one
    lock, so a single instance can be shared between threads. Embedding
    happens outside the lock.

    Example:
        # Fallback embedding only, in-memory snapshot
        store = KnowledgeStore()

        # File-backed store using Gemini embeddings
        from health_kb.core.config import (
            EmbeddingConfig, KnowledgeStoreConfig, StorageBackendConfig,
        )

        config = KnowledgeStoreConfig(
            storage=StorageBackendConfig(backend_type="file", path="./data"),
            embedding=EmbeddingConfig(provider="gemini"),
        )
        store = KnowledgeStore(config=config)

        doc_id = store.add("Heart disease prevention...", {"title": "Heart"})
        results = store.search("diet for heart health", top_k=1)
    """

    def __init__(
        self,
        config: KnowledgeStoreConfig | None = None,
        embedding_func: EmbeddingFunction | None = None,
        storage: StorageBackend | None = None,
        persistence: SnapshotPersistence | None = None,
    ) -> None:
        self.config = config or KnowledgeStoreConfig()
        self._lock = threading.RLock()

        if persistence is not None:
            self._persistence = persistence
        else:
            if storage is None:
                from health_kb.core.storage.config import create_storage_backend

                storage = create_storage_backend(self.config.storage)
            self._persistence = SnapshotPersistence(
                storage,
                slot=self.config.slot_name,
                dimension=self.config.embedding_dimension,
            )

        self._embedder = self._wrap_embedding(embedding_func)

        self._records: list[VectorRecord] = self._persistence.load()
        self._index: dict[str, VectorRecord] = {r.id: r for r in self._records}
        logger.info(
            "Knowledge store ready with %d records (slot %r)",
            len(self._records),
            self._persistence.slot,
        )

    def _wrap_embedding(
        self, embedding_func: EmbeddingFunction | None
    ) -> ResilientEmbedding:
        if isinstance(embedding_func, ResilientEmbedding):
            return embedding_func
        if embedding_func is None:
            from health_kb.embedding.config import create_embedding_function

            try:
                embedding_func = create_embedding_function(
                    self.config.embedding, dimension=self.dimension
                )
            except Exception as exc:
                logger.warning(
                    "Embedding provider %r unavailable, using fallback only: %s",
                    self.config.embedding.provider,
                    exc,
                )
                embedding_func = None
        return ResilientEmbedding(
            embedding_func,
            dimension=self.dimension,
            timeout=self.config.embedding_timeout,
        )

    @property
    def dimension(self) -> int:
        return self.config.embedding_dimension

    @property
    def embedder(self) -> ResilientEmbedding:
        return self._embedder

    @property
    def persistence(self) -> SnapshotPersistence:
        return self._persistence

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _flush(self) -> bool:
        return self._persistence.save(self._records)

    def add(self, text: str, metadata: dict[str, Any] | None = None) -> str:
        """Embed and store a document. Returns the new record id.

        Raises:
            ValidationError: if ``text`` is empty or whitespace-only, or
                ``metadata`` holds non-scalar values.
        """
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("text must be a non-empty string")
        clean_metadata = validate_metadata(metadata)

        vector = self._embedder.embed(text)
        record = VectorRecord(text=text, vector=vector, metadata=clean_metadata)

        with self._lock:
            while record.id in self._index:
                record = dataclasses.replace(record, id=generate_record_id())
            self._records.append(record)
            self._index[record.id] = record
            self._flush()

        logger.debug("Added record %s (%d chars)", record.id, len(text))
        return record.id

    def search(
        self,
        query: str,
        top_k: int | None = None,
        category: str | None = None,
    ) -> list[SearchResult]:
        """Return the records most similar to ``query``.

        Results are ordered by descending score; equal scores keep insertion
        order. An empty store returns [] without embedding the query.

        Args:
            query: Search text
            top_k: Maximum number of results (defaults to config.default_top_k)
            category: Only consider records whose metadata category matches

        Raises:
            ValidationError: if ``query`` is empty or ``top_k`` is below 1.
        """
        if not isinstance(query, str) or not query.strip():
            raise ValidationError("query must be a non-empty string")
        k = self.config.default_top_k if top_k is None else top_k
        if isinstance(k, bool) or not isinstance(k, int) or k < 1:
            raise ValidationError(f"top_k must be a positive integer, got {top_k!r}")

        with self._lock:
            if not self._records:
                return []

        query_vector = self._embedder.embed(query)

        with self._lock:
            candidates = list(self._records)
        if category is not None:
            candidates = [r for r in candidates if r.category == category]

        return rank_records(query_vector, candidates, k)

    def get(self, record_id: str) -> VectorRecord | None:
        with self._lock:
            return self._index.get(record_id)

    def delete(self, record_id: str) -> bool:
        """Remove one record. Returns False if the id is unknown."""
        with self._lock:
            record = self._index.pop(record_id, None)
            if record is None:
                return False
            self._records.remove(record)
            self._flush()
        logger.debug("Deleted record %s", record_id)
        return True

    def clear(self) -> None:
        """Remove every record and persist the empty collection."""
        with self._lock:
            count = len(self._records)
            self._records.clear()
            self._index.clear()
            self._flush()
        logger.info("Cleared knowledge store (%d records removed)", count)

    def list(self) -> list[VectorRecord]:
        """All records in insertion order."""
        with self._lock:
            return list(self._records)

    def stats(self) -> dict[str, Any]:
        """Get store statistics."""
        with self._lock:
            categories = Counter(r.category or "uncategorized" for r in self._records)
            total = len(self._records)
        return {
            "total_records": total,
            "dimension": self.dimension,
            "slot": self._persistence.slot,
            "categories": dict(categories),
            **self._embedder.stats,
        }

    @staticmethod
    def format_context(results: Sequence[SearchResult]) -> str:
        """Format search results as knowledge context for an LLM prompt."""
        if not results:
            return ""

        lines = ["\n\nRelevant health knowledge from your knowledge base:"]
        for i, result in enumerate(results, 1):
            title = result.record.title or "Health Information"
            lines.append(f"\n{i}. {title}: {result.record.text}")

        return "\n".join(lines) + "\n"

    def close(self) -> None:
        """Clean up resources."""
        self._embedder.close()
        self._persistence.close()
