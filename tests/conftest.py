"""Shared test fixtures."""

from pathlib import Path

import pytest

import sys

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from health_kb.core.config import KnowledgeStoreConfig
from health_kb.core.errors import ProviderError
from health_kb.core.storage.memory import MemoryStorageBackend
from health_kb.core.store import KnowledgeStore
from health_kb.embedding.base import EmbeddingFunction


class CountingEmbedding(EmbeddingFunction):
    """Embedding that returns fixed vectors per text and counts calls."""

    def __init__(self, vectors: dict[str, list[float]], dimension: int = 3) -> None:
        self._vectors = vectors
        self._dimension = dimension
        self.calls: list[str] = []

    @property
    def dimension(self) -> int:
        return self._dimension

    def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        return list(self._vectors[text])


class FailingEmbedding(EmbeddingFunction):
    """Embedding whose backend is always unreachable."""

    def __init__(self, dimension: int = 768) -> None:
        self._dimension = dimension
        self.calls = 0

    @property
    def dimension(self) -> int:
        return self._dimension

    def embed(self, text: str) -> list[float]:
        self.calls += 1
        raise ProviderError("backend unreachable")


@pytest.fixture
def backend() -> MemoryStorageBackend:
    return MemoryStorageBackend()


@pytest.fixture
def failing_embedding() -> FailingEmbedding:
    return FailingEmbedding()


@pytest.fixture
def store(backend: MemoryStorageBackend, failing_embedding: FailingEmbedding) -> KnowledgeStore:
    """Store with the default dimension whose provider always fails."""
    return KnowledgeStore(
        config=KnowledgeStoreConfig(),
        embedding_func=failing_embedding,
        storage=backend,
    )
