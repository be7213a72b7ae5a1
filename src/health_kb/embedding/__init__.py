"""Embedding function implementations."""

from health_kb.embedding.base import EmbeddingFunction
from health_kb.embedding.default import DefaultEmbedding
from health_kb.embedding.fallback import PseudoEmbedding, pseudo_embed
from health_kb.embedding.resilient import ResilientEmbedding

__all__ = [
    "EmbeddingFunction",
    "DefaultEmbedding",
    "PseudoEmbedding",
    "ResilientEmbedding",
    "pseudo_embed",
]
