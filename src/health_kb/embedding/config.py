"""Factory for creating the primary embedding function from config."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from health_kb.core.config import EmbeddingConfig
    from health_kb.embedding.base import EmbeddingFunction


def create_embedding_function(
    config: "EmbeddingConfig", dimension: int = 768
) -> "EmbeddingFunction | None":
    """Create the primary embedding function from config.

    Returns None for the 'pseudo' provider: the store then embeds everything
    with the deterministic fallback.
    """
    if config.provider == "gemini":
        from health_kb.embedding.gemini import GeminiEmbedding

        return GeminiEmbedding.from_env(dimension=dimension, config=config.gemini)

    if config.provider == "sentence_transformers":
        from health_kb.embedding.default import DefaultEmbedding

        return DefaultEmbedding(model_name=config.model_name)

    return None
