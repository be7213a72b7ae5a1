"""Local embedding implementation using sentence-transformers."""

from functools import cached_property

from health_kb.core.errors import ProviderError
from health_kb.embedding.base import EmbeddingFunction


class DefaultEmbedding(EmbeddingFunction):
    """
    Local embedding using sentence-transformers.

    Uses the all-mpnet-base-v2 model by default, whose 768-dimensional
    output matches the store's default dimension. The model is loaded on
    first use; load and encode failures surface as ProviderError.
    """

    def __init__(self, model_name: str = "all-mpnet-base-v2") -> None:
        self._model_name = model_name

    @cached_property
    def _encoder(self):
        try:
            from sentence_transformers import SentenceTransformer

            return SentenceTransformer(self._model_name)
        except Exception as exc:
            raise ProviderError(
                f"could not load sentence-transformers model {self._model_name!r}: {exc}"
            ) from exc

    @property
    def dimension(self) -> int:
        return self._encoder.get_sentence_embedding_dimension()

    def embed(self, text: str) -> list[float]:
        try:
            embedding = self._encoder.encode(text, convert_to_numpy=True)
        except ProviderError:
            raise
        except Exception as exc:
            raise ProviderError(f"sentence-transformers encode failed: {exc}") from exc
        return embedding.tolist()

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        try:
            embeddings = self._encoder.encode(texts, convert_to_numpy=True)
        except ProviderError:
            raise
        except Exception as exc:
            raise ProviderError(f"sentence-transformers encode failed: {exc}") from exc
        return embeddings.tolist()
