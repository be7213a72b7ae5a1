"""Deterministic character-code embedding used when the provider fails."""

from health_kb.core.utils import l2_normalize
from health_kb.embedding.base import EmbeddingFunction


def _utf16_code_units(text: str) -> list[int]:
    data = text.encode("utf-16-le", "surrogatepass")
    return [int.from_bytes(data[i : i + 2], "little") for i in range(0, len(data), 2)]


def pseudo_embed(text: str, dimension: int = 768) -> list[float]:
    """Embed ``text`` from its character codes.

    Each UTF-16 code unit at position ``i`` adds ``code / 255`` to component
    ``i % dimension``; the sum is then L2-normalized. Empty text gives the
    all-zero vector. The result depends only on ``text`` and ``dimension``.

    Example:
        >>> pseudo_embed("ab", dimension=2)
        [0.7035..., 0.7107...]
    """
    if dimension <= 0:
        raise ValueError(f"dimension must be positive, got {dimension}")

    vector = [0.0] * dimension
    for i, code in enumerate(_utf16_code_units(text)):
        vector[i % dimension] += code / 255
    return l2_normalize(vector)


class PseudoEmbedding(EmbeddingFunction):
    """Embedding function backed by :func:`pseudo_embed`. Never fails."""

    def __init__(self, dimension: int = 768) -> None:
        if dimension <= 0:
            raise ValueError(f"dimension must be positive, got {dimension}")
        self._dimension = dimension

    @property
    def dimension(self) -> int:
        return self._dimension

    def embed(self, text: str) -> list[float]:
        return pseudo_embed(text, self._dimension)
