"""Exact cosine-similarity search over stored records.

A full linear scan: every record is scored against the query, O(N * D).
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from health_kb.core.models import SearchResult, VectorRecord


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors.

    Returns exactly 0.0 when the vectors differ in length, are empty, or
    either has zero norm.

    Example:
        >>> cosine_similarity([1.0, 0.0], [1.0, 0.0])
        1.0
        >>> cosine_similarity([1.0, 0.0], [0.0, 0.0])
        0.0
    """
    if len(a) != len(b) or not a:
        return 0.0

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (math.sqrt(norm_a) * math.sqrt(norm_b))


def score_records(
    query_vector: Sequence[float],
    records: Iterable[VectorRecord],
) -> list[SearchResult]:
    """Score every record against the query, preserving input order."""
    return [
        SearchResult(record=record, score=cosine_similarity(query_vector, record.vector))
        for record in records
    ]


def rank_records(
    query_vector: Sequence[float],
    records: Iterable[VectorRecord],
    top_k: int,
) -> list[SearchResult]:
    """Return the ``top_k`` records most similar to ``query_vector``.

    Results are ordered by descending score. ``sorted`` is stable, so records
    with equal scores stay in the order they were given (insertion order).
    """
    scored = score_records(query_vector, records)
    ranked = sorted(scored, key=lambda r: r.score, reverse=True)
    return ranked[:top_k]
