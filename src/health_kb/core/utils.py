"""Utility functions for record ids and vector arithmetic.

These helpers hold no store state and are shared by the embedding
providers, the similarity engine and the snapshot adapter.
"""

from __future__ import annotations

import math
import time
import uuid
from collections.abc import Sequence


def generate_record_id() -> str:
    """Generate a unique record id.

    Millisecond timestamp followed by a random hex suffix. Ids sort roughly
    by creation time but only uniqueness is guaranteed.

    Example:
        >>> generate_record_id()
        '1760842200123f3a9c1d0'
    """
    return f"{time.time_ns() // 1_000_000}{uuid.uuid4().hex[:9]}"


def vector_norm(vector: Sequence[float]) -> float:
    """Euclidean (L2) norm of ``vector``."""
    return math.sqrt(sum(v * v for v in vector))


def l2_normalize(vector: Sequence[float]) -> list[float]:
    """Scale ``vector`` to unit length.

    A zero vector is returned unchanged (as a new list of zeros).

    Example:
        >>> l2_normalize([3.0, 4.0])
        [0.6, 0.8]
    """
    norm = vector_norm(vector)
    if norm == 0:
        return [0.0] * len(vector)
    return [v / norm for v in vector]
