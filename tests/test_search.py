"""Tests for cosine similarity and ranking."""

import math

import pytest

from health_kb.core.models import VectorRecord
from health_kb.core.search import cosine_similarity, rank_records
from health_kb.embedding.fallback import pseudo_embed


class TestCosineSimilarity:
    """Test cases for cosine_similarity."""

    def test_self_similarity(self) -> None:
        for v in ([1.0, 2.0, 3.0], [-0.5, 0.25, 4.0], pseudo_embed("sleep apnea")):
            assert cosine_similarity(v, v) == pytest.approx(1.0, abs=1e-9)

    def test_magnitude_independent(self) -> None:
        assert cosine_similarity([1.0, 2.0], [10.0, 20.0]) == pytest.approx(1.0)

    def test_orthogonal_and_opposite(self) -> None:
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == 0.0
        assert cosine_similarity([1.0, 2.0], [-1.0, -2.0]) == pytest.approx(-1.0)

    def test_known_value(self) -> None:
        assert cosine_similarity([1.0, 1.0, 0.0], [1.0, 0.0, 0.0]) == pytest.approx(
            1 / math.sqrt(2)
        )

    def test_degenerate_inputs_score_zero(self) -> None:
        assert cosine_similarity([0.0, 0.0], [1.0, 2.0]) == 0.0
        assert cosine_similarity([1.0, 2.0], [0.0, 0.0]) == 0.0
        assert cosine_similarity([], []) == 0.0
        assert cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0]) == 0.0


def _record(record_id: str, vector: list[float]) -> VectorRecord:
    return VectorRecord(id=record_id, text=record_id, vector=vector)


class TestRankRecords:
    """Test cases for rank_records."""

    def test_descending_order(self) -> None:
        records = [
            _record("low", [0.0, 1.0]),
            _record("high", [1.0, 0.0]),
            _record("mid", [1.0, 1.0]),
        ]
        ranked = rank_records([1.0, 0.0], records, top_k=3)
        assert [r.record.id for r in ranked] == ["high", "mid", "low"]
        assert ranked[0].score == pytest.approx(1.0)

    def test_ties_keep_input_order(self) -> None:
        records = [
            _record("a", [1.0, 0.0, 0.0]),
            _record("c", [1.0, 1.0, 0.0]),
            _record("b", [3.0, 0.0, 0.0]),
        ]
        ranked = rank_records([1.0, 0.0, 0.0], records, top_k=2)
        assert [r.record.id for r in ranked] == ["a", "b"]

    def test_top_k_larger_than_collection(self) -> None:
        records = [_record("a", [1.0]), _record("b", [2.0])]
        assert len(rank_records([1.0], records, top_k=10)) == 2

    def test_empty_collection(self) -> None:
        assert rank_records([1.0], [], top_k=3) == []
