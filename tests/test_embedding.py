"""Tests for embedding providers and the fallback wrapper."""

import sys
import threading
from unittest.mock import MagicMock

import pytest
import requests

from health_kb.core.config import EmbeddingConfig, GeminiConfig
from health_kb.core.errors import ProviderError
from health_kb.embedding.base import EmbeddingFunction
from health_kb.embedding.config import create_embedding_function
from health_kb.embedding.default import DefaultEmbedding
from health_kb.embedding.fallback import pseudo_embed
from health_kb.embedding.gemini import GeminiEmbedding
from health_kb.embedding.resilient import ResilientEmbedding

from conftest import CountingEmbedding, FailingEmbedding


class SlowEmbedding(EmbeddingFunction):
    """Embedding that blocks until released."""

    def __init__(self) -> None:
        self.release = threading.Event()

    @property
    def dimension(self) -> int:
        return 4

    def embed(self, text: str) -> list[float]:
        self.release.wait(timeout=5)
        return [1.0, 0.0, 0.0, 0.0]


class BrokenEmbedding(EmbeddingFunction):
    """Embedding that violates the contract with an arbitrary exception."""

    @property
    def dimension(self) -> int:
        return 4

    def embed(self, text: str) -> list[float]:
        raise RuntimeError("boom")


class TestResilientEmbedding:
    """Test cases for ResilientEmbedding."""

    def test_uses_primary_when_healthy(self) -> None:
        primary = CountingEmbedding({"bp": [0.0, 1.0, 0.0]})
        embedding = ResilientEmbedding(primary, dimension=3)
        assert embedding.embed("bp") == [0.0, 1.0, 0.0]
        assert embedding.stats == {"provider_calls": 1, "fallback_count": 0}
        embedding.close()

    def test_provider_error_falls_back(self) -> None:
        primary = FailingEmbedding(dimension=16)
        embedding = ResilientEmbedding(primary, dimension=16)
        assert embedding.embed("insulin") == pseudo_embed("insulin", 16)
        assert primary.calls == 1
        assert embedding.stats["fallback_count"] == 1
        embedding.close()

    def test_unexpected_exception_falls_back(self) -> None:
        embedding = ResilientEmbedding(BrokenEmbedding(), dimension=4, timeout=None)
        assert embedding.embed("x") == pseudo_embed("x", 4)

    def test_timeout_falls_back(self) -> None:
        primary = SlowEmbedding()
        embedding = ResilientEmbedding(primary, dimension=4, timeout=0.05)
        try:
            assert embedding.embed("slow") == pseudo_embed("slow", 4)
            assert embedding.stats["fallback_count"] == 1
        finally:
            primary.release.set()
            embedding.close()

    def test_wrong_dimension_falls_back(self) -> None:
        primary = CountingEmbedding({"t": [1.0, 0.0]}, dimension=2)
        embedding = ResilientEmbedding(primary, dimension=3, timeout=None)
        assert embedding.embed("t") == pseudo_embed("t", 3)

    @pytest.mark.parametrize(
        "vector",
        [
            [float("nan"), 0.0, 1.0],
            [float("inf"), 0.0, 1.0],
            [1.0, "x", None],
            [None, None, None],
        ],
    )
    def test_malformed_components_fall_back(self, vector) -> None:
        primary = CountingEmbedding({"t": vector})
        embedding = ResilientEmbedding(primary, dimension=3, timeout=None)
        assert embedding.embed("t") == pseudo_embed("t", 3)
        assert embedding.stats == {"provider_calls": 1, "fallback_count": 1}

    def test_numeric_strings_are_coerced(self) -> None:
        primary = CountingEmbedding({"t": ["1", 0, 0.5]})
        embedding = ResilientEmbedding(primary, dimension=3, timeout=None)
        assert embedding.embed("t") == [1.0, 0.0, 0.5]

    def test_counters_under_concurrency(self) -> None:
        embedding = ResilientEmbedding(FailingEmbedding(dimension=4), dimension=4)

        def worker() -> None:
            for _ in range(50):
                embedding.embed("q")

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert embedding.stats == {"provider_calls": 200, "fallback_count": 200}
        embedding.close()

    def test_without_primary(self) -> None:
        embedding = ResilientEmbedding(None, dimension=8)
        assert embedding.embed("abc") == pseudo_embed("abc", 8)
        assert embedding.stats == {"provider_calls": 0, "fallback_count": 1}


def _response(payload=None, status: int = 200, json_error: bool = False) -> MagicMock:
    response = MagicMock()
    response.status_code = status
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    if json_error:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = payload
    return response


class TestGeminiEmbedding:
    """Test cases for GeminiEmbedding with a mocked HTTP session."""

    def _embedding(self, response: MagicMock, dimension: int = 3) -> tuple:
        session = MagicMock()
        session.post.return_value = response
        embedding = GeminiEmbedding(
            api_key="key", model="models/text-embedding-004", dimension=dimension,
            session=session,
        )
        return embedding, session

    def test_embed(self) -> None:
        embedding, session = self._embedding(
            _response({"embedding": {"values": [0.1, 0.2, 0.3]}})
        )
        assert embedding.embed("hello") == [0.1, 0.2, 0.3]

        args, kwargs = session.post.call_args
        assert args[0].endswith("/models/text-embedding-004:embedContent")
        assert kwargs["headers"]["x-goog-api-key"] == "key"
        assert kwargs["json"]["outputDimensionality"] == 3
        assert kwargs["json"]["content"]["parts"][0]["text"] == "hello"
        assert kwargs["timeout"] == 10.0

    def test_embed_batch(self) -> None:
        embedding, session = self._embedding(
            _response({"embeddings": [{"values": [1, 0, 0]}, {"values": [0, 1, 0]}]})
        )
        assert embedding.embed_batch(["a", "b"]) == [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]
        assert session.post.call_args[0][0].endswith(":batchEmbedContents")
        assert embedding.embed_batch([]) == []

    @pytest.mark.parametrize(
        "response",
        [
            _response(status=403),
            _response(json_error=True),
            _response(["not", "a", "dict"]),
            _response({"embedding": {}}),
            _response({"embedding": {"values": ["a", "b", "c"]}}),
            _response({"embedding": {"values": [0.1, 0.2]}}),
        ],
    )
    def test_unusable_responses_raise_provider_error(self, response) -> None:
        embedding, _ = self._embedding(response)
        with pytest.raises(ProviderError):
            embedding.embed("hello")

    def test_transport_error(self) -> None:
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("offline")
        embedding = GeminiEmbedding(api_key="key", dimension=3, session=session)
        with pytest.raises(ProviderError, match="offline"):
            embedding.embed("hello")

    def test_requires_api_key(self) -> None:
        with pytest.raises(ProviderError):
            GeminiEmbedding(api_key="")
        with pytest.raises(ProviderError, match="GEMINI_API_KEY"):
            GeminiEmbedding.from_env(config=GeminiConfig(api_key=None))

    def test_from_env(self) -> None:
        embedding = GeminiEmbedding.from_env(
            dimension=256, config=GeminiConfig(api_key="k", timeout=3.0)
        )
        assert embedding.dimension == 256
        embedding.close()


class TestDefaultEmbedding:
    """Test cases for DefaultEmbedding without the model installed."""

    def test_missing_library_raises_provider_error(self, monkeypatch) -> None:
        monkeypatch.setitem(sys.modules, "sentence_transformers", None)
        embedding = DefaultEmbedding()
        with pytest.raises(ProviderError, match="all-mpnet-base-v2"):
            embedding.embed("text")


class TestCreateEmbeddingFunction:
    """Test cases for create_embedding_function."""

    def test_pseudo_has_no_primary(self) -> None:
        assert create_embedding_function(EmbeddingConfig()) is None

    def test_sentence_transformers(self) -> None:
        function = create_embedding_function(
            EmbeddingConfig(provider="sentence_transformers", model_name="m")
        )
        assert isinstance(function, DefaultEmbedding)

    def test_gemini(self) -> None:
        function = create_embedding_function(
            EmbeddingConfig(provider="gemini", gemini=GeminiConfig(api_key="k")),
            dimension=128,
        )
        assert isinstance(function, GeminiEmbedding)
        assert function.dimension == 128
