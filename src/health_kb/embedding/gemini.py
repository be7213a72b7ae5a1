"""Gemini embedding implementation over the Generative Language REST API."""

from __future__ import annotations

import logging
from typing import Any

import requests

from health_kb.core.config import GeminiConfig
from health_kb.core.errors import ProviderError
from health_kb.embedding.base import EmbeddingFunction

logger = logging.getLogger(__name__)


class GeminiEmbedding(EmbeddingFunction):
    """Embedding via Gemini's ``embedContent`` endpoint.

    Requests ``output_dimensionality`` equal to the store dimension. HTTP
    errors, transport errors and responses without a usable vector raise
    ProviderError; there is no retry here.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-004",
        dimension: int = 768,
        api_base: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        if not api_key:
            raise ProviderError("Gemini API key is not configured")
        self._api_key = api_key
        self._model = model.removeprefix("models/")
        self._dimension = dimension
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_env(
        cls, dimension: int = 768, config: GeminiConfig | None = None
    ) -> "GeminiEmbedding":
        """Create from GEMINI_* environment configuration."""
        if config is None:
            config = GeminiConfig()
        if not config.is_configured():
            raise ProviderError(
                "Gemini not configured. Set GEMINI_API_KEY environment variable."
            )
        return cls(
            api_key=config.api_key or "",
            model=config.model,
            dimension=dimension,
            api_base=config.api_base,
            timeout=config.timeout,
        )

    @property
    def dimension(self) -> int:
        return self._dimension

    def _url(self, method: str) -> str:
        return f"{self._api_base}/models/{self._model}:{method}"

    def _request_body(self, text: str) -> dict[str, Any]:
        return {
            "model": f"models/{self._model}",
            "content": {"parts": [{"text": text}]},
            "outputDimensionality": self._dimension,
        }

    def _post(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self._session.post(
                self._url(method),
                headers={
                    "x-goog-api-key": self._api_key,
                    "Content-Type": "application/json",
                },
                json=payload,
                timeout=self._timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            raise ProviderError(f"Gemini {method} request failed: {exc}") from exc
        except ValueError as exc:
            raise ProviderError(f"Gemini {method} returned invalid JSON") from exc
        if not isinstance(data, dict):
            raise ProviderError(f"Gemini {method} returned an unexpected payload")
        return data

    def _parse_values(self, embedding: Any) -> list[float]:
        values = embedding.get("values") if isinstance(embedding, dict) else None
        if not isinstance(values, list) or not values:
            raise ProviderError("Gemini response has no embedding values")
        try:
            vector = [float(v) for v in values]
        except (TypeError, ValueError) as exc:
            raise ProviderError("Gemini embedding contains non-numeric values") from exc
        if len(vector) != self._dimension:
            raise ProviderError(
                f"Gemini returned {len(vector)} dimensions, expected {self._dimension}"
            )
        return vector

    def embed(self, text: str) -> list[float]:
        data = self._post("embedContent", self._request_body(text))
        return self._parse_values(data.get("embedding"))

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        data = self._post(
            "batchEmbedContents",
            {"requests": [self._request_body(text) for text in texts]},
        )
        embeddings = data.get("embeddings")
        if not isinstance(embeddings, list) or len(embeddings) != len(texts):
            raise ProviderError("Gemini batch response does not match request size")
        logger.debug("Embedded %d texts with %s", len(texts), self._model)
        return [self._parse_values(e) for e in embeddings]

    def close(self) -> None:
        self._session.close()
