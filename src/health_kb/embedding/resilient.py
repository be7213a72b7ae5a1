"""Embedding with a bounded timeout and a deterministic fallback."""

from __future__ import annotations

import logging
import math
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any

from health_kb.core.errors import ProviderError
from health_kb.embedding.base import EmbeddingFunction
from health_kb.embedding.fallback import pseudo_embed

logger = logging.getLogger(__name__)


class ResilientEmbedding(EmbeddingFunction):
    """
    Wraps a primary embedding function so that ``embed`` never fails.

    The primary call runs on a worker thread and is given ``timeout`` seconds.
    A ProviderError, a timeout, or a malformed vector (wrong length,
    non-numeric or non-finite components) is logged and answered with
    :func:`pseudo_embed` instead. Without a primary, every call uses the
    fallback directly.

    Tracks two counters:
    - provider_calls: attempts made against the primary
    - fallback_count: texts that were embedded by the fallback
    """

    def __init__(
        self,
        primary: EmbeddingFunction | None,
        dimension: int = 768,
        timeout: float | None = 10.0,
    ) -> None:
        self._primary = primary
        self._dimension = dimension
        self._timeout = timeout
        self._executor: ThreadPoolExecutor | None = None
        self._lock = threading.Lock()
        self._stats = {"provider_calls": 0, "fallback_count": 0}

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def primary(self) -> EmbeddingFunction | None:
        return self._primary

    @property
    def stats(self) -> dict[str, int]:
        with self._lock:
            return dict(self._stats)

    def _count(self, name: str) -> None:
        with self._lock:
            self._stats[name] += 1

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=4, thread_name_prefix="health-kb-embed"
                )
            return self._executor

    def _call_primary(self, primary: EmbeddingFunction, text: str) -> Any:
        if self._timeout is None:
            return primary.embed(text)
        future = self._get_executor().submit(primary.embed, text)
        try:
            return future.result(timeout=self._timeout)
        except FutureTimeoutError as exc:
            future.cancel()
            raise ProviderError(
                f"embedding provider timed out after {self._timeout}s"
            ) from exc

    def _validate(self, raw: Any) -> list[float]:
        """Coerce a provider response to a vector of finite floats.

        Raises:
            ProviderError: if the response is not a usable vector.
        """
        try:
            vector = [float(v) for v in raw]
        except (TypeError, ValueError) as exc:
            raise ProviderError(
                f"embedding provider returned non-numeric components: {exc}"
            ) from exc
        if len(vector) != self._dimension:
            raise ProviderError(
                f"embedding provider returned {len(vector)} dimensions, "
                f"expected {self._dimension}"
            )
        if not all(math.isfinite(v) for v in vector):
            raise ProviderError("embedding provider returned non-finite components")
        return vector

    def _fallback(self, text: str) -> list[float]:
        self._count("fallback_count")
        return pseudo_embed(text, self._dimension)

    def embed(self, text: str) -> list[float]:
        primary = self._primary
        if primary is None:
            return self._fallback(text)

        self._count("provider_calls")
        try:
            return self._validate(self._call_primary(primary, text))
        except ProviderError as exc:
            logger.warning("Embedding provider failed, using fallback: %s", exc)
            return self._fallback(text)
        except Exception:
            logger.warning(
                "Embedding provider raised unexpectedly, using fallback",
                exc_info=True,
            )
            return self._fallback(text)

    def close(self) -> None:
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=False, cancel_futures=True)
        if self._primary is not None:
            self._primary.close()
