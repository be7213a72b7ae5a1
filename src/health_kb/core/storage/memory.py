"""In-memory storage backend implementation.

Simplified implementation for development and testing. Contents live as long
as the backend object, so a second store built on the same instance sees
what the first one saved.
"""

import threading

from health_kb.core.storage.base import StorageBackend


class MemoryStorageBackend(StorageBackend):
    """In-memory storage backend using Python dict.

    Thread-safe implementation for local use.
    For durable storage, use FileStorageBackend or RedisStorageBackend.
    """

    def __init__(self, max_bytes: int | None = None) -> None:
        self._lock = threading.RLock()
        self._data: dict[str, str] = {}
        self._max_bytes = max_bytes

    def read(self, slot: str) -> str | None:
        with self._lock:
            return self._data.get(slot)

    def write(self, slot: str, data: str) -> None:
        size = len(data.encode("utf-8"))
        if self._max_bytes is not None and size > self._max_bytes:
            raise OSError(
                f"snapshot of {size} bytes exceeds quota of {self._max_bytes} bytes"
            )
        with self._lock:
            self._data[slot] = data

    def delete(self, slot: str) -> bool:
        with self._lock:
            return self._data.pop(slot, None) is not None

    def slots(self) -> list[str]:
        with self._lock:
            return list(self._data)
