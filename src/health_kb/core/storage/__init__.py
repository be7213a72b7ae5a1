"""Storage backends for persisted snapshots.

- MemoryStorageBackend: In-memory slots for development/testing
- FileStorageBackend: One JSON file per slot
- RedisStorageBackend: One Redis string key per slot
- SnapshotPersistence: Serializes the whole record collection into a slot
"""

from health_kb.core.storage.base import StorageBackend
from health_kb.core.storage.file import FileStorageBackend
from health_kb.core.storage.memory import MemoryStorageBackend
from health_kb.core.storage.redis import RedisStorageBackend
from health_kb.core.storage.snapshot import SnapshotPersistence

__all__ = [
    "StorageBackend",
    "MemoryStorageBackend",
    "FileStorageBackend",
    "RedisStorageBackend",
    "SnapshotPersistence",
]
