"""Factory functions for creating storage backends from config."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from health_kb.core.config import StorageBackendConfig
    from health_kb.core.storage.base import StorageBackend


def create_storage_backend(config: "StorageBackendConfig") -> "StorageBackend":
    """Create storage backend instance from config.

    Args:
        config: Storage backend configuration

    Returns:
        Storage backend instance (memory, file or redis)

    Raises:
        ValueError: If the selected backend is missing its required settings
    """
    if config.backend_type == "redis":
        from health_kb.core.storage.redis import RedisStorageBackend

        redis_config = config.redis
        if redis_config is None:
            raise ValueError("Redis config required for redis backend")

        if redis_config.is_url_based():
            return RedisStorageBackend(url=redis_config.url, prefix=config.prefix)
        return RedisStorageBackend(
            host=redis_config.host or "localhost",
            port=redis_config.port,
            db=redis_config.db,
            password=redis_config.password,
            prefix=config.prefix,
        )

    if config.backend_type == "file":
        from health_kb.core.storage.file import FileStorageBackend

        if not config.path:
            raise ValueError("path required for file backend")
        return FileStorageBackend(config.path)

    from health_kb.core.storage.memory import MemoryStorageBackend

    return MemoryStorageBackend()
