"""Redis storage backend implementation.

Each slot is a single string key ``{prefix}slot:{name}``.
"""

import redis

from health_kb.core.storage.base import StorageBackend


class RedisStorageBackend(StorageBackend):
    """Redis storage backend holding one snapshot string per slot."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: str | None = None,
        url: str | None = None,
        prefix: str = "health_kb:",
        client: redis.Redis | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._db = db
        self._password = password
        self._url = url
        self._prefix = prefix
        self._client: redis.Redis | None = client

    def _get_client(self) -> redis.Redis:
        if self._client is None:
            if self._url:
                self._client = redis.from_url(self._url, decode_responses=True)
            else:
                self._client = redis.Redis(
                    host=self._host,
                    port=self._port,
                    db=self._db,
                    password=self._password,
                    decode_responses=True,
                )
        return self._client

    def _slot_key(self, slot: str) -> str:
        return f"{self._prefix}slot:{slot}"

    def read(self, slot: str) -> str | None:
        data = self._get_client().get(self._slot_key(slot))
        if isinstance(data, bytes):
            return data.decode("utf-8")
        return data

    def write(self, slot: str, data: str) -> None:
        self._get_client().set(self._slot_key(slot), data)

    def delete(self, slot: str) -> bool:
        return self._get_client().delete(self._slot_key(slot)) > 0

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
