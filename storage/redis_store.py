"""Redis storage for identity and session data."""

from typing import Optional
import redis

from .base import KeyValueStore, StorageError


class RedisStore(KeyValueStore):
    """Store values in Redis."""

    storage_type = "redis"

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        prefix: str = "ls",
        ttl: Optional[int] = None,
        client: Optional[redis.Redis] = None
    ):
        super().__init__(prefix)
        self.ttl = ttl
        try:
            self.client = client or redis.Redis(host=host, port=port, decode_responses=True)
            self.client.ping()
            self.enabled = True
        except redis.RedisError:
            self.enabled = False

    def is_supported(self) -> bool:
        return self.enabled

    def _get_raw(self, qualified_key: str) -> Optional[str]:
        try:
            return self.client.get(qualified_key)
        except redis.RedisError as e:
            raise StorageError(f"Redis read failed for {qualified_key}") from e

    def _set_raw(self, qualified_key: str, raw: str) -> None:
        try:
            if self.ttl:
                self.client.setex(qualified_key, self.ttl, raw)
            else:
                self.client.set(qualified_key, raw)
        except redis.RedisError as e:
            raise StorageError(f"Redis write failed for {qualified_key}") from e

    def _remove_raw(self, qualified_key: str) -> None:
        try:
            self.client.delete(qualified_key)
        except redis.RedisError as e:
            raise StorageError(f"Redis delete failed for {qualified_key}") from e
