from .base import KeyValueStore, StorageError
from .memory_store import MemoryStore
from .redis_store import RedisStore
from .fallback_store import FallbackStore

__all__ = ["KeyValueStore", "StorageError", "MemoryStore", "RedisStore", "FallbackStore"]
