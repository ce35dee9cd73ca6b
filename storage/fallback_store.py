from typing import Any

from utils.logging import get_logger
from .base import KeyValueStore, StorageError
from .memory_store import MemoryStore

logger = get_logger(__name__)


class FallbackStore:
    """
    Read and write through a primary store, falling back to a secondary one.

    Once the primary fails, every later call goes to the fallback.
    """

    def __init__(self, primary: KeyValueStore, fallback: KeyValueStore | None = None):
        self.primary = primary
        self.fallback = fallback or MemoryStore(prefix=primary.prefix)
        self._use_fallback = not primary.is_supported()

    @property
    def storage_type(self) -> str:
        return self.fallback.storage_type if self._use_fallback else self.primary.storage_type

    def is_supported(self) -> bool:
        return self.primary.is_supported() or self.fallback.is_supported()

    def get(self, key: str) -> Any:
        if not self._use_fallback:
            try:
                return self.primary.get(key)
            except StorageError as e:
                self._switch_to_fallback(e)
        return self.fallback.get(key)

    def set(self, key: str, value: Any) -> bool:
        if not self._use_fallback:
            try:
                return self.primary.set(key, value)
            except StorageError as e:
                self._switch_to_fallback(e)
        return self.fallback.set(key, value)

    def remove(self, key: str) -> None:
        if not self._use_fallback:
            try:
                self.primary.remove(key)
                return
            except StorageError as e:
                self._switch_to_fallback(e)
        self.fallback.remove(key)

    def _switch_to_fallback(self, error: StorageError) -> None:
        logger.warning("Primary storage failed, using fallback", error=str(error))
        self._use_fallback = True
