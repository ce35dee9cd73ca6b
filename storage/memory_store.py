import threading
import time
from typing import Optional

from .base import KeyValueStore

SECONDS_PER_DAY = 24 * 60 * 60


class MemoryStore(KeyValueStore):
    """In-process store with cookie-style expiry, used when Redis is unavailable."""

    storage_type = "memory"

    def __init__(self, prefix: str = "ls", expiry_days: int = 30):
        super().__init__(prefix)
        self.expiry_days = expiry_days
        self._items: dict[str, tuple[str, Optional[float]]] = {}
        self._lock = threading.Lock()

    def is_supported(self) -> bool:
        return True

    def _get_raw(self, qualified_key: str) -> Optional[str]:
        with self._lock:
            item = self._items.get(qualified_key)
            if item is None:
                return None
            raw, expires_at = item
            if expires_at is not None and expires_at <= time.time():
                del self._items[qualified_key]
                return None
            return raw

    def _set_raw(self, qualified_key: str, raw: str) -> None:
        # 0 days means the entry never expires
        expires_at = None
        if self.expiry_days:
            expires_at = time.time() + self.expiry_days * SECONDS_PER_DAY
        with self._lock:
            self._items[qualified_key] = (raw, expires_at)

    def _remove_raw(self, qualified_key: str) -> None:
        with self._lock:
            self._items.pop(qualified_key, None)
