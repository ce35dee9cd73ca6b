import json
from abc import ABC, abstractmethod
from typing import Any, Optional


class StorageError(Exception):
    """A storage backend could not complete a read or write."""


class KeyValueStore(ABC):
    """JSON-valued key/value store with prefixed keys."""

    storage_type = "unknown"

    def __init__(self, prefix: str = "ls"):
        # "ls" -> "ls.", "" stays empty
        if prefix and not prefix.endswith("."):
            prefix = prefix + "."
        self.prefix = prefix

    def derive_key(self, key: str) -> str:
        return self.prefix + key

    def get(self, key: str) -> Any:
        """Get a stored value, or None when missing."""
        raw = self._get_raw(self.derive_key(key))
        if raw is None or raw == "null":
            return None
        try:
            return json.loads(raw)
        except ValueError:
            return raw

    def set(self, key: str, value: Any) -> bool:
        """Store a value. Storing None removes the key."""
        if value is None:
            self.remove(key)
            return True
        self._set_raw(self.derive_key(key), json.dumps(value))
        return True

    def remove(self, key: str) -> None:
        self._remove_raw(self.derive_key(key))

    @abstractmethod
    def is_supported(self) -> bool:
        """Whether the backend is reachable."""
        pass

    @abstractmethod
    def _get_raw(self, qualified_key: str) -> Optional[str]:
        pass

    @abstractmethod
    def _set_raw(self, qualified_key: str, raw: str) -> None:
        pass

    @abstractmethod
    def _remove_raw(self, qualified_key: str) -> None:
        pass
