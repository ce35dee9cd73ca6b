import time
from collections.abc import Mapping
from typing import Any, Callable

from .tools import generate_guid

UUID_KEY = "$$appInsights__uuid"
SESSION_KEY = "$$appInsights__session"


def _now_ms() -> int:
    return int(time.time() * 1000)


class IdentityTracker:
    """Anonymous user id and inactivity-based session id, kept in a key/value store."""

    def __init__(self, store: Any, session_inactivity_timeout: int = 1800000,
                 clock: Callable[[], int] = _now_ms):
        self.store = store
        self.session_inactivity_timeout = session_inactivity_timeout
        self.clock = clock

    def get_unique_id(self) -> str:
        unique_id = self.store.get(UUID_KEY)
        if unique_id is None:
            unique_id = generate_guid()
            self.store.set(UUID_KEY, unique_id)
        return unique_id

    def get_session_id(self) -> str:
        session = self.store.get(SESSION_KEY)
        if not isinstance(session, Mapping) or "id" not in session:
            return self._new_session()["id"]

        last_accessed = session.get("accessed") or 0
        now = self.clock()
        if now - last_accessed > self.session_inactivity_timeout:
            return self._new_session()["id"]

        session = {"id": session["id"], "accessed": now}
        self.store.set(SESSION_KEY, session)
        return session["id"]

    def _new_session(self) -> dict:
        session = {"id": generate_guid(), "accessed": self.clock()}
        self.store.set(SESSION_KEY, session)
        return session
