"""Session storage for authenticated users."""

import logging
import secrets
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Callable

from app.models.auth import Session

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_session_token() -> str:
    """Generate an unguessable opaque session token."""
    return secrets.token_urlsafe(32)


class SessionStore(ABC):
    """Storage backend for sessions keyed by token."""

    @abstractmethod
    async def get(self, token: str) -> Session | None:
        """Return the session for ``token`` or None if unknown."""

    @abstractmethod
    async def put(self, session: Session) -> None:
        """Store ``session`` under its token, replacing any existing entry."""

    @abstractmethod
    async def delete(self, token: str) -> bool:
        """Remove the session for ``token``. Returns True if one existed."""


class InMemorySessionStore(SessionStore):
    """Process-local session store.

    Sessions never expire unless ``ttl_seconds`` is set, in which case a
    session older than the TTL is evicted the next time it is looked up.
    """

    def __init__(self, ttl_seconds: int | None = None, clock: Clock = _utcnow):
        self.ttl = timedelta(seconds=ttl_seconds) if ttl_seconds else None
        self.clock = clock
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _is_expired(self, session: Session) -> bool:
        if self.ttl is None:
            return False
        return self.clock() - session.created_at >= self.ttl

    async def get(self, token: str) -> Session | None:
        if not token:
            return None
        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                return None
            if self._is_expired(session):
                del self._sessions[token]
                logger.info("Session expired and was evicted")
                return None
            return session

    async def put(self, session: Session) -> None:
        with self._lock:
            self._sessions[session.token] = session

    async def delete(self, token: str) -> bool:
        with self._lock:
            return self._sessions.pop(token, None) is not None

    async def clear(self) -> None:
        with self._lock:
            self._sessions.clear()
