"""In-memory web session store."""

import hashlib
import secrets
import threading
import time

import structlog

from .identity import WebUser

logger = structlog.get_logger()


class SessionStore:
    """Maps session ids to logged-in users for a limited time.

    Expired sessions are pruned whenever a session is created or an expired
    one is looked up. All access to the session map holds a lock, so one
    store can be shared by concurrent login requests.
    """

    def __init__(self, ttl_seconds: int = 3600):
        """Initialize store with TTL in seconds (default: 1 hour)."""
        self.ttl_seconds = ttl_seconds
        self._sessions: dict[str, tuple[WebUser, float]] = {}
        self._lock = threading.Lock()

    def _hash_session_id(self, session_id: str) -> str:
        """Hash session id for storage key to prevent id leakage in logs."""
        return hashlib.sha256(session_id.encode()).hexdigest()[:16]

    def create(self, user: WebUser) -> str:
        """Store user under a new session id and return the id."""
        session_id = secrets.token_urlsafe(32)
        session_key = self._hash_session_id(session_id)
        now = time.time()

        with self._lock:
            self._cleanup_expired(now)
            self._sessions[session_key] = (user, now)

        logger.debug("Session created", session_key=session_key, username=user.name)
        return session_id

    def get(self, session_id: str) -> WebUser | None:
        """Get the user for session_id if the session has not expired."""
        session_key = self._hash_session_id(session_id)
        now = time.time()

        with self._lock:
            entry = self._sessions.get(session_key)
            if entry is None:
                return None

            user, timestamp = entry
            if now - timestamp > self.ttl_seconds:
                self._cleanup_expired(now)
                return None

        return user

    def destroy(self, session_id: str) -> None:
        """Log out and drop the session, if present."""
        session_key = self._hash_session_id(session_id)
        with self._lock:
            entry = self._sessions.pop(session_key, None)

        if entry is not None:
            entry[0].logout()
            logger.debug("Session destroyed", session_key=session_key)

    def _cleanup_expired(self, current_time: float) -> None:
        """Remove expired sessions and log their users out.

        Caller must hold the lock.
        """
        expired_keys = [
            key
            for key, (_, timestamp) in self._sessions.items()
            if current_time - timestamp > self.ttl_seconds
        ]

        for key in expired_keys:
            user, _ = self._sessions.pop(key)
            user.logout()

        if expired_keys:
            logger.debug(f"Cleaned up {len(expired_keys)} expired sessions")

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()
        logger.debug("Session store cleared")

    def size(self) -> int:
        with self._lock:
            return len(self._sessions)
