"""
In-memory session store.

Authoritative registry of resume-analysis sessions with lazy expiry and a
periodic sweep. Sessions are plain dicts owned by the store; every read
returns a deep copy so callers cannot mutate stored state by reference.

All operations are synchronous and never suspend, so each one is atomic
relative to the event loop. Bad input never raises: lookups return None and
mutations return False.

Dependencies: asyncio, copy, uuid
System role: Source of truth for session state
"""

import asyncio
import copy
import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from backend.models.session import SessionStatus

logger = logging.getLogger(__name__)


# Lifecycle fields owned by the store; seed data may not set them.
RESERVED_FIELDS = frozenset(
    {"session_id", "status", "created_at", "updated_at", "expires_at", "retry_count"}
)


def utc_now() -> datetime:
    """Return the current timezone-aware UTC time."""
    return datetime.now(timezone.utc)


class SessionStore:
    """Process-wide key-value registry of sessions with expiry semantics."""

    def __init__(
        self,
        ttl_seconds: int = 30 * 60,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize an empty store.

        Args:
            ttl_seconds: Lifetime of a session after creation or extension
            clock: Source of the current time (overridable in tests)
        """
        self._sessions: dict[str, dict[str, Any]] = {}
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._cleanup_task: asyncio.Task | None = None

    @staticmethod
    def _valid_id(session_id: Any) -> bool:
        return isinstance(session_id, str) and bool(session_id)

    def _is_expired(self, session: dict[str, Any], now: datetime) -> bool:
        expires_at = session.get("expires_at")
        return not isinstance(expires_at, datetime) or now > expires_at

    def _live(self, session_id: Any) -> dict[str, Any] | None:
        """Return the stored (not copied) session if it exists and is unexpired."""
        if not self._valid_id(session_id):
            return None
        session = self._sessions.get(session_id)
        if session is None or self._is_expired(session, self._clock()):
            return None
        return session

    def create(self, initial_data: dict[str, Any] | None = None) -> str:
        """
        Create a session and return its id.

        Seed data is stored verbatim, except keys in RESERVED_FIELDS, which
        the store always sets itself.

        Args:
            initial_data: Optional seed fields (file name, size, ...)

        Returns:
            str: New session id
        """
        session_id = str(uuid.uuid4())
        now = self._clock()
        session: dict[str, Any] = {
            "status": SessionStatus.CREATED.value,
            "created_at": now,
            "updated_at": now,
            "expires_at": now + self._ttl,
            "retry_count": 0,
        }
        seed = initial_data if isinstance(initial_data, dict) else {}
        ignored = sorted(key for key in seed if key in RESERVED_FIELDS)
        if ignored:
            logger.warning("Reserved seed fields ignored", extra={"fields": ignored})
        session.update(
            {key: copy.deepcopy(value) for key, value in seed.items() if key not in RESERVED_FIELDS}
        )
        session["session_id"] = session_id
        self._sessions[session_id] = session

        logger.info("Session created", extra={"session_id": session_id})
        return session_id

    def get(self, session_id: Any) -> dict[str, Any] | None:
        """
        Get an independent copy of a live session.

        Returns None for invalid ids, unknown ids and expired sessions.
        Expired sessions are not deleted here; the sweep does that.
        """
        session = self._live(session_id)
        if session is None:
            return None
        return copy.deepcopy(session)

    def update(self, session_id: Any, fields: dict[str, Any]) -> bool:
        """
        Merge fields into a live session and bump updated_at.

        The session_id field is immutable and silently ignored.

        Returns:
            bool: False if the session is invalid, absent or expired
        """
        session = self._live(session_id)
        if session is None or not isinstance(fields, dict):
            return False

        changes = {key: copy.deepcopy(value) for key, value in fields.items() if key != "session_id"}
        session.update(changes)
        session["updated_at"] = self._clock()
        return True

    def update_status(self, session_id: Any, status: SessionStatus | str) -> bool:
        """Set the session status."""
        value = status.value if isinstance(status, SessionStatus) else status
        return self.update(session_id, {"status": value})

    def extend(self, session_id: Any, extra_seconds: float | None = None) -> bool:
        """
        Push expires_at forward from now.

        Args:
            session_id: Session to extend
            extra_seconds: Extension window (defaults to the store TTL)
        """
        session = self._live(session_id)
        if session is None:
            return False

        window = self._ttl if extra_seconds is None else timedelta(seconds=extra_seconds)
        now = self._clock()
        session["expires_at"] = now + window
        session["updated_at"] = now
        return True

    def exists(self, session_id: Any) -> bool:
        return self._live(session_id) is not None

    def delete(self, session_id: Any) -> bool:
        if not self._valid_id(session_id):
            return False
        deleted = self._sessions.pop(session_id, None) is not None
        if deleted:
            logger.info("Session deleted", extra={"session_id": session_id})
        return deleted

    def clear_all(self) -> None:
        """Remove every session."""
        self._sessions.clear()

    def list_active(self) -> list[dict[str, Any]]:
        now = self._clock()
        return [
            copy.deepcopy(session)
            for session in self._sessions.values()
            if not self._is_expired(session, now)
        ]

    def sweep_expired(self) -> int:
        """
        Delete every expired session.

        Returns:
            int: Number of sessions removed
        """
        now = self._clock()
        expired_ids = [
            session_id
            for session_id, session in self._sessions.items()
            if self._is_expired(session, now)
        ]
        for session_id in expired_ids:
            del self._sessions[session_id]

        if expired_ids:
            logger.info("Expired sessions swept", extra={"removed_count": len(expired_ids)})
        return len(expired_ids)

    def stats(self) -> dict[str, int]:
        now = self._clock()
        expired = sum(1 for session in self._sessions.values() if self._is_expired(session, now))
        return {
            "total": len(self._sessions),
            "active": len(self._sessions) - expired,
            "expired": expired,
        }

    def start_cleanup(self, interval_seconds: float) -> None:
        """
        Start the periodic expiry sweep on the running event loop.

        Calling this while a sweep task is already running is a no-op.
        """
        if self._cleanup_task is not None and not self._cleanup_task.done():
            return
        self._cleanup_task = asyncio.get_running_loop().create_task(
            self._cleanup_loop(interval_seconds)
        )
        logger.info("Session sweep started", extra={"interval_seconds": interval_seconds})

    async def stop_cleanup(self) -> None:
        """Cancel the periodic sweep and wait for it to finish."""
        task, self._cleanup_task = self._cleanup_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Session sweep stopped")

    async def _cleanup_loop(self, interval_seconds: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                self.sweep_expired()
            except Exception:
                logger.exception("Session sweep failed")
