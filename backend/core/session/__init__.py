"""Session management business logic."""

from .session_store import SessionStore

__all__ = ["SessionStore"]
