"""Session persistence."""

from .record import SessionRecord, SessionTurn
from .store import SessionStore

__all__ = ["SessionRecord", "SessionStore", "SessionTurn"]
