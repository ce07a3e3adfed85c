"""
In-process conversation memory.

Holds per-session message history and activity metadata. Sessions are
created explicitly via create_session() or, unless the store is strict,
implicitly the first time a message is added under an unknown id.
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..errors import SessionNotFoundError
from ..models import Message, MessageRole, Session, SessionInfo

logger = logging.getLogger(__name__)


class ConversationStore:
    """Manages conversation history and metadata for RAG queries."""

    def __init__(self, strict: bool = False, clock: Optional[Callable[[], datetime]] = None):
        """Initialize an empty store.

        Args:
            strict: Raise SessionNotFoundError when adding to an unknown
                session instead of creating it on the fly.
            clock: Returns the current time. Defaults to datetime.now.
        """
        self.strict = strict
        self._clock = clock or datetime.now
        self._sessions: dict[str, Session] = {}

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def _new_session(self, session_id: str) -> Session:
        now = self._clock()
        session = Session(
            session_id=session_id,
            info=SessionInfo(created_at=now, last_activity=now, message_count=0),
        )
        self._sessions[session_id] = session
        return session

    def create_session(self) -> str:
        """Create a new conversation session and return its id."""
        session_id = str(uuid.uuid4())
        self._new_session(session_id)
        logger.info(f"[SESSION] Created session: {session_id}")
        return session_id

    def add_message(self, session_id: str, role: MessageRole | str, content: str) -> None:
        """Append a message to a session's history.

        Unknown session ids are created on the fly unless the store is strict.
        """
        session = self._sessions.get(session_id)
        if session is None:
            if self.strict:
                raise SessionNotFoundError(session_id)
            logger.warning(f"[SESSION] Session {session_id} not found, creating new session")
            session = self._new_session(session_id)

        now = self._clock()
        session.messages.append(Message(role=MessageRole(role), content=content, timestamp=now))
        session.info.last_activity = now
        session.info.message_count += 1

    def get_history(self, session_id: str, max_messages: int = 10) -> list[Message]:
        """Return the most recent messages in chronological order."""
        session = self._sessions.get(session_id)
        if session is None or max_messages <= 0:
            return []
        return list(session.messages[-max_messages:])

    def get_context_string(self, session_id: str, max_messages: int = 6) -> str:
        """Format recent history as "User: ..." / "Assistant: ..." lines."""
        history = self.get_history(session_id, max_messages)
        return "\n".join(f"{msg.speaker}: {msg.content}" for msg in history)

    def clear_session(self, session_id: str) -> None:
        """Empty a session's history but keep the session itself."""
        session = self._sessions.get(session_id)
        if session is None:
            return
        session.messages = []
        session.info.message_count = 0
        session.info.last_activity = self._clock()
        logger.info(f"[SESSION] Cleared session: {session_id}")

    def delete_session(self, session_id: str) -> None:
        """Remove a session and its metadata."""
        if self._sessions.pop(session_id, None) is not None:
            logger.info(f"[SESSION] Deleted session: {session_id}")

    def get_session_info(self, session_id: str) -> Optional[SessionInfo]:
        session = self._sessions.get(session_id)
        return session.info if session else None

    def cleanup_old_sessions(self, max_age_hours: float = 24) -> int:
        """Delete sessions whose last activity is older than max_age_hours.

        Returns:
            Number of sessions removed
        """
        cutoff = self._clock() - timedelta(hours=max_age_hours)
        stale = [
            session_id
            for session_id, session in self._sessions.items()
            if session.info.last_activity < cutoff
        ]
        for session_id in stale:
            self.delete_session(session_id)

        if stale:
            logger.info(f"[SESSION] Cleaned up {len(stale)} old sessions")
        return len(stale)
