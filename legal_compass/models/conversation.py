"""
Conversation models for session-scoped memory.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class MessageRole(str, Enum):
    """Who authored a message."""
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """A single immutable turn in a conversation."""
    role: MessageRole
    content: str
    timestamp: datetime

    @property
    def speaker(self) -> str:
        return "User" if self.role == MessageRole.USER else "Assistant"

    def to_dict(self) -> dict:
        return {
            "role": self.role.value,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class SessionInfo:
    """Activity metadata for a session."""
    created_at: datetime
    last_activity: datetime
    message_count: int = 0

    def to_dict(self) -> dict:
        return {
            "created_at": self.created_at.isoformat(),
            "last_activity": self.last_activity.isoformat(),
            "message_count": self.message_count,
        }


@dataclass
class Session:
    """One conversation: ordered messages plus metadata."""
    session_id: str
    info: SessionInfo
    messages: list[Message] = field(default_factory=list)
