"""
Conversation memory for session-aware querying.

This package contains:
- store: Per-session message history and metadata
- reformulator: History-aware follow-up query reformulation
"""

from .store import ConversationStore
from .reformulator import QueryReformulator, extract_topic, is_follow_up

__all__ = [
    "ConversationStore",
    "QueryReformulator",
    "extract_topic",
    "is_follow_up",
]
