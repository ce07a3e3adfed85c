"""
History-aware query reformulation.

Turns short, context-dependent follow-ups ("what about exceptions?") into
standalone queries by appending context from recent conversation turns.
Template based: no LLM call is made.
"""

import logging
import re

from ..models import MessageRole
from .store import ConversationStore

logger = logging.getLogger(__name__)


# Longer inputs are treated as pasted documents, not follow-ups
MAX_REFORMULATION_CHARS = 300
HISTORY_WINDOW = 4
STANDALONE_WORD_COUNT = 10
SHORT_QUERY_WORD_COUNT = 5
RELATED_SNIPPET_CHARS = 50

FOLLOW_UP_INDICATORS = [
    "it",
    "this",
    "that",
    "they",
    "what about",
    "how about",
    "and",
]

# Statute references worth carrying into the next query
TOPIC_PATTERNS = [
    re.compile(r"\bbns\s+section\s+\d+[a-z]?", re.IGNORECASE),
    re.compile(r"\bipc\s+section\s+\d+[a-z]?", re.IGNORECASE),
    re.compile(r"\bbnss\s+section\s+\d+[a-z]?", re.IGNORECASE),
    re.compile(r"\bbsa\s+section\s+\d+[a-z]?", re.IGNORECASE),
]


def is_follow_up(query: str) -> bool:
    """Check for pronoun/continuation tokens (substring match)."""
    lowered = query.lower()
    return any(indicator in lowered for indicator in FOLLOW_UP_INDICATORS)


def extract_topic(text: str) -> str | None:
    """Return the first statute section reference in text, uppercased."""
    for pattern in TOPIC_PATTERNS:
        match = pattern.search(text)
        if match:
            return re.sub(r"\s+", " ", match.group(0)).upper()
    return None


class QueryReformulator:
    """Rewrites follow-up queries using a session's recent history."""

    def __init__(self, store: ConversationStore):
        self.store = store

    def reformulate(self, session_id: str, current_query: str) -> str:
        """Return a standalone version of current_query.

        The result always starts with the unchanged input; context is only
        ever appended.
        """
        if len(current_query) > MAX_REFORMULATION_CHARS:
            return current_query

        history = self.store.get_history(session_id, max_messages=HISTORY_WINDOW)
        word_count = len(current_query.split())

        if not history or word_count > STANDALONE_WORD_COUNT:
            return current_query

        if not is_follow_up(current_query) and word_count > SHORT_QUERY_WORD_COUNT:
            return current_query

        last_user_query = None
        last_topic = None
        for msg in reversed(history):
            if msg.role == MessageRole.USER and last_user_query is None:
                last_user_query = msg.content
            if msg.role == MessageRole.ASSISTANT and last_topic is None:
                last_topic = extract_topic(msg.content)

        if last_topic:
            reformulated = f"{current_query} (in context of {last_topic})"
        elif last_user_query:
            reformulated = f"{current_query} (related to: {last_user_query[:RELATED_SNIPPET_CHARS]}...)"
        else:
            return current_query

        logger.info(f"[REFORMULATE] '{current_query}' -> '{reformulated}'")
        return reformulated
