"""
Shared test fixtures: scripted generator and in-memory vector store.
"""

from datetime import datetime, timedelta

import pytest

from legal_compass.config import Settings
from legal_compass.conversation import ConversationStore


class FakeGenerator:
    """TextGenerator that replays scripted replies and records every call.

    Each reply is either a string or an exception instance to raise. When
    the script runs out the default reply is returned.
    """

    def __init__(self, replies=None, default="Generated answer."):
        self.replies = list(replies or [])
        self.default = default
        self.calls = []

    def generate(self, messages, max_tokens=1500, model=None, timeout=None):
        self.calls.append(
            {"messages": messages, "max_tokens": max_tokens, "model": model, "timeout": timeout}
        )
        reply = self.replies.pop(0) if self.replies else self.default
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeVectorStore:
    """VectorStore returning a fixed ranked list of (text, metadata, distance)."""

    def __init__(self, hits=None, error=None):
        self.hits = list(hits or [])
        self.error = error
        self.queries = []

    def search(self, query, k):
        self.queries.append((query, k))
        if self.error is not None:
            raise self.error
        ranked = sorted(self.hits, key=lambda h: h[2])[:k]
        return (
            [text for text, _, _ in ranked],
            [dict(meta) for _, meta, _ in ranked],
            [dist for _, _, dist in ranked],
        )


class FakeClock:
    """Manually advanced clock for datetime-based code."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 7, 1, 12, 0, 0)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


BNS_103_TEXT = (
    "Murder. Whoever commits murder shall be punished with death or "
    "imprisonment for life, and shall also be liable to fine."
)

BNS_103_HIT = (
    BNS_103_TEXT,
    {"type": "statute", "source": "BNS", "bns_section": "103", "title": "Punishment for murder"},
    0.12,
)

JUDGMENT_HIT = (
    "The appellant was convicted under Section 302 IPC for the murder of ...",
    {"type": "judgment", "source": "SC", "title": "Bachan Singh v. State of Punjab", "case_id": "1980-SC-707"},
    0.30,
)


@pytest.fixture
def settings():
    return Settings(gemini_api_key=None, _env_file=None)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return ConversationStore(clock=clock)


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def vector_store():
    return FakeVectorStore([BNS_103_HIT, JUDGMENT_HIT])
