"""
Data models for the Legal Compass engine.

This package contains all data models organized by domain:
- conversation: Session and message models
- search: Retrieval hits and citation records
- answer: Structured answers and comparison results
"""

from .conversation import (
    MessageRole,
    Message,
    SessionInfo,
    Session,
)

from .search import (
    STATUTE,
    JUDGMENT,
    RetrievalHit,
    Citation,
    RelatedJudgment,
    RetrievalResult,
)

from .answer import (
    DISCLAIMER,
    MAX_CITATIONS,
    MAX_RELATED_JUDGMENTS,
    Arguments,
    NeutralAnalysis,
    StructuredAnswer,
    CachedAnswer,
    ClauseComparison,
)

__all__ = [
    # Conversation models
    "MessageRole",
    "Message",
    "SessionInfo",
    "Session",
    # Search models
    "STATUTE",
    "JUDGMENT",
    "RetrievalHit",
    "Citation",
    "RelatedJudgment",
    "RetrievalResult",
    # Answer models
    "DISCLAIMER",
    "MAX_CITATIONS",
    "MAX_RELATED_JUDGMENTS",
    "Arguments",
    "NeutralAnalysis",
    "StructuredAnswer",
    "CachedAnswer",
    "ClauseComparison",
]
