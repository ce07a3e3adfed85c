"""
Query Intent Detection for Routing.

This module decides whether a query is:
- simple: greetings and questions about the assistant itself, answered
  directly without retrieval
- legal: anything that needs a statute / judgment lookup

Detection is a deterministic keyword scan. Ambiguous input is routed as
legal so that it goes through full retrieval.
"""

import re
from enum import Enum


class QueryType(str, Enum):
    """Routing category for a query."""
    SIMPLE = "simple"
    LEGAL = "legal"


# =============================================================================
# KEYWORD TABLES
# =============================================================================

# Greetings, small talk and meta-questions about the assistant
SIMPLE_KEYWORDS = [
    "hello",
    "hi",
    "hey",
    "good morning",
    "good afternoon",
    "good evening",
    "namaste",
    "thank you",
    "thanks",
    "bye",
    "who are you",
    "what are you",
    "what can you do",
    "how can you help",
    "your name",
    "how are you",
    "are you a bot",
    "are you human",
]

# Statute and procedure vocabulary
LEGAL_KEYWORDS = [
    "section",
    "ipc",
    "bns",
    "bnss",
    "bsa",
    "crpc",
    "act",
    "law",
    "legal",
    "court",
    "judge",
    "judgment",
    "punishment",
    "penalty",
    "offence",
    "offense",
    "crime",
    "bail",
    "fir",
    "police",
    "arrest",
    "murder",
    "theft",
    "fraud",
    "cheating",
    "defamation",
    "divorce",
    "contract",
    "property",
    "rights",
    "complaint",
    "appeal",
    "evidence",
]


# =============================================================================
# INTENT DETECTION FUNCTIONS
# =============================================================================


def _keyword_pattern(keywords: list[str]) -> re.Pattern:
    alternatives = "|".join(re.escape(k) for k in keywords)
    return re.compile(rf"\b(?:{alternatives})\b")


_SIMPLE_PATTERN = _keyword_pattern(SIMPLE_KEYWORDS)
_LEGAL_PATTERN = _keyword_pattern(LEGAL_KEYWORDS)


def classify_query(query: str) -> QueryType:
    """Classify a query as simple or legal.

    Keywords match on word boundaries against the lower-cased query.
    Simple keywords are checked first and win ties. With no match at all
    the query is treated as legal.
    """
    lowered = query.lower()

    if _SIMPLE_PATTERN.search(lowered):
        return QueryType.SIMPLE

    if _LEGAL_PATTERN.search(lowered):
        return QueryType.LEGAL

    return QueryType.LEGAL


class QueryClassifier:
    """Rule-based first routing stage."""

    def classify(self, query: str) -> QueryType:
        return classify_query(query)
