"""
Search result models for the retrieval pipeline.

This module defines data models for raw vector-store hits and the
citation records derived from them.
"""

from dataclasses import dataclass, field
from typing import Optional


STATUTE = "statute"
JUDGMENT = "judgment"


@dataclass
class RetrievalHit:
    """One candidate document returned by the vector store."""
    text: str
    metadata: dict = field(default_factory=dict)
    distance: float = 0.0  # smaller = more relevant

    @property
    def hit_type(self) -> str:
        return str(self.metadata.get("type", "")).lower()

    @property
    def source(self) -> str:
        return str(self.metadata.get("source", "Unknown"))


@dataclass
class Citation:
    """A legal citation shown alongside an answer."""
    source: str
    excerpt: str
    section: Optional[str] = None
    url: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "section": self.section,
            "text": self.excerpt,
            "url": self.url,
        }


@dataclass
class RelatedJudgment:
    """A court judgment related to the query."""
    title: str
    excerpt: str
    case_id: str

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "excerpt": self.excerpt,
            "case_id": self.case_id,
        }


@dataclass
class RetrievalResult:
    """Complete result from the retrieval step."""
    query: str
    search_query: str = ""
    hits: list[RetrievalHit] = field(default_factory=list)
    citations: list[Citation] = field(default_factory=list)
    related_judgments: list[RelatedJudgment] = field(default_factory=list)
    context_text: str = ""
    available: bool = True

    @property
    def is_empty(self) -> bool:
        return not self.hits
