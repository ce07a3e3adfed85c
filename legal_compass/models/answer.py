"""
Answer models returned by the query pipeline.
"""

from dataclasses import dataclass, field
from typing import Optional

from .search import Citation, RelatedJudgment


DISCLAIMER = (
    "AI-generated response. For informational purposes only. "
    "Consult a qualified lawyer."
)

MAX_CITATIONS = 3
MAX_RELATED_JUDGMENTS = 3


@dataclass
class Arguments:
    """Balanced arguments parsed from [FOR]/[AGAINST] sections."""
    for_args: list[str] = field(default_factory=list)
    against: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"for": list(self.for_args), "against": list(self.against)}


@dataclass
class NeutralAnalysis:
    """Neutral analysis parsed from [FACTORS]/[INTERPRETATIONS] sections."""
    factors: list[str] = field(default_factory=list)
    interpretations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "factors": list(self.factors),
            "interpretations": list(self.interpretations),
        }


@dataclass
class StructuredAnswer:
    """Final result of a query."""
    answer: str
    citations: list[Citation] = field(default_factory=list)
    related_judgments: list[RelatedJudgment] = field(default_factory=list)
    arguments: Optional[Arguments] = None
    neutral_analysis: Optional[NeutralAnalysis] = None
    disclaimer: str = DISCLAIMER

    def __post_init__(self):
        self.citations = list(self.citations)[:MAX_CITATIONS]
        self.related_judgments = list(self.related_judgments)[:MAX_RELATED_JUDGMENTS]

    def to_dict(self) -> dict:
        return {
            "answer": self.answer,
            "citations": [c.to_dict() for c in self.citations],
            "related_judgments": [j.to_dict() for j in self.related_judgments],
            "arguments": self.arguments.to_dict() if self.arguments else None,
            "neutral_analysis": (
                self.neutral_analysis.to_dict() if self.neutral_analysis else None
            ),
            "disclaimer": self.disclaimer,
        }


@dataclass
class CachedAnswer:
    """The generated part of an answer, as stored in the response cache."""
    answer: str
    arguments: Optional[Arguments] = None
    neutral_analysis: Optional[NeutralAnalysis] = None


@dataclass
class ClauseComparison:
    """Side-by-side comparison of two legal texts."""
    differences: list[str] = field(default_factory=list)
    similarities: list[str] = field(default_factory=list)
    implications: str = ""
    raw: str = ""

    def to_dict(self) -> dict:
        return {
            "differences": list(self.differences),
            "similarities": list(self.similarities),
            "implications": self.implications,
        }
