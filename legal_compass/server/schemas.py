"""
Request and response schemas for the Legal Compass API.
"""

from typing import Optional

from pydantic import BaseModel, Field

from ..models import ClauseComparison, Message, SessionInfo, StructuredAnswer


# ============================================================================
# Query
# ============================================================================

class QueryRequest(BaseModel):
    """Request body for /query."""
    query: str = Field(..., min_length=1, examples=["What is BNS Section 103?"])
    language: str = Field(default="en", description="Answer language code (en, hi, ...)")
    arguments_mode: bool = Field(default=False, description="Include arguments for and against")
    analysis_mode: bool = Field(default=False, description="Include a neutral legal analysis")
    session_id: Optional[str] = Field(default=None, description="Conversation session id")


class CitationModel(BaseModel):
    source: str
    section: Optional[str] = None
    text: str
    url: Optional[str] = None


class RelatedJudgmentModel(BaseModel):
    title: str
    excerpt: str
    case_id: str


class ArgumentsModel(BaseModel):
    for_: list[str] = Field(default_factory=list, alias="for")
    against: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class NeutralAnalysisModel(BaseModel):
    factors: list[str] = Field(default_factory=list)
    interpretations: list[str] = Field(default_factory=list)


class QueryResponse(BaseModel):
    """Structured answer returned by /query."""
    answer: str
    citations: list[CitationModel] = Field(default_factory=list)
    related_judgments: list[RelatedJudgmentModel] = Field(default_factory=list)
    arguments: Optional[ArgumentsModel] = None
    neutral_analysis: Optional[NeutralAnalysisModel] = None
    disclaimer: str
    session_id: Optional[str] = None

    @classmethod
    def from_answer(cls, answer: StructuredAnswer, session_id: Optional[str] = None) -> "QueryResponse":
        return cls.model_validate({**answer.to_dict(), "session_id": session_id})


# ============================================================================
# Sessions
# ============================================================================

class SessionCreateResponse(BaseModel):
    session_id: str


class MessageModel(BaseModel):
    role: str
    content: str
    timestamp: str

    @classmethod
    def from_message(cls, message: Message) -> "MessageModel":
        return cls(**message.to_dict())


class SessionMetadataModel(BaseModel):
    created_at: str
    last_activity: str
    message_count: int

    @classmethod
    def from_info(cls, info: SessionInfo) -> "SessionMetadataModel":
        return cls(**info.to_dict())


class SessionHistoryResponse(BaseModel):
    session_id: str
    messages: list[MessageModel]
    metadata: SessionMetadataModel


class SessionStatusResponse(BaseModel):
    session_id: str
    status: str


# ============================================================================
# Comparison
# ============================================================================

class CompareRequest(BaseModel):
    text1: str = Field(..., min_length=1)
    text2: str = Field(..., min_length=1)


class CompareResponse(BaseModel):
    differences: list[str] = Field(default_factory=list)
    similarities: list[str] = Field(default_factory=list)
    implications: str = ""

    @classmethod
    def from_comparison(cls, comparison: ClauseComparison) -> "CompareResponse":
        return cls(**comparison.to_dict())


# ============================================================================
# Health
# ============================================================================

class HealthResponse(BaseModel):
    status: str
    llm_available: bool
    vector_store_available: bool
    sessions: int
    cache_entries: int


class ErrorResponse(BaseModel):
    error: str
    message: str
