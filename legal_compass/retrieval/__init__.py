"""
Query pipeline components for the Legal Compass engine.

This package contains:
- intent: Rule-based simple/legal query classification
- classifier: Optional model-based routing stage
- config: Retrieval configuration
- retriever: Distance-filtered vector retrieval
- cache: Bounded response cache
- prompts: Prompt construction
- parser: Structured section extraction from generator output
- orchestrator: End-to-end query pipeline
- comparison: Clause comparison
- engine: Public session-aware entry point
"""

from .intent import (
    QueryType,
    QueryClassifier,
    classify_query,
)

from .classifier import (
    Route,
    RouteDecision,
    ModelRouter,
)

from .config import RetrievalConfig

from .retriever import Retriever

from .cache import (
    ResponseCache,
    answer_key,
    retrieval_key,
)

from .prompts import (
    PromptBuilder,
    PromptBundle,
)

from .parser import (
    ResponseParser,
    ParsedResponse,
    extract_tag,
)

from .orchestrator import (
    PipelineState,
    QueryOrchestrator,
)

from .comparison import ClauseComparator

from .engine import LegalEngine

__all__ = [
    # Intent detection
    "QueryType",
    "QueryClassifier",
    "classify_query",
    # Routing
    "Route",
    "RouteDecision",
    "ModelRouter",
    # Retrieval
    "RetrievalConfig",
    "Retriever",
    # Cache
    "ResponseCache",
    "answer_key",
    "retrieval_key",
    # Prompting and parsing
    "PromptBuilder",
    "PromptBundle",
    "ResponseParser",
    "ParsedResponse",
    "extract_tag",
    # Pipeline
    "PipelineState",
    "QueryOrchestrator",
    "ClauseComparator",
    "LegalEngine",
]
