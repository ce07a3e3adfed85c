"""
Legal Compass - Session-aware RAG for Indian legal questions

Answers questions about the Bharatiya Nyaya Sanhita (BNS), the Indian Penal
Code (IPC) and Supreme Court judgments by combining vector retrieval with
LLM generation.

Packages:
    - models: Conversation, retrieval and answer data models
    - conversation: Session memory and follow-up reformulation
    - indexing: FAISS vector store
    - generation: Gemini text generator
    - retrieval: Routing, retrieval, prompting, parsing and the query pipeline
    - server: FastAPI adapter
"""

__version__ = "1.0.0"
__author__ = "Legal Compass"

# Core models
from .models import (
    MessageRole,
    Message,
    SessionInfo,
    RetrievalHit,
    Citation,
    RelatedJudgment,
    Arguments,
    NeutralAnalysis,
    StructuredAnswer,
    ClauseComparison,
)

# Errors
from .errors import (
    LegalCompassError,
    ConfigurationError,
    GenerationError,
    UpstreamTimeout,
    UpstreamProtocolError,
    RetrievalUnavailable,
    MalformedStructuredOutput,
    SessionNotFoundError,
)

# Conversation memory
from .conversation import (
    ConversationStore,
    QueryReformulator,
)

# Query pipeline
from .retrieval import (
    QueryType,
    QueryClassifier,
    ModelRouter,
    RetrievalConfig,
    Retriever,
    ResponseCache,
    PromptBuilder,
    ResponseParser,
    QueryOrchestrator,
    ClauseComparator,
    LegalEngine,
)

__all__ = [
    # Version
    "__version__",
    # Core models
    "MessageRole",
    "Message",
    "SessionInfo",
    "RetrievalHit",
    "Citation",
    "RelatedJudgment",
    "Arguments",
    "NeutralAnalysis",
    "StructuredAnswer",
    "ClauseComparison",
    # Errors
    "LegalCompassError",
    "ConfigurationError",
    "GenerationError",
    "UpstreamTimeout",
    "UpstreamProtocolError",
    "RetrievalUnavailable",
    "MalformedStructuredOutput",
    "SessionNotFoundError",
    # Conversation memory
    "ConversationStore",
    "QueryReformulator",
    # Query pipeline
    "QueryType",
    "QueryClassifier",
    "ModelRouter",
    "RetrievalConfig",
    "Retriever",
    "ResponseCache",
    "PromptBuilder",
    "ResponseParser",
    "QueryOrchestrator",
    "ClauseComparator",
    "LegalEngine",
]
