"""
Public entry point of the query core.

LegalEngine owns one ConversationStore and one QueryOrchestrator and
exposes the session and query operations used by the HTTP API and the CLI.
"""

import logging
from typing import Optional

from ..config import Settings, get_settings
from ..conversation import ConversationStore
from ..errors import ConfigurationError, SessionNotFoundError
from ..generation import GeminiGenerator, TextGenerator
from ..indexing import VectorStore, load_vector_store
from ..models import ClauseComparison, Message, MessageRole, SessionInfo, StructuredAnswer
from .cache import ResponseCache
from .classifier import ModelRouter
from .comparison import ClauseComparator
from .config import RetrievalConfig
from .intent import QueryClassifier
from .orchestrator import QueryOrchestrator
from .retriever import Retriever

logger = logging.getLogger(__name__)


class LegalEngine:
    """Session-aware legal question answering."""

    def __init__(
        self,
        orchestrator: QueryOrchestrator,
        comparator: Optional[ClauseComparator] = None,
        session_max_age_hours: float = 24,
    ):
        self.orchestrator = orchestrator
        self.comparator = comparator or ClauseComparator(orchestrator.generator)
        self.session_max_age_hours = session_max_age_hours

    @classmethod
    def build(
        cls,
        vector_store: Optional[VectorStore] = None,
        generator: Optional[TextGenerator] = None,
        settings: Optional[Settings] = None,
        store: Optional[ConversationStore] = None,
    ) -> "LegalEngine":
        """Assemble an engine from its collaborators and settings."""
        settings = settings or get_settings()
        if store is None:
            store = ConversationStore(strict=settings.strict_sessions)

        router = None
        if settings.enable_model_router and generator is not None:
            router = ModelRouter(
                generator,
                model=settings.router_model,
                timeout=settings.router_timeout,
            )

        orchestrator = QueryOrchestrator(
            store=store,
            retriever=Retriever(vector_store, RetrievalConfig.from_settings(settings)),
            generator=generator,
            cache=ResponseCache(
                max_entries=settings.cache_max_entries,
                ttl_seconds=settings.cache_ttl_seconds,
            ),
            classifier=QueryClassifier() if settings.enable_simple_route else None,
            router=router,
            history_messages=settings.history_messages,
        )
        return cls(orchestrator, session_max_age_hours=settings.session_max_age_hours)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "LegalEngine":
        """Load the vector store and LLM client described by settings.

        Missing pieces degrade: no index means no retrieved context, no API
        key means sources-only answers.
        """
        settings = settings or get_settings()

        logger.info("Loading Legal Compass engine...")
        logger.info(f"  Index dir: {settings.index_dir}")
        logger.info(f"  Model: {settings.embedding_model}")

        vector_store = load_vector_store(settings.index_dir, settings.embedding_model)

        try:
            generator = GeminiGenerator.from_settings(settings)
            logger.info(f"Gemini LLM client initialized ({settings.llm_model})")
        except ConfigurationError as e:
            logger.warning(f"{e} - LLM answers disabled")
            generator = None

        return cls.build(vector_store=vector_store, generator=generator, settings=settings)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    @property
    def store(self) -> ConversationStore:
        return self.orchestrator.store

    def create_session(self) -> str:
        return self.store.create_session()

    def add_message(self, session_id: str, role: MessageRole | str, text: str) -> None:
        self.store.add_message(session_id, role, text)

    def get_history(self, session_id: str, max_messages: int = 10) -> list[Message]:
        return self.store.get_history(session_id, max_messages)

    def get_session_info(self, session_id: str) -> Optional[SessionInfo]:
        return self.store.get_session_info(session_id)

    def clear_session(self, session_id: str) -> None:
        self.store.clear_session(session_id)

    def delete_session(self, session_id: str) -> None:
        self.store.delete_session(session_id)

    def cleanup_sessions(self, max_age_hours: Optional[float] = None) -> int:
        return self.store.cleanup_old_sessions(max_age_hours or self.session_max_age_hours)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def query(
        self,
        text: str,
        language: str = "en",
        arguments_mode: bool = False,
        analysis_mode: bool = False,
        session_id: Optional[str] = None,
    ) -> StructuredAnswer:
        """Answer a question, recording the exchange in the session if given.

        Both turns are recorded after the pipeline runs, so reformulation
        only sees earlier turns.
        """
        if session_id and self.store.strict and session_id not in self.store:
            raise SessionNotFoundError(session_id)

        answer = self.orchestrator.query(
            text,
            language=language,
            arguments_mode=arguments_mode,
            analysis_mode=analysis_mode,
            session_id=session_id,
        )

        if session_id:
            self.store.add_message(session_id, MessageRole.USER, text)
            self.store.add_message(session_id, MessageRole.ASSISTANT, answer.answer)

        return answer

    def compare_clauses(self, text_a: str, text_b: str) -> ClauseComparison:
        return self.comparator.compare(text_a, text_b)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    @property
    def llm_available(self) -> bool:
        return self.orchestrator.llm_available

    @property
    def vector_store_available(self) -> bool:
        return self.orchestrator.retriever.available

    def stats(self) -> dict:
        return {
            "sessions": len(self.store),
            "cache": self.orchestrator.cache.stats(),
            "llm_available": self.llm_available,
            "vector_store_available": self.vector_store_available,
        }
