"""
End-to-end query pipeline.

RECEIVED -> REFORMULATED -> ROUTED -> (DIRECT_ANSWERED | RETRIEVED ->
GENERATED -> PARSED) -> CACHED -> RETURNED

Every failure is turned into a best-effort StructuredAnswer; nothing is
retried and nothing is raised to the caller.
"""

import logging
from dataclasses import replace
from enum import Enum
from typing import Optional

from ..conversation import ConversationStore, QueryReformulator
from ..errors import GenerationError
from ..generation import TextGenerator
from ..models import CachedAnswer, RetrievalResult, StructuredAnswer
from .cache import ResponseCache, answer_key, retrieval_key
from .classifier import ModelRouter, Route
from .intent import QueryClassifier, QueryType
from .parser import ResponseParser
from .prompts import PromptBuilder, is_english
from .retriever import Retriever

logger = logging.getLogger(__name__)


LLM_NOT_CONFIGURED_ANSWER = (
    "LLM not configured. An answer could not be generated, "
    "but the most relevant legal sources found for your query are listed below."
)
LLM_NOT_CONFIGURED_NO_SOURCES = (
    "LLM not configured and no relevant legal sources were found. "
    "Please try again later or consult a qualified lawyer."
)


class PipelineState(str, Enum):
    RECEIVED = "received"
    REFORMULATED = "reformulated"
    ROUTED = "routed"
    DIRECT_ANSWERED = "direct_answered"
    RETRIEVED = "retrieved"
    GENERATED = "generated"
    PARSED = "parsed"
    CACHED = "cached"
    RETURNED = "returned"
    ERRORED = "errored"


class QueryOrchestrator:
    """Coordinates reformulation, routing, retrieval, generation and caching."""

    def __init__(
        self,
        store: ConversationStore,
        retriever: Retriever,
        generator: Optional[TextGenerator] = None,
        cache: Optional[ResponseCache] = None,
        classifier: Optional[QueryClassifier] = None,
        router: Optional[ModelRouter] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        parser: Optional[ResponseParser] = None,
        history_messages: int = 6,
        direct_max_tokens: int = 300,
        translation_max_tokens: int = 100,
    ):
        """Initialize the orchestrator.

        Args:
            store: Conversation store used for reformulation and history
            retriever: Distance-filtered vector retriever
            generator: Text generator, or None when no LLM is configured
            cache: Response cache (a fresh one is created if omitted)
            classifier: Rule-based routing stage; None disables it
            router: Model-based routing stage; None disables it
            prompt_builder: Prompt builder
            parser: Response parser
            history_messages: Conversation turns included in the prompt
        """
        self.store = store
        self.reformulator = QueryReformulator(store)
        self.retriever = retriever
        self.generator = generator
        self.cache = cache if cache is not None else ResponseCache()
        self.classifier = classifier
        self.router = router
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.parser = parser or ResponseParser()
        self.history_messages = history_messages
        self.direct_max_tokens = direct_max_tokens
        self.translation_max_tokens = translation_max_tokens

    @property
    def llm_available(self) -> bool:
        return self.generator is not None

    def _enter(self, state: PipelineState, detail: str = "") -> None:
        logger.debug(f"[PIPELINE] {state.value} {detail}".rstrip())

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def _answer_directly(self, query: str, language: str) -> Optional[str]:
        """Lightweight persona reply for greetings and meta-questions."""
        if self.generator is None:
            return None
        try:
            reply = self.generator.generate(
                self.prompt_builder.build_direct_prompt(query, language),
                max_tokens=self.direct_max_tokens,
            )
        except GenerationError as e:
            logger.warning(f"[PIPELINE] Direct answer failed, falling back to search: {e}")
            return None
        return reply.strip() or None

    def _route(self, query: str, language: str) -> Optional[str]:
        """Run the routing chain; return a direct answer or None to search."""
        if self.classifier is not None and self.classifier.classify(query) == QueryType.SIMPLE:
            direct = self._answer_directly(query, language)
            if direct:
                return direct

        if self.router is not None and self.generator is not None:
            decision = self.router.route(query)
            if decision.route == Route.DIRECT and decision.direct_answer:
                return decision.direct_answer.strip()

        return None

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    def translate_query(self, query: str, language: str) -> str:
        """Translate a non-English query to English for searching.

        Falls back to the original text when no generator is available or
        the call fails.
        """
        if is_english(language) or self.generator is None:
            return query
        try:
            translated = self.generator.generate(
                self.prompt_builder.build_translation_prompt(query),
                max_tokens=self.translation_max_tokens,
            ).strip()
        except GenerationError as e:
            logger.warning(f"[PIPELINE] Query translation failed, searching original text: {e}")
            return query

        if not translated:
            return query
        logger.info(f"[PIPELINE] Translated search query: '{query}' -> '{translated}'")
        return translated

    def retrieve(self, search_query: str, language: str = "en") -> RetrievalResult:
        """Retrieve context for a query, using the cache when possible.

        The cache key is built from the untranslated query and the language,
        so translation only runs on a miss.
        """
        key = retrieval_key(search_query, self.retriever.config.top_k, language)

        cached = self.cache.get_retrieval(key)
        if cached is not None:
            logger.info("[CACHE] Retrieval cache hit")
            return cached

        search_text = self.translate_query(search_query, language)
        result = replace(self.retriever.retrieve(search_text), query=search_query)
        if result.available:
            self.cache.set_retrieval(key, result)
        return result

    # ------------------------------------------------------------------
    # Main entry point
    # ------------------------------------------------------------------

    def query(
        self,
        text: str,
        language: str = "en",
        arguments_mode: bool = False,
        analysis_mode: bool = False,
        session_id: Optional[str] = None,
    ) -> StructuredAnswer:
        """Answer a legal question.

        Conversation messages are recorded by the caller; this method only
        reads the session history.
        """
        self._enter(PipelineState.RECEIVED, f"lang={language}")

        search_query = text
        if session_id:
            search_query = self.reformulator.reformulate(session_id, text)
            self._enter(PipelineState.REFORMULATED)

        direct = self._route(text, language)
        self._enter(PipelineState.ROUTED, "direct" if direct else "search")
        if direct:
            self._enter(PipelineState.DIRECT_ANSWERED)
            return StructuredAnswer(answer=direct)

        retrieval = self.retrieve(search_query, language)
        self._enter(PipelineState.RETRIEVED, f"{len(retrieval.hits)} hits")

        key = answer_key(
            language,
            search_query,
            retrieval.citations,
            arguments_mode=arguments_mode,
            analysis_mode=analysis_mode,
        )
        cached = self.cache.get_answer(key)
        if cached is not None:
            logger.info("[CACHE] Answer cache hit")
            return self._assemble(cached, retrieval)

        if self.generator is None:
            logger.warning("[PIPELINE] No LLM configured, returning sources only")
            placeholder = LLM_NOT_CONFIGURED_ANSWER if retrieval.citations else LLM_NOT_CONFIGURED_NO_SOURCES
            return self._assemble(CachedAnswer(answer=placeholder), retrieval)

        history_text = None
        if session_id:
            history_text = self.store.get_context_string(session_id, self.history_messages) or None

        bundle = self.prompt_builder.build(
            search_query,
            retrieval.context_text,
            language=language,
            arguments_mode=arguments_mode,
            analysis_mode=analysis_mode,
            history_text=history_text,
        )

        try:
            raw_answer = self.generator.generate(bundle.messages, max_tokens=bundle.max_tokens)
        except GenerationError as e:
            self._enter(PipelineState.ERRORED, str(e))
            logger.error(f"[PIPELINE] LLM Error: {e}")
            return self._assemble(CachedAnswer(answer=f"Error: {e}"), retrieval)
        self._enter(PipelineState.GENERATED, f"{len(raw_answer)} chars")

        parsed = self.parser.parse(raw_answer, arguments_mode=arguments_mode, analysis_mode=analysis_mode)
        self._enter(PipelineState.PARSED)

        generated = CachedAnswer(
            answer=parsed.answer,
            arguments=parsed.arguments if arguments_mode else None,
            neutral_analysis=parsed.neutral_analysis if analysis_mode else None,
        )
        self.cache.set_answer(key, generated)
        self._enter(PipelineState.CACHED)

        answer = self._assemble(generated, retrieval)
        self._enter(PipelineState.RETURNED)
        return answer

    @staticmethod
    def _assemble(generated: CachedAnswer, retrieval: RetrievalResult) -> StructuredAnswer:
        # StructuredAnswer caps citations and judgments at 3 each
        return StructuredAnswer(
            answer=generated.answer,
            citations=retrieval.citations,
            related_judgments=retrieval.related_judgments,
            arguments=generated.arguments,
            neutral_analysis=generated.neutral_analysis,
        )
