"""
Tests for the end-to-end query pipeline.
"""

from types import SimpleNamespace

import httpx
from conftest import BNS_103_HIT, JUDGMENT_HIT, FakeGenerator, FakeVectorStore

from legal_compass.errors import UpstreamProtocolError, UpstreamTimeout
from legal_compass.generation import GeminiGenerator
from legal_compass.models import DISCLAIMER
from legal_compass.retrieval import (
    ModelRouter,
    QueryClassifier,
    QueryOrchestrator,
    ResponseCache,
    Retriever,
)
from legal_compass.retrieval.orchestrator import (
    LLM_NOT_CONFIGURED_ANSWER,
    LLM_NOT_CONFIGURED_NO_SOURCES,
)


ANSWER_WITH_SECTIONS = """BNS Section 103 prescribes death or imprisonment for life.

[FACTORS]
- Intention
[/FACTORS]
[INTERPRETATIONS]
- Rarest of rare doctrine
[/INTERPRETATIONS]
[FOR]
- Premeditated act
[/FOR]
[AGAINST]
- Sudden provocation
[/AGAINST]"""


def make_orchestrator(store, vector_store=None, generator=None, **kwargs):
    return QueryOrchestrator(
        store=store,
        retriever=Retriever(vector_store),
        generator=generator,
        **kwargs,
    )


class TestLegalQuery:
    """Retrieval-augmented answers."""

    def test_bns_103_scenario(self, store):
        fixed = "  Under BNS Section 103, murder is punishable with death or life imprisonment.\n"
        hits = [BNS_103_HIT] + [
            ("Related provision", {"type": "statute", "bns_section": str(100 + i)}, 0.2 + i * 0.01)
            for i in range(4)
        ]
        orchestrator = make_orchestrator(store, FakeVectorStore(hits), FakeGenerator([fixed]))

        answer = orchestrator.query("What is BNS Section 103?")

        assert answer.answer == fixed.strip()
        assert answer.arguments is None
        assert answer.neutral_analysis is None
        assert len(answer.citations) == 3
        assert answer.citations[0].section == "Section 103"

    def test_end_to_end_statute_answer(self, store, vector_store):
        generator = FakeGenerator(["BNS Section 103: murder is punishable with death or imprisonment for life."])
        orchestrator = make_orchestrator(store, vector_store, generator)

        answer = orchestrator.query("What is the punishment for murder under BNS 103?")

        assert "imprisonment for life" in answer.answer
        assert answer.citations[0].source == "Bharatiya Nyaya Sanhita, 2023"
        assert answer.citations[0].section == "Section 103"
        assert answer.related_judgments[0].title == "Bachan Singh v. State of Punjab"
        assert answer.disclaimer == DISCLAIMER

        user_prompt = generator.calls[0]["messages"][1]["content"]
        assert "Content: Murder. Whoever commits murder" in user_prompt

    def test_citations_capped_at_three(self, store):
        hits = [
            ("Text", {"type": "statute", "bns_section": str(i)}, 0.1 + i * 0.01)
            for i in range(5)
        ]
        orchestrator = make_orchestrator(store, FakeVectorStore(hits), FakeGenerator())

        answer = orchestrator.query("punishment for theft")

        assert len(answer.citations) == 3

    def test_modes_off_return_null_sections(self, store, vector_store):
        orchestrator = make_orchestrator(store, vector_store, FakeGenerator([ANSWER_WITH_SECTIONS]))

        answer = orchestrator.query("murder punishment")

        assert answer.arguments is None
        assert answer.neutral_analysis is None
        assert "[FACTORS]" not in answer.answer

    def test_modes_on(self, store, vector_store):
        generator = FakeGenerator([ANSWER_WITH_SECTIONS])
        orchestrator = make_orchestrator(store, vector_store, generator)

        answer = orchestrator.query("murder punishment", arguments_mode=True, analysis_mode=True)

        assert answer.answer == "BNS Section 103 prescribes death or imprisonment for life."
        assert answer.neutral_analysis.factors == ["Intention"]
        assert answer.arguments.against == ["Sudden provocation"]
        system_prompt = generator.calls[0]["messages"][0]["content"]
        assert "[FACTORS]" in system_prompt and "[FOR]" in system_prompt

    def test_no_matches_still_answers(self, store):
        store_far = FakeVectorStore([("Unrelated", {"type": "statute"}, 0.9)])
        generator = FakeGenerator(["General answer."])

        answer = make_orchestrator(store, store_far, generator).query("adverse possession")

        assert answer.answer == "General answer."
        assert answer.citations == []
        assert "No relevant legal documents found." in generator.calls[0]["messages"][1]["content"]

    def test_missing_vector_store(self, store):
        generator = FakeGenerator(["From general knowledge."])

        answer = make_orchestrator(store, None, generator).query("what is bail")

        assert answer.answer == "From general knowledge."
        assert answer.citations == []
        assert "Database not available" in generator.calls[0]["messages"][1]["content"]


class TestFailures:
    """Generator failures and missing configuration."""

    def test_timeout_becomes_error_answer(self, store, vector_store):
        orchestrator = make_orchestrator(store, vector_store, FakeGenerator([UpstreamTimeout(120)]))

        answer = orchestrator.query("murder punishment")

        assert answer.answer.startswith("Error:")
        assert "timed out" in answer.answer
        assert answer.citations

    def test_protocol_error_not_cached(self, store, vector_store):
        generator = FakeGenerator([UpstreamProtocolError(503, "overloaded"), "Recovered answer."])
        orchestrator = make_orchestrator(store, vector_store, generator)

        first = orchestrator.query("murder punishment")
        second = orchestrator.query("murder punishment")

        assert first.answer == "Error: API Error 503: overloaded"
        assert second.answer == "Recovered answer."

    def test_no_llm_returns_sources(self, store, vector_store):
        answer = make_orchestrator(store, vector_store, None).query("murder punishment")

        assert answer.answer == LLM_NOT_CONFIGURED_ANSWER
        assert answer.citations

    def test_no_llm_no_sources(self, store):
        answer = make_orchestrator(store, None, None).query("murder punishment")

        assert answer.answer == LLM_NOT_CONFIGURED_NO_SOURCES
        assert answer.citations == []

    def test_transport_failure_becomes_error_answer(self, store, vector_store):
        def refuse(**kwargs):
            raise httpx.ConnectError("connection refused")

        client = SimpleNamespace(models=SimpleNamespace(generate_content=refuse))
        generator = GeminiGenerator(api_key=None, client=client)
        orchestrator = make_orchestrator(store, vector_store, generator)

        answer = orchestrator.query("punishment for murder")

        assert answer.answer.startswith("Error:")
        assert "connection refused" in answer.answer
        assert answer.citations


class TestCaching:
    """Answer and retrieval caching."""

    def test_repeat_query_served_from_cache(self, store, vector_store):
        generator = FakeGenerator(["First answer."])
        orchestrator = make_orchestrator(store, vector_store, generator)

        first = orchestrator.query("murder punishment")
        second = orchestrator.query("  murder punishment ")

        assert first.answer == second.answer == "First answer."
        assert len(generator.calls) == 1
        assert len(vector_store.queries) == 1

    def test_mode_change_misses_cache(self, store, vector_store):
        generator = FakeGenerator(["Plain.", ANSWER_WITH_SECTIONS])
        orchestrator = make_orchestrator(store, vector_store, generator)

        orchestrator.query("murder punishment")
        answer = orchestrator.query("murder punishment", analysis_mode=True)

        assert len(generator.calls) == 2
        assert answer.neutral_analysis is not None

    def test_language_is_part_of_key(self, store, vector_store):
        generator = FakeGenerator(["English.", "murder punishment", "हिंदी उत्तर"])
        orchestrator = make_orchestrator(store, vector_store, generator)

        orchestrator.query("murder punishment", language="en")
        answer = orchestrator.query("murder punishment", language="hi")

        assert answer.answer == "हिंदी उत्तर"

    def test_unavailable_retrieval_not_cached(self, store):
        failing = FakeVectorStore(error=RuntimeError("down"))
        cache = ResponseCache()
        orchestrator = make_orchestrator(store, failing, None, cache=cache)

        orchestrator.retrieve("murder")
        orchestrator.retrieve("murder")

        assert len(failing.queries) == 2

    def test_repeat_hindi_retrieve_translates_once(self, store, vector_store):
        generator = FakeGenerator(["punishment for murder"])
        orchestrator = make_orchestrator(store, vector_store, generator)

        orchestrator.retrieve("हत्या की सजा", "hi")
        orchestrator.retrieve("हत्या की सजा", "hi")

        assert len(generator.calls) == 1
        assert len(vector_store.queries) == 1

    def test_cached_retrieval_keeps_user_query(self, store, vector_store):
        generator = FakeGenerator(["punishment for murder"])
        orchestrator = make_orchestrator(store, vector_store, generator)

        first = orchestrator.retrieve("हत्या की सजा", "hi")
        second = orchestrator.retrieve("हत्या की सजा", "hi")

        assert second is first
        assert second.query == "हत्या की सजा"
        assert second.search_query == "punishment for murder"


class TestTranslation:
    """Non-English queries are searched in English."""

    def test_search_uses_translation(self, store, vector_store):
        generator = FakeGenerator(["punishment for murder", "हत्या के लिए मृत्युदंड या आजीवन कारावास।"])
        orchestrator = make_orchestrator(store, vector_store, generator)

        answer = orchestrator.query("हत्या की सजा क्या है?", language="hi")

        assert vector_store.queries[0][0] == "punishment for murder"
        assert answer.answer == "हत्या के लिए मृत्युदंड या आजीवन कारावास।"
        assert "Hindi" in generator.calls[1]["messages"][0]["content"]

    def test_translation_failure_uses_original(self, store, vector_store):
        generator = FakeGenerator([UpstreamTimeout(20), "उत्तर"])
        orchestrator = make_orchestrator(store, vector_store, generator)

        orchestrator.query("हत्या की सजा", language="hi")

        assert vector_store.queries[0][0] == "हत्या की सजा"


class TestRouting:
    """Direct answers for greetings."""

    def test_greeting_answered_directly(self, store, vector_store):
        generator = FakeGenerator(["Hello! I can help with Indian law questions."])
        orchestrator = make_orchestrator(store, vector_store, generator, classifier=QueryClassifier())

        answer = orchestrator.query("hello")

        assert answer.answer == "Hello! I can help with Indian law questions."
        assert answer.citations == []
        assert vector_store.queries == []

    def test_greeting_without_llm_searches(self, store, vector_store):
        orchestrator = make_orchestrator(store, vector_store, None, classifier=QueryClassifier())

        answer = orchestrator.query("hello")

        assert answer.answer == LLM_NOT_CONFIGURED_ANSWER
        assert vector_store.queries

    def test_classifier_disabled(self, store, vector_store):
        generator = FakeGenerator(["Answer."])
        orchestrator = make_orchestrator(store, vector_store, generator)

        orchestrator.query("hello")

        assert vector_store.queries

    def test_model_router_direct(self, store, vector_store):
        generator = FakeGenerator(["I am an assistant for Indian legal questions."])
        orchestrator = make_orchestrator(
            store, vector_store, generator, router=ModelRouter(generator)
        )

        answer = orchestrator.query("what's your favourite colour")

        assert answer.answer == "I am an assistant for Indian legal questions."
        assert vector_store.queries == []

    def test_model_router_search(self, store, vector_store):
        generator = FakeGenerator(["SEARCH", "Murder is punishable with death."])
        orchestrator = make_orchestrator(
            store, vector_store, generator, router=ModelRouter(generator)
        )

        answer = orchestrator.query("punishment for murder")

        assert answer.answer == "Murder is punishable with death."
        assert answer.citations


class TestConversation:
    """Session-aware behaviour."""

    def test_follow_up_is_reformulated(self, store, vector_store):
        session_id = store.create_session()
        store.add_message(session_id, "user", "What is the punishment for murder?")
        store.add_message(session_id, "assistant", "Under BNS Section 103 it is death or life imprisonment.")
        generator = FakeGenerator(["Exceptions are listed in the section."])
        orchestrator = make_orchestrator(store, vector_store, generator)

        orchestrator.query("What about exceptions?", session_id=session_id)

        assert vector_store.queries[0][0] == "What about exceptions? (in context of BNS SECTION 103)"
        user_prompt = generator.calls[0]["messages"][1]["content"]
        assert "Conversation so far:\nUser: What is the punishment for murder?" in user_prompt

    def test_orchestrator_does_not_record_messages(self, store, vector_store):
        session_id = store.create_session()
        orchestrator = make_orchestrator(store, vector_store, FakeGenerator())

        orchestrator.query("murder punishment", session_id=session_id)

        assert store.get_history(session_id) == []
