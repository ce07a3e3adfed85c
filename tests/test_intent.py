"""
Tests for query routing: rule-based classification and the model router.
"""

from conftest import FakeGenerator

from legal_compass.errors import UpstreamTimeout
from legal_compass.retrieval import ModelRouter, QueryClassifier, QueryType, Route, classify_query


class TestClassifyQuery:
    """Keyword classification."""

    def test_greeting_is_simple(self):
        assert classify_query("hello") == QueryType.SIMPLE
        assert classify_query("Namaste!") == QueryType.SIMPLE
        assert classify_query("Who are you?") == QueryType.SIMPLE

    def test_legal_query(self):
        assert classify_query("What is IPC 302?") == QueryType.LEGAL
        assert classify_query("Punishment for theft under BNS") == QueryType.LEGAL

    def test_unmatched_defaults_to_legal(self):
        assert classify_query("xyz") == QueryType.LEGAL

    def test_documented_examples(self):
        assert classify_query("hello") == QueryType.SIMPLE
        assert classify_query("What is the punishment under IPC section 302") == QueryType.LEGAL
        assert classify_query("xyz random text") == QueryType.LEGAL

    def test_simple_wins_ties(self):
        assert classify_query("hi, what is section 420?") == QueryType.SIMPLE

    def test_keywords_match_whole_words(self):
        # "hi" inside "Delhi" or "chip"
        assert classify_query("Courts in Delhi") == QueryType.LEGAL
        assert classify_query("this chip") == QueryType.LEGAL

    def test_classifier_object(self):
        assert QueryClassifier().classify("thanks") == QueryType.SIMPLE


class TestModelRouter:
    """Model-based routing stage."""

    def test_search_token_routes_to_search(self):
        router = ModelRouter(FakeGenerator(["SEARCH"]))

        decision = router.route("What is BNS 103?")

        assert decision.route == Route.SEARCH
        assert decision.direct_answer is None

    def test_direct_reply(self):
        reply = "I am Legal Compass, an assistant for Indian law questions."
        router = ModelRouter(FakeGenerator([reply]))

        decision = router.route("who made you")

        assert decision.route == Route.DIRECT
        assert decision.direct_answer == reply

    def test_short_reply_routes_to_search(self):
        router = ModelRouter(FakeGenerator(["ok"]))

        assert router.route("hmm").route == Route.SEARCH

    def test_failure_routes_to_search(self):
        router = ModelRouter(FakeGenerator([UpstreamTimeout(20)]))

        assert router.route("anything").route == Route.SEARCH

    def test_router_passes_model_and_timeout(self):
        generator = FakeGenerator(["SEARCH"])
        ModelRouter(generator, model="gemma-3-4b-it", timeout=5).route("question")

        call = generator.calls[0]
        assert call["model"] == "gemma-3-4b-it"
        assert call["timeout"] == 5
        assert call["messages"][0]["role"] == "system"
