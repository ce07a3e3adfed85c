"""
Tests for distance-filtered retrieval and citation building.
"""

from conftest import BNS_103_HIT, JUDGMENT_HIT, FakeVectorStore

from legal_compass.models import RetrievalHit
from legal_compass.retrieval import RetrievalConfig, Retriever
from legal_compass.retrieval.config import (
    DB_UNAVAILABLE_CONTEXT,
    NO_MATCH_CONTEXT,
    SEARCH_FAILED_CONTEXT,
)
from legal_compass.retrieval.retriever import format_context, section_number


def statute(section, distance, text="Statute text"):
    return (text, {"type": "statute", "source": "BNS", "bns_section": section}, distance)


class TestFiltering:
    """Distance cutoff and context cap."""

    def test_hit_beyond_threshold_excluded(self):
        store = FakeVectorStore([statute("103", 0.46)])

        result = Retriever(store).retrieve("murder")

        assert result.hits == []
        assert result.citations == []
        assert result.context_text == NO_MATCH_CONTEXT
        assert result.available

    def test_hit_within_threshold_included(self):
        store = FakeVectorStore([statute("103", 0.10)])

        result = Retriever(store).retrieve("murder")

        assert len(result.hits) == 1
        assert result.citations[0].section == "Section 103"

    def test_hit_at_threshold_included(self):
        store = FakeVectorStore([statute("103", 0.45)])

        assert len(Retriever(store).retrieve("murder").hits) == 1

    def test_context_capped(self):
        store = FakeVectorStore([statute(str(100 + i), 0.1 + i * 0.01) for i in range(5)])

        result = Retriever(store, RetrievalConfig(top_k=5, max_context_hits=4)).retrieve("murder")

        assert len(result.hits) == 4
        assert [h.metadata["bns_section"] for h in result.hits] == ["100", "101", "102", "103"]

    def test_requests_top_k(self):
        store = FakeVectorStore([BNS_103_HIT])

        Retriever(store, RetrievalConfig(top_k=7)).retrieve("murder")

        assert store.queries == [("murder", 7)]

    def test_context_text_format(self):
        hits = [RetrievalHit(text="Body", metadata={"source": "BNS"})]

        assert format_context(hits) == "---\nSource: BNS\nContent: Body"


class TestUnavailable:
    """Degraded retrieval never raises."""

    def test_missing_store(self):
        result = Retriever(None).retrieve("murder")

        assert not result.available
        assert result.hits == []
        assert result.context_text == DB_UNAVAILABLE_CONTEXT

    def test_search_error(self):
        store = FakeVectorStore(error=RuntimeError("index corrupted"))

        result = Retriever(store).retrieve("murder")

        assert not result.available
        assert result.citations == []
        assert result.context_text == SEARCH_FAILED_CONTEXT


class TestCitations:
    """Mapping hits into citations and related judgments."""

    def test_statute_citation(self):
        result = Retriever(FakeVectorStore([BNS_103_HIT])).retrieve("murder")

        citation = result.citations[0]
        assert citation.source == "Bharatiya Nyaya Sanhita, 2023"
        assert citation.section == "Section 103"
        assert "imprisonment for life" in citation.excerpt
        assert result.related_judgments == []

    def test_statute_with_ipc_section(self):
        hit = ("Text", {"type": "statute", "ipc_section": "302", "bns_section": "N/A"}, 0.2)

        result = Retriever(FakeVectorStore([hit])).retrieve("murder")

        assert result.citations[0].section == "Section 302"

    def test_judgment_citation_and_related(self):
        result = Retriever(FakeVectorStore([JUDGMENT_HIT])).retrieve("murder")

        citation = result.citations[0]
        assert citation.source == "Supreme Court Judgment"
        assert citation.section == "Bachan Singh v. State of Punjab"

        judgment = result.related_judgments[0]
        assert judgment.title == "Bachan Singh v. State of Punjab"
        assert judgment.case_id == "1980-SC-707"

    def test_untitled_judgment_not_related(self):
        hit = ("Judgment text", {"type": "judgment", "title": "Unknown Case"}, 0.2)

        result = Retriever(FakeVectorStore([hit])).retrieve("murder")

        assert result.citations[0].section == "Case Law"
        assert result.related_judgments == []

    def test_unknown_type_has_no_citation(self):
        hit = ("Notes", {"type": "commentary", "source": "Blog"}, 0.2)

        result = Retriever(FakeVectorStore([hit])).retrieve("murder")

        assert len(result.hits) == 1
        assert result.citations == []

    def test_long_excerpt_truncated(self):
        hit = statute("103", 0.1, text="x" * 500)

        citation = Retriever(FakeVectorStore([hit])).retrieve("murder").citations[0]

        assert citation.excerpt == "x" * 200 + "..."

    def test_section_number_prefers_generic_key(self):
        assert section_number({"section": "5", "bns_section": "6"}) == "5"
        assert section_number({"bns_section": ""}) is None
