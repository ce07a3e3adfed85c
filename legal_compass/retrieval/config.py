"""
Retrieval configuration.
"""

from dataclasses import dataclass

from ..config import Settings


DEFAULT_STATUTE_SOURCE = "Bharatiya Nyaya Sanhita, 2023"
DEFAULT_JUDGMENT_SOURCE = "Supreme Court Judgment"

# Placeholder titles written by the ingestion scripts
UNKNOWN_TITLES = {"", "unknown", "unknown case", "n/a"}

# Metadata keys holding a section number, most generic first
SECTION_KEYS = ("section", "bns_section", "ipc_section")

DB_UNAVAILABLE_CONTEXT = "Database not available. Answer from general legal knowledge."
SEARCH_FAILED_CONTEXT = "Search unavailable."
NO_MATCH_CONTEXT = "No relevant legal documents found."


@dataclass
class RetrievalConfig:
    """Configuration for the retrieval step."""
    # Candidates requested from the vector store
    top_k: int = 5

    # Hits farther than this are dropped
    distance_threshold: float = 0.45

    # Stop accumulating context after this many accepted hits
    max_context_hits: int = 4

    # Characters of document text kept in citation excerpts
    excerpt_chars: int = 200

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetrievalConfig":
        return cls(
            top_k=settings.top_k,
            distance_threshold=settings.distance_threshold,
            max_context_hits=settings.max_context_hits,
        )
