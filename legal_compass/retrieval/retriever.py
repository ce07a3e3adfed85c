"""
Vector retrieval with relevance filtering.

Wraps the vector store, drops hits beyond the distance cutoff, caps the
number of context hits and maps raw hits into Citation / RelatedJudgment
records. Retrieval never raises: a missing or failing store degrades to an
empty result with a sentinel context string.
"""

import logging
from typing import Optional

from ..errors import RetrievalUnavailable
from ..indexing import VectorStore
from ..models import (
    JUDGMENT,
    STATUTE,
    Citation,
    RelatedJudgment,
    RetrievalHit,
    RetrievalResult,
)
from .config import (
    DB_UNAVAILABLE_CONTEXT,
    DEFAULT_JUDGMENT_SOURCE,
    DEFAULT_STATUTE_SOURCE,
    NO_MATCH_CONTEXT,
    SEARCH_FAILED_CONTEXT,
    SECTION_KEYS,
    UNKNOWN_TITLES,
    RetrievalConfig,
)

logger = logging.getLogger(__name__)


def section_number(metadata: dict) -> Optional[str]:
    """Return the first populated section key, generic key preferred."""
    for key in SECTION_KEYS:
        value = metadata.get(key)
        if value not in (None, "", "N/A"):
            return str(value)
    return None


def has_real_title(metadata: dict) -> bool:
    title = str(metadata.get("title", "") or "").strip()
    return title.lower() not in UNKNOWN_TITLES


def format_context(hits: list[RetrievalHit]) -> str:
    """Render hits as the "Source / Content" context block."""
    parts = [f"---\nSource: {hit.source}\nContent: {hit.text}" for hit in hits]
    return "\n".join(parts)


class Retriever:
    """Distance-filtered top-k retrieval over a VectorStore."""

    def __init__(self, store: Optional[VectorStore], config: Optional[RetrievalConfig] = None):
        """Initialize the retriever.

        Args:
            store: Vector store, or None when it is not available
            config: Retrieval configuration
        """
        self.store = store
        self.config = config or RetrievalConfig()

    @property
    def available(self) -> bool:
        return self.store is not None

    def _excerpt(self, text: str) -> str:
        limit = self.config.excerpt_chars
        return text[:limit] + "..." if len(text) > limit else text

    def _search(self, query: str, k: int) -> list[RetrievalHit]:
        if self.store is None:
            raise RetrievalUnavailable("Vector store not initialized")
        try:
            documents, metadatas, distances = self.store.search(query, k)
        except Exception as e:
            raise RetrievalUnavailable(str(e)) from e

        return [
            RetrievalHit(text=doc or "", metadata=dict(meta or {}), distance=float(dist))
            for doc, meta, dist in zip(documents, metadatas, distances)
        ]

    def filter_hits(self, hits: list[RetrievalHit]) -> list[RetrievalHit]:
        """Apply the distance cutoff and the context cap."""
        accepted = []
        for hit in hits:
            if hit.distance > self.config.distance_threshold:
                logger.debug(f"[RETRIEVAL] Dropping hit at distance {hit.distance:.3f}")
                continue
            accepted.append(hit)
            if len(accepted) >= self.config.max_context_hits:
                break
        return accepted

    def build_citation(self, hit: RetrievalHit) -> Optional[Citation]:
        meta = hit.metadata
        if hit.hit_type == STATUTE:
            number = section_number(meta)
            return Citation(
                source=str(meta.get("law") or DEFAULT_STATUTE_SOURCE),
                section=f"Section {number}" if number else None,
                excerpt=self._excerpt(hit.text),
                url=meta.get("url"),
            )
        if hit.hit_type == JUDGMENT:
            title = str(meta.get("title") or "").strip()
            return Citation(
                source=str(meta.get("court") or DEFAULT_JUDGMENT_SOURCE),
                section=title if has_real_title(meta) else "Case Law",
                excerpt=self._excerpt(hit.text),
                url=meta.get("url"),
            )
        return None

    def build_related_judgment(self, hit: RetrievalHit) -> Optional[RelatedJudgment]:
        if hit.hit_type != JUDGMENT or not has_real_title(hit.metadata):
            return None
        meta = hit.metadata
        return RelatedJudgment(
            title=str(meta["title"]).strip(),
            excerpt=self._excerpt(hit.text),
            case_id=str(meta.get("case_id", "")),
        )

    def retrieve(self, query: str, k: Optional[int] = None) -> RetrievalResult:
        """Search the store and build citations for the accepted hits."""
        k = k or self.config.top_k
        result = RetrievalResult(query=query, search_query=query)

        try:
            raw_hits = self._search(query, k)
        except RetrievalUnavailable as e:
            if self.store is None:
                logger.warning("[RETRIEVAL] Vector store not available, answering without context")
                result.context_text = DB_UNAVAILABLE_CONTEXT
            else:
                logger.warning(f"[RETRIEVAL] Vector search error: {e}")
                result.context_text = SEARCH_FAILED_CONTEXT
            result.available = False
            return result

        result.hits = self.filter_hits(raw_hits)
        logger.info(
            f"[RETRIEVAL] {len(raw_hits)} candidates, {len(result.hits)} within "
            f"distance {self.config.distance_threshold}"
        )

        for hit in result.hits:
            citation = self.build_citation(hit)
            if citation:
                result.citations.append(citation)
            judgment = self.build_related_judgment(hit)
            if judgment:
                result.related_judgments.append(judgment)

        result.context_text = format_context(result.hits) if result.hits else NO_MATCH_CONTEXT
        return result
