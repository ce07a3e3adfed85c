"""
Response cache for retrieval results and generated answers.

Two kinds of entries share one bounded LRU map:
- retrieval entries keyed by normalized search query and language
- answer entries keyed by language + query + top citation sources

Entries expire after ttl_seconds and the least recently used entry is
evicted once max_entries is reached.
"""

import hashlib
import logging
import time
from collections import OrderedDict
from typing import Any, Callable, Optional

from ..models import CachedAnswer, Citation, RetrievalResult

logger = logging.getLogger(__name__)


def normalize_query(query: str) -> str:
    return " ".join(query.lower().split())


def _fingerprint(*parts: str) -> str:
    return hashlib.sha256("\x1f".join(parts).encode("utf-8")).hexdigest()[:32]


def retrieval_key(search_query: str, k: int, language: str = "en") -> str:
    """Cache key for a raw retrieval result set.

    Built from the query as the user wrote it, before any translation.
    """
    return "search:" + _fingerprint(normalize_query(search_query), str(k), (language or "en").lower())


def answer_key(
    language: str,
    query: str,
    citations: list[Citation],
    arguments_mode: bool = False,
    analysis_mode: bool = False,
) -> str:
    """Cache key for a structured answer.

    Built from the language, the trimmed query and the top-2 citation
    sources. Requested modes are part of the key so that an answer cached
    without analysis is never served to an analysis request.
    """
    top_sources = [c.source for c in citations[:2]]
    modes = f"args={int(arguments_mode)};analysis={int(analysis_mode)}"
    return "answer:" + _fingerprint(language, query.strip(), *top_sources, modes)


class ResponseCache:
    """Bounded, TTL-expiring LRU cache."""

    def __init__(
        self,
        max_entries: int = 512,
        ttl_seconds: float = 3600,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        # key -> (value, stored_at)
        self._entries: OrderedDict[str, tuple[Any, float]] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key, record=False) is not None

    def get(self, key: str, record: bool = True) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            if record:
                self.misses += 1
            return None

        value, stored_at = entry
        if self._clock() - stored_at > self.ttl_seconds:
            del self._entries[key]
            if record:
                self.misses += 1
            return None

        self._entries.move_to_end(key)
        if record:
            self.hits += 1
        return value

    def set(self, key: str, value: Any) -> None:
        if key in self._entries:
            self._entries.move_to_end(key)
        self._entries[key] = (value, self._clock())

        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"[CACHE] Evicted {evicted}")

    def clear(self) -> None:
        self._entries.clear()

    # Typed helpers used by the orchestrator

    def get_retrieval(self, key: str) -> Optional[RetrievalResult]:
        return self.get(key)

    def set_retrieval(self, key: str, result: RetrievalResult) -> None:
        self.set(key, result)

    def get_answer(self, key: str) -> Optional[CachedAnswer]:
        return self.get(key)

    def set_answer(self, key: str, answer: CachedAnswer) -> None:
        self.set(key, answer)

    def stats(self) -> dict:
        return {
            "entries": len(self._entries),
            "max_entries": self.max_entries,
            "hits": self.hits,
            "misses": self.misses,
        }
