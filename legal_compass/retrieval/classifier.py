"""
Query routing strategies.

Routing is a chain: the rule-based QueryClassifier runs first, and the
optional ModelRouter asks the generator whether a legal lookup is needed.
Either stage can be disabled on its own.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import GenerationError
from ..generation import TextGenerator, system_message, user_message

logger = logging.getLogger(__name__)


class Route(str, Enum):
    SEARCH = "search"
    DIRECT = "direct"


@dataclass
class RouteDecision:
    """Outcome of a routing stage."""
    route: Route
    direct_answer: Optional[str] = None

    @classmethod
    def search(cls) -> "RouteDecision":
        return cls(route=Route.SEARCH)

    @classmethod
    def direct(cls, answer: str) -> "RouteDecision":
        return cls(route=Route.DIRECT, direct_answer=answer)


class ModelRouter:
    """Asks the generator to either answer directly or reply SEARCH."""

    ROUTER_PROMPT = """You are the router for an Indian legal research assistant.
If the user's message needs a lookup of statutes, sections, punishments, procedures or case law, reply with exactly one word: SEARCH
Otherwise (greetings, thanks, questions about you, general chit-chat), answer the user directly in at most three sentences."""

    SEARCH_TOKEN = "SEARCH"

    # Replies shorter than this are not treated as answers
    MIN_ANSWER_CHARS = 10

    def __init__(
        self,
        generator: TextGenerator,
        model: Optional[str] = None,
        max_tokens: int = 150,
        timeout: float = 20.0,
    ):
        self.generator = generator
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout

    def route(self, query: str) -> RouteDecision:
        """Decide between retrieval and a direct answer.

        Any generator failure routes to retrieval.
        """
        try:
            reply = self.generator.generate(
                [system_message(self.ROUTER_PROMPT), user_message(query)],
                max_tokens=self.max_tokens,
                model=self.model,
                timeout=self.timeout,
            )
        except GenerationError as e:
            logger.warning(f"[ROUTER] Model routing failed, searching instead: {e}")
            return RouteDecision.search()

        reply = (reply or "").strip()
        if self.SEARCH_TOKEN in reply.upper().split() or reply.upper().startswith(self.SEARCH_TOKEN):
            return RouteDecision.search()

        if len(reply) < self.MIN_ANSWER_CHARS:
            return RouteDecision.search()

        logger.info("[ROUTER] Model answered directly")
        return RouteDecision.direct(reply)
