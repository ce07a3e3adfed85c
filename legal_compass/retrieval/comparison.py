"""
Comparison of two legal texts (clauses, sections or judgments).

The generator is asked for JSON; when the reply does not parse, the raw
text is returned as the implications field instead of failing.
"""

import logging
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from ..errors import GenerationError, MalformedStructuredOutput
from ..generation import TextGenerator, system_message, user_message
from ..models import ClauseComparison

logger = logging.getLogger(__name__)


class ComparisonSchema(BaseModel):
    differences: list[str] = Field(default_factory=list, description="Differences in content, intent or penalties.")
    similarities: list[str] = Field(default_factory=list, description="Shared principles.")
    implications: str = Field("", description="Which text is stricter or broader, and what that means.")


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json fence if present."""
    text = text.strip()
    if "```json" in text:
        text = text.split("```json")[-1].split("```")[0].strip()
    elif text.startswith("```"):
        text = text.strip("`").strip()
    return text


def parse_comparison(raw: str) -> ClauseComparison:
    """Parse a JSON comparison reply.

    Raises:
        MalformedStructuredOutput: if the reply is not valid JSON of the
            expected shape
    """
    try:
        parsed = ComparisonSchema.model_validate_json(strip_code_fence(raw))
    except ValidationError as e:
        raise MalformedStructuredOutput(str(e)) from e
    return ClauseComparison(
        differences=parsed.differences,
        similarities=parsed.similarities,
        implications=parsed.implications,
        raw=raw,
    )


class ClauseComparator:
    """Compares two legal texts using the generator."""

    SYSTEM_PROMPT = """You are a Legal Comparison Expert for Indian law.
Compare the two legal texts provided (clauses, sections, or judgments).

Return strictly in JSON format with these EXACT keys:
1. "differences": list of key differences in content, intent or penalties
2. "similarities": list of shared principles
3. "implications": string explaining which text is stricter or broader and what that means

IMPORTANT: Return ONLY valid JSON."""

    LLM_UNAVAILABLE = "Error: LLM not available for comparison."

    def __init__(self, generator: Optional[TextGenerator], max_tokens: int = 1500):
        self.generator = generator
        self.max_tokens = max_tokens

    def compare(self, text_a: str, text_b: str) -> ClauseComparison:
        if self.generator is None:
            return ClauseComparison(implications=self.LLM_UNAVAILABLE)

        messages = [
            system_message(self.SYSTEM_PROMPT),
            user_message(f"Text A:\n{text_a}\n\nText B:\n{text_b}"),
        ]
        try:
            raw = self.generator.generate(messages, max_tokens=self.max_tokens)
        except GenerationError as e:
            logger.error(f"[COMPARE] LLM Error: {e}")
            return ClauseComparison(implications=f"Error generating comparison: {e}")

        try:
            return parse_comparison(raw)
        except MalformedStructuredOutput as e:
            logger.warning(f"[COMPARE] Reply was not valid JSON, returning raw text: {str(e)[:100]}")
            return ClauseComparison(implications=raw.strip(), raw=raw)
