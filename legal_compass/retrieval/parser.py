"""
Parsing of semi-structured generator output.

The generator is asked to wrap optional sections in bracket delimiters:

    [FACTORS] ... [/FACTORS]  [INTERPRETATIONS] ... [/INTERPRETATIONS]
    [FOR] ... [/FOR]          [AGAINST] ... [/AGAINST]

This module turns those sections into lists of strings and produces the
visible answer with the sections removed. The delimiter grammar lives only
here (SECTION_SPECS), so it can be replaced without touching callers.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from ..models import Arguments, NeutralAnalysis

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SectionSpec:
    """Delimiters and fallback for one structured field."""
    name: str
    start: str
    end: str
    placeholder: str
    alternates: tuple[tuple[str, str], ...] = ()

    @property
    def delimiters(self) -> list[tuple[str, str]]:
        return [(self.start, self.end), *self.alternates]


FACTORS = SectionSpec("factors", "[FACTORS]", "[/FACTORS]", "Analysis pending")
INTERPRETATIONS = SectionSpec(
    "interpretations", "[INTERPRETATIONS]", "[/INTERPRETATIONS]", "Further research required"
)
FOR = SectionSpec(
    "for", "[FOR]", "[/FOR]", "N/A",
    alternates=(("[ARGUMENTS FOR]", "[/ARGUMENTS FOR]"),),
)
AGAINST = SectionSpec(
    "against", "[AGAINST]", "[/AGAINST]", "N/A",
    alternates=(("[ARGUMENTS AGAINST]", "[/ARGUMENTS AGAINST]"),),
)

SECTION_SPECS = (FACTORS, INTERPRETATIONS, FOR, AGAINST)

# Any known delimiter, e.g. "[FOR]", "[ /against ]"
_DELIMITER_RE = re.compile(
    r"\[\s*/?\s*(?:FACTORS|INTERPRETATIONS|ARGUMENTS\s+FOR|ARGUMENTS\s+AGAINST|FOR|AGAINST)\s*\]",
    re.IGNORECASE,
)

# Opening delimiters only
_SECTION_START_RE = re.compile(
    r"\[\s*(?:FACTORS|INTERPRETATIONS|ARGUMENTS\s+FOR|ARGUMENTS\s+AGAINST|FOR|AGAINST)\s*\]",
    re.IGNORECASE,
)

# Untagged section headings the model sometimes writes instead
_PROSE_HEADING_RE = re.compile(
    r"^[ \t]*(?:#+[ \t]*)?(?:\*\*)?[ \t]*"
    r"(?:neutral\s+(?:legal\s+)?analysis|arguments\s+for|arguments\s+against|"
    r"factors|interpretations)"
    r"[ \t]*(?:\*\*)?[ \t]*:?[ \t]*(?:\*\*)?[ \t]*$"
    # or an inline label with content after the colon
    r"|^[ \t]*(?:#+[ \t]*)?(?:\*\*)?[ \t]*"
    r"(?:neutral\s+(?:legal\s+)?analysis|arguments\s+(?:for|against))"
    r"[ \t]*(?:\*\*)?[ \t]*:",
    re.IGNORECASE | re.MULTILINE,
)

_BULLET_RE = re.compile(r"^(?:[-•]+\s*|\*\s+|\d+[.)]\s+)")
_BLANK_RUN_RE = re.compile(r"\n{3,}")


def _tag_pattern(tag: str) -> str:
    """Regex for a delimiter, tolerant of case and inner whitespace."""
    inner = tag.strip("[]").strip()
    slash = inner.startswith("/")
    words = inner.lstrip("/").split()
    body = r"\s+".join(re.escape(w) for w in words)
    return r"\[\s*" + (r"/\s*" if slash else "") + body + r"\s*\]"


def split_items(block: str) -> list[str]:
    """Split a section body into list items, stripping bullet markers."""
    items = []
    for line in block.splitlines():
        item = _BULLET_RE.sub("", line.strip()).strip()
        if item:
            items.append(item)
    return items


def extract_tag(text: str, start_tag: str, end_tag: str) -> list[str]:
    """Extract list items between start_tag and end_tag.

    Matching is case-insensitive. When the closing tag is missing the
    section runs until the next known delimiter or the end of the text.
    """
    pattern = (
        _tag_pattern(start_tag)
        + r"(.*?)(?:"
        + _tag_pattern(end_tag)
        + r"|(?="
        + _DELIMITER_RE.pattern
        + r")|\Z)"
    )
    match = re.search(pattern, text, re.DOTALL | re.IGNORECASE)
    if not match:
        return []
    return split_items(match.group(1))


def extract_section(text: str, spec: SectionSpec) -> list[str]:
    """Try the primary delimiters, then any alternates."""
    for start, end in spec.delimiters:
        items = extract_tag(text, start, end)
        if items:
            return items
    return []


def clean_answer(raw: str) -> str:
    """Visible answer: main text only, without structured sections."""
    cut_points = [m.start() for m in (_SECTION_START_RE.search(raw), _PROSE_HEADING_RE.search(raw)) if m]
    answer = raw[: min(cut_points)] if cut_points else raw

    if not answer.strip() and cut_points:
        # Sections came first; drop tagged blocks and keep the rest
        answer = raw
        for spec in SECTION_SPECS:
            for start, end in spec.delimiters:
                answer = re.sub(
                    _tag_pattern(start) + r".*?" + _tag_pattern(end),
                    "",
                    answer,
                    flags=re.DOTALL | re.IGNORECASE,
                )

    answer = _DELIMITER_RE.sub("", answer)
    answer = _BLANK_RUN_RE.sub("\n\n", answer)
    return answer.strip()


@dataclass
class ParsedResponse:
    """Result of parsing one generator reply."""
    answer: str
    arguments: Optional[Arguments] = None
    neutral_analysis: Optional[NeutralAnalysis] = None
    sections: dict[str, list[str]] = field(default_factory=dict)


class ResponseParser:
    """Extracts structured sections from raw generator text."""

    def parse(
        self,
        raw: str,
        arguments_mode: bool = False,
        analysis_mode: bool = False,
    ) -> ParsedResponse:
        result = ParsedResponse(answer=clean_answer(raw))

        if analysis_mode:
            factors = extract_section(raw, FACTORS)
            interpretations = extract_section(raw, INTERPRETATIONS)
            result.sections.update(factors=factors, interpretations=interpretations)
            if factors or interpretations:
                result.neutral_analysis = NeutralAnalysis(
                    factors=factors or [FACTORS.placeholder],
                    interpretations=interpretations or [INTERPRETATIONS.placeholder],
                )
            else:
                logger.info("[PARSE] Analysis requested but no tagged sections found")

        if arguments_mode:
            for_args = extract_section(raw, FOR)
            against = extract_section(raw, AGAINST)
            result.sections.update({"for": for_args, "against": against})
            if for_args or against:
                result.arguments = Arguments(
                    for_args=for_args or [FOR.placeholder],
                    against=against or [AGAINST.placeholder],
                )
            else:
                logger.info("[PARSE] Arguments requested but no tagged sections found")

        return result
