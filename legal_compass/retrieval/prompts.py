"""
Prompt construction for legal answer generation.

Builds the system and user messages for a query:
- a fixed system prompt (role, grounding rules, output structure, disclaimer)
- optional language, long-form and structured-section directives
- a user message with the retrieved context, the query, and the
  structured-section instructions repeated at the end, where models follow
  them most reliably
"""

from dataclasses import dataclass
from typing import Optional

from ..generation import ChatMessage, system_message, user_message


LANGUAGE_NAMES = {
    "en": "English",
    "hi": "Hindi (Devanagari script)",
    "mr": "Marathi",
    "ta": "Tamil",
    "te": "Telugu",
    "bn": "Bengali",
    "gu": "Gujarati",
    "kn": "Kannada",
    "ml": "Malayalam",
    "pa": "Punjabi",
}

LONG_FORM_TRIGGERS = ["explain", "detail", "elaborate", "analysis", "ingredients"]

DEFAULT_MAX_TOKENS = 1500
LONG_FORM_MAX_TOKENS = 3000


def language_name(code: str) -> str:
    return LANGUAGE_NAMES.get((code or "en").lower(), code)


def is_english(code: str) -> bool:
    return (code or "en").lower() in ("en", "english")


def is_long_form(query: str) -> bool:
    lowered = query.lower()
    return any(trigger in lowered for trigger in LONG_FORM_TRIGGERS)


@dataclass
class PromptBundle:
    """Messages plus the token budget to send them with."""
    messages: list[ChatMessage]
    max_tokens: int
    long_form: bool = False


class PromptBuilder:
    """Assembles generator messages for a legal query."""

    SYSTEM_PROMPT = """You are an expert Indian Legal Assistant (Legal Compass AI), specializing in the Bharatiya Nyaya Sanhita (BNS), the Indian Penal Code (IPC) and Supreme Court judgments.

Instructions:
1. Prioritize the provided Context. If the Context is thin or missing, you may supplement it with general legal knowledge, and say so.
2. NEVER invent section numbers, punishments or penalties. If you are not sure of a section number, say that it should be verified.
3. Explicitly mention 'BNS Section X' or 'IPC Section Y' when they appear in the Context.
4. Tone: professional, neutral and precise.

OUTPUT FORMAT:
**Direct Answer:** [one or two sentences answering the question]

**Relevant Provisions:** [sections and what they say]

**Punishment:** [prescribed punishment, if applicable]

**Source:** [statute or judgment relied on]

End with a one-line disclaimer that this is general legal information, not legal advice."""

    LANGUAGE_DIRECTIVE = """
LANGUAGE: Reply entirely in {language}. Keep section numbers, act names, case names and other proper nouns untranslated (e.g. "BNS Section 103")."""

    LONG_FORM_DIRECTIVE = """
DEPTH: The user wants a detailed explanation. Elaborate on each ingredient of the offence, relevant exceptions, illustrations and judicial interpretation where available."""

    ANALYSIS_DIRECTIVE = """
NEUTRAL ANALYSIS MODE: After the main answer, provide a neutral legal analysis using EXACTLY this format, one item per line:
[FACTORS]
- factor the court would consider
- another factor
[/FACTORS]
[INTERPRETATIONS]
- one possible interpretation
- another interpretation
[/INTERPRETATIONS]"""

    ARGUMENTS_DIRECTIVE = """
ARGUMENTS MODE: After the main answer, provide balanced arguments using EXACTLY this format, one item per line:
[FOR]
- argument in favour
- another argument in favour
[/FOR]
[AGAINST]
- argument against
- another argument against
[/AGAINST]"""

    ANALYSIS_REMINDER = (
        "IMPORTANT: Provide a Neutral Legal Analysis. Format MUST include exactly these tags: "
        "[FACTORS] one item per line [/FACTORS] and [INTERPRETATIONS] one item per line [/INTERPRETATIONS]."
    )

    ARGUMENTS_REMINDER = (
        "IMPORTANT: Provide balanced arguments. Format MUST include exactly these tags: "
        "[FOR] one item per line [/FOR] and [AGAINST] one item per line [/AGAINST]."
    )

    def __init__(
        self,
        default_max_tokens: int = DEFAULT_MAX_TOKENS,
        long_form_max_tokens: int = LONG_FORM_MAX_TOKENS,
    ):
        self.default_max_tokens = default_max_tokens
        self.long_form_max_tokens = long_form_max_tokens

    def build_system_prompt(
        self,
        language: str = "en",
        long_form: bool = False,
        arguments_mode: bool = False,
        analysis_mode: bool = False,
    ) -> str:
        parts = [self.SYSTEM_PROMPT]
        if not is_english(language):
            parts.append(self.LANGUAGE_DIRECTIVE.format(language=language_name(language)))
        if long_form:
            parts.append(self.LONG_FORM_DIRECTIVE)
        if analysis_mode:
            parts.append(self.ANALYSIS_DIRECTIVE)
        if arguments_mode:
            parts.append(self.ARGUMENTS_DIRECTIVE)
        return "\n".join(parts)

    def build_user_prompt(
        self,
        query: str,
        context_text: str,
        arguments_mode: bool = False,
        analysis_mode: bool = False,
        history_text: Optional[str] = None,
    ) -> str:
        parts = []
        if history_text:
            parts.append(f"Conversation so far:\n{history_text}")
        parts.append(f"Context:\n{context_text}")
        parts.append(f"Query: {query}")
        if analysis_mode:
            parts.append(self.ANALYSIS_REMINDER)
        if arguments_mode:
            parts.append(self.ARGUMENTS_REMINDER)
        return "\n\n".join(parts)

    def build(
        self,
        query: str,
        context_text: str,
        language: str = "en",
        arguments_mode: bool = False,
        analysis_mode: bool = False,
        history_text: Optional[str] = None,
    ) -> PromptBundle:
        long_form = is_long_form(query)
        system = self.build_system_prompt(language, long_form, arguments_mode, analysis_mode)
        user = self.build_user_prompt(query, context_text, arguments_mode, analysis_mode, history_text)
        return PromptBundle(
            messages=[system_message(system), user_message(user)],
            max_tokens=self.long_form_max_tokens if long_form else self.default_max_tokens,
            long_form=long_form,
        )

    # Auxiliary prompts

    DIRECT_PERSONA_PROMPT = (
        "You are Legal Compass AI, a friendly assistant for Indian law questions. "
        "Reply briefly and politely to greetings or questions about yourself. "
        "Do not give legal advice in this reply."
    )

    TRANSLATION_PROMPT = (
        "You are a legal translation assistant. Translate the following legal query into English. "
        "Preserve all legal terminology, section numbers and act names. "
        "Return ONLY the translated query as a single line, no explanations."
    )

    def build_direct_prompt(self, query: str, language: str = "en") -> list[ChatMessage]:
        system = self.DIRECT_PERSONA_PROMPT
        if not is_english(language):
            system += f" Reply in {language_name(language)}."
        return [system_message(system), user_message(query)]

    def build_translation_prompt(self, query: str) -> list[ChatMessage]:
        return [system_message(self.TRANSLATION_PROMPT), user_message(query)]
