"""
Exception hierarchy for the Legal Compass engine.

None of these are allowed to escape a query: the orchestrator converts them
into a best-effort StructuredAnswer. They exist so each stage can signal
*why* it failed.
"""

from typing import Optional


class LegalCompassError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(LegalCompassError):
    """A required credential or model for the generator is missing."""


class GenerationError(LegalCompassError):
    """The text generator failed to produce an answer."""


class UpstreamTimeout(GenerationError):
    """The generation call exceeded its allotted time."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout
        if timeout is not None:
            message = f"LLM request timed out after {timeout:g} seconds"
        else:
            message = "LLM request timed out"
        super().__init__(message)


class UpstreamProtocolError(GenerationError):
    """The generator returned a non-success status or an unusable payload."""

    def __init__(self, status: Optional[int] = None, body: str = ""):
        self.status = status
        self.body = body
        if status is not None:
            message = f"API Error {status}: {body}"
        else:
            message = f"Unexpected LLM response: {body}"
        super().__init__(message)


class RetrievalUnavailable(LegalCompassError):
    """The vector store is missing or the search call raised."""


class MalformedStructuredOutput(LegalCompassError):
    """Generator output was expected to be JSON but did not parse."""


class SessionNotFoundError(LegalCompassError):
    """Raised by a strict ConversationStore for writes to unknown sessions."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")
