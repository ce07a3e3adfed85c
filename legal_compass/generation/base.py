"""
Text generation capability used by the query pipeline.
"""

from typing import Optional, Protocol


ChatMessage = dict[str, str]  # {"role": "system" | "user" | "assistant", "content": ...}


class TextGenerator(Protocol):
    """Anything that turns role-tagged messages into text.

    Implementations raise UpstreamTimeout or UpstreamProtocolError on failure.
    """

    def generate(
        self,
        messages: list[ChatMessage],
        max_tokens: int = 1500,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> str:
        ...


def system_message(content: str) -> ChatMessage:
    return {"role": "system", "content": content}


def user_message(content: str) -> ChatMessage:
    return {"role": "user", "content": content}
