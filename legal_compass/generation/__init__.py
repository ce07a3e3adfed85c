"""
Text generation backends.
"""

from .base import ChatMessage, TextGenerator, system_message, user_message
from .gemini import GeminiGenerator, split_messages

__all__ = [
    "ChatMessage",
    "TextGenerator",
    "system_message",
    "user_message",
    "GeminiGenerator",
    "split_messages",
]
