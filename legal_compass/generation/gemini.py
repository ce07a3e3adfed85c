"""
Google Gemini text generator.

Wraps the google-genai client behind the TextGenerator interface: one
blocking call per invocation, no streaming, no retries.
"""

import logging
from typing import Optional

import httpx
from google import genai
from google.genai import errors, types

from ..config import Settings
from ..errors import ConfigurationError, UpstreamProtocolError, UpstreamTimeout
from .base import ChatMessage

logger = logging.getLogger(__name__)


def _is_gemma(model_id: str) -> bool:
    # Gemma models reject system instructions
    return "gemma" in model_id.lower()


def split_messages(messages: list[ChatMessage]) -> tuple[str, list[ChatMessage]]:
    """Separate system messages from the conversational turns."""
    system_parts = [m["content"] for m in messages if m.get("role") == "system"]
    turns = [m for m in messages if m.get("role") != "system"]
    return "\n\n".join(system_parts), turns


class GeminiGenerator:
    """TextGenerator backed by Google Gemini / Gemma models."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-2.5-flash-lite",
        timeout: float = 120.0,
        temperature: float = 0.3,
        client: Optional[object] = None,
    ):
        """Create the generator.

        Args:
            api_key: Gemini API key. Required unless a client is passed.
            model: Default model id.
            timeout: Default request timeout in seconds.
            temperature: Sampling temperature.
            client: Preconstructed genai.Client (tests).
        """
        if client is None:
            if not api_key:
                raise ConfigurationError(
                    "API Key (GEMINI_API_KEY or GOOGLE_API_KEY) not found in environment variables."
                )
            client = genai.Client(api_key=api_key)

        self.client = client
        self.model = model
        self.timeout = timeout
        self.temperature = temperature

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiGenerator":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.llm_model,
            timeout=settings.llm_timeout,
        )

    def _build_request(
        self, messages: list[ChatMessage], model_id: str
    ) -> tuple[list[types.Content], Optional[str]]:
        system_text, turns = split_messages(messages)

        if system_text and _is_gemma(model_id):
            if turns and turns[0].get("role") == "user":
                first = {"role": "user", "content": f"{system_text}\n\n{turns[0]['content']}"}
                turns = [first] + turns[1:]
            else:
                turns = [{"role": "user", "content": system_text}] + turns
            system_text = ""

        contents = [
            types.Content(
                role="model" if m.get("role") == "assistant" else "user",
                parts=[types.Part(text=m["content"])],
            )
            for m in turns
        ]
        return contents, system_text or None

    def generate(
        self,
        messages: list[ChatMessage],
        max_tokens: int = 1500,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> str:
        model_id = model or self.model
        timeout = timeout if timeout is not None else self.timeout
        contents, system_instruction = self._build_request(messages, model_id)

        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=self.temperature,
            max_output_tokens=max_tokens,
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )

        logger.debug(f"[LLM] Calling {model_id} (max_tokens={max_tokens}, timeout={timeout}s)")
        try:
            response = self.client.models.generate_content(
                model=model_id,
                contents=contents,
                config=config,
            )
        except (httpx.TimeoutException, TimeoutError) as e:
            logger.warning(f"[LLM] {model_id} timed out after {timeout}s")
            raise UpstreamTimeout(timeout) from e
        except errors.APIError as e:
            logger.warning(f"[LLM] {model_id} failed with status {e.code}: {str(e.message)[:100]}")
            raise UpstreamProtocolError(e.code, str(e.message or e)) from e
        except httpx.HTTPError as e:
            logger.warning(f"[LLM] {model_id} transport error: {e}")
            raise UpstreamProtocolError(None, str(e)) from e
        except Exception as e:
            logger.error(f"[LLM] {model_id} client error: {e}", exc_info=True)
            raise UpstreamProtocolError(None, f"{type(e).__name__}: {e}") from e

        text = getattr(response, "text", None)
        if not text or not text.strip():
            raise UpstreamProtocolError(None, "Received empty content from LLM.")
        return text
