"""
Gemini text generator.

The recipe service only needs `generate(prompt) -> str`; the response is
plain text in the three-section layout, so no JSON schema is requested.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

from google import genai
from google.genai import types

from app.config import settings
from app.utils.exceptions import GenerationError

logger = logging.getLogger(__name__)


def get_response_text(response: Any) -> str:
    """
    Extract text from a google-genai response.

    Tries `response.text` first, then the parts of the first candidate.
    """
    try:
        text = getattr(response, "text", None)
        if isinstance(text, str) and text.strip():
            return text
    except ValueError:
        # Raised by some SDK versions when the candidate was blocked
        pass

    candidates = getattr(response, "candidates", None) or []
    if candidates:
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        texts = [p.text for p in parts if isinstance(getattr(p, "text", None), str)]
        joined = "".join(texts)
        if joined.strip():
            return joined

    return ""


def response_debug_summary(response: Any) -> Dict[str, Any]:
    """Compact description of a response, used when it carries no text."""
    summary: Dict[str, Any] = {}
    candidates = getattr(response, "candidates", None) or []
    summary["candidates"] = len(candidates)
    if candidates:
        c0 = candidates[0]
        summary["finish_reason"] = str(getattr(c0, "finish_reason", None))
        summary["safety_ratings"] = str(getattr(c0, "safety_ratings", None))
    summary["prompt_feedback"] = str(getattr(response, "prompt_feedback", None))
    return summary


class GeminiService:
    """Service for interacting with Gemini API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[genai.Client] = None,
    ) -> None:
        self._api_key = api_key or settings.gemini_api_key
        self.model = model or settings.gemini_model
        self._client = client

    @property
    def client(self) -> genai.Client:
        """Get or create Gemini client (lazy initialization)."""
        if self._client is None:
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def generate(self, prompt: str) -> str:
        """
        Generate free text for a prompt.

        Raises:
            GenerationError: If the API call fails or returns no text
        """
        def _sync_call() -> Any:
            return self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=settings.gemini_temperature,
                    top_p=settings.gemini_top_p,
                    max_output_tokens=settings.gemini_max_tokens,
                ),
            )

        logger.info("Calling Gemini", extra={"model": self.model, "prompt_chars": len(prompt)})

        try:
            response = await asyncio.to_thread(_sync_call)
        except Exception as e:
            logger.error("Gemini call failed: %s", str(e), exc_info=True)
            raise GenerationError(f"Gemini call failed: {str(e)}") from e

        text = get_response_text(response).strip()
        if not text:
            logger.warning(
                "Gemini returned empty response",
                extra={"summary": response_debug_summary(response)},
            )
            raise GenerationError("Gemini returned empty response")

        logger.debug("Gemini raw response:\n%s", text)
        return text
