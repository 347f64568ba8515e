"""
NoteForge Backend: Google Gemini Gateway
========================================

What:  LLMService implementation backed by the Google Gemini API.
How:   Uses the google-generativeai SDK to send a single-turn user message to
       the configured model and pulls the text of the first candidate out of
       the response.
Who:   Instantiated once at import (module singleton); called by AIService.

Failure handling:
    - No API key            → ConfigError (checked before any network call)
    - SDK/API error status  → UpstreamError carrying the HTTP code when known
    - Anything else raised  → UpstreamError
    There is no retry, timeout or circuit breaker: a slow upstream stalls only
    the request that is waiting on it.
"""

import logging
import time
from typing import Any, Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from noteforge.config import settings
from noteforge.exceptions import ConfigError, UpstreamError
from noteforge.services.llm_base import LLMService

logger = logging.getLogger(__name__)


def extract_text(response: Any) -> str:
    """
    Returns candidates[0].content.parts[0].text, or "" if any step is missing.

    `response.text` is avoided on purpose: the SDK raises ValueError from it
    when the candidate list is empty (e.g. a blocked prompt).
    """
    try:
        text = response.candidates[0].content.parts[0].text
    except (AttributeError, IndexError, KeyError, TypeError):
        return ""
    return text if isinstance(text, str) else ""


class GeminiService(LLMService):
    """
    Gemini implementation of the LLM gateway.

    Request shape (one turn, one text part):
        [{"role": "user", "parts": [{"text": prompt}]}]
    """

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        self.api_key = settings.llm_api_key if api_key is None else api_key
        self.model_name = model_name or settings.llm_model

        # The SDK keeps credentials in module-level state
        if self.api_key:
            genai.configure(api_key=self.api_key)

        self.model = genai.GenerativeModel(self.model_name)

        logger.info(
            "GeminiService initialized with model=%s (api key %s)",
            self.model_name,
            "configured" if self.api_key else "missing",
        )

    @staticmethod
    def build_contents(prompt: str) -> list:
        return [{"role": "user", "parts": [{"text": prompt}]}]

    async def generate(self, prompt: str) -> str:
        if not self.api_key:
            raise ConfigError("LLM_API_KEY is not configured.")

        start_time = time.perf_counter()
        try:
            response = await self.model.generate_content_async(self.build_contents(prompt))
        except google_exceptions.GoogleAPICallError as e:
            logger.error("Gemini API error (status %s): %s", e.code, e.message)
            status = int(e.code) if e.code is not None else None
            raise UpstreamError(
                message=f"Gemini API call failed with status: {status}",
                status_code=status,
                context={"model": self.model_name},
            ) from e
        except Exception as e:
            logger.error("Error calling Gemini API: %s", str(e), exc_info=True)
            raise UpstreamError(
                message=f"Gemini API call failed: {e}",
                context={"model": self.model_name, "error_type": type(e).__name__},
            ) from e

        text = extract_text(response)
        logger.info(
            "Gemini call completed in %.0fms, %d chars",
            (time.perf_counter() - start_time) * 1000,
            len(text),
        )
        return text

    async def health_check(self) -> bool:
        """
        Lists models as a reachability probe; consumes no tokens.
        """
        if not self.api_key:
            return False
        try:
            models = genai.list_models()
            target = f"models/{self.model_name}"
            if target not in [m.name for m in models]:
                logger.warning("Configured model %s not found in available models", target)
            return True
        except Exception as e:
            logger.warning("Gemini health check failed: %s", str(e))
            return False


gemini_service = GeminiService()
