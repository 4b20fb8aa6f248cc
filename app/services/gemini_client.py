# app/services/gemini_client.py
import logging
from typing import Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from app.core.config import settings
from app.services.logger import log_debug

logger = logging.getLogger(__name__)


class GeminiClient:
    """Thin wrapper over google-generativeai: prompt in, text (or None) out."""

    def __init__(self, api_key: str = "", model_name: str = "", timeout: Optional[float] = None):
        self.api_key = api_key or settings.GEMINI_API_KEY
        self.model_name = model_name or settings.GEMINI_MODEL
        self.timeout = timeout if timeout is not None else settings.GEMINI_TIMEOUT_SECONDS
        self._model = None

    def _get_model(self):
        if self._model is None:
            if not self.api_key:
                raise RuntimeError(
                    "Gemini API key not found. Set GEMINI_API_KEY (or GOOGLE_API_KEY) in .env "
                    "or as an environment variable."
                )
            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(self.model_name)
        return self._model

    def generate(self, prompt: str) -> Optional[str]:
        """
        Send one prompt and return the response text.

        Returns None when Gemini gives no usable text: an API error, a
        blocked/empty candidate list, or whitespace only. No retries.
        """
        model = self._get_model()

        log_debug("gemini_request", {"model": self.model_name, "prompt_chars": len(prompt)})

        try:
            response = model.generate_content(
                prompt,
                request_options={"timeout": self.timeout},
            )
        except google_exceptions.GoogleAPIError as e:
            logger.error("Gemini call failed (%s): %s", self.model_name, e)
            return None

        try:
            text = response.text
        except ValueError as e:
            # .text raises when the candidate was blocked or has no parts
            logger.warning("Gemini returned no text: %s", e)
            return None

        text = (text or "").strip()
        log_debug("gemini_response", {"model": self.model_name, "text": text})
        return text or None


_client: Optional[GeminiClient] = None


def get_gemini_client() -> GeminiClient:
    """FastAPI dependency; one client per process."""
    global _client
    if _client is None:
        _client = GeminiClient()
    return _client
