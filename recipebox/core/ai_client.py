import logging
from typing import Optional
from datetime import datetime, timezone
from google import genai
from google.genai import types

from ..ai.utils import normalize_model_id
from ..exceptions import BackendFailure, BackendUnavailable, QuotaExceeded
from ..settings import settings

logger = logging.getLogger("recipebox.ai")


def _is_rate_limited(exc: Exception) -> bool:
    if getattr(exc, "code", None) == 429:
        return True
    text = f"{getattr(exc, 'status', '') or ''} {exc}".upper()
    return "RESOURCE_EXHAUSTED" in text or "429" in text


def _is_quota_exhausted(exc: Exception) -> bool:
    # A spent daily/monthly quota, as opposed to a per-minute rate limit
    text = str(exc).lower()
    return "quota" in text or "exhausted" in text or "billing" in text


class AIClient:
    """
    Thin async wrapper over the Gemini SDK.

    In "mock" mode, or without an API key, the backend is simply unavailable
    and callers skip straight to their non-AI fallbacks.
    """
    _instance = None

    def __init__(self, mode: Optional[str] = None, api_key: Optional[str] = None):
        self.mode = (mode or settings.ai_mode).lower()  # "mock" or "gemini"
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.timeout_ms = int(settings.ai_timeout_seconds * 1000)
        self._client: Optional[genai.Client] = None
        self.last_error: Optional[str] = None
        self.last_error_at: Optional[datetime] = None

        if self.mode == "gemini" and self.api_key:
            self._client = genai.Client(
                api_key=self.api_key,
                http_options=types.HttpOptions(timeout=self.timeout_ms),
            )
        elif self.mode == "gemini":
            logger.warning("AI_MODE=gemini but GEMINI_API_KEY is not set; AI extraction disabled")

    @classmethod
    def get_instance(cls):
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def is_available(self) -> bool:
        return self.mode == "gemini" and self._client is not None

    def _record_error(self, e: Exception):
        self.last_error = f"{e.__class__.__name__}: {str(e)}"
        self.last_error_at = datetime.now(timezone.utc)

    async def generate_text(
        self,
        prompt: str,
        model: str,
        system_instruction: Optional[str] = None,
        max_output_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        json_mode: bool = True,
    ) -> str:
        """
        One call to one model (Async). Returns the raw response text.

        Raises BackendUnavailable when AI is off, QuotaExceeded on 429s and
        BackendFailure on anything else (including an empty response).
        """
        if not self.is_available():
            raise BackendUnavailable(f"AI is not available (mode={self.mode})")

        model_id = normalize_model_id(model)
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            max_output_tokens=max_output_tokens or settings.ai_max_output_tokens,
            temperature=settings.ai_temperature if temperature is None else temperature,
            response_mime_type="application/json" if json_mode else "text/plain",
        )

        try:
            response = await self._client.aio.models.generate_content(
                model=model_id,
                contents=prompt,
                config=config
            )
        except Exception as e:
            self._record_error(e)
            if _is_rate_limited(e):
                exhausted = _is_quota_exhausted(e)
                logger.warning(f"Gemini rate limited model={model_id} quota_exhausted={exhausted}")
                raise QuotaExceeded(str(e), model=model_id, quota_exhausted=exhausted) from e
            logger.error(f"Gemini generation failed model={model_id}: {e}")
            raise BackendFailure(str(e), model=model_id) from e

        if not response.text:
            logger.warning(f"Gemini returned empty response model={model_id}")
            raise BackendFailure("Empty response", model=model_id)

        return response.text


# Singleton instance access
ai_client = AIClient.get_instance()
