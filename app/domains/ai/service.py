"""AI gateway layer with Google Gemini integration."""

import asyncio
import logging
import re
from typing import Any, Protocol

import google.generativeai as genai

from app.core.config import settings
from app.exceptions.ai import (
    AIConfigurationError,
    AIContentFilterError,
    AIQuotaExceededError,
    AIRateLimitError,
    AIServiceError,
    AIServiceUnavailableError,
    AITimeoutError,
)


logger = logging.getLogger(__name__)


class AIGateway(Protocol):
    """Anything that can turn a system instruction and user text into a reply."""

    async def generate(self, system_instruction: str, user_text: str) -> str:
        """Return generated text, possibly empty, or raise on failure."""
        ...


class GeminiGateway:
    """Gateway to Google Gemini.

    The SDK is configured lazily on the first request so the gateway can be
    constructed at import/startup time without credentials. One gateway is
    shared by the whole process; see ``app.core.dependencies.get_ai_gateway``.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str = "gemini-2.5-flash",
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self.base_url = base_url
        self.timeout = timeout
        self._configured = False

    @classmethod
    def from_settings(cls) -> "GeminiGateway":
        return cls(
            api_key=settings.gemini_api_key,
            model_name=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout=settings.ai_request_timeout,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _initialize_client(self):
        """Configure the Gemini SDK once."""
        if self._configured:
            return
        if not self.api_key:
            raise AIConfigurationError("Gemini API key not configured")

        options: dict[str, Any] = {"api_key": self.api_key}
        if self.base_url:
            # Proxies speak the REST surface only
            options["transport"] = "rest"
            options["client_options"] = {"api_endpoint": self.base_url}

        try:
            genai.configure(**options)
        except Exception as e:
            logger.error(f"Failed to initialize Gemini client: {str(e)}")
            raise AIConfigurationError(f"Failed to initialize AI service: {str(e)}") from e

        self._configured = True
        logger.info(f"Gemini client initialized with model: {self.model_name}")

    async def generate(self, system_instruction: str, user_text: str) -> str:
        """Request a single completion.

        Args:
            system_instruction: Full system instruction (prompt plus tone suffix)
            user_text: The user's turn

        Returns:
            Generated text; empty when the model answered with no text parts
        """
        self._initialize_client()

        model = genai.GenerativeModel(
            model_name=self.model_name,
            system_instruction=system_instruction,
        )
        contents = [{"role": "user", "parts": [user_text]}]

        if self.timeout is None:
            return await self._generate_content_async(model, contents)

        try:
            return await asyncio.wait_for(
                self._generate_content_async(model, contents), timeout=self.timeout
            )
        except TimeoutError:
            raise AITimeoutError(f"Gemini did not answer within {self.timeout}s") from None

    async def _generate_content_async(self, model: Any, contents: list[dict]) -> str:
        """Generate content using Gemini API asynchronously."""
        try:
            # Run the synchronous Gemini API call in a thread pool
            loop = asyncio.get_running_loop()
            response = await loop.run_in_executor(None, lambda: model.generate_content(contents))

            if not response:
                raise AIServiceError("Empty response from AI service")

            if not getattr(response, "candidates", None):
                feedback = getattr(response, "prompt_feedback", None)
                logger.error(f"AI response has no candidates, prompt feedback: {feedback}")
                raise AIContentFilterError()

            return self._extract_text(response.candidates[0])

        except AIServiceError:
            raise
        except Exception as e:
            raise self._map_error(e) from e

    def _extract_text(self, candidate: Any) -> str:
        content = getattr(candidate, "content", None)
        parts = getattr(content, "parts", None) or []
        text = "".join(getattr(part, "text", "") or "" for part in parts)
        if not text.strip():
            logger.warning(f"Gemini returned no text, finish reason: {getattr(candidate, 'finish_reason', None)}")
            return ""
        return text

    def _map_error(self, error: Exception) -> AIServiceError:
        """Translate an SDK/transport error into the AIServiceError hierarchy."""
        full_error_msg = str(error)
        error_msg = full_error_msg.lower()

        # Check quota first, quota errors usually carry a 429 as well
        if "quota" in error_msg:
            logger.error(f"Gemini quota exceeded: {full_error_msg}")
            return AIQuotaExceededError(details={"error": full_error_msg})
        if "429" in full_error_msg or ("rate" in error_msg and "limit" in error_msg):
            logger.warning(f"Gemini rate limit hit: {full_error_msg}")
            return AIRateLimitError(retry_after=self._extract_retry_delay(full_error_msg))
        if "503" in full_error_msg or "unavailable" in error_msg:
            logger.error(f"Gemini unavailable: {full_error_msg}")
            return AIServiceUnavailableError(details={"error": full_error_msg})

        logger.error(f"Gemini API call failed: {full_error_msg}")
        return AIServiceError(f"AI generation failed: {full_error_msg}")

    @staticmethod
    def _extract_retry_delay(error_message: str) -> int | None:
        """Extract retry delay from Gemini API error message.

        Args:
            error_message: Error message from Gemini API

        Returns:
            Retry delay in seconds, or None if the message carries none
        """
        # Pattern: "Please retry in 32.984803332s"
        match = re.search(r"retry in (\d+(?:\.\d+)?)s", error_message)
        if match:
            return int(float(match.group(1))) + 1
        return None
