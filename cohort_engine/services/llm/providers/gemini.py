"""
Gemini LLM Provider implementation.
"""

import logging
import os
from typing import Any, Dict, Optional

from .base import BaseLLMProvider
from cohort_engine.infrastructure.constants.llm_constants import (
    GEMINI_MODEL_NAME,
    GEMINI_TEMPERATURE,
    GEMINI_MAX_TOKENS,
    GEMINI_TOP_P,
    GEMINI_TOP_K,
    ENV_GEMINI_API_KEY,
)
from cohort_engine.services.llm.exceptions import LLMAPIError
from cohort_engine.services.llm.retry import with_retry

logger = logging.getLogger(__name__)


class GeminiProvider(BaseLLMProvider):
    """Gemini provider backed by the google-genai async client."""

    provider_name = "gemini"

    def __init__(self, config: Dict[str, Any]):
        config = dict(config)
        config.setdefault("model", GEMINI_MODEL_NAME)
        config.setdefault("temperature", GEMINI_TEMPERATURE)
        config.setdefault("max_tokens", GEMINI_MAX_TOKENS)
        config.setdefault("top_p", GEMINI_TOP_P)
        config.setdefault("top_k", GEMINI_TOP_K)

        # Get API key from config or environment
        if not config.get("api_key"):
            config["api_key"] = os.getenv(ENV_GEMINI_API_KEY, "")

        super().__init__(config)

    def _get_client(self) -> Any:
        """Get or create the Gemini client."""
        if self._client is None:
            try:
                import google.genai as genai
                self._client = genai.Client(api_key=self.config.api_key)
                logger.info("Initialized Gemini client")
            except Exception as e:
                logger.error(f"Failed to initialize Gemini client: {e}")
                raise LLMAPIError(f"Gemini client unavailable: {e}") from e
        return self._client

    @with_retry()
    async def generate_text(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        **kwargs
    ) -> str:
        """Generate text using Gemini."""
        client = self._get_client()

        try:
            from google.genai.types import GenerateContentConfig

            config = GenerateContentConfig(
                temperature=kwargs.get("temperature", self.config.temperature),
                max_output_tokens=kwargs.get("max_tokens", self.config.max_tokens),
                top_p=kwargs.get("top_p", self.config.top_p),
                top_k=kwargs.get("top_k", self.config.top_k),
                system_instruction=system_instruction,
            )

            response = await client.aio.models.generate_content(
                model=self.config.model,
                contents=prompt,
                config=config,
            )

            return response.text or ""

        except Exception as e:
            logger.error(f"Error generating text with Gemini: {e}")
            raise LLMAPIError(str(e)) from e
