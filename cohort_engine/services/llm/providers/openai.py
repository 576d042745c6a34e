"""
OpenAI LLM Provider implementation.
"""

import logging
import os
from typing import Any, Dict, Optional

from .base import BaseLLMProvider
from cohort_engine.infrastructure.constants.llm_constants import (
    OPENAI_MODEL_NAME,
    OPENAI_TEMPERATURE,
    OPENAI_MAX_TOKENS,
    ENV_OPENAI_API_KEY,
)
from cohort_engine.services.llm.exceptions import LLMAPIError
from cohort_engine.services.llm.retry import with_retry

logger = logging.getLogger(__name__)


class OpenAIProvider(BaseLLMProvider):
    """OpenAI provider backed by the AsyncOpenAI chat completions client."""

    provider_name = "openai"

    def __init__(self, config: Dict[str, Any]):
        config = dict(config)
        config.setdefault("model", OPENAI_MODEL_NAME)
        config.setdefault("temperature", OPENAI_TEMPERATURE)
        config.setdefault("max_tokens", OPENAI_MAX_TOKENS)

        if not config.get("api_key"):
            config["api_key"] = os.getenv(ENV_OPENAI_API_KEY, "")

        super().__init__(config)

    def _get_client(self) -> Any:
        """Get or create the OpenAI client."""
        if self._client is None:
            try:
                from openai import AsyncOpenAI
                self._client = AsyncOpenAI(
                    api_key=self.config.api_key, timeout=self.config.timeout
                )
                logger.info("Initialized OpenAI client")
            except Exception as e:
                logger.error(f"Failed to initialize OpenAI client: {e}")
                raise LLMAPIError(f"OpenAI client unavailable: {e}") from e
        return self._client

    @with_retry()
    async def generate_text(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        **kwargs
    ) -> str:
        """Generate text using OpenAI chat completions."""
        client = self._get_client()

        messages = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})
        messages.append({"role": "user", "content": prompt})

        try:
            response = await client.chat.completions.create(
                model=self.config.model,
                messages=messages,
                temperature=kwargs.get("temperature", self.config.temperature),
                max_tokens=kwargs.get("max_tokens", self.config.max_tokens),
            )
            if not response.choices:
                return ""
            return response.choices[0].message.content or ""

        except Exception as e:
            logger.error(f"Error generating text with OpenAI: {e}")
            raise LLMAPIError(str(e)) from e
