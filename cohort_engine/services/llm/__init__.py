"""
LLM service module: the language model collaborator that phrases follow-up
questions.

Provides:
- LLMServiceFactory: creates the configured provider from centralized settings
- Provider exports for direct provider access
"""

import logging
from typing import Any, Dict, Optional

from cohort_engine.infrastructure.config.settings import settings
from .exceptions import LLMServiceError, LLMAPIError, LLMResponseParseError, LLMTimeoutError
from .retry import RetryConfig, with_retry
from .providers import BaseLLMProvider, GeminiProvider, OpenAIProvider, get_provider

logger = logging.getLogger(__name__)


class LLMServiceFactory:
    """Factory for creating LLM providers using a configuration-driven approach"""

    @staticmethod
    def create(provider: str, config: Optional[Dict[str, Any]] = None) -> BaseLLMProvider:
        """
        Create an LLM provider.

        Args:
            provider: The LLM provider name (e.g., 'openai', 'gemini')
            config: Configuration for the provider. If not provided, loads
                from centralized settings.

        Raises:
            ValueError: If provider is unknown
        """
        provider_lower = provider.lower()
        if config is None:
            try:
                config = settings.get_llm_config(provider_lower)
            except Exception as e:
                logger.error(f"Unknown LLM provider: {provider}")
                raise ValueError(f"Unknown LLM provider: {provider}") from e
        instance = get_provider(provider_lower, config)
        logger.info(f"Using {instance.__class__.__name__} for provider '{provider}'")
        return instance

    @staticmethod
    def create_default() -> Optional[BaseLLMProvider]:
        """The configured provider, or None when questions come from the bank only."""
        if not settings.llm_enabled():
            return None
        return LLMServiceFactory.create(settings.llm_provider)


__all__ = [
    "LLMServiceFactory",
    "LLMServiceError",
    "LLMAPIError",
    "LLMResponseParseError",
    "LLMTimeoutError",
    "RetryConfig",
    "with_retry",
    "BaseLLMProvider",
    "GeminiProvider",
    "OpenAIProvider",
    "get_provider",
]
