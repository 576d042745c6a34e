"""
LLM Provider implementations.

Usage:
    from cohort_engine.services.llm.providers import get_provider

    provider = get_provider("gemini", config)
    question = await provider.generate_text(instruction)
"""

from typing import Any, Dict, Optional

from .base import BaseLLMProvider, LLMProviderConfig
from .gemini import GeminiProvider
from .openai import OpenAIProvider

_PROVIDERS = {
    "gemini": GeminiProvider,
    "openai": OpenAIProvider,
}


def get_provider(provider_name: str, config: Optional[Dict[str, Any]] = None) -> BaseLLMProvider:
    """
    Factory function to get an LLM provider by name.

    Raises:
        ValueError: If provider_name is not recognized
    """
    provider_class = _PROVIDERS.get(provider_name.lower())
    if provider_class is None:
        raise ValueError(f"Unknown LLM provider: {provider_name}")
    return provider_class(config or {})


__all__ = [
    "BaseLLMProvider",
    "LLMProviderConfig",
    "GeminiProvider",
    "OpenAIProvider",
    "get_provider",
]
