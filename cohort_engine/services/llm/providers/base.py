"""
Base LLM Provider abstraction.

Every provider phrases follow-up questions from a plain-text instruction and
returns plain text; the orchestrator treats anything else as a failure.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class LLMProviderConfig:
    """Configuration for LLM providers."""

    api_key: str = ""
    model: str = ""
    temperature: float = 0.7
    max_tokens: int = 256
    top_p: float = 0.95
    top_k: int = 40
    timeout: float = 10.0
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "LLMProviderConfig":
        """Create config from dictionary, ignoring unknown keys."""
        known_keys = {"api_key", "model", "temperature", "max_tokens", "top_p", "top_k", "timeout"}
        known_params = {k: v for k, v in config.items() if k in known_keys and v is not None}
        extra_params = {k: v for k, v in config.items() if k not in known_keys}
        return cls(**known_params, extra=extra_params)


class BaseLLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    Subclasses create their client lazily so that constructing a provider
    never needs network access.
    """

    provider_name = "base"

    def __init__(self, config: Dict[str, Any]):
        self.config = LLMProviderConfig.from_dict(config)
        self._client = None
        logger.info(f"Initialized {self.__class__.__name__} with model: {self.config.model}")

    @property
    def model_name(self) -> str:
        return self.config.model

    @abstractmethod
    async def generate_text(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        **kwargs
    ) -> str:
        """
        Generate text from a prompt.

        Args:
            prompt: The user prompt
            system_instruction: Optional system instruction
            **kwargs: Generation overrides (temperature, max_tokens)

        Returns:
            Generated text response

        Raises:
            LLMAPIError: the provider call failed
        """
        pass

    def get_model_info(self) -> Dict[str, Any]:
        return {
            "provider": self.provider_name,
            "model": self.config.model,
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }
