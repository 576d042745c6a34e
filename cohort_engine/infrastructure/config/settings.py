"""Application settings and configuration"""

import os
import logging
from typing import Dict, Any, Optional

from cohort_engine.infrastructure.constants.llm_constants import (
    GEMINI_MODEL_NAME,
    GEMINI_TEMPERATURE,
    GEMINI_MAX_TOKENS,
    GEMINI_TOP_P,
    GEMINI_TOP_K,
    OPENAI_MODEL_NAME,
    OPENAI_TEMPERATURE,
    OPENAI_MAX_TOKENS,
    QUESTION_LLM_TIMEOUT,
    ENV_LLM_PROVIDER,
    ENV_QUESTION_LLM_TIMEOUT,
    ENV_GEMINI_API_KEY,
    ENV_GEMINI_MODEL,
    ENV_GEMINI_TEMPERATURE,
    ENV_GEMINI_MAX_TOKENS,
    ENV_OPENAI_API_KEY,
    ENV_OPENAI_MODEL,
    ENV_OPENAI_TEMPERATURE,
    ENV_OPENAI_MAX_TOKENS,
    DEFAULT_TOP_P,
    DEFAULT_TOP_K,
)
from cohort_engine.infrastructure.constants.cohort_constants import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_DIRECT_STYLE_ATTEMPT,
    DEFAULT_SIMILARITY_THRESHOLD,
    ENV_MAX_ATTEMPTS,
    ENV_DIRECT_STYLE_ATTEMPT,
    ENV_SIMILARITY_THRESHOLD,
)
from cohort_engine.infrastructure.data.config import (
    ConfigurationError,
    OnboardingConfig,
)


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}")


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"{key} must be a number, got {value!r}")


class Settings:
    """Manages application settings and configuration"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

        # Database configuration (Response Store)
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./cohort_engine.db")

        # Follow-up policy
        self.max_attempts = _env_int(ENV_MAX_ATTEMPTS, DEFAULT_MAX_ATTEMPTS)
        self.direct_style_attempt = _env_int(
            ENV_DIRECT_STYLE_ATTEMPT, DEFAULT_DIRECT_STYLE_ATTEMPT
        )
        self.similarity_threshold = _env_float(
            ENV_SIMILARITY_THRESHOLD, DEFAULT_SIMILARITY_THRESHOLD
        )
        self.question_llm_timeout = _env_float(
            ENV_QUESTION_LLM_TIMEOUT, QUESTION_LLM_TIMEOUT
        )

        # LLM Provider Configurations
        self.llm_provider = os.getenv(ENV_LLM_PROVIDER, "gemini").lower()
        self.llm_providers = {
            "gemini": {
                "api_key": os.getenv(ENV_GEMINI_API_KEY),
                "model": os.getenv(ENV_GEMINI_MODEL, GEMINI_MODEL_NAME),
                "temperature": _env_float(ENV_GEMINI_TEMPERATURE, GEMINI_TEMPERATURE),
                "max_tokens": _env_int(ENV_GEMINI_MAX_TOKENS, GEMINI_MAX_TOKENS),
                "top_p": GEMINI_TOP_P,
                "top_k": GEMINI_TOP_K,
                "timeout": self.question_llm_timeout,
            },
            "openai": {
                "api_key": os.getenv(ENV_OPENAI_API_KEY),
                "model": os.getenv(ENV_OPENAI_MODEL, OPENAI_MODEL_NAME),
                "temperature": _env_float(ENV_OPENAI_TEMPERATURE, OPENAI_TEMPERATURE),
                "max_tokens": _env_int(ENV_OPENAI_MAX_TOKENS, OPENAI_MAX_TOKENS),
                "top_p": DEFAULT_TOP_P,
                "top_k": DEFAULT_TOP_K,
                "timeout": self.question_llm_timeout,
            },
        }

        # CORS settings
        default_origins = [
            "http://localhost:3000",  # Local Next.js dev
            "http://localhost:3001",
        ]
        self.cors_origins = os.getenv("CORS_ORIGINS", ",".join(default_origins)).split(
            ","
        )
        self.cors_methods = os.getenv("CORS_METHODS", "GET,POST,OPTIONS").split(",")
        self.cors_headers = os.getenv("CORS_HEADERS", "*").split(",")

        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        # Uvicorn server settings (for run_api.py)
        self.uvicorn_host = os.getenv("UVICORN_HOST", "0.0.0.0")
        self.uvicorn_port = _env_int("UVICORN_PORT", 8000)
        self.uvicorn_reload = os.getenv("UVICORN_RELOAD", "false").lower() == "true"

        # Fail fast on an invalid policy
        self.get_onboarding_config()

        # Set default log level for httpx and httpcore to reduce debug noise
        logging.getLogger("httpx").setLevel(logging.INFO)
        logging.getLogger("httpcore").setLevel(logging.INFO)

    def get_onboarding_config(self) -> OnboardingConfig:
        """Get the follow-up policy configuration"""
        return OnboardingConfig(
            max_attempts=self.max_attempts,
            direct_style_attempt=self.direct_style_attempt,
            similarity_threshold=self.similarity_threshold,
            llm_timeout=self.question_llm_timeout,
        )

    def get_llm_config(self, provider: Optional[str] = None) -> Dict[str, Any]:
        """Get LLM configuration for specific provider"""
        provider = (provider or self.llm_provider).lower()
        if provider not in self.llm_providers:
            raise ConfigurationError(f"Unknown LLM provider: {provider}")
        return self.llm_providers[provider].copy()

    def llm_enabled(self) -> bool:
        """Whether follow-up questions may be phrased by a language model"""
        if self.llm_provider in ("", "none", "disabled"):
            return False
        config = self.llm_providers.get(self.llm_provider)
        if not config:
            self.logger.warning(
                f"Unknown LLM provider '{self.llm_provider}', using the question bank only"
            )
            return False
        if not config.get("api_key"):
            self.logger.warning(
                f"{self.llm_provider.capitalize()} API key not found. Follow-up questions will use the question bank."
            )
            return False
        return True


# Global instance
settings = Settings()
