from dataclasses import dataclass
import logging

from cohort_engine.infrastructure.constants.cohort_constants import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_DIRECT_STYLE_ATTEMPT,
    DEFAULT_SIMILARITY_THRESHOLD,
)
from cohort_engine.infrastructure.constants.llm_constants import QUESTION_LLM_TIMEOUT

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Base class for configuration related errors"""
    pass


class OnboardingConfigError(ConfigurationError):
    """Raised when follow-up policy configuration is invalid"""
    pass


@dataclass(frozen=True)
class OnboardingConfig:
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    direct_style_attempt: int = DEFAULT_DIRECT_STYLE_ATTEMPT
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    llm_timeout: float = QUESTION_LLM_TIMEOUT

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Validate follow-up policy configuration"""
        if self.max_attempts < 1:
            raise OnboardingConfigError(
                f"max_attempts must be at least 1, got {self.max_attempts}"
            )
        if self.direct_style_attempt < 0:
            raise OnboardingConfigError(
                f"direct_style_attempt must be non-negative, got {self.direct_style_attempt}"
            )
        if not (0.0 < self.similarity_threshold <= 1.0):
            raise OnboardingConfigError(
                f"similarity_threshold must be in (0, 1], got {self.similarity_threshold}"
            )
        if self.llm_timeout <= 0:
            raise OnboardingConfigError(
                f"llm_timeout must be positive, got {self.llm_timeout}"
            )
