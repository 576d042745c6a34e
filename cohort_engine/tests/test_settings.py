"""
Tests for configuration settings.
"""

import pytest

from cohort_engine.infrastructure.config.settings import Settings
from cohort_engine.infrastructure.data.config import (
    ConfigurationError,
    OnboardingConfig,
    OnboardingConfigError,
)


def test_onboarding_defaults(monkeypatch):
    for key in (
        "ONBOARDING_MAX_ATTEMPTS",
        "ONBOARDING_DIRECT_STYLE_ATTEMPT",
        "QUESTION_SIMILARITY_THRESHOLD",
        "QUESTION_LLM_TIMEOUT",
    ):
        monkeypatch.delenv(key, raising=False)

    config = Settings().get_onboarding_config()

    assert config == OnboardingConfig(
        max_attempts=4, direct_style_attempt=2, similarity_threshold=0.7, llm_timeout=10.0
    )


def test_onboarding_overrides(monkeypatch):
    monkeypatch.setenv("ONBOARDING_MAX_ATTEMPTS", "6")
    monkeypatch.setenv("ONBOARDING_DIRECT_STYLE_ATTEMPT", "3")
    monkeypatch.setenv("QUESTION_SIMILARITY_THRESHOLD", "0.8")
    monkeypatch.setenv("QUESTION_LLM_TIMEOUT", "2.5")

    settings = Settings()

    assert settings.max_attempts == 6
    assert settings.direct_style_attempt == 3
    assert settings.similarity_threshold == 0.8
    assert settings.get_llm_config("gemini")["timeout"] == 2.5


def test_invalid_number_raises(monkeypatch):
    monkeypatch.setenv("ONBOARDING_MAX_ATTEMPTS", "four")

    with pytest.raises(ConfigurationError, match="ONBOARDING_MAX_ATTEMPTS"):
        Settings()


def test_invalid_policy_raises(monkeypatch):
    monkeypatch.setenv("QUESTION_SIMILARITY_THRESHOLD", "1.5")

    with pytest.raises(OnboardingConfigError):
        Settings()


def test_llm_config_is_a_copy(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("OPENAI_MODEL", "gpt-test")
    settings = Settings()

    config = settings.get_llm_config("OpenAI")
    config["model"] = "changed"

    assert settings.get_llm_config("openai")["model"] == "gpt-test"
    assert settings.get_llm_config("openai")["api_key"] == "sk-test"


def test_unknown_llm_provider_config(monkeypatch):
    with pytest.raises(ConfigurationError, match="Unknown LLM provider"):
        Settings().get_llm_config("anthropic")


@pytest.mark.parametrize(
    "provider,api_key,expected",
    [
        ("none", "key", False),
        ("gemini", None, False),
        ("gemini", "key", True),
        ("mistral", "key", False),
    ],
)
def test_llm_enabled(monkeypatch, provider, api_key, expected):
    monkeypatch.setenv("LLM_PROVIDER", provider)
    if api_key is None:
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    else:
        monkeypatch.setenv("GEMINI_API_KEY", api_key)

    assert Settings().llm_enabled() is expected


def test_cors_origins(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example,https://b.example")

    assert Settings().cors_origins == ["https://a.example", "https://b.example"]
