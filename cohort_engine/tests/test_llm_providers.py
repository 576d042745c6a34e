"""
Tests for the LLM provider layer: factory, providers and retry helper.
"""

from types import SimpleNamespace
from typing import Any, Dict

import pytest
from unittest.mock import AsyncMock, MagicMock

from cohort_engine.infrastructure.config.settings import settings
from cohort_engine.services.llm import LLMServiceFactory
from cohort_engine.services.llm.exceptions import LLMAPIError, LLMServiceError
from cohort_engine.services.llm.providers import (
    GeminiProvider,
    LLMProviderConfig,
    OpenAIProvider,
    get_provider,
)
from cohort_engine.services.llm.retry import (
    RetryConfig,
    is_rate_limit_error,
    is_transient_error,
    with_retry,
)


@pytest.fixture
def minimal_config() -> Dict[str, Any]:
    """Return a minimal configuration for testing."""
    return {
        "api_key": "test-api-key",
        "model": "test-model",
        "temperature": 0.5,
        "max_tokens": 100,
    }


def test_create_providers(minimal_config):
    gemini = LLMServiceFactory.create("gemini", minimal_config)
    openai = LLMServiceFactory.create("OpenAI", minimal_config)

    assert isinstance(gemini, GeminiProvider)
    assert isinstance(openai, OpenAIProvider)
    assert gemini.model_name == "test-model"
    assert openai.config.temperature == 0.5
    assert gemini.get_model_info()["provider"] == "gemini"


def test_unknown_provider(minimal_config):
    with pytest.raises(ValueError, match="Unknown LLM provider"):
        LLMServiceFactory.create("unknown", minimal_config)
    with pytest.raises(ValueError, match="Unknown LLM provider"):
        get_provider("unknown")


def test_config_from_dict_keeps_extras():
    config = LLMProviderConfig.from_dict({"model": "m", "api_key": None, "region": "eu"})

    assert config.model == "m"
    assert config.api_key == ""
    assert config.extra == {"region": "eu"}


def test_create_default_disabled(monkeypatch):
    monkeypatch.setattr(settings, "llm_provider", "none")

    assert LLMServiceFactory.create_default() is None


def test_create_default_enabled(monkeypatch):
    monkeypatch.setattr(settings, "llm_provider", "gemini")
    monkeypatch.setitem(settings.llm_providers["gemini"], "api_key", "key")

    provider = LLMServiceFactory.create_default()

    assert isinstance(provider, GeminiProvider)
    assert provider.config.api_key == "key"


@pytest.mark.asyncio
async def test_gemini_generate_text(minimal_config):
    provider = GeminiProvider(minimal_config)
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(
        return_value=SimpleNamespace(text="Where did you grow up?")
    )
    provider._client = client

    text = await provider.generate_text("prompt", system_instruction="be brief")

    assert text == "Where did you grow up?"
    kwargs = client.aio.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["contents"] == "prompt"
    assert kwargs["config"].system_instruction == "be brief"
    assert kwargs["config"].max_output_tokens == 100


@pytest.mark.asyncio
async def test_gemini_failure_raises_api_error(minimal_config):
    provider = GeminiProvider(minimal_config)
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(side_effect=RuntimeError("invalid key"))
    provider._client = client

    with pytest.raises(LLMAPIError, match="invalid key"):
        await provider.generate_text("prompt")
    assert client.aio.models.generate_content.await_count == 1


@pytest.mark.asyncio
async def test_openai_generate_text(minimal_config):
    provider = OpenAIProvider(minimal_config)
    client = MagicMock()
    completion = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content="Which decade?"))]
    )
    client.chat.completions.create = AsyncMock(return_value=completion)
    provider._client = client

    text = await provider.generate_text("prompt", system_instruction="sys")

    assert text == "Which decade?"
    messages = client.chat.completions.create.call_args.kwargs["messages"]
    assert messages == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "prompt"},
    ]


def test_llm_errors_share_a_base():
    assert issubclass(LLMAPIError, LLMServiceError)


def test_error_classification():
    assert is_transient_error(Exception("503 Service Unavailable"))
    assert is_rate_limit_error(Exception("429 Too Many Requests"))
    assert not is_transient_error(Exception("invalid api key"))


@pytest.mark.asyncio
async def test_with_retry_retries_transient_errors():
    calls = AsyncMock(side_effect=[Exception("connection reset"), "ok"])

    @with_retry(RetryConfig(max_retries=1, base_delay=0.0, jitter=False))
    async def flaky():
        return await calls()

    assert await flaky() == "ok"
    assert calls.await_count == 2


@pytest.mark.asyncio
async def test_with_retry_does_not_retry_rate_limits():
    calls = AsyncMock(side_effect=Exception("429 rate limit, connection throttled"))

    @with_retry(RetryConfig(max_retries=3, base_delay=0.0, jitter=False))
    async def limited():
        return await calls()

    with pytest.raises(Exception, match="429"):
        await limited()
    assert calls.await_count == 1
