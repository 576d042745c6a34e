"""
Constants for LLM configuration.

These constants are used as defaults in settings.py and by the providers
that phrase follow-up questions.
"""

# Gemini model constants
GEMINI_MODEL_NAME = "models/gemini-2.5-flash"
GEMINI_TEMPERATURE = 0.7
GEMINI_MAX_TOKENS = 256
GEMINI_TOP_P = 0.95
GEMINI_TOP_K = 40

# OpenAI model constants
OPENAI_MODEL_NAME = "gpt-4o-mini-2024-07-18"
OPENAI_TEMPERATURE = 0.7
OPENAI_MAX_TOKENS = 256

# Common constants
DEFAULT_TOP_P = 0.95
DEFAULT_TOP_K = 40

# Question phrasing should be quick; the orchestrator falls back to the bank on timeout
QUESTION_LLM_TIMEOUT = 10.0  # seconds

# Environment variable names
ENV_LLM_PROVIDER = "LLM_PROVIDER"
ENV_QUESTION_LLM_TIMEOUT = "QUESTION_LLM_TIMEOUT"

ENV_GEMINI_API_KEY = "GEMINI_API_KEY"
ENV_GEMINI_MODEL = "GEMINI_MODEL"
ENV_GEMINI_TEMPERATURE = "GEMINI_TEMPERATURE"
ENV_GEMINI_MAX_TOKENS = "GEMINI_MAX_TOKENS"

ENV_OPENAI_API_KEY = "OPENAI_API_KEY"
ENV_OPENAI_MODEL = "OPENAI_MODEL"
ENV_OPENAI_TEMPERATURE = "OPENAI_TEMPERATURE"
ENV_OPENAI_MAX_TOKENS = "OPENAI_MAX_TOKENS"
