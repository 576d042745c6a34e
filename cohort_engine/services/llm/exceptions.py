class LLMServiceError(Exception):
    """Base exception for LLM services."""
    pass


class LLMAPIError(LLMServiceError):
    """Exception for errors during LLM API calls."""
    pass


class LLMResponseParseError(LLMServiceError):
    """The LLM answered, but not with a usable question."""
    pass


class LLMTimeoutError(LLMServiceError):
    """The LLM did not answer within the configured timeout."""
    pass
