class OnboardingError(Exception):
    """Base exception for the onboarding engine."""
    pass


class InputValidationError(OnboardingError, ValueError):
    """Raw responses are missing or malformed; fatal for the current call."""
    pass
