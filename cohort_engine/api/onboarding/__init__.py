"""
Onboarding Package
Follow-up questioning and generational cohort classification endpoints
"""

from .service import FollowUpOrchestrator, clean_question
from .models import (
    FollowUpRequest,
    FollowUpResponse,
    ClassifyRequest,
    GenerationSelectRequest,
)
from .router import router as onboarding_router

__all__ = [
    "FollowUpOrchestrator",
    "clean_question",
    "FollowUpRequest",
    "FollowUpResponse",
    "ClassifyRequest",
    "GenerationSelectRequest",
    "onboarding_router",
]
