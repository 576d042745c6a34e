"""
Request and response models for the onboarding endpoints.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from cohort_engine.domain.models.onboarding import (
    AnalysisResult,
    CohortResult,
    ConversationState,
    ExtractedSignals,
)


class FollowUpRequest(BaseModel):
    """One round of the follow-up loop; the conversation state travels with the request."""

    responses: Any = Field(
        None, description="Every answer so far, keyed by question slot id"
    )
    state: Optional[ConversationState] = Field(
        None, description="State returned by the previous call; omit on the first call"
    )
    answered_slot: Optional[str] = Field(
        None, description="Slot id of the answer submitted with this call"
    )
    session_id: Optional[str] = None


class FollowUpResponse(BaseModel):
    success: bool = True
    needs_follow_up: bool
    proceed_with_unknown: bool = False
    question: Optional[str] = None
    required_info: List[str] = Field(
        default_factory=list, description="Required facts still missing"
    )
    analysis: AnalysisResult
    state: ConversationState
    cohort: Optional[CohortResult] = Field(
        None, description="Set once the follow-up sequence has ended"
    )


class ClassifyRequest(BaseModel):
    birth_year: Optional[int] = None
    birth_decade: Optional[int] = None
    region: Optional[str] = None


class GenerationSelectRequest(BaseModel):
    """Manual override of the detected generation."""

    generation: str = Field(..., description="One of the cohort or micro-generation labels")
    birth_year: Optional[int] = None
    region: Optional[str] = None
    session_id: Optional[str] = None


class ParseRequest(BaseModel):
    text: str = Field(..., description="Free text to extract signals from")


class ParseResponse(BaseModel):
    signals: ExtractedSignals
    known_facts: Dict[str, Any] = Field(default_factory=dict)
