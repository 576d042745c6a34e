"""
Onboarding API Router

Thin HTTP surface over the onboarding engine. The conversation state travels
in each request and response; the server keeps none between calls.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .models import (
    ClassifyRequest,
    FollowUpRequest,
    FollowUpResponse,
    GenerationSelectRequest,
    ParseRequest,
    ParseResponse,
)
from .service import FollowUpOrchestrator
from cohort_engine.database import get_db
from cohort_engine.domain.models.onboarding import CohortResult, FollowUpOutcome
from cohort_engine.infrastructure.persistence.response_repository import ResponseRepository
from cohort_engine.services.llm import LLMServiceFactory
from cohort_engine.services.processing.cohort_classifier import CohortClassifier
from cohort_engine.services.processing.exceptions import InputValidationError
from cohort_engine.services.processing.gap_analyzer import GapAnalyzer
from cohort_engine.services.processing.signal_extractor import SignalExtractor
from cohort_engine.utils.structured_logger import request_start, request_end, request_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/onboarding", tags=["Onboarding"])

# Stateless collaborators shared by every request
signal_extractor = SignalExtractor()
gap_analyzer = GapAnalyzer(signal_extractor)
cohort_classifier = CohortClassifier()
follow_up_orchestrator = FollowUpOrchestrator(
    llm_provider=LLMServiceFactory.create_default()
)


def get_orchestrator() -> FollowUpOrchestrator:
    return follow_up_orchestrator


def _slots_to_store(request: FollowUpRequest) -> Optional[List[str]]:
    # First call stores every answer, later calls only the one just submitted
    if request.answered_slot:
        return [request.answered_slot]
    if request.state is None:
        return None
    return []


@router.post("/follow-up", response_model=FollowUpResponse)
async def follow_up(
    request: FollowUpRequest,
    db: Session = Depends(get_db),
    orchestrator: FollowUpOrchestrator = Depends(get_orchestrator),
):
    """
    Analyze every answer so far and decide the next follow-up.

    Returns the next question while required information is missing, a
    CohortResult once both facts are known (possibly with an optional
    enrichment question), or ``proceed_with_unknown`` with a best-effort
    CohortResult once the attempt budget is spent.
    """
    endpoint = "/api/onboarding/follow-up"
    state = request.state or orchestrator.start()
    start = request_start(
        endpoint, session_id=request.session_id, attempt_number=state.attempt_number
    )
    try:
        analysis = gap_analyzer.analyze(request.responses)
        step = await orchestrator.step(state, analysis)

        # Best-effort save (errors don’t fail main request)
        try:
            records = gap_analyzer.records_for(request.responses, _slots_to_store(request))
            source = "follow_up" if request.state is not None else "user_input"
            await ResponseRepository(db).save_all(records, request.session_id, source)
        except Exception as e:
            request_error(
                endpoint,
                start,
                session_id=request.session_id,
                attempt_number=state.attempt_number,
                http_status=200,
                error=f"save_responses: {str(e)}",
            )

        cohort = None
        if step.outcome != FollowUpOutcome.ASK:
            cohort = cohort_classifier.classify_signals(analysis.signals)

        response = FollowUpResponse(
            needs_follow_up=analysis.needs_follow_up,
            proceed_with_unknown=step.outcome == FollowUpOutcome.PROCEED_WITH_UNKNOWN,
            question=step.question,
            required_info=list(analysis.missing_fields),
            analysis=analysis,
            state=step.state,
            cohort=cohort,
        )
        request_end(
            endpoint,
            start,
            session_id=request.session_id,
            attempt_number=step.state.attempt_number,
            outcome=step.outcome.value,
            from_fallback=step.from_fallback,
        )
        return response

    except InputValidationError as e:
        request_error(
            endpoint,
            start,
            session_id=request.session_id,
            attempt_number=state.attempt_number,
            http_status=400,
            error=str(e),
        )
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        request_error(
            endpoint,
            start,
            session_id=request.session_id,
            attempt_number=state.attempt_number,
            http_status=500,
            error=str(e),
        )
        raise HTTPException(
            status_code=500, detail="Onboarding service temporarily unavailable"
        )


@router.post("/classify", response_model=CohortResult)
async def classify(request: ClassifyRequest):
    """Classify a birth year or decade and a region into a generational cohort."""
    return cohort_classifier.classify(
        request.birth_year, request.birth_decade, request.region
    )


@router.post("/generation", response_model=CohortResult)
async def select_generation(request: GenerationSelectRequest):
    """Manual override: the user picks their generation."""
    endpoint = "/api/onboarding/generation"
    start = request_start(endpoint, session_id=request.session_id)
    try:
        result = cohort_classifier.select(
            request.generation, birth_year=request.birth_year, region=request.region
        )
    except InputValidationError as e:
        request_error(
            endpoint, start, session_id=request.session_id, http_status=400, error=str(e)
        )
        raise HTTPException(
            status_code=400,
            detail={
                "message": str(e),
                "valid_generations": cohort_classifier.valid_selections,
            },
        )
    request_end(endpoint, start, session_id=request.session_id, generation=result.generation)
    return result


@router.post("/parse", response_model=ParseResponse)
async def parse_response(request: ParseRequest):
    """Extract signals from a single piece of free text."""
    signals = signal_extractor.extract(request.text)
    return ParseResponse(signals=signals, known_facts=signals.known_facts())


@router.get("/health")
async def health_check():
    """Health check endpoint for the onboarding service"""
    return {
        "status": "healthy",
        "service": "onboarding",
        "llm_enabled": follow_up_orchestrator.llm_provider is not None,
        "max_attempts": follow_up_orchestrator.config.max_attempts,
    }
