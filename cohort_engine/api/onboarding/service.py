"""
Follow-up orchestration for generational onboarding.

Drives the bounded loop of follow-up questions until both required facts
(birth timeframe and geography) are known or the attempt budget runs out.
The orchestrator keeps no per-session state: every call takes a
ConversationState and returns a new one.
"""

import asyncio
import logging
import re
from typing import Any, List, Optional, Sequence, Tuple

from cohort_engine.api.onboarding.follow_up_prompt import (
    FOLLOW_UP_SYSTEM_INSTRUCTION,
    build_follow_up_instruction,
)
from cohort_engine.api.onboarding.question_bank import bank_for
from cohort_engine.domain.models.onboarding import (
    AnalysisResult,
    ConversationPhase,
    ConversationState,
    FollowUpOutcome,
    FollowUpStep,
    QuestionStyle,
)
from cohort_engine.infrastructure.config.settings import settings
from cohort_engine.infrastructure.data.config import OnboardingConfig
from cohort_engine.services.llm.exceptions import (
    LLMResponseParseError,
    LLMTimeoutError,
)
from cohort_engine.services.processing.question_novelty import QuestionNoveltyFilter

logger = logging.getLogger(__name__)

_QUOTED_SPAN = re.compile(r"[\"“]([^\"“”]+)[\"”]")
_QUESTION_SENTENCE = re.compile(r"[^.!?\n]*\?")
_SENTENCE = re.compile(r"[^.!?\n]+[.!?]?")


def clean_question(text: Optional[str]) -> str:
    """
    Reduce raw model output to the question itself.

    Prefers a quoted question, then the first sentence ending with "?",
    then the first sentence. Returns "" when nothing usable remains.
    """
    if not text:
        return ""
    text = text.strip().replace("**", "")

    for match in _QUOTED_SPAN.finditer(text):
        quoted = match.group(1).strip()
        if quoted.endswith("?"):
            return quoted

    match = _QUESTION_SENTENCE.search(text)
    if match and match.group(0).strip() != "?":
        return match.group(0).strip()

    match = _SENTENCE.search(text)
    return match.group(0).strip() if match else ""


class FollowUpOrchestrator:
    """
    State machine over ConversationState.

    Phases are RequiredInfo (initial) and Enrichment (terminal). Questions
    come from the language model when one is configured, otherwise, or
    whenever the model fails or repeats itself, from the fallback bank.
    """

    def __init__(
        self,
        llm_provider: Optional[Any] = None,
        novelty_filter: Optional[QuestionNoveltyFilter] = None,
        config: Optional[OnboardingConfig] = None,
    ):
        self.config = config or settings.get_onboarding_config()
        self.llm_provider = llm_provider
        self.novelty_filter = novelty_filter or QuestionNoveltyFilter(
            self.config.similarity_threshold
        )

    def start(self) -> ConversationState:
        return ConversationState()

    def register_answer(
        self, state: ConversationState, analysis: AnalysisResult
    ) -> ConversationState:
        """Count the attempt that was just answered and apply any phase transition."""
        attempt_number = min(state.attempt_number + 1, self.config.max_attempts)
        updated = state.model_copy(update={"attempt_number": attempt_number})
        return self._apply_transition(updated, analysis)

    async def step(
        self, state: ConversationState, analysis: AnalysisResult
    ) -> FollowUpStep:
        """Register the pending answer, if any, then decide the next move."""
        if state.awaiting_answer:
            state = self.register_answer(state, analysis)
        return await self.next_question(state, analysis)

    async def next_question(
        self, state: ConversationState, analysis: AnalysisResult
    ) -> FollowUpStep:
        """
        Decide the next follow-up for the current attempt.

        Args:
            state: Conversation state for this session
            analysis: Gap analysis over every answer so far

        Returns:
            FollowUpStep: ``ask`` with a question, ``complete`` once both facts
            are known (optionally carrying an enrichment question), or
            ``proceed_with_unknown`` when the budget is spent
        """
        state = self._apply_transition(state, analysis)
        missing = tuple(analysis.missing_fields)
        budget_spent = state.attempt_number >= self.config.max_attempts

        if state.phase == ConversationPhase.ENRICHMENT:
            if budget_spent:
                return FollowUpStep(outcome=FollowUpOutcome.COMPLETE, state=state)
            question, from_fallback = await self._generate_question(
                state, analysis, QuestionStyle.INDIRECT
            )
            return FollowUpStep(
                outcome=FollowUpOutcome.COMPLETE,
                question=question,
                style=QuestionStyle.INDIRECT,
                state=self._record(state, question),
                from_fallback=from_fallback,
            )

        if budget_spent:
            logger.info(
                f"Attempt budget of {self.config.max_attempts} spent, "
                f"proceeding without: {', '.join(missing)}"
            )
            return FollowUpStep(
                outcome=FollowUpOutcome.PROCEED_WITH_UNKNOWN,
                missing_fields=missing,
                state=state,
            )

        style = self.style_for(state.attempt_number)
        if style == QuestionStyle.DIRECT and state.attempt_number == self.config.direct_style_attempt:
            logger.info(f"Switching to direct questions at attempt {state.attempt_number}")

        question, from_fallback = await self._generate_question(state, analysis, style)
        return FollowUpStep(
            outcome=FollowUpOutcome.ASK,
            question=question,
            missing_fields=missing,
            style=style,
            state=self._record(state, question),
            from_fallback=from_fallback,
        )

    def style_for(self, attempt_number: int) -> QuestionStyle:
        if attempt_number >= self.config.direct_style_attempt:
            return QuestionStyle.DIRECT
        return QuestionStyle.INDIRECT

    def fallback_question(
        self, missing_fields: Sequence[str], attempt_number: int, history: Sequence[str]
    ) -> str:
        """
        Next unused bank entry for this attempt.

        The bank index is clamped to the bank length; when the entry at that
        index was effectively asked already, the following entries are tried
        before settling on the clamped entry. Indirect and enrichment attempts
        may wrap around to the start of the bank; direct attempts never fall
        back to the indirect entries there.
        """
        bank = bank_for(missing_fields)
        index = min(attempt_number, len(bank) - 1)
        candidates = bank[index:]
        if not missing_fields or self.style_for(attempt_number) == QuestionStyle.INDIRECT:
            candidates = candidates + bank[:index]
        for candidate in candidates:
            if not self.novelty_filter.is_too_similar(candidate, history):
                return candidate
        return bank[index]

    async def _generate_question(
        self, state: ConversationState, analysis: AnalysisResult, style: QuestionStyle
    ) -> Tuple[str, bool]:
        """Returns (question, from_fallback)."""
        missing = analysis.missing_fields
        if self.llm_provider is not None:
            try:
                candidate = await self._ask_model(state, analysis, style)
                if not self.novelty_filter.is_too_similar(candidate, state.history):
                    return candidate, False
                logger.info(f"Model question too similar to history: {candidate!r}")
            except Exception as e:
                logger.warning(f"Follow-up question generation failed, using fallback: {e}")

        question = self.fallback_question(missing, state.attempt_number, state.history)
        logger.info(
            f"Using fallback question for attempt {state.attempt_number} "
            f"(missing: {', '.join(missing) or 'none'})"
        )
        return question, True

    async def _ask_model(
        self, state: ConversationState, analysis: AnalysisResult, style: QuestionStyle
    ) -> str:
        instruction = build_follow_up_instruction(
            phase=state.phase,
            attempt_number=state.attempt_number,
            max_attempts=self.config.max_attempts,
            missing_fields=analysis.missing_fields,
            style=style,
            history=state.history,
            known_facts=analysis.signals.known_facts(),
        )
        try:
            raw = await asyncio.wait_for(
                self.llm_provider.generate_text(
                    instruction, system_instruction=FOLLOW_UP_SYSTEM_INSTRUCTION
                ),
                timeout=self.config.llm_timeout,
            )
        except asyncio.TimeoutError:
            raise LLMTimeoutError(
                f"No question within {self.config.llm_timeout}s"
            )

        if not isinstance(raw, str):
            raise LLMResponseParseError(
                f"Expected text from the model, got {type(raw).__name__}"
            )
        question = clean_question(raw)
        if not question:
            raise LLMResponseParseError("Model returned no usable question")
        return question

    def _apply_transition(
        self, state: ConversationState, analysis: AnalysisResult
    ) -> ConversationState:
        if state.phase == ConversationPhase.REQUIRED_INFO and not analysis.needs_follow_up:
            logger.info(
                f"Required information complete at attempt {state.attempt_number}, "
                "entering enrichment"
            )
            return state.model_copy(update={"phase": ConversationPhase.ENRICHMENT})
        return state

    @staticmethod
    def _record(state: ConversationState, question: str) -> ConversationState:
        history: List[str] = list(state.history)
        history.append(question)
        return state.model_copy(update={"history": tuple(history)})
