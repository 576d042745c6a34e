"""
Instruction sent to the language model when phrasing a follow-up question.
"""

import json
from typing import Dict, Sequence

from cohort_engine.api.onboarding.question_bank import QUESTION_STRATEGIES
from cohort_engine.domain.models.onboarding import (
    BIRTH_TIMEFRAME,
    GEOGRAPHY,
    ConversationPhase,
    QuestionStyle,
)

FOLLOW_UP_SYSTEM_INSTRUCTION = """
You are an engaging interviewer helping to understand someone's generational context:
roughly when they were born and where they grew up.

RULES:
- Ask ONE open question per response
- Never ask for something the person has already told you
- Never repeat or rephrase a question that was already asked
- Keep a warm, curious tone; avoid sounding like a form
- Return only the question text, with no preamble, quotes or explanation
""".strip()

_FOCUS_LABELS = {
    BIRTH_TIMEFRAME: "when they were born (a year or decade)",
    GEOGRAPHY: "where they grew up (a city, region or country)",
}

ENRICHMENT_FOCUS = "their interests, values and the communities they identify with"


def question_focus(missing_fields: Sequence[str], attempt_number: int) -> str:
    """Alternates between the two facts when both are missing, starting with the timeframe."""
    if BIRTH_TIMEFRAME in missing_fields and GEOGRAPHY in missing_fields:
        return BIRTH_TIMEFRAME if attempt_number % 2 == 0 else GEOGRAPHY
    if BIRTH_TIMEFRAME in missing_fields:
        return BIRTH_TIMEFRAME
    return GEOGRAPHY


def build_follow_up_instruction(
    phase: ConversationPhase,
    attempt_number: int,
    max_attempts: int,
    missing_fields: Sequence[str],
    style: QuestionStyle,
    history: Sequence[str],
    known_facts: Dict[str, object],
) -> str:
    """
    Build the instruction for one follow-up question.

    Args:
        phase: Current conversation phase
        attempt_number: 0-based attempt index
        max_attempts: Attempt budget
        missing_fields: Required facts still unknown
        style: Indirect or direct phrasing
        history: Questions already asked, oldest first
        known_facts: Signals already extracted, so they are not asked again

    Returns:
        The prompt text
    """
    lines = [
        f"Current phase: {phase.value}",
        f"Attempt: {attempt_number + 1}/{max_attempts}",
        f"Already know: {json.dumps(known_facts, sort_keys=True)}",
    ]

    if phase == ConversationPhase.ENRICHMENT:
        lines.append("Missing: nothing required")
        lines.append(f"Goal: learn more about {ENRICHMENT_FOCUS}.")
        examples = []
    else:
        focus = question_focus(missing_fields, attempt_number)
        both = len(missing_fields) > 1
        lines.append(f"Missing: {', '.join(missing_fields)}")
        lines.append(f"Goal: naturally find out {_FOCUS_LABELS[focus]}.")
        if both:
            lines.append("The person may share both facts in one answer; welcome that.")
        if style == QuestionStyle.DIRECT:
            lines.append(
                "Be direct but friendly: earlier indirect questions did not surface this, "
                "so ask for it explicitly."
            )
        else:
            lines.append("Be subtle but purposeful: invite a short story rather than a fact.")
        examples = QUESTION_STRATEGIES[focus][style.value]

    if history:
        lines.append("Questions already asked (ask something clearly different):")
        lines.extend(f"- {question}" for question in history)

    if examples:
        lines.append("Example questions for this stage:")
        lines.extend(f"- {example}" for example in examples)

    lines.append("The question must not be answerable with a simple yes or no.")
    lines.append("Return only the question text.")
    return "\n".join(lines)
