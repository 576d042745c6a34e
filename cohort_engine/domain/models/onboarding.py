"""
Value types shared by the onboarding engine.

Everything here is immutable: the engine derives new values from the
responses it is given and never edits a result after creating it.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

# slot id -> free-text answer, produced by normalize_responses()
RawResponseSet = Dict[str, str]

BIRTH_TIMEFRAME = "birth_timeframe"
GEOGRAPHY = "geography"


class ExtractedSignals(BaseModel):
    """Structured signals pulled out of free text at one point in time."""

    model_config = ConfigDict(frozen=True)

    birth_year: Optional[int] = Field(None, description="Exact birth year")
    birth_decade: Optional[int] = Field(
        None, description="Start year of the birth decade, e.g. 1980"
    )
    decade_qualifier: Optional[str] = Field(
        None, description="early | mid | late when the decade was qualified"
    )
    timeframe_text: Optional[str] = Field(
        None, description="The time expression the timeframe was read from"
    )
    locations: Tuple[str, ...] = Field(
        default_factory=tuple, description="Places in order of first appearance"
    )
    interests: Tuple[str, ...] = Field(default_factory=tuple)
    cultural_markers: Tuple[str, ...] = Field(default_factory=tuple)
    technology_eras: Tuple[str, ...] = Field(default_factory=tuple)
    socioeconomic_context: Optional[str] = None

    @property
    def has_timeframe(self) -> bool:
        return self.birth_year is not None or self.birth_decade is not None

    @property
    def has_geography(self) -> bool:
        return len(self.locations) > 0

    @property
    def primary_location(self) -> Optional[str]:
        return self.locations[0] if self.locations else None

    def known_facts(self) -> Dict[str, object]:
        """Compact view of what is already known, for prompts and logs."""
        facts: Dict[str, object] = {}
        if self.birth_year is not None:
            facts["birth_year"] = self.birth_year
        elif self.birth_decade is not None:
            facts["birth_decade"] = f"{self.birth_decade}s"
        if self.locations:
            facts["locations"] = list(self.locations)
        if self.interests:
            facts["interests"] = list(self.interests)
        if self.cultural_markers:
            facts["cultural_markers"] = list(self.cultural_markers)
        return facts


class MissingInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    birth_timeframe: bool
    geography: bool

    def fields(self) -> List[str]:
        missing = []
        if self.birth_timeframe:
            missing.append(BIRTH_TIMEFRAME)
        if self.geography:
            missing.append(GEOGRAPHY)
        return missing


class AnalysisResult(BaseModel):
    """Gap analysis over everything said so far."""

    model_config = ConfigDict(frozen=True)

    needs_follow_up: bool
    has_birth_timeframe: bool
    has_geography: bool
    missing_info: MissingInfo
    signals: ExtractedSignals

    @model_validator(mode="after")
    def _check_flags(self):
        if self.missing_info.birth_timeframe == self.has_birth_timeframe:
            raise ValueError("missing_info.birth_timeframe must negate has_birth_timeframe")
        if self.missing_info.geography == self.has_geography:
            raise ValueError("missing_info.geography must negate has_geography")
        if self.needs_follow_up != (
            self.missing_info.birth_timeframe or self.missing_info.geography
        ):
            raise ValueError("needs_follow_up must be the OR of the missing flags")
        return self

    @classmethod
    def from_signals(cls, signals: ExtractedSignals) -> "AnalysisResult":
        has_timeframe = signals.has_timeframe
        has_geography = signals.has_geography
        return cls(
            needs_follow_up=not has_timeframe or not has_geography,
            has_birth_timeframe=has_timeframe,
            has_geography=has_geography,
            missing_info=MissingInfo(
                birth_timeframe=not has_timeframe, geography=not has_geography
            ),
            signals=signals,
        )

    @property
    def missing_fields(self) -> List[str]:
        return self.missing_info.fields()


class AnswerCheck(BaseModel):
    """Whether a single answer supplies the facts that were still missing."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    timeframe: Optional[str] = None
    location: Optional[str] = None


class ResponseRecord(BaseModel):
    """One (slot id, raw text, derived signals) tuple for the Response Store."""

    model_config = ConfigDict(frozen=True)

    slot_id: str
    raw_text: str
    signals: ExtractedSignals
    confidence: float = Field(
        0.0, ge=0.0, le=1.0, description="Share of required facts found in this answer"
    )


class ConversationPhase(str, Enum):
    REQUIRED_INFO = "required_info"
    ENRICHMENT = "enrichment"


class QuestionStyle(str, Enum):
    INDIRECT = "indirect"
    DIRECT = "direct"


class FollowUpOutcome(str, Enum):
    ASK = "ask"
    COMPLETE = "complete"
    PROCEED_WITH_UNKNOWN = "proceed_with_unknown"


class ConversationState(BaseModel):
    """Per-session follow-up state; passed in and returned by every call."""

    model_config = ConfigDict(frozen=True)

    attempt_number: int = Field(0, ge=0)
    phase: ConversationPhase = ConversationPhase.REQUIRED_INFO
    history: Tuple[str, ...] = Field(
        default_factory=tuple, description="Questions asked so far, oldest first"
    )

    @property
    def awaiting_answer(self) -> bool:
        """True when the most recent question has not been answered yet."""
        return len(self.history) > self.attempt_number


class FollowUpStep(BaseModel):
    """What the orchestrator decided for one attempt."""

    model_config = ConfigDict(frozen=True)

    outcome: FollowUpOutcome
    question: Optional[str] = None
    missing_fields: Tuple[str, ...] = Field(default_factory=tuple)
    style: Optional[QuestionStyle] = None
    state: ConversationState
    from_fallback: bool = False


class CohortResult(BaseModel):
    """Generation label for a resolved birth year and region."""

    model_config = ConfigDict(frozen=True)

    generation: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    region: str
    micro_generation: Optional[str] = None
    alternatives: Tuple[str, ...] = Field(
        default_factory=tuple, description="Other cohorts, most to least likely"
    )
    resolved_year: Optional[int] = None
    is_cusp: bool = False
    selected: bool = Field(False, description="True when chosen by the user")
