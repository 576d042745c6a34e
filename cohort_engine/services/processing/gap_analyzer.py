"""
Gap analysis over onboarding answers.

Decides which required facts (birth timeframe, geography) are still missing
after everything the user has said so far.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional

from cohort_engine.domain.models.onboarding import (
    AnalysisResult,
    AnswerCheck,
    ExtractedSignals,
    MissingInfo,
    RawResponseSet,
    ResponseRecord,
)
from cohort_engine.services.processing.exceptions import InputValidationError
from cohort_engine.services.processing.signal_extractor import SignalExtractor

logger = logging.getLogger(__name__)

RESPONSES_ENVELOPE_KEY = "responses"


def _flatten(prefix: str, value: Any, out: Dict[str, str]) -> None:
    if isinstance(value, str):
        out[prefix] = value
    elif isinstance(value, Mapping):
        for key, nested in value.items():
            _flatten(f"{prefix}.{key}" if prefix else str(key), nested, out)
    # anything else (numbers, lists, None) is not an answer and is ignored


def normalize_responses(raw: Any) -> RawResponseSet:
    """
    Normalize an incoming response payload into a RawResponseSet.

    Unwraps an optional ``{"responses": {...}}`` envelope, flattens nested
    mappings into dotted slot ids and drops every non-string value.

    Raises:
        InputValidationError: payload is missing, not a mapping, or holds no
            string answers at all
    """
    if raw is None:
        raise InputValidationError("Missing responses")
    if not isinstance(raw, Mapping):
        raise InputValidationError(
            f"Invalid responses format: expected an object, got {type(raw).__name__}"
        )

    envelope = raw.get(RESPONSES_ENVELOPE_KEY)
    if isinstance(envelope, Mapping):
        raw = envelope

    normalized: Dict[str, str] = {}
    _flatten("", raw, normalized)
    if not normalized:
        raise InputValidationError("Responses contain no answers")
    return normalized


class GapAnalyzer:
    """
    Computes an AnalysisResult over the union of all answers.

    The analysis is order independent and idempotent: the same response set
    always yields an equal result.
    """

    def __init__(self, extractor: Optional[SignalExtractor] = None):
        self.extractor = extractor or SignalExtractor()

    @staticmethod
    def combine(responses: RawResponseSet) -> str:
        # Sorted by slot id so the combined text never depends on insertion order
        return "\n".join(responses[slot] for slot in sorted(responses))

    def analyze(self, responses: Any) -> AnalysisResult:
        """
        Analyze raw responses for missing required facts.

        Args:
            responses: Raw payload; normalized before analysis

        Returns:
            AnalysisResult with the extracted signals embedded
        """
        normalized = normalize_responses(responses)
        signals = self.extractor.extract(self.combine(normalized))
        result = AnalysisResult.from_signals(signals)
        logger.info(
            f"Gap analysis over {len(normalized)} answer(s): "
            f"timeframe={result.has_birth_timeframe}, geography={result.has_geography}"
        )
        return result

    def check_answer(self, answer: str, missing_info: MissingInfo) -> AnswerCheck:
        """Judge whether one new answer supplies every fact that was still missing."""
        signals = self.extractor.extract(answer)
        timeframe_ok = signals.has_timeframe or not missing_info.birth_timeframe
        geography_ok = signals.has_geography or not missing_info.geography
        return AnswerCheck(
            is_valid=timeframe_ok and geography_ok,
            timeframe=signals.timeframe_text,
            location=signals.primary_location,
        )

    def records_for(
        self, responses: Any, slot_ids: Optional[Iterable[str]] = None
    ) -> List[ResponseRecord]:
        """Per-slot (slot id, raw text, derived signals) tuples for the Response Store."""
        normalized = normalize_responses(responses)
        wanted = list(normalized) if slot_ids is None else [
            slot for slot in slot_ids if slot in normalized
        ]
        records = []
        for slot in wanted:
            signals = self.extractor.extract(normalized[slot])
            records.append(
                ResponseRecord(
                    slot_id=slot,
                    raw_text=normalized[slot],
                    signals=signals,
                    confidence=self._coverage(signals),
                )
            )
        return records

    @staticmethod
    def _coverage(signals: ExtractedSignals) -> float:
        return (int(signals.has_timeframe) + int(signals.has_geography)) / 2
