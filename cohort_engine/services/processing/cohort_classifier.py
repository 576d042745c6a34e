"""
Cohort classifier module.

Maps a resolved birth year and a region to a generational cohort label, a
confidence score and a ranked list of alternative cohorts.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from cohort_engine.domain.models.onboarding import CohortResult, ExtractedSignals
from cohort_engine.infrastructure.constants.cohort_constants import (
    BASE_CONFIDENCE,
    COHORT_TABLE,
    CUSP_ANCHORS,
    CUSP_WINDOW,
    DECADE_MIDPOINT_OFFSET,
    IMPLAUSIBLE_YEAR_PENALTY,
    MICRO_GENERATIONS,
    PLAUSIBLE_EARLIEST_YEAR,
    REGION_BONUS,
    SELECTED_CONFIDENCE,
    UNKNOWN_CONFIDENCE,
    UNKNOWN_GENERATION,
    UNKNOWN_REGION,
)
from cohort_engine.services.processing.exceptions import InputValidationError
from cohort_engine.utils.timezone_utils import current_year

logger = logging.getLogger(__name__)

Cohort = Tuple[str, Optional[int], Optional[int]]


def _contains(cohort: Cohort, year: int) -> bool:
    _label, first, last = cohort
    return (first is None or year >= first) and (last is None or year <= last)


def _boundary_distance(cohort: Cohort, year: int) -> int:
    _label, first, last = cohort
    return min(abs(year - bound) for bound in (first, last) if bound is not None)


class CohortClassifier:
    """Classifies a birth year and region into a generational cohort."""

    def __init__(
        self,
        cohorts: Sequence[Cohort] = COHORT_TABLE,
        micro_generations: Sequence[Cohort] = MICRO_GENERATIONS,
        year_provider: Callable[[], int] = current_year,
    ):
        self.cohorts = tuple(cohorts)
        self.micro_generations = tuple(micro_generations)
        self.year_provider = year_provider

    @property
    def labels(self) -> List[str]:
        return [label for label, _first, _last in self.cohorts]

    @property
    def valid_selections(self) -> List[str]:
        return self.labels + [label for label, _first, _last in self.micro_generations]

    @staticmethod
    def resolve_year(birth_year: Optional[int], birth_decade: Optional[int]) -> Optional[int]:
        """Exact year when known, otherwise the decade midpoint as an estimate."""
        if birth_year is not None:
            return birth_year
        if birth_decade is not None:
            return birth_decade + DECADE_MIDPOINT_OFFSET
        return None

    def classify(
        self,
        birth_year: Optional[int],
        birth_decade: Optional[int],
        region: Optional[str],
    ) -> CohortResult:
        """
        Classify into a cohort.

        Args:
            birth_year: Exact birth year, if known
            birth_decade: Start of the birth decade, if known
            region: Primary location, if known

        Returns:
            CohortResult; "Unknown" with the lowest confidence when no year resolves
        """
        year = self.resolve_year(birth_year, birth_decade)
        region_label = self._region_label(region)

        if year is None:
            logger.info("No birth timeframe resolved, classifying as Unknown")
            return CohortResult(
                generation=UNKNOWN_GENERATION,
                confidence=UNKNOWN_CONFIDENCE,
                region=region_label,
                alternatives=tuple(self.labels),
            )

        cohort = self._cohort_for(year)
        is_cusp = self.is_cusp(year)
        result = CohortResult(
            generation=cohort[0],
            confidence=self.confidence(year, region),
            region=region_label,
            micro_generation=self.micro_generation_for(year),
            alternatives=tuple(self.alternatives_for(year, cohort, is_cusp)),
            resolved_year=year,
            is_cusp=is_cusp,
        )
        logger.info(
            f"Classified {year} ({region_label}) as {result.generation} "
            f"confidence={result.confidence} cusp={is_cusp}"
        )
        return result

    def classify_signals(self, signals: ExtractedSignals) -> CohortResult:
        return self.classify(signals.birth_year, signals.birth_decade, signals.primary_location)

    def select(
        self,
        label: str,
        birth_year: Optional[int] = None,
        region: Optional[str] = None,
    ) -> CohortResult:
        """
        Build a fresh result for a generation the user picked by hand.

        Raises:
            InputValidationError: label is not one of the valid selections
        """
        if label not in self.valid_selections:
            raise InputValidationError(f"Invalid generation value: {label!r}")

        micro = next((m for m in self.micro_generations if m[0] == label), None)
        if micro is not None:
            _name, first, last = micro
            cohort = self._cohort_for((first + last) // 2)
            micro_label = label
        else:
            cohort = next(c for c in self.cohorts if c[0] == label)
            micro_label = self.micro_generation_for(birth_year) if birth_year else None

        index = self.cohorts.index(cohort)
        others = [c for c in self.cohorts if c is not cohort]
        others.sort(key=lambda c: (abs(self.cohorts.index(c) - index), self.cohorts.index(c)))

        return CohortResult(
            generation=cohort[0],
            confidence=SELECTED_CONFIDENCE,
            region=self._region_label(region),
            micro_generation=micro_label,
            alternatives=tuple(c[0] for c in others),
            resolved_year=birth_year,
            is_cusp=self.is_cusp(birth_year) if birth_year is not None else False,
            selected=True,
        )

    def confidence(self, year: Optional[int], region: Optional[str]) -> float:
        if year is None:
            return UNKNOWN_CONFIDENCE
        score = BASE_CONFIDENCE
        if self._has_region(region):
            score += REGION_BONUS
        if year < PLAUSIBLE_EARLIEST_YEAR or year > self.year_provider():
            score -= IMPLAUSIBLE_YEAR_PENALTY
        return round(min(max(score, 0.0), 1.0), 4)

    def is_cusp(self, year: int) -> bool:
        return any(abs(year - anchor) <= CUSP_WINDOW for anchor in CUSP_ANCHORS)

    def micro_generation_for(self, year: Optional[int]) -> Optional[str]:
        if year is None:
            return None
        for micro in self.micro_generations:
            if _contains(micro, year):
                return micro[0]
        return None

    def alternatives_for(self, year: int, cohort: Cohort, is_cusp: bool) -> List[str]:
        """Every other cohort, nearest boundary first; a cusp puts its neighbour first."""
        others = [c for c in self.cohorts if c is not cohort]
        # stable sort keeps table order (older first) on ties
        others.sort(key=lambda c: _boundary_distance(c, year))
        if is_cusp:
            neighbour = self._adjacent_cohort(cohort, year)
            if neighbour is not None:
                others.remove(neighbour)
                others.insert(0, neighbour)
        return [c[0] for c in others]

    def _adjacent_cohort(self, cohort: Cohort, year: int) -> Optional[Cohort]:
        index = self.cohorts.index(cohort)
        adjacent = [
            self.cohorts[i] for i in (index - 1, index + 1) if 0 <= i < len(self.cohorts)
        ]
        if not adjacent:
            return None
        return min(adjacent, key=lambda c: _boundary_distance(c, year))

    def _cohort_for(self, year: int) -> Cohort:
        for cohort in self.cohorts:
            if _contains(cohort, year):
                return cohort
        # only reachable for tables with closed ends or gaps
        first_start = self.cohorts[0][1]
        if first_start is not None and year < first_start:
            return self.cohorts[0]
        return self.cohorts[-1]

    @staticmethod
    def _has_region(region: Optional[str]) -> bool:
        return bool(region and region.strip() and region.strip() != UNKNOWN_REGION)

    def _region_label(self, region: Optional[str]) -> str:
        return region.strip() if self._has_region(region) else UNKNOWN_REGION
