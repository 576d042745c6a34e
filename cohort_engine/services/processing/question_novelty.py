"""
Question novelty filter: rejects follow-up questions that repeat earlier ones.
"""

from typing import FrozenSet, Sequence

from cohort_engine.infrastructure.constants.cohort_constants import (
    DEFAULT_SIMILARITY_THRESHOLD,
)


def _word_set(text: str) -> FrozenSet[str]:
    return frozenset(text.lower().strip().split())


def jaccard_similarity(first: str, second: str) -> float:
    """|intersection| / |union| of the whitespace-delimited word sets."""
    words_a = _word_set(first)
    words_b = _word_set(second)
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)


class QuestionNoveltyFilter:
    def __init__(self, threshold: float = DEFAULT_SIMILARITY_THRESHOLD):
        self.threshold = threshold

    def is_too_similar(self, candidate: str, history: Sequence[str]) -> bool:
        """True when the candidate exceeds the threshold against any prior question."""
        return any(jaccard_similarity(candidate, prior) > self.threshold for prior in history)
