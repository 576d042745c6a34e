"""
Deterministic follow-up questions.

Each fallback bank is ordered by attempt index: the first two entries are
indirect, the last two ask for the fact directly. They read the same as the
questions the language model is asked to write.
"""

from typing import Dict, List, Sequence

from cohort_engine.domain.models.onboarding import BIRTH_TIMEFRAME, GEOGRAPHY

TIMEFRAME_BANK = [
    "What major world events do you remember from your childhood?",
    "Which technological changes had the biggest impact on your early years?",
    "Roughly which decade were you born in?",
    "Would you be comfortable sharing the year you were born?",
]

GEOGRAPHY_BANK = [
    "How would you describe the community that shaped your early perspectives?",
    "What cultural traditions or celebrations were important in your childhood?",
    "Which city, region or country did you grow up in?",
    "Where did you spend most of your childhood?",
]

COMBINED_BANK = [
    "What events or experiences defined your childhood community?",
    "How did your early environment respond to major world events?",
    "Which decade did you grow up in, and where was home at the time?",
    "Could you share roughly when and where you were born?",
]

ENRICHMENT_BANK = [
    "How did your early experiences shape your perspective on the world?",
    "What interests or passions have stayed with you since you were young?",
    "Which communities or groups do you feel most connected to?",
    "What values from your upbringing still matter most to you today?",
]

# Examples embedded in the model instruction, by focus and style
QUESTION_STRATEGIES: Dict[str, Dict[str, List[str]]] = {
    BIRTH_TIMEFRAME: {
        "indirect": [
            "What world events do you remember most vividly from your childhood?",
            "Which technological changes had the biggest impact on your early years?",
            "What was popular culture like when you were growing up?",
        ],
        "direct": [
            "When you think about your childhood, what decade stands out the most?",
            "Which era shaped your early experiences?",
            "What year or decade represents your earliest memories?",
        ],
    },
    GEOGRAPHY: {
        "indirect": [
            "What cultural traditions shaped your early years?",
            "How would you describe the community where you spent your childhood?",
            "What was unique about where you grew up?",
        ],
        "direct": [
            "Where did your earliest memories take place?",
            "Which place had the biggest influence on your childhood?",
            "What area do you consider your childhood home?",
        ],
    },
}


def bank_for(missing_fields: Sequence[str]) -> List[str]:
    """The fallback bank keyed by which required facts are missing."""
    missing = set(missing_fields)
    if BIRTH_TIMEFRAME in missing and GEOGRAPHY in missing:
        return COMBINED_BANK
    if BIRTH_TIMEFRAME in missing:
        return TIMEFRAME_BANK
    if GEOGRAPHY in missing:
        return GEOGRAPHY_BANK
    return ENRICHMENT_BANK
