"""
Signal extractor module for pulling onboarding signals out of free text.

Extraction is rule based and conservative: when a pattern is not clearly
present the field stays empty rather than guessing. Every rule lives in one
of the ordered tables below, so supporting a new phrasing means adding a row,
not a new code path.
"""

import re
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Pattern, Sequence, Tuple

from cohort_engine.domain.models.onboarding import ExtractedSignals
from cohort_engine.infrastructure.constants.cohort_constants import (
    EARLIEST_BIRTH_YEAR,
    TWO_DIGIT_CENTURY_PIVOT,
    TWO_DIGIT_DECADE_PIVOT,
)
from cohort_engine.utils.timezone_utils import current_year

logger = logging.getLogger(__name__)

BIRTH_YEAR = "birth_year"
BIRTH_DECADE = "birth_decade"

# Tiers are tried in order; the earliest match inside the first tier that
# yields a valid value wins.
TIER_EXACT_YEAR = 1
TIER_QUOTED_YEAR = 2
TIER_DECADE = 3


@dataclass(frozen=True)
class TimeframeMatch:
    field: str
    value: int
    text: str
    position: int
    qualifier: Optional[str] = None


@dataclass(frozen=True)
class TimeframeRule:
    name: str
    tier: int
    field: str
    pattern: Pattern
    resolve: Callable[[re.Match, int], Optional[int]]


@dataclass(frozen=True)
class PhraseRule:
    name: str
    target: str  # "interests" or "cultural_markers"
    pattern: Pattern


# "in my 30s", "in their late twenties" describe an age, not a birth decade
_AGE_PHRASE_PREFIX = re.compile(r"\b(?:my|his|her|their|our|your)\s+$", re.IGNORECASE)

_WORDED_DECADES = {
    "twenties": 1920,
    "thirties": 1930,
    "forties": 1940,
    "fifties": 1950,
    "sixties": 1960,
    "seventies": 1970,
    "eighties": 1980,
    "nineties": 1990,
    "noughties": 2000,
}


def _expand_two_digits(value: int, pivot: int = TWO_DIGIT_CENTURY_PIVOT) -> int:
    return 1900 + value if value > pivot else 2000 + value


def _in_year_range(year: int, latest: int) -> Optional[int]:
    return year if EARLIEST_BIRTH_YEAR <= year <= latest else None


def _resolve_exact_year(match: re.Match, latest: int) -> Optional[int]:
    return _in_year_range(int(match.group("year")), latest)


def _resolve_quoted_year(match: re.Match, latest: int) -> Optional[int]:
    return _in_year_range(_expand_two_digits(int(match.group("yy"))), latest)


def _resolve_numeric_decade(match: re.Match, latest: int) -> Optional[int]:
    raw = match.group("decade")
    year = int(raw) if len(raw) == 4 else _expand_two_digits(int(raw), TWO_DIGIT_DECADE_PIVOT)
    return _in_year_range(year // 10 * 10, latest)


def _resolve_worded_decade(match: re.Match, latest: int) -> Optional[int]:
    year = _WORDED_DECADES.get(match.group("word").lower())
    if year is None:
        return None
    return _in_year_range(year, latest)


_QUALIFIER = r"(?:\b(?P<qualifier>early|mid|late)[\s-]+(?:the\s+)?)?"

TIMEFRAME_RULES: Tuple[TimeframeRule, ...] = (
    TimeframeRule(
        name="four_digit_year",
        tier=TIER_EXACT_YEAR,
        field=BIRTH_YEAR,
        pattern=re.compile(r"\b(?P<year>(?:19|20)\d{2})\b"),
        resolve=_resolve_exact_year,
    ),
    TimeframeRule(
        name="quoted_two_digit_year",
        tier=TIER_QUOTED_YEAR,
        field=BIRTH_YEAR,
        pattern=re.compile(r"(?<!\w)[‘'’](?P<yy>\d{2})(?!\w)"),
        resolve=_resolve_quoted_year,
    ),
    TimeframeRule(
        name="numeric_decade",
        tier=TIER_DECADE,
        field=BIRTH_DECADE,
        pattern=re.compile(
            _QUALIFIER + r"(?<!\w)[‘'’]?(?P<decade>(?:19|20)?\d0)[‘'’]?s\b",
            re.IGNORECASE,
        ),
        resolve=_resolve_numeric_decade,
    ),
    TimeframeRule(
        name="worded_decade",
        tier=TIER_DECADE,
        field=BIRTH_DECADE,
        pattern=re.compile(
            _QUALIFIER + r"\b(?:the\s+)?(?P<word>" + "|".join(_WORDED_DECADES) + r")\b",
            re.IGNORECASE,
        ),
        resolve=_resolve_worded_decade,
    ),
)

# A place is a run of capitalised words in any script ("Columbus",
# "New York City", "Montréal", "São Paulo", "McAllen") or a short all-caps
# abbreviation ("USA"). The pattern captures a run of whole letter words and
# trim_place() keeps the capitalised prefix. The capture sits in a lookahead
# so a later cue inside the same run is still matched.
_LETTER_WORD = r"[^\W\d_]+(?:['’][^\W\d_]+)*"
_PLACE = (
    rf"(?=(?:the\s+)?(?P<place>{_LETTER_WORD}(?!\w)"
    rf"(?:\.?[ -]{_LETTER_WORD}(?!\w))*))"
)
_PLACE_PART = re.compile(rf"({_LETTER_WORD})(\.?[ -]|$)")

# Short forms that keep their dot inside a name ("St. Louis", "Mt. Vernon")
PLACE_ABBREVIATIONS = {"st", "ste", "mt", "ft", "pt"}
# Lowercase joiners inside a name ("Isle of Man", "Rio de Janeiro")
PLACE_CONNECTORS = {"of", "de", "da", "del"}


@dataclass(frozen=True)
class LocationRule:
    name: str
    pattern: Pattern
    # Checked, case-insensitively, against the text just before the cue
    excluded_before: Optional[Pattern] = None


LOCATION_RULES: Tuple[LocationRule, ...] = (
    LocationRule(
        "grew_up_or_born_in",
        re.compile(
            r"(?i:\b(?:grew\s+up|born|raised|lived|living|based|located)\s+in)\s+" + _PLACE
        ),
    ),
    LocationRule("moved_to", re.compile(r"(?i:\bmoved\s+to)\s+" + _PLACE)),
    LocationRule(
        "place_of",
        re.compile(r"(?i:\b(?:city|town|country|state|province)\s+of)\s+" + _PLACE),
    ),
    LocationRule("from", re.compile(r"(?i:\bfrom)\s+" + _PLACE)),
    LocationRule(
        "in",
        re.compile(r"(?i:\bin)\s+" + _PLACE),
        excluded_before=re.compile(
            r"\b(?:interested|involved|believe|believed|participated|specialized)\s+$",
            re.IGNORECASE,
        ),
    ),
)

# Capitalised words that follow "in"/"from" without naming a place
NON_PLACE_WORDS = {
    "i", "the", "a", "an", "my", "our", "their", "his", "her", "this", "that",
    "january", "february", "march", "april", "may", "june", "july", "august",
    "september", "october", "november", "december",
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
    "spring", "summer", "autumn", "fall", "winter",
    "christmas", "easter", "school", "college", "high", "elementary",
    "tv", "god", "english", "math", "mom", "dad",
    "it", "hr", "pe", "pr", "qa", "ai", "ux", "ui",
} | set(_WORDED_DECADES)


def _is_place_word(word: str) -> bool:
    if len(word) < 2 or not word[0].isupper():
        return False
    return not word.isupper() or len(word) <= 3


def trim_place(raw: str) -> Optional[str]:
    """
    Leading capitalised run of a captured phrase.

    "St. Louis" stays whole, "Ohio and moved" becomes "Ohio", "Ohio's"
    becomes "Ohio". Returns None when the phrase does not start with a
    capitalised word.
    """
    pieces: List[str] = []
    joiner = ""
    for word, separator in _PLACE_PART.findall(raw):
        if pieces and word in PLACE_CONNECTORS:
            joiner += word + separator
            continue
        possessive = word[-2:] in ("'s", "’s")
        if possessive:
            word = word[:-2]
        if not _is_place_word(word):
            break
        if pieces:
            pieces.append(joiner)
        pieces.append(word)
        if possessive:
            break
        if separator.startswith(".") and word.lower() not in PLACE_ABBREVIATIONS:
            break
        joiner = separator

    # An abbreviation is not a place without the name it shortens
    while pieces and pieces[-1].lower() in PLACE_ABBREVIATIONS:
        pieces = pieces[:-2]
    return "".join(pieces) or None

_PHRASE = r"\s+(?P<phrase>[^,.;:!?\n]+)"

PHRASE_RULES: Tuple[PhraseRule, ...] = (
    PhraseRule(
        "interest_cue",
        "interests",
        re.compile(
            r"\b(?:interested\s+in|passionate\s+about|fascinated\s+by|really\s+into)" + _PHRASE,
            re.IGNORECASE,
        ),
    ),
    PhraseRule(
        "identity_cue",
        "cultural_markers",
        re.compile(
            r"\b(?:identify\s+(?:with|as)|connected\s+(?:to|with)|belong\s+to|part\s+of|member\s+of)"
            + _PHRASE,
            re.IGNORECASE,
        ),
    ),
)

_PHRASE_STOP = re.compile(
    r"\s+(?:but|because|since|so|when|while|which|although)\b.*$", re.IGNORECASE
)
MAX_PHRASE_WORDS = 6

# Keyword tables for enrichment context; order matters, first hit wins for
# the socio-economic label.
TECHNOLOGY_ERA_MARKERS: Dict[str, List[str]] = {
    "pre-digital": ["before computers", "no internet", "landline"],
    "early-digital": ["dial-up", "first computer", "early internet"],
    "mobile-transition": ["flip phone", "cell phone", "nokia"],
    "smartphone-era": ["iphone", "smartphone", "apps"],
    "social-media-era": ["facebook", "social media", "instagram"],
}

SOCIOECONOMIC_MARKERS: Dict[str, List[str]] = {
    "upper-middle-class": ["upper middle", "privileged", "well-off"],
    "working-class": ["working class", "blue collar", "factory", "labor"],
    "middle-class": ["middle class", "suburban", "comfortable"],
    "lower-income": ["poor", "struggling", "poverty"],
}


def _keyword_pattern(markers: Sequence[str]) -> Pattern:
    alternatives = [re.escape(m).replace(r"\ ", r"[\s-]+").replace(r"\-", r"[\s-]?") for m in markers]
    return re.compile(r"\b(?:" + "|".join(alternatives) + r")\b", re.IGNORECASE)


class SignalExtractor:
    """
    Turns a block of free text into an ExtractedSignals snapshot.

    Pure: no state is kept between calls and no input raises.
    """

    def __init__(
        self,
        timeframe_rules: Sequence[TimeframeRule] = TIMEFRAME_RULES,
        location_rules: Sequence[LocationRule] = LOCATION_RULES,
        phrase_rules: Sequence[PhraseRule] = PHRASE_RULES,
        year_provider: Callable[[], int] = current_year,
    ):
        self.timeframe_rules = sorted(timeframe_rules, key=lambda rule: rule.tier)
        self.location_rules = tuple(location_rules)
        self.phrase_rules = tuple(phrase_rules)
        self.year_provider = year_provider
        self._technology_patterns = {
            era: _keyword_pattern(markers) for era, markers in TECHNOLOGY_ERA_MARKERS.items()
        }
        self._socioeconomic_patterns = {
            label: _keyword_pattern(markers) for label, markers in SOCIOECONOMIC_MARKERS.items()
        }

    def extract(self, text: Optional[str]) -> ExtractedSignals:
        """
        Extract every signal from the text.

        Args:
            text: Free text, possibly empty

        Returns:
            ExtractedSignals with absent fields for anything not found
        """
        if not isinstance(text, str) or not text.strip():
            return ExtractedSignals()

        timeframe = self.extract_timeframe(text)
        birth_year = None
        birth_decade = None
        qualifier = None
        if timeframe is not None:
            if timeframe.field == BIRTH_YEAR:
                birth_year = timeframe.value
                birth_decade = timeframe.value // 10 * 10
            else:
                birth_decade = timeframe.value
                qualifier = timeframe.qualifier

        signals = ExtractedSignals(
            birth_year=birth_year,
            birth_decade=birth_decade,
            decade_qualifier=qualifier,
            timeframe_text=timeframe.text if timeframe else None,
            locations=tuple(self.extract_locations(text)),
            interests=tuple(self.extract_phrases(text, "interests")),
            cultural_markers=tuple(self.extract_phrases(text, "cultural_markers")),
            technology_eras=tuple(self.extract_technology_eras(text)),
            socioeconomic_context=self.extract_socioeconomic_context(text),
        )
        logger.debug(f"Extracted signals: {signals.known_facts()}")
        return signals

    def extract_timeframe(self, text: str) -> Optional[TimeframeMatch]:
        """Return the winning time expression, or None when nothing valid matched."""
        latest = self.year_provider()
        tiers: Dict[int, List[TimeframeRule]] = {}
        for rule in self.timeframe_rules:
            tiers.setdefault(rule.tier, []).append(rule)

        for tier in sorted(tiers):
            best: Optional[TimeframeMatch] = None
            for rule in tiers[tier]:
                candidate = self._first_valid_match(rule, text, latest)
                if candidate and (best is None or candidate.position < best.position):
                    best = candidate
            if best is not None:
                logger.debug(f"Timeframe '{best.text}' -> {best.field}={best.value}")
                return best
        return None

    def _first_valid_match(
        self, rule: TimeframeRule, text: str, latest: int
    ) -> Optional[TimeframeMatch]:
        for match in rule.pattern.finditer(text):
            if rule.field == BIRTH_DECADE and self._is_age_phrase(text, match.start()):
                continue
            value = rule.resolve(match, latest)
            if value is None:
                continue
            groups = match.groupdict()
            return TimeframeMatch(
                field=rule.field,
                value=value,
                text=match.group(0).strip(),
                position=match.start(),
                qualifier=(groups.get("qualifier") or "").lower() or None,
            )
        return None

    @staticmethod
    def _is_age_phrase(text: str, start: int) -> bool:
        return bool(_AGE_PHRASE_PREFIX.search(text[max(0, start - 12):start]))

    def extract_locations(self, text: str) -> List[str]:
        """All distinct place phrases, in order of first appearance."""
        found: List[Tuple[int, str]] = []
        for rule in self.location_rules:
            for match in rule.pattern.finditer(text):
                if rule.excluded_before and rule.excluded_before.search(
                    text[max(0, match.start() - 16):match.start()]
                ):
                    continue
                place = trim_place(match.group("place"))
                if place is None or place.split()[0].lower() in NON_PLACE_WORDS:
                    continue
                found.append((match.start("place"), place))

        locations: List[str] = []
        for _position, place in sorted(found, key=lambda item: item[0]):
            if place not in locations:
                locations.append(place)
        return locations

    def extract_phrases(self, text: str, target: str) -> List[str]:
        """Low-precision phrase capture after fixed lexical cues."""
        phrases: List[Tuple[int, str]] = []
        for rule in self.phrase_rules:
            if rule.target != target:
                continue
            for match in rule.pattern.finditer(text):
                phrase = _PHRASE_STOP.sub("", match.group("phrase")).strip()
                words = phrase.split()[:MAX_PHRASE_WORDS]
                if words:
                    phrases.append((match.start(), " ".join(words)))

        result: List[str] = []
        for _position, phrase in sorted(phrases, key=lambda item: item[0]):
            if phrase.lower() not in (p.lower() for p in result):
                result.append(phrase)
        return result

    def extract_technology_eras(self, text: str) -> List[str]:
        return [era for era, pattern in self._technology_patterns.items() if pattern.search(text)]

    def extract_socioeconomic_context(self, text: str) -> Optional[str]:
        for label, pattern in self._socioeconomic_patterns.items():
            if pattern.search(text):
                return label
        return None
