"""
Tests for the rule based signal extractor.
"""

import pytest

from cohort_engine.services.processing.signal_extractor import (
    BIRTH_DECADE,
    BIRTH_YEAR,
    SignalExtractor,
    trim_place,
)


def test_born_in_year_and_city(extractor):
    signals = extractor.extract("I was born in 1985 in Columbus")

    assert signals.birth_year == 1985
    assert signals.birth_decade == 1980
    assert signals.locations == ("Columbus",)
    assert signals.timeframe_text == "1985"


def test_decade_without_place(extractor):
    signals = extractor.extract("things were different in the 90s")

    assert signals.birth_year is None
    assert signals.birth_decade == 1990
    assert signals.locations == ()


def test_exact_year_beats_decade_marker(extractor):
    signals = extractor.extract("I loved the 80s but I was born in 1992")

    assert signals.birth_year == 1992
    assert signals.birth_decade == 1990


@pytest.mark.parametrize(
    "text,expected",
    [
        ("born in '85", 1985),
        ("class of ’04", 2004),
    ],
)
def test_quoted_two_digit_year(extractor, text, expected):
    assert extractor.extract(text).birth_year == expected


def test_quoted_two_digit_year_in_future_is_discarded(extractor):
    # '49 would be 2049
    assert extractor.extract("since '49").birth_year is None


def test_out_of_range_years_are_ignored(extractor):
    signals = extractor.extract("my grandfather left in 1850 and we expect 2090 to be hot")

    assert signals.birth_year is None
    assert signals.birth_decade is None


def test_year_bounds_are_inclusive(extractor):
    assert extractor.extract("1900").birth_year == 1900
    assert extractor.extract("2025").birth_year == 2025
    assert extractor.extract("2026").birth_year is None


def test_qualified_and_worded_decades(extractor):
    signals = extractor.extract("I grew up in the late seventies")

    assert signals.birth_decade == 1970
    assert signals.decade_qualifier == "late"
    assert "seventies" in signals.timeframe_text


def test_four_digit_decade(extractor):
    signals = extractor.extract("a kid of the early 1960s")

    assert signals.birth_decade == 1960
    assert signals.decade_qualifier == "early"


def test_age_phrase_is_not_a_birth_decade(extractor):
    signals = extractor.extract("I started painting in my 60s")

    assert signals.birth_decade is None
    assert not signals.has_timeframe


def test_extract_timeframe_reports_rule_field(extractor):
    assert extractor.extract_timeframe("born 1970").field == BIRTH_YEAR
    assert extractor.extract_timeframe("the 70s").field == BIRTH_DECADE
    assert extractor.extract_timeframe("no dates here") is None


def test_locations_in_order_of_appearance(extractor):
    signals = extractor.extract(
        "I grew up in New York City, then moved to Austin and later lived in Toronto"
    )

    assert signals.locations == ("New York City", "Austin", "Toronto")
    assert signals.primary_location == "New York City"


def test_locations_are_deduplicated(extractor):
    signals = extractor.extract("I am from Ohio. Ohio is home and I still live in Ohio")

    assert signals.locations == ("Ohio",)


def test_city_of_cue(extractor):
    assert extractor.extract("the city of Lagos raised me").locations == ("Lagos",)


def test_capitalized_non_places_are_skipped(extractor):
    signals = extractor.extract("In January I was interested in Music from School")

    assert signals.locations == ()


def test_lowercase_place_is_not_guessed(extractor):
    assert extractor.extract("i grew up in a small town").locations == ()


@pytest.mark.parametrize(
    "text,expected",
    [
        ("I was born in 1984 in Montréal", ("Montréal",)),
        ("grew up in Zürich", ("Zürich",)),
        ("I am from São Paulo", ("São Paulo",)),
        ("Born in St. Louis in 1979", ("St. Louis",)),
        ("raised in Rio de Janeiro", ("Rio de Janeiro",)),
        ("I moved to Winston-Salem later", ("Winston-Salem",)),
    ],
)
def test_accented_and_abbreviated_places_stay_whole(extractor, text, expected):
    assert extractor.extract(text).locations == expected


def test_place_cut_mid_word_is_dropped(extractor):
    signals = extractor.extract("I grew up in Montr3al")

    assert signals.locations == ()
    assert not signals.has_geography


def test_later_cue_in_same_run_is_found(extractor):
    signals = extractor.extract("born in Ohio and raised in Texas")

    assert signals.locations == ("Ohio", "Texas")


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Ohio and moved", "Ohio"),
        ("Ohio's suburbs", "Ohio"),
        ("St. Louis", "St. Louis"),
        ("Isle of Man", "Isle of Man"),
        ("Paris of", "Paris"),
        ("St", None),
        ("the", None),
        ("NOWHERE", None),
    ],
)
def test_trim_place(raw, expected):
    assert trim_place(raw) == expected


@pytest.mark.parametrize(
    "text",
    [
        "Interested in Jazz since forever",
        "INVOLVED IN Politics at uni",
        "I work in IT",
        "she is in HR",
    ],
)
def test_non_place_after_in_is_skipped(extractor, text):
    assert extractor.extract(text).locations == ()


def test_two_digit_decade_reads_as_last_century(extractor):
    assert extractor.extract("the roaring 20s").birth_decade == 1920
    assert extractor.extract("a kid of the 10s").birth_decade == 2010
    assert extractor.extract("born in the 00s").birth_decade == 2000


def test_interests_and_cultural_markers(extractor):
    signals = extractor.extract(
        "I am passionate about urban gardening because it calms me. "
        "I identify with the maker community"
    )

    assert signals.interests == ("urban gardening",)
    assert signals.cultural_markers == ("the maker community",)


def test_enrichment_markers(extractor):
    signals = extractor.extract(
        "We had a landline and a dial-up modem in a working class neighborhood"
    )

    assert signals.technology_eras == ("pre-digital", "early-digital")
    assert signals.socioeconomic_context == "working-class"


@pytest.mark.parametrize("text", [None, "", "   ", 42])
def test_empty_or_non_text_yields_empty_signals(extractor, text):
    signals = extractor.extract(text)

    assert not signals.has_timeframe
    assert not signals.has_geography
    assert signals.known_facts() == {}


def test_default_extractor_uses_current_year():
    # Any year up to "now" is accepted by the default provider
    assert SignalExtractor().extract("born in 2001").birth_year == 2001
