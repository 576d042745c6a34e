"""
Constants for generational cohort classification and follow-up policy.

The boundary table, confidence weights and similarity threshold are tunable
values kept stable for compatibility with stored classifications.
"""

# Cohort boundary table, oldest -> youngest: (label, first_year, last_year).
# None marks an open end.
COHORT_TABLE = [
    ("Traditionalist", None, 1945),
    ("Baby Boomer", 1946, 1964),
    ("Generation X", 1965, 1980),
    ("Millennial", 1981, 1996),
    ("Generation Z", 1997, 2012),
    ("Generation Alpha", 2013, None),
]

UNKNOWN_GENERATION = "Unknown"
UNKNOWN_REGION = "Unknown"

# Micro-generations straddling the main boundaries
MICRO_GENERATIONS = [
    ("Generation Jones", 1954, 1965),
    ("Xennials", 1977, 1983),
    ("Zillennials", 1994, 1998),
]

# Years within CUSP_WINDOW of an anchor are low-confidence boundary cases
CUSP_ANCHORS = (1981, 1996, 2012)
CUSP_WINDOW = 2

# Confidence scoring
BASE_CONFIDENCE = 0.5
REGION_BONUS = 0.3
IMPLAUSIBLE_YEAR_PENALTY = 0.3
PLAUSIBLE_EARLIEST_YEAR = 1920
UNKNOWN_CONFIDENCE = 0.0
SELECTED_CONFIDENCE = 1.0

# Timeframe extraction
EARLIEST_BIRTH_YEAR = 1900
DECADE_MIDPOINT_OFFSET = 5
TWO_DIGIT_CENTURY_PIVOT = 50  # value > pivot -> 1900s, else 2000s
TWO_DIGIT_DECADE_PIVOT = 10  # "20s" is the 1920s, "10s" the 2010s

# Follow-up policy defaults
DEFAULT_MAX_ATTEMPTS = 4
DEFAULT_DIRECT_STYLE_ATTEMPT = 2
DEFAULT_SIMILARITY_THRESHOLD = 0.7

# Environment variable names
ENV_MAX_ATTEMPTS = "ONBOARDING_MAX_ATTEMPTS"
ENV_DIRECT_STYLE_ATTEMPT = "ONBOARDING_DIRECT_STYLE_ATTEMPT"
ENV_SIMILARITY_THRESHOLD = "QUESTION_SIMILARITY_THRESHOLD"
