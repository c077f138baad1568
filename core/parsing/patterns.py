# Path: core/parsing/patterns.py
# Purpose: Hold the priority tables that drive entity extraction and intent classification.
# Layer: core/parsing.
# Details: Family order, per-pattern value groups, and per-family confidence are data, not control flow.

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Pattern, Tuple

MONTHS = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)
MONTH_NUMBERS = {name: index for index, name in enumerate(MONTHS, start=1)}

_MONTH_ALT = "|".join(MONTHS)
_CAMERA_BRANDS = "Canon|Nikon|Sony|Fujifilm|Olympus|Panasonic|Leica|Pentax|GoPro"

OBJECT_WORDS = (
    "sunset", "sunrise", "mountains?", "ocean", "lake", "river", "trees?", "flowers?",
    "animals?", "dogs?", "cats?", "birds?", "cars?", "buildings?", "food",
)
SCENE_WORDS = (
    "landscape", "portrait", "macro", "street", "architecture", "nature", "urban",
    "rural", "indoor", "outdoor", "night", "day", "beach",
)
EVENT_WORDS = ("vacation", "wedding", "party", "work", "travel", "holiday")
PEOPLE_WORDS = ("family", "friends", "children", "kids", "adults", "people", "person", "group")

_VOCABULARY = OBJECT_WORDS + SCENE_WORDS + EVENT_WORDS + PEOPLE_WORDS
# Capitalized words that never start a place or person name.
_NOT_PLACES = "|".join(
    [month.capitalize() for month in MONTHS] + [_CAMERA_BRANDS] + [word.capitalize() for word in _VOCABULARY]
)
# Lower-case words after "photos of" that are not subjects in their own right.
_NOT_OBJECTS = "|".join(
    ("the", "a", "an", "my", "our", "your", "his", "her", "their", "me", "us", "them", "all", "some", "any",
     "these", "those", "this", "that", "it", "last", "next", "and", "or")
    + _VOCABULARY
    + MONTHS
    + tuple(_CAMERA_BRANDS.lower().split("|"))
    + ("iphone", "pixel")
)
_PERIOD_UNITS = "year|month|week|summer|winter|spring|fall|autumn"

# A range endpoint is a month with optional day and year, a numeric date, or a bare year.
_ENDPOINT = (
    rf"(?:(?:{_MONTH_ALT})(?:\s+\d{{1,2}}(?:st|nd|rd|th)?)?(?:,?\s+\d{{4}})?"
    rf"|\d{{1,2}}/\d{{1,2}}/\d{{2,4}}"
    rf"|\d{{4}})"
)

NUMERIC_DATE = re.compile(r"\b(\d{1,2}/\d{1,2}/\d{2,4})\b")
BETWEEN_RANGE = re.compile(rf"\bbetween\s+({_ENDPOINT})\s+and\s+({_ENDPOINT})\b", re.IGNORECASE)
FROM_TO_RANGE = re.compile(rf"\bfrom\s+({_ENDPOINT})\s+to\s+({_ENDPOINT})\b", re.IGNORECASE)
YEAR = re.compile(r"\b(\d{4})\b")
MONTH_NAME = re.compile(rf"\b({_MONTH_ALT})\b", re.IGNORECASE)

QUOTED_PHRASE_PATTERNS = (
    re.compile(r'"([^"]+)"'),
    re.compile(r"(?<!\w)'([^']+)'(?!\w)"),
)

RELATIVE_PERIODS = {
    "last month": "last_month",
    "last year": "last_year",
    "last week": "last_week",
    "last summer": "last_summer",
}


@dataclass(frozen=True)
class PatternSpec:
    """A compiled pattern and the group whose text becomes the entity value (0 = whole match)."""

    regex: Pattern[str]
    value_group: int = 1


@dataclass(frozen=True)
class EntityPatternGroup:
    type: str
    patterns: Tuple[PatternSpec, ...]
    confidence: float


@dataclass(frozen=True)
class IntentPatternGroup:
    type: str
    patterns: Tuple[Pattern[str], ...]
    confidence: float


def _spec(pattern: str, flags: int = re.IGNORECASE, value_group: int = 1) -> PatternSpec:
    return PatternSpec(re.compile(pattern, flags), value_group)


# Families are scanned in this order; within one start offset the longest span wins and
# equal spans keep the earlier family.
ENTITY_PATTERNS: Tuple[EntityPatternGroup, ...] = (
    EntityPatternGroup(
        type="time_period",
        patterns=(
            PatternSpec(BETWEEN_RANGE, value_group=0),
            PatternSpec(FROM_TO_RANGE, value_group=0),
            _spec(rf"\b(last\s+(?:{_PERIOD_UNITS}))\b"),
            _spec(rf"\b(this\s+(?:{_PERIOD_UNITS}))\b"),
            _spec(rf"\b(next\s+(?:{_PERIOD_UNITS}))\b"),
            _spec(r"\b(\d{4})\b", flags=0),
            _spec(rf"\b({_MONTH_ALT})\b"),
            _spec(r"\b(yesterday|today|tomorrow)\b"),
            _spec(r"\b(\d{1,2}/\d{1,2}/\d{2,4})\b", flags=0),
        ),
        confidence=0.8,
    ),
    EntityPatternGroup(
        type="location",
        patterns=(
            _spec(
                rf"\b(?:in|at|from|near|for)\s+((?!(?:{_NOT_PLACES})\b)[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)\b",
                flags=0,
            ),
            _spec(
                rf"\b((?!(?:{_NOT_PLACES})\b)[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)\s+(?:photos|pictures|images)\b",
                flags=0,
            ),
        ),
        confidence=0.7,
    ),
    EntityPatternGroup(
        type="object",
        patterns=(
            _spec(rf"\b({'|'.join(OBJECT_WORDS)})\b"),
            # Any lower-case subject; capitalized words are left to the place and person families.
            _spec(
                rf"\bphotos?\s+(?:of|with|containing)\s+((?-i:(?![A-Z]))(?!(?:{_NOT_OBJECTS})\b)[a-zA-Z]+)\b",
                flags=re.IGNORECASE,
            ),
        ),
        confidence=0.6,
    ),
    EntityPatternGroup(
        type="scene",
        patterns=(
            _spec(rf"\b({'|'.join(SCENE_WORDS)})\b"),
            _spec(rf"\b({'|'.join(EVENT_WORDS)})\b"),
        ),
        confidence=0.7,
    ),
    EntityPatternGroup(
        type="person",
        patterns=(
            _spec(
                rf"\bwith\s+((?!(?:{_NOT_PLACES})\b)[A-Z][a-z]+(?:\s+(?:and\s+)?[A-Z][a-z]+)*)\b",
                flags=0,
            ),
            _spec(rf"\b({'|'.join(PEOPLE_WORDS)})\b"),
        ),
        confidence=0.8,
    ),
    EntityPatternGroup(
        type="camera",
        patterns=(
            _spec(
                r"\b((?:canon|nikon|sony|fujifilm|olympus|panasonic|leica|pentax|iphone|pixel|gopro)"
                r"(?:\s+(?=[\w-]*\d)[\w-]+)?)\b"
            ),
        ),
        confidence=0.7,
    ),
)

KEYWORD_PHRASE_GROUP = EntityPatternGroup(
    type="keyword_phrase",
    patterns=tuple(PatternSpec(regex) for regex in QUOTED_PHRASE_PATTERNS),
    confidence=0.9,
)

# Precedence order. On equal confidence the family listed first wins.
INTENT_PATTERNS: Tuple[IntentPatternGroup, ...] = (
    IntentPatternGroup(
        type="bulk_operation",
        patterns=(
            re.compile(
                r"\b(?:add|delete|export|move|copy|organize)\s+(?:all|these|selected|multiple|\w+\s+)*?"
                r"(?:photos?|images?|pictures?)\b",
                re.IGNORECASE,
            ),
            re.compile(
                r"\b(?:add|delete|export|move|copy|organize)\b.*?\b(?:to|from)\s+(?:\w+\s+)?(?:album|folder|collection)\b",
                re.IGNORECASE,
            ),
        ),
        confidence=1.0,
    ),
    IntentPatternGroup(
        type="filter",
        patterns=(
            re.compile(r"\b(?:filter\s+by|show\s+only|display\s+only|limit\s+to)\b", re.IGNORECASE),
            re.compile(r"\b(?:taken|shot|captured)\s+(?:in|on|at|with|from)\b", re.IGNORECASE),
            re.compile(r"\b(?:from\s+camera|with\s+camera|Canon|Nikon|Sony)\b", re.IGNORECASE),
        ),
        confidence=0.9,
    ),
    IntentPatternGroup(
        type="discovery",
        patterns=(
            re.compile(r"\b(?:show\s+me|find|search\s+for|look\s+for|get|display)\b", re.IGNORECASE),
            re.compile(r"\bphotos?\s+(?:of|with|from|containing)\b", re.IGNORECASE),
            re.compile(
                r"\b(?:sunset|beach|mountain|dog|cat|family|vacation)\s+(?:photos?|pictures?|images?)\b",
                re.IGNORECASE,
            ),
        ),
        confidence=0.9,
    ),
    IntentPatternGroup(
        type="refinement",
        patterns=(
            re.compile(r"\b(?:but\s+(?:only|also)|and\s+(?:also|only)|plus|except|excluding|including)\b", re.IGNORECASE),
            re.compile(r"\b(?:add\s+(?:filter|location|date)|more|less|better|different)\b", re.IGNORECASE),
        ),
        confidence=0.7,
    ),
)

INTENT_MATCH_WEIGHT = 1.0
DEFAULT_INTENT = "discovery"
DEFAULT_INTENT_CONFIDENCE = 0.1

PEOPLE_CATEGORIES = (
    ("family", "people_type", "family"),
    ("friends", "people_type", "friends"),
    ("children", "age_group", "children"),
    ("kids", "age_group", "children"),
    ("group", "group_size", "group"),
)

CAMERA_MAKES = {
    "canon": "Canon",
    "nikon": "Nikon",
    "sony": "Sony",
    "fujifilm": "Fujifilm",
    "olympus": "Olympus",
    "panasonic": "Panasonic",
    "leica": "Leica",
    "pentax": "Pentax",
    "iphone": "Apple",
    "pixel": "Google",
    "gopro": "GoPro",
}
