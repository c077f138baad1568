# Path: core/parsing/parameter_resolver.py
# Purpose: Convert extracted entities into typed search parameters.
# Layer: core/parsing.
# Details: Routes each entity type to a normalizer; malformed temporal text degrades to unset fields.

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, List, Optional, Sequence

from core.models.parameters import DateRange, SearchParameters, add_unique
from core.models.query import EntityExtraction, TokenizeResult
from .entity_extractor import EntityExtractor
from .patterns import (
    BETWEEN_RANGE,
    CAMERA_MAKES,
    FROM_TO_RANGE,
    MONTH_NAME,
    NUMERIC_DATE,
    PEOPLE_CATEGORIES,
    PEOPLE_WORDS,
    RELATIVE_PERIODS,
    YEAR,
)
from .temporal import parse_numeric_date, resolve_range

logger = logging.getLogger(__name__)

_COMPOUND_SPLIT = re.compile(r"\s*,\s*|\s+and\s+", re.IGNORECASE)
_NAME_SPLIT = re.compile(r"\s+and\s+")
_PROPER_NAME = re.compile(r"^[A-Z][a-z]+")
_RELATIVE_PHRASE = re.compile(r"^(?:(?:last|this|next)\s+\w+|yesterday|today|tomorrow)$")


@dataclass
class Resolution:
    """Parameters extracted from one query plus the temporal text that could not be understood."""

    parameters: SearchParameters
    tokenized: TokenizeResult
    malformed: List[str] = field(default_factory=list)


class ParameterResolver:
    """Turn a query's entities into a :class:`SearchParameters` instance."""

    def __init__(
        self,
        extractor: Optional[EntityExtractor] = None,
        location_keywords: Sequence[str] = (),
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self.extractor = extractor or EntityExtractor()
        self.location_keywords = [keyword.lower() for keyword in location_keywords]
        self._today = today or date.today

    def extract_parameters(self, query: str) -> SearchParameters:
        """Return a fresh, independent parameter object for ``query``."""

        return self.resolve(query).parameters

    def resolve(self, query: str) -> Resolution:
        tokenized = self.extractor.tokenize(query)
        parameters = SearchParameters()
        resolution = Resolution(parameters=parameters, tokenized=tokenized)

        for entity in tokenized.entities:
            if entity.type == "time_period":
                self._process_temporal(entity, resolution)
            elif entity.type == "location":
                parameters.spatial.location = entity.value
            elif entity.type == "object":
                self._process_semantic(entity.value, parameters.semantic.objects)
            elif entity.type == "scene":
                self._process_semantic(entity.value, parameters.semantic.scenes)
            elif entity.type == "person":
                self._process_people(entity, parameters)
            elif entity.type == "camera":
                self._process_camera(entity, parameters)
            elif entity.type == "keyword_phrase":
                if self.is_location_keyword(entity.value):
                    parameters.spatial.location = entity.value
                else:
                    self._process_semantic(entity.value, parameters.semantic.objects)

        logger.debug("Parameters for %r: %s", query, parameters.to_dict())
        resolution.parameters = parameters.copy()
        return resolution

    def is_location_keyword(self, keyword: str) -> bool:
        lowered = keyword.lower()
        return any(location in lowered for location in self.location_keywords)

    def _process_temporal(self, entity: EntityExtraction, resolution: Resolution) -> None:
        temporal = resolution.parameters.temporal
        value = entity.value.lower().strip()

        # Ranges first, so their endpoints are never read as standalone months.
        range_match = BETWEEN_RANGE.fullmatch(value) or FROM_TO_RANGE.fullmatch(value)
        if range_match:
            start_text, end_text = range_match.group(1), range_match.group(2)
            start_month = MONTH_NAME.search(start_text)
            end_month = MONTH_NAME.search(end_text)
            temporal.start_month = start_month.group(1).capitalize() if start_month else None
            temporal.end_month = end_month.group(1).capitalize() if end_month else None
            temporal.date_range = resolve_range(start_text, end_text, self._today())
            if temporal.date_range is None:
                logger.info("Could not resolve date range %r; leaving it unset", entity.value)
                resolution.malformed.append(entity.value)
            return

        if NUMERIC_DATE.fullmatch(value):
            day = parse_numeric_date(value)
            if day is None:
                logger.info("Ignoring malformed date %r", entity.value)
                resolution.malformed.append(entity.value)
            else:
                temporal.date_range = DateRange(start=day, end=day)
            return

        year_match = YEAR.fullmatch(value)
        if year_match:
            temporal.year = int(year_match.group(1))
            return

        if value in RELATIVE_PERIODS:
            temporal.relative_period = RELATIVE_PERIODS[value]
        elif "last" in value and "month" in value:
            temporal.relative_period = "last_month"
        elif "last" in value and "year" in value:
            temporal.relative_period = "last_year"
        elif _RELATIVE_PHRASE.match(value):
            temporal.relative_period = "_".join(value.split())

        if temporal.date_range is None:
            for month in MONTH_NAME.findall(value):
                capitalized = month.capitalize()
                if temporal.start_month is None:
                    temporal.start_month = capitalized
                else:
                    temporal.end_month = capitalized

    @staticmethod
    def _process_semantic(value: str, target: List[str]) -> None:
        # "dogs and cats" and "dogs, cats" both contribute two terms.
        for term in _COMPOUND_SPLIT.split(value):
            term = term.strip()
            if term:
                add_unique(target, term)

    @staticmethod
    def _process_people(entity: EntityExtraction, parameters: SearchParameters) -> None:
        people = parameters.people
        value = entity.value
        lowered = value.lower()
        if _PROPER_NAME.match(value) and lowered not in PEOPLE_WORDS:
            for name in _NAME_SPLIT.split(value):
                name = name.strip()
                if name:
                    add_unique(people.named_people, name)
            return

        for needle, attribute, category in PEOPLE_CATEGORIES:
            if needle in lowered:
                setattr(people, attribute, category)

    @staticmethod
    def _process_camera(entity: EntityExtraction, parameters: SearchParameters) -> None:
        brand, _, model = entity.value.partition(" ")
        parameters.technical.camera_make = CAMERA_MAKES.get(brand.lower(), brand)
        if brand.lower() in {"iphone", "pixel"}:
            # Phone names are models in their own right.
            parameters.technical.camera_model = entity.value
        elif model:
            parameters.technical.camera_model = model
