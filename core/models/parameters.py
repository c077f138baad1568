# Path: core/models/parameters.py
# Purpose: Define the structured search-parameter model produced by the query parser.
# Layer: core/models.
# Details: Five optional categories with dedupe-on-insert lists and the refinement merge law.

from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple, TypeVar

CATEGORY_NAMES = ("semantic", "spatial", "temporal", "people", "technical")

T = TypeVar("T")


def add_unique(values: List[str], item: str) -> bool:
    """Append ``item`` unless already present; return True when it was added."""

    if item in values:
        return False
    values.append(item)
    return True


def dedupe(values: Iterable[T]) -> List[T]:
    """Return values with duplicates removed, keeping the first occurrence order."""

    result: List[T] = []
    for value in values:
        if value not in result:
            result.append(value)
    return result


@dataclass
class DateRange:
    """Inclusive calendar range used by temporal filters."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def to_dict(self) -> Dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "DateRange":
        start = payload["start"]
        end = payload["end"]
        if isinstance(start, str):
            start = date.fromisoformat(start[:10])
        if isinstance(end, str):
            end = date.fromisoformat(end[:10])
        return cls(start=start, end=end)


@dataclass
class SemanticParams:
    """Free-form subject and content tags."""

    objects: List[str] = field(default_factory=list)
    scenes: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)
    mood: List[str] = field(default_factory=list)
    style: List[str] = field(default_factory=list)
    people_type: Optional[str] = None


@dataclass
class SpatialParams:
    """Place name plus an optional coordinate/radius pair."""

    location: Optional[str] = None
    coordinates: Optional[Tuple[float, float]] = None
    radius: Optional[float] = None


@dataclass
class TemporalParams:
    """Year, month span, explicit date range, or a normalized relative period tag."""

    year: Optional[int] = None
    month: Optional[str] = None
    start_month: Optional[str] = None
    end_month: Optional[str] = None
    date_range: Optional[DateRange] = None
    relative_period: Optional[str] = None


@dataclass
class PeopleParams:
    """Named people and coarse people categories."""

    named_people: List[str] = field(default_factory=list)
    people_type: Optional[str] = None
    age_group: Optional[str] = None
    group_size: Optional[str] = None


@dataclass
class TechnicalParams:
    """Camera and exposure constraints."""

    camera_make: Optional[str] = None
    camera_model: Optional[str] = None
    lens: Optional[str] = None
    aperture: Optional[str] = None
    iso: List[int] = field(default_factory=list)


def _is_set(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, list):
        return len(value) > 0
    return True


def _merge_category(base: T, update: T) -> T:
    """Merge two category objects: lists union-dedupe, scalars prefer ``update`` when set."""

    merged = {}
    for item in fields(base):
        old = getattr(base, item.name)
        new = getattr(update, item.name)
        if isinstance(old, list):
            merged[item.name] = dedupe(list(old) + list(new or []))
        else:
            merged[item.name] = copy.deepcopy(new if new is not None else old)
    return type(base)(**merged)


def _category_to_dict(category: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    for item in fields(category):
        value = getattr(category, item.name)
        if not _is_set(value):
            continue
        if isinstance(value, DateRange):
            payload[item.name] = value.to_dict()
        elif isinstance(value, tuple):
            payload[item.name] = {"lat": value[0], "lng": value[1]}
        elif isinstance(value, list):
            payload[item.name] = list(value)
        else:
            payload[item.name] = value
    return payload


_CATEGORY_TYPES = {
    "semantic": SemanticParams,
    "spatial": SpatialParams,
    "temporal": TemporalParams,
    "people": PeopleParams,
    "technical": TechnicalParams,
}


def _category_from_dict(name: str, payload: Optional[Dict[str, Any]]) -> Any:
    category_type = _CATEGORY_TYPES[name]
    if not payload:
        return category_type()
    known = {item.name for item in fields(category_type)}
    values: Dict[str, Any] = {}
    for key, value in payload.items():
        if key not in known or value is None:
            continue
        if key == "date_range":
            value = value if isinstance(value, DateRange) else DateRange.from_dict(value)
        elif key == "coordinates":
            if isinstance(value, dict):
                value = (float(value["lat"]), float(value["lng"]))
            else:
                value = (float(value[0]), float(value[1]))
        elif key == "year":
            value = int(value)
        elif isinstance(value, list):
            value = dedupe(value)
        values[key] = value
    return category_type(**values)


@dataclass
class SearchParameters:
    """Canonical structured query. An empty field means the dimension is unconstrained."""

    semantic: SemanticParams = field(default_factory=SemanticParams)
    spatial: SpatialParams = field(default_factory=SpatialParams)
    temporal: TemporalParams = field(default_factory=TemporalParams)
    people: PeopleParams = field(default_factory=PeopleParams)
    technical: TechnicalParams = field(default_factory=TechnicalParams)

    def copy(self) -> "SearchParameters":
        """Return a deep, independent copy."""

        return copy.deepcopy(self)

    def merged_with(self, other: "SearchParameters") -> "SearchParameters":
        """Apply a refinement: scalars from ``other`` override, lists are unioned without duplicates."""

        return SearchParameters(
            **{name: _merge_category(getattr(self, name), getattr(other, name)) for name in CATEGORY_NAMES}
        )

    def count_populated(self) -> int:
        """Count non-empty fields across every category."""

        total = 0
        for name in CATEGORY_NAMES:
            category = getattr(self, name)
            total += sum(1 for item in fields(category) if _is_set(getattr(category, item.name)))
        return total

    def is_empty(self) -> bool:
        return self.count_populated() == 0

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Serialize to nested dicts, omitting unset fields but keeping every category key."""

        return {name: _category_to_dict(getattr(self, name)) for name in CATEGORY_NAMES}

    @classmethod
    def from_dict(cls, payload: Optional[Dict[str, Any]]) -> "SearchParameters":
        payload = payload or {}
        return cls(**{name: _category_from_dict(name, payload.get(name)) for name in CATEGORY_NAMES})


@dataclass
class SearchQuery(SearchParameters):
    """Search parameters plus execution preferences for the search engine."""

    fuzzy_match: bool = True
    sort_by: str = "relevance"
    sort_order: str = "desc"

    @classmethod
    def from_parameters(cls, parameters: SearchParameters, **options: Any) -> "SearchQuery":
        """Wrap a copy of ``parameters`` with execution options."""

        clone = parameters.copy()
        return cls(**{name: getattr(clone, name) for name in CATEGORY_NAMES}, **options)

    @classmethod
    def from_dict(cls, payload: Optional[Dict[str, Any]]) -> "SearchQuery":
        payload = payload or {}
        options = {key: payload[key] for key in ("fuzzy_match", "sort_by", "sort_order") if key in payload}
        return cls.from_parameters(SearchParameters.from_dict(payload), **options)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = super().to_dict()
        payload.update({"fuzzy_match": self.fuzzy_match, "sort_by": self.sort_by, "sort_order": self.sort_order})
        return payload


__all__ = [
    "CATEGORY_NAMES",
    "DateRange",
    "PeopleParams",
    "SearchParameters",
    "SearchQuery",
    "SemanticParams",
    "SpatialParams",
    "TechnicalParams",
    "TemporalParams",
    "add_unique",
    "dedupe",
]
