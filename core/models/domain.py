# Path: core/models/domain.py
# Purpose: Define domain models shared across indexing and search workflows.
# Layer: core/models.
# Details: Lightweight dataclasses simplify serialization between scripts, API, and core services.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from dateutil.parser import isoparse

from .parameters import SearchParameters


@dataclass
class PhotoMetadata:
    """AI-generated and EXIF-derived annotations attached to a photo."""

    keywords: List[str] = field(default_factory=list)
    objects: List[str] = field(default_factory=list)
    scenes: List[str] = field(default_factory=list)
    people: List[str] = field(default_factory=list)
    location: Optional[str] = None
    camera: Optional[str] = None
    taken_at: Optional[datetime] = None
    confidence: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "keywords": list(self.keywords),
            "objects": list(self.objects),
            "scenes": list(self.scenes),
            "people": list(self.people),
            "location": self.location,
            "camera": self.camera,
            "taken_at": self.taken_at.isoformat() if self.taken_at else None,
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "PhotoMetadata":
        taken_at = payload.get("taken_at") or payload.get("takenAt")
        if isinstance(taken_at, str):
            taken_at = isoparse(taken_at)
        return cls(
            keywords=list(payload.get("keywords") or []),
            objects=list(payload.get("objects") or []),
            scenes=list(payload.get("scenes") or []),
            people=list(payload.get("people") or []),
            location=payload.get("location"),
            camera=payload.get("camera"),
            taken_at=taken_at,
            confidence=payload.get("confidence"),
        )


@dataclass
class Photo:
    """A photo in the user's library with optional metadata."""

    id: str
    filename: str
    metadata: Optional[PhotoMetadata] = None
    path: Optional[Path] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "filename": self.filename,
            "metadata": self.metadata.to_dict() if self.metadata else None,
            "path": str(self.path) if self.path else None,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Photo":
        metadata = payload.get("metadata")
        path = payload.get("path")
        return cls(
            id=str(payload["id"]),
            filename=payload.get("filename", ""),
            metadata=PhotoMetadata.from_dict(metadata) if metadata else None,
            path=Path(path) if path else None,
        )


@dataclass
class IndexedPhoto:
    """Photo wrapped with the derived fields computed at indexing time."""

    photo: Photo
    searchable_text: str
    indexed_at: datetime

    @property
    def id(self) -> str:
        return self.photo.id


@dataclass
class MetadataEntry:
    """Posting list for a single lower-cased term of an inverted index."""

    photo_ids: List[str] = field(default_factory=list)
    confidence: float = 0.0
    frequency: int = 0


@dataclass
class PhotoIndex:
    """Inverted indexes built from one snapshot of a photo collection."""

    photos: Dict[str, IndexedPhoto] = field(default_factory=dict)
    keyword_index: Dict[str, MetadataEntry] = field(default_factory=dict)
    object_index: Dict[str, MetadataEntry] = field(default_factory=dict)
    scene_index: Dict[str, MetadataEntry] = field(default_factory=dict)
    location_index: Dict[str, MetadataEntry] = field(default_factory=dict)
    people_index: Dict[str, MetadataEntry] = field(default_factory=dict)
    camera_index: Dict[str, MetadataEntry] = field(default_factory=dict)
    temporal_index: Dict[str, List[str]] = field(default_factory=dict)

    def fuzzy_sources(self) -> Dict[str, Dict[str, MetadataEntry]]:
        """Return the string-valued indexes that receive approximate-match structures."""

        return {
            "keywords": self.keyword_index,
            "objects": self.object_index,
            "scenes": self.scene_index,
            "locations": self.location_index,
            "people": self.people_index,
        }


@dataclass
class CriterionMatch:
    """Photos matched by one criterion, with the subset that matched an exact index key."""

    photo_ids: Set[str] = field(default_factory=set)
    exact_matches: Set[str] = field(default_factory=set)
    terms: List[str] = field(default_factory=list)


@dataclass
class SearchResultPhoto:
    """A ranked photo with the criteria it satisfied."""

    photo: Photo
    relevance_score: float
    matched_criteria: List[str] = field(default_factory=list)
    highlighted_fields: Dict[str, str] = field(default_factory=dict)

    @property
    def id(self) -> str:
        return self.photo.id

    def to_dict(self) -> Dict[str, Any]:
        payload = self.photo.to_dict()
        payload.update(
            {
                "relevance_score": round(self.relevance_score, 4),
                "matched_criteria": list(self.matched_criteria),
                "highlighted_fields": dict(self.highlighted_fields),
            }
        )
        return payload


@dataclass
class SearchOptions:
    """Pagination window applied after ranking."""

    limit: Optional[int] = None
    offset: int = 0
    include_metadata: bool = True


@dataclass
class PerformanceMetrics:
    """Timings in milliseconds for the phases of a search."""

    index_lookup_time: float = 0.0
    fuzzy_match_time: float = 0.0
    sorting_time: float = 0.0


@dataclass
class SearchMetadata:
    applied_filters: SearchParameters
    matched_criteria: List[str] = field(default_factory=list)
    performance_metrics: PerformanceMetrics = field(default_factory=PerformanceMetrics)


@dataclass
class SearchResult:
    """One page of ranked photos plus bookkeeping about the search."""

    photos: List[SearchResultPhoto]
    total_count: int
    search_time: float
    query: SearchParameters
    search_metadata: SearchMetadata

    def to_dict(self) -> Dict[str, Any]:
        metrics = self.search_metadata.performance_metrics
        return {
            "photos": [photo.to_dict() for photo in self.photos],
            "total_count": self.total_count,
            "search_time": round(self.search_time, 3),
            "query": self.query.to_dict(),
            "search_metadata": {
                "applied_filters": self.search_metadata.applied_filters.to_dict(),
                "matched_criteria": list(self.search_metadata.matched_criteria),
                "performance_metrics": {
                    "index_lookup_time": round(metrics.index_lookup_time, 3),
                    "fuzzy_match_time": round(metrics.fuzzy_match_time, 3),
                    "sorting_time": round(metrics.sorting_time, 3),
                },
            },
        }
