# Path: core/models/__init__.py
# Purpose: Package initializer for domain model definitions.
# Layer: core/models.
# Details: Exposes dataclasses used across parsing, indexing, and search layers.

from .commands import (
    Album,
    CommandIntent,
    CommandStep,
    NLProcessingResult,
    ParsedCommand,
    PhotoGridState,
    ProcessingOptions,
)
from .domain import (
    CriterionMatch,
    IndexedPhoto,
    MetadataEntry,
    PerformanceMetrics,
    Photo,
    PhotoIndex,
    PhotoMetadata,
    SearchMetadata,
    SearchOptions,
    SearchResult,
    SearchResultPhoto,
)
from .parameters import (
    DateRange,
    PeopleParams,
    SearchParameters,
    SearchQuery,
    SemanticParams,
    SpatialParams,
    TechnicalParams,
    TemporalParams,
)
from .query import (
    AgentCommand,
    EntityExtraction,
    QueryProcessingResult,
    QueryValidationResult,
    SearchQueryIntent,
    SearchSuggestion,
    Span,
    TokenizeResult,
)

__all__ = [
    "Album",
    "CommandIntent",
    "CommandStep",
    "NLProcessingResult",
    "ParsedCommand",
    "PhotoGridState",
    "ProcessingOptions",
    "AgentCommand",
    "CriterionMatch",
    "DateRange",
    "EntityExtraction",
    "IndexedPhoto",
    "MetadataEntry",
    "PeopleParams",
    "PerformanceMetrics",
    "Photo",
    "PhotoIndex",
    "PhotoMetadata",
    "QueryProcessingResult",
    "QueryValidationResult",
    "SearchMetadata",
    "SearchOptions",
    "SearchParameters",
    "SearchQuery",
    "SearchQueryIntent",
    "SearchResult",
    "SearchResultPhoto",
    "SearchSuggestion",
    "SemanticParams",
    "Span",
    "SpatialParams",
    "TechnicalParams",
    "TemporalParams",
    "TokenizeResult",
]
