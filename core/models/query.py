# Path: core/models/query.py
# Purpose: Define the result types produced while interpreting free-text queries.
# Layer: core/models.
# Details: Entities, intents, validation feedback, and the query-processing envelope returned to callers.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .parameters import SearchParameters

ENTITY_TYPES = ("object", "scene", "person", "location", "time_period", "keyword_phrase", "camera", "date")
INTENT_TYPES = ("discovery", "filter", "bulk_operation", "refinement")


@dataclass(frozen=True)
class Span:
    """Half-open character range ``[start, end)`` into the original query."""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def contains(self, other: "Span") -> bool:
        return self.start <= other.start and other.end <= self.end


@dataclass
class EntityExtraction:
    """A typed substring pulled out of a query."""

    type: str
    value: str
    confidence: float
    span: Span

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "value": self.value,
            "confidence": self.confidence,
            "span": {"start": self.span.start, "end": self.span.end},
        }


@dataclass
class TokenizeResult:
    tokens: List[str]
    entities: List[EntityExtraction]
    original_query: str


@dataclass
class SearchQueryIntent:
    """Classified purpose of a query."""

    type: str
    confidence: float
    subtype: Optional[str] = None
    alternative_actions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": self.type, "confidence": self.confidence}
        if self.subtype:
            payload["subtype"] = self.subtype
        if self.alternative_actions:
            payload["alternative_actions"] = list(self.alternative_actions)
        return payload


@dataclass
class QueryValidationResult:
    is_valid: bool
    confidence: float
    extractable_parameters: int
    issues: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "confidence": self.confidence,
            "extractable_parameters": self.extractable_parameters,
            "issues": list(self.issues),
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


@dataclass
class SearchSuggestion:
    """Template-based hint for making a query more specific."""

    type: str
    suggestion: str
    example: Optional[str] = None
    examples: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": self.type, "suggestion": self.suggestion}
        if self.example:
            payload["example"] = self.example
        if self.examples:
            payload["examples"] = list(self.examples)
        return payload


@dataclass
class QueryProcessingResult:
    """Envelope returned by the parser for both free-text queries and agent commands."""

    success: bool
    parameters: SearchParameters
    intent: SearchQueryIntent
    confidence: float
    structured_data: Optional[Dict[str, Any]] = None
    search_params: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": self.success,
            "parameters": self.parameters.to_dict(),
            "intent": self.intent.to_dict(),
            "confidence": self.confidence,
        }
        if self.structured_data is not None:
            payload["structured_data"] = self.structured_data
        if self.search_params is not None:
            payload["search_params"] = self.search_params
        if self.error:
            payload["error"] = self.error
        return payload


@dataclass
class AgentCommand:
    """Structured search request issued by an automated agent."""

    action: str
    parameters: Dict[str, Any] = field(default_factory=dict)
