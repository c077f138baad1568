# Path: core/parsing/validation.py
# Purpose: Judge whether a query is specific enough to search and suggest how to improve it.
# Layer: core/parsing.
# Details: Issue codes, a blended confidence score, and template-based refinement suggestions.

from __future__ import annotations

import logging
import re
from typing import List, Optional

from core.models.query import QueryValidationResult, SearchSuggestion
from .intent_classifier import IntentClassifier
from .parameter_resolver import ParameterResolver, Resolution

logger = logging.getLogger(__name__)

INVALID_DATE_MARKER = "invalid_date_format"

_OLD_WORDS = re.compile(r"\b(?:old|older|oldest|vintage)\b", re.IGNORECASE)
_CONTENT_ENTITY_TYPES = {"object", "scene", "person", "keyword_phrase", "camera"}


class QueryValidator:
    """Score queries and build refinement hints from the same parse the search would use."""

    def __init__(self, resolver: ParameterResolver, classifier: IntentClassifier) -> None:
        self.resolver = resolver
        self.classifier = classifier

    def validate_query(self, query: str, resolution: Optional[Resolution] = None) -> QueryValidationResult:
        resolution = resolution or self.resolver.resolve(query)
        intent = self.classifier.extract_intent(query)
        tokenized = resolution.tokenized
        param_count = resolution.parameters.count_populated()

        issues: List[str] = []
        errors: List[str] = []
        warnings: List[str] = []

        if param_count == 0:
            issues.append("no_parameters")
            if not tokenized.entities or len(tokenized.tokens) <= 2:
                issues.append("too_vague")
        if intent.confidence < self.classifier.low_confidence_threshold:
            issues.append("unclear_intent")

        if INVALID_DATE_MARKER in query:
            errors.append(f"Invalid date format: {INVALID_DATE_MARKER}")
        for text in resolution.malformed:
            errors.append(f"Invalid date format: {text}")

        temporal = resolution.parameters.temporal
        if temporal.date_range is None and temporal.start_month and temporal.end_month is None:
            if any(entity.type == "time_period" and " to " in entity.value for entity in tokenized.entities):
                warnings.append("Only part of the date range was understood")

        confidence = min(intent.confidence * 0.6 + param_count * 0.1 + len(tokenized.entities) * 0.05, 1.0)
        is_valid = not issues and not errors and param_count > 2 and confidence > 0.7

        result = QueryValidationResult(
            is_valid=is_valid,
            confidence=confidence,
            extractable_parameters=param_count,
            issues=issues,
            errors=errors,
            warnings=warnings,
        )
        logger.debug("Validation for %r: %s", query, result.to_dict())
        return result

    def suggest_refinements(self, query: str, resolution: Optional[Resolution] = None) -> List[SearchSuggestion]:
        resolution = resolution or self.resolver.resolve(query)
        validation = self.validate_query(query, resolution)
        entities = resolution.tokenized.entities
        suggestions: List[SearchSuggestion] = []

        if "too_vague" in validation.issues:
            suggestions.append(
                SearchSuggestion(
                    type="add_context",
                    suggestion="Try to be more specific about what you're looking for",
                    example='Instead of "photos", try "sunset photos from beach vacation"',
                )
            )

        has_time = any(entity.type == "time_period" for entity in entities)
        if _OLD_WORDS.search(query) and not has_time:
            suggestions.append(
                SearchSuggestion(
                    type="temporal_refinement",
                    suggestion="Specify a time period",
                    examples=["photos from 2020", "photos from last year", "vintage photos from 1990s"],
                )
            )

        if validation.extractable_parameters == 0:
            suggestions.append(
                SearchSuggestion(
                    type="semantic_refinement",
                    suggestion="Add descriptive keywords",
                    examples=["sunset beach photos", "family vacation pictures", "nature landscape images"],
                )
            )

        has_content = any(entity.type in _CONTENT_ENTITY_TYPES for entity in entities)
        if has_content and resolution.parameters.spatial.location is None:
            suggestions.append(
                SearchSuggestion(
                    type="spatial_refinement",
                    suggestion="Add a place to narrow the results",
                    examples=["beach photos in Hawaii", "dogs at the park", "architecture in Paris"],
                )
            )

        return suggestions
