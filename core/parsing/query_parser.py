# Path: core/parsing/query_parser.py
# Purpose: Interpret free-text and agent queries while keeping a conversational search context.
# Layer: core/parsing.
# Details: Facade over extraction, intent, parameters, and validation; owns the refinement context.

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from config.settings import ParserSettings
from core.models.parameters import SearchParameters
from core.models.query import (
    AgentCommand,
    QueryProcessingResult,
    QueryValidationResult,
    SearchQueryIntent,
    SearchSuggestion,
    TokenizeResult,
)
from .entity_extractor import EntityExtractor
from .intent_classifier import IntentClassifier
from .parameter_resolver import ParameterResolver
from .validation import QueryValidator

logger = logging.getLogger(__name__)

SEARCH_ACTION_TARGET = "/photos/search"


class AgentSearchParameters(BaseModel):
    """Parameters accepted from agent-issued search commands."""

    model_config = ConfigDict(extra="forbid")

    semantic_query: Optional[str] = None
    temporal_filter: Optional[Any] = None
    spatial_filter: Optional[Any] = None
    limit: Optional[int] = None
    offset: Optional[int] = None


class PhotoDiscoveryQueryParser:
    """
    Turn queries into structured search parameters.

    The parser remembers the parameters of the last discovery query so that follow-up
    refinements ("but only from 2020") narrow the previous search instead of starting over.
    """

    def __init__(
        self,
        settings: Optional[ParserSettings] = None,
        extractor: Optional[EntityExtractor] = None,
        classifier: Optional[IntentClassifier] = None,
    ) -> None:
        self.settings = settings or ParserSettings()
        self.extractor = extractor or EntityExtractor()
        self.classifier = classifier or IntentClassifier(
            low_confidence_threshold=self.settings.low_confidence_threshold
        )
        self.resolver = ParameterResolver(self.extractor, self.settings.location_keywords)
        self.validator = QueryValidator(self.resolver, self.classifier)
        self.context = SearchParameters()

    def tokenize(self, query: str) -> TokenizeResult:
        return self.extractor.tokenize(query)

    def extract_intent(self, query: str) -> SearchQueryIntent:
        return self.classifier.extract_intent(query)

    def extract_parameters(self, query: str) -> SearchParameters:
        return self.resolver.extract_parameters(query)

    def validate_query(self, query: str) -> QueryValidationResult:
        return self.validator.validate_query(query)

    def suggest_refinements(self, query: str) -> List[SearchSuggestion]:
        return self.validator.suggest_refinements(query)

    def process_query(self, query: str) -> QueryProcessingResult:
        """
        Parse ``query`` and apply it to the running context.

        - refinement: merged into the context, which keeps the merged result.
        - discovery: replaces the context.
        - filter / bulk_operation: applied on top of the context for this call only.
        """

        intent = self.extract_intent(query)
        parameters = self.extract_parameters(query)

        if intent.type == "refinement":
            parameters = self.context.merged_with(parameters)
            self.context = parameters.copy()
        elif intent.type == "discovery":
            self.context = parameters.copy()
        else:
            parameters = self.context.merged_with(parameters)

        logger.info("Processed %r as %s (%.2f)", query, intent.type, intent.confidence)
        return QueryProcessingResult(
            success=True,
            parameters=parameters,
            intent=intent,
            confidence=intent.confidence,
        )

    def get_current_context(self) -> SearchParameters:
        return self.context.copy()

    def reset_context(self) -> None:
        self.context = SearchParameters()

    def process_agent_command(self, command: AgentCommand) -> QueryProcessingResult:
        """Validate an agent's search parameters and describe the request as a Schema.org SearchAction."""

        try:
            validated = AgentSearchParameters(**command.parameters)
        except ValidationError as exc:
            error = _describe_validation_error(exc)
            logger.warning("Rejected agent command %s: %s", command.action, error)
            return QueryProcessingResult(
                success=False,
                parameters=SearchParameters(),
                intent=SearchQueryIntent(type="discovery", confidence=0.0),
                confidence=0.0,
                error=error,
            )

        structured_data: Dict[str, Any] = {
            "@type": "SearchAction",
            "query": validated.semantic_query or "",
            "object": {
                "@type": "SearchResult",
                "potentialAction": {"@type": "ViewAction", "target": SEARCH_ACTION_TARGET},
            },
        }
        parameters = self.extract_parameters(validated.semantic_query) if validated.semantic_query else SearchParameters()
        return QueryProcessingResult(
            success=True,
            parameters=parameters,
            intent=SearchQueryIntent(type="discovery", confidence=1.0),
            confidence=1.0,
            structured_data=structured_data,
            search_params=dict(command.parameters),
        )


def _describe_validation_error(exc: ValidationError) -> str:
    for error in exc.errors():
        location = error.get("loc") or ("parameters",)
        if error.get("type") == "extra_forbidden":
            return f"Unknown parameter: {location[-1]}"
    first = exc.errors()[0]
    location = first.get("loc") or ("parameters",)
    return f"Invalid parameter {location[-1]}: {first.get('msg')}"
