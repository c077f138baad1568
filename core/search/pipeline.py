# Path: core/search/pipeline.py
# Purpose: Orchestrate the discovery workflow from query text to ranked photos.
# Layer: core/search.
# Details: Parses with context, searches the index, and attaches refinement hints to weak or empty results.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from config.settings import AppSettings
from core.models.domain import SearchOptions, SearchResult
from core.models.parameters import SearchParameters, SearchQuery
from core.models.query import AgentCommand, QueryProcessingResult, QueryValidationResult, SearchSuggestion
from core.parsing.query_parser import PhotoDiscoveryQueryParser
from .engine import SemanticSearchEngine

logger = logging.getLogger(__name__)

BROADEN_SUGGESTION = SearchSuggestion(
    type="broaden_search",
    suggestion="No photos matched every filter; try removing one of them",
    examples=["beach photos", "photos from 2020", "photos in Paris"],
)
CLARIFY_SUGGESTION = SearchSuggestion(
    type="clarify_intent",
    suggestion="Say what you want to do with these photos",
    examples=["show me photos in Paris", "find beach photos from 2020"],
)


@dataclass
class DiscoveryResult:
    """Everything produced for one discovery request."""

    processing: QueryProcessingResult
    result: Optional[SearchResult] = None
    validation: Optional[QueryValidationResult] = None
    suggestions: List[SearchSuggestion] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.processing.success and self.result is not None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": self.success,
            "processing": self.processing.to_dict(),
            "suggestions": [suggestion.to_dict() for suggestion in self.suggestions],
        }
        if self.result is not None:
            payload["result"] = self.result.to_dict()
        if self.validation is not None:
            payload["validation"] = self.validation.to_dict()
        return payload


class SearchPipeline:
    """High-level service bridging API and scripts with the parser and search engine."""

    def __init__(self, parser: PhotoDiscoveryQueryParser, engine: SemanticSearchEngine) -> None:
        self.parser = parser
        self.engine = engine

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "SearchPipeline":
        return cls(PhotoDiscoveryQueryParser(settings.parser), SemanticSearchEngine(settings.search))

    async def search_text(
        self,
        text: str,
        options: Optional[SearchOptions] = None,
        debounce: bool = False,
        **query_options: Any,
    ) -> DiscoveryResult:
        """
        Interpret ``text`` in the running context and search the index.

        External calls:
        - core/parsing/query_parser.py::PhotoDiscoveryQueryParser.process_query - intent and parameters.
        - core/search/engine.py::SemanticSearchEngine.search - ranked photos for the parameters.
        - core/parsing/query_parser.py::PhotoDiscoveryQueryParser.suggest_refinements - hints for weak queries.
        """

        processing = self.parser.process_query(text)
        query = SearchQuery.from_parameters(processing.parameters, **query_options)
        if debounce:
            result = await self.engine.search_with_debounce(query, options)
        else:
            result = await self.engine.search(query, options)

        validation = self.parser.validate_query(text)
        suggestions: List[SearchSuggestion] = []
        if result.total_count == 0 or processing.confidence < self.parser.settings.low_confidence_threshold:
            suggestions = self.parser.suggest_refinements(text)
            if not suggestions:
                suggestions = [BROADEN_SUGGESTION if result.total_count == 0 else CLARIFY_SUGGESTION]
        logger.info("Query %r returned %d photos (%d suggestions)", text, result.total_count, len(suggestions))
        return DiscoveryResult(processing=processing, result=result, validation=validation, suggestions=suggestions)

    async def search_parameters(
        self,
        parameters: SearchParameters,
        options: Optional[SearchOptions] = None,
        **query_options: Any,
    ) -> SearchResult:
        """Search with already-structured parameters; the parser context is not touched."""

        return await self.engine.search(SearchQuery.from_parameters(parameters, **query_options), options)

    async def run_agent_command(self, command: AgentCommand) -> DiscoveryResult:
        processing = self.parser.process_agent_command(command)
        if not processing.success:
            return DiscoveryResult(processing=processing)

        params = processing.search_params or {}
        options = SearchOptions(limit=params.get("limit"), offset=params.get("offset") or 0)
        result = await self.search_parameters(processing.parameters, options)
        suggestions = [BROADEN_SUGGESTION] if result.total_count == 0 else []
        return DiscoveryResult(processing=processing, result=result, suggestions=suggestions)
