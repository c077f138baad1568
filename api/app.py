# Path: api/app.py
# Purpose: Expose a FastAPI application for photo discovery and natural-language commands.
# Layer: api.
# Details: Health check plus search, parse, validate, agent, and command endpoints delegating to core services.

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from core.commands.processor import NaturalLanguageProcessor
from core.errors import IndexCorruptionError, SearchSupersededError
from core.models.commands import ProcessingOptions
from core.models.domain import SearchOptions
from core.models.parameters import SearchParameters
from core.models.query import AgentCommand
from core.search.pipeline import SearchPipeline

logger = logging.getLogger(__name__)


class SearchRequest(BaseModel):
    text: Optional[str] = Field(default=None, description="Free-text query interpreted with the session context.")
    parameters: Optional[Dict[str, Any]] = Field(default=None, description="Structured search parameters.")
    limit: Optional[int] = Field(default=None, ge=1)
    offset: int = Field(default=0, ge=0)
    sort_by: str = Field(default="relevance", pattern="^(relevance|date|name)$")
    sort_order: str = Field(default="desc", pattern="^(asc|desc)$")
    fuzzy_match: bool = True
    debounce: bool = False


class TextRequest(BaseModel):
    text: str


class AgentRequest(BaseModel):
    action: str = "search"
    parameters: Dict[str, Any] = Field(default_factory=dict)


class CommandRequest(BaseModel):
    command: str
    allow_multi_step: bool = False
    confirmed: bool = False
    context: Dict[str, Any] = Field(default_factory=dict)


def create_app(pipeline: Optional[SearchPipeline] = None, processor: Optional[NaturalLanguageProcessor] = None):  # type: ignore[override]
    """Create a FastAPI app instance configured with the provided pipeline and command processor."""

    from fastapi import FastAPI, HTTPException

    app = FastAPI(title="PhotoQuery API", version="0.1.0")

    def require_pipeline() -> SearchPipeline:
        if pipeline is None:
            raise HTTPException(status_code=500, detail="Search pipeline is not configured.")
        return pipeline

    @app.get("/health")
    def health() -> Dict[str, Any]:
        """Return a simple health status payload."""

        indexed = len(pipeline.engine.get_index().photos) if pipeline is not None else 0
        return {"status": "ok", "indexed_photos": indexed}

    @app.post("/search")
    async def search(request: SearchRequest) -> Dict[str, Any]:
        """Run a text or structured search through the configured pipeline."""

        active = require_pipeline()
        if request.text is None and request.parameters is None:
            raise HTTPException(status_code=400, detail="Provide either 'text' or 'parameters'.")

        options = SearchOptions(limit=request.limit, offset=request.offset)
        query_options = {"fuzzy_match": request.fuzzy_match, "sort_by": request.sort_by, "sort_order": request.sort_order}
        try:
            if request.text is not None:
                discovery = await active.search_text(request.text, options, debounce=request.debounce, **query_options)
                return discovery.to_dict()
            parameters = SearchParameters.from_dict(request.parameters)
            result = await active.search_parameters(parameters, options, **query_options)
            return {"success": True, "result": result.to_dict()}
        except SearchSupersededError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except IndexCorruptionError as exc:
            logger.error("Search failed: %s", exc)
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise HTTPException(status_code=400, detail=f"Invalid search parameters: {exc}") from exc

    @app.post("/parse")
    def parse(request: TextRequest) -> Dict[str, Any]:
        """Return tokens, entities, intent, and parameters without touching the session context."""

        parser = require_pipeline().parser
        tokenized = parser.tokenize(request.text)
        return {
            "tokens": tokenized.tokens,
            "entities": [entity.to_dict() for entity in tokenized.entities],
            "intent": parser.extract_intent(request.text).to_dict(),
            "parameters": parser.extract_parameters(request.text).to_dict(),
        }

    @app.post("/validate")
    def validate(request: TextRequest) -> Dict[str, Any]:
        parser = require_pipeline().parser
        return {
            "validation": parser.validate_query(request.text).to_dict(),
            "suggestions": [suggestion.to_dict() for suggestion in parser.suggest_refinements(request.text)],
        }

    @app.get("/context")
    def context() -> Dict[str, Any]:
        return require_pipeline().parser.get_current_context().to_dict()

    @app.delete("/context")
    def reset_context() -> Dict[str, str]:
        require_pipeline().parser.reset_context()
        return {"status": "reset"}

    @app.post("/agent")
    async def agent(request: AgentRequest) -> Dict[str, Any]:
        """Run a structured agent search; invalid parameters come back as ``success: false``."""

        discovery = await require_pipeline().run_agent_command(AgentCommand(action=request.action, parameters=request.parameters))
        return discovery.to_dict()

    @app.post("/commands")
    async def commands(request: CommandRequest) -> Dict[str, Any]:
        """Process a natural-language command such as ``create album called 'Trip'``."""

        if processor is None:
            raise HTTPException(status_code=500, detail="Command processor is not configured.")
        options = ProcessingOptions(
            allow_multi_step=request.allow_multi_step,
            confirmed=request.confirmed,
            context=request.context,
        )
        result = await processor.process_command(request.command, options)
        return result.to_dict()

    return app
