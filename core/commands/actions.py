# Path: core/commands/actions.py
# Purpose: Provide the discovery actions that natural-language commands execute.
# Layer: core/commands.
# Details: Search, photo selection, and in-memory albums wired to the search pipeline and grid state.

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from core.models.commands import Album, PhotoGridState
from core.models.domain import SearchOptions
from core.models.parameters import SearchParameters
from core.search.pipeline import SearchPipeline
from .processor import NaturalLanguageProcessor
from .registry import ActionParameter, ActionRegistry, ActionResult, build_action

logger = logging.getLogger(__name__)


class DiscoveryActions:
    """Handlers for photo.search, photo.select, album.create, album.select and album.delete."""

    def __init__(self, pipeline: SearchPipeline) -> None:
        self.pipeline = pipeline
        self.grid = PhotoGridState()
        self.albums: Dict[str, Album] = {}

    def state(self) -> PhotoGridState:
        """Current grid snapshot; suitable as a processor ``state_provider``."""

        return PhotoGridState(
            photo_ids=list(self.grid.photo_ids),
            selected_ids=list(self.grid.selected_ids),
            current_album=self.grid.current_album,
        )

    async def search(self, params: Dict[str, Any]) -> ActionResult:
        options = SearchOptions(limit=params.get("limit"), offset=int(params.get("offset") or 0))
        keywords = params.get("keywords")
        if keywords:
            parameters = SearchParameters()
            parameters.semantic.keywords = [str(keyword) for keyword in keywords]
            result = await self.pipeline.search_parameters(parameters, options)
            payload = result.to_dict()
        elif params.get("query"):
            discovery = await self.pipeline.search_text(str(params["query"]), options)
            result = discovery.result
            payload = discovery.to_dict()
        else:
            return ActionResult(success=False, error="Provide a query or keywords to search for")

        self.grid.photo_ids = [photo.id for photo in result.photos]
        self.grid.selected_ids = []
        warnings = [] if result.total_count else ["No photos matched"]
        return ActionResult(success=True, data=payload, warnings=warnings)

    def select_photo(self, params: Dict[str, Any]) -> ActionResult:
        photo_id = params["photo_id"]
        indexed = self.pipeline.engine.get_index().photos.get(photo_id)
        if indexed is None:
            # Commands usually name the file rather than the id.
            indexed = next(
                (item for item in self.pipeline.engine.get_index().photos.values() if item.photo.filename == photo_id),
                None,
            )
        if indexed is None:
            return ActionResult(success=False, error=f"Photo {photo_id} not found")
        self.grid.selected_ids = [indexed.id]
        return ActionResult(success=True, data=indexed.photo.to_dict())

    def create_album(self, params: Dict[str, Any]) -> ActionResult:
        name = params["name"]
        if name in self.albums:
            return ActionResult(success=False, error=f"Album '{name}' already exists")
        photo_ids = list(params.get("photo_ids") or self.grid.selected_ids)
        album = Album(name=name, description=params.get("description"), photo_ids=photo_ids)
        self.albums[name] = album
        logger.info("Created album %s with %d photos", name, len(photo_ids))
        return ActionResult(success=True, data=album.to_dict())

    def select_album(self, params: Dict[str, Any]) -> ActionResult:
        album = self.albums.get(params["name"])
        if album is None:
            return ActionResult(success=False, error=f"Album '{params['name']}' not found")
        self.grid.current_album = album.name
        self.grid.photo_ids = list(album.photo_ids)
        self.grid.selected_ids = []
        return ActionResult(success=True, data=album.to_dict())

    def delete_album(self, params: Dict[str, Any]) -> ActionResult:
        album = self.albums.pop(params["name"], None)
        if album is None:
            return ActionResult(success=False, error=f"Album '{params['name']}' not found")
        if self.grid.current_album == album.name:
            self.grid.current_album = None
        return ActionResult(success=True, data={"deleted": album.name})


def _non_empty(value: Any) -> bool:
    return bool(str(value).strip())


def register_discovery_actions(registry: ActionRegistry, pipeline: SearchPipeline) -> DiscoveryActions:
    """Register the discovery actions on ``registry`` and return the object holding their state."""

    actions = DiscoveryActions(pipeline)

    registry.register(
        build_action(
            "photo.search",
            "Search photos by natural-language query or explicit keywords",
            actions.search,
            {
                "query": ActionParameter(type="string", description="Free-text query"),
                "keywords": ActionParameter(type="array", description="Keywords that must all match"),
                "limit": ActionParameter(type="number", validation=lambda value: value > 0),
                "offset": ActionParameter(type="number", validation=lambda value: value >= 0, default=0),
            },
            category="search",
            examples=["find photos with sunset, beach", "show me dogs in Paris"],
        )
    )
    registry.register(
        build_action(
            "photo.select",
            "Select a photo by id or filename",
            actions.select_photo,
            {"photo_id": ActionParameter(type="string", required=True, validation=_non_empty)},
            examples=["select photo sunset.jpg"],
        )
    )
    registry.register(
        build_action(
            "album.create",
            "Create an album, optionally seeded with the selected photos",
            actions.create_album,
            {
                "name": ActionParameter(type="string", required=True, validation=_non_empty),
                "description": ActionParameter(type="string"),
                "photo_ids": ActionParameter(type="array"),
            },
            examples=["create album called 'Vacation 2024'"],
        )
    )
    registry.register(
        build_action(
            "album.select",
            "Open an album",
            actions.select_album,
            {"name": ActionParameter(type="string", required=True)},
            examples=["open album Travel"],
        )
    )
    registry.register(
        build_action(
            "album.delete",
            "Delete an album",
            actions.delete_album,
            {"name": ActionParameter(type="string", required=True)},
            examples=["delete album Travel"],
        )
    )
    return actions


def build_processor(
    pipeline: SearchPipeline, registry: Optional[ActionRegistry] = None
) -> Tuple[NaturalLanguageProcessor, DiscoveryActions]:
    """Create a registry with the discovery actions and a processor reading their grid state."""

    registry = registry or ActionRegistry()
    actions = register_discovery_actions(registry, pipeline)
    return NaturalLanguageProcessor(registry, state_provider=actions.state), actions
