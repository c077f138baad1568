# Path: config/settings.py
# Purpose: Provide typed application configuration models.
# Layer: config.
# Details: Centralizes settings for the query parser, search engine, photo library paths, and logging.

import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

ENV_PREFIX = "PHOTOQUERY_"

DEFAULT_LOCATION_KEYWORDS = [
    "paris",
    "london",
    "new york",
    "tokyo",
    "beach",
    "mountain",
    "city",
    "country",
    "state",
    "province",
    "region",
]


class SearchSettings(BaseModel):
    """Settings controlling index lookups, fuzzy matching, and result windows."""

    performance_threshold: int = Field(default=100, description="Target search latency in milliseconds.")
    max_results: int = Field(default=100, description="Default page size when no limit is supplied.")
    fuzzy_match_threshold: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Minimum similarity ratio for an approximate term match.",
    )
    debounce_delay: float = Field(default=0.3, ge=0.0, description="Quiet period in seconds before a debounced search runs.")
    show_progress: bool = Field(default=False, description="Display a progress bar while indexing photos.")


class ParserSettings(BaseModel):
    """Settings describing how free-text queries are interpreted."""

    low_confidence_threshold: float = Field(
        default=0.5,
        description="Intent confidence below which a query is reported as unclear.",
    )
    location_keywords: List[str] = Field(
        default_factory=lambda: list(DEFAULT_LOCATION_KEYWORDS),
        description="Gazetteer used to route quoted phrases to the location field.",
    )


class AppSettings(BaseModel):
    """Top-level application settings shared across services and interfaces."""

    photo_library: Path = Field(default=Path("storage/library.json"), description="JSON file holding the photo collection.")
    photo_folder: Path = Field(default=Path("storage/photos"), description="Root folder scanned for photos.")
    search: SearchSettings = Field(default_factory=SearchSettings)
    parser: ParserSettings = Field(default_factory=ParserSettings)
    api_enabled: bool = Field(default=False, description="Flag indicating if the HTTP API should be initialized.")
    log_level: str = Field(default="INFO", description="Verbosity level for application logs.")
    log_file: Optional[Path] = Field(default=None, description="Optional file receiving a copy of the logs.")

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Instantiate settings, applying ``PHOTOQUERY_*`` environment overrides when present."""

        overrides = {}
        search_overrides = {}
        for key in ("photo_library", "photo_folder", "log_level", "log_file"):
            value = os.environ.get(f"{ENV_PREFIX}{key.upper()}")
            if value:
                overrides[key] = value
        api_enabled = os.environ.get(f"{ENV_PREFIX}API_ENABLED")
        if api_enabled is not None:
            overrides["api_enabled"] = api_enabled.strip().lower() in {"1", "true", "yes", "on"}
        for key in ("max_results", "fuzzy_match_threshold", "debounce_delay"):
            value = os.environ.get(f"{ENV_PREFIX}{key.upper()}")
            if value:
                search_overrides[key] = value
        if search_overrides:
            overrides["search"] = SearchSettings(**search_overrides)
        # pydantic coerces the string values into the declared field types.
        return cls(**overrides)


__all__ = ["AppSettings", "ParserSettings", "SearchSettings", "DEFAULT_LOCATION_KEYWORDS"]
