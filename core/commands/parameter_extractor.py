# Path: core/commands/parameter_extractor.py
# Purpose: Pull action parameters out of imperative commands.
# Layer: core/commands.
# Details: One extractor per action family; the first matching pattern in each list wins.

from __future__ import annotations

import re
from typing import Any, Callable, Dict, Optional, Sequence

Params = Dict[str, Any]

_PHOTO_ID_PATTERNS = (
    re.compile(r"(?:photo|image|picture)\s+([^\s\"']+\.(?:jpg|jpeg|png|gif))", re.IGNORECASE),
    re.compile(r"(?:photo|image)\s+(?:with\s+id\s+)?([^\s\"']+)", re.IGNORECASE),
    re.compile(r"\b(?:id|ID)\s+([^\s\"']+)"),
    re.compile(r'"([^"]+)"'),
    re.compile(r"'([^']+)'"),
)
_FIRST = re.compile(r"\b(?:first|top|initial)\b", re.IGNORECASE)
_LAST = re.compile(r"\b(?:last|latest|recent|newest)\b", re.IGNORECASE)

_ALBUM_NAME_PATTERNS = (
    re.compile(r"album\s+(?:called|named)\s*[\"']([^\"']+)[\"']", re.IGNORECASE),
    re.compile(r"[\"']([^\"']+)[\"']\s+album", re.IGNORECASE),
    re.compile(r"album\s+[\"']([^\"']+)[\"']", re.IGNORECASE),
    re.compile(r"album\s+(?:called|named)\s+([^\"'\n]+?)(?:\s+with|\s+description|$)", re.IGNORECASE),
    re.compile(r"(?:create|make|new|select|open|view|delete|remove)\s+album\s+([^\"'\n]+?)(?:\s+with|\s+description|$)", re.IGNORECASE),
)
_DESCRIPTION_PATTERNS = (
    re.compile(r"description\s+[\"']([^\"']+)[\"']", re.IGNORECASE),
    re.compile(r"with\s+description\s+([^\"'\n]+)", re.IGNORECASE),
    re.compile(r"described?\s+as\s+[\"']([^\"']+)[\"']", re.IGNORECASE),
)
_KEYWORD_PATTERNS = (
    re.compile(r"\b(?:keywords?|tags?)\s+([^\"'\n]+)", re.IGNORECASE),
    re.compile(r"\b(?:with|containing|tagged)\s+([^\"'\n]+)", re.IGNORECASE),
    re.compile(r"(?:find|search\s+for|filter\s+by|show\s+me)\s+([^\"'\n]+)", re.IGNORECASE),
)
_KEYWORD_SPLIT = re.compile(r"[,;]\s*")
_INSTRUCTION_PATTERNS = (
    re.compile(r"(?:instructions?|prompt)\s+[\"']([^\"']+)[\"']", re.IGNORECASE),
    re.compile(r"with\s+[\"']([^\"']+)[\"']", re.IGNORECASE),
    re.compile(r"focus\s+on\s+([^\"'\n]+)", re.IGNORECASE),
)
_REGENERATE = re.compile(r"\b(?:regenerate|redo|again|force)\b", re.IGNORECASE)
_BATCH_COUNT = re.compile(r"\b(first|last)\s+(\d+)", re.IGNORECASE)
_PAGE = re.compile(r"\bpage\s+(\d+)", re.IGNORECASE)
_QUOTED_VALUE = re.compile(r"[\"']([^\"']+)[\"']")
_NUMBER = re.compile(r"\d+")


def _first_group(patterns: Sequence[re.Pattern], text: str) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return None


class ParameterExtractor:
    """Extract the parameter map a recognized action needs from the raw command text."""

    def __init__(self) -> None:
        self._extractors: Dict[str, Callable[[str], Params]] = {
            "photo.select": self.extract_photo_reference,
            "photo.delete": self.extract_photo_reference,
            "album.create": self.extract_album_params,
            "album.select": self.extract_album_params,
            "album.delete": self.extract_album_params,
            "photo.search": self.extract_search_params,
            "photo.filterByKeywords": self.extract_search_params,
            "photo.analyze": self.extract_analysis_params,
            "photo.batchAnalyze": self.extract_batch_params,
        }

    def extract(self, command: str, action: str) -> Params:
        extractor = self._extractors.get(action, self.extract_generic_params)
        return extractor(command)

    @staticmethod
    def extract_photo_reference(command: str) -> Params:
        """Return ``photo_id`` when the command names a photo, else a relative ``position``."""

        photo_id = _first_group(_PHOTO_ID_PATTERNS, command)
        if photo_id:
            return {"photo_id": photo_id}
        if _FIRST.search(command):
            return {"position": "first"}
        if _LAST.search(command):
            return {"position": "last"}
        return {}

    @staticmethod
    def extract_album_params(command: str) -> Params:
        params: Params = {}
        name = _first_group(_ALBUM_NAME_PATTERNS, command)
        if name:
            params["name"] = name
        description = _first_group(_DESCRIPTION_PATTERNS, command)
        if description:
            params["description"] = description
        return params

    @staticmethod
    def extract_search_params(command: str) -> Params:
        """Comma or semicolon separated terms become ``keywords``; anything else is a free ``query``."""

        text = _first_group(_KEYWORD_PATTERNS, command)
        if not text:
            return {}
        keywords = [keyword.strip() for keyword in _KEYWORD_SPLIT.split(text) if keyword.strip()]
        if len(keywords) > 1:
            return {"keywords": keywords}
        return {"query": text}

    def extract_analysis_params(self, command: str) -> Params:
        params = self.extract_photo_reference(command)
        instructions = _first_group(_INSTRUCTION_PATTERNS, command)
        if instructions:
            params["custom_instructions"] = instructions
        if _REGENERATE.search(command):
            params["regenerate"] = True
        return params

    @staticmethod
    def extract_batch_params(command: str) -> Params:
        params: Params = {}
        lowered = command.lower()
        if re.search(r"\b(?:all|every)\s+(?:photos?|images?)", lowered):
            params["target"] = "all"
        elif re.search(r"\b(?:selected|chosen)\s+(?:photos?|images?)", lowered):
            params["target"] = "selected"
        elif re.search(r"\b(?:them|these)\b", lowered):
            params["target"] = "contextual"

        count = _BATCH_COUNT.search(command)
        if count:
            params["position"] = count.group(1).lower()
            params["count"] = int(count.group(2))
        page = _PAGE.search(command)
        if page:
            params["page"] = int(page.group(1))
        return params

    @staticmethod
    def extract_generic_params(command: str) -> Params:
        params: Params = {}
        values = _QUOTED_VALUE.findall(command)
        if values:
            params["values"] = values
        numbers = _NUMBER.findall(command)
        if numbers:
            params["numbers"] = [int(number) for number in numbers]
        return params
