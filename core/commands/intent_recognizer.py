# Path: core/commands/intent_recognizer.py
# Purpose: Map imperative commands ("select photo sunset.jpg") to registered action names.
# Layer: core/commands.
# Details: Ordered action pattern table; confidence scales with how much of the command a pattern covers.

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Pattern, Sequence, Tuple

from core.models.commands import CommandIntent

logger = logging.getLogger(__name__)

ALTERNATIVES_THRESHOLD = 0.6
MAX_ALTERNATIVES = 3
SPECIFIC_ID_BONUS = 0.1

_SPECIFIC_ID = re.compile(r"\.(?:jpg|jpeg|png|gif)\b|photo-\d+|img_\d+", re.IGNORECASE)


@dataclass(frozen=True)
class ActionPatternGroup:
    action: str
    category: str
    patterns: Tuple[Pattern[str], ...]
    confidence: float


def _group(action: str, category: str, confidence: float, *patterns: str) -> ActionPatternGroup:
    return ActionPatternGroup(
        action=action,
        category=category,
        patterns=tuple(re.compile(pattern, re.IGNORECASE) for pattern in patterns),
        confidence=confidence,
    )


ACTION_PATTERNS: Tuple[ActionPatternGroup, ...] = (
    _group(
        "photo.select",
        "photo",
        0.9,
        r"(?:select|choose|pick|click)\s+(?:photo|image|picture)\s+(.+)",
        r"(?:select|choose|pick)\s+(.+\.(?:jpg|jpeg|png|gif))",
        r"(?:click\s+on|tap)\s+(?:the\s+)?(.+)",
    ),
    _group(
        "photo.analyze",
        "photo",
        0.85,
        r"(?:analyze|process)\s+(?:photo|image|picture)\s+(.+)",
        r"(?:generate|create)\s+(?:metadata|keywords|tags)\s+for\s+(.+)",
        r"(?:add\s+(?:keywords|tags|metadata)|process\s+with\s+ai)\s+(.+)",
        r"(?:ai\s+analysis|smart\s+tagging)\s+(.+)",
    ),
    _group(
        "album.create",
        "album",
        0.9,
        r"(?:create|make|add)\s+(?:a\s+)?(?:new\s+)?album\s+(?:called|named)?\s*[\"']?([^\"']+)[\"']?",
        r"new\s+album\s+[\"']?([^\"']+)[\"']?",
        r"(?:create|make)\s+[\"']?([^\"']+)[\"']?\s+album",
    ),
    _group(
        "photo.search",
        "search",
        0.8,
        r"(?:find|search\s+for|show\s+me|filter\s+by)\s+(.+)",
        r"(?:photos|images|pictures)\s+(?:with|containing|tagged)\s+(.+)",
        r"(?:filter|search)\s+(.+)",
    ),
    _group(
        "photo.batchAnalyze",
        "batch",
        0.85,
        r"(?:analyze|process)\s+(?:all|selected|multiple)\s+(?:photos|images)",
        r"batch\s+(?:analyze|process|operation)",
        r"(?:analyze|process)\s+(?:them|these|selection)",
    ),
    _group(
        "album.select",
        "album",
        0.8,
        r"(?:select|open|view)\s+album\s+(.+)",
        r"(?:go\s+to|switch\s+to)\s+album\s+(.+)",
        r"album\s+(.+)",
    ),
    _group(
        "album.delete",
        "album",
        0.9,
        r"(?:delete|remove)\s+(?:the\s+)?album\s+(.+)",
    ),
    _group(
        "photo.delete",
        "photo",
        0.9,
        r"(?:delete|remove)\s+(?:the\s+)?(?:photo|image|picture)\s+(.+)",
    ),
)


class IntentRecognizer:
    """Pick the action whose pattern covers the command best."""

    def __init__(self, pattern_groups: Sequence[ActionPatternGroup] = ACTION_PATTERNS) -> None:
        self.pattern_groups = tuple(pattern_groups)

    def recognize(self, command: str) -> CommandIntent:
        best = CommandIntent(action="unknown", confidence=0.0, category="unknown")
        for group in self.pattern_groups:
            for regex in group.patterns:
                match = regex.search(command)
                if not match:
                    continue
                confidence = group.confidence * self._match_quality(command, match)
                if confidence > best.confidence:
                    best = CommandIntent(action=group.action, confidence=confidence, category=group.category)

        if best.confidence < ALTERNATIVES_THRESHOLD:
            best.alternative_actions = similar_actions(command)
        logger.debug("Command %r recognized as %s (%.2f)", command, best.action, best.confidence)
        return best

    @staticmethod
    def _match_quality(command: str, match: re.Match) -> float:
        if not command:
            return 0.0
        coverage = len(match.group(0)) / len(command)
        bonus = SPECIFIC_ID_BONUS if _SPECIFIC_ID.search(command) else 0.0
        return min(coverage + bonus, 1.0)


def similar_actions(command: str) -> List[str]:
    """Suggest up to three actions based on the nouns a command mentions."""

    lowered = command.lower()
    suggestions: List[str] = []
    if "photo" in lowered or "image" in lowered:
        suggestions.extend(["photo.select", "photo.analyze", "photo.search"])
    if "album" in lowered:
        suggestions.extend(["album.create", "album.select", "album.getStats"])
    if "search" in lowered or "find" in lowered:
        suggestions.extend(["photo.search", "album.findByName"])
    unique: List[str] = []
    for action in suggestions:
        if action not in unique:
            unique.append(action)
    return unique[:MAX_ALTERNATIVES]
