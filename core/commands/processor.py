# Path: core/commands/processor.py
# Purpose: Turn natural-language commands into registry executions.
# Layer: core/commands.
# Details: Help, low-confidence suggestions, confirmation for destructive actions, multi-step splitting, and context.

from __future__ import annotations

import logging
import re
import time
from typing import Any, Callable, Dict, List, Optional

from core.models.commands import (
    CommandStep,
    NLProcessingResult,
    ParsedCommand,
    PhotoGridState,
    ProcessingOptions,
)
from .command_parser import CommandParser
from .registry import ActionRegistry

logger = logging.getLogger(__name__)

LOW_CONFIDENCE_THRESHOLD = 0.5
DESTRUCTIVE_ACTIONS = frozenset({"album.delete", "photo.delete", "photo.batchDelete"})

_HELP_REQUEST = re.compile(r"\b(?:help|what\s+can\s+you\s+do|commands|usage)\b", re.IGNORECASE)
_STEP_SEPARATOR = re.compile(r"\s*(?:\band\s+then\b|\band\s+also\b|,\s+then\b|;)\s*", re.IGNORECASE)

DEFAULT_SUGGESTIONS = [
    "select photo [photo-id]",
    'create album "Album Name"',
    "analyze photo [photo-id]",
    "search for [keywords]",
]
ACTION_SUGGESTIONS = {
    "photo.select": [
        "select photo beach-sunset.jpg",
        "choose photo with id photo-123",
        "click on the first photo",
    ],
    "album.create": [
        'create album "Vacation Photos"',
        'make new album Travel with description "Summer trip"',
        "new album Family",
    ],
    "photo.analyze": [
        "analyze photo sunset.jpg",
        "generate metadata for selected photos",
        "process image with AI",
    ],
}
EXAMPLE_COMMANDS = {
    "photo.select": "select photo [filename]",
    "photo.analyze": "analyze photo [filename]",
    "album.create": 'create album "Album Name"',
    "album.select": 'select album "Album Name"',
    "photo.search": "find photos with [keywords]",
}

HELP_TEXT = """Available commands:

Photo management:
  "select photo [filename]"       Select a specific photo
  "analyze photo [filename]"      Generate metadata
  "analyze all selected photos"   Batch analysis

Album management:
  "create album 'Album Name'"     Create a new album
  "select album 'Album Name'"     Switch to an album
  "delete album 'Album Name'"     Delete an album (asks for confirmation)

Search:
  "find photos with [keywords]"   Search by keywords
  "show me [description] photos"  Natural search

Examples:
  "select photo sunset.jpg"
  "create album 'Vacation 2025' with description 'Beach photos'"
  "find photos with sunset, beach, landscape"
"""


class NaturalLanguageProcessor:
    """Process commands such as ``create album called 'Vacation 2024'`` against an action registry."""

    def __init__(
        self,
        registry: ActionRegistry,
        parser: Optional[CommandParser] = None,
        state_provider: Optional[Callable[[], PhotoGridState]] = None,
    ) -> None:
        self.registry = registry
        self.parser = parser or CommandParser(registry)
        self.state_provider = state_provider or PhotoGridState
        self.context: Dict[str, Any] = {}

    async def process_command(self, command: str, options: Optional[ProcessingOptions] = None) -> NLProcessingResult:
        """
        Parse ``command`` and, when it is clear and safe, execute the recognized action.

        External calls:
        - core/commands/command_parser.py::CommandParser.parse - action and parameters.
        - core/commands/registry.py::ActionRegistry.execute - runs the action handler.
        """

        options = options or ProcessingOptions()
        if _HELP_REQUEST.search(command or ""):
            return NLProcessingResult(success=True, help_response=HELP_TEXT.strip())

        parsed = self.parser.parse(command)
        if parsed.confidence < LOW_CONFIDENCE_THRESHOLD:
            return self._low_confidence(command, parsed)

        action = parsed.intent.action
        if action in DESTRUCTIVE_ACTIONS and not options.confirmed:
            return NLProcessingResult(
                success=False,
                parameters=parsed.parameters,
                requires_confirmation=True,
                confirmation_prompt=f"This will {action.replace('.', ' ')}. Are you sure you want to continue?",
            )

        if options.allow_multi_step and _STEP_SEPARATOR.search(command):
            return self._split_steps(command)

        parameters = self.resolve_contextual_parameters(parsed.parameters)
        errors = [error for error in parsed.errors if not error.startswith("Missing required parameter")]
        errors.extend(self.parser.missing_required(action, parameters))
        if errors:
            return NLProcessingResult(
                success=False,
                parameters=parameters,
                error="; ".join(errors),
                suggestions=ACTION_SUGGESTIONS.get(action, ["Try being more specific", 'Use "help" to see available commands']),
            )

        self._progress(options, "started", f"Executing {action}")
        result = await self.registry.execute(action, parameters)
        self._progress(options, "completed" if result.success else "failed", result.error or "Action completed successfully")

        self.context.update(options.context)
        self.context.update(
            {"last_action": action, "last_parameters": parameters, "last_result": result, "timestamp": time.time()}
        )
        logger.info("Executed %s from command %r (success=%s)", action, command, result.success)
        return NLProcessingResult(
            success=result.success,
            executed_action=action,
            parameters=parameters,
            result=result,
            error=result.error,
        )

    def resolve_contextual_parameters(self, parameters: Dict[str, Any]) -> Dict[str, Any]:
        """Replace "these"/"selected" and first/last references with ids from the current photo grid."""

        resolved = dict(parameters)
        if parameters.get("target") not in ("selected", "contextual") and "position" not in parameters:
            return resolved

        state = self.state_provider()
        if parameters.get("target") in ("selected", "contextual") and state.selected_ids:
            resolved["photo_ids"] = list(state.selected_ids)

        position = parameters.get("position")
        if position and state.photo_ids:
            count = parameters.get("count")
            if count:
                window = state.photo_ids[:count] if position == "first" else state.photo_ids[-count:]
                resolved["photo_ids"] = list(window)
            else:
                resolved["photo_id"] = state.photo_ids[0] if position == "first" else state.photo_ids[-1]
        return resolved

    def _low_confidence(self, command: str, parsed: ParsedCommand) -> NLProcessingResult:
        alternatives = parsed.intent.alternative_actions
        if alternatives:
            suggestions = [EXAMPLE_COMMANDS.get(action, f"execute {action}") for action in alternatives]
        else:
            suggestions = list(DEFAULT_SUGGESTIONS)
        logger.info("Could not understand command %r (confidence %.2f)", command, parsed.confidence)
        return NLProcessingResult(success=False, error=f'Could not understand command: "{command}"', suggestions=suggestions)

    def _split_steps(self, command: str) -> NLProcessingResult:
        steps: List[CommandStep] = []
        for part in _STEP_SEPARATOR.split(command):
            if not part.strip():
                continue
            parsed = self.parser.parse(part.strip())
            steps.append(CommandStep(action=parsed.intent.action, parameters=parsed.parameters))
        return NLProcessingResult(success=True, multi_step=True, steps=steps)

    @staticmethod
    def _progress(options: ProcessingOptions, status: str, message: str) -> None:
        if options.on_progress is not None:
            options.on_progress({"status": status, "message": message})
