# Path: core/commands/command_parser.py
# Purpose: Combine intent recognition and parameter extraction into a parsed command.
# Layer: core/commands.
# Details: Required parameters are checked against the injected action registry when the action is known.

from __future__ import annotations

from typing import Any, Dict, List, Optional

from core.models.commands import ParsedCommand
from .intent_recognizer import IntentRecognizer
from .parameter_extractor import ParameterExtractor
from .registry import ActionRegistry

PARAMETERS_FOUND_CONFIDENCE = 0.8
NO_PARAMETERS_CONFIDENCE = 0.4


class CommandParser:
    def __init__(
        self,
        registry: Optional[ActionRegistry] = None,
        recognizer: Optional[IntentRecognizer] = None,
        extractor: Optional[ParameterExtractor] = None,
    ) -> None:
        self.registry = registry
        self.recognizer = recognizer or IntentRecognizer()
        self.extractor = extractor or ParameterExtractor()

    def parse(self, command: str) -> ParsedCommand:
        """Recognize the action, extract its parameters, and blend both into one confidence."""

        errors: List[str] = []
        if not command or not command.strip():
            errors.append("Empty command provided")

        intent = self.recognizer.recognize(command or "")
        parameters = self.extractor.extract(command or "", intent.action)
        errors.extend(self.missing_required(intent.action, parameters))

        parameter_confidence = PARAMETERS_FOUND_CONFIDENCE if parameters else NO_PARAMETERS_CONFIDENCE
        return ParsedCommand(
            intent=intent,
            parameters=parameters,
            confidence=(intent.confidence + parameter_confidence) / 2,
            original_command=command,
            errors=errors,
        )

    def missing_required(self, action: str, parameters: Dict[str, Any]) -> List[str]:
        if self.registry is None:
            return []
        definition = self.registry.get_action(action)
        if definition is None:
            return []
        return [
            f"Missing required parameter: {name}"
            for name, parameter in definition.parameters.items()
            if parameter.required and name not in parameters
        ]
