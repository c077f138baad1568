# Path: core/commands/__init__.py
# Purpose: Package initializer for the natural-language command path.
# Layer: core/commands.
# Details: Exposes the action registry, command parsing, the processor, and the discovery actions.

from .actions import DiscoveryActions, build_processor, register_discovery_actions
from .command_parser import CommandParser
from .intent_recognizer import ACTION_PATTERNS, IntentRecognizer
from .parameter_extractor import ParameterExtractor
from .processor import NaturalLanguageProcessor
from .registry import (
    ActionDefinition,
    ActionParameter,
    ActionRegistry,
    ActionResult,
    ExecutionRecord,
    build_action,
)

__all__ = [
    "ACTION_PATTERNS",
    "ActionDefinition",
    "ActionParameter",
    "ActionRegistry",
    "ActionResult",
    "CommandParser",
    "DiscoveryActions",
    "ExecutionRecord",
    "IntentRecognizer",
    "NaturalLanguageProcessor",
    "ParameterExtractor",
    "build_action",
    "build_processor",
    "register_discovery_actions",
]
