# Path: core/models/commands.py
# Purpose: Define the types exchanged by the natural-language command path.
# Layer: core/models.
# Details: Recognized intents, parsed commands, processing options, and processor results.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional


@dataclass
class CommandIntent:
    """Action a command most likely asks for."""

    action: str
    confidence: float
    category: str
    alternative_actions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"action": self.action, "confidence": self.confidence, "category": self.category}
        if self.alternative_actions:
            payload["alternative_actions"] = list(self.alternative_actions)
        return payload


@dataclass
class ParsedCommand:
    intent: CommandIntent
    parameters: Dict[str, Any]
    confidence: float
    original_command: str
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class CommandStep:
    action: str
    parameters: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PhotoGridState:
    """Snapshot of what the user is looking at, used to resolve "these" and "the first one"."""

    photo_ids: List[str] = field(default_factory=list)
    selected_ids: List[str] = field(default_factory=list)
    current_album: Optional[str] = None


@dataclass
class ProcessingOptions:
    on_progress: Optional[Callable[[Dict[str, Any]], None]] = None
    context: Dict[str, Any] = field(default_factory=dict)
    allow_multi_step: bool = False
    confirmed: bool = False


@dataclass
class NLProcessingResult:
    """Outcome of processing one natural-language command."""

    success: bool
    executed_action: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None
    result: Optional[Any] = None
    error: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)
    help_response: Optional[str] = None
    requires_confirmation: bool = False
    confirmation_prompt: Optional[str] = None
    multi_step: bool = False
    steps: List[CommandStep] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": self.success}
        if self.executed_action:
            payload["executed_action"] = self.executed_action
        if self.parameters is not None:
            payload["parameters"] = dict(self.parameters)
        if self.result is not None:
            payload["result"] = self.result.to_dict() if hasattr(self.result, "to_dict") else self.result
        if self.error:
            payload["error"] = self.error
        if self.suggestions:
            payload["suggestions"] = list(self.suggestions)
        if self.help_response:
            payload["help_response"] = self.help_response
        if self.requires_confirmation:
            payload["requires_confirmation"] = True
            payload["confirmation_prompt"] = self.confirmation_prompt
        if self.multi_step:
            payload["multi_step"] = True
            payload["steps"] = [{"action": step.action, "parameters": dict(step.parameters)} for step in self.steps]
        return payload


@dataclass
class Album:
    name: str
    description: Optional[str] = None
    photo_ids: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "photo_ids": list(self.photo_ids),
            "created_at": self.created_at.isoformat(),
        }
