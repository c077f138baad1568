# Path: core/commands/registry.py
# Purpose: Hold the actions that natural-language commands and agents can execute.
# Layer: core/commands.
# Details: Explicit, injected registry with parameter validation, timing, and bounded execution history.

from __future__ import annotations

import inspect
import logging
import math
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Deque, Dict, Iterable, List, Optional, Union

from core.errors import UnknownActionError

logger = logging.getLogger(__name__)

PARAMETER_TYPES = ("string", "number", "boolean", "array", "object")


@dataclass
class ActionResult:
    """Outcome of one action execution."""

    success: bool
    data: Any = None
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    execution_time: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": self.success}
        if self.data is not None:
            payload["data"] = self.data
        if self.error:
            payload["error"] = self.error
        if self.warnings:
            payload["warnings"] = list(self.warnings)
        if self.execution_time is not None:
            payload["execution_time"] = round(self.execution_time, 3)
        return payload


ActionHandler = Callable[[Dict[str, Any]], Union[ActionResult, Awaitable[ActionResult]]]


@dataclass(frozen=True)
class ActionParameter:
    """Describe one named parameter an action accepts."""

    type: str
    required: bool = False
    description: str = ""
    validation: Optional[Callable[[Any], bool]] = None
    default: Any = None


@dataclass(frozen=True)
class ActionDefinition:
    """Describe a registered action and the callable that performs it."""

    name: str
    description: str
    handler: ActionHandler
    parameters: Dict[str, ActionParameter] = field(default_factory=dict)
    category: Optional[str] = None
    examples: tuple = ()


@dataclass
class ExecutionRecord:
    action_name: str
    parameters: Dict[str, Any]
    result: ActionResult
    timestamp: float
    execution_time: float

    @property
    def success(self) -> bool:
        return self.result.success


class ActionRegistry:
    """Register, look up, and execute actions.

    One registry is created per session and passed to whoever needs it; nothing is
    registered implicitly.
    """

    def __init__(self, max_history: int = 100) -> None:
        self._actions: Dict[str, ActionDefinition] = {}
        self._history: Deque[ExecutionRecord] = deque(maxlen=max_history)

    def register(self, action: ActionDefinition) -> None:
        if action.name in self._actions:
            logger.info("Replacing registered action %s", action.name)
        self._actions[action.name] = action

    def unregister(self, name: str) -> None:
        if name not in self._actions:
            raise UnknownActionError(name)
        del self._actions[name]

    def get_action(self, name: str) -> Optional[ActionDefinition]:
        """Return the definition for ``name`` if registered."""

        return self._actions.get(name)

    def require(self, name: str) -> ActionDefinition:
        action = self._actions.get(name)
        if action is None:
            raise UnknownActionError(name)
        return action

    def all_actions(self) -> Dict[str, ActionDefinition]:
        return dict(self._actions)

    def actions_by_category(self, category: str) -> Dict[str, ActionDefinition]:
        return {name: action for name, action in self._actions.items() if action.category == category}

    def __contains__(self, name: object) -> bool:
        return name in self._actions

    @property
    def history(self) -> List[ExecutionRecord]:
        """Return execution records, oldest first."""

        return list(self._history)

    def clear_history(self) -> None:
        self._history.clear()

    def validate_parameters(self, name: str, parameters: Dict[str, Any]) -> List[str]:
        """Return a list of problems with ``parameters`` for action ``name``; empty when valid."""

        action = self.require(name)
        problems: List[str] = []
        for param_name, definition in action.parameters.items():
            value = parameters.get(param_name)
            if value is None:
                if definition.required:
                    problems.append(f"Missing required parameter: {param_name}")
                continue
            if not _matches_type(value, definition.type):
                problems.append(f"Invalid type for parameter '{param_name}': expected {definition.type}")
            elif definition.validation is not None and not definition.validation(value):
                problems.append(f"Validation failed for parameter '{param_name}'")
        return problems

    async def execute(self, name: str, parameters: Optional[Dict[str, Any]] = None) -> ActionResult:
        """
        Validate and run action ``name``.

        Never raises for unknown actions, bad parameters, or handler failures; those are
        reported in the returned :class:`ActionResult`.
        """

        parameters = dict(parameters or {})
        action = self._actions.get(name)
        if action is None:
            return ActionResult(success=False, error=f"Action '{name}' not found")

        problems = self.validate_parameters(name, parameters)
        if problems:
            for problem in problems:
                logger.warning("%s: %s", name, problem)
            return ActionResult(success=False, error=f"Invalid parameters for action '{name}'", warnings=problems)

        for param_name, definition in action.parameters.items():
            if parameters.get(param_name) is None and definition.default is not None:
                parameters[param_name] = definition.default

        started = time.time()
        clock = time.perf_counter()
        try:
            outcome = action.handler(parameters)
            result = await outcome if inspect.isawaitable(outcome) else outcome
        except Exception as exc:
            logger.exception("Action %s failed", name)
            result = ActionResult(success=False, error=str(exc) or type(exc).__name__)
        result.execution_time = (time.perf_counter() - clock) * 1000

        self._history.append(
            ExecutionRecord(
                action_name=name,
                parameters=parameters,
                result=result,
                timestamp=started,
                execution_time=result.execution_time,
            )
        )
        return result


def _matches_type(value: Any, expected: str) -> bool:
    if expected == "string":
        return isinstance(value, str)
    if expected == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool) and not math.isnan(value)
    if expected == "boolean":
        return isinstance(value, bool)
    if expected == "array":
        return isinstance(value, (list, tuple))
    if expected == "object":
        return isinstance(value, dict)
    return True


def build_action(
    name: str,
    description: str,
    handler: ActionHandler,
    parameters: Optional[Dict[str, ActionParameter]] = None,
    category: Optional[str] = None,
    examples: Iterable[str] = (),
) -> ActionDefinition:
    """Build an :class:`ActionDefinition`, checking parameter types up front."""

    parameters = dict(parameters or {})
    for param_name, definition in parameters.items():
        if definition.type not in PARAMETER_TYPES:
            raise ValueError(f"Unsupported parameter type for {name}.{param_name}: {definition.type}")
    return ActionDefinition(
        name=name,
        description=description,
        handler=handler,
        parameters=parameters,
        category=category or name.split(".", 1)[0],
        examples=tuple(examples),
    )
