"""craftwatch — Exception hierarchy.

All exceptions raised by craftwatch inherit from CraftwatchError so that
callers can catch the full family with a single except clause when needed.

The classification → registry → dispatch pipeline itself never raises: bad
lines are classified as unrecognised and bad mutations are no-ops.  These
exceptions surface only at the configuration layer (Tasker, Settings, CLI).

Hierarchy:
    CraftwatchError
    ├── ConfigurationError
    ├── TriggerError
    │   ├── UnknownTriggerError
    │   └── InvalidTriggerParametersError
    └── TaskError
        ├── TaskNotFoundError
        ├── DuplicateTaskError
        └── TaskExecutionError
"""

from __future__ import annotations

from typing import Any


class CraftwatchError(Exception):
    """Base exception for all craftwatch errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context})"


class ConfigurationError(CraftwatchError):
    """A settings file or task definition could not be used."""


# ---------------------------------------------------------------------------
# Triggers
# ---------------------------------------------------------------------------


class TriggerError(CraftwatchError):
    """Base for all trigger errors."""


class UnknownTriggerError(TriggerError):
    """No trigger implementation is registered under this type id."""

    def __init__(self, trigger_type: str, available: list[str] | None = None) -> None:
        available = available or []
        super().__init__(
            f"Unknown trigger type '{trigger_type}'. "
            f"Available: {', '.join(available) or 'none'}",
            context={"trigger_type": trigger_type, "available": available},
        )
        self.trigger_type = trigger_type


class InvalidTriggerParametersError(TriggerError):
    """The trigger's validate_input rejected the proposed parameter string."""

    def __init__(self, trigger_type: str, parameters: str, expected: str = "") -> None:
        message = f"Invalid parameters {parameters!r} for trigger '{trigger_type}'"
        if expected:
            message += f" ({expected})"
        super().__init__(
            message,
            context={"trigger_type": trigger_type, "parameters": parameters},
        )
        self.trigger_type = trigger_type
        self.parameters = parameters


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


class TaskError(CraftwatchError):
    """Base for all task errors."""


class TaskNotFoundError(TaskError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Task '{name}' is not registered", context={"task": name})
        self.name = name


class DuplicateTaskError(TaskError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Task '{name}' is already registered", context={"task": name})
        self.name = name


class TaskExecutionError(TaskError):
    """A task action raised while running on the task pool."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(
            f"Task '{name}' failed: {reason}",
            context={"task": name, "reason": reason},
        )
        self.name = name
        self.reason = reason
