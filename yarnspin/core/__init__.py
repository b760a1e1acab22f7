"""
Core module.

Exports:
- ScriptModel: Immutable pydantic base for script data
- EventBus, Event, RunnerEvent: Observer hooks
- DialogConfig: Loading and runner configuration
- Errors: the YarnSpinError hierarchy
"""

from yarnspin.core.model import ScriptModel
from yarnspin.core.events import EventBus, Event, RunnerEvent
from yarnspin.core.config import DialogConfig
from yarnspin.core.errors import (
    YarnSpinError,
    LoadError,
    ScriptIOError,
    ParseError,
    SchemaValidationError,
    UnknownNodeReferenceError,
    DuplicateNodeTitleError,
    RunnerError,
    NodeNotFoundError,
    StartingNodeNotFoundError,
    WrongStateError,
    UnknownNodeChosenError,
    UnregisteredCommandError,
    CommandArgumentError,
    ControlFlowLimitError,
)

__all__ = [
    "ScriptModel",
    # Events
    "EventBus",
    "Event",
    "RunnerEvent",
    # Config
    "DialogConfig",
    # Errors
    "YarnSpinError",
    "LoadError",
    "ScriptIOError",
    "ParseError",
    "SchemaValidationError",
    "UnknownNodeReferenceError",
    "DuplicateNodeTitleError",
    "RunnerError",
    "NodeNotFoundError",
    "StartingNodeNotFoundError",
    "WrongStateError",
    "UnknownNodeChosenError",
    "UnregisteredCommandError",
    "CommandArgumentError",
    "ControlFlowLimitError",
]
