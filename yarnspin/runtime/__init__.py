"""
Runtime module - stepping through loaded dialogs.

Provides:
- DialogRunner state machine
- State contexts for boolean variables
- Command registry for script side effects
- Dialog event models
"""

from yarnspin.runtime.context import StateContext, VariableContext
from yarnspin.runtime.commands import CommandRegistry, CommandHandler
from yarnspin.runtime.dialog_events import (
    DialogState,
    DialogOption,
    DialogEvent,
    DialogLineEvent,
    OptionsEvent,
    WaitingEvent,
    EndEvent,
)
from yarnspin.runtime.runner import DialogRunner, evaluate_condition

__all__ = [
    "StateContext",
    "VariableContext",
    "CommandRegistry",
    "CommandHandler",
    "DialogState",
    "DialogOption",
    "DialogEvent",
    "DialogLineEvent",
    "OptionsEvent",
    "WaitingEvent",
    "EndEvent",
    "DialogRunner",
    "evaluate_condition",
]
