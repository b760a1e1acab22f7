"""
yarnspin - yarn-style dialog scripts for games.

Exports:
- load, load_file: Script text/file -> resolved Dialog
- DialogRunner: Steps through a Dialog producing dialog events
- VariableContext: In-memory boolean state
- CommandRegistry: Handlers for <<command>> lines
- DialogLibrary: Loads a directory of dialogs
"""

from yarnspin.core import (
    DialogConfig,
    EventBus,
    RunnerEvent,
    YarnSpinError,
    LoadError,
    ParseError,
    RunnerError,
)
from yarnspin.script import Dialog, load, load_file, load_json, compile_dialog_file
from yarnspin.runtime import (
    CommandRegistry,
    DialogRunner,
    DialogState,
    DialogLineEvent,
    OptionsEvent,
    WaitingEvent,
    EndEvent,
    StateContext,
    VariableContext,
)
from yarnspin.resources import DialogLibrary

__all__ = [
    # Loading
    "Dialog",
    "load",
    "load_file",
    "load_json",
    "compile_dialog_file",
    "DialogLibrary",
    # Running
    "DialogRunner",
    "DialogState",
    "DialogLineEvent",
    "OptionsEvent",
    "WaitingEvent",
    "EndEvent",
    "StateContext",
    "VariableContext",
    "CommandRegistry",
    # Support
    "DialogConfig",
    "EventBus",
    "RunnerEvent",
    "YarnSpinError",
    "LoadError",
    "ParseError",
    "RunnerError",
]
