"""
Script module - parsing, the script model and loading.

Provides:
- Yarn-style script parsing
- Immutable node/line models
- Cross-reference resolution into a Dialog graph
- Compiled JSON export and schema-checked import
"""

from yarnspin.script.nodes import (
    Node,
    Line,
    SetLine,
    CommandLine,
    DialogLine,
    JumpLine,
    OptionLine,
    OptionPossibility,
    Condition,
    ConditionKind,
    Tag,
)
from yarnspin.script.parser import DialogParser, parse
from yarnspin.script.resolver import Dialog, resolve_nodes
from yarnspin.script.loader import (
    load,
    load_file,
    load_json,
    load_json_file,
    dialog_to_json,
    save_json,
    compile_dialog_file,
)

__all__ = [
    "Node",
    "Line",
    "SetLine",
    "CommandLine",
    "DialogLine",
    "JumpLine",
    "OptionLine",
    "OptionPossibility",
    "Condition",
    "ConditionKind",
    "Tag",
    "DialogParser",
    "parse",
    "Dialog",
    "resolve_nodes",
    "load",
    "load_file",
    "load_json",
    "load_json_file",
    "dialog_to_json",
    "save_json",
    "compile_dialog_file",
]
