"""Exceptions raised while loading and running dialogs."""

from __future__ import annotations

from typing import Any


class YarnSpinError(Exception):
    """Base exception for the package."""


# Load time


class LoadError(YarnSpinError):
    """Raised when a dialog cannot be loaded. No dialog is produced."""


class ScriptIOError(LoadError):
    """Raised when a script source cannot be read."""


class ParseError(LoadError):
    """Raised when script text violates the grammar."""

    def __init__(self, line: int, column: int, reason: str):
        self.line = line
        self.column = column
        self.reason = reason
        super().__init__(f"line {line}, column {column}: {reason}")


class SchemaValidationError(LoadError):
    """Raised when a compiled dialog does not match the dialog schema."""


class UnknownNodeReferenceError(LoadError):
    """Raised when a jump or option names a node that does not exist."""

    def __init__(self, title: str, source_node: str):
        self.title = title
        self.source_node = source_node
        super().__init__(f"Unknown node '{title}' referenced from node '{source_node}'")


class DuplicateNodeTitleError(LoadError):
    """Raised when two nodes share a title."""

    def __init__(self, title: str):
        self.title = title
        super().__init__(f"Duplicate node title: {title}")


# Run time


class RunnerError(YarnSpinError):
    """Raised by the dialog runner."""


class NodeNotFoundError(RunnerError):
    """Raised when the runner is pointed at a node that does not exist."""

    def __init__(self, node_name: str):
        self.node_name = node_name
        super().__init__(f"Node does not exist in this dialog: {node_name}")


class StartingNodeNotFoundError(NodeNotFoundError):
    """Raised when a runner is created with an unknown start node."""

    def __init__(self, node_name: str):
        super().__init__(node_name)
        self.args = (f"Selected starting node does not exist in this dialog: {node_name}",)


class WrongStateError(RunnerError):
    """Raised when an operation is not valid in the runner's current state."""

    def __init__(self, current: Any, expected: Any):
        self.current = current
        self.expected = expected
        super().__init__(
            f"Current state: {current.name}, expected to perform this operation: {expected.name}"
        )


class UnknownNodeChosenError(RunnerError):
    """Raised when a decision names a node that is not among the offered options."""

    def __init__(self, node_name: str):
        self.node_name = node_name
        super().__init__(f"Unknown node chosen: {node_name}")


class UnregisteredCommandError(RunnerError):
    """
    Raised when a script calls a command nobody registered.

    This is an integration defect, not bad input. The dialog session
    that raised it should be abandoned.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No handler registered for command: {name}")


class CommandArgumentError(RunnerError):
    """Raised when command arguments cannot be converted for a typed handler."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Bad arguments for command '{name}': {reason}")


class ControlFlowLimitError(RunnerError):
    """Raised when a step runs too many jumps/sets/commands without output."""
