"""
Dialog runner - walks a Dialog one step at a time.

Each call to next_event() applies set lines, follows jumps and runs
commands until it reaches something the player should see: a dialog
line, a set of options, or the end of the node.

Usage:
    dialog = load(script_text)
    runner = DialogRunner(dialog, "Start", commands=registry)
    context = VariableContext()

    event = runner.next_event(context)
    while not isinstance(event, EndEvent):
        if isinstance(event, OptionsEvent):
            runner.make_decision(event.options[0].node)
        event = runner.next_event(context)
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from yarnspin.core.config import DialogConfig
from yarnspin.core.errors import (
    ControlFlowLimitError,
    NodeNotFoundError,
    StartingNodeNotFoundError,
    UnknownNodeChosenError,
    UnregisteredCommandError,
    WrongStateError,
)
from yarnspin.core.events import EventBus, RunnerEvent
from yarnspin.runtime.commands import CommandRegistry
from yarnspin.runtime.context import StateContext
from yarnspin.runtime.dialog_events import (
    DialogEvent,
    DialogLineEvent,
    DialogOption,
    DialogState,
    EndEvent,
    OptionsEvent,
    WaitingEvent,
)
from yarnspin.script.nodes import (
    CommandLine,
    Condition,
    ConditionKind,
    DialogLine,
    JumpLine,
    Node,
    OptionLine,
    SetLine,
)
from yarnspin.script.resolver import Dialog

logger = logging.getLogger(__name__)


def evaluate_condition(condition: Optional[Condition], context: StateContext) -> bool:
    """
    Check an option guard against a state context.

    No condition always passes. A variable the context has never seen
    fails every condition.
    """
    if condition is None:
        return True

    value = context.get(condition.variable_name)
    if value is None:
        return False
    if condition.kind is ConditionKind.EQUAL:
        return value == condition.value
    return value != condition.value


class DialogRunner:
    """
    State machine over one Dialog.

    The runner never modifies the Dialog. Which options have been chosen
    is tracked here, so several runners can share one loaded Dialog.

    Calls must not overlap; the host serializes them (typically one per
    frame or per input).
    """

    def __init__(
        self,
        dialog: Dialog,
        start_node: str,
        commands: Optional[CommandRegistry] = None,
        event_bus: Optional[EventBus] = None,
        config: Optional[DialogConfig] = None,
    ):
        self.dialog = dialog
        self.commands = commands if commands is not None else CommandRegistry()
        self.event_bus = event_bus
        self.config = config or DialogConfig()

        start_index = dialog.index_of(start_node)
        if start_index is None:
            raise StartingNodeNotFoundError(start_node)

        if self.config.check_commands:
            missing = self.commands.missing(dialog.command_names())
            if missing:
                raise UnregisteredCommandError(", ".join(sorted(missing)))

        # Cursor
        self._node_index = start_index
        self._line_index = 0
        self._state = DialogState.START

        # (node index, line index, possibility index) of chosen options
        self._used: set[tuple[int, int, int]] = set()
        # Options from the last OptionsEvent, with their possibility index
        self._offered: list[tuple[int, DialogOption]] = []

        self._publish(RunnerEvent.NODE_ENTERED, node=start_node)

    @classmethod
    def create(cls, dialog: Dialog, start_node_title: str, **kwargs: Any) -> DialogRunner:
        """Create a runner positioned at ``start_node_title``."""
        return cls(dialog, start_node_title, **kwargs)

    # Inspection

    @property
    def state(self) -> DialogState:
        return self._state

    @property
    def current_node(self) -> Node:
        return self.dialog.node_at(self._node_index)

    @property
    def line_index(self) -> int:
        return self._line_index

    @property
    def is_finished(self) -> bool:
        return self._state is DialogState.END

    @property
    def offered_options(self) -> list[DialogOption]:
        """Options awaiting a decision (empty unless WAITING)."""
        return [option for _, option in self._offered]

    def is_used(self, node_title: str, line_index: int, possibility_index: int) -> bool:
        """Whether a possibility has been chosen in this runner."""
        node_index = self.dialog.index_of(node_title)
        return (node_index, line_index, possibility_index) in self._used

    # Flow

    def next_event(self, context: StateContext, host: Any = None) -> DialogEvent:
        """
        Advance to the next visible event.

        Args:
            context: Variable store read by guards and written by set lines
            host: Passed through untouched to command handlers

        Raises:
            UnregisteredCommandError: a command line names no handler
            ControlFlowLimitError: too many jumps/sets/commands in one step
        """
        if self._state is DialogState.WAITING:
            return WaitingEvent()
        if self._state is DialogState.END:
            return EndEvent()

        steps = 0
        while True:
            if steps >= self.config.max_control_steps:
                raise ControlFlowLimitError(
                    f"No dialog output after {steps} steps in node '{self.current_node.title}'"
                )

            node = self.current_node
            line = node.lines[self._line_index]
            event = None

            if isinstance(line, SetLine):
                context.set(line.variable_name, line.value)
                self._publish(RunnerEvent.VARIABLE_SET, name=line.variable_name, value=line.value)

            elif isinstance(line, JumpLine):
                logger.debug(f"Jump {node.title} -> {line.node_title}")
                self._enter(line.target_index)
                steps += 1
                continue

            elif isinstance(line, CommandLine):
                self._run_command(line, host)

            elif isinstance(line, DialogLine):
                event = DialogLineEvent(speaker=line.speaker, text=line.text, tags=line.tags)

            elif isinstance(line, OptionLine):
                # The cursor stays on the option line until a decision is made
                event = self._present_options(line, context)
                self._state = DialogState.WAITING
                self._publish(RunnerEvent.OPTIONS_PRESENTED, node=node.title, options=event.options)
                return event

            self._line_index += 1
            if self._line_index >= len(node.lines):
                self._finish()
                return event if event is not None else EndEvent()

            if event is not None:
                self._state = DialogState.DIALOG
                return event

            steps += 1

    def make_decision(self, choice_title: str) -> None:
        """
        Choose one of the offered options by its target node title.

        Raises:
            WrongStateError: the runner is not waiting on options
            UnknownNodeChosenError: no offered option leads to ``choice_title``
        """
        if self._state is not DialogState.WAITING:
            raise WrongStateError(self._state, DialogState.WAITING)

        for possibility_index, option in self._offered:
            if option.node == choice_title:
                break
        else:
            raise UnknownNodeChosenError(choice_title)

        line = self.current_node.lines[self._line_index]
        possibility = line.possibilities[possibility_index]
        self._used.add((self._node_index, self._line_index, possibility_index))

        self._publish(
            RunnerEvent.CHOICE_SELECTED,
            node=self.current_node.title,
            choice=choice_title,
            text=option.text,
        )
        self._enter(possibility.target_index)

    def reset_to(self, node_title: str) -> None:
        """
        Move to the start of ``node_title`` regardless of state.

        Raises:
            NodeNotFoundError: no such node
        """
        node_index = self.dialog.index_of(node_title)
        if node_index is None:
            raise NodeNotFoundError(node_title)
        self._enter(node_index)

    # Internals

    def _enter(self, node_index: int) -> None:
        self._node_index = node_index
        self._line_index = 0
        self._state = DialogState.START
        self._offered = []
        self._publish(RunnerEvent.NODE_ENTERED, node=self.current_node.title)

    def _finish(self) -> None:
        self._state = DialogState.END
        self._offered = []
        logger.debug(f"Dialog '{self.dialog.id}' ended in node '{self.current_node.title}'")
        self._publish(RunnerEvent.DIALOG_ENDED, node=self.current_node.title)

    def _run_command(self, line: CommandLine, host: Any) -> None:
        if line.func_name not in self.commands:
            logger.error(
                f"Dialog '{self.dialog.id}' node '{self.current_node.title}' "
                f"calls unregistered command '{line.func_name}'"
            )
            raise UnregisteredCommandError(line.func_name)

        self.commands.invoke(line.func_name, line.args, host)
        self._publish(RunnerEvent.COMMAND_EXECUTED, name=line.func_name, args=list(line.args))

    def _present_options(self, line: OptionLine, context: StateContext) -> OptionsEvent:
        offered = []
        for i, possibility in enumerate(line.possibilities):
            if not evaluate_condition(possibility.condition, context):
                continue
            used = (self._node_index, self._line_index, i) in self._used
            offered.append((i, DialogOption(
                text=possibility.text,
                node=possibility.jump_to_node_title,
                used=used,
            )))

        if not offered:
            logger.warning(
                f"Dialog '{self.dialog.id}' node '{self.current_node.title}' "
                f"offers no options, waiting until reset_to is called"
            )

        self._offered = offered
        return OptionsEvent(speaker=line.speaker, options=[option for _, option in offered])

    def _publish(self, event_type: RunnerEvent, **data: Any) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(event_type, **data)
