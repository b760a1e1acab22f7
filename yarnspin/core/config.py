"""
Dialog configuration.
"""

from __future__ import annotations


class DialogConfig:
    """Configuration for loading and running dialogs."""

    def __init__(
        self,
        start_node: str = "Start",
        script_extension: str = ".yarn",
        compiled_extension: str = ".json",
        check_commands: bool = False,
        max_control_steps: int = 10_000,
        warn_unreachable: bool = True,
    ):
        self.start_node = start_node
        self.script_extension = script_extension
        self.compiled_extension = compiled_extension
        # Reject dialogs naming unregistered commands when a runner is created
        self.check_commands = check_commands
        # Jumps/sets/commands allowed in one step before giving up
        self.max_control_steps = max_control_steps
        self.warn_unreachable = warn_unreachable

    def __repr__(self) -> str:
        return (
            f"DialogConfig(start_node={self.start_node!r}, "
            f"check_commands={self.check_commands}, "
            f"max_control_steps={self.max_control_steps})"
        )
