"""
Script model - nodes and the lines they contain.

The parser produces nodes whose jump targets are plain titles. The
resolver copies them with ``target_index`` filled in, pointing into the
owning Dialog's node tuple.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import Field

from yarnspin.core.model import ScriptModel


class ConditionKind(str, Enum):
    """Comparison used by an option guard."""
    EQUAL = "=="
    NOT_EQUAL = "!="

    @classmethod
    def parse(cls, token: str) -> ConditionKind:
        """
        Convert an operator token to a ConditionKind.

        Raises:
            ValueError: the token is not a known operator
        """
        kind = _CONDITION_TOKENS.get(token.strip().lower())
        if kind is None:
            raise ValueError(f"Unknown condition operator: {token!r}")
        return kind


_CONDITION_TOKENS = {
    "==": ConditionKind.EQUAL,
    "eq": ConditionKind.EQUAL,
    "is": ConditionKind.EQUAL,
    "!=": ConditionKind.NOT_EQUAL,
    "neq": ConditionKind.NOT_EQUAL,
}


class Condition(ScriptModel):
    """Guard on an option: ``$variable_name <kind> value``."""
    variable_name: str
    kind: ConditionKind
    value: bool


class Tag(ScriptModel):
    """A ``#name:value`` annotation on a dialog line."""
    name: str
    value: str


class OptionPossibility(ScriptModel):
    """One choice inside an option block."""
    text: str
    jump_to_node_title: str
    target_index: Optional[int] = None
    condition: Optional[Condition] = None

    @property
    def is_resolved(self) -> bool:
        return self.target_index is not None


class SetLine(ScriptModel):
    kind: Literal["set"] = "set"
    variable_name: str
    value: bool


class CommandLine(ScriptModel):
    kind: Literal["command"] = "command"
    func_name: str
    args: list[str] = Field(default_factory=list)


class DialogLine(ScriptModel):
    kind: Literal["dialog"] = "dialog"
    speaker: str = ""
    text: str
    tags: list[Tag] = Field(default_factory=list)


class JumpLine(ScriptModel):
    kind: Literal["jump"] = "jump"
    node_title: str
    target_index: Optional[int] = None

    @property
    def is_resolved(self) -> bool:
        return self.target_index is not None


class OptionLine(ScriptModel):
    kind: Literal["option"] = "option"
    speaker: str = ""
    possibilities: list[OptionPossibility] = Field(min_length=1)


Line = Annotated[
    Union[SetLine, CommandLine, DialogLine, JumpLine, OptionLine],
    Field(discriminator="kind"),
]


class Node(ScriptModel):
    """
    A titled block of lines.

    Attributes:
        title: Unique name other nodes jump to
        lines: Ordered, non-empty body
        headers: Extra header lines besides ``title`` (e.g. ``tags``)
        line_number: Source line of the title header (0 if unknown)
    """
    title: str
    lines: list[Line] = Field(min_length=1)
    headers: dict[str, str] = Field(default_factory=dict)
    line_number: int = 0

    @property
    def tags(self) -> list[str]:
        """Node tags from the ``tags`` header."""
        return self.headers.get("tags", "").split()
