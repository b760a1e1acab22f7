"""
Dialog events - what a runner hands back on each step.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Annotated, Literal, Union

from pydantic import Field

from yarnspin.core.model import ScriptModel
from yarnspin.script.nodes import Tag


class DialogState(Enum):
    """State of a dialog runner."""
    START = auto()    # Cursor freshly positioned
    DIALOG = auto()   # Last step produced a dialog line
    WAITING = auto()  # Options presented, waiting for make_decision
    END = auto()      # Ran off the end of a node


class DialogOption(ScriptModel):
    """A choice as offered to the player."""
    text: str
    node: str
    used: bool = False


class DialogLineEvent(ScriptModel):
    kind: Literal["dialog"] = "dialog"
    speaker: str = ""
    text: str
    tags: list[Tag] = Field(default_factory=list)


class OptionsEvent(ScriptModel):
    kind: Literal["options"] = "options"
    speaker: str = ""
    options: list[DialogOption] = Field(default_factory=list)


class WaitingEvent(ScriptModel):
    kind: Literal["waiting"] = "waiting"


class EndEvent(ScriptModel):
    kind: Literal["end"] = "end"


DialogEvent = Annotated[
    Union[DialogLineEvent, OptionsEvent, WaitingEvent, EndEvent],
    Field(discriminator="kind"),
]
