"""
State contexts - the boolean variable stores a runner reads and writes.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


@runtime_checkable
class StateContext(Protocol):
    """
    What a runner needs from a variable store.

    Hosts can pass any object with these two methods, e.g. a wrapper
    around their save-game flags.
    """

    def get(self, key: str) -> Optional[bool]:
        ...

    def set(self, key: str, value: bool) -> None:
        ...


class VariableContext(BaseModel):
    """
    In-memory StateContext.

    Attributes:
        variables: Variable name -> value
    """

    model_config = ConfigDict(validate_assignment=True, extra='forbid')

    variables: dict[str, bool] = Field(default_factory=dict)

    def get(self, key: str) -> Optional[bool]:
        return self.variables.get(key)

    def set(self, key: str, value: bool) -> None:
        self.variables[key] = bool(value)

    def __contains__(self, key: str) -> bool:
        return key in self.variables

    def clear(self) -> None:
        self.variables.clear()

    def snapshot(self) -> dict[str, bool]:
        """Copy of the current variables."""
        return dict(self.variables)
