"""
Base class for immutable script data.

Script models are pure data containers. Parsing builds them,
resolution copies them with targets filled in, and the runner only
reads them. Keeping them frozen means one loaded dialog can be shared
by any number of runners.

Usage:
    class Tag(ScriptModel):
        name: str
        value: str
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ScriptModel(BaseModel):
    """
    Base class for all script and event models.

    Uses Pydantic for:
    - Validation of parsed values
    - JSON round-tripping of compiled dialogs
    - Discriminated unions over line kinds
    """

    model_config = ConfigDict(
        frozen=True,
        extra='forbid',
    )

    def replace(self, **changes) -> ScriptModel:
        """Return a copy with the given fields replaced."""
        return self.model_copy(update=changes)
