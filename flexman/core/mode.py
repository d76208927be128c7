from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

SystemT = TypeVar("SystemT")
InputT = TypeVar("InputT")

# Position of a mode inside the list of modes handed to the search.
ModeId = int


class Mode(BaseModel, Generic[SystemT, InputT]):
    """An operating mode: a system dynamic driven by a fixed input."""

    id: ModeId = Field(ge=0, description="Unique identifier, equal to the mode's list index")
    system: SystemT = Field(description="The system's dynamic representation (e.g. state-space matrices)")
    input: InputT = Field(description="Fixed input applied while the mode is active")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __str__(self) -> str:
        return str(self.id)
