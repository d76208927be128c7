from __future__ import annotations

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from flexman.core.mode_execution import ModeExecution, format_sequence

StateT = TypeVar("StateT")
ResourcesT = TypeVar("ResourcesT")

__all__ = ["Solution", "StateT", "ResourcesT"]


class Solution(BaseModel, Generic[StateT, ResourcesT]):
    """
    A candidate trajectory, possibly incomplete.

    `state` and `resources` are opaque to the engine: they are produced and
    compared by the evolution contract (`Manager`). Resources must support
    `==` and `<` for deduplication ordering.
    """

    sequence: list[ModeExecution] = Field(
        default_factory=list, description="Run-length encoded sequence of mode executions"
    )
    state: StateT = Field(description="Current state of the system")
    resources: ResourcesT = Field(description="Resources accumulated so far")
    distance: float = Field(default=math.inf, description="Signed distance from the target")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def clone(self) -> Solution[StateT, ResourcesT]:
        """Independent copy; extension mutates solutions in place."""
        return self.model_copy(deep=True)

    def total_steps(self) -> int:
        return sum(execution.times for execution in self.sequence)

    def mode_ids(self) -> set[int]:
        return {execution.mode for execution in self.sequence}

    # Equal sequences OR equal resources count as equal.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Solution):
            return NotImplemented
        return bool(self.sequence == other.sequence or self.resources == other.resources)

    def __lt__(self, other: Solution) -> bool:
        return bool(self.sequence != other.sequence and self.resources < other.resources)

    def __str__(self) -> str:
        return (
            f"Solution{{distance: {self.distance:>7.3f}, "
            f"resources: {self.resources}, "
            f"sequence:{format_sequence(self.sequence)}}}"
        )
