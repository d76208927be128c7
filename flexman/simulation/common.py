from __future__ import annotations

from typing import Generic

from pydantic import BaseModel, ConfigDict, Field

from flexman.core.solution import ResourcesT, Solution, StateT

__all__ = ["Simulation"]


class Simulation(BaseModel, Generic[StateT, ResourcesT]):
    """Trajectory recorded while applying a single mode, one solution per step."""

    evolution: list[Solution[StateT, ResourcesT]] = Field(default_factory=list)
    initial_state: StateT
    target_state: StateT

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __len__(self) -> int:
        return len(self.evolution)

    def final_solution(self) -> Solution[StateT, ResourcesT] | None:
        return self.evolution[-1] if self.evolution else None
