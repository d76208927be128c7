from __future__ import annotations

from typing import Generic

from pydantic import BaseModel, ConfigDict, Field

from flexman.core.solution import ResourcesT, Solution, StateT


class ParetoFront(BaseModel, Generic[StateT, ResourcesT]):
    """Non-dominated solutions accepted at one time-resolution level."""

    solutions: list[Solution[StateT, ResourcesT]] = Field(
        default_factory=list, description="The accepted non-dominated solutions"
    )
    step_length: float = Field(default=0.0, ge=0, description="Simulated seconds per search iteration")
    steps_per_iteration: int = Field(default=0, ge=0, description="Simulation steps per search iteration")
    iteration: int = Field(default=0, ge=0, description="Search iterations performed")
    runtime: float = Field(default=0.0, ge=0, description="Wall-clock runtime in seconds")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __len__(self) -> int:
        return len(self.solutions)

    def __str__(self) -> str:
        lines = [
            "    ParetoFront{",
            f"        step_length         : {self.step_length}",
            f"        steps_per_iteration : {self.steps_per_iteration}",
            f"        iteration           : {self.iteration}",
            f"        runtime             : {self.runtime}",
            "        solutions           : ",
        ]
        lines.extend(f"            {solution}" for solution in self.solutions)
        lines.append("    }")
        return "\n".join(lines) + "\n"
