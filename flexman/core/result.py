from __future__ import annotations

from typing import Generic

from pydantic import BaseModel, ConfigDict, Field

from flexman.core.pareto_front import ParetoFront
from flexman.core.solution import ResourcesT, StateT


class Result(BaseModel, Generic[StateT, ResourcesT]):
    """Pareto fronts collected across resolution levels, coarsest first."""

    pareto_fronts: list[ParetoFront[StateT, ResourcesT]] = Field(
        default_factory=list, description="One front per non-empty resolution level"
    )

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def total_runtime(self) -> float:
        return sum(front.runtime for front in self.pareto_fronts)

    def finest_front(self) -> ParetoFront[StateT, ResourcesT] | None:
        return self.pareto_fronts[-1] if self.pareto_fronts else None

    def __str__(self) -> str:
        body = "".join(str(front) for front in self.pareto_fronts)
        return f"Result{{\n    runtime : {self.total_runtime()}\n    pareto_fronts : \n{body}}}\n"
