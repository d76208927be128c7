from __future__ import annotations

from abc import abstractmethod
import copy
import math
from numbers import Number
from typing import Any, Generic, Iterable, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from flexman.core.mode_execution import ModeExecution
from flexman.core.solution import ResourcesT, Solution, StateT

ModeT = TypeVar("ModeT")

__all__ = ["Manager", "ModeT"]


class Manager(BaseModel, Generic[StateT, ModeT, ResourcesT]):
    """
    Evolution contract implemented by the caller's domain model.

    The engine borrows a manager for the duration of one call and only
    changes solutions through `updated_solution`. Subclasses provide the
    state evolution, completion test, dominance relations and interpolation
    hooks; the configuration fields below parameterise the search.
    """

    initial_state: StateT = Field(description="State every search starts from")
    target_state: StateT = Field(description="State the search tries to reach")
    time_delta: float = Field(gt=0, description="Simulation step length (seconds)")
    time_max: float = Field(gt=0, description="Maximal simulated time (seconds)")
    threshold: float = Field(gt=0, description="A solution is complete when distance < threshold")
    timeout: float | None = Field(
        default=None,
        ge=0,
        description="Wall-clock budget of the search in seconds (None or 0 = unlimited)",
    )
    interactive: bool = Field(default=False, description="Pause between resolution levels")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator("timeout", mode="before")
    @classmethod
    def validate_timeout(cls, v: Any) -> Any:
        # Persisted runs store the timeout as a timespec.
        if isinstance(v, dict):
            try:
                return float(v["tv_sec"]) + float(v["tv_nsec"]) * 1e-9
            except KeyError as exc:
                raise ValueError(f"timeout timespec is missing {exc}") from exc
        return v

    @field_serializer("timeout")
    def serialize_timeout(self, v: float | None) -> dict[str, int]:
        seconds = v or 0.0
        tv_sec = int(math.floor(seconds))
        return {"tv_sec": tv_sec, "tv_nsec": int(round((seconds - tv_sec) * 1e9))}

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    @abstractmethod
    def updated_solution(self, solution: Solution[StateT, ResourcesT], mode: ModeT) -> None:
        """Advance `solution` by one step of `mode`, updating state, resources and distance."""

    @abstractmethod
    def is_complete(self, solution: Solution[StateT, ResourcesT]) -> bool:
        """Must agree with `distance(solution) < threshold`."""

    @abstractmethod
    def distance(self, solution: Solution[StateT, ResourcesT]) -> float:
        """Signed remaining progress; decreases toward and through zero near the target."""

    @abstractmethod
    def is_strictly_better_than(
        self, first: Solution[StateT, ResourcesT], second: Solution[StateT, ResourcesT]
    ) -> bool:
        """Exact dominance. Irreflexive; False when both sequences are equal."""

    @abstractmethod
    def is_probably_better_than(
        self, first: Solution[StateT, ResourcesT], second: Solution[StateT, ResourcesT]
    ) -> bool:
        """Heuristic dominance used to prune partial solutions. Irreflexive."""

    @abstractmethod
    def is_equal(self, first: Solution[StateT, ResourcesT], second: Solution[StateT, ResourcesT]) -> bool:
        """Equality surrogate used for deduplication."""

    @abstractmethod
    def interpolate_resources(self, r0: ResourcesT, r1: ResourcesT, rel: float) -> ResourcesT:
        """Blend two resource values at relative position `rel` in [0, 1]."""

    @abstractmethod
    def interpolate_state(self, s0: StateT, s1: StateT, rel: float) -> StateT:
        """Blend two states at relative position `rel` in [0, 1]."""

    @abstractmethod
    def zero_resources(self) -> ResourcesT:
        """Resources of a solution that has not been simulated yet."""

    # ------------------------------------------------------------------
    # Helpers with default behaviour
    # ------------------------------------------------------------------

    def resources_cost(self, resources: ResourcesT) -> float:
        """Scalar cost of `resources`: the sum of all resource dimensions."""
        if isinstance(resources, BaseModel):
            values: Iterable[Any] = resources.model_dump().values()
        elif isinstance(resources, Number):
            return float(resources)  # type: ignore[arg-type]
        else:
            values = resources  # type: ignore[assignment]
        return float(sum(float(v) for v in values if isinstance(v, Number)))

    def initial_solution(
        self, sequence: list[ModeExecution] | None = None
    ) -> Solution[StateT, ResourcesT]:
        """A fresh solution at the initial state with zero resources."""
        return Solution(
            sequence=[execution.model_copy() for execution in sequence or []],
            state=copy.deepcopy(self.initial_state),
            resources=self.zero_resources(),
            distance=math.inf,
        )

    @property
    def max_steps(self) -> int:
        """Number of elementary steps that fit in the search horizon."""
        return max(1, int(self.time_max / self.time_delta))
