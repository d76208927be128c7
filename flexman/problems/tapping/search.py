from __future__ import annotations

from typing import Any

import numpy as np
from pydantic import field_validator
from scipy.integrate import solve_ivp

from flexman.core.manager import Manager
from flexman.core.solution import Solution
from flexman.problems.tapping.builder import TappingMode
from flexman.problems.tapping.resources import TappingResources

__all__ = ["ContinuousTappingManager", "DiscreteTappingManager", "TappingManager"]

TappingSolution = Solution[np.ndarray, TappingResources]


class TappingManager(Manager[np.ndarray, TappingMode, TappingResources]):
    """
    Shared evolution contract of the tapping machine.

    The distance is the depth still to tap; resources are the energy drawn
    from the supply and the elapsed time.
    """

    @field_validator("initial_state", "target_state", mode="before")
    @classmethod
    def validate_state(cls, v: Any) -> np.ndarray:
        state = np.asarray(v, dtype=np.float64)
        if state.shape != (3,):
            raise ValueError(f"tapping states have 3 components, got shape {state.shape}")
        return state

    def _account(self, solution: TappingSolution, mode: TappingMode) -> None:
        solution.distance = self.distance(solution)
        solution.resources.energy += float(solution.state[1] * mode.input[0] * self.time_delta)
        solution.resources.time += self.time_delta

    def distance(self, solution: TappingSolution) -> float:
        return float(self.target_state[2] - solution.state[2])

    def is_complete(self, solution: TappingSolution) -> bool:
        return self.distance(solution) < self.threshold

    def is_strictly_better_than(self, x: TappingSolution, y: TappingSolution) -> bool:
        if x.sequence == y.sequence:
            return False
        return self.is_complete(x) and x.resources <= y.resources and x.resources != y.resources

    def is_probably_better_than(self, x: TappingSolution, y: TappingSolution) -> bool:
        if x.sequence == y.sequence:
            return False
        xd = self.distance(x)
        yd = self.distance(y)
        if xd <= yd and x.resources <= y.resources:
            return xd < yd or x.resources < y.resources
        return False

    def is_equal(self, x: TappingSolution, y: TappingSolution) -> bool:
        return x.sequence == y.sequence or x.resources == y.resources

    def interpolate_resources(
        self, r0: TappingResources, r1: TappingResources, rel: float
    ) -> TappingResources:
        return TappingResources(
            energy=r0.energy + rel * (r1.energy - r0.energy),
            time=r0.time + rel * (r1.time - r0.time),
        )

    def interpolate_state(self, s0: np.ndarray, s1: np.ndarray, rel: float) -> np.ndarray:
        return s0 + rel * (s1 - s0)

    def zero_resources(self) -> TappingResources:
        return TappingResources()


class DiscreteTappingManager(TappingManager):
    """Steps the zero-order-hold discretised system; modes must be sampled at `time_delta`."""

    def updated_solution(self, solution: TappingSolution, mode: TappingMode) -> None:
        system = mode.system
        solution.state = system.A @ solution.state + system.B @ mode.input
        self._account(solution, mode)


class ContinuousTappingManager(TappingManager):
    """Integrates the continuous system over one `time_delta`, stopping early at the target depth."""

    def updated_solution(self, solution: TappingSolution, mode: TappingMode) -> None:
        system = mode.system
        forcing = system.B @ mode.input
        target_depth = self.target_state[2]
        threshold = self.threshold

        def dynamics(_t: float, x: np.ndarray) -> np.ndarray:
            return system.A @ x + forcing

        def reached_depth(_t: float, x: np.ndarray) -> float:
            return (target_depth - x[2]) - threshold

        reached_depth.terminal = True  # type: ignore[attr-defined]

        t0 = solution.resources.time
        integration = solve_ivp(
            dynamics,
            (t0, t0 + self.time_delta),
            solution.state,
            method="RK45",
            max_step=self.time_delta / 100,
            events=reached_depth,
        )
        solution.state = np.ascontiguousarray(integration.y[:, -1])
        self._account(solution, mode)
