"""A one-dimensional rate model driving the engine tests."""

from __future__ import annotations

from pydantic import BaseModel

from flexman.core.manager import Manager
from flexman.core.mode import Mode
from flexman.core.solution import Solution


class RateResources(BaseModel):
    energy: float = 0.0
    time: float = 0.0

    def __le__(self, other: RateResources) -> bool:
        return self.energy <= other.energy and self.time <= other.time

    def __lt__(self, other: RateResources) -> bool:
        return (self.energy, self.time) < (other.energy, other.time)


class RateManager(Manager[float, Mode, RateResources]):
    """x' = rate; energy grows with |rate|, distance is what is left to reach the target."""

    def updated_solution(self, solution: Solution, mode: Mode) -> None:
        solution.state = solution.state + mode.input * self.time_delta
        solution.resources.energy += abs(mode.input) * self.time_delta
        solution.resources.time += self.time_delta
        solution.distance = self.distance(solution)

    def is_complete(self, solution: Solution) -> bool:
        return self.distance(solution) < self.threshold

    def distance(self, solution: Solution) -> float:
        return self.target_state - solution.state

    def is_strictly_better_than(self, x: Solution, y: Solution) -> bool:
        if x.sequence == y.sequence:
            return False
        return self.is_complete(x) and x.resources <= y.resources and x.resources != y.resources

    def is_probably_better_than(self, x: Solution, y: Solution) -> bool:
        if x.sequence == y.sequence:
            return False
        xd = self.distance(x)
        yd = self.distance(y)
        if xd <= yd and x.resources <= y.resources:
            return xd < yd or x.resources < y.resources
        return False

    def is_equal(self, x: Solution, y: Solution) -> bool:
        return x.sequence == y.sequence or x.resources == y.resources

    def interpolate_resources(self, r0: RateResources, r1: RateResources, rel: float) -> RateResources:
        return RateResources(
            energy=r0.energy + rel * (r1.energy - r0.energy),
            time=r0.time + rel * (r1.time - r0.time),
        )

    def interpolate_state(self, s0: float, s1: float, rel: float) -> float:
        return s0 + rel * (s1 - s0)

    def zero_resources(self) -> RateResources:
        return RateResources()


def make_rate_manager(**overrides) -> RateManager:
    defaults = {
        "initial_state": 0.0,
        "target_state": 10.0,
        "time_delta": 1.0,
        "time_max": 20.0,
        "threshold": 0.5,
        "timeout": None,
        "interactive": False,
    }
    defaults.update(overrides)
    return RateManager(**defaults)


def make_rate_modes(*rates: float) -> list[Mode]:
    rates = rates or (1.0, -1.0)
    return [Mode(id=index, system="rate", input=rate) for index, rate in enumerate(rates)]
