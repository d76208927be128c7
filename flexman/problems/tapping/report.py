from __future__ import annotations

from enum import Enum
from functools import cmp_to_key

from loguru import logger
from pydantic import BaseModel

from flexman.core.result import Result
from flexman.core.solution import Solution
from flexman.problems.tapping.resources import approximately_equal

__all__ = [
    "Change",
    "ResourceComparison",
    "compare_results",
    "compare_values",
    "log_results",
    "sort_results",
]

_RULE = "=" * 60


class Change(str, Enum):
    IMPROVED = "improved"
    WORSENED = "worsened"
    UNCHANGED = "unchanged"


class ResourceComparison(BaseModel):
    """Per-solution outcome of comparing two results, resource by resource."""

    front: int
    solution: int
    time: Change
    time_before: float
    time_after: float
    energy: Change
    energy_before: float
    energy_after: float


def _compare_ascending(lhs: Solution, rhs: Solution) -> int:
    if not approximately_equal(lhs.resources.energy, rhs.resources.energy):
        return -1 if lhs.resources.energy < rhs.resources.energy else 1
    if lhs.resources.time != rhs.resources.time:
        return -1 if lhs.resources.time < rhs.resources.time else 1
    return 0


def sort_results(result: Result) -> None:
    """Sort every front in place by energy, then time, ascending."""
    for front in result.pareto_fronts:
        front.solutions.sort(key=cmp_to_key(_compare_ascending))


def log_results(result: Result, level: str = "INFO") -> None:
    logger.log(level, "[app] {}", _RULE)
    for front in result.pareto_fronts:
        logger.log(
            level,
            "[app] Pareto front (step: {:>8.3f} s, runtime: {:>8.3f} s):",
            front.step_length,
            front.runtime,
        )
        for solution in front.solutions:
            logger.log(level, "[app]     {}", solution)
    logger.log(level, "[app] {}", _RULE)


def compare_values(before: float, after: float) -> Change:
    """Lower is better: a value that went down improved."""
    if before > after:
        return Change.IMPROVED
    if before < after:
        return Change.WORSENED
    return Change.UNCHANGED


def compare_results(before: Result, after: Result) -> list[ResourceComparison]:
    """
    Compare two results of the same shape, solution by solution.

    Fronts or results whose sizes differ are reported and skipped.
    """
    if len(before.pareto_fronts) != len(after.pareto_fronts):
        logger.warning(
            "[app] Results differ in the number of Pareto fronts ({} vs {}).",
            len(before.pareto_fronts),
            len(after.pareto_fronts),
        )
        return []

    comparisons: list[ResourceComparison] = []
    for i, (front_before, front_after) in enumerate(zip(before.pareto_fronts, after.pareto_fronts), start=1):
        if len(front_before.solutions) != len(front_after.solutions):
            logger.warning(
                "[app] Pareto front {} differ in the number of solutions ({} vs {}).",
                i,
                len(front_before.solutions),
                len(front_after.solutions),
            )
            continue
        for j, (sol_before, sol_after) in enumerate(zip(front_before.solutions, front_after.solutions), start=1):
            comparison = ResourceComparison(
                front=i,
                solution=j,
                time=compare_values(sol_before.resources.time, sol_after.resources.time),
                time_before=sol_before.resources.time,
                time_after=sol_after.resources.time,
                energy=compare_values(sol_before.resources.energy, sol_after.resources.energy),
                energy_before=sol_before.resources.energy,
                energy_after=sol_after.resources.energy,
            )
            comparisons.append(comparison)
            logger.info(
                "[app] Front {:>2}, solution {:>3}: time {:<9} ({:>8.3f} -> {:>8.3f}), energy {:<9} ({:>8.3f} -> {:>8.3f})",
                i,
                j,
                comparison.time.value,
                comparison.time_before,
                comparison.time_after,
                comparison.energy.value,
                comparison.energy_before,
                comparison.energy_after,
            )
    return comparisons
