from __future__ import annotations

from enum import Enum
import math
from typing import Callable, Sequence

from loguru import logger

from flexman.core.manager import Manager, ModeT
from flexman.core.mode import ModeId
from flexman.core.mode_execution import add_mode_execution_to_sequence
from flexman.core.solution import ResourcesT, Solution, StateT
from flexman.exceptions import PreconditionError, SearchError
from flexman.utils.timer import Timer

__all__ = [
    "SearchAlgorithm",
    "SwitchingMode",
    "extend_solutions",
    "find_solution_closest_to_zero",
    "log_solutions",
    "remove_dominated_solutions",
    "remove_duplicate_solutions",
    "simulate_mode",
    "split_complete_partial",
]


class SwitchingMode(Enum):
    """Which modes a partial solution may continue with."""

    NONE = "none"  # Only the mode already in use
    INCREASING = "increasing"  # Modes with an id >= the active one
    FREE = "free"  # Any mode


class SearchAlgorithm(Enum):
    """Search algorithms offered by `perform_search`."""

    EXHAUSTIVE = "exhaustive"  # Free switching, strict dominance only
    HEURISTIC = "heuristic"  # Free switching, heuristic pruning of partial solutions
    SINGLE_MACHINE = "single_machine"  # No switching after the first choice

    @property
    def switching_mode(self) -> SwitchingMode:
        if self is SearchAlgorithm.SINGLE_MACHINE:
            return SwitchingMode.NONE
        return SwitchingMode.FREE


def _require_manager(manager: Manager | None) -> None:
    if manager is None:
        raise PreconditionError("manager is None")


def _require_positive(name: str, value: int) -> None:
    if value <= 0:
        raise PreconditionError(f"{name} must be greater than 0, got {value}")


def _require_modes(modes: Sequence) -> None:
    if not modes:
        raise PreconditionError("modes list is empty")


def log_solutions(solutions: list[Solution], title: str | None = None) -> None:
    """Dump solutions at DEBUG level; formatting is skipped at higher levels."""
    if title:
        logger.debug("[solution] {} ({})", title, len(solutions))
    for solution in solutions:
        logger.opt(lazy=True).debug("[solution]     {}", lambda s=solution: str(s))


def find_solution_closest_to_zero(
    manager: Manager[StateT, ModeT, ResourcesT],
    previous: Solution[StateT, ResourcesT],
    current: Solution[StateT, ResourcesT],
) -> Solution[StateT, ResourcesT]:
    """
    Correct the overshoot of a step that just completed a solution.

    Scans the step interval from `previous` (incomplete) to `current`
    (complete) with an adaptive increment and returns the first
    interpolated point that is complete. The increment is finer the further
    `previous` lies from the tolerance band. When no interpolated point
    qualifies, `current` is returned unchanged.
    """
    _require_manager(manager)

    distance = previous.distance
    if not math.isfinite(distance):
        distance = manager.distance(previous)
    step_factor = max(1.0, abs(distance) / manager.threshold)
    step_size = manager.time_delta / (10.0 * step_factor)

    solution = current.clone()
    t = 0.0
    while t <= manager.time_delta:
        relative = t / manager.time_delta
        solution.resources = manager.interpolate_resources(previous.resources, current.resources, relative)
        solution.state = manager.interpolate_state(previous.state, current.state, relative)
        if manager.is_complete(solution):
            solution.distance = manager.distance(solution)
            return solution
        t += step_size

    return current


def simulate_mode(
    manager: Manager[StateT, ModeT, ResourcesT],
    mode: ModeT,
    steps: int,
    solution: Solution[StateT, ResourcesT],
    mode_id: ModeId | None = None,
) -> Solution[StateT, ResourcesT]:
    """
    Apply `mode` up to `steps` times to a copy of `solution`.

    Stops at the first step that completes the solution and returns the
    overshoot-corrected point instead. `mode_id` defaults to `mode.id`.
    """
    _require_manager(manager)
    _require_positive("steps", steps)
    if mode_id is None:
        mode_id = mode.id  # type: ignore[attr-defined]

    current = solution.clone()
    for _ in range(steps):
        previous = current
        current = previous.clone()
        manager.updated_solution(current, mode)
        add_mode_execution_to_sequence(mode_id, current.sequence)
        if manager.is_complete(current):
            return find_solution_closest_to_zero(manager, previous, current)
    return current


def _candidate_modes(
    switching_mode: SwitchingMode, partial: Solution, num_modes: int
) -> range | tuple[int, ...]:
    if switching_mode is SwitchingMode.FREE:
        return range(num_modes)
    if not partial.sequence:
        raise SearchError(
            f"partial solution has no active mode, required by {switching_mode.value} switching"
        )
    active = partial.sequence[-1].mode
    if active >= num_modes:
        raise SearchError(f"active mode {active} is out of range for {num_modes} modes")
    if switching_mode is SwitchingMode.INCREASING:
        return range(active, num_modes)
    return (active,)


def extend_solutions(
    manager: Manager[StateT, ModeT, ResourcesT],
    modes: Sequence[ModeT],
    steps_per_iteration: int,
    partials: list[Solution[StateT, ResourcesT]],
    switching_mode: SwitchingMode = SwitchingMode.FREE,
    timer: Timer | None = None,
) -> list[Solution[StateT, ResourcesT]]:
    """Grow every partial solution by one round, branching as `switching_mode` allows."""
    _require_manager(manager)
    _require_positive("steps_per_iteration", steps_per_iteration)
    _require_modes(modes)

    logger.debug("[common] [{:>8}] Before extending set of solutions", len(partials))

    solutions: list[Solution[StateT, ResourcesT]] = []
    for partial in partials:
        for mode_id in _candidate_modes(switching_mode, partial, len(modes)):
            solutions.append(
                simulate_mode(manager, modes[mode_id], steps_per_iteration, partial, mode_id=mode_id)
            )
        if timer is not None and timer.has_timeout():
            logger.warning("[common] Timer expired while extending solutions")
            break

    logger.debug("[common] [{:>8}] After extending set of solutions", len(solutions))
    return solutions


def _dominance(
    manager: Manager, algorithm: SearchAlgorithm
) -> Callable[[Solution, Solution], bool]:
    if algorithm is SearchAlgorithm.HEURISTIC:
        return manager.is_probably_better_than
    return manager.is_strictly_better_than


def remove_dominated_solutions(
    manager: Manager[StateT, ModeT, ResourcesT],
    solutions: list[Solution[StateT, ResourcesT]],
    solutions_to_check_against: list[Solution[StateT, ResourcesT]] | None = None,
    algorithm: SearchAlgorithm = SearchAlgorithm.EXHAUSTIVE,
) -> None:
    """
    Drop, in place, every solution dominated by another one.

    Without a reference set, each solution is compared with the rest of
    `solutions` (O(n²)). With a reference set, a solution is dropped when
    any member of `solutions_to_check_against` dominates it. The heuristic
    algorithm compares with `is_probably_better_than`, every other one with
    `is_strictly_better_than`.
    """
    _require_manager(manager)
    if solutions is solutions_to_check_against:
        raise PreconditionError("solutions and solutions_to_check_against must not be the same list")

    logger.debug("[common] [{:>8}] Before removing dominated solutions", len(solutions))

    better = _dominance(manager, algorithm)
    if solutions_to_check_against is not None:
        if not solutions_to_check_against:
            logger.debug("[common] [{:>8}] After removing dominated solutions (SAME)", len(solutions))
            return
        kept = [
            solution
            for solution in solutions
            if not any(better(other, solution) for other in solutions_to_check_against)
        ]
    else:
        kept = [
            solution
            for i, solution in enumerate(solutions)
            if not any(better(other, solution) for j, other in enumerate(solutions) if j != i)
        ]

    solutions[:] = kept
    logger.debug("[common] [{:>8}] After removing dominated solutions", len(solutions))


def remove_duplicate_solutions(
    manager: Manager[StateT, ModeT, ResourcesT],
    solutions: list[Solution[StateT, ResourcesT]],
) -> None:
    """Sort `solutions` and collapse, in place, adjacent entries the manager deems equal."""
    _require_manager(manager)
    logger.debug("[common] [{:>8}] Before removing duplicate solutions", len(solutions))

    solutions.sort()
    unique: list[Solution[StateT, ResourcesT]] = []
    for solution in solutions:
        if unique and manager.is_equal(unique[-1], solution):
            continue
        unique.append(solution)
    solutions[:] = unique

    logger.debug("[common] [{:>8}] After removing duplicate solutions", len(solutions))


def split_complete_partial(
    manager: Manager[StateT, ModeT, ResourcesT],
    solutions: list[Solution[StateT, ResourcesT]],
    complete: list[Solution[StateT, ResourcesT]],
    partial: list[Solution[StateT, ResourcesT]],
) -> None:
    """Move the content of `solutions` into `complete` and `partial`, leaving it empty."""
    _require_manager(manager)
    if not solutions:
        return

    logger.debug(
        "[common] [{:>8}] Before splitting among complete and partial solutions", len(solutions)
    )
    for solution in solutions:
        (complete if manager.is_complete(solution) else partial).append(solution)
    solutions.clear()
    logger.debug(
        "[common] After splitting among complete and partial solutions [complete: {:>8}, partial: {:>8}]",
        len(complete),
        len(partial),
    )
