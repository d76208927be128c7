from __future__ import annotations

import copy
from typing import Sequence

from loguru import logger

from flexman.core.manager import Manager, ModeT
from flexman.core.mode_execution import ModeExecution, add_mode_execution_to_sequence
from flexman.core.solution import ResourcesT, Solution, StateT
from flexman.exceptions import PreconditionError
from flexman.search.common import _require_manager, _require_positive, find_solution_closest_to_zero
from flexman.simulation.common import Simulation

__all__ = ["generate_solution", "simulate_one_step", "simulate_single_mode"]


def generate_solution(
    manager: Manager[StateT, ModeT, ResourcesT],
    modes: Sequence[ModeT],
    sequence: Sequence[ModeExecution],
) -> Solution[StateT, ResourcesT]:
    """
    Replay a run-length encoded `sequence` from the initial state.

    Stops at the first step that completes the solution, applying the
    overshoot correction; later entries of `sequence` are not executed.
    """
    _require_manager(manager)
    for execution in sequence:
        if execution.mode >= len(modes):
            raise PreconditionError(f"mode {execution.mode} is out of range for {len(modes)} modes")

    solution = manager.initial_solution()
    for execution in sequence:
        mode = modes[execution.mode]
        for _ in range(execution.times):
            previous = solution.clone()
            manager.updated_solution(solution, mode)
            add_mode_execution_to_sequence(execution.mode, solution.sequence)
            if manager.is_complete(solution):
                return find_solution_closest_to_zero(manager, previous, solution)
    return solution


def simulate_one_step(
    manager: Manager[StateT, ModeT, ResourcesT],
    mode: ModeT,
    solution: Solution[StateT, ResourcesT],
) -> None:
    """Advance `solution` in place by one step of `mode`."""
    _require_manager(manager)
    manager.updated_solution(solution, mode)


def simulate_single_mode(
    manager: Manager[StateT, ModeT, ResourcesT],
    mode: ModeT,
    steps: int,
) -> Simulation[StateT, ResourcesT]:
    """Apply `mode` alone from the initial state for `steps` steps or until completion.

    Every intermediate solution is recorded; no overshoot correction is applied.
    """
    _require_manager(manager)
    _require_positive("steps", steps)

    simulation: Simulation[StateT, ResourcesT] = Simulation(
        initial_state=copy.deepcopy(manager.initial_state),
        target_state=copy.deepcopy(manager.target_state),
    )
    solution = manager.initial_solution()
    for _ in range(steps):
        if manager.is_complete(solution):
            break
        simulate_one_step(manager, mode, solution)
        simulation.evolution.append(solution.clone())

    logger.debug("[solution] Simulated mode {} for {} steps", mode, len(simulation))
    return simulation
