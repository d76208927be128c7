from __future__ import annotations

from typing import Callable, Sequence

from loguru import logger

from flexman.core.manager import Manager, ModeT
from flexman.core.mode_execution import ModeExecution
from flexman.core.pareto_front import ParetoFront
from flexman.core.result import Result
from flexman.core.solution import ResourcesT, Solution, StateT
from flexman.exceptions import PreconditionError
from flexman.search.common import (
    SearchAlgorithm,
    _require_manager,
    _require_modes,
    _require_positive,
    extend_solutions,
    log_solutions,
    remove_dominated_solutions,
    remove_duplicate_solutions,
    split_complete_partial,
)
from flexman.search.interactive import (
    InteractiveCommand,
    prompt_interactive_command,
    wait_for_keypress,
)
from flexman.utils.timer import Timer

__all__ = [
    "perform_search",
    "perform_search_n_iterations",
    "perform_search_single_iteration",
    "stride_schedule",
]


def stride_schedule(algorithm: SearchAlgorithm, iterations: int) -> list[int]:
    """Steps per iteration of each resolution level, coarsest first, halving down to 1."""
    _require_positive("iterations", iterations)
    stride = 1 if algorithm is SearchAlgorithm.SINGLE_MACHINE else 1 << (iterations - 1)
    strides = []
    while stride >= 1:
        strides.append(stride)
        stride //= 2
    return strides


def _max_iterations(manager: Manager, steps_per_iteration: int) -> tuple[float, int]:
    time_per_iteration = manager.time_delta * steps_per_iteration
    return time_per_iteration, int(manager.time_max / time_per_iteration)


def perform_search_single_iteration(
    manager: Manager[StateT, ModeT, ResourcesT],
    modes: Sequence[ModeT],
    steps_per_iteration: int,
    partial_solutions: list[Solution[StateT, ResourcesT]],
    accepted_solutions: list[Solution[StateT, ResourcesT]],
    algorithm: SearchAlgorithm = SearchAlgorithm.EXHAUSTIVE,
    timer: Timer | None = None,
) -> None:
    """
    Run one expansion round, updating both lists in place.

    Partial solutions are extended, pruned against the accepted set and
    split; newly complete ones join the accepted set, which is then pruned
    and deduplicated. Under the heuristic algorithm the surviving partial
    solutions are additionally pruned among themselves.
    """
    _require_manager(manager)
    _require_positive("steps_per_iteration", steps_per_iteration)
    _require_modes(modes)

    extended = extend_solutions(
        manager, modes, steps_per_iteration, partial_solutions, algorithm.switching_mode, timer
    )
    log_solutions(extended, "Extended solutions")

    remove_dominated_solutions(manager, extended, accepted_solutions, SearchAlgorithm.EXHAUSTIVE)
    log_solutions(extended, "Extended solutions not dominated by accepted ones")

    complete: list[Solution[StateT, ResourcesT]] = []
    partial: list[Solution[StateT, ResourcesT]] = []
    split_complete_partial(manager, extended, complete, partial)

    if complete:
        accepted_solutions.extend(complete)
        remove_dominated_solutions(manager, accepted_solutions)
        remove_duplicate_solutions(manager, accepted_solutions)

    if algorithm is SearchAlgorithm.HEURISTIC:
        pruned = list(partial)
        remove_dominated_solutions(manager, pruned, partial, SearchAlgorithm.HEURISTIC)
        partial_solutions[:] = pruned
    else:
        partial_solutions[:] = partial


def perform_search_n_iterations(
    manager: Manager[StateT, ModeT, ResourcesT],
    modes: Sequence[ModeT],
    steps_per_iteration: int,
    previous_pareto_front: ParetoFront[StateT, ResourcesT] | None = None,
    algorithm: SearchAlgorithm = SearchAlgorithm.EXHAUSTIVE,
    global_timer: Timer | None = None,
) -> ParetoFront[StateT, ResourcesT]:
    """
    Search one resolution level.

    Starts one partial solution per mode and runs rounds until no partial
    solution is left, the horizon `time_max` is covered, or the global timer
    expires. The accepted solutions of `previous_pareto_front` seed the
    accepted set.
    """
    _require_manager(manager)
    _require_positive("steps_per_iteration", steps_per_iteration)
    _require_modes(modes)

    if global_timer is None:
        global_timer = Timer(manager.timeout)
        global_timer.start()

    partial_solutions = [
        manager.initial_solution([ModeExecution(mode=mode_id, times=0)]) for mode_id in range(len(modes))
    ]
    accepted_solutions = list(previous_pareto_front.solutions) if previous_pareto_front else []

    pareto_timer = Timer()
    pareto_timer.start()

    time_per_iteration, max_iterations = _max_iterations(manager, steps_per_iteration)
    logger.info(
        "[round] Perform {:>6} iterations maximum, with {:>5} steps per iteration, each simulating {:>7.2f}",
        max_iterations,
        steps_per_iteration,
        time_per_iteration,
    )

    iteration = 0
    while iteration < max_iterations and partial_solutions:
        round_timer = Timer()
        round_timer.start()

        perform_search_single_iteration(
            manager,
            modes,
            steps_per_iteration,
            partial_solutions,
            accepted_solutions,
            algorithm,
            global_timer,
        )
        iteration += 1

        logger.info(
            "[round] Step: {:>6}/{:<6}, Part: {:>6}, Full: {:>6}, RndTm: {:>8.3f} s, RunTm: {:>8.3f} s, RemTm: {:>8.3f} s",
            iteration,
            max_iterations,
            len(partial_solutions),
            len(accepted_solutions),
            round_timer.elapsed(),
            global_timer.elapsed(),
            global_timer.remaining(),
        )
        log_solutions(accepted_solutions, "Accepted solutions")
        log_solutions(partial_solutions, "Partial solutions")

        if global_timer.has_timeout():
            logger.warning(
                "[round] Iteration index {:>2} of {:>3} (Steps: {}, Length: {:.2f}), went into timeout ({:.2f} > {:.2f})",
                iteration,
                max_iterations,
                steps_per_iteration,
                time_per_iteration,
                global_timer.elapsed(),
                global_timer.timeout,
            )
            break

    return ParetoFront(
        solutions=list(accepted_solutions),
        step_length=time_per_iteration,
        steps_per_iteration=steps_per_iteration,
        iteration=iteration,
        runtime=pareto_timer.elapsed(),
    )


def _check_mode_ids(modes: Sequence) -> None:
    for index, mode in enumerate(modes):
        mode_id = getattr(mode, "id", index)
        if mode_id != index:
            raise PreconditionError(f"mode at position {index} has id {mode_id}, ids must match positions")


def perform_search(
    manager: Manager[StateT, ModeT, ResourcesT],
    modes: Sequence[ModeT],
    iterations: int = 5,
    algorithm: SearchAlgorithm = SearchAlgorithm.EXHAUSTIVE,
    read_key: Callable[[], str] = wait_for_keypress,
) -> Result[StateT, ResourcesT]:
    """
    Coarse-to-fine search for mode sequences reaching the target.

    Sweeps `steps_per_iteration` from `2**(iterations-1)` (1 for the
    single-machine algorithm) down to 1, halving at each level and seeding
    every level with the front found by the previous one. Each non-empty
    front is appended to the result. A timeout, or the user quitting in
    interactive mode, ends the sweep early with the fronts found so far.
    """
    _require_manager(manager)
    _require_positive("iterations", iterations)
    _require_modes(modes)
    _check_mode_ids(modes)

    result: Result[StateT, ResourcesT] = Result()
    pareto_front: ParetoFront[StateT, ResourcesT] = ParetoFront()

    global_timer = Timer(manager.timeout)
    global_timer.start()

    strides = stride_schedule(algorithm, iterations)

    logger.info("[search] Algorithm: {}, modes: {}", algorithm.value, len(modes))
    logger.info("[search] | Max Iterations | Steps Per Iteration | Time Delta |")
    logger.info("[search] |----------------|---------------------|------------|")
    for steps_per_iteration in strides:
        time_per_iteration, max_iterations = _max_iterations(manager, steps_per_iteration)
        logger.info(
            "[search] | {:>14} | {:>19} | {:>10.6f} |", max_iterations, steps_per_iteration, time_per_iteration
        )

    disable_interactive = False
    for steps_per_iteration in strides:
        pareto_front = perform_search_n_iterations(
            manager, modes, steps_per_iteration, pareto_front, algorithm, global_timer
        )

        if pareto_front.solutions:
            result.pareto_fronts.append(pareto_front)
        else:
            logger.warning("[search] No solution found with stride factor {:>3}", steps_per_iteration)

        if manager.interactive and not disable_interactive:
            global_timer.pause()
            command = prompt_interactive_command(read_key)
            global_timer.start()
            if command is InteractiveCommand.RESUME:
                disable_interactive = True
            elif command is InteractiveCommand.QUIT:
                logger.warning("[search] Stopping at stride factor {:>3}, on user request", steps_per_iteration)
                break

        if global_timer.has_timeout():
            logger.warning("[search] Stopping at stride factor {:>3}, because of time-out", steps_per_iteration)
            break

    logger.info(
        "[search] Done | fronts={}, elapsed={:.3f} s",
        len(result.pareto_fronts),
        global_timer.elapsed(),
    )
    return result
