from __future__ import annotations

import math
from typing import Sequence

from loguru import logger
import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from flexman.core.manager import Manager, ModeT
from flexman.core.mode_execution import ModeExecution
from flexman.core.pareto_front import ParetoFront
from flexman.core.result import Result
from flexman.core.solution import ResourcesT, Solution, StateT
from flexman.pso.common import SolverParameters
from flexman.search.common import _require_manager
from flexman.simulation.simulate import generate_solution

__all__ = [
    "SwarmOutcome",
    "evaluate_particle",
    "initialize_particles",
    "optimize_pareto_front",
    "optimize_result",
    "optimize_solution",
    "run_swarm",
    "update_all_particles",
    "update_particle_velocity_and_position",
]

SeedLike = int | np.random.Generator | None


class SwarmOutcome(BaseModel):
    """Best solution found by one swarm run, with its per-iteration progress."""

    solution: Solution
    best_fitness: float = math.inf
    best_fitness_history: list[float] = Field(default_factory=list)
    valid_counts: list[int] = Field(default_factory=list)

    model_config = ConfigDict(arbitrary_types_allowed=True)


def _fitness(manager: Manager, solution: Solution) -> float:
    if not manager.is_complete(solution):
        return math.inf
    return manager.resources_cost(solution.resources)


def _to_sequence(modes_of_genes: np.ndarray, times: np.ndarray) -> list[ModeExecution]:
    return [ModeExecution(mode=int(mode), times=int(count)) for mode, count in zip(modes_of_genes, times)]


def update_particle_velocity_and_position(
    parameters: SolverParameters,
    personal_best: np.ndarray,
    global_best: np.ndarray,
    velocity: np.ndarray,
    times: np.ndarray,
    max_times: int,
) -> tuple[np.ndarray, np.ndarray]:
    """
    One PSO move of a particle, gene by gene.

    Returns the new velocity and the new execution counts, rounded and
    clamped to ``[1, max_times]``.
    """
    velocity = (
        parameters.inertia * velocity
        + parameters.cognitive * (personal_best - times)
        + parameters.social * (global_best - times)
    )
    times = np.clip(np.rint(times + velocity), 1, max_times).astype(np.int64)
    return velocity, times


def update_all_particles(
    parameters: SolverParameters,
    personal_best: np.ndarray,
    global_best: np.ndarray,
    velocities: np.ndarray,
    particles: np.ndarray,
    max_times: int,
) -> None:
    """Move every particle in place; arrays are shaped (particles, genes)."""
    for i in range(particles.shape[0]):
        velocities[i], particles[i] = update_particle_velocity_and_position(
            parameters, personal_best[i], global_best, velocities[i], particles[i], max_times
        )


def initialize_particles(
    times: np.ndarray, num_particles: int, max_times: int, rng: np.random.Generator
) -> np.ndarray:
    """Jitter the execution counts of `times` by U(1, 10) - 5 for every particle."""
    jitter = rng.uniform(1.0, 10.0, size=(num_particles, times.size)) - 5.0
    particles = np.trunc(np.maximum(times[np.newaxis, :] + jitter, 1.0))
    return np.clip(particles, 1, max_times).astype(np.int64)


def evaluate_particle(
    manager: Manager[StateT, ModeT, ResourcesT],
    modes: Sequence[ModeT],
    sequence: Sequence[ModeExecution],
) -> tuple[Solution[StateT, ResourcesT], float]:
    """Replay `sequence` and score it: the resources cost when complete, `inf` otherwise."""
    solution = generate_solution(manager, modes, sequence)
    return solution, _fitness(manager, solution)


def run_swarm(
    manager: Manager[StateT, ModeT, ResourcesT],
    parameters: SolverParameters,
    modes: Sequence[ModeT],
    solution: Solution[StateT, ResourcesT],
    seed: SeedLike = None,
) -> SwarmOutcome:
    """
    Refine the execution counts of `solution` with a particle swarm.

    The mode order of the sequence is kept; only the counts move. The
    global best starts as `solution` itself, so the outcome is never worse
    than the input. `seed` may be an int, a numpy Generator, or None for
    OS entropy.
    """
    _require_manager(manager)
    rng = np.random.default_rng(seed)

    best_solution = solution.clone()
    best_fitness = _fitness(manager, solution)
    outcome = SwarmOutcome(solution=best_solution, best_fitness=best_fitness)
    if not solution.sequence:
        return outcome

    modes_of_genes = np.array([execution.mode for execution in solution.sequence], dtype=np.int64)
    initial_times = np.array([execution.times for execution in solution.sequence], dtype=np.float64)
    max_times = manager.max_steps

    particles = initialize_particles(initial_times, parameters.num_particles, max_times, rng)
    velocities = np.zeros(particles.shape, dtype=np.float64)
    personal_best = particles.copy()
    personal_best_fitness = np.full(parameters.num_particles, math.inf)
    global_best = initial_times.astype(np.int64)

    for iteration in range(parameters.max_iterations):
        valid = 0
        for i in range(parameters.num_particles):
            candidate, fitness = evaluate_particle(manager, modes, _to_sequence(modes_of_genes, particles[i]))
            if math.isfinite(fitness):
                valid += 1
            if fitness < personal_best_fitness[i]:
                personal_best[i] = particles[i]
                personal_best_fitness[i] = fitness
            if fitness < best_fitness:
                global_best = particles[i].copy()
                best_fitness = fitness
                best_solution = candidate

        update_all_particles(parameters, personal_best, global_best, velocities, particles, max_times)

        outcome.best_fitness_history.append(best_fitness)
        outcome.valid_counts.append(valid)
        logger.info(
            "[pso]         Iteration {:>2}/{:>2}, best fitness: {:>6.2f}, valid solutions: {:>3}/{:>3}",
            iteration + 1,
            parameters.max_iterations,
            best_fitness,
            valid,
            parameters.num_particles,
        )

    outcome.solution = best_solution
    outcome.best_fitness = best_fitness
    return outcome


def optimize_solution(
    manager: Manager[StateT, ModeT, ResourcesT],
    parameters: SolverParameters,
    modes: Sequence[ModeT],
    solution: Solution[StateT, ResourcesT],
    seed: SeedLike = None,
) -> Solution[StateT, ResourcesT]:
    return run_swarm(manager, parameters, modes, solution, seed).solution


def optimize_pareto_front(
    manager: Manager[StateT, ModeT, ResourcesT],
    parameters: SolverParameters,
    modes: Sequence[ModeT],
    pareto_front: ParetoFront[StateT, ResourcesT],
    seed: SeedLike = None,
) -> ParetoFront[StateT, ResourcesT]:
    """Refine every solution of the front; the front's metadata is kept."""
    rng = np.random.default_rng(seed)
    total = len(pareto_front.solutions)
    solutions = []
    for index, solution in enumerate(pareto_front.solutions, start=1):
        logger.info("[pso]     Optimize solution {:>3}/{:>3}...", index, total)
        solutions.append(optimize_solution(manager, parameters, modes, solution, rng))
    return pareto_front.model_copy(update={"solutions": solutions})


def optimize_result(
    manager: Manager[StateT, ModeT, ResourcesT],
    parameters: SolverParameters,
    modes: Sequence[ModeT],
    result: Result[StateT, ResourcesT],
    seed: SeedLike = None,
) -> Result[StateT, ResourcesT]:
    """Refine every front of `result`, producing a result of the same shape."""
    rng = np.random.default_rng(seed)
    total = len(result.pareto_fronts)
    fronts = []
    for index, pareto_front in enumerate(result.pareto_fronts, start=1):
        logger.info(
            "[pso] Optimize Pareto front (step: {:>6.2f}) {:>3}/{:>3}...", pareto_front.step_length, index, total
        )
        fronts.append(optimize_pareto_front(manager, parameters, modes, pareto_front, rng))
    return Result(pareto_fronts=fronts)
