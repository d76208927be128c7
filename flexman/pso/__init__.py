from flexman.pso.common import SolverParameters
from flexman.pso.optimize import (
    SwarmOutcome,
    evaluate_particle,
    initialize_particles,
    optimize_pareto_front,
    optimize_result,
    optimize_solution,
    run_swarm,
    update_all_particles,
    update_particle_velocity_and_position,
)

__all__ = [
    "SolverParameters",
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
