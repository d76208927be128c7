from flexman.simulation.common import Simulation
from flexman.simulation.simulate import (
    generate_solution,
    simulate_one_step,
    simulate_single_mode,
)

__all__ = ["Simulation", "generate_solution", "simulate_one_step", "simulate_single_mode"]
