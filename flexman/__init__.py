"""FlexMan: search for resource-optimal mode-switching sequences."""

from flexman.core import (
    Manager,
    Mode,
    ModeExecution,
    ModeId,
    ParetoFront,
    Result,
    Solution,
)
from flexman.exceptions import (
    ConfigError,
    FlexmanError,
    PreconditionError,
    ProblemError,
    SearchError,
    SerializationError,
)
from flexman.pso import SolverParameters, optimize_pareto_front, optimize_result, optimize_solution
from flexman.search import SearchAlgorithm, SwitchingMode, perform_search
from flexman.simulation import Simulation, generate_solution, simulate_one_step, simulate_single_mode

__version__ = "1.0.0"
VERSION = (1, 0, 0)

__all__ = [
    "ConfigError",
    "FlexmanError",
    "Manager",
    "Mode",
    "ModeExecution",
    "ModeId",
    "ParetoFront",
    "PreconditionError",
    "ProblemError",
    "Result",
    "SearchAlgorithm",
    "SearchError",
    "SerializationError",
    "Simulation",
    "Solution",
    "SolverParameters",
    "SwitchingMode",
    "generate_solution",
    "optimize_pareto_front",
    "optimize_result",
    "optimize_solution",
    "perform_search",
    "simulate_one_step",
    "simulate_single_mode",
]
