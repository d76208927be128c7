from __future__ import annotations

from flexman.core.manager import Manager
from flexman.core.mode import Mode, ModeId
from flexman.core.mode_execution import (
    ModeExecution,
    add_mode_execution_to_sequence,
    format_sequence,
)
from flexman.core.pareto_front import ParetoFront
from flexman.core.result import Result
from flexman.core.solution import Solution

__all__ = [
    "Manager",
    "Mode",
    "ModeId",
    "ModeExecution",
    "ParetoFront",
    "Result",
    "Solution",
    "add_mode_execution_to_sequence",
    "format_sequence",
]
