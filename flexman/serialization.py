"""
JSON persisted form of managers, results and modes.

Layout of a saved run::

    {
      "manager": {"initial_state", "target_state", "time_delta", "time_max",
                  "threshold", "timeout": {"tv_sec", "tv_nsec"}, "interactive"},
      "results": {"pareto_fronts": [{"solutions": [{"sequence": [{"mode", "times"}],
                                                    "state", "resources"}],
                                     "step_length", "steps_per_iteration",
                                     "iteration", "runtime"}]},
      "modes": [{"parameters": ..., "mode": {"id", "system", "input"}}]
    }

Solution distances are not persisted. They are recomputed on load when a
manager is supplied, otherwise left at ``inf``.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Callable, Sequence

from loguru import logger
import orjson
from pydantic import BaseModel

from flexman.core.manager import Manager
from flexman.core.mode import Mode
from flexman.core.mode_execution import ModeExecution
from flexman.core.pareto_front import ParetoFront
from flexman.core.result import Result
from flexman.core.solution import Solution
from flexman.exceptions import SerializationError
from flexman.utils.json import dumps, loads

__all__ = [
    "dump_manager",
    "dump_mode",
    "dump_result",
    "dump_solution",
    "load_result",
    "load_run",
    "load_solution",
    "save_run",
]

_MANAGER_FIELDS = {
    "initial_state",
    "target_state",
    "time_delta",
    "time_max",
    "threshold",
    "timeout",
    "interactive",
}


def _dump_value(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump()
    return value


def dump_solution(solution: Solution) -> dict[str, Any]:
    return {
        "sequence": [execution.model_dump() for execution in solution.sequence],
        "state": _dump_value(solution.state),
        "resources": _dump_value(solution.resources),
    }


def dump_result(result: Result) -> dict[str, Any]:
    return {
        "pareto_fronts": [
            {
                "solutions": [dump_solution(solution) for solution in front.solutions],
                "step_length": front.step_length,
                "steps_per_iteration": front.steps_per_iteration,
                "iteration": front.iteration,
                "runtime": front.runtime,
            }
            for front in result.pareto_fronts
        ]
    }


def dump_manager(manager: Manager) -> dict[str, Any]:
    return manager.model_dump(include=_MANAGER_FIELDS)


def dump_mode(mode: Mode, parameters: Any = None) -> dict[str, Any]:
    return {
        "parameters": _dump_value(parameters),
        "mode": {
            "id": mode.id,
            "system": _dump_value(mode.system),
            "input": _dump_value(mode.input),
        },
    }


def _loader(model: type[BaseModel] | Callable[[Any], Any]) -> Callable[[Any], Any]:
    if isinstance(model, type) and issubclass(model, BaseModel):
        return model.model_validate
    return model


def load_solution(
    data: dict[str, Any],
    state_factory: Callable[[Any], Any],
    resources_model: type[BaseModel] | Callable[[Any], Any],
    manager: Manager | None = None,
) -> Solution:
    solution = Solution(
        sequence=[ModeExecution.model_validate(execution) for execution in data["sequence"]],
        state=state_factory(data["state"]),
        resources=_loader(resources_model)(data["resources"]),
        distance=math.inf,
    )
    if manager is not None:
        solution.distance = manager.distance(solution)
    return solution


def load_result(
    data: dict[str, Any],
    state_factory: Callable[[Any], Any],
    resources_model: type[BaseModel] | Callable[[Any], Any],
    manager: Manager | None = None,
) -> Result:
    """
    Rebuild a `Result` from its persisted form.

    `state_factory` turns a persisted state back into a state value (e.g.
    ``numpy.asarray``); `resources_model` is a pydantic model or any callable
    doing the same for resources.
    """
    try:
        fronts = [
            ParetoFront(
                solutions=[
                    load_solution(solution, state_factory, resources_model, manager)
                    for solution in front["solutions"]
                ],
                step_length=front["step_length"],
                steps_per_iteration=front["steps_per_iteration"],
                iteration=front["iteration"],
                runtime=front["runtime"],
            )
            for front in data["pareto_fronts"]
        ]
    except (KeyError, TypeError, ValueError) as exc:
        raise SerializationError(f"Malformed result data: {exc}") from exc
    return Result(pareto_fronts=fronts)


def save_run(
    path: str | Path,
    manager: Manager,
    result: Result,
    modes: Sequence[Mode] = (),
    parameters: Sequence[Any] | None = None,
) -> Path:
    """Write manager, result and modes to `path` as indented JSON."""
    if parameters is not None and len(parameters) != len(modes):
        raise SerializationError(f"Got {len(parameters)} parameter sets for {len(modes)} modes")

    root = {
        "manager": dump_manager(manager),
        "results": dump_result(result),
        "modes": [
            dump_mode(mode, parameters[index] if parameters is not None else None)
            for index, mode in enumerate(modes)
        ],
    }
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dumps(root, indent=True))
    except (OSError, TypeError, orjson.JSONEncodeError) as exc:
        raise SerializationError(f"Failed to save to `{path}`: {exc}") from exc

    logger.info("[app] Saved {} Pareto fronts to {}", len(result.pareto_fronts), path)
    return path


def load_run(
    path: str | Path,
    manager_cls: type[Manager],
    state_factory: Callable[[Any], Any],
    resources_model: type[BaseModel] | Callable[[Any], Any],
) -> tuple[Manager, Result]:
    """Read a run written by `save_run`; distances are recomputed with the loaded manager."""
    path = Path(path)
    try:
        root = loads(path.read_bytes())
        manager = manager_cls.model_validate(root["manager"])
    except (OSError, KeyError, TypeError, ValueError) as exc:
        raise SerializationError(f"Failed to load `{path}`: {exc}") from exc

    if "results" not in root:
        raise SerializationError(f"Failed to load `{path}`: missing 'results'")
    result = load_result(root["results"], state_factory, resources_model, manager)
    logger.info("[app] Loaded {} Pareto fronts from {}", len(result.pareto_fronts), path)
    return manager, result
