from __future__ import annotations

from typing import Sequence

import numpy as np
from pydantic import BaseModel, ConfigDict, Field
from scipy.linalg import expm

from flexman.core.mode import Mode, ModeId
from flexman.exceptions import ProblemError
from flexman.problems.tapping.parameters import TappingParameters

__all__ = [
    "DiscreteStateSpace",
    "StateSpace",
    "TappingBuilder",
    "TappingMode",
    "c2d",
    "linspace",
    "make_modes",
]

# Degrees per radian over degrees per revolution.
_RAD_TO_REV = 57.295779513 / 360


class StateSpace(BaseModel):
    """Continuous-time linear system ``dx/dt = A x + B u``, ``y = C x + D u``."""

    A: np.ndarray
    B: np.ndarray
    C: np.ndarray
    D: np.ndarray

    model_config = ConfigDict(arbitrary_types_allowed=True)


class DiscreteStateSpace(StateSpace):
    """Discrete-time linear system ``x[k+1] = A x[k] + B u[k]``."""

    sample_time: float = Field(gt=0)


TappingMode = Mode[StateSpace, np.ndarray]


def c2d(system: StateSpace, sample_time: float) -> DiscreteStateSpace:
    """Zero-order-hold discretisation via the matrix exponential of the augmented system."""
    if sample_time <= 0:
        raise ProblemError(f"sample_time must be greater than 0, got {sample_time}")
    n, m = system.B.shape
    augmented = np.zeros((n + m, n + m))
    augmented[:n, :n] = system.A
    augmented[:n, n:] = system.B
    exponential = expm(augmented * sample_time)
    return DiscreteStateSpace(
        A=np.ascontiguousarray(exponential[:n, :n]),
        B=np.ascontiguousarray(exponential[:n, n:]),
        C=system.C.copy(),
        D=system.D.copy(),
        sample_time=sample_time,
    )


class TappingBuilder:
    """Builds the tapping machine modes for one set of parameters.

    The state is ``[angular speed, current, depth]``, the input
    ``[voltage, static friction]``.
    """

    def __init__(self, parameters: TappingParameters | None = None):
        self.parameters = parameters or TappingParameters()

    def make_system(self) -> StateSpace:
        p = self.parameters
        rotations_to_depth = _RAD_TO_REV * p.Ts * p.Gr
        return StateSpace(
            A=np.array(
                [
                    [-p.Kb / p.J, p.Kt / p.J, -p.Fd * p.Gr / p.J],
                    [-p.Ke / p.L, -p.R / p.L, 0.0],
                    [rotations_to_depth, 0.0, 0.0],
                ]
            ),
            B=np.array(
                [
                    [0.0, -p.Gr / p.J],
                    [1.0 / p.L, 0.0],
                    [0.0, 0.0],
                ]
            ),
            C=np.eye(3),
            D=np.zeros((3, 2)),
        )

    def make_input(self) -> np.ndarray:
        return np.array([self.parameters.V, self.parameters.Fs])

    def make_continuous_mode(self, mode_id: ModeId) -> TappingMode:
        return TappingMode(id=mode_id, system=self.make_system(), input=self.make_input())

    def make_discrete_mode(self, mode_id: ModeId, sample_time: float) -> TappingMode:
        return TappingMode(
            id=mode_id, system=c2d(self.make_system(), sample_time), input=self.make_input()
        )


def linspace(start: float, stop: float, num: int = 100) -> list[float]:
    """Evenly spaced values from `start` to `stop`; a single value is `stop`."""
    if num < 0:
        raise ProblemError(f"num must be non-negative, got {num}")
    if num == 1:
        return [float(stop)]
    return [float(value) for value in np.linspace(start, stop, num)]


def make_modes(
    gear_factors: Sequence[float],
    time_delta: float | None = None,
    base_parameters: TappingParameters | None = None,
) -> tuple[list[TappingParameters], list[TappingMode]]:
    """
    One mode per gear ratio, ids following the order of `gear_factors`.

    Discrete modes are sampled at `time_delta`; with `time_delta=None` the
    continuous systems are returned.
    """
    if not gear_factors:
        raise ProblemError("at least one gear factor is required")
    base_parameters = base_parameters or TappingParameters()

    parameters: list[TappingParameters] = []
    modes: list[TappingMode] = []
    for mode_id, gear in enumerate(gear_factors):
        if gear <= 0:
            raise ProblemError(f"gear factors must be positive, got {gear}")
        mode_parameters = base_parameters.model_copy(update={"Gr": float(gear)})
        builder = TappingBuilder(mode_parameters)
        parameters.append(mode_parameters)
        if time_delta is None:
            modes.append(builder.make_continuous_mode(mode_id))
        else:
            modes.append(builder.make_discrete_mode(mode_id, time_delta))
    return parameters, modes
