from __future__ import annotations

import math

from pydantic import BaseModel, Field

__all__ = ["TappingResources", "approximately_equal"]


def approximately_equal(a: float, b: float) -> bool:
    return math.isclose(a, b, rel_tol=1e-09, abs_tol=1e-12)


class TappingResources(BaseModel):
    """Energy and time spent tapping; compared with float tolerance."""

    energy: float = Field(default=0.0, description="Energy spent tapping [J]")
    time: float = Field(default=0.0, description="Time spent tapping [s]")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TappingResources):
            return NotImplemented
        return approximately_equal(self.energy, other.energy) and approximately_equal(self.time, other.time)

    def __le__(self, other: TappingResources) -> bool:
        return (self.energy < other.energy or approximately_equal(self.energy, other.energy)) and (
            self.time < other.time or approximately_equal(self.time, other.time)
        )

    # Energy first, time breaks ties.
    def __lt__(self, other: TappingResources) -> bool:
        if not approximately_equal(self.energy, other.energy):
            return self.energy < other.energy
        return self.time < other.time

    def __str__(self) -> str:
        return f"({self.time:>6.3f},{self.energy:>8.3f})"
