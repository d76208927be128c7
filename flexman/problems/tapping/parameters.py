from __future__ import annotations

from pydantic import BaseModel, Field

__all__ = ["TappingParameters"]


class TappingParameters(BaseModel):
    """Physical parameters of a DC motor driving a tap through a gearbox."""

    V: float = Field(default=48.0, description="Supplied voltage [V]")
    R: float = Field(default=1.2, gt=0, description="Winding resistance [Ohm]")
    L: float = Field(default=50e-05, gt=0, description="Winding inductance [H]")
    J: float = Field(default=0.2, gt=0, description="Angular momentum [kg.m^2]")
    Kb: float = Field(default=0.5, description="Coulomb friction [N.m]")
    Ke: float = Field(default=1.1, description="Back-EMF constant [V.s/rad]")
    Kt: float = Field(default=1.2, description="Torque constant [N.m/A]")
    Fd: float = Field(default=0.02, description="Dynamic hole friction [N.m/mm]")
    Fs: float = Field(default=0.15, description="Static hole friction [N.m]")
    Ts: float = Field(default=1.5, description="Thread slope, depth per revolution [mm/rev]")
    Gr: float = Field(default=30.0, gt=0, description="Gear ratio")
    Sc: float = Field(default=0.05, ge=0, description="Switch cost")
    St: float = Field(default=0.2, ge=0, description="Switch time")

    def __str__(self) -> str:
        return "[" + ", ".join(f"{value:g}" for value in self.model_dump().values()) + "]"
