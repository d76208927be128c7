from __future__ import annotations

from pydantic import BaseModel, Field

__all__ = ["SolverParameters"]


class SolverParameters(BaseModel):
    """Particle swarm settings used to refine the execution counts of a solution."""

    num_particles: int = Field(default=100, gt=0, description="Particles in the swarm")
    max_iterations: int = Field(default=50, gt=0, description="Swarm iterations")
    inertia: float = Field(default=0.2, ge=0, description="Weight of the previous velocity")
    cognitive: float = Field(default=0.4, ge=0, description="Weight of the personal best")
    social: float = Field(default=0.4, ge=0, description="Weight of the global best")
