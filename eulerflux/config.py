"""
Configuration parsing and validation for Riemann flux evaluations.

Uses pydantic for strict schema validation with helpful error messages.
The YAML layer describes one face problem for diagnostics and examples; it is
not needed to evaluate fluxes.

Example YAML:

    eos:
      gamma: 1.4
      R: 287.0
    solver:
      type: pvl
      linearization: up23
    left:  {rho: 1.0,   velocity: [0.0], p: 1.0}
    right: {rho: 0.125, velocity: [0.0], p: 0.1}
    normal: [1.0, 0.0, 0.0]
"""

from __future__ import annotations

import math
import warnings
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .eos import IdealGasEOS
from .registry import get_eos, get_riemann_solver
from .solvers import RiemannSolver
from .state import ConservativeState, PrimitiveState
from .transforms import primitive_to_conservative


# ---------------------------------------------------------------------------
# Sub-models
# ---------------------------------------------------------------------------

class EOSConfig(BaseModel):
    """Ideal-gas material: exactly two of cp, cv, gamma, R."""
    type: Literal["ideal_gas"] = Field("ideal_gas", description="Equation of state variant")
    cp: Optional[float] = Field(None, gt=0, description="Specific heat at constant pressure")
    cv: Optional[float] = Field(None, gt=0, description="Specific heat at constant volume")
    gamma: Optional[float] = Field(None, gt=1, description="Heat capacity ratio (γ)")
    R: Optional[float] = Field(None, gt=0, description="Specific gas constant")

    @model_validator(mode="after")
    def validate_two_parameters(self) -> "EOSConfig":
        """Ensure exactly two gas constants are given."""
        given = [name for name in ("cp", "cv", "gamma", "R") if getattr(self, name) is not None]
        if len(given) != 2:
            raise ValueError(
                f"EOS requires exactly two of 'cp', 'cv', 'gamma', 'R' (got {given or 'none'})"
            )
        if self.cp is not None and self.cv is not None and self.cp <= self.cv:
            raise ValueError("EOS requires cp > cv")
        if self.cp is not None and self.R is not None and self.cp <= self.R:
            raise ValueError("EOS requires cp > R")
        return self

    def build(self) -> IdealGasEOS:
        """Create the equation of state."""
        return get_eos(self.type)(cp=self.cp, cv=self.cv, gamma=self.gamma, R=self.R)


class StateConfig(BaseModel):
    """Primitive state for one side of a Riemann problem."""
    rho: float = Field(..., gt=0, description="Density")
    velocity: list[float] = Field(
        default_factory=lambda: [0.0, 0.0, 0.0],
        description="Velocity vector (1 to 3 components, missing ones are zero)",
    )
    p: float = Field(..., gt=0, description="Pressure")

    @field_validator("velocity")
    @classmethod
    def validate_velocity(cls, v: list[float]) -> list[float]:
        if not 1 <= len(v) <= 3:
            raise ValueError(f"velocity must have 1 to 3 components, got {len(v)}")
        return v

    def to_primitive(self) -> PrimitiveState:
        return PrimitiveState(density=self.rho, velocity=self.velocity, pressure=self.p)

    def to_conservative(self, eos: IdealGasEOS) -> ConservativeState:
        return primitive_to_conservative(self.to_primitive(), eos)


class RiemannSolverConfig(BaseModel):
    """Approximate Riemann solver selection."""
    type: Literal["pvl", "llf"] = Field("pvl", description="Riemann solver")
    linearization: Literal["u23", "up23", "upr23"] = Field(
        "up23", description="Primitive variables used by the linearization"
    )

    def build(self) -> RiemannSolver:
        """Create and initialize the solver."""
        return get_riemann_solver(self.type)(config=self.linearization)


# ---------------------------------------------------------------------------
# Main configuration
# ---------------------------------------------------------------------------

class RiemannProblemConfig(BaseModel):
    """A single face Riemann problem."""
    eos: EOSConfig
    eos_right: Optional[EOSConfig] = Field(
        None, description="Right-side EOS (defaults to 'eos')"
    )
    solver: RiemannSolverConfig = Field(default_factory=RiemannSolverConfig)
    left: StateConfig
    right: StateConfig
    normal: list[float] = Field(
        default_factory=lambda: [1.0, 0.0, 0.0], description="Face normal (left to right)"
    )

    @field_validator("normal")
    @classmethod
    def validate_normal(cls, v: list[float]) -> list[float]:
        """Require 1 to 3 components and a non-zero length; rescale to unit length."""
        if not 1 <= len(v) <= 3:
            raise ValueError(f"normal must have 1 to 3 components, got {len(v)}")
        norm = math.sqrt(sum(c * c for c in v))
        if norm == 0.0:
            raise ValueError("normal must be non-zero")
        if abs(norm - 1.0) > 1e-10:
            warnings.warn(f"normal has length {norm:.6g}; rescaling to unit length.")
            v = [c / norm for c in v]
        return v

    def build_eos(self) -> tuple[IdealGasEOS, IdealGasEOS]:
        eos_left = self.eos.build()
        eos_right = self.eos_right.build() if self.eos_right is not None else eos_left
        return eos_left, eos_right


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_config(path: str | Path) -> RiemannProblemConfig:
    """
    Load and validate a YAML configuration file.

    A convenience for reproducing and diagnosing single-face problems; flux
    evaluation itself goes through ``RiemannSolver.solve`` and never reads
    files. File handling in a host code belongs to that code.

    Parameters
    ----------
    path : str or Path
        Path to the YAML configuration file.

    Returns
    -------
    RiemannProblemConfig
        Validated configuration object.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist.
    pydantic.ValidationError
        If the configuration is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, "r") as f:
        raw = yaml.safe_load(f)

    return RiemannProblemConfig.model_validate(raw)


def solve_problem(config: RiemannProblemConfig) -> ConservativeState:
    """Build the EOS, states and solver described by ``config`` and return the flux."""
    eos_left, eos_right = config.build_eos()
    solver = config.solver.build()
    return solver.solve(
        eos_left,
        config.left.to_conservative(eos_left),
        eos_right,
        config.right.to_conservative(eos_right),
        config.normal,
    )
