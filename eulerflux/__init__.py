"""
eulerflux: approximate Riemann fluxes for the compressible Euler equations.

Computes the numerical flux across a face between two fluid states, as
needed by finite-volume solvers. Provides an ideal-gas equation of state,
conservative/primitive states and two approximate Riemann solvers
(Primitive Variable Linearization and Local Lax-Friedrichs).

Usage:
    from eulerflux import make_eos, ConservativeState, get_riemann_solver

    eos = make_eos(gamma=1.4, R=287.0)
    solver = get_riemann_solver("pvl")()
    flux = solver.solve(eos, state_left, eos, state_right, normal=[1, 0, 0])
"""

from .config import RiemannProblemConfig, load_config, solve_problem
from .eos import EquationOfState, IdealGasEOS, make_eos
from .errors import (
    EulerFluxError,
    InvalidArgumentCombination,
    InvalidStateError,
    StateTypeError,
)
from .pattern import RiemannPattern
from .registry import get_riemann_solver
from .solvers import LLFSolver, PVLSolver, RiemannSolver
from .state import ConservativeState, PrimitiveState, State
from .transforms import conservative_to_primitive, primitive_to_conservative

__version__ = "0.1.0"

__all__ = [
    "EquationOfState",
    "IdealGasEOS",
    "make_eos",
    "State",
    "ConservativeState",
    "PrimitiveState",
    "conservative_to_primitive",
    "primitive_to_conservative",
    "RiemannPattern",
    "RiemannSolver",
    "PVLSolver",
    "LLFSolver",
    "get_riemann_solver",
    "RiemannProblemConfig",
    "load_config",
    "solve_problem",
    "EulerFluxError",
    "StateTypeError",
    "InvalidArgumentCombination",
    "InvalidStateError",
]
