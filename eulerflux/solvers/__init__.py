"""
Approximate Riemann solvers.

Import all solvers here to register them automatically.
"""

from .base import DEFAULT_LINEARIZATION, LINEARIZATIONS, RiemannSolver
from .llf import LLFSolver
from .pvl import PVLSolver

__all__ = [
    "RiemannSolver",
    "PVLSolver",
    "LLFSolver",
    "LINEARIZATIONS",
    "DEFAULT_LINEARIZATION",
]
