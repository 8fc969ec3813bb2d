"""
Primitive Variable Linearization (PVL) Riemann solver.

Selects the flux of the wave-fan region the interface lies in, using the
four-wave pattern of ``RiemannPattern``.
"""

from __future__ import annotations

from ..eos import EquationOfState
from ..pattern import RiemannPattern
from ..registry import register_riemann_solver
from ..state import ConservativeState, State
from ..vectors import VectorLike
from .base import RiemannSolver


@register_riemann_solver("pvl")
class PVLSolver(RiemannSolver):
    """PVL approximate Riemann solver for conservative compressible states."""

    label = "PVL"

    def solve(
        self,
        eos_left: EquationOfState,
        state_left: State,
        eos_right: EquationOfState,
        state_right: State,
        normal: VectorLike,
        fluxes: State | None = None,
    ) -> ConservativeState:
        eos_left, state_left, eos_right, state_right, normal = self._check_inputs(
            eos_left, state_left, eos_right, state_right, normal,
        )
        pattern = RiemannPattern(eos_left, state_left, eos_right, state_right, normal)
        pattern.compute_waves()
        return pattern.compute_fluxes(normal=normal, fluxes=fluxes)
