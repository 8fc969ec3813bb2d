"""
Local Lax-Friedrichs (Rusanov) Riemann solver.

    F = ½ (F_L + F_R - λ_max (U_R - U_L)),  λ_max = max(|s1|, |s4|)

The outer wave speeds s1, s4 come from the PVL pattern; the fluxes F_L, F_R
are the physical fluxes of each side.
"""

from __future__ import annotations

from ..eos import EquationOfState
from ..pattern import RiemannPattern
from ..registry import register_riemann_solver
from ..state import ConservativeState, State, store_fluxes
from ..vectors import VectorLike
from .base import RiemannSolver


@register_riemann_solver("llf")
class LLFSolver(RiemannSolver):
    """
    Local Lax-Friedrichs solver for conservative compressible states.

    More dissipative than PVL, but monotone given a correct bound on the
    wave speeds.
    """

    label = "LLF"

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
        pattern.compute_waves_extrema()
        lmax = max(abs(pattern.s1), abs(pattern.s4))
        fluxes_left = state_left.compute_fluxes(eos_left, normal)
        fluxes_right = state_right.compute_fluxes(eos_right, normal)
        result = 0.5 * (fluxes_left + fluxes_right - lmax * (state_right - state_left))
        return store_fluxes(result, fluxes)
