"""
Riemann pattern estimated by Primitive Variable Linearization (PVL).

The two states across a face are projected on the face normal and the
1D Riemann problem in the normal direction is linearized about the mean
state (Toro, "Riemann Solvers and Numerical Methods for Fluid Dynamics",
§9.3):

    ρ̄ = ½ (ρ_L + ρ_R),  ā = ½ (a_L + a_R)
    p* = ½ (p_L + p_R) - ½ (u_R - u_L) ρ̄ ā
    u* = ½ (u_L + u_R) - ½ (p_R - p_L) / (ρ̄ ā)
    ρ*_L = ρ_L + (u_L - u*) ρ̄ / ā
    ρ*_R = ρ_R + (u* - u_R) ρ̄ / ā

The linearization fails for strong expansions (p* <= 0 or a negative star
density). The pattern then switches to the two-rarefaction estimate (§9.4.1),
with isentropic star densities ρ*_K = ρ_K (p* / p_K)^(1/γ_K):

    z = (γ - 1) / (2γ)
    p* = [(a_L + a_R - δ (u_R - u_L)) / (a_L / p_L^z + a_R / p_R^z)]^(1/z)
    u* = ½ (u_L + u_R) + ½ (f_R(p*) - f_L(p*)),  f_K(p) = a_K / δ_K ((p / p_K)^z_K - 1)

When the numerator is not positive the expansion generates vacuum: p* = 0 and
the two rarefactions end at the vacuum fronts u_L + a_L / δ_L and
u_R - a_R / δ_R.

The wave fan is bounded by four speeds s1 <= s2 <= s3 <= s4: s1/s2 are the
head/tail of the left wave, s3/s4 the tail/head of the right wave, and the
contact travels at u* between s2 and s3. A wave is a shock when p* exceeds
the pressure ahead of it (head and tail coincide), a rarefaction otherwise.
"""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from .eos import EquationOfState
from .errors import InvalidStateError, cast_eos, cast_state
from .state import ConservativeState, State, store_fluxes
from .vectors import VectorLike, as_vector, format_real

NAN = float("nan")

# Star-state estimates
PVL = "pvl"
TWO_RAREFACTION = "two_rarefaction"
VACUUM = "vacuum"


def _shock_factor(eos: EquationOfState, p_star: float, p_ahead: float) -> float:
    """sqrt(1 + (γ + 1) / (2γ) (p* / p_K - 1)), the shock Mach number."""
    return math.sqrt(1.0 + eos.gp1 / (2.0 * eos.gamma) * (p_star / p_ahead - 1.0))


@dataclass
class RiemannPattern:
    """
    Wave pattern of the Riemann problem across one face.

    Built fresh for every face evaluation. Construction normalizes the two
    states and computes the linearized star pressure and velocity;
    ``compute_waves`` or ``compute_waves_extrema`` then fill in the wave
    speeds.

    Attributes
    ----------
    u_left, u_right : float
        Normal velocities.
    t_left, t_right : ndarray, shape (3,)
        Tangential velocities.
    p_star, u_star : float
        Star-region pressure and velocity (``p_star >= 0``).
    estimate : str
        Which estimate produced them: "pvl", "two_rarefaction" or "vacuum".
    r_star_left, r_star_right : float
        Star-region densities on each side of the contact.
    s1, s2, s3, s4 : float
        Wave speeds, NaN until computed.
    """
    eos_left: EquationOfState
    state_left: ConservativeState
    eos_right: EquationOfState
    state_right: ConservativeState
    normal: NDArray[np.float64]

    u_left: float = field(init=False)
    u_right: float = field(init=False)
    t_left: NDArray[np.float64] = field(init=False, repr=False)
    t_right: NDArray[np.float64] = field(init=False, repr=False)
    r_left: float = field(init=False)
    r_right: float = field(init=False)
    p_left: float = field(init=False)
    p_right: float = field(init=False)
    a_left: float = field(init=False)
    a_right: float = field(init=False)
    r_mean: float = field(init=False, repr=False)
    a_mean: float = field(init=False, repr=False)
    p_star: float = field(init=False)
    u_star: float = field(init=False)
    estimate: str = field(init=False, default=PVL)
    r_star_left: float = field(init=False, default=NAN)
    r_star_right: float = field(init=False, default=NAN)
    a_star_left: float = field(init=False, default=NAN)
    a_star_right: float = field(init=False, default=NAN)
    s1: float = field(init=False, default=NAN)
    s2: float = field(init=False, default=NAN)
    s3: float = field(init=False, default=NAN)
    s4: float = field(init=False, default=NAN)
    waves_computed: bool = field(init=False, default=False, repr=False)

    def __post_init__(self) -> None:
        self.eos_left = cast_eos(self.eos_left, context="Riemann pattern, left")
        self.eos_right = cast_eos(self.eos_right, context="Riemann pattern, right")
        self.state_left = cast_state(self.state_left, ConservativeState, context="Riemann pattern, left")
        self.state_right = cast_state(self.state_right, ConservativeState, context="Riemann pattern, right")
        self.normal = as_vector(self.normal)

        self.u_left, self.t_left = self.state_left.normalize(self.normal)
        self.u_right, self.t_right = self.state_right.normalize(self.normal)
        self.r_left = self.state_left.density
        self.r_right = self.state_right.density
        self.p_left = self.state_left.pressure(self.eos_left)
        self.p_right = self.state_right.pressure(self.eos_right)
        for side, p in (("left", self.p_left), ("right", self.p_right)):
            if not p > 0.0:
                raise InvalidStateError(f"Riemann {side} state has non-positive pressure {p!r}")
        self.a_left = float(self.eos_left.speed_of_sound(density=self.r_left, pressure=self.p_left))
        self.a_right = float(self.eos_right.speed_of_sound(density=self.r_right, pressure=self.p_right))

        self.r_mean = 0.5 * (self.r_left + self.r_right)
        self.a_mean = 0.5 * (self.a_left + self.a_right)
        impedance = self.r_mean * self.a_mean
        self.p_star = 0.5 * (self.p_left + self.p_right) - 0.5 * (self.u_right - self.u_left) * impedance
        self.u_star = 0.5 * (self.u_left + self.u_right) - 0.5 * (self.p_right - self.p_left) / impedance

        r_left, r_right = self._linearized_star_densities()
        if not (self.p_star > 0.0 and r_left > 0.0 and r_right > 0.0):
            self._two_rarefaction_star()

    # --- star state ---

    def _linearized_star_densities(self) -> tuple[float, float]:
        ratio = self.r_mean / self.a_mean
        return (
            self.r_left + (self.u_left - self.u_star) * ratio,
            self.r_right + (self.u_star - self.u_right) * ratio,
        )

    def _two_rarefaction_star(self) -> None:
        """Replace the linearized star state by the two-rarefaction estimate."""
        eos_l, eos_r = self.eos_left, self.eos_right
        z = 0.5 * (1.0 / eos_l.eta + 1.0 / eos_r.eta)
        delta = 0.5 * (eos_l.delta + eos_r.delta)
        numerator = self.a_left + self.a_right - delta * (self.u_right - self.u_left)
        if numerator > 0.0:
            denominator = self.a_left / self.p_left ** z + self.a_right / self.p_right ** z
            self.p_star = (numerator / denominator) ** (1.0 / z)
            self.estimate = TWO_RAREFACTION
        else:
            self.p_star = 0.0
            self.estimate = VACUUM
            warnings.warn(
                f"Riemann problem generates vacuum (u_R - u_L = {self.u_right - self.u_left:.6e}); "
                "interface flux is zero inside the vacuum region.",
                RuntimeWarning,
                stacklevel=4,
            )

        # u_K - f_K(p*) on each side, averaged
        f_left = self.a_left / eos_l.delta * ((self.p_star / self.p_left) ** (1.0 / eos_l.eta) - 1.0)
        f_right = self.a_right / eos_r.delta * ((self.p_star / self.p_right) ** (1.0 / eos_r.eta) - 1.0)
        self.u_star = 0.5 * (self.u_left + self.u_right) + 0.5 * (f_right - f_left)

    # --- wave speeds ---

    def _left_head(self) -> float:
        if self.p_star > self.p_left:
            return self.u_left - self.a_left * _shock_factor(self.eos_left, self.p_star, self.p_left)
        return self.u_left - self.a_left

    def _right_head(self) -> float:
        if self.p_star > self.p_right:
            return self.u_right + self.a_right * _shock_factor(self.eos_right, self.p_star, self.p_right)
        return self.u_right + self.a_right

    def compute_waves_extrema(self) -> None:
        """Compute only the outer wave speeds s1 and s4."""
        self.s1 = self._left_head()
        self.s4 = self._right_head()

    def compute_waves(self) -> None:
        """Compute star densities, star sound speeds and all four wave speeds."""
        if self.estimate == PVL:
            self.r_star_left, self.r_star_right = self._linearized_star_densities()
        else:
            self.r_star_left = self.r_left * (self.p_star / self.p_left) ** (1.0 / self.eos_left.gamma)
            self.r_star_right = self.r_right * (self.p_star / self.p_right) ** (1.0 / self.eos_right.gamma)

        # isentropic: a* = a_K (p* / p_K)^((γ - 1) / 2γ)
        self.a_star_left = self.a_left * (self.p_star / self.p_left) ** (1.0 / self.eos_left.eta)
        self.a_star_right = self.a_right * (self.p_star / self.p_right) ** (1.0 / self.eos_right.eta)

        s1 = self._left_head()
        s2 = s1 if self.p_star > self.p_left else self.u_star - self.a_star_left
        s4 = self._right_head()
        s3 = s4 if self.p_star > self.p_right else self.u_star + self.a_star_right
        if self.estimate == VACUUM:
            s2 = self.u_left + self.a_left / self.eos_left.delta
            s3 = self.u_right - self.a_right / self.eos_right.delta

        s2 = min(s2, self.u_star)
        s3 = max(s3, self.u_star)
        self.s1 = min(s1, s2)
        self.s2 = s2
        self.s3 = s3
        self.s4 = max(s4, s3)
        self.waves_computed = True

    # --- fluxes ---

    def _sonic_left(self) -> tuple[float, float, float]:
        """Density, velocity, pressure at the interface inside a left rarefaction."""
        eos = self.eos_left
        c = max(2.0 / eos.gp1 * (1.0 + eos.delta * self.u_left / self.a_left), 0.0)
        u = 2.0 / eos.gp1 * (self.a_left + eos.delta * self.u_left)
        return self.r_left * c ** (1.0 / eos.delta), u, self.p_left * c ** eos.eta

    def _sonic_right(self) -> tuple[float, float, float]:
        """Density, velocity, pressure at the interface inside a right rarefaction."""
        eos = self.eos_right
        c = max(2.0 / eos.gp1 * (1.0 - eos.delta * self.u_right / self.a_right), 0.0)
        u = 2.0 / eos.gp1 * (-self.a_right + eos.delta * self.u_right)
        return self.r_right * c ** (1.0 / eos.delta), u, self.p_right * c ** eos.eta

    def compute_fluxes(
        self,
        normal: VectorLike | None = None,
        fluxes: State | None = None,
    ) -> ConservativeState:
        """
        Return the flux of the fan region containing the interface (ξ = 0).

        Parameters
        ----------
        normal : array-like or None
            Face normal; defaults to the normal the pattern was built with.
        fluxes : ConservativeState or None
            Output object, overwritten in place when given.

        Raises
        ------
        RuntimeError
            If ``compute_waves`` has not been called.
        """
        if not self.waves_computed:
            raise RuntimeError("compute_waves() must be called before compute_fluxes()")
        normal = self.normal if normal is None else as_vector(normal)

        if self.s1 >= 0.0:
            result = self.state_left.compute_fluxes(self.eos_left, normal)
        elif self.s4 <= 0.0:
            result = self.state_right.compute_fluxes(self.eos_right, normal)
        elif self.s2 > 0.0:
            r, u, p = self._sonic_left()
            result = ConservativeState().compute_fluxes_from_primitive(
                self.eos_left, p, r, u, normal, self.t_left,
            )
        elif self.estimate == VACUUM and self.s3 >= 0.0:
            result = ConservativeState()
        elif self.u_star >= 0.0:
            result = ConservativeState().compute_fluxes_from_primitive(
                self.eos_left, self.p_star, self.r_star_left, self.u_star, normal, self.t_left,
            )
        elif self.s3 >= 0.0:
            result = ConservativeState().compute_fluxes_from_primitive(
                self.eos_right, self.p_star, self.r_star_right, self.u_star, normal, self.t_right,
            )
        else:
            r, u, p = self._sonic_right()
            result = ConservativeState().compute_fluxes_from_primitive(
                self.eos_right, p, r, u, normal, self.t_right,
            )
        return store_fluxes(result, fluxes)

    def description(self, prefix: str = "") -> str:
        """Return a pretty-formatted description of the pattern."""
        rows = [
            ("u_left", self.u_left), ("u_right", self.u_right),
            ("p_left", self.p_left), ("p_right", self.p_right),
            ("a_left", self.a_left), ("a_right", self.a_right),
            ("p_star", self.p_star), ("u_star", self.u_star),
            ("r_star_left", self.r_star_left), ("r_star_right", self.r_star_right),
            ("s1", self.s1), ("s2", self.s2), ("s3", self.s3), ("s4", self.s4),
        ]
        width = max(len(label) for label, _ in rows)
        return "\n".join(f"{prefix}{label:<{width}} = {format_real(value)}" for label, value in rows)
