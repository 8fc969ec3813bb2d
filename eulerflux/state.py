"""
Conservative and primitive states of the compressible Euler equations.

Both variants hold the same shape of data, a {scalar, 3-vector, scalar}
triple:

    ConservativeState: ρ, m = ρ v, E = ρ e + ½ ρ |v|²
    PrimitiveState:    ρ, v,       p

Serialized layouts (fixed order, 5 scalars):

    conservative: [ρ, mx, my, mz, E]
    primitive:    [ρ, vx, vy, vz, p]
"""

from __future__ import annotations

import numbers
from abc import ABC
from dataclasses import dataclass, field
from typing import Any, ClassVar, TypeVar

import numpy as np
from numpy.typing import NDArray

from .eos import EquationOfState, total_energy_from_primitives
from .errors import InvalidStateError, cast_eos, cast_state
from .vectors import VectorLike, as_vector, format_real, format_vector, split_normal

S = TypeVar("S", bound="State")


class State(ABC):
    """
    Field-wise arithmetic shared by all state variants.

    Subclasses are dataclasses whose three fields, in ``_field_names`` order,
    are a scalar, a (3,) vector and a scalar. Operators act independently on
    each field and always return a new object of the same variant; operands
    of a different variant raise ``StateTypeError``.

    The state * state product is a plain per-field multiply; it has no
    physical meaning but is relied upon by limiter arithmetic.
    """

    _field_names: ClassVar[tuple[str, str, str]]

    # Keep numpy scalars from broadcasting over states; they defer to __rmul__.
    __array_ufunc__ = None

    def _values(self) -> tuple[float, NDArray[np.float64], float]:
        a, v, b = self._field_names
        return getattr(self, a), getattr(self, v), getattr(self, b)

    def _assign(self, first: float, vector: VectorLike, last: float) -> None:
        a, v, b = self._field_names
        setattr(self, a, float(first))
        setattr(self, v, as_vector(vector))
        setattr(self, b, float(last))

    def _same_variant(self: S, other: Any, operator: str) -> S:
        return cast_state(other, type(self), context=f"operator {operator}")

    # --- operators ---

    def __add__(self: S, other: Any) -> S:
        other = self._same_variant(other, "+")
        a1, v1, b1 = self._values()
        a2, v2, b2 = other._values()
        return type(self)(a1 + a2, v1 + v2, b1 + b2)

    def __sub__(self: S, other: Any) -> S:
        other = self._same_variant(other, "-")
        a1, v1, b1 = self._values()
        a2, v2, b2 = other._values()
        return type(self)(a1 - a2, v1 - v2, b1 - b2)

    def __mul__(self: S, other: Any) -> S:
        a1, v1, b1 = self._values()
        if isinstance(other, State):
            other = self._same_variant(other, "*")
            a2, v2, b2 = other._values()
            return type(self)(a1 * a2, v1 * v2, b1 * b2)
        if isinstance(other, numbers.Real):
            scale = float(other)
            return type(self)(a1 * scale, v1 * scale, b1 * scale)
        return NotImplemented

    def __rmul__(self: S, other: Any) -> S:
        if isinstance(other, numbers.Real):
            scale = float(other)
            a1, v1, b1 = self._values()
            return type(self)(scale * a1, scale * v1, scale * b1)
        return NotImplemented

    def __truediv__(self: S, other: Any) -> S:
        if not isinstance(other, numbers.Real):
            return NotImplemented
        scale = float(other)
        a1, v1, b1 = self._values()
        return type(self)(a1 / scale, v1 / scale, b1 / scale)

    def __pos__(self: S) -> S:
        a1, v1, b1 = self._values()
        return type(self)(+a1, +v1, +b1)

    def __neg__(self: S) -> S:
        a1, v1, b1 = self._values()
        return type(self)(-a1, -v1, -b1)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        a1, v1, b1 = self._values()
        a2, v2, b2 = other._values()  # type: ignore[attr-defined]
        return a1 == a2 and bool(np.array_equal(v1, v2)) and b1 == b2

    __hash__ = None  # type: ignore[assignment]

    def isclose(self, other: "State", rtol: float = 1e-12, atol: float = 0.0) -> bool:
        """Compare with another state of the same variant within tolerance."""
        other = self._same_variant(other, "isclose")
        return bool(np.allclose(self.array(), other.array(), rtol=rtol, atol=atol))

    # --- lifecycle ---

    def initialize(self, source: "State | None" = None) -> None:
        """
        Reset all fields to zero, or copy them from ``source``.

        Raises
        ------
        StateTypeError
            If ``source`` is not of the same variant.
        """
        if source is None:
            self.destroy()
            return
        source = self._same_variant(source, "initialize")
        a, v, b = source._values()
        self._assign(a, v.copy(), b)

    def destroy(self) -> None:
        """Reset all fields to zero."""
        self._assign(0.0, np.zeros(3), 0.0)

    def copy(self: S) -> S:
        """Create a copy of the state."""
        a, v, b = self._values()
        return type(self)(a, v.copy(), b)

    # --- serialization ---

    def array(self) -> NDArray[np.float64]:
        """Return the serialized 5-element array of the state."""
        a, v, b = self._values()
        return np.array([a, v[0], v[1], v[2], b], dtype=np.float64)

    @classmethod
    def from_array(cls: type[S], values: VectorLike) -> S:
        """Build a state from its serialized 5-element array."""
        arr = np.asarray(values, dtype=np.float64).ravel()
        if arr.size != 5:
            raise InvalidStateError(
                f"{cls.__name__} array must have 5 entries, got {arr.size}"
            )
        return cls(arr[0], arr[1:4], arr[4])

    def description(self, prefix: str = "") -> str:
        """Return a pretty-formatted multi-line description."""
        names = self._field_names
        width = max(len(name) for name in names)
        a, v, b = self._values()
        return "\n".join([
            f"{prefix}{names[0]:<{width}} = {format_real(a)}",
            f"{prefix}{names[1]:<{width}} = {format_vector(v)}",
            f"{prefix}{names[2]:<{width}} = {format_real(b)}",
        ])


@dataclass(eq=False)
class ConservativeState(State):
    """
    Conservative variables of a compressible fluid.

    Attributes
    ----------
    density : float
        Density ρ.
    momentum : ndarray, shape (3,)
        Momentum ρ v.
    energy : float
        Total energy per unit volume ρ E.
    """
    density: float = 0.0
    momentum: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    energy: float = 0.0

    _field_names: ClassVar[tuple[str, str, str]] = ("density", "momentum", "energy")

    def __post_init__(self) -> None:
        self._assign(self.density, self.momentum, self.energy)

    def velocity(self) -> NDArray[np.float64]:
        """
        Return the velocity vector m / ρ.

        Raises
        ------
        InvalidStateError
            If the density is not positive.
        """
        if not self.density > 0.0:
            raise InvalidStateError(
                f"Cannot compute velocity of a state with density {self.density!r}"
            )
        return self.momentum / self.density

    def pressure(self, eos: EquationOfState) -> float:
        """Return pressure p = (γ - 1) (E - ½ ρ |v|²)."""
        eos = cast_eos(eos, context="ConservativeState.pressure")
        velocity = self.velocity()
        return eos.gm1 * (self.energy - 0.5 * self.density * float(np.dot(velocity, velocity)))

    def normalize(self, normal: VectorLike) -> tuple[float, NDArray[np.float64]]:
        """
        Split the velocity against a face normal.

        Returns
        -------
        tuple
            (normal velocity component, tangential velocity vector)
        """
        return split_normal(self.velocity(), as_vector(normal))

    def compute_fluxes(
        self,
        eos: EquationOfState,
        normal: VectorLike,
        fluxes: "ConservativeState | None" = None,
    ) -> "ConservativeState":
        """
        Compute the physical Euler flux projected on ``normal``.

            F_ρ = m · n
            F_m = ρ v (v · n) + p n
            F_E = (E + p) (v · n)

        Parameters
        ----------
        eos : EquationOfState
            Equation of state of this state.
        normal : array-like, shape (3,)
            Face normal.
        fluxes : ConservativeState or None
            Output object, overwritten in place when given.

        Returns
        -------
        ConservativeState
            The fluxes (``fluxes`` itself when supplied).
        """
        normal = as_vector(normal)
        pressure = self.pressure(eos)
        velocity = self.velocity()
        velocity_normal = float(np.dot(velocity, normal))
        result = ConservativeState(
            density=float(np.dot(self.momentum, normal)),
            momentum=self.density * velocity * velocity_normal + pressure * normal,
            energy=(self.energy + pressure) * velocity_normal,
        )
        return store_fluxes(result, fluxes)

    def compute_fluxes_from_primitive(
        self,
        eos: EquationOfState,
        p: float,
        r: float,
        u: float,
        normal: VectorLike,
        tangential: VectorLike | None = None,
    ) -> "ConservativeState":
        """
        Overwrite this state with the flux of an interface state.

        The interface state is given by pressure ``p``, density ``r`` and
        normal velocity ``u``; ``tangential`` is the tangential velocity
        advected with it (zero when omitted).

            F_ρ = r u
            F_m = (r u² + p) n + r u t
            F_E = (r e(r, p) + ½ r (u² + |t|²) + p) u

        Returns
        -------
        ConservativeState
            ``self``.
        """
        if not r > 0.0:
            raise InvalidStateError(f"Interface density must be positive, got {r!r}")
        eos = cast_eos(eos, context="ConservativeState.compute_fluxes_from_primitive")
        normal = as_vector(normal)
        t = as_vector(tangential)
        self.density = r * u
        self.momentum = (r * u * u + p) * normal + r * u * t
        self.energy = (
            r * eos.energy(density=r, pressure=p)
            + r * u * u * 0.5
            + r * float(np.dot(t, t)) * 0.5
            + p
        ) * u
        return self


@dataclass(eq=False)
class PrimitiveState(State):
    """
    Primitive variables of a compressible fluid.

    Attributes
    ----------
    density : float
        Density ρ.
    velocity : ndarray, shape (3,)
        Velocity v.
    pressure : float
        Pressure p.
    """
    density: float = 0.0
    velocity: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    pressure: float = 0.0

    _field_names: ClassVar[tuple[str, str, str]] = ("density", "velocity", "pressure")

    def __post_init__(self) -> None:
        self._assign(self.density, self.velocity, self.pressure)

    def momentum(self) -> NDArray[np.float64]:
        """Return momentum ρ v."""
        return self.density * self.velocity

    def energy(self, eos: EquationOfState) -> float:
        """Return total energy per unit volume p / (γ - 1) + ½ ρ |v|²."""
        eos = cast_eos(eos, context="PrimitiveState.energy")
        return total_energy_from_primitives(self.density, self.velocity, self.pressure, eos.gamma)

    def normalize(self, normal: VectorLike) -> tuple[float, NDArray[np.float64]]:
        """Return (normal velocity component, tangential velocity vector)."""
        return split_normal(self.velocity, as_vector(normal))


def store_fluxes(result: ConservativeState, fluxes: State | None) -> ConservativeState:
    """Copy ``result`` into ``fluxes`` when given, else return ``result``."""
    if fluxes is None:
        return result
    fluxes = cast_state(fluxes, ConservativeState, context="fluxes output")
    fluxes.initialize(result)
    return fluxes
