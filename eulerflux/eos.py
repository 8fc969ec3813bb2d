"""
Equation of State (EOS) for compressible flow.

Implements the calorically perfect (ideal) gas:

    p = ρ (γ - 1) e = ρ R T
    e = cv T

Where:
    p  = pressure
    ρ  = density
    e  = specific internal energy
    T  = temperature
    γ  = cp / cv, heat capacity ratio
    R  = cp - cv, specific gas constant

The stand-alone functions work element-wise on floats or numpy arrays. The
``IdealGasEOS`` object bundles the gas constants and selects a formula from
the set of quantities it is given.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Union

import numpy as np
from numpy.typing import NDArray

from .errors import InvalidArgumentCombination, cast_eos
from .registry import register_eos
from .vectors import format_real

Real = Union[NDArray[np.float64], float]


# ---------------------------------------------------------------------------
# Ideal-gas relations
# ---------------------------------------------------------------------------

def density_from_energy(p: Real, e: Real, gamma: float) -> Real:
    """
    Compute density from pressure and specific internal energy.

    ρ = p / ((γ - 1) e)

    Parameters
    ----------
    p : array or float
        Pressure.
    e : array or float
        Specific internal energy.
    gamma : float
        Heat capacity ratio.

    Returns
    -------
    array or float
        Density.
    """
    return p / ((gamma - 1.0) * e)


def density_from_sound_speed(p: Real, a: Real, gamma: float) -> Real:
    """Compute density from pressure and speed of sound: ρ = γ p / a²."""
    return gamma * p / (a * a)


def density_from_temperature(p: Real, T: Real, R: float) -> Real:
    """Compute density from pressure and temperature: ρ = p / (R T)."""
    return p / (R * T)


def pressure_from_energy(rho: Real, e: Real, gamma: float) -> Real:
    """
    Compute pressure from density and specific internal energy.

    p = ρ (γ - 1) e

    Parameters
    ----------
    rho : array or float
        Density.
    e : array or float
        Specific internal energy.
    gamma : float
        Heat capacity ratio.

    Returns
    -------
    array or float
        Pressure.
    """
    return rho * (gamma - 1.0) * e


def pressure_from_temperature(rho: Real, T: Real, R: float) -> Real:
    """Compute pressure from density and temperature: p = ρ R T."""
    return rho * R * T


def internal_energy_from_pressure(rho: Real, p: Real, gamma: float) -> Real:
    """
    Compute specific internal energy from density and pressure.

    e = p / (ρ (γ - 1))

    Parameters
    ----------
    rho : array or float
        Density.
    p : array or float
        Pressure.
    gamma : float
        Heat capacity ratio.

    Returns
    -------
    array or float
        Specific internal energy.
    """
    return p / (rho * (gamma - 1.0))


def internal_energy_from_temperature(T: Real, cv: float) -> Real:
    """Compute specific internal energy from temperature: e = cv T."""
    return cv * T


def temperature_from_pressure(rho: Real, p: Real, R: float) -> Real:
    """Compute temperature from density and pressure: T = p / (R ρ)."""
    return p / (R * rho)


def temperature_from_energy(e: Real, cv: float) -> Real:
    """Compute temperature from specific internal energy: T = e / cv."""
    return e / cv


def sound_speed(rho: Real, p: Real, gamma: float) -> Real:
    """
    Compute sound speed.

    a = sqrt(γ p / ρ)

    Parameters
    ----------
    rho : array or float
        Density.
    p : array or float
        Pressure.
    gamma : float
        Heat capacity ratio.

    Returns
    -------
    array or float
        Sound speed.
    """
    return np.sqrt(gamma * p / rho)


def total_energy_from_primitives(
    rho: float,
    velocity: NDArray[np.float64],
    p: float,
    gamma: float,
) -> float:
    """
    Compute total energy per unit volume from primitive variables.

    E = p / (γ - 1) + ½ ρ |v|²
    """
    return p / (gamma - 1.0) + 0.5 * rho * float(np.dot(velocity, velocity))


def pressure_from_total_energy(
    rho: float,
    momentum: NDArray[np.float64],
    E: float,
    gamma: float,
) -> float:
    """
    Compute pressure from conserved variables.

    p = (γ - 1) [E - ½ ρ |v|²],  v = m / ρ
    """
    velocity = momentum / rho
    return (gamma - 1.0) * (E - 0.5 * rho * float(np.dot(velocity, velocity)))


# ---------------------------------------------------------------------------
# EOS objects
# ---------------------------------------------------------------------------

Formula = Callable[..., Real]


def _select_formula(
    quantity: str,
    table: dict[frozenset[str], Formula],
    given: dict[str, Any],
) -> tuple[Formula, dict[str, Any]]:
    """Pick the formula matching exactly the supplied (non-None) arguments."""
    supplied = {name: value for name, value in given.items() if value is not None}
    formula = table.get(frozenset(supplied))
    if formula is None:
        accepted = " | ".join(
            "{" + ", ".join(sorted(combo)) + "}" for combo in table
        )
        got = ", ".join(sorted(supplied)) or "nothing"
        raise InvalidArgumentCombination(
            f"Cannot compute {quantity} from {{{got}}}. Accepted: {accepted}"
        )
    return formula, supplied


class EquationOfState(ABC):
    """
    Abstract equation of state.

    Concrete variants expose the gas constants ``cp``, ``cv``, ``gamma``,
    ``R``, ``gm1`` (γ - 1), ``gp1`` (γ + 1), ``delta`` ((γ - 1) / 2) and
    ``eta`` (2 γ / (γ - 1)) as attributes, and implement the thermodynamic
    relations below. The relations take keyword arguments only; the set of
    arguments supplied selects the formula.
    """

    @abstractmethod
    def density(self, **given: Real) -> Real:
        """Return density from ``{energy, pressure}``, ``{pressure, speed_of_sound}`` or ``{pressure, temperature}``."""

    @abstractmethod
    def pressure(self, **given: Real) -> Real:
        """Return pressure from ``{density, energy}`` or ``{density, temperature}``."""

    @abstractmethod
    def energy(self, **given: Real) -> Real:
        """Return specific internal energy from ``{density, pressure}`` or ``{temperature}``."""

    @abstractmethod
    def temperature(self, **given: Real) -> Real:
        """Return temperature from ``{density, pressure}`` or ``{energy}``."""

    @abstractmethod
    def speed_of_sound(self, density: Real, pressure: Real) -> Real:
        """Return the speed of sound."""

    @abstractmethod
    def description(self, prefix: str = "") -> str:
        """Return a pretty-formatted description."""


_CONSTRUCTION_PAIRS: dict[frozenset[str], Callable[..., tuple[float, float]]] = {
    frozenset({"cp", "cv"}): lambda cp, cv: (cp, cv),
    frozenset({"gamma", "R"}): lambda gamma, R: (gamma * (R / (gamma - 1.0)), R / (gamma - 1.0)),
    frozenset({"gamma", "cp"}): lambda gamma, cp: (cp, cp / gamma),
    frozenset({"gamma", "cv"}): lambda gamma, cv: (gamma * cv, cv),
    frozenset({"R", "cp"}): lambda R, cp: (cp, cp - R),
    frozenset({"R", "cv"}): lambda R, cv: (cv + R, cv),
}


@dataclass(frozen=True)
class IdealGasEOS(EquationOfState):
    """
    Ideal (calorically perfect) gas.

    Only ``cp`` and ``cv`` are stored; every other constant is derived in
    ``__post_init__``, so ``dataclasses.replace(eos, cp=...)`` gives a fully
    consistent new object.

    Attributes
    ----------
    cp : float
        Specific heat at constant pressure.
    cv : float
        Specific heat at constant volume.
    """
    cp: float
    cv: float
    gamma: float = field(init=False, compare=False)
    R: float = field(init=False, compare=False)
    gm1: float = field(init=False, repr=False, compare=False)
    gp1: float = field(init=False, repr=False, compare=False)
    delta: float = field(init=False, repr=False, compare=False)
    eta: float = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        cp = float(self.cp)
        cv = float(self.cv)
        if not cv > 0.0:
            raise ValueError(f"cv must be positive, got {cv}")
        if not cp > cv:
            raise ValueError(f"cp must be greater than cv, got cp={cp}, cv={cv}")
        gamma = cp / cv
        derived = {
            "cp": cp,
            "cv": cv,
            "gamma": gamma,
            "R": cp - cv,
            "gm1": gamma - 1.0,
            "gp1": gamma + 1.0,
            "delta": (gamma - 1.0) * 0.5,
            "eta": 2.0 * gamma / (gamma - 1.0),
        }
        for name, value in derived.items():
            object.__setattr__(self, name, value)

    @classmethod
    def from_parameters(
        cls,
        cp: float | None = None,
        cv: float | None = None,
        gamma: float | None = None,
        R: float | None = None,
    ) -> "IdealGasEOS":
        """
        Build an ideal gas from any two of ``cp``, ``cv``, ``gamma``, ``R``.

        Raises
        ------
        InvalidArgumentCombination
            If not exactly two parameters are given.
        ValueError
            If the resulting constants are not physical.
        """
        given = {"cp": cp, "cv": cv, "gamma": gamma, "R": R}
        supplied = {name: float(value) for name, value in given.items() if value is not None}
        build = _CONSTRUCTION_PAIRS.get(frozenset(supplied))
        if build is None:
            got = ", ".join(sorted(supplied)) or "nothing"
            raise InvalidArgumentCombination(
                f"An ideal gas needs exactly two of cp, cv, gamma, R; got {{{got}}}"
            )
        if "gamma" in supplied and supplied["gamma"] <= 1.0:
            raise ValueError(f"gamma must be greater than 1, got {supplied['gamma']}")
        cp_, cv_ = build(**supplied)
        return cls(cp=cp_, cv=cv_)

    def assign(self, other: EquationOfState) -> "IdealGasEOS":
        """
        Return a copy of ``other`` with all derived constants recomputed.

        The instance is immutable, so assignment yields a new object; the
        caller rebinds its name to the result.

        Raises
        ------
        StateTypeError
            If ``other`` is not an ``IdealGasEOS``.
        """
        other = cast_eos(other, IdealGasEOS, context="IdealGasEOS.assign")
        return replace(other)

    # --- thermodynamic relations ---

    def density(
        self,
        *,
        energy: Real | None = None,
        pressure: Real | None = None,
        speed_of_sound: Real | None = None,
        temperature: Real | None = None,
    ) -> Real:
        table = {
            frozenset({"energy", "pressure"}):
                lambda energy, pressure: density_from_energy(pressure, energy, self.gamma),
            frozenset({"pressure", "speed_of_sound"}):
                lambda pressure, speed_of_sound: density_from_sound_speed(pressure, speed_of_sound, self.gamma),
            frozenset({"pressure", "temperature"}):
                lambda pressure, temperature: density_from_temperature(pressure, temperature, self.R),
        }
        formula, supplied = _select_formula("density", table, {
            "energy": energy, "pressure": pressure,
            "speed_of_sound": speed_of_sound, "temperature": temperature,
        })
        return formula(**supplied)

    def pressure(
        self,
        *,
        density: Real | None = None,
        energy: Real | None = None,
        temperature: Real | None = None,
    ) -> Real:
        table = {
            frozenset({"density", "energy"}):
                lambda density, energy: pressure_from_energy(density, energy, self.gamma),
            frozenset({"density", "temperature"}):
                lambda density, temperature: pressure_from_temperature(density, temperature, self.R),
        }
        formula, supplied = _select_formula("pressure", table, {
            "density": density, "energy": energy, "temperature": temperature,
        })
        return formula(**supplied)

    def energy(
        self,
        *,
        density: Real | None = None,
        pressure: Real | None = None,
        temperature: Real | None = None,
    ) -> Real:
        table = {
            frozenset({"density", "pressure"}):
                lambda density, pressure: internal_energy_from_pressure(density, pressure, self.gamma),
            frozenset({"temperature"}):
                lambda temperature: internal_energy_from_temperature(temperature, self.cv),
        }
        formula, supplied = _select_formula("energy", table, {
            "density": density, "pressure": pressure, "temperature": temperature,
        })
        return formula(**supplied)

    def temperature(
        self,
        *,
        density: Real | None = None,
        energy: Real | None = None,
        pressure: Real | None = None,
    ) -> Real:
        table = {
            frozenset({"density", "pressure"}):
                lambda density, pressure: temperature_from_pressure(density, pressure, self.R),
            frozenset({"energy"}):
                lambda energy: temperature_from_energy(energy, self.cv),
        }
        formula, supplied = _select_formula("temperature", table, {
            "density": density, "energy": energy, "pressure": pressure,
        })
        return formula(**supplied)

    def speed_of_sound(self, density: Real, pressure: Real) -> Real:
        return sound_speed(density, pressure, self.gamma)

    def description(self, prefix: str = "") -> str:
        return "\n".join([
            f"{prefix}cp  = {format_real(self.cp)}",
            f"{prefix}cv  = {format_real(self.cv)}",
        ])


@register_eos("ideal_gas")
def make_eos(
    cp: float | None = None,
    cv: float | None = None,
    gamma: float | None = None,
    R: float | None = None,
) -> IdealGasEOS:
    """
    Create an ideal-gas EOS from any two of ``cp``, ``cv``, ``gamma``, ``R``.

    Examples
    --------
    >>> eos = make_eos(gamma=1.4, R=287.0)
    >>> round(eos.cv, 6), round(eos.cp, 6)
    (717.5, 1004.5)
    """
    return IdealGasEOS.from_parameters(cp=cp, cv=cv, gamma=gamma, R=R)
