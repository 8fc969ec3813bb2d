"""
Transformations between conservative and primitive compressible states.
"""

from __future__ import annotations

from .eos import EquationOfState
from .errors import cast_eos, cast_state
from .state import ConservativeState, PrimitiveState


def conservative_to_primitive(
    conservative: ConservativeState,
    eos: EquationOfState,
) -> PrimitiveState:
    """
    Convert a conservative state to primitives.

    Parameters
    ----------
    conservative : ConservativeState
        State to convert. Its density must be positive.
    eos : EquationOfState
        Equation of state of the fluid.

    Returns
    -------
    PrimitiveState
        (ρ, v = m / ρ, p)
    """
    conservative = cast_state(conservative, ConservativeState, context="conservative_to_primitive")
    eos = cast_eos(eos, context="conservative_to_primitive")
    return PrimitiveState(
        density=conservative.density,
        velocity=conservative.velocity(),
        pressure=conservative.pressure(eos),
    )


def primitive_to_conservative(
    primitive: PrimitiveState,
    eos: EquationOfState,
) -> ConservativeState:
    """
    Convert a primitive state to conservatives.

    Parameters
    ----------
    primitive : PrimitiveState
        State to convert.
    eos : EquationOfState
        Equation of state of the fluid.

    Returns
    -------
    ConservativeState
        (ρ, m = ρ v, E = p / (γ - 1) + ½ ρ |v|²)
    """
    primitive = cast_state(primitive, PrimitiveState, context="primitive_to_conservative")
    eos = cast_eos(eos, context="primitive_to_conservative")
    return ConservativeState(
        density=primitive.density,
        momentum=primitive.momentum(),
        energy=primitive.energy(eos),
    )
