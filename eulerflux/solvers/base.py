"""
Base class for approximate Riemann solvers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from itertools import repeat
from typing import ClassVar, Iterable, Sequence, Union

from ..eos import EquationOfState
from ..errors import cast_eos, cast_state
from ..state import ConservativeState, State
from ..vectors import VectorLike, as_normal

# Primitive-variable subsets accepted to parameterize the linearization.
# They all select the same formula at present.
LINEARIZATIONS: tuple[str, ...] = ("u23", "up23", "upr23")
DEFAULT_LINEARIZATION = "up23"

EOSInput = Union[EquationOfState, Sequence[EquationOfState]]


class RiemannSolver(ABC):
    """
    Abstract approximate Riemann solver.

    ``solve`` is a pure function of its inputs: a solver only stores its
    configuration string and may be shared between threads.
    """

    label: ClassVar[str] = "Riemann"

    def __init__(self, config: str | None = None):
        self.config = DEFAULT_LINEARIZATION
        self.initialize(config)

    def initialize(self, config: str | None = None) -> None:
        """
        Configure the solver.

        Parameters
        ----------
        config : str or None
            One of "u23", "up23", "upr23" (default "up23").

        Raises
        ------
        ValueError
            If ``config`` is not an accepted value.
        """
        if config is None:
            config = DEFAULT_LINEARIZATION
        if config not in LINEARIZATIONS:
            raise ValueError(
                f"Unknown {self.label} solver configuration '{config}'. "
                f"Available: {', '.join(LINEARIZATIONS)}"
            )
        self.config = config

    def destroy(self) -> None:
        """Reset the solver to its default configuration."""
        self.config = DEFAULT_LINEARIZATION

    def description(self, prefix: str = "") -> str:
        """Return a pretty-formatted description of the solver."""
        return f"{prefix}{self.label} solver\n{prefix}config = {self.config}"

    def _check_inputs(
        self,
        eos_left: EquationOfState,
        state_left: State,
        eos_right: EquationOfState,
        state_right: State,
        normal: VectorLike,
    ):
        context = f"{self.label} solver"
        return (
            cast_eos(eos_left, context=f"{context}, left EOS"),
            cast_state(state_left, ConservativeState, context=f"{context}, left state"),
            cast_eos(eos_right, context=f"{context}, right EOS"),
            cast_state(state_right, ConservativeState, context=f"{context}, right state"),
            as_normal(normal),
        )

    @abstractmethod
    def solve(
        self,
        eos_left: EquationOfState,
        state_left: State,
        eos_right: EquationOfState,
        state_right: State,
        normal: VectorLike,
        fluxes: State | None = None,
    ) -> ConservativeState:
        """
        Solve the Riemann problem across a face.

        Parameters
        ----------
        eos_left, eos_right : EquationOfState
            Equations of state of the two sides.
        state_left, state_right : ConservativeState
            Riemann states.
        normal : array-like, shape (3,)
            Unit normal of the face, pointing from left to right.
        fluxes : ConservativeState or None
            Output object, overwritten in place when given.

        Returns
        -------
        ConservativeState
            Interface flux.
        """

    def solve_faces(
        self,
        eos_left: EOSInput,
        states_left: Iterable[State],
        eos_right: EOSInput,
        states_right: Iterable[State],
        normals: Iterable[VectorLike],
    ) -> list[ConservativeState]:
        """
        Solve a sequence of independent faces.

        ``eos_left``/``eos_right`` are either one EOS for every face or one
        per face.
        """
        eos_l = repeat(eos_left) if isinstance(eos_left, EquationOfState) else eos_left
        eos_r = repeat(eos_right) if isinstance(eos_right, EquationOfState) else eos_right
        return [
            self.solve(el, sl, er, sr, n)
            for el, sl, er, sr, n in zip(eos_l, states_left, eos_r, states_right, normals)
        ]
