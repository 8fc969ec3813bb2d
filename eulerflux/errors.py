"""
Exception types raised by the flux library.

Every error derives from ``EulerFluxError`` and from the builtin exception
it refines, so callers can catch either.
"""

from __future__ import annotations

from typing import Any, TypeVar

T = TypeVar("T")


class EulerFluxError(Exception):
    """Base class for all library errors."""


class StateTypeError(EulerFluxError, TypeError):
    """A state or EOS is not of the concrete variant an operation requires."""


class InvalidArgumentCombination(EulerFluxError, ValueError):
    """The supplied keyword arguments do not select a known formula."""


class InvalidStateError(EulerFluxError, ValueError):
    """A state holds values that make the requested quantity undefined."""


def _cast(obj: Any, cls: type[T], what: str, context: str | None) -> T:
    if isinstance(obj, cls):
        return obj
    message = f"cast {type(obj).__name__} to {cls.__name__} failed ({what})"
    if context:
        message = f"{message}: {context}"
    raise StateTypeError(message)


def cast_state(obj: Any, cls: type[T], context: str | None = None) -> T:
    """
    Return ``obj`` if it is an instance of the state class ``cls``.

    Parameters
    ----------
    obj : State
        Object to check.
    cls : type
        Required concrete state class.
    context : str or None
        Extra text appended to the error message.

    Raises
    ------
    StateTypeError
        If ``obj`` is not a ``cls`` instance.
    """
    return _cast(obj, cls, "state", context)


def cast_eos(obj: Any, cls: type[T] | None = None, context: str | None = None) -> T:
    """Return ``obj`` if it is an equation of state (of class ``cls`` when given)."""
    if cls is None:
        from .eos import EquationOfState
        cls = EquationOfState  # type: ignore[assignment]
    return _cast(obj, cls, "equation of state", context)  # type: ignore[arg-type]
