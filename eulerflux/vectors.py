"""
Helpers for the 3-component vectors carried by states and face normals.
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np
from numpy.typing import NDArray

VectorLike = Union[Sequence[float], NDArray[np.float64]]

UNIT_TOLERANCE = 1e-10


def as_vector(values: VectorLike | None) -> NDArray[np.float64]:
    """
    Return a fresh float64 array of shape (3,).

    Shorter inputs (1D or 2D vectors) are padded with zeros; ``None`` gives
    the zero vector.
    """
    if values is None:
        return np.zeros(3)
    arr = np.asarray(values, dtype=np.float64).ravel()
    if arr.size > 3:
        raise ValueError(f"Expected at most 3 vector components, got {arr.size}")
    out = np.zeros(3)
    out[: arr.size] = arr
    return out


def as_normal(values: VectorLike, tol: float = UNIT_TOLERANCE) -> NDArray[np.float64]:
    """
    Return ``values`` as a (3,) array, checking it has unit length.

    Raises
    ------
    ValueError
        If the vector norm differs from 1 by more than ``tol``.
    """
    normal = as_vector(values)
    norm = float(np.linalg.norm(normal))
    if abs(norm - 1.0) > tol:
        raise ValueError(f"Face normal must be a unit vector, got |n| = {norm:.6g}")
    return normal


def split_normal(
    vector: NDArray[np.float64],
    normal: NDArray[np.float64],
) -> tuple[float, NDArray[np.float64]]:
    """
    Split ``vector`` into its component along ``normal`` and the tangential rest.

    Returns
    -------
    tuple
        (normal component, tangential vector)
    """
    un = float(np.dot(vector, normal))
    return un, vector - un * normal


# ---------------------------------------------------------------------------
# Formatting for human-readable descriptions
# ---------------------------------------------------------------------------

def format_real(value: float) -> str:
    """Format a scalar with 15 significant digits."""
    return f"{float(value):+.14E}"


def format_vector(values: NDArray[np.float64]) -> str:
    """Format a vector as space-separated scalars."""
    return " ".join(format_real(v) for v in np.asarray(values).ravel())
