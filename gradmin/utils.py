"""Vector helpers and finite differences.

Pure NumPy, deterministic, no SciPy dependency.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from .core import Array, Objective
from .errors import DimensionMismatch


def check_dimension(x: Array, n: int, what: str = "argument") -> Array:
    """Return ``x`` as a 1-D float array, failing unless it is a vector of length ``n``."""
    arr = np.asarray(x, dtype=float)
    if arr.ndim != 1:
        raise DimensionMismatch(n, arr.size, f"{what} of shape {arr.shape}")
    if arr.shape[0] != n:
        raise DimensionMismatch(n, arr.shape[0], what)
    return arr


def check_point(x: Array, n: int) -> Array:
    """Validate a vector that a minimizer is going to update in place."""
    if not isinstance(x, np.ndarray) or not np.issubdtype(x.dtype, np.floating):
        raise TypeError("The start vector must be a floating-point numpy array.")
    if x.ndim != 1 or x.shape[0] != n:
        raise DimensionMismatch(n, x.size, "start vector")
    return x


def forward_difference_gradient(
    fun: Objective, x: Array, eps: float, fx: Optional[float] = None
) -> Array:
    """Compute a forward-difference gradient approximation.

    Parameters
    ----------
    fun:
        Objective function returning a scalar given x.
    x:
        Point where the gradient is approximated.
    eps:
        Non-zero perturbation; a negative value gives a backward difference.
    fx:
        Known value ``fun(x)``; evaluated when omitted.
    """
    if eps == 0 or not np.isfinite(eps):
        raise ValueError("eps must be finite and non-zero")
    point = np.array(x, dtype=float)
    if fx is None:
        fx = float(fun(point))
    grad = np.empty_like(point)
    for i in range(point.size):
        saved = point[i]
        point[i] = saved + eps
        grad[i] = (float(fun(point)) - fx) / eps
        point[i] = saved
    return grad


__all__ = ["check_dimension", "check_point", "forward_difference_gradient"]
