"""Core containers shared across the minimizers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

import numpy as np

if TYPE_CHECKING:
    from .functions import DifferentiableFunction

Array = np.ndarray
Objective = Callable[[Array], float]
Gradient = Callable[[Array], Array]

# Golden-section constants: PHI = (sqrt(5) - 1) / 2 and the expansion weights.
PHI = (math.sqrt(5.0) - 1.0) / 2.0
PHI_PLUS_1 = PHI + 1.0
PHI_PLUS_2 = PHI + 2.0

# Default step of the forward-difference gradient.
FD_EPS = 1e-7


@dataclass(frozen=True)
class Problem:
    """Container describing a minimization problem through plain callables."""

    fun: Objective
    grad: Optional[Gradient] = None
    dim: Optional[int] = None
    eps: float = FD_EPS

    def as_function(self, dim: Optional[int] = None) -> "DifferentiableFunction":
        """Wrap the callables into a :class:`~gradmin.functions.CallableFunction`."""
        from .functions import CallableFunction

        n = self.dim if self.dim is not None else dim
        if n is None:
            raise ValueError("Problem dimension is unknown; pass dim explicitly.")
        return CallableFunction(self.fun, int(n), grad=self.grad, eps=self.eps)


@dataclass
class OptimizeResult:
    """Result of :func:`gradmin.minimize`."""

    x: Array
    fun: float
    nit: int
    grad_norm: float
    algorithm: str


__all__ = [
    "Array",
    "FD_EPS",
    "Gradient",
    "Objective",
    "OptimizeResult",
    "PHI",
    "PHI_PLUS_1",
    "PHI_PLUS_2",
    "Problem",
]
