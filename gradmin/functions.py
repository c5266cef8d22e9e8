"""Objective-function contracts consumed by the minimizers.

A :class:`Function` maps a vector of fixed length ``dimension`` to a float.
A :class:`DifferentiableFunction` additionally supplies its gradient and a
line search along a direction. :class:`OneDimensionalFunction` is the
scalar restriction ``g(t) = f(x + t d)`` the line-search engine works on.

Implementations override the protected hooks ``_value`` and ``_gradient``;
the public ``evaluate`` and ``gradient`` methods validate the argument length
first, so a wrong-sized vector always fails with
:class:`~gradmin.errors.DimensionMismatch`.

Example
-------
>>> import numpy as np
>>> from gradmin.functions import CallableFunction
>>> f = CallableFunction(lambda x: float(np.sum((x - 1.0) ** 2)), dim=2)
>>> f.evaluate(np.array([1.0, 1.0]))
0.0
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from .core import FD_EPS, Array, Gradient, Objective
from .errors import DimensionMismatch, EvaluationFailure, IllegalConfiguration
from .utils import check_dimension, forward_difference_gradient

_ARITHMETIC_ERRORS = (FloatingPointError, OverflowError, ZeroDivisionError)


class Function(ABC):
    """Scalar function of ``dimension`` real variables."""

    def __init__(self, dim: int) -> None:
        if int(dim) < 1:
            raise IllegalConfiguration("A function needs at least one variable.")
        self._dim = int(dim)

    @property
    def dimension(self) -> int:
        """Number of variables the function expects."""
        return self._dim

    def evaluate(self, x: Array) -> float:
        """Return ``f(x)``."""
        return float(self._value(check_dimension(x, self._dim)))

    @abstractmethod
    def _value(self, x: Array) -> float:
        """Compute ``f(x)`` for an already validated vector."""


class DifferentiableFunction(Function):
    """Function with a gradient and a line search along a direction."""

    def gradient(self, x: Array) -> Array:
        """Return the gradient of the function at ``x``."""
        grad = np.array(self._gradient(check_dimension(x, self._dim)), dtype=float)
        if grad.shape != (self._dim,):
            raise DimensionMismatch(self._dim, grad.size, "gradient")
        return grad

    @abstractmethod
    def _gradient(self, x: Array) -> Array:
        """Compute the gradient for an already validated vector."""

    def minimize_along_direction(
        self,
        x: Array,
        direction: Array,
        known_value: float,
        tol: float,
        start_distance: float,
    ) -> tuple[float, float]:
        """Approximately minimize ``t -> f(x + t * direction)`` for ``t >= 0``.

        Brackets a minimum starting at ``t = 0`` (whose value ``known_value``
        is not recomputed) and refines it with Brent's method. The
        projection onto the line is created on the first call and moved
        with :meth:`DirectionalProjection.set` afterwards.

        Returns
        -------
        tuple
            ``(step_length, f(x + step_length * direction))``.
        """
        from .line_search import brents_method, find_bracket

        projection = getattr(self, "_projection", None)
        if projection is None:
            projection = self._projection = DirectionalProjection(self, x, direction)
        else:
            projection.set(x, direction)
        bracket = find_bracket(projection, 0.0, start_distance, f_lower=known_value)
        return brents_method(
            projection,
            bracket.lower,
            bracket.middle,
            bracket.upper,
            tol,
            fx=bracket.f_middle,
        )


class NumericalDifferentiableFunction(DifferentiableFunction):
    """Differentiable function whose gradient is a forward difference.

    ``grad_i = (f(x + eps * e_i) - f(x)) / eps``; ``eps`` must be non-zero.
    """

    def __init__(self, dim: int, eps: float = FD_EPS) -> None:
        super().__init__(dim)
        if eps == 0 or not np.isfinite(eps):
            raise IllegalConfiguration("The finite-difference eps must be finite and non-zero.")
        self._eps = float(eps)

    @property
    def eps(self) -> float:
        return self._eps

    def _gradient(self, x: Array) -> Array:
        return forward_difference_gradient(self._value, x, self._eps)


class CallableFunction(NumericalDifferentiableFunction):
    """Differentiable function built from plain callables.

    Without ``grad`` the gradient falls back to forward differences.
    Arithmetic errors raised by the callables surface as
    :class:`~gradmin.errors.EvaluationFailure`.
    """

    def __init__(
        self,
        fun: Objective,
        dim: int,
        grad: Optional[Gradient] = None,
        eps: float = FD_EPS,
    ) -> None:
        super().__init__(dim, eps)
        self._fun = fun
        self._grad = grad

    def _value(self, x: Array) -> float:
        try:
            return float(self._fun(x))
        except _ARITHMETIC_ERRORS as exc:
            raise EvaluationFailure(f"Objective could not be evaluated: {exc}") from exc

    def _gradient(self, x: Array) -> Array:
        if self._grad is None:
            return super()._gradient(x)
        try:
            return np.asarray(self._grad(x), dtype=float)
        except _ARITHMETIC_ERRORS as exc:
            raise EvaluationFailure(f"Gradient could not be evaluated: {exc}") from exc


class OneDimensionalFunction(ABC):
    """Scalar function of one real variable."""

    @abstractmethod
    def evaluate(self, t: float) -> float:
        """Return the value at ``t``."""

    def __call__(self, t: float) -> float:
        return self.evaluate(t)


class DirectionalProjection(OneDimensionalFunction):
    """Restriction ``g(t) = f(x + t * d)`` of a multivariate function.

    ``x`` and ``d`` are copied on construction and refreshed in place by
    :meth:`set`; evaluation goes through one reused scratch vector.
    """

    def __init__(self, f: Function, x: Array, d: Array) -> None:
        self._f = f
        self._x = np.array(x, dtype=float)
        self._d = np.array(d, dtype=float)
        if self._x.shape != self._d.shape:
            raise DimensionMismatch(self._x.size, self._d.size, "direction")
        self._point = np.empty_like(self._x)

    def set(self, x: Array, d: Array) -> None:
        """Move the base point and direction without reallocating."""
        if np.shape(x) != self._x.shape:
            raise DimensionMismatch(self._x.size, np.size(x), "base point")
        if np.shape(d) != self._d.shape:
            raise DimensionMismatch(self._d.size, np.size(d), "direction")
        np.copyto(self._x, x)
        np.copyto(self._d, d)

    def evaluate(self, t: float) -> float:
        np.multiply(self._d, t, out=self._point)
        self._point += self._x
        try:
            return self._f.evaluate(self._point)
        except DimensionMismatch as exc:
            # only reachable through a programming error
            raise EvaluationFailure(str(exc)) from exc


class QuadraticFunction(OneDimensionalFunction):
    """The parabola ``a t^2 + b t + c``."""

    def __init__(self, a: float, b: float, c: float) -> None:
        self.a = float(a)
        self.b = float(b)
        self.c = float(c)

    @classmethod
    def from_points(
        cls, x1: float, y1: float, x2: float, y2: float, x3: float, y3: float
    ) -> "QuadraticFunction":
        """Fit the parabola through three points with distinct abscissae."""
        s12 = (y2 - y1) / (x2 - x1)
        s23 = (y3 - y2) / (x3 - x2)
        a = (s23 - s12) / (x3 - x1)
        b = s12 - a * (x1 + x2)
        c = y1 - (a * x1 + b) * x1
        return cls(a, b, c)

    def evaluate(self, t: float) -> float:
        return (self.a * t + self.b) * t + self.c

    def vertex(self) -> Optional[float]:
        """Abscissa of the extremum, or ``None`` for a straight line."""
        if self.a == 0:
            return None
        return -self.b / (2.0 * self.a)


class NegativeFunction(Function):
    """``-f`` for a :class:`Function` ``f``; turns maximization into minimization."""

    def __init__(self, f: Function) -> None:
        super().__init__(f.dimension)
        self._f = f

    def _value(self, x: Array) -> float:
        return -self._f.evaluate(x)


class NegativeDifferentiableFunction(DifferentiableFunction):
    """``-f`` for a :class:`DifferentiableFunction` ``f``."""

    def __init__(self, f: DifferentiableFunction) -> None:
        super().__init__(f.dimension)
        self._f = f

    def _value(self, x: Array) -> float:
        return -self._f.evaluate(x)

    def _gradient(self, x: Array) -> Array:
        return -self._f.gradient(x)


class NegativeOneDimensionalFunction(OneDimensionalFunction):
    """``-g`` for a one-dimensional function ``g``."""

    def __init__(self, g: OneDimensionalFunction) -> None:
        self._g = g

    def evaluate(self, t: float) -> float:
        return -self._g(t)


__all__ = [
    "CallableFunction",
    "DifferentiableFunction",
    "DirectionalProjection",
    "Function",
    "NegativeDifferentiableFunction",
    "NegativeFunction",
    "NegativeOneDimensionalFunction",
    "NumericalDifferentiableFunction",
    "OneDimensionalFunction",
    "QuadraticFunction",
]
