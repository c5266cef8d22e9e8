"""Stopping rules for the outer iteration of the minimizers.

Every minimizer asks its condition ``should_continue(...)`` once before the
first iteration and once after each accepted step. On the first query
``f_last`` and ``alpha`` are ``+inf``.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod

import numpy as np

from .core import Array
from .errors import IllegalConfiguration


def _positive(value: float, name: str) -> float:
    if not value > 0:
        raise IllegalConfiguration(f"{name} must be positive, got {value!r}.")
    return float(value)


class TerminationCondition(ABC):
    """Decides whether another iteration should run."""

    @abstractmethod
    def should_continue(
        self,
        iteration: int,
        f_last: float,
        f_current: float,
        gradient: Array,
        direction: Array,
        alpha: float,
        elapsed: float,
    ) -> bool:
        """Return True if the minimizer should perform another iteration.

        Parameters
        ----------
        iteration:
            Number of iterations performed so far.
        f_last, f_current:
            Function values before and after the last iteration.
        gradient:
            Gradient at the current point.
        direction:
            Direction of the last iteration.
        alpha:
            Step length of the last line search.
        elapsed:
            Seconds since the run started.
        """

    def is_simple(self) -> bool:
        """True if the decision does not depend on wall-clock time."""
        return True


class IterationCondition(TerminationCondition):
    """Stops after a fixed number of iterations."""

    def __init__(self, max_iter: int) -> None:
        if int(max_iter) < 0:
            raise IllegalConfiguration("max_iter must be non-negative.")
        self.max_iter = int(max_iter)

    def should_continue(self, iteration, f_last, f_current, gradient, direction, alpha, elapsed):
        return iteration < self.max_iter


class AbsoluteValueCondition(TerminationCondition):
    """Stops once the function value is at most ``lower_bound``."""

    def __init__(self, lower_bound: float) -> None:
        if math.isnan(lower_bound):
            raise IllegalConfiguration("lower_bound must not be NaN.")
        self.lower_bound = float(lower_bound)

    def should_continue(self, iteration, f_last, f_current, gradient, direction, alpha, elapsed):
        return f_current > self.lower_bound


class SmallDifferenceOfFunctionEvaluationsCondition(TerminationCondition):
    """Stops once an iteration improves the function by at most ``eps``."""

    def __init__(self, eps: float) -> None:
        self.eps = _positive(eps, "eps")

    def should_continue(self, iteration, f_last, f_current, gradient, direction, alpha, elapsed):
        return abs(f_last - f_current) > self.eps


class RelativeChangeCondition(TerminationCondition):
    """Stops once the relative change of the function value is at most ``eps``."""

    def __init__(self, eps: float) -> None:
        self.eps = _positive(eps, "eps")

    def should_continue(self, iteration, f_last, f_current, gradient, direction, alpha, elapsed):
        if not math.isfinite(f_last):
            return True
        scale = max(abs(f_last), abs(f_current), np.finfo(float).tiny)
        return abs(f_last - f_current) > self.eps * scale


class SmallGradientCondition(TerminationCondition):
    """Stops once the Euclidean norm of the gradient is at most ``eps``."""

    def __init__(self, eps: float) -> None:
        self.eps = _positive(eps, "eps")

    def should_continue(self, iteration, f_last, f_current, gradient, direction, alpha, elapsed):
        return float(np.linalg.norm(gradient)) > self.eps


class SmallStepCondition(TerminationCondition):
    """Stops once the last step ``|alpha| * ||direction||`` is at most ``eps``."""

    def __init__(self, eps: float) -> None:
        self.eps = _positive(eps, "eps")

    def should_continue(self, iteration, f_last, f_current, gradient, direction, alpha, elapsed):
        if not math.isfinite(alpha):
            return True
        return abs(alpha) * float(np.linalg.norm(direction)) > self.eps


class TimeCondition(TerminationCondition):
    """Stops once ``seconds`` of wall-clock time have elapsed."""

    def __init__(self, seconds: float) -> None:
        self.seconds = _positive(seconds, "seconds")

    def should_continue(self, iteration, f_last, f_current, gradient, direction, alpha, elapsed):
        return elapsed < self.seconds

    def is_simple(self) -> bool:
        return False


class CombinedCondition(TerminationCondition):
    """Continues while at least ``threshold`` of the member conditions do.

    ``threshold == len(conditions)`` behaves like AND, ``threshold == 1``
    like OR.
    """

    def __init__(self, threshold: int, *conditions: TerminationCondition) -> None:
        if not conditions:
            raise IllegalConfiguration("CombinedCondition needs at least one condition.")
        if not 1 <= int(threshold) <= len(conditions):
            raise IllegalConfiguration(
                f"threshold must lie in [1, {len(conditions)}], got {threshold!r}."
            )
        self.threshold = int(threshold)
        self.conditions = tuple(conditions)

    def should_continue(self, iteration, f_last, f_current, gradient, direction, alpha, elapsed):
        positive = sum(
            1
            for condition in self.conditions
            if condition.should_continue(
                iteration, f_last, f_current, gradient, direction, alpha, elapsed
            )
        )
        return positive >= self.threshold

    def is_simple(self) -> bool:
        return all(condition.is_simple() for condition in self.conditions)


__all__ = [
    "AbsoluteValueCondition",
    "CombinedCondition",
    "IterationCondition",
    "RelativeChangeCondition",
    "SmallDifferenceOfFunctionEvaluationsCondition",
    "SmallGradientCondition",
    "SmallStepCondition",
    "TerminationCondition",
    "TimeCondition",
]
