"""Exception types raised by the minimization engine."""

from __future__ import annotations


class OptimizationError(Exception):
    """Base class for all errors raised by gradmin."""


class DimensionMismatch(OptimizationError, ValueError):
    """A vector length disagrees with the declared dimension of a function."""

    def __init__(self, expected: int, actual: int, what: str = "argument") -> None:
        self.expected = int(expected)
        self.actual = int(actual)
        super().__init__(
            f"Dimension mismatch for {what}: expected length {self.expected}, "
            f"got {self.actual}."
        )


class EvaluationFailure(OptimizationError, RuntimeError):
    """The objective could not produce a value or gradient at a point."""


class IllegalConfiguration(OptimizationError, ValueError):
    """An optimizer was configured with an unsupported or invalid value."""


__all__ = [
    "DimensionMismatch",
    "EvaluationFailure",
    "IllegalConfiguration",
    "OptimizationError",
]
