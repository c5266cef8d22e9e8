"""Pytest configuration and shared fixtures for gradmin tests.

This module provides:
- Deterministic RNG fixtures for numpy and torch
- Small reference objectives shared by the minimizer tests
"""

import os

import numpy as np
import pytest
import torch

from gradmin import CallableFunction


def _seed() -> int:
    return int(os.environ.get("TEST_RNG_SEED", "0"))


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    This ensures tests are reproducible while allowing override for debugging.

    Returns:
        A seeded numpy.random.Generator instance.
    """
    return np.random.default_rng(_seed())


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Auto-use fixture to set global random seeds for reproducibility."""
    np.random.seed(_seed())
    torch.manual_seed(_seed())


def _quadratic(weights, center) -> CallableFunction:
    """``f(x) = sum_i w_i (x_i - c_i)^2`` with its analytic gradient."""
    w = np.asarray(weights, dtype=float)
    c = np.asarray(center, dtype=float)

    def fun(x: np.ndarray) -> float:
        return float(np.sum(w * (x - c) ** 2))

    def grad(x: np.ndarray) -> np.ndarray:
        return 2.0 * w * (x - c)

    return CallableFunction(fun, w.size, grad=grad)


@pytest.fixture
def make_quadratic():
    """Factory for separable quadratics ``sum_i w_i (x_i - c_i)^2``."""
    return _quadratic


@pytest.fixture
def quadratic() -> CallableFunction:
    """Ill-conditioned separable quadratic with minimum 0 at (1, -2, 3)."""
    return _quadratic([1.0, 4.0, 9.0], [1.0, -2.0, 3.0])


def _rosenbrock(x: np.ndarray) -> float:
    return float((1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2)


def _rosenbrock_grad(x: np.ndarray) -> np.ndarray:
    return np.array(
        [
            -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
            200 * (x[1] - x[0] ** 2),
        ]
    )


@pytest.fixture
def rosenbrock() -> CallableFunction:
    """Two-dimensional Rosenbrock function with minimum 0 at (1, 1)."""
    return CallableFunction(_rosenbrock, 2, grad=_rosenbrock_grad)
