import math

import numpy as np
import pytest

from gradmin import (
    CallableFunction,
    CombinedCondition,
    ConstantStartDistance,
    IllegalConfiguration,
    IterationCondition,
    SmallDifferenceOfFunctionEvaluationsCondition,
    SmallGradientCondition,
    TerminationCondition,
    limited_memory_bfgs,
    quasi_newton_bfgs,
    quasi_newton_dfp,
)
from gradmin.quasi_newton import PairHistory

CENTER = np.array([1.0, -2.0, 3.0])


def lbfgs(m):
    def run(f, x, *args, **kwargs):
        return limited_memory_bfgs(f, x, m, *args, **kwargs)

    return run


QUASI_NEWTON = [quasi_newton_dfp, quasi_newton_bfgs, lbfgs(3), lbfgs(7)]


def until_converged(max_iter: int) -> CombinedCondition:
    return CombinedCondition(
        3,
        IterationCondition(max_iter),
        SmallGradientCondition(1e-8),
        SmallDifferenceOfFunctionEvaluationsCondition(1e-16),
    )


def positive_definite_quadratic(rng, n):
    b = rng.normal(size=(n, n))
    a = b.T @ b + np.eye(n)
    c = rng.normal(size=n)

    def fun(x):
        r = x - c
        return float(0.5 * r @ a @ r)

    def grad(x):
        return a @ (x - c)

    return CallableFunction(fun, n, grad=grad), c


@pytest.mark.parametrize("method", QUASI_NEWTON)
def test_converges_on_quadratic(method, quadratic):
    x = np.zeros(3)
    nit = method(quadratic, x, until_converged(100), 1e-10, ConstantStartDistance(1.0))
    assert nit <= 30
    assert np.allclose(x, CENTER, atol=1e-6)


@pytest.mark.parametrize("method", QUASI_NEWTON)
def test_rosenbrock(method, rosenbrock):
    x = np.array([-1.2, 1.0])
    method(rosenbrock, x, until_converged(500), 1e-12, ConstantStartDistance(1.0))
    assert np.allclose(x, [1.0, 1.0], atol=1e-4)
    assert rosenbrock.evaluate(x) < 1e-8


@pytest.mark.parametrize("n", [2, 4, 5])
def test_lbfgs_matches_bfgs_when_history_covers_dimension(rng, n):
    f, c = positive_definite_quadratic(rng, n)
    x0 = rng.normal(size=n)
    x_bfgs = x0.copy()
    x_lbfgs = x0.copy()
    quasi_newton_bfgs(f, x_bfgs, until_converged(200), 1e-12, ConstantStartDistance(1.0))
    limited_memory_bfgs(f, x_lbfgs, max(n, 3), until_converged(200), 1e-12, ConstantStartDistance(1.0))
    assert np.allclose(x_bfgs, c, atol=1e-6)
    assert np.allclose(x_lbfgs, x_bfgs, atol=1e-6)


class Recorder(TerminationCondition):
    def __init__(self, limit):
        self.limit = limit
        self.calls = []

    def should_continue(self, iteration, f_last, f_current, gradient, direction, alpha, elapsed):
        self.calls.append((f_last, gradient.copy(), direction.copy(), alpha))
        return iteration < self.limit


@pytest.mark.parametrize("method", QUASI_NEWTON)
def test_first_query_sees_negative_gradient(method, quadratic):
    recorder = Recorder(limit=1)
    method(quadratic, np.zeros(3), recorder, 1e-10, ConstantStartDistance(1.0))
    f_last, gradient, direction, alpha = recorder.calls[0]
    assert f_last == math.inf and alpha == math.inf
    assert np.array_equal(direction, -gradient)
    assert len(recorder.calls) == 2


@pytest.mark.parametrize("method", QUASI_NEWTON)
def test_zero_length_steps_keep_updates_finite(method, quadratic):
    x = CENTER.copy()
    nit = method(quadratic, x, IterationCondition(3), 1e-10, ConstantStartDistance(1.0))
    assert nit == 3
    assert np.array_equal(x, CENTER)


@pytest.mark.parametrize("m", [0, 2, 11, 3.5, True])
def test_lbfgs_rejects_history_size(m, quadratic):
    with pytest.raises(IllegalConfiguration, match="history size"):
        limited_memory_bfgs(quadratic, np.zeros(3), m, IterationCondition(1), 1e-10, ConstantStartDistance(1.0))


def test_pair_history_is_a_ring_newest_first():
    history = PairHistory(3, 2)
    slots = {id(pair.s) for pair in history._slots}
    for k in range(1, 6):
        history.push(np.full(2, k), np.full(2, -k), 1.0 / k)
    assert len(history) == 3
    assert [pair.s[0] for pair in history] == [5.0, 4.0, 3.0]
    assert [pair.s[0] for pair in history.oldest_first()] == [3.0, 4.0, 5.0]
    assert history.newest().rho == pytest.approx(0.2)
    assert {id(pair.s) for pair in history} == slots


def test_pair_history_empty():
    history = PairHistory(3, 2)
    assert len(history) == 0
    assert list(history) == []
    with pytest.raises(IndexError):
        history.newest()
