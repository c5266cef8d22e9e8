"""Gradient-based minimizers: steepest descent and conjugate gradients.

All minimizers share one calling convention::

    nit = method(f, x, termination, line_eps, start_distance, out=None, clock=None)

``x`` is the start vector and is overwritten with the final point. Each
iteration asks the forecaster for a start distance, runs
``f.minimize_along_direction`` and moves ``x`` by ``step * direction``.

Example
-------
>>> import numpy as np
>>> from gradmin import CallableFunction, ConstantStartDistance, IterationCondition
>>> from gradmin.gradient import conjugate_gradients_fr
>>> f = CallableFunction(lambda x: float(np.sum((x - 2.0) ** 2)), dim=2,
...                      grad=lambda x: 2.0 * (x - 2.0))
>>> x = np.zeros(2)
>>> nit = conjugate_gradients_fr(f, x, IterationCondition(5), 1e-10,
...                              ConstantStartDistance(1.0))
>>> bool(np.allclose(x, 2.0))
True
"""

from __future__ import annotations

import math
from typing import Any, Optional

import numpy as np

from .core import Array
from .forecaster import StartDistanceForecaster
from .functions import DifferentiableFunction
from .progress import IterationMonitor, Stopwatch
from .termination import TerminationCondition
from .utils import check_point

# Direction reported to the termination condition before the first iteration.
_UNSET_DIRECTION = np.finfo(float).max


def steepest_descent(
    f: DifferentiableFunction,
    x: Array,
    termination: TerminationCondition,
    line_eps: float,
    start_distance: StartDistanceForecaster,
    out: Optional[Any] = None,
    clock: Optional[Stopwatch] = None,
) -> int:
    """Steepest descent with a line search along ``-grad f``.

    Parameters
    ----------
    f:
        Function to be minimized.
    x:
        Start vector; holds the final point on return.
    termination:
        Decides whether another iteration runs.
    line_eps:
        Interval tolerance of each line search.
    start_distance:
        Forecaster of the first trial step of each line search.
    out:
        Progress sink or writable stream; ``None`` writes nothing.
    clock:
        Run clock; a fresh :class:`~gradmin.progress.Stopwatch` by default.

    Returns
    -------
    int
        Number of iterations performed.
    """
    n = f.dimension
    check_point(x, n)
    monitor = IterationMonitor(termination, start_distance, out, clock)
    direction = np.full(n, _UNSET_DIRECTION)
    f_last = math.inf
    step = math.inf
    f_current = f.evaluate(x)
    gradient = f.gradient(x)
    monitor.start(f_current)

    iteration = 0
    while monitor.should_continue(iteration, f_last, f_current, gradient, direction, step):
        f_last = f_current
        direction = -gradient
        sd = monitor.start_distance()
        step, f_current = f.minimize_along_direction(x, direction, f_last, line_eps, sd)
        iteration += 1
        monitor.record(iteration, f_last, f_current, sd, step)
        x += step * direction
        gradient = f.gradient(x)
    return iteration


def conjugate_gradients_fr(
    f: DifferentiableFunction,
    x: Array,
    termination: TerminationCondition,
    line_eps: float,
    start_distance: StartDistanceForecaster,
    out: Optional[Any] = None,
    clock: Optional[Stopwatch] = None,
) -> int:
    """Conjugate gradients by Fletcher and Reeves.

    ``d = -g_new + (g_new . g_new) / (g_old . g_old) * d_prev``. See
    :func:`steepest_descent` for the parameters.
    """
    n = f.dimension
    check_point(x, n)
    monitor = IterationMonitor(termination, start_distance, out, clock)
    f_last = math.inf
    step = math.inf
    f_current = f.evaluate(x)
    gradient = f.gradient(x)
    monitor.start(f_current)

    mu1 = float(gradient @ gradient)
    mu2 = 1.0
    proceed = monitor.should_continue(
        0, f_last, f_current, gradient, np.full(n, _UNSET_DIRECTION), step
    )
    direction = np.zeros(n)
    iteration = 0
    while proceed:
        f_last = f_current
        direction = -gradient + (mu1 / mu2) * direction
        sd = monitor.start_distance()
        step, f_current = f.minimize_along_direction(x, direction, f_last, line_eps, sd)
        iteration += 1
        monitor.record(iteration, f_last, f_current, sd, step)
        x += step * direction
        mu2 = mu1
        gradient = f.gradient(x)
        mu1 = float(gradient @ gradient)
        proceed = monitor.should_continue(iteration, f_last, f_current, gradient, direction, step)
    return iteration


def _polak_ribiere(
    f: DifferentiableFunction,
    x: Array,
    termination: TerminationCondition,
    line_eps: float,
    start_distance: StartDistanceForecaster,
    out: Optional[Any],
    clock: Optional[Stopwatch],
    positive: bool,
) -> int:
    n = f.dimension
    check_point(x, n)
    monitor = IterationMonitor(termination, start_distance, out, clock)
    f_last = math.inf
    step = math.inf
    f_current = f.evaluate(x)
    gradient = f.gradient(x)
    gradient_old = gradient
    monitor.start(f_current)

    proceed = monitor.should_continue(
        0, f_last, f_current, gradient, np.full(n, _UNSET_DIRECTION), step
    )
    direction = np.zeros(n)
    iteration = 0
    while proceed:
        f_last = f_current
        mu2 = float(gradient_old @ gradient_old)
        beta = float(gradient @ (gradient - gradient_old)) / mu2 if mu2 > 0 else 0.0
        if positive:
            beta = max(0.0, beta)
        direction = -gradient + beta * direction
        sd = monitor.start_distance()
        step, f_current = f.minimize_along_direction(x, direction, f_last, line_eps, sd)
        iteration += 1
        monitor.record(iteration, f_last, f_current, sd, step)
        x += step * direction
        gradient_old = gradient
        gradient = f.gradient(x)
        proceed = monitor.should_continue(iteration, f_last, f_current, gradient, direction, step)
    return iteration


def conjugate_gradients_pr(
    f: DifferentiableFunction,
    x: Array,
    termination: TerminationCondition,
    line_eps: float,
    start_distance: StartDistanceForecaster,
    out: Optional[Any] = None,
    clock: Optional[Stopwatch] = None,
) -> int:
    """Conjugate gradients by Polak and Ribiere.

    ``beta = g_new . (g_new - g_old) / (g_old . g_old)``. See
    :func:`steepest_descent` for the parameters.
    """
    return _polak_ribiere(
        f, x, termination, line_eps, start_distance, out, clock, positive=False
    )


def conjugate_gradients_prp(
    f: DifferentiableFunction,
    x: Array,
    termination: TerminationCondition,
    line_eps: float,
    start_distance: StartDistanceForecaster,
    out: Optional[Any] = None,
    clock: Optional[Stopwatch] = None,
) -> int:
    """Polak-Ribiere-Positive conjugate gradients: ``beta`` clamped at zero.

    A negative ``beta`` restarts the method along the steepest descent.
    """
    return _polak_ribiere(
        f, x, termination, line_eps, start_distance, out, clock, positive=True
    )


__all__ = [
    "conjugate_gradients_fr",
    "conjugate_gradients_pr",
    "conjugate_gradients_prp",
    "steepest_descent",
]
