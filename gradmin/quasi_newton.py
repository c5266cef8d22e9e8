"""Quasi-Newton minimizers (DFP, BFGS and limited-memory BFGS)."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterator, Optional

import numpy as np

from .core import Array
from .errors import IllegalConfiguration
from .forecaster import StartDistanceForecaster
from .functions import DifferentiableFunction
from .logging import get_logger
from .progress import IterationMonitor, Stopwatch
from .termination import TerminationCondition
from .utils import check_point

logger = get_logger(__name__)

MIN_HISTORY = 3
MAX_HISTORY = 10


@dataclass
class VectorPair:
    """One L-BFGS history entry.

    ``s`` is the position change and ``v`` the gradient change of one
    iteration, ``rho = 1 / (s . v)``. ``alpha`` is scratch space for the
    two-loop recursion.
    """

    s: Array
    v: Array
    rho: float = 0.0
    alpha: float = 0.0


class PairHistory:
    """Ring buffer of at most ``capacity`` :class:`VectorPair` slots.

    The slots are allocated once; pushing a new pair overwrites the oldest
    one when the buffer is full. Iteration runs from newest to oldest.
    """

    def __init__(self, capacity: int, n: int) -> None:
        self.capacity = int(capacity)
        self._slots = [VectorPair(np.zeros(n), np.zeros(n)) for _ in range(self.capacity)]
        self._head = 0
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def push(self, s: Array, v: Array, rho: float) -> VectorPair:
        self._head = (self._head - 1) % self.capacity
        slot = self._slots[self._head]
        slot.s[:] = s
        slot.v[:] = v
        slot.rho = rho
        slot.alpha = 0.0
        self._size = min(self._size + 1, self.capacity)
        return slot

    def newest(self) -> VectorPair:
        if not self._size:
            raise IndexError("The history is empty.")
        return self._slots[self._head]

    def __iter__(self) -> Iterator[VectorPair]:
        for k in range(self._size):
            yield self._slots[(self._head + k) % self.capacity]

    def oldest_first(self) -> Iterator[VectorPair]:
        for k in reversed(range(self._size)):
            yield self._slots[(self._head + k) % self.capacity]


def _quasi_newton(
    f: DifferentiableFunction,
    x: Array,
    termination: TerminationCondition,
    line_eps: float,
    start_distance: StartDistanceForecaster,
    out: Optional[Any],
    clock: Optional[Stopwatch],
    bfgs: bool,
) -> int:
    n = f.dimension
    check_point(x, n)
    monitor = IterationMonitor(termination, start_distance, out, clock)
    f_last = math.inf
    step = math.inf
    f_current = f.evaluate(x)
    gradient = f.gradient(x)
    inv_hessian = np.eye(n)
    direction = -gradient
    proceed = monitor.should_continue(0, f_last, f_current, gradient, direction, step)
    monitor.start(f_current)

    iteration = 0
    while proceed:
        f_last = f_current
        sd = monitor.start_distance()
        step, f_current = f.minimize_along_direction(x, direction, f_last, line_eps, sd)
        iteration += 1
        monitor.record(iteration, f_last, f_current, sd, step)
        s = step * direction
        x += s
        gradient_old = gradient
        gradient = f.gradient(x)
        proceed = monitor.should_continue(iteration, f_last, f_current, gradient, direction, step)
        if not proceed:
            break

        v = gradient - gradient_old
        hv = inv_hessian @ v
        sv = float(s @ v)
        vhv = float(v @ hv)
        if not (sv > 0 and vhv > 0):
            logger.debug(
                "Iteration %d: curvature s.v=%g, v.H.v=%g; resetting H to identity.",
                iteration,
                sv,
                vhv,
            )
            inv_hessian = np.eye(n)
        else:
            inv_hessian += np.outer(s, s) / sv - np.outer(hv, hv) / vhv
            if bfgs:
                u = s / sv - hv / vhv
                inv_hessian += vhv * np.outer(u, u)
        direction = -(inv_hessian @ gradient)
    return iteration


def quasi_newton_dfp(
    f: DifferentiableFunction,
    x: Array,
    termination: TerminationCondition,
    line_eps: float,
    start_distance: StartDistanceForecaster,
    out: Optional[Any] = None,
    clock: Optional[Stopwatch] = None,
) -> int:
    """Davidon-Fletcher-Powell quasi-Newton method.

    The inverse Hessian approximation ``H`` starts as the identity and gets
    the rank-2 update

    .. math:: H \\leftarrow H + \\frac{s s^T}{s^T v} - \\frac{(Hv)(Hv)^T}{v^T H v}

    after every iteration, where ``s`` is the step and ``v`` the change of
    the gradient. The next direction is ``-H g``.

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
    return _quasi_newton(
        f, x, termination, line_eps, start_distance, out, clock, bfgs=False
    )


def quasi_newton_bfgs(
    f: DifferentiableFunction,
    x: Array,
    termination: TerminationCondition,
    line_eps: float,
    start_distance: StartDistanceForecaster,
    out: Optional[Any] = None,
    clock: Optional[Stopwatch] = None,
) -> int:
    """Broyden-Fletcher-Goldfarb-Shanno quasi-Newton method.

    Same as :func:`quasi_newton_dfp` plus the rank-1 term
    ``(v.H.v) u u^T`` with ``u = s / (s.v) - H v / (v.H.v)``.
    """
    return _quasi_newton(
        f, x, termination, line_eps, start_distance, out, clock, bfgs=True
    )


def _check_history_size(m: int) -> int:
    if (
        isinstance(m, bool)
        or not isinstance(m, (int, np.integer))
        or not MIN_HISTORY <= m <= MAX_HISTORY
    ):
        raise IllegalConfiguration(
            f"The L-BFGS history size must be an integer in "
            f"[{MIN_HISTORY}, {MAX_HISTORY}], got {m!r}."
        )
    return int(m)


def _two_loop_direction(gradient: Array, history: PairHistory) -> Array:
    """Approximate ``-H g`` from the stored pairs."""
    direction = -gradient
    if not len(history):
        return direction
    for pair in history:
        pair.alpha = pair.rho * float(pair.s @ direction)
        direction -= pair.alpha * pair.v
    newest = history.newest()
    direction *= float(newest.s @ newest.v) / float(newest.v @ newest.v)
    for pair in history.oldest_first():
        beta = pair.rho * float(pair.v @ direction)
        direction += (pair.alpha - beta) * pair.s
    return direction


def limited_memory_bfgs(
    f: DifferentiableFunction,
    x: Array,
    m: int,
    termination: TerminationCondition,
    line_eps: float,
    start_distance: StartDistanceForecaster,
    out: Optional[Any] = None,
    clock: Optional[Stopwatch] = None,
) -> int:
    """Limited-memory BFGS with the two-loop recursion.

    Only the last ``m`` (``3 <= m <= 10``) position and gradient changes are
    kept; no matrix is formed. A pair whose ``s . v`` is not positive is not
    stored. See :func:`quasi_newton_dfp` for the remaining parameters.

    Raises
    ------
    IllegalConfiguration
        If ``m`` lies outside ``[3, 10]``.
    """
    m = _check_history_size(m)
    n = f.dimension
    check_point(x, n)
    monitor = IterationMonitor(termination, start_distance, out, clock)
    history = PairHistory(m, n)
    f_last = math.inf
    step = math.inf
    f_current = f.evaluate(x)
    gradient = f.gradient(x)
    direction = -gradient
    proceed = monitor.should_continue(0, f_last, f_current, gradient, direction, step)
    monitor.start(f_current)

    iteration = 0
    while proceed:
        f_last = f_current
        sd = monitor.start_distance()
        step, f_current = f.minimize_along_direction(x, direction, f_last, line_eps, sd)
        iteration += 1
        monitor.record(iteration, f_last, f_current, sd, step)
        s = step * direction
        x += s
        gradient_old = gradient
        gradient = f.gradient(x)
        proceed = monitor.should_continue(iteration, f_last, f_current, gradient, direction, step)
        if not proceed:
            break

        v = gradient - gradient_old
        sv = float(s @ v)
        if sv > 0:
            history.push(s, v, 1.0 / sv)
        else:
            logger.debug("Iteration %d: skipping pair with s.v=%g.", iteration, sv)
        direction = _two_loop_direction(gradient, history)
    return iteration


__all__ = [
    "MAX_HISTORY",
    "MIN_HISTORY",
    "PairHistory",
    "VectorPair",
    "limited_memory_bfgs",
    "quasi_newton_bfgs",
    "quasi_newton_dfp",
]
