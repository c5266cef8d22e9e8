"""One-dimensional minimization: bracketing, golden section, Brent, parabolas.

All routines work on a scalar function ``g: float -> float`` (a plain
callable or a :class:`~gradmin.functions.OneDimensionalFunction`). NaN
ordinates are accepted and treated as "no improvement here", which lets
objectives signal a singularity without raising.

References:
    - R. P. Brent, *Algorithms for Minimization without Derivatives* (1973)
    - Forsythe, Malcolm & Moler, *Computer Methods for Mathematical
      Computations* (1977), routine ``fmin``
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Optional

from .core import PHI, PHI_PLUS_1, PHI_PLUS_2
from .errors import IllegalConfiguration
from .functions import QuadraticFunction
from .logging import get_logger

logger = get_logger(__name__)

ScalarFunction = Callable[[float], float]

# Relative machine precision used by Brent's method. The value of the
# classical fmin port is kept instead of np.finfo(float).eps.
BRENT_EPS = 1.2e-16

_GOLDEN_STEP = 1.0 - PHI


def _check_eps(eps: float) -> None:
    if not eps > 0:
        raise IllegalConfiguration("The interval tolerance must be positive.")


@dataclass(frozen=True)
class Bracket:
    """Three points with ``f_middle <= f_lower`` and ``f_middle <= f_upper``."""

    lower: float
    f_lower: float
    middle: float
    f_middle: float
    upper: float
    f_upper: float

    @property
    def width(self) -> float:
        return self.upper - self.lower


def find_bracket(
    f: ScalarFunction,
    lower: float,
    start_distance: float,
    f_lower: Optional[float] = None,
) -> Bracket:
    """Return a bracket containing a minimum of ``f`` to the right of ``lower``.

    Parameters
    ----------
    f:
        Function to be minimized.
    lower:
        Starting abscissa, the lower end of the bracket.
    start_distance:
        First trial step away from ``lower``.
    f_lower:
        Known value ``f(lower)``; evaluated when omitted.
    """
    if f_lower is None:
        f_lower = f(lower)
    x0, f0 = lower, f_lower
    x1 = lower + start_distance
    f1 = f(x1)
    x2, f2 = 0.0, 0.0

    if math.isnan(f1) or f0 <= f1:
        # shrink the far point towards the start
        while True:
            x2, f2 = x1, f1
            x1 = x0 + _GOLDEN_STEP * (x1 - x0)
            f1 = f(x1)
            if not (math.isnan(f1) or (x0 != x1 and f0 < f1)):
                break
    else:
        # expand while the function keeps decreasing
        while True:
            x2 = PHI_PLUS_2 * x1 - PHI_PLUS_1 * x0
            f2 = f(x2)
            improved = f1 > f2
            if improved:
                x0, f0, x1, f1 = x1, f1, x2, f2
            if math.isnan(f2) or not improved:
                break

    if math.isnan(f2):
        # move the far point inwards until it has a finite value
        while True:
            x = x1 + _GOLDEN_STEP * (x2 - x1)
            if x == x1:
                break
            fx = f(x)
            if math.isnan(fx) or fx > f1:
                x2, f2 = x, fx
            else:
                if fx != f1:
                    x0, f0 = x1, f1
                x1, f1 = x, fx
            if not math.isnan(f2):
                break
        if math.isnan(f1):
            x2, f2 = x1, f1

    return Bracket(x0, f0, x1, f1, x2, f2)


def golden_ratio(
    f: ScalarFunction,
    lower: float,
    upper: float,
    eps: float,
    middle: Optional[float] = None,
    f_middle: Optional[float] = None,
) -> tuple[float, float]:
    """Golden-section search for a minimum inside ``[lower, upper]``.

    ``middle`` is an interior point whose value is reused; by default it is
    the golden-section point closer to ``lower``. Every iteration costs one
    evaluation. Stops once ``upper - lower <= eps``.

    Returns
    -------
    tuple
        ``(x, f(x))`` of the best point found.
    """
    _check_eps(eps)
    if middle is None:
        middle = lower + _GOLDEN_STEP * (upper - lower)
        f_middle = None
    if f_middle is None:
        f_middle = f(middle)

    # ``trial`` is the interior point without a value yet; ``incumbent`` the
    # interior point that currently holds the best known value.
    trial = lower + PHI * (upper - lower)
    incumbent, f_incumbent = middle, f_middle

    while upper - lower > eps:
        f_trial = f(trial)
        if trial < incumbent:
            left, f_left, right, f_right = trial, f_trial, incumbent, f_incumbent
        else:
            left, f_left, right, f_right = incumbent, f_incumbent, trial, f_trial
        if f_left < f_right:
            upper = right
            incumbent, f_incumbent = left, f_left
            trial = lower + _GOLDEN_STEP * (upper - lower)
        else:
            lower = left
            incumbent, f_incumbent = right, f_right
            trial = lower + PHI * (upper - lower)

    return incumbent, f_incumbent


def brents_method(
    f: ScalarFunction,
    a: float,
    x: float,
    b: float,
    tol: float,
    fx: Optional[float] = None,
    max_iter: int = 500,
) -> tuple[float, float]:
    """Brent's method for a minimum inside ``[a, b]``.

    Combines parabolic interpolation through the last three distinct points
    with golden-section steps whenever the parabola is not trustworthy.

    Parameters
    ----------
    f:
        Function to be minimized.
    a, b:
        Bracket end points.
    x:
        Interior abscissa, typically the middle of a :class:`Bracket`.
    tol:
        Interval size at which to stop.
    fx:
        Known value ``f(x)``; evaluated when omitted.
    max_iter:
        Guard against objectives that never settle.

    Returns
    -------
    tuple
        ``(x, f(x))`` of the best point found.
    """
    if fx is None:
        fx = f(x)
    c = _GOLDEN_STEP
    d = 0.0
    e = 0.0
    eps = math.sqrt(BRENT_EPS)
    v = w = x
    fv = fw = fx
    tol3 = tol / 3.0

    xm = 0.5 * (a + b)
    tol1 = eps * abs(x) + tol3
    t2 = 2.0 * tol1

    iteration = 0
    while abs(x - xm) > t2 - 0.5 * (b - a):
        if iteration >= max_iter:
            logger.warning("Brent's method stopped after %d iterations.", max_iter)
            break
        iteration += 1
        p = q = r = 0.0
        if abs(e) > tol1:
            # fit the parabola
            r = (x - w) * (fx - fv)
            q = (x - v) * (fx - fw)
            p = (x - v) * q - (x - w) * r
            q = 2.0 * (q - r)
            if q > 0.0:
                p = -p
            else:
                q = -q
            r = e
            e = d
        if abs(p) < abs(0.5 * q * r) and q * (a - x) < p < q * (b - x):
            # parabolic step
            d = p / q
            u = x + d
            # f must not be evaluated too close to a or b
            if u - a < t2 or b - u < t2:
                d = tol1 if x < xm else -tol1
        else:
            # golden-section step
            e = (b - x) if x < xm else (a - x)
            d = c * e
        # f must not be evaluated too close to x
        if abs(d) >= tol1:
            u = x + d
        else:
            u = x + tol1 if d > 0.0 else x - tol1
        fu = f(u)

        if math.isnan(fu) or fx <= fu:
            if u < x:
                a = u
            else:
                b = u
        if fu <= fx:
            if u < x:
                b = x
            else:
                a = x
            v, fv = w, fw
            w, fw = x, fx
            x, fx = u, fu
        elif fu <= fw or w == x:
            v, fv = w, fw
            w, fw = u, fu
        elif not (fu > fv and v != x and v != w):
            v, fv = u, fu

        xm = 0.5 * (a + b)
        tol1 = eps * abs(x) + tol3
        t2 = 2.0 * tol1

    return x, fx


def parabolic_interpolation(
    f: ScalarFunction,
    lower: float,
    middle: float,
    upper: float,
    eps: float,
    f_lower: Optional[float] = None,
    f_middle: Optional[float] = None,
    f_upper: Optional[float] = None,
    max_iter: int = 500,
) -> tuple[float, float]:
    """Successive parabolic interpolation inside ``[lower, upper]``.

    Works well for (nearly) convex functions. Each step evaluates the
    vertex of the parabola through the current three points and replaces
    the end point on the far side of the better one. Trial points are kept
    at least ``eps`` away from the incumbent.

    If the three points are colinear, or the parabola through them opens
    downwards, there is no vertex to move to and the incumbent is returned
    without further evaluations.

    Returns
    -------
    tuple
        ``(x, f(x))`` of the best point found.
    """
    _check_eps(eps)
    if f_lower is None:
        f_lower = f(lower)
    if f_middle is None:
        f_middle = f(middle)
    if f_upper is None:
        f_upper = f(upper)

    p1, f_p1 = middle, f_middle
    iteration = 0
    while upper - lower > eps:
        if not lower < p1 < upper:
            break
        parabola = QuadraticFunction.from_points(lower, f_lower, p1, f_p1, upper, f_upper)
        if not parabola.a > 0:
            break
        if iteration >= max_iter:
            logger.warning("Parabolic interpolation stopped after %d iterations.", max_iter)
            break
        iteration += 1

        t = parabola.vertex()
        if abs(t - p1) <= eps:
            # step next to the incumbent on the vertex side, or on the wider
            # side once the vertex side is narrower than eps
            below = t < p1
            if (p1 - lower if below else upper - p1) <= eps:
                below = p1 - lower > upper - p1
            if below:
                t = p1 - min(eps, (p1 - lower) / 2.0)
            else:
                t = p1 + min(eps, (upper - p1) / 2.0)
        ft = f(t)

        if t < p1:
            if ft < f_p1:
                upper, f_upper = p1, f_p1
                p1, f_p1 = t, ft
            else:
                lower, f_lower = t, ft
        else:
            if ft < f_p1:
                lower, f_lower = p1, f_p1
                p1, f_p1 = t, ft
            else:
                upper, f_upper = t, ft

    return p1, f_p1


__all__ = [
    "BRENT_EPS",
    "Bracket",
    "brents_method",
    "find_bracket",
    "golden_ratio",
    "parabolic_interpolation",
]
