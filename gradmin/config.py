"""Configuration and factories for minimizer runs."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .errors import IllegalConfiguration
from .forecaster import (
    ConstantStartDistance,
    LimitedMedianStartDistance,
    StartDistanceForecaster,
    check_start_distance,
)
from .termination import (
    CombinedCondition,
    IterationCondition,
    SmallDifferenceOfFunctionEvaluationsCondition,
    SmallGradientCondition,
    TerminationCondition,
    TimeCondition,
)


@dataclass(frozen=True)
class OptimConfig:
    """
    Configuration of one call to :func:`gradmin.minimize`.

    Args:
        algorithm: Minimizer name or code, see :func:`gradmin.parse_algorithm`.
            Defaults to "bfgs".
        history_size: History size used when ``algorithm`` is "lbfgs".
            Must lie in [3, 10]. Defaults to 5.
        line_eps: Interval tolerance of each line search. Must be positive.
        start_distance: Initial trial step of the line search. Must be positive.
        forecast_window: 0 keeps the start distance constant; k > 0 forecasts
            the median of the last k accepted steps.
        max_iter: Maximum number of iterations.
        ftol: Stop once an iteration improves the function by at most ftol.
            ``None`` disables the rule.
        gtol: Stop once the gradient norm is at most gtol. ``None`` disables
            the rule.
        time_limit: Wall-clock limit in seconds, ``None`` for no limit.
        eps: Step of the forward-difference gradient for problems without
            an analytic gradient.
    """

    algorithm: str | int = "bfgs"
    history_size: int = 5
    line_eps: float = 1e-10
    start_distance: float = 1.0
    forecast_window: int = 0
    max_iter: int = 1000
    ftol: float | None = 1e-12
    gtol: float | None = 1e-8
    time_limit: float | None = None
    eps: float = 1e-7


def create_termination(config: OptimConfig) -> TerminationCondition:
    """
    Build the stopping rule described by a configuration.

    The run continues while the iteration budget is not exhausted and none
    of the enabled tolerance rules (ftol, gtol, time_limit) asks to stop.

    Raises:
        IllegalConfiguration: If a limit or tolerance is not positive.
    """
    if config.max_iter < 0:
        raise IllegalConfiguration("max_iter must be non-negative.")
    conditions: list[TerminationCondition] = [IterationCondition(config.max_iter)]
    if config.ftol is not None:
        conditions.append(SmallDifferenceOfFunctionEvaluationsCondition(config.ftol))
    if config.gtol is not None:
        conditions.append(SmallGradientCondition(config.gtol))
    if config.time_limit is not None:
        conditions.append(TimeCondition(config.time_limit))
    if len(conditions) == 1:
        return conditions[0]
    return CombinedCondition(len(conditions), *conditions)


def create_forecaster(config: OptimConfig) -> StartDistanceForecaster:
    """
    Build the start-distance forecaster described by a configuration.

    Raises:
        IllegalConfiguration: If the start distance is not positive or the
            forecast window is negative.
    """
    start = check_start_distance(config.start_distance)
    if config.forecast_window < 0:
        raise IllegalConfiguration("forecast_window must be non-negative.")
    if config.forecast_window == 0:
        return ConstantStartDistance(start)
    return LimitedMedianStartDistance(config.forecast_window, start)


def check_line_eps(line_eps: float) -> float:
    if not (line_eps > 0 and math.isfinite(line_eps)):
        raise IllegalConfiguration(f"line_eps must be positive and finite, got {line_eps!r}.")
    return float(line_eps)


__all__ = [
    "OptimConfig",
    "check_line_eps",
    "create_forecaster",
    "create_termination",
]
