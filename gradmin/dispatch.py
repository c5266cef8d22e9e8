"""Algorithm selection and the high-level entry points."""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Callable, Optional, Union

import numpy as np

from .config import OptimConfig, check_line_eps, create_forecaster, create_termination
from .core import Array, OptimizeResult, Problem
from .errors import IllegalConfiguration
from .forecaster import StartDistanceForecaster
from .functions import CallableFunction, DifferentiableFunction
from .gradient import (
    conjugate_gradients_fr,
    conjugate_gradients_pr,
    conjugate_gradients_prp,
    steepest_descent,
)
from .logging import get_logger
from .progress import Stopwatch, as_sink
from .quasi_newton import (
    MAX_HISTORY,
    MIN_HISTORY,
    limited_memory_bfgs,
    quasi_newton_bfgs,
    quasi_newton_dfp,
)
from .termination import TerminationCondition

logger = get_logger(__name__)


class Algorithm(IntEnum):
    """Codes of the named minimizers.

    Integers from 3 to 10 are not members; :func:`optimize` reads them as
    the history size of limited-memory BFGS.
    """

    STEEPEST_DESCENT = 16
    CONJUGATE_GRADIENTS_FR = 17
    CONJUGATE_GRADIENTS_PRP = 18
    QUASI_NEWTON_DFP = 19
    QUASI_NEWTON_BFGS = 20
    CONJUGATE_GRADIENTS_PR = 21


Selection = Union[Algorithm, int]

_MINIMIZERS: dict[Algorithm, Callable[..., int]] = {
    Algorithm.STEEPEST_DESCENT: steepest_descent,
    Algorithm.CONJUGATE_GRADIENTS_FR: conjugate_gradients_fr,
    Algorithm.CONJUGATE_GRADIENTS_PR: conjugate_gradients_pr,
    Algorithm.CONJUGATE_GRADIENTS_PRP: conjugate_gradients_prp,
    Algorithm.QUASI_NEWTON_DFP: quasi_newton_dfp,
    Algorithm.QUASI_NEWTON_BFGS: quasi_newton_bfgs,
}

_NAMES: dict[str, Algorithm] = {
    "steepest_descent": Algorithm.STEEPEST_DESCENT,
    "sd": Algorithm.STEEPEST_DESCENT,
    "cg_fr": Algorithm.CONJUGATE_GRADIENTS_FR,
    "cg_pr": Algorithm.CONJUGATE_GRADIENTS_PR,
    "cg_prp": Algorithm.CONJUGATE_GRADIENTS_PRP,
    "dfp": Algorithm.QUASI_NEWTON_DFP,
    "bfgs": Algorithm.QUASI_NEWTON_BFGS,
}


def _unsupported(tag: Any) -> IllegalConfiguration:
    supported = sorted(_NAMES) + ["lbfgs", f"lbfgs<{MIN_HISTORY}..{MAX_HISTORY}>"]
    return IllegalConfiguration(
        f"Unsupported algorithm {tag!r}. Supported names: {supported}, "
        f"codes {[int(a) for a in Algorithm]} or an L-BFGS history size "
        f"in [{MIN_HISTORY}, {MAX_HISTORY}]."
    )


def parse_algorithm(tag: Union[str, int], history_size: int = 5) -> Selection:
    """
    Resolve an algorithm selector.

    Args:
        tag: An :class:`Algorithm`, one of its integer codes, an integer in
            [3, 10] meaning L-BFGS with that history size, or a
            case-insensitive name. "lbfgs" uses ``history_size``; "lbfgs7"
            carries its own.
        history_size: History size for a bare "lbfgs".

    Returns:
        The :class:`Algorithm` member, or the L-BFGS history size as int.

    Raises:
        IllegalConfiguration: For anything else, including booleans.
    """
    if isinstance(tag, bool):
        raise _unsupported(tag)
    if isinstance(tag, (int, np.integer)):
        code = int(tag)
        if MIN_HISTORY <= code <= MAX_HISTORY:
            return code
        try:
            return Algorithm(code)
        except ValueError:
            raise _unsupported(tag) from None
    if isinstance(tag, str):
        name = tag.strip().lower().replace("-", "_")
        if name in _NAMES:
            return _NAMES[name]
        if name.startswith("lbfgs"):
            suffix = name[len("lbfgs"):]
            if not suffix:
                m = history_size
            elif suffix.isdigit():
                m = int(suffix)
            else:
                raise _unsupported(tag)
            if not isinstance(m, bool) and isinstance(m, (int, np.integer)):
                if MIN_HISTORY <= m <= MAX_HISTORY:
                    return int(m)
    raise _unsupported(tag)


def algorithm_name(selection: Selection) -> str:
    """Name written to the progress sink when a run starts."""
    if isinstance(selection, Algorithm):
        return selection.name
    return f"lm-BFGS (n={selection})"


def optimize(
    algorithm: Union[str, int],
    f: DifferentiableFunction,
    x: Array,
    termination: TerminationCondition,
    line_eps: float,
    start_distance: StartDistanceForecaster,
    out: Optional[Any] = None,
    clock: Optional[Stopwatch] = None,
) -> int:
    """
    Minimize ``f`` starting from ``x`` with the selected algorithm.

    ``x`` is updated in place and holds the final point on return. The
    forecaster is reset first, so nothing recorded by an earlier run leaks
    into this one.

    Args:
        algorithm: Selector accepted by :func:`parse_algorithm`.
        f: Function to be minimized.
        x: Start vector, a 1-D float numpy array of length ``f.dimension``.
        termination: Stopping rule of the outer iteration.
        line_eps: Interval tolerance of each line search.
        start_distance: Forecaster of the initial line-search step.
        out: Progress sink or writable stream; ``None`` writes nothing.
        clock: Run clock, a fresh :class:`~gradmin.progress.Stopwatch` by default.

    Returns:
        The number of iterations performed.

    Raises:
        IllegalConfiguration: For an unsupported selector, a non-positive
            line_eps or a non-positive forecast start distance.
    """
    selection = parse_algorithm(algorithm)
    check_line_eps(line_eps)
    start_distance.reset()
    sink = as_sink(out)
    name = algorithm_name(selection)
    sink.write_line(name)
    logger.info("Minimizing a %d-dimensional function with %s.", f.dimension, name)

    if isinstance(selection, Algorithm):
        minimizer = _MINIMIZERS[selection]
        return minimizer(f, x, termination, line_eps, start_distance, sink, clock)
    return limited_memory_bfgs(
        f, x, selection, termination, line_eps, start_distance, sink, clock
    )


def _as_function(
    problem: Union[Problem, DifferentiableFunction, Callable[[Array], float]],
    n: int,
    eps: float,
) -> DifferentiableFunction:
    if isinstance(problem, DifferentiableFunction):
        return problem
    if isinstance(problem, Problem):
        return problem.as_function(dim=n)
    if callable(problem):
        return CallableFunction(problem, n, eps=eps)
    raise TypeError(f"Cannot minimize an object of type {type(problem).__name__}.")


def minimize(
    problem: Union[Problem, DifferentiableFunction, Callable[[Array], float]],
    x0: Array,
    config: Optional[OptimConfig] = None,
    termination: Optional[TerminationCondition] = None,
    forecaster: Optional[StartDistanceForecaster] = None,
    out: Optional[Any] = None,
) -> OptimizeResult:
    """
    Minimize a problem and collect the outcome.

    ``x0`` is copied and left untouched. ``problem`` may be a
    :class:`~gradmin.core.Problem`, any :class:`DifferentiableFunction` or a
    plain callable (its gradient is then a forward difference with step
    ``config.eps``). Explicit ``termination`` and ``forecaster`` take
    precedence over the ones built from ``config``.

    Example:
        >>> import numpy as np
        >>> from gradmin import OptimConfig, Problem, minimize
        >>> problem = Problem(fun=lambda x: float(np.sum((x - 1.0) ** 2)),
        ...                   grad=lambda x: 2.0 * (x - 1.0))
        >>> result = minimize(problem, np.zeros(3), OptimConfig(algorithm="cg_fr"))
        >>> bool(np.allclose(result.x, 1.0))
        True
    """
    config = config if config is not None else OptimConfig()
    x = np.array(x0, dtype=float).reshape(-1)
    f = _as_function(problem, x.size, config.eps)
    if termination is None:
        termination = create_termination(config)
    if forecaster is None:
        forecaster = create_forecaster(config)
    selection = parse_algorithm(config.algorithm, config.history_size)

    nit = optimize(selection, f, x, termination, config.line_eps, forecaster, out)
    return OptimizeResult(
        x=x,
        fun=f.evaluate(x),
        nit=nit,
        grad_norm=float(np.linalg.norm(f.gradient(x))),
        algorithm=algorithm_name(selection),
    )


__all__ = [
    "Algorithm",
    "algorithm_name",
    "minimize",
    "optimize",
    "parse_algorithm",
]
