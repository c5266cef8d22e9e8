"""gradmin - unconstrained minimization with line searches, CG and quasi-Newton.

Example
-------
>>> import numpy as np
>>> from gradmin import Problem, OptimConfig, minimize
>>> def rosen(x):
...     return (1 - x[0])**2 + 100 * (x[1] - x[0]**2)**2
>>> def rosen_grad(x):
...     return np.array([
...         -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
...         200 * (x[1] - x[0] ** 2),
...     ])
>>> problem = Problem(fun=rosen, grad=rosen_grad, dim=2)
>>> res = minimize(problem, np.array([-1.2, 1.0]), OptimConfig(algorithm="bfgs"))
>>> bool(np.allclose(res.x, 1.0, atol=1e-4))
True
"""

__version__ = "0.3.0"

from .config import OptimConfig, create_forecaster, create_termination
from .core import PHI, OptimizeResult, Problem
from .dispatch import Algorithm, algorithm_name, minimize, optimize, parse_algorithm
from .errors import (
    DimensionMismatch,
    EvaluationFailure,
    IllegalConfiguration,
    OptimizationError,
)
from .forecaster import (
    ConstantStartDistance,
    LimitedMedianStartDistance,
    StartDistanceForecaster,
    check_start_distance,
)
from .functions import (
    CallableFunction,
    DifferentiableFunction,
    DirectionalProjection,
    Function,
    NegativeDifferentiableFunction,
    NegativeFunction,
    NegativeOneDimensionalFunction,
    NumericalDifferentiableFunction,
    OneDimensionalFunction,
    QuadraticFunction,
)
from .gradient import (
    conjugate_gradients_fr,
    conjugate_gradients_pr,
    conjugate_gradients_prp,
    steepest_descent,
)
from .line_search import (
    BRENT_EPS,
    Bracket,
    brents_method,
    find_bracket,
    golden_ratio,
    parabolic_interpolation,
)
from .logging import configure_logging, get_logger
from .progress import LoggerSink, NullSink, ProgressSink, Stopwatch, StreamSink
from .quasi_newton import VectorPair, limited_memory_bfgs, quasi_newton_bfgs, quasi_newton_dfp
from .termination import (
    AbsoluteValueCondition,
    CombinedCondition,
    IterationCondition,
    RelativeChangeCondition,
    SmallDifferenceOfFunctionEvaluationsCondition,
    SmallGradientCondition,
    SmallStepCondition,
    TerminationCondition,
    TimeCondition,
)

__all__ = [
    "AbsoluteValueCondition",
    "Algorithm",
    "BRENT_EPS",
    "Bracket",
    "CallableFunction",
    "CombinedCondition",
    "ConstantStartDistance",
    "DifferentiableFunction",
    "DimensionMismatch",
    "DirectionalProjection",
    "EvaluationFailure",
    "Function",
    "IllegalConfiguration",
    "IterationCondition",
    "LimitedMedianStartDistance",
    "LoggerSink",
    "NegativeDifferentiableFunction",
    "NegativeFunction",
    "NegativeOneDimensionalFunction",
    "NullSink",
    "NumericalDifferentiableFunction",
    "OneDimensionalFunction",
    "OptimConfig",
    "OptimizationError",
    "OptimizeResult",
    "PHI",
    "Problem",
    "ProgressSink",
    "QuadraticFunction",
    "RelativeChangeCondition",
    "SmallDifferenceOfFunctionEvaluationsCondition",
    "SmallGradientCondition",
    "SmallStepCondition",
    "StartDistanceForecaster",
    "Stopwatch",
    "StreamSink",
    "TerminationCondition",
    "TimeCondition",
    "VectorPair",
    "algorithm_name",
    "brents_method",
    "check_start_distance",
    "configure_logging",
    "conjugate_gradients_fr",
    "conjugate_gradients_pr",
    "conjugate_gradients_prp",
    "create_forecaster",
    "create_termination",
    "find_bracket",
    "get_logger",
    "golden_ratio",
    "limited_memory_bfgs",
    "minimize",
    "optimize",
    "parabolic_interpolation",
    "quasi_newton_bfgs",
    "quasi_newton_dfp",
    "steepest_descent",
]
