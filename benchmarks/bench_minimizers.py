"""Benchmark the minimizers on an ill-conditioned quadratic."""

import time
from typing import Dict, Union

import numpy as np

from gradmin import (
    CallableFunction,
    CombinedCondition,
    ConstantStartDistance,
    IterationCondition,
    SmallGradientCondition,
    optimize,
)


class CountingQuadratic(CallableFunction):
    """``sum_i w_i x_i^2`` that counts value and gradient evaluations."""

    def __init__(self, weights: np.ndarray) -> None:
        super().__init__(self._count_value, weights.size, grad=self._count_gradient)
        self.weights = weights
        self.n_values = 0
        self.n_gradients = 0

    def _count_value(self, x: np.ndarray) -> float:
        self.n_values += 1
        return float(np.sum(self.weights * x * x))

    def _count_gradient(self, x: np.ndarray) -> np.ndarray:
        self.n_gradients += 1
        return 2.0 * self.weights * x


def benchmark_minimizer(
    algorithm: Union[str, int],
    n: int = 50,
    condition: float = 1e3,
    max_iter: int = 20000,
) -> Dict[str, float]:
    """Benchmark one minimizer.

    Args:
        algorithm: Selector accepted by :func:`gradmin.parse_algorithm`.
        n: Problem dimension.
        condition: Ratio of the largest to the smallest curvature.
        max_iter: Iteration budget.

    Returns:
        Dictionary with timing and evaluation counts.
    """
    f = CountingQuadratic(np.logspace(0.0, np.log10(condition), n))
    x = np.ones(n)
    termination = CombinedCondition(2, IterationCondition(max_iter), SmallGradientCondition(1e-8))

    start = time.perf_counter()
    nit = optimize(algorithm, f, x, termination, 1e-10, ConstantStartDistance(1.0))
    end = time.perf_counter()

    return {
        "iterations": nit,
        "values": f.n_values,
        "gradients": f.n_gradients,
        "total_time_sec": end - start,
        "residual": float(np.linalg.norm(x)),
    }


if __name__ == "__main__":
    print("Benchmarking minimizers (n=50, condition=1e3)...")

    for algorithm in ["steepest_descent", "cg_fr", "cg_pr", "cg_prp", "dfp", "bfgs", 3, 10]:
        results = benchmark_minimizer(algorithm)
        print(f"{str(algorithm):>16s}:")
        print(f"  Iterations: {results['iterations']}")
        print(f"  Evaluations (f / grad): {results['values']} / {results['gradients']}")
        print(f"  Time: {results['total_time_sec']*1e3:.2f} ms")
        print(f"  Residual: {results['residual']:.2e}")
