"""
Example: Maximum-likelihood fitting with gradmin

Fits a logistic regression model by minimizing its negative log-likelihood
with every minimizer of the package and compares iteration counts. A second
fit uses a PyTorch objective whose gradient comes from autograd.
"""

import numpy as np
import torch

from gradmin import (
    DifferentiableFunction,
    OptimConfig,
    minimize,
)
from gradmin.torch import TorchFunction


class LogisticNLL(DifferentiableFunction):
    """Negative log-likelihood of a logistic regression with an intercept."""

    def __init__(self, features: np.ndarray, labels: np.ndarray) -> None:
        super().__init__(features.shape[1] + 1)
        self.design = np.hstack([np.ones((features.shape[0], 1)), features])
        self.labels = labels

    def _value(self, x: np.ndarray) -> float:
        z = self.design @ x
        return float(np.sum(np.logaddexp(0.0, z) - self.labels * z))

    def _gradient(self, x: np.ndarray) -> np.ndarray:
        z = self.design @ x
        p = 1.0 / (1.0 + np.exp(-z))
        return self.design.T @ (p - self.labels)


def make_data(rng: np.random.Generator, n: int = 400):
    true_coef = np.array([-0.5, 1.5, -2.0])
    features = rng.normal(size=(n, 2))
    logits = true_coef[0] + features @ true_coef[1:]
    labels = (rng.uniform(size=n) < 1.0 / (1.0 + np.exp(-logits))).astype(float)
    return features, labels, true_coef


def compare_minimizers(f: LogisticNLL) -> np.ndarray:
    print("=" * 60)
    print("Logistic regression: negative log-likelihood")
    print("=" * 60)
    best = None
    for algorithm in ["steepest_descent", "cg_fr", "cg_pr", "cg_prp", "dfp", "bfgs", "lbfgs"]:
        result = minimize(f, np.zeros(f.dimension), OptimConfig(algorithm=algorithm, gtol=1e-6))
        print(
            f"{result.algorithm:<26s} iterations={result.nit:4d} "
            f"nll={result.fun:.6f} |grad|={result.grad_norm:.1e}"
        )
        if best is None or result.fun < best.fun:
            best = result
    print()
    return best.x


def fit_with_torch(features: np.ndarray, labels: np.ndarray) -> np.ndarray:
    design = torch.as_tensor(np.hstack([np.ones((features.shape[0], 1)), features]))
    y = torch.as_tensor(labels)

    def nll(theta: torch.Tensor) -> torch.Tensor:
        z = design @ theta
        return torch.sum(torch.nn.functional.softplus(z) - y * z)

    result = minimize(TorchFunction(nll, dim=design.shape[1]), np.zeros(design.shape[1]))
    print(f"Autograd fit ({result.algorithm}): {np.round(result.x, 4)}")
    return result.x


def main() -> None:
    rng = np.random.default_rng(7)
    features, labels, true_coef = make_data(rng)
    coef = compare_minimizers(LogisticNLL(features, labels))
    torch_coef = fit_with_torch(features, labels)
    print(f"True coefficients:   {true_coef}")
    print(f"Fitted coefficients: {np.round(coef, 4)}")
    print(f"Max difference numpy/torch fit: {np.max(np.abs(coef - torch_coef)):.2e}")


if __name__ == "__main__":
    main()
