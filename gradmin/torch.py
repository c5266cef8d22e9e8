"""PyTorch adapter: objectives written with tensors, gradients from autograd."""

from __future__ import annotations

from typing import Callable

import numpy as np
import torch

from .core import Array
from .errors import EvaluationFailure
from .functions import DifferentiableFunction

TensorObjective = Callable[[torch.Tensor], torch.Tensor]


class TorchFunction(DifferentiableFunction):
    """
    Differentiable function defined by a tensor-valued objective.

    The objective receives a 1D tensor of length ``dim`` and returns a scalar
    tensor. Values are computed without building a graph; the gradient uses
    PyTorch's autograd on a detached copy of the point.

    Args:
        fun: Callable taking a 1D tensor and returning a scalar tensor.
        dim: Number of parameters.
        dtype: Floating dtype the point is converted to. Defaults to float64.

    Example:
        >>> import numpy as np
        >>> import torch
        >>> from gradmin.torch import TorchFunction
        >>> f = TorchFunction(lambda t: torch.sum((t - 1.0) ** 2), dim=2)
        >>> f.gradient(np.zeros(2)).tolist()
        [-2.0, -2.0]
    """

    def __init__(
        self, fun: TensorObjective, dim: int, dtype: torch.dtype = torch.float64
    ) -> None:
        super().__init__(dim)
        if not dtype.is_floating_point:
            raise ValueError(f"dtype must be a floating point dtype, got {dtype}.")
        self.fun = fun
        self.dtype = dtype

    def _to_tensor(self, x: Array) -> torch.Tensor:
        return torch.as_tensor(np.asarray(x), dtype=self.dtype)

    def _scalar(self, value: torch.Tensor) -> torch.Tensor:
        if not isinstance(value, torch.Tensor) or value.ndim != 0:
            shape = tuple(value.shape) if isinstance(value, torch.Tensor) else type(value).__name__
            raise EvaluationFailure(f"objective must return a scalar tensor, got {shape}.")
        return value

    def _value(self, x: Array) -> float:
        with torch.no_grad():
            value = self._scalar(self.fun(self._to_tensor(x)))
        return float(value.item())

    def _gradient(self, x: Array) -> Array:
        params = self._to_tensor(x).clone().detach().requires_grad_(True)
        value = self._scalar(self.fun(params))
        if not value.requires_grad:
            # objective does not depend on the parameters
            return np.zeros(self.dimension)
        (grad,) = torch.autograd.grad(value, params, allow_unused=True)
        if grad is None:
            return np.zeros(self.dimension)
        return grad.detach().cpu().numpy().astype(float)


__all__ = ["TensorObjective", "TorchFunction"]
