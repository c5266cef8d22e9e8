"""Start-distance forecasters for the line search of each iteration.

A forecaster predicts the first trial step of the next line search from the
steps accepted so far. The minimizers ask for a forecast before every line
search and report the accepted step afterwards.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque

import numpy as np

from .errors import IllegalConfiguration


class StartDistanceForecaster(ABC):
    """Strategy predicting the initial step length of a line search."""

    @abstractmethod
    def next_start_distance(self) -> float:
        """Return the start distance for the next line search (must be > 0)."""

    def record_last_distance(self, distance: float) -> None:
        """Report the step length the last line search accepted."""
        del distance  # unused by default

    def reset(self) -> None:
        """Forget everything recorded so far."""


class ConstantStartDistance(StartDistanceForecaster):
    """Always forecasts the same start distance."""

    def __init__(self, distance: float) -> None:
        self.distance = float(distance)

    def next_start_distance(self) -> float:
        return self.distance

    def __repr__(self) -> str:
        return f"ConstantStartDistance({self.distance!r})"


class LimitedMedianStartDistance(StartDistanceForecaster):
    """Median of the last ``num`` accepted step lengths.

    Until a step has been recorded the forecast is ``start``. Zero-length
    steps are remembered as well, so a run that stalls will eventually
    forecast a non-positive distance and fail loudly.
    """

    def __init__(self, num: int, start: float) -> None:
        if int(num) < 1:
            raise IllegalConfiguration("The median window must hold at least one distance.")
        self.start = float(start)
        self._window: deque[float] = deque(maxlen=int(num))

    @property
    def window(self) -> int:
        return self._window.maxlen or 0

    def next_start_distance(self) -> float:
        if not self._window:
            return self.start
        return float(np.median(np.fromiter(self._window, dtype=float)))

    def record_last_distance(self, distance: float) -> None:
        self._window.append(float(distance))

    def reset(self) -> None:
        self._window.clear()


def check_start_distance(start_distance: float) -> float:
    """Fail with :class:`IllegalConfiguration` unless ``start_distance > 0``."""
    if not start_distance > 0:
        raise IllegalConfiguration(
            f"The start distance has to be greater than 0, got {start_distance!r}."
        )
    return float(start_distance)


__all__ = [
    "ConstantStartDistance",
    "LimitedMedianStartDistance",
    "StartDistanceForecaster",
    "check_start_distance",
]
