import math

import numpy as np
import pytest

from gradmin import (
    ConstantStartDistance,
    IllegalConfiguration,
    IterationCondition,
    LimitedMedianStartDistance,
    StartDistanceForecaster,
    check_start_distance,
    steepest_descent,
)


def test_constant_start_distance():
    sd = ConstantStartDistance(0.5)
    sd.record_last_distance(10.0)
    assert sd.next_start_distance() == 0.5


def test_limited_median_uses_start_until_recorded():
    sd = LimitedMedianStartDistance(3, 2.0)
    assert sd.window == 3
    assert sd.next_start_distance() == 2.0
    sd.record_last_distance(4.0)
    assert sd.next_start_distance() == 4.0


def test_limited_median_keeps_last_distances_only():
    sd = LimitedMedianStartDistance(3, 1.0)
    for d in [100.0, 1.0, 2.0, 3.0]:
        sd.record_last_distance(d)
    assert sd.next_start_distance() == 2.0
    sd.record_last_distance(10.0)
    sd.record_last_distance(20.0)
    assert sd.next_start_distance() == 10.0


def test_limited_median_reset():
    sd = LimitedMedianStartDistance(2, 0.25)
    sd.record_last_distance(8.0)
    sd.reset()
    assert sd.next_start_distance() == 0.25


def test_limited_median_requires_window():
    with pytest.raises(IllegalConfiguration):
        LimitedMedianStartDistance(0, 1.0)


@pytest.mark.parametrize("value", [0.0, -1.0, math.nan])
def test_check_start_distance_rejects(value):
    with pytest.raises(IllegalConfiguration, match="greater than 0"):
        check_start_distance(value)


class LineSearchCounter:
    """Wraps a function and counts its line searches."""

    def __init__(self, f):
        self.f = f
        self.calls = 0

    def __getattr__(self, name):
        return getattr(self.f, name)

    def minimize_along_direction(self, *args):
        self.calls += 1
        return self.f.minimize_along_direction(*args)


@pytest.mark.parametrize("bad", [0.0, -0.5])
def test_non_positive_forecast_fails_before_line_search(quadratic, bad):
    class Bad(StartDistanceForecaster):
        def next_start_distance(self):
            return bad

    f = LineSearchCounter(quadratic)
    with pytest.raises(IllegalConfiguration):
        steepest_descent(f, np.zeros(3), IterationCondition(10), 1e-8, Bad())
    assert f.calls == 0
