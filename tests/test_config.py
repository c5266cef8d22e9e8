"""Tests for run configuration factories."""

from __future__ import annotations

import dataclasses

import numpy as np
import pytest

from gradmin import (
    CombinedCondition,
    ConstantStartDistance,
    IllegalConfiguration,
    IterationCondition,
    LimitedMedianStartDistance,
    OptimConfig,
    create_forecaster,
    create_termination,
)


def test_default_config() -> None:
    config = OptimConfig()
    assert config.algorithm == "bfgs"
    assert config.history_size == 5
    assert config.line_eps == 1e-10
    assert config.start_distance == 1.0


def test_config_is_frozen() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        OptimConfig().max_iter = 3  # type: ignore[misc]


def test_default_termination_combines_all_rules() -> None:
    condition = create_termination(OptimConfig())
    assert isinstance(condition, CombinedCondition)
    assert condition.threshold == 3
    assert condition.is_simple()


def test_termination_with_only_iterations() -> None:
    condition = create_termination(OptimConfig(ftol=None, gtol=None, max_iter=7))
    assert isinstance(condition, IterationCondition)
    assert condition.max_iter == 7


def test_time_limit_makes_termination_non_simple() -> None:
    condition = create_termination(OptimConfig(time_limit=5.0))
    assert condition.threshold == 4
    assert not condition.is_simple()


def test_termination_stops_on_any_rule() -> None:
    condition = create_termination(OptimConfig(max_iter=10, ftol=1e-6, gtol=1e-3))
    g = np.array([1.0])
    d = np.array([1.0])
    assert condition.should_continue(1, 2.0, 1.0, g, d, 1.0, 0.0)
    assert not condition.should_continue(10, 2.0, 1.0, g, d, 1.0, 0.0)
    assert not condition.should_continue(1, 1.0, 1.0, g, d, 1.0, 0.0)
    assert not condition.should_continue(1, 2.0, 1.0, g * 1e-4, d, 1.0, 0.0)


@pytest.mark.parametrize(
    "kwargs",
    [{"max_iter": -1}, {"ftol": 0.0}, {"gtol": -1.0}, {"time_limit": 0.0}],
)
def test_invalid_termination_settings(kwargs) -> None:
    with pytest.raises(IllegalConfiguration):
        create_termination(OptimConfig(**kwargs))


def test_forecaster_factory() -> None:
    constant = create_forecaster(OptimConfig(start_distance=0.5))
    assert isinstance(constant, ConstantStartDistance)
    assert constant.next_start_distance() == 0.5
    median = create_forecaster(OptimConfig(forecast_window=4, start_distance=2.0))
    assert isinstance(median, LimitedMedianStartDistance)
    assert median.window == 4
    assert median.next_start_distance() == 2.0


@pytest.mark.parametrize("kwargs", [{"start_distance": 0.0}, {"forecast_window": -2}])
def test_invalid_forecaster_settings(kwargs) -> None:
    with pytest.raises(IllegalConfiguration):
        create_forecaster(OptimConfig(**kwargs))
