import math

import numpy as np
import pytest

from gradmin import (
    AbsoluteValueCondition,
    CombinedCondition,
    IllegalConfiguration,
    IterationCondition,
    RelativeChangeCondition,
    SmallDifferenceOfFunctionEvaluationsCondition,
    SmallGradientCondition,
    SmallStepCondition,
    TimeCondition,
)

G = np.array([3.0, 4.0])
D = np.array([1.0, 0.0])


def ask(condition, iteration=1, f_last=2.0, f_current=1.0, gradient=G, direction=D, alpha=1.0, elapsed=0.0):
    return condition.should_continue(iteration, f_last, f_current, gradient, direction, alpha, elapsed)


def test_iteration_condition():
    c = IterationCondition(3)
    assert ask(c, iteration=2)
    assert not ask(c, iteration=3)
    assert not ask(IterationCondition(0), iteration=0)


def test_absolute_value_condition():
    c = AbsoluteValueCondition(0.5)
    assert ask(c, f_current=0.6)
    assert not ask(c, f_current=0.5)


def test_small_difference_condition():
    c = SmallDifferenceOfFunctionEvaluationsCondition(1e-3)
    assert ask(c, f_last=math.inf, f_current=1.0)
    assert ask(c, f_last=1.01, f_current=1.0)
    assert not ask(c, f_last=1.0005, f_current=1.0)


def test_relative_change_condition():
    c = RelativeChangeCondition(1e-3)
    assert ask(c, f_last=math.inf)
    assert ask(c, f_last=1000.0, f_current=990.0)
    assert not ask(c, f_last=1000.0, f_current=999.5)
    assert not ask(c, f_last=0.0, f_current=0.0)


def test_small_gradient_condition():
    assert ask(SmallGradientCondition(4.9))
    assert not ask(SmallGradientCondition(5.0))


def test_small_step_condition():
    c = SmallStepCondition(1e-2)
    assert ask(c, alpha=math.inf)
    assert ask(c, alpha=0.1, direction=np.array([0.0, 1.0]))
    assert not ask(c, alpha=1e-3, direction=np.array([0.0, 1.0]))


def test_time_condition_is_not_simple():
    c = TimeCondition(2.0)
    assert ask(c, elapsed=1.0)
    assert not ask(c, elapsed=2.0)
    assert not c.is_simple()
    assert IterationCondition(1).is_simple()


def test_combined_condition_threshold():
    iterations = IterationCondition(10)
    gradient = SmallGradientCondition(10.0)
    both = CombinedCondition(2, iterations, gradient)
    either = CombinedCondition(1, iterations, gradient)
    assert not ask(both)
    assert ask(either)
    assert not ask(either, iteration=10)


def test_combined_condition_simplicity():
    assert CombinedCondition(1, IterationCondition(1)).is_simple()
    assert not CombinedCondition(1, IterationCondition(1), TimeCondition(1.0)).is_simple()


@pytest.mark.parametrize("threshold", [0, 3])
def test_combined_condition_rejects_threshold(threshold):
    with pytest.raises(IllegalConfiguration, match="threshold"):
        CombinedCondition(threshold, IterationCondition(1), IterationCondition(2))


def test_combined_condition_needs_members():
    with pytest.raises(IllegalConfiguration):
        CombinedCondition(1)


@pytest.mark.parametrize(
    "factory",
    [
        SmallDifferenceOfFunctionEvaluationsCondition,
        RelativeChangeCondition,
        SmallGradientCondition,
        SmallStepCondition,
        TimeCondition,
    ],
)
@pytest.mark.parametrize("value", [0.0, -1.0, math.nan])
def test_thresholds_must_be_positive(factory, value):
    with pytest.raises(IllegalConfiguration):
        factory(value)


def test_iteration_and_absolute_conditions_reject_invalid():
    with pytest.raises(IllegalConfiguration):
        IterationCondition(-1)
    with pytest.raises(IllegalConfiguration):
        AbsoluteValueCondition(math.nan)
