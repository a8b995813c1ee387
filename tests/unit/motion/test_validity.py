"""
Tests for validity predicates and filtering.
"""

import numpy as np

from waypoint_sampler.motion.validity import (
    AllOf,
    JointLimitsValidator,
    ValidityFilter,
    always_valid,
)


def test_always_valid():
    assert always_valid(np.array([1e9]))


def test_joint_limits_validator():
    validator = JointLimitsValidator([[-1.0, 1.0], [0.0, 2.0]])
    assert validator(np.array([0.0, 1.0]))
    assert validator(np.array([-1.0, 2.0]))
    assert not validator(np.array([1.1, 1.0]))
    assert not validator(np.array([0.0, -0.1]))
    assert not validator(np.array([0.0]))


def test_joint_limits_tolerance():
    validator = JointLimitsValidator([[-1.0, 1.0]], tolerance=0.05)
    assert validator(np.array([1.04]))
    assert not validator(np.array([1.06]))


def test_all_of():
    positive = lambda state: bool(state[0] > 0)  # noqa: E731
    small = lambda state: bool(state[0] < 1)  # noqa: E731
    predicate = AllOf(positive, small)
    assert predicate(np.array([0.5]))
    assert not predicate(np.array([1.5]))
    assert not predicate(np.array([-0.5]))


def test_filter_keeps_order():
    states = [np.array([v]) for v in (0.5, 3.0, -0.2, 0.9)]
    kept = ValidityFilter(JointLimitsValidator([[0.0, 1.0]])).apply(states)
    assert [s[0] for s in kept] == [0.5, 0.9]


def test_filter_reject_all():
    states = [np.array([v]) for v in (0.5, 3.0)]
    assert ValidityFilter(lambda state: False).apply(states) == []
