"""
Validity predicates and the filtering stage.

Validity is checked before collision so that structurally rejected joint
states never reach the collision engine.
"""

from typing import Callable, List, Sequence

import numpy as np

ValidityPredicate = Callable[[np.ndarray], bool]


def always_valid(state: np.ndarray) -> bool:
    """Default predicate: accept every joint state."""
    return True


class JointLimitsValidator:
    """
    Rejects joint states outside a joint-limit envelope.

    Args:
        joint_limits: (dof, 2) array of [lower, upper]
        tolerance: Slack allowed beyond each limit
    """

    def __init__(self, joint_limits: Sequence[Sequence[float]], tolerance: float = 0.0):
        self.joint_limits = np.array(joint_limits, dtype=np.float64).reshape(-1, 2)
        self.tolerance = tolerance

    def __call__(self, state: np.ndarray) -> bool:
        if len(state) != len(self.joint_limits):
            return False
        return bool(
            np.all(state >= self.joint_limits[:, 0] - self.tolerance)
            and np.all(state <= self.joint_limits[:, 1] + self.tolerance)
        )


class AllOf:
    """Predicate that holds when every wrapped predicate holds."""

    def __init__(self, *predicates: ValidityPredicate):
        self.predicates = predicates

    def __call__(self, state: np.ndarray) -> bool:
        return all(predicate(state) for predicate in self.predicates)


class ValidityFilter:
    """Keeps the joint states the predicate accepts, in order."""

    def __init__(self, predicate: ValidityPredicate):
        self.predicate = predicate

    def apply(self, states: Sequence[np.ndarray]) -> List[np.ndarray]:
        return [state for state in states if self.predicate(state)]
