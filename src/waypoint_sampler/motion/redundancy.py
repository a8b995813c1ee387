"""
Redundant joint solutions.

A revolute joint whose range spans more than one turn reaches the same
Cartesian pose at ``q``, ``q + 2*pi`` and ``q - 2*pi``. Expansion is applied
one joint at a time: alternates that turn two joints at once are not
generated.
"""

import math
from typing import List, Sequence

import numpy as np


def get_redundant_solutions(
    solution: np.ndarray,
    joint: int,
    limits: np.ndarray,
    period: float = 2.0 * math.pi,
) -> List[np.ndarray]:
    """
    One-turn alternates of a single joint that stay within its limits.

    Args:
        solution: Joint state to vary
        joint: Index of the joint to turn
        limits: (dof, 2) joint limits
        period: Value of one full turn for that joint

    Returns:
        ``[+turn, -turn]`` alternates, each only if in limits
    """
    lower, upper = limits[joint]
    alternates = []
    for direction in (1.0, -1.0):
        alternate = solution.copy()
        alternate[joint] = alternate[joint] + direction * period
        if lower <= alternate[joint] <= upper:
            alternates.append(alternate)
    return alternates


class RedundancyExpander:
    """Adds the in-limit single-joint turn alternates of each raw solution."""

    def __init__(
        self,
        redundancy_joints: Sequence[int],
        joint_limits: np.ndarray,
        joint_periods: np.ndarray,
    ):
        self.redundancy_joints = tuple(redundancy_joints)
        self.joint_limits = joint_limits
        self.joint_periods = joint_periods

    def expand(self, solutions: Sequence[np.ndarray]) -> List[np.ndarray]:
        """
        Expand raw solutions.

        Order: each raw solution, followed by its +turn and -turn
        alternates for every redundancy joint in configured order.
        """
        if not self.redundancy_joints:
            return list(solutions)

        expanded: List[np.ndarray] = []
        for solution in solutions:
            expanded.append(solution)
            for joint in self.redundancy_joints:
                expanded.extend(
                    get_redundant_solutions(
                        solution,
                        joint,
                        self.joint_limits,
                        float(self.joint_periods[joint]),
                    )
                )
        return expanded
