"""
Tests for sampling many waypoints concurrently.
"""

import numpy as np
import pytest

from waypoint_sampler.motion.batch import sample_waypoints
from waypoint_sampler.motion.pose_samplers import sample_fixed
from waypoint_sampler.motion.sampler import RobotSampler
from waypoint_sampler.motion.types import CandidateState


class StaticSampler:
    def __init__(self, states):
        self.states = states

    def sample(self):
        return self.states


class FailingSampler:
    def sample(self):
        raise RuntimeError("boom")


def test_results_in_input_order():
    samplers = [
        StaticSampler([CandidateState(values=np.array([float(i)]), collision_free=True)])
        for i in range(20)
    ]

    results = sample_waypoints(samplers, max_workers=4)

    assert [r[0].values[0] for r in results] == [float(i) for i in range(20)]


def test_empty():
    assert sample_waypoints([]) == []


def test_infeasible_waypoint_is_empty_list():
    results = sample_waypoints([StaticSampler([]), StaticSampler([])])
    assert results == [[], []]


def test_exceptions_propagate():
    with pytest.raises(RuntimeError, match="boom"):
        sample_waypoints([StaticSampler([]), FailingSampler()])


def test_shared_collaborators(table_ik, free_collision, three_joint_limits):
    ik = table_ik([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]])
    samplers = []
    for x in np.linspace(0.1, 0.5, 8):
        pose = np.eye(4)
        pose[0, 3] = x
        samplers.append(
            RobotSampler(
                target_pose=pose,
                pose_sampler=sample_fixed,
                ik=ik,
                collision=free_collision,
                joint_limits=three_joint_limits,
            )
        )

    results = sample_waypoints(samplers, max_workers=4)

    assert [len(r) for r in results] == [2] * 8
    assert len(ik.calls) == 8
