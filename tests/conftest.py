"""
Pytest configuration and shared fixtures.
"""

import math
import tempfile
import threading
from pathlib import Path

import numpy as np
import pytest

from waypoint_sampler.motion.types import CollisionResult


class TableIK:
    """IK collaborator returning the same solutions for every pose."""

    def __init__(self, solutions, joint_limits=None):
        self.solutions = [list(s) for s in solutions]
        if joint_limits is not None:
            self.joint_limits = joint_limits
        self.calls = []
        self._lock = threading.Lock()

    def solve(self, pose, seed):
        with self._lock:
            self.calls.append((np.array(pose), np.array(seed)))
        return [list(s) for s in self.solutions]


class FunctionIK:
    """IK collaborator delegating to a function of (pose, seed)."""

    def __init__(self, fn):
        self.fn = fn

    def solve(self, pose, seed):
        return self.fn(pose, seed)


class FunctionCollision:
    """Collision collaborator delegating to a function of the joint state."""

    def __init__(self, fn):
        self.fn = fn
        self.queried = []
        self._lock = threading.Lock()

    def evaluate(self, state):
        with self._lock:
            self.queried.append(np.array(state))
        return self.fn(state)


def planar_fk(values):
    """Planar two-link arm, unit links, rotating about z."""
    q0, q1 = float(values[0]), float(values[1])
    angle = q0 + q1
    pose = np.eye(4)
    pose[:2, :2] = [[math.cos(angle), -math.sin(angle)], [math.sin(angle), math.cos(angle)]]
    pose[0, 3] = math.cos(q0) + math.cos(angle)
    pose[1, 3] = math.sin(q0) + math.sin(angle)
    return pose


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def target_pose():
    pose = np.eye(4)
    pose[:3, 3] = [0.5, 0.1, 0.4]
    return pose


@pytest.fixture
def free_collision():
    return FunctionCollision(lambda state: CollisionResult(collision_free=True, cost=0.0))


@pytest.fixture
def three_joint_limits():
    """Joint 0 spans +-4 rad, the others +-pi."""
    return np.array([[-4.0, 4.0], [-math.pi, math.pi], [-math.pi, math.pi]])


@pytest.fixture
def sample_config_dir(temp_dir):
    """Create a sample configuration directory structure."""
    config_dir = temp_dir / "config"
    (config_dir / "robots").mkdir(parents=True)
    (config_dir / "samplers").mkdir(parents=True)

    robot_config = """
robot:
  name: "Test Robot"
  manufacturer: "Test Manufacturer"
  redundancy_joints: [2]

joints:
  - {name: joint_1, lower: -3.14, upper: 3.14}
  - {name: joint_2, lower: -1.57, upper: 1.57}
  - {name: joint_3, lower: -6.28, upper: 6.28}

tool:
  offset: [0.0, 0.0, 0.2, 0.0, 0.0, 0.0]
"""
    (config_dir / "robots" / "test_robot.yaml").write_text(robot_config)

    sampler_config = """
sampler:
  pose_sampling: tool_axis
  tool_axis: z
  resolution: 1.5707963267948966
  allow_collision: true
  dtype: float32
  collision_margin: 0.015
"""
    (config_dir / "samplers" / "sweep.yaml").write_text(sampler_config)

    return config_dir


@pytest.fixture
def table_ik():
    """Factory for IK collaborators with a fixed solution table."""
    return TableIK


@pytest.fixture
def function_ik():
    return FunctionIK


@pytest.fixture
def collision_from():
    """Factory for collision collaborators backed by a function."""
    return FunctionCollision


@pytest.fixture
def planar_arm_fk():
    return planar_fk
