"""
Tests for pose samplers and the pose enumeration stage.
"""

import math

import numpy as np
import pytest

from waypoint_sampler.core.exceptions import ConfigurationError
from waypoint_sampler.core.geometry import pose_from_xyzrpy
from waypoint_sampler.motion.pose_samplers import (
    PoseEnumerator,
    make_tool_axis_sampler,
    sample_fixed,
    sample_tool_axis,
    sample_tool_x_axis,
    sample_tool_z_axis,
)


class TestSamplers:
    """Tests for the pose sampling functions."""

    def test_fixed_returns_target(self, target_pose):
        poses = sample_fixed(target_pose)
        assert len(poses) == 1
        np.testing.assert_array_equal(poses[0], target_pose)

    def test_tool_axis_sweep(self, target_pose):
        poses = sample_tool_z_axis(target_pose, math.pi / 2)

        assert len(poses) == 4
        for pose in poses:
            # Rotation about the tool z axis keeps position and z axis
            np.testing.assert_allclose(pose[:3, 3], target_pose[:3, 3])
            np.testing.assert_allclose(pose[:3, 2], target_pose[:3, 2], atol=1e-12)

        # First sample is rotated by -pi
        np.testing.assert_allclose(poses[0][:3, 0], [-1.0, 0.0, 0.0], atol=1e-12)

    def test_tool_axis_step_not_larger_than_resolution(self):
        poses = sample_tool_axis(np.eye(4), 0.3, "z")
        assert len(poses) == math.ceil(2 * math.pi / 0.3)

    def test_x_axis_keeps_x(self, target_pose):
        for pose in sample_tool_x_axis(target_pose, 1.0):
            np.testing.assert_allclose(pose[:3, 0], [1.0, 0.0, 0.0], atol=1e-12)

    @pytest.mark.parametrize("resolution", [0.0, -0.1, float("nan"), float("inf")])
    def test_bad_resolution(self, resolution):
        with pytest.raises(ConfigurationError):
            sample_tool_axis(np.eye(4), resolution)

    def test_factory_validates_eagerly(self):
        with pytest.raises(ConfigurationError):
            make_tool_axis_sampler(0.1, axis="q")

    def test_factory(self, target_pose):
        sampler = make_tool_axis_sampler(math.pi, axis="y")
        assert len(sampler(target_pose)) == 2


class TestPoseEnumerator:
    """Tests for PoseEnumerator."""

    def test_identity_tool(self, target_pose):
        poses = PoseEnumerator(sample_fixed, np.eye(4)).enumerate(target_pose)
        assert len(poses) == 1
        np.testing.assert_allclose(poses[0], target_pose)

    def test_tool_offset_composed(self, target_pose):
        tool = pose_from_xyzrpy([0.0, 0.0, 0.2, 0.0, 0.0, 0.0])
        poses = PoseEnumerator(sample_fixed, tool).enumerate(target_pose)

        # The flange sits 0.2 m behind the tool point along the tool z axis
        np.testing.assert_allclose(poses[0][:3, 3], target_pose[:3, 3] - [0.0, 0.0, 0.2])
        np.testing.assert_allclose(poses[0] @ tool, target_pose, atol=1e-12)

    def test_empty_sampler(self, target_pose):
        assert PoseEnumerator(lambda pose: [], np.eye(4)).enumerate(target_pose) == []

    def test_order_preserved_and_degenerate_dropped(self, target_pose):
        first = target_pose.copy()
        second = target_pose.copy()
        second[0, 3] += 1.0
        bad = np.full((4, 4), np.nan)

        poses = PoseEnumerator(lambda pose: [first, bad, second], np.eye(4)).enumerate(target_pose)

        assert len(poses) == 2
        np.testing.assert_allclose(poses[0], first)
        np.testing.assert_allclose(poses[1], second)

    def test_sampler_cannot_mutate_target(self, target_pose):
        def mutating(pose):
            pose[0, 3] = 99.0
            return [pose]

        original = target_pose.copy()
        PoseEnumerator(mutating, np.eye(4)).enumerate(target_pose)
        np.testing.assert_array_equal(target_pose, original)
