"""
Pose sampling functions and the pose enumeration stage.

A pose sampler maps one target tool pose to an ordered list of candidate
tool poses, for example a sweep of rotations about the tool axis when the
process does not care about that rotation.
"""

import math
from typing import Callable, List

import numpy as np

from waypoint_sampler.core.exceptions import ConfigurationError
from waypoint_sampler.core.geometry import AXES, axis_rotation, invert, is_rigid
from waypoint_sampler.core.logging import get_logger

logger = get_logger(__name__)

PoseSamplerFn = Callable[[np.ndarray], List[np.ndarray]]


def sample_fixed(tool_pose: np.ndarray) -> List[np.ndarray]:
    """Return the target pose unchanged (fully constrained waypoint)."""
    return [np.array(tool_pose, dtype=np.float64)]


def sample_tool_axis(
    tool_pose: np.ndarray, resolution: float, axis: str = "z"
) -> List[np.ndarray]:
    """
    Sample rotations of a pose about one of its own axes.

    The sweep covers [-pi, pi) with an angular step no larger than
    ``resolution``; -pi and pi are the same pose so only one is emitted.

    Args:
        tool_pose: 4x4 target pose
        resolution: Maximum angular step in radians
        axis: Local axis to rotate about ('x', 'y' or 'z')

    Returns:
        Poses ordered by increasing rotation angle
    """
    if not (math.isfinite(resolution) and resolution > 0.0):
        raise ConfigurationError(
            "Tool axis sampling resolution must be positive",
            details={"resolution": resolution},
        )
    if axis not in AXES:
        raise ConfigurationError(
            f"Unknown tool axis: {axis}", details={"available": sorted(AXES)}
        )

    steps = max(int(math.ceil(2.0 * math.pi / resolution)), 1)
    angles = -math.pi + np.arange(steps) * (2.0 * math.pi / steps)
    return [tool_pose @ axis_rotation(axis, float(angle)) for angle in angles]


def sample_tool_x_axis(tool_pose: np.ndarray, resolution: float) -> List[np.ndarray]:
    return sample_tool_axis(tool_pose, resolution, "x")


def sample_tool_y_axis(tool_pose: np.ndarray, resolution: float) -> List[np.ndarray]:
    return sample_tool_axis(tool_pose, resolution, "y")


def sample_tool_z_axis(tool_pose: np.ndarray, resolution: float) -> List[np.ndarray]:
    return sample_tool_axis(tool_pose, resolution, "z")


def make_tool_axis_sampler(resolution: float, axis: str = "z") -> PoseSamplerFn:
    """
    Bind resolution and axis into a one-argument pose sampler.

    Arguments are validated immediately so a bad setting fails when the
    sampler is configured rather than during planning.
    """
    sample_tool_axis(np.eye(4), resolution, axis)

    def sampler(tool_pose: np.ndarray) -> List[np.ndarray]:
        return sample_tool_axis(tool_pose, resolution, axis)

    return sampler


class PoseEnumerator:
    """
    Applies a pose sampler to a target and composes the tool offset.

    The returned poses are targets for the robot's terminal link: each
    sampled tool pose multiplied by the inverse tool offset. Nothing is
    filtered here.
    """

    def __init__(self, sampler_fn: PoseSamplerFn, tool_offset: np.ndarray):
        self.sampler_fn = sampler_fn
        self._tool_inverse = invert(tool_offset)

    def enumerate(self, target_pose: np.ndarray) -> List[np.ndarray]:
        """
        Produce the candidate link poses for one target.

        Args:
            target_pose: 4x4 tool target in the robot base frame

        Returns:
            Link poses in the order the sampler produced them; sampled
            poses that are not rigid transforms are dropped
        """
        poses = []
        for pose in self.sampler_fn(target_pose.copy()):
            matrix = np.asarray(pose, dtype=np.float64)
            if not is_rigid(matrix):
                logger.debug("sampled_pose_discarded", shape=matrix.shape)
                continue
            poses.append(matrix @ self._tool_inverse)
        return poses
