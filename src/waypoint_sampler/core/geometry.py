"""
Pose handling for waypoint_sampler using COMPAS and numpy.

Poses travel through the samplers as 4x4 homogeneous numpy arrays. Callers
may hand in COMPAS Frames or Transformations instead; ``as_matrix`` converts
and validates them once, at construction time.
"""

from typing import Sequence, Union

import numpy as np
from compas.geometry import Frame, Rotation, Transformation, Translation

from waypoint_sampler.core.exceptions import ConfigurationError

PoseLike = Union[np.ndarray, Frame, Transformation, Sequence[Sequence[float]]]

AXES = {"x": (1.0, 0.0, 0.0), "y": (0.0, 1.0, 0.0), "z": (0.0, 0.0, 1.0)}


def is_rigid(matrix: np.ndarray, tolerance: float = 1e-6) -> bool:
    """
    Check that a 4x4 matrix is a proper rigid transform.

    Args:
        matrix: Candidate homogeneous matrix
        tolerance: Absolute tolerance for orthonormality and determinant

    Returns:
        True if the rotation block is orthonormal with determinant +1 and
        the last row is [0, 0, 0, 1]
    """
    if matrix.shape != (4, 4) or not np.all(np.isfinite(matrix)):
        return False
    rotation = matrix[:3, :3]
    if not np.allclose(rotation.T @ rotation, np.eye(3), atol=tolerance):
        return False
    if abs(np.linalg.det(rotation) - 1.0) > tolerance:
        return False
    return bool(np.allclose(matrix[3], [0.0, 0.0, 0.0, 1.0], atol=tolerance))


def as_matrix(pose: PoseLike, name: str = "pose") -> np.ndarray:
    """
    Convert a pose to a validated 4x4 float64 matrix.

    Args:
        pose: numpy array, nested list, COMPAS Frame or COMPAS Transformation
        name: Label used in error messages

    Returns:
        New 4x4 numpy array (the caller's object is never aliased)

    Raises:
        ConfigurationError: If the pose is not a rigid transform
    """
    if isinstance(pose, Frame):
        pose = Transformation.from_frame(pose)
    if isinstance(pose, Transformation):
        pose = pose.matrix

    try:
        matrix = np.array(pose, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} is not numeric", details={"error": str(e)}) from e

    if not is_rigid(matrix):
        raise ConfigurationError(
            f"{name} must be a 4x4 rigid transform",
            details={"shape": matrix.shape},
        )
    return matrix


def invert(matrix: np.ndarray) -> np.ndarray:
    """Invert a rigid transform without a general matrix inverse."""
    rotation = matrix[:3, :3]
    inverse = np.eye(4)
    inverse[:3, :3] = rotation.T
    inverse[:3, 3] = -rotation.T @ matrix[:3, 3]
    return inverse


def axis_rotation(axis: str, angle: float) -> np.ndarray:
    """
    Rotation about one of the local coordinate axes.

    Args:
        axis: 'x', 'y' or 'z'
        angle: Rotation angle in radians

    Returns:
        4x4 homogeneous rotation matrix
    """
    if axis not in AXES:
        raise ConfigurationError(
            f"Unknown axis: {axis}", details={"available": sorted(AXES)}
        )
    return np.array(Rotation.from_axis_and_angle(AXES[axis], angle).matrix)


def pose_from_xyzrpy(values: Sequence[float]) -> np.ndarray:
    """
    Build a pose from ``[x, y, z, rx, ry, rz]``.

    Rotations are static XYZ Euler angles in radians, the same convention
    as COMPAS ``Rotation.from_euler_angles`` defaults.

    Args:
        values: Six numbers (translation then rotation)

    Returns:
        4x4 homogeneous matrix
    """
    if len(values) != 6:
        raise ConfigurationError(
            "Pose offsets need six values [x, y, z, rx, ry, rz]",
            details={"received": len(values)},
        )
    x, y, z, rx, ry, rz = (float(v) for v in values)
    transform = Translation.from_vector([x, y, z]) * Rotation.from_euler_angles(
        [rx, ry, rz], static=True, axes="xyz"
    )
    return np.array(transform.matrix)
