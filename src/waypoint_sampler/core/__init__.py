"""
Core module - Shared utilities, configuration, and pose handling.
"""

from waypoint_sampler.core.config import (
    ConfigManager,
    JointConfig,
    RobotConfig,
    SamplerSettings,
)
from waypoint_sampler.core.exceptions import (
    ConfigurationError,
    KinematicsError,
    SamplerError,
)
from waypoint_sampler.core.geometry import as_matrix, invert, is_rigid, pose_from_xyzrpy

__all__ = [
    # Config
    "ConfigManager",
    "JointConfig",
    "RobotConfig",
    "SamplerSettings",
    # Exceptions
    "SamplerError",
    "ConfigurationError",
    "KinematicsError",
    # Geometry
    "as_matrix",
    "invert",
    "is_rigid",
    "pose_from_xyzrpy",
]
