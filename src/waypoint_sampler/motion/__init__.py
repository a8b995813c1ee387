"""
Motion module - per-waypoint candidate state sampling.

This module provides:
- Pose samplers (fixed pose, sweeps about a tool axis)
- The sampler stages: IK resolution, redundant-turn expansion, validity
  filtering, collision annotation, result aggregation
- RobotSampler and RobotPositionerSampler, both satisfying WaypointSampler
- A thread-pool runner for sampling many waypoints

The PyBullet collision collaborator lives in ``waypoint_sampler.motion.bullet``
and is imported explicitly so that pybullet is only loaded when used.
"""

from waypoint_sampler.motion.batch import sample_waypoints
from waypoint_sampler.motion.collision import CollisionEvaluator, CollisionInterface
from waypoint_sampler.motion.kinematics import (
    InverseKinematics,
    KinematicsResolver,
    NumericalIKSolver,
)
from waypoint_sampler.motion.pose_samplers import (
    PoseEnumerator,
    make_tool_axis_sampler,
    sample_fixed,
    sample_tool_axis,
    sample_tool_x_axis,
    sample_tool_y_axis,
    sample_tool_z_axis,
)
from waypoint_sampler.motion.positioner import (
    ExternalAxis,
    ExternalAxisType,
    Positioner,
    RobotPositionerSampler,
    create_linear_track,
    create_turntable,
)
from waypoint_sampler.motion.redundancy import RedundancyExpander, get_redundant_solutions
from waypoint_sampler.motion.sampler import RobotSampler, SamplerConfig, aggregate
from waypoint_sampler.motion.types import CandidateState, CollisionResult, WaypointSampler
from waypoint_sampler.motion.validity import (
    AllOf,
    JointLimitsValidator,
    ValidityFilter,
    always_valid,
)

__all__ = [
    # Samplers
    "RobotSampler",
    "RobotPositionerSampler",
    "SamplerConfig",
    "WaypointSampler",
    "CandidateState",
    "sample_waypoints",
    # Pose sampling
    "PoseEnumerator",
    "sample_fixed",
    "sample_tool_axis",
    "sample_tool_x_axis",
    "sample_tool_y_axis",
    "sample_tool_z_axis",
    "make_tool_axis_sampler",
    # Kinematics
    "InverseKinematics",
    "KinematicsResolver",
    "NumericalIKSolver",
    "RedundancyExpander",
    "get_redundant_solutions",
    # Validity
    "ValidityFilter",
    "JointLimitsValidator",
    "AllOf",
    "always_valid",
    # Collision
    "CollisionInterface",
    "CollisionEvaluator",
    "CollisionResult",
    "aggregate",
    # External axes
    "ExternalAxis",
    "ExternalAxisType",
    "Positioner",
    "create_turntable",
    "create_linear_track",
]
