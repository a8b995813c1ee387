"""
Waypoint sampling for a robot working on a part held by external axes.

The part sits on a positioner (turntable, linear track, or a chain of such
axes). The waypoint target is expressed in the part frame, so every
positioner setting moves the target in the robot's base frame. Candidate
states are the positioner values followed by the robot joint values.
"""

import itertools
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence

import numpy as np
from compas.geometry import Frame

from waypoint_sampler.core.exceptions import ConfigurationError
from waypoint_sampler.core.geometry import PoseLike, as_matrix, axis_rotation, is_rigid
from waypoint_sampler.core.logging import get_logger
from waypoint_sampler.motion.collision import CollisionEvaluator, CollisionInterface
from waypoint_sampler.motion.kinematics import InverseKinematics, KinematicsResolver
from waypoint_sampler.motion.pose_samplers import PoseEnumerator, PoseSamplerFn
from waypoint_sampler.motion.redundancy import RedundancyExpander
from waypoint_sampler.motion.sampler import SamplerConfig, aggregate
from waypoint_sampler.motion.types import CandidateState
from waypoint_sampler.motion.validity import ValidityFilter, ValidityPredicate, always_valid

logger = get_logger(__name__)


class ExternalAxisType(Enum):
    """Types of external axes."""

    ROTARY = "rotary"  # rotation about the local z axis (turntable)
    LINEAR = "linear"  # translation along the local x axis (track)


@dataclass
class ExternalAxis:
    """
    One external axis.

    Attributes:
        name: Axis name/identifier
        axis_type: Rotary or linear
        lower: Minimum position (rad or m)
        upper: Maximum position (rad or m)
        resolution: Largest step between sampled positions (rad or m)
    """

    name: str
    axis_type: ExternalAxisType
    lower: float
    upper: float
    resolution: float

    def __post_init__(self) -> None:
        if self.lower > self.upper:
            raise ConfigurationError(f"Axis '{self.name}': lower limit exceeds upper limit")
        if not (math.isfinite(self.resolution) and self.resolution > 0.0):
            raise ConfigurationError(
                f"Axis '{self.name}': resolution must be positive",
                details={"resolution": self.resolution},
            )

    def sample_values(self) -> np.ndarray:
        """Evenly spaced positions spanning the limits, both ends included."""
        span = self.upper - self.lower
        count = int(math.ceil(span / self.resolution)) + 1 if span > 0.0 else 1
        return np.linspace(self.lower, self.upper, count)


@dataclass
class Positioner:
    """
    Serial chain of external axes carrying the part.

    Attributes:
        axes: Axes from the base outwards
        base_frame: Positioner base pose in the robot base frame
        mounting_frame: Part frame relative to the last axis
    """

    axes: List[ExternalAxis]
    base_frame: np.ndarray = field(default_factory=lambda: np.eye(4))
    mounting_frame: np.ndarray = field(default_factory=lambda: np.eye(4))

    def __post_init__(self) -> None:
        if not self.axes:
            raise ConfigurationError("A positioner needs at least one axis")
        self.base_frame = as_matrix(self.base_frame, name="positioner base frame")
        self.mounting_frame = as_matrix(self.mounting_frame, name="positioner mounting frame")

    @property
    def dof(self) -> int:
        return len(self.axes)

    def joint_limits(self) -> np.ndarray:
        return np.array([[axis.lower, axis.upper] for axis in self.axes])

    def sample_values(self) -> List[np.ndarray]:
        """All axis settings on the sampling grid, first axis varying slowest."""
        grids = [axis.sample_values() for axis in self.axes]
        return [np.array(values) for values in itertools.product(*grids)]

    def forward_kinematics(self, values: Sequence[float]) -> np.ndarray:
        """
        Part frame in the robot base frame for the given axis positions.

        Args:
            values: One position per axis

        Returns:
            4x4 homogeneous matrix
        """
        transform = self.base_frame.copy()
        for value, axis in zip(values, self.axes):
            if axis.axis_type == ExternalAxisType.ROTARY:
                transform = transform @ axis_rotation("z", float(value))
            else:
                step = np.eye(4)
                step[0, 3] = float(value)
                transform = transform @ step
        return transform @ self.mounting_frame


def create_turntable(
    max_rotation: float = 2.0 * math.pi,
    resolution: float = math.radians(10.0),
    base_frame: Optional[PoseLike] = None,
) -> Positioner:
    """
    Single rotary axis centred on zero.

    Args:
        max_rotation: Total rotation range (rad)
        resolution: Sampling step (rad)
        base_frame: Table pose in the robot base frame (default: robot base)
    """
    axis = ExternalAxis(
        name="turntable",
        axis_type=ExternalAxisType.ROTARY,
        lower=-max_rotation / 2.0,
        upper=max_rotation / 2.0,
        resolution=resolution,
    )
    return Positioner(axes=[axis], base_frame=Frame.worldXY() if base_frame is None else base_frame)


def create_linear_track(
    length: float = 3.0,
    resolution: float = 0.1,
    base_frame: Optional[PoseLike] = None,
) -> Positioner:
    """
    Single linear axis starting at zero.

    Args:
        length: Track length (m)
        resolution: Sampling step (m)
        base_frame: Track start pose in the robot base frame
    """
    axis = ExternalAxis(
        name="linear_track",
        axis_type=ExternalAxisType.LINEAR,
        lower=0.0,
        upper=length,
        resolution=resolution,
    )
    return Positioner(axes=[axis], base_frame=Frame.worldXY() if base_frame is None else base_frame)


class RobotPositionerSampler:
    """
    Candidate states ``[positioner..., robot...]`` for one part-frame waypoint.

    Redundancy joint indices, joint limits, periods and the validity
    predicate all refer to the combined vector. The seed, if given, is the
    robot seed only.
    """

    def __init__(
        self,
        target_pose: PoseLike,
        pose_sampler: PoseSamplerFn,
        positioner: Positioner,
        ik: InverseKinematics,
        collision: CollisionInterface,
        robot_joint_limits: Optional[Any] = None,
        tool_offset: Optional[PoseLike] = None,
        allow_collision: bool = False,
        is_valid: Optional[ValidityPredicate] = always_valid,
        redundancy_joints: Sequence[int] = (),
        joint_periods: Optional[Any] = None,
        seed: Optional[Any] = None,
        dtype: Any = np.float64,
    ):
        if positioner is None:
            raise ConfigurationError("A positioner is required")
        if robot_joint_limits is None:
            robot_joint_limits = getattr(ik, "joint_limits", None)
        if robot_joint_limits is None:
            raise ConfigurationError("Robot joint limits are required with a positioner")
        robot_limits = np.array(robot_joint_limits, dtype=np.float64).reshape(-1, 2)

        self.positioner = positioner
        robot_seed = np.zeros(len(robot_limits)) if seed is None else np.ravel(seed)
        if robot_seed.size != len(robot_limits):
            raise ConfigurationError(
                "IK seed must have one value per robot joint",
                details={"robot_dof": len(robot_limits), "seed_length": robot_seed.size},
            )

        self.config = SamplerConfig(
            target_pose=target_pose,
            pose_sampler=pose_sampler,
            ik=ik,
            collision=collision,
            tool_offset=tool_offset,
            allow_collision=allow_collision,
            is_valid=is_valid,
            redundancy_joints=redundancy_joints,
            joint_limits=np.vstack([positioner.joint_limits(), robot_limits]),
            joint_periods=joint_periods,
            seed=np.concatenate([np.zeros(positioner.dof), robot_seed]),
            dtype=dtype,
        )
        config = self.config
        self._enumerator = PoseEnumerator(config.pose_sampler, config.tool_offset)
        self._resolver = KinematicsResolver(
            config.ik, config.seed[positioner.dof:].copy(), config.dtype
        )
        self._expander = RedundancyExpander(
            config.redundancy_joints, config.joint_limits, config.joint_periods
        )
        self._validity = ValidityFilter(config.is_valid)
        self._evaluator = CollisionEvaluator(config.collision)

    @property
    def dof(self) -> int:
        return self.config.dof

    def sample(self) -> List[CandidateState]:
        """
        Sample combined candidate states for the waypoint.

        Production order is positioner setting, then sampled pose, then IK
        solution, then redundant turn. Aggregation follows the same policy
        as the robot-only sampler.
        """
        raw: List[np.ndarray] = []
        settings = self.positioner.sample_values()
        for values in settings:
            part_frame = np.asarray(self.positioner.forward_kinematics(values), dtype=np.float64)
            if not is_rigid(part_frame):
                logger.debug("positioner_pose_discarded", values=values.tolist())
                continue
            prefix = values.astype(self.config.dtype)
            poses = self._enumerator.enumerate(part_frame @ self.config.target_pose)
            for solution in self._resolver.resolve(poses):
                raw.append(np.concatenate([prefix, solution]))

        expanded = self._expander.expand(raw)
        valid = self._validity.apply(expanded)
        candidates = self._evaluator.annotate(valid)
        result = aggregate(candidates, self.config.allow_collision)

        logger.debug(
            "waypoint_sampled",
            positioner_settings=len(settings),
            raw_solutions=len(raw),
            expanded=len(expanded),
            valid=len(valid),
            candidates=len(candidates),
            returned=len(result),
        )
        return result
