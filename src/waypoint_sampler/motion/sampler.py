"""
Per-waypoint robot state sampler.

A sampler is built once per waypoint of a Cartesian path and asked by the
graph search for candidate joint states. Each ``sample()`` call runs, in
order: pose enumeration, inverse kinematics, redundant-turn expansion,
validity filtering, collision annotation and result aggregation. Nothing is
cached between calls, so concurrent samplers share only their (read-only)
collaborators.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

import numpy as np

from waypoint_sampler.core.config import RobotConfig, SamplerSettings
from waypoint_sampler.core.exceptions import ConfigurationError
from waypoint_sampler.core.geometry import PoseLike, as_matrix
from waypoint_sampler.core.logging import get_logger
from waypoint_sampler.motion.collision import CollisionEvaluator, CollisionInterface
from waypoint_sampler.motion.kinematics import InverseKinematics, KinematicsResolver
from waypoint_sampler.motion.pose_samplers import PoseEnumerator, PoseSamplerFn
from waypoint_sampler.motion.redundancy import RedundancyExpander
from waypoint_sampler.motion.types import CandidateState
from waypoint_sampler.motion.validity import ValidityFilter, ValidityPredicate, always_valid

logger = get_logger(__name__)


def aggregate(candidates: Sequence[CandidateState], allow_collision: bool) -> List[CandidateState]:
    """
    Build the final result list from annotated candidates.

    Collision-free candidates win and keep production order. Without any,
    the result is empty unless ``allow_collision`` is set, in which case the
    colliding candidates are returned best (lowest cost) first; ties keep
    production order.
    """
    collision_free = [c for c in candidates if c.collision_free]
    if collision_free:
        return collision_free
    if not allow_collision:
        return []
    return sorted(candidates, key=lambda c: c.cost)


def _readonly(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class SamplerConfig:
    """
    Immutable construction inputs of a sampler, validated once.

    ``dof`` is taken from ``joint_limits`` (or the IK collaborator's
    ``joint_limits`` attribute), falling back to the seed length. Missing
    limits are unbounded, which is only allowed without redundancy joints.

    Raises:
        ConfigurationError: On any contract violation
    """

    target_pose: PoseLike
    pose_sampler: PoseSamplerFn
    ik: InverseKinematics
    collision: CollisionInterface
    tool_offset: Optional[PoseLike] = None
    allow_collision: bool = False
    is_valid: Optional[ValidityPredicate] = always_valid
    redundancy_joints: Sequence[int] = ()
    joint_limits: Optional[Any] = None
    joint_periods: Optional[Any] = None
    seed: Optional[Any] = None
    dtype: Any = np.float64
    dof: int = field(init=False)

    def __post_init__(self) -> None:
        if self.ik is None or not callable(getattr(self.ik, "solve", None)):
            raise ConfigurationError("An inverse kinematics collaborator with solve() is required")
        if self.collision is None or not callable(getattr(self.collision, "evaluate", None)):
            raise ConfigurationError("A collision collaborator with evaluate() is required")
        if not callable(self.pose_sampler):
            raise ConfigurationError("pose_sampler must be callable")
        is_valid = always_valid if self.is_valid is None else self.is_valid
        if not callable(is_valid):
            raise ConfigurationError("is_valid must be callable")

        try:
            dtype = np.dtype(self.dtype)
        except TypeError as e:
            raise ConfigurationError(f"Unknown dtype: {self.dtype}") from e
        if not np.issubdtype(dtype, np.floating):
            raise ConfigurationError(
                "Joint states need a floating point dtype", details={"dtype": str(dtype)}
            )

        target_pose = as_matrix(self.target_pose, name="target pose")
        tool_offset = as_matrix(
            np.eye(4) if self.tool_offset is None else self.tool_offset, name="tool offset"
        )
        object.__setattr__(self, "target_pose", _readonly(target_pose))
        object.__setattr__(self, "tool_offset", _readonly(tool_offset))
        object.__setattr__(self, "is_valid", is_valid)
        object.__setattr__(self, "allow_collision", bool(self.allow_collision))
        object.__setattr__(self, "dtype", dtype.type)

        limits = self.joint_limits
        if limits is None:
            limits = getattr(self.ik, "joint_limits", None)
        if limits is not None:
            limits = np.array(limits, dtype=np.float64)
            if limits.ndim != 2 or limits.shape[1] != 2 or len(limits) == 0:
                raise ConfigurationError(
                    "joint_limits must have shape (dof, 2)", details={"shape": limits.shape}
                )
            if np.any(np.isnan(limits)) or np.any(limits[:, 0] > limits[:, 1]):
                raise ConfigurationError("Every joint needs lower <= upper limits")
            dof = len(limits)
        elif self.seed is not None:
            dof = np.ravel(self.seed).size
        else:
            raise ConfigurationError("Cannot determine dof: give joint_limits or a seed")
        object.__setattr__(self, "dof", dof)

        if limits is None:
            limits = np.tile([-np.inf, np.inf], (dof, 1))
        object.__setattr__(self, "joint_limits", _readonly(limits))

        seed = np.zeros(dof) if self.seed is None else self.seed
        seed = np.array(seed, dtype=dtype).ravel()
        if seed.shape != (dof,) or not np.all(np.isfinite(seed)):
            raise ConfigurationError(
                "IK seed must be finite with one value per joint",
                details={"dof": dof, "seed_length": seed.size},
            )
        object.__setattr__(self, "seed", _readonly(seed))

        periods = np.full(dof, 2.0 * np.pi) if self.joint_periods is None else self.joint_periods
        periods = np.array(periods, dtype=np.float64).ravel()
        if periods.shape != (dof,) or not np.all(np.isfinite(periods)) or np.any(periods <= 0):
            raise ConfigurationError(
                "joint_periods must hold one positive value per joint",
                details={"dof": dof, "periods_length": periods.size},
            )
        object.__setattr__(self, "joint_periods", _readonly(periods))

        redundancy: List[int] = []
        for index in self.redundancy_joints:
            if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
                raise ConfigurationError(f"Redundancy joint index must be an integer: {index!r}")
            if not 0 <= index < dof:
                raise ConfigurationError(
                    f"Redundancy joint index {index} outside [0, {dof})",
                    details={"dof": dof},
                )
            if int(index) not in redundancy:
                redundancy.append(int(index))
        if redundancy and not np.all(np.isfinite(limits[redundancy])):
            raise ConfigurationError(
                "Redundancy joints need finite joint limits",
                details={"redundancy_joints": redundancy},
            )
        object.__setattr__(self, "redundancy_joints", tuple(redundancy))


class RobotSampler:
    """
    Candidate joint states for one waypoint of a robot-only motion group.

    Example:
        >>> sampler = RobotSampler(
        ...     target_pose=frame,
        ...     pose_sampler=make_tool_axis_sampler(math.radians(10)),
        ...     ik=solver,
        ...     collision=checker,
        ...     joint_limits=limits,
        ...     redundancy_joints=[5],
        ... )
        >>> states = sampler.sample()
    """

    def __init__(
        self,
        target_pose: PoseLike,
        pose_sampler: PoseSamplerFn,
        ik: InverseKinematics,
        collision: CollisionInterface,
        tool_offset: Optional[PoseLike] = None,
        allow_collision: bool = False,
        is_valid: Optional[ValidityPredicate] = always_valid,
        redundancy_joints: Sequence[int] = (),
        joint_limits: Optional[Any] = None,
        joint_periods: Optional[Any] = None,
        seed: Optional[Any] = None,
        dtype: Any = np.float64,
    ):
        self.config = SamplerConfig(
            target_pose=target_pose,
            pose_sampler=pose_sampler,
            ik=ik,
            collision=collision,
            tool_offset=tool_offset,
            allow_collision=allow_collision,
            is_valid=is_valid,
            redundancy_joints=redundancy_joints,
            joint_limits=joint_limits,
            joint_periods=joint_periods,
            seed=seed,
            dtype=dtype,
        )
        config = self.config
        self._enumerator = PoseEnumerator(config.pose_sampler, config.tool_offset)
        self._resolver = KinematicsResolver(config.ik, config.seed, config.dtype)
        self._expander = RedundancyExpander(
            config.redundancy_joints, config.joint_limits, config.joint_periods
        )
        self._validity = ValidityFilter(config.is_valid)
        self._evaluator = CollisionEvaluator(config.collision)

    @classmethod
    def from_config(
        cls,
        robot: RobotConfig,
        settings: SamplerSettings,
        target_pose: PoseLike,
        ik: InverseKinematics,
        collision: CollisionInterface,
        is_valid: Optional[ValidityPredicate] = always_valid,
    ) -> "RobotSampler":
        """
        Build a sampler from loaded robot and sampler configurations.

        Args:
            robot: Joint limits, periods, redundancy joints and tool offset
            settings: Pose sampling, collision fallback and dtype
            target_pose: Tool target for this waypoint
            ik: Inverse kinematics collaborator
            collision: Collision collaborator
            is_valid: Validity predicate
        """
        return cls(
            target_pose=target_pose,
            pose_sampler=settings.pose_sampler(),
            ik=ik,
            collision=collision,
            tool_offset=robot.tool_offset_matrix(),
            allow_collision=settings.allow_collision,
            is_valid=is_valid,
            redundancy_joints=robot.redundancy_joints,
            joint_limits=robot.joint_limits(),
            joint_periods=robot.joint_periods(),
            dtype=settings.numpy_dtype(),
        )

    @property
    def dof(self) -> int:
        return self.config.dof

    def sample(self) -> List[CandidateState]:
        """
        Sample candidate joint states for the waypoint.

        Returns:
            Collision-free states in production order; or, if there are
            none and collisions are allowed, colliding states by ascending
            cost; otherwise an empty list
        """
        poses = self._enumerator.enumerate(self.config.target_pose)
        raw = self._resolver.resolve(poses)
        expanded = self._expander.expand(raw)
        valid = self._validity.apply(expanded)
        candidates = self._evaluator.annotate(valid)
        result = aggregate(candidates, self.config.allow_collision)

        logger.debug(
            "waypoint_sampled",
            poses=len(poses),
            raw_solutions=len(raw),
            expanded=len(expanded),
            valid=len(valid),
            candidates=len(candidates),
            returned=len(result),
        )
        return result
