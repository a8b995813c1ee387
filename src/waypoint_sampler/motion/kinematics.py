"""
Inverse kinematics stage for the waypoint samplers.

The samplers only need an object with ``solve(pose, seed)`` returning any
number of joint solutions. This module defines that contract, the stage that
aggregates solutions over all candidate poses, and a numerical solver built
on scipy's optimizers for robots without an analytic solver.
"""

from typing import Callable, List, Optional, Protocol, Sequence

import numpy as np
from compas.geometry import Transformation
from compas_robots import Configuration, RobotModel
from scipy.optimize import minimize

from waypoint_sampler.core.exceptions import KinematicsError
from waypoint_sampler.core.logging import get_logger

logger = get_logger(__name__)


class InverseKinematics(Protocol):
    """Inverse kinematics collaborator shared by concurrent samplers."""

    def solve(self, pose: np.ndarray, seed: np.ndarray) -> Sequence[Sequence[float]]:
        ...


class KinematicsResolver:
    """
    Collects raw IK solutions for every candidate pose.

    Solutions are returned in pose order, then in the order the solver
    produced them. A pose without solutions contributes nothing. Solutions
    with the wrong length or non-finite entries are dropped.
    """

    def __init__(self, ik: InverseKinematics, seed: np.ndarray, dtype: type = np.float64):
        self.ik = ik
        self.seed = seed
        self.dtype = dtype

    def resolve(self, poses: Sequence[np.ndarray]) -> List[np.ndarray]:
        dof = len(self.seed)
        solutions: List[np.ndarray] = []
        for pose_index, pose in enumerate(poses):
            for raw in self.ik.solve(pose, self.seed.copy()):
                with np.errstate(over="ignore", invalid="ignore"):
                    values = np.array(raw, dtype=self.dtype).ravel()
                if values.shape != (dof,) or not np.all(np.isfinite(values)):
                    logger.debug(
                        "ik_solution_discarded", pose_index=pose_index, size=values.size
                    )
                    continue
                solutions.append(values)
        return solutions


class NumericalIKSolver:
    """
    Inverse kinematics by numerical optimization.

    Minimizes position error plus weighted orientation error over the joint
    values, bounded by the joint limits, starting from the caller's seed and
    from any additional start configurations (one per expected branch,
    e.g. elbow up / elbow down). Every converged, distinct result is
    returned. The solver keeps no state between calls.
    """

    def __init__(
        self,
        forward_kinematics: Callable[[np.ndarray], np.ndarray],
        joint_limits: Sequence[Sequence[float]],
        method: str = "SLSQP",
        start_configurations: Optional[Sequence[Sequence[float]]] = None,
        tolerance: float = 1e-4,
        orientation_weight: float = 0.1,
        max_iterations: int = 200,
        duplicate_tolerance: float = 1e-2,
    ):
        """
        Initialize IK solver.

        Args:
            forward_kinematics: Maps joint values to a 4x4 link pose
            joint_limits: (dof, 2) lower/upper bounds
            method: scipy.optimize.minimize method ('SLSQP', 'L-BFGS-B', 'trust-constr')
            start_configurations: Extra start points tried after the seed
            tolerance: Position (m) and orientation (rad) convergence tolerance
            orientation_weight: Weight of orientation error in the objective
            max_iterations: Optimizer iteration limit per start point
            duplicate_tolerance: Joint-space distance below which two
                solutions count as the same
        """
        self.forward_kinematics = forward_kinematics
        self.joint_limits = np.array(joint_limits, dtype=np.float64).reshape(-1, 2)
        self.method = method
        self.start_configurations = [
            np.array(q, dtype=np.float64) for q in (start_configurations or [])
        ]
        self.tolerance = tolerance
        self.orientation_weight = orientation_weight
        self.max_iterations = max_iterations
        self.duplicate_tolerance = duplicate_tolerance

    @property
    def dof(self) -> int:
        return len(self.joint_limits)

    @classmethod
    def from_robot_model(
        cls, model: RobotModel, link_name: Optional[str] = None, **kwargs
    ) -> "NumericalIKSolver":
        """
        Build a solver from a compas_robots model.

        Args:
            model: Robot model (e.g. loaded from URDF)
            link_name: Link whose pose is targeted (default: last link)
            **kwargs: Forwarded to the constructor

        Raises:
            KinematicsError: If the model has no configurable joints or links
        """
        joints = [j for j in model.iter_joints() if j.is_configurable()]
        if not joints:
            raise KinematicsError(f"Robot model '{model.name}' has no configurable joints")

        if link_name is None:
            links = list(model.iter_links())
            if not links:
                raise KinematicsError(f"Robot model '{model.name}' has no links")
            link_name = links[-1].name

        joint_names = [j.name for j in joints]
        limits = []
        for joint in joints:
            lower, upper = -np.pi, np.pi
            if joint.limit:
                if joint.limit.lower is not None:
                    lower = joint.limit.lower
                if joint.limit.upper is not None:
                    upper = joint.limit.upper
            limits.append((lower, upper))

        def forward(values: np.ndarray) -> np.ndarray:
            config = Configuration.from_revolute_values(list(values), joint_names)
            frame = model.forward_kinematics(config, link_name=link_name)
            return np.array(Transformation.from_frame(frame).matrix)

        return cls(forward, limits, **kwargs)

    def _errors(self, target: np.ndarray, values: np.ndarray) -> tuple[float, float]:
        current = np.asarray(self.forward_kinematics(values), dtype=np.float64)
        position_error = float(np.linalg.norm(target[:3, 3] - current[:3, 3]))
        rotation_error = target[:3, :3].T @ current[:3, :3]
        cos_angle = np.clip((np.trace(rotation_error) - 1.0) / 2.0, -1.0, 1.0)
        return position_error, float(np.arccos(cos_angle))

    def solve(self, pose: np.ndarray, seed: np.ndarray) -> List[np.ndarray]:
        """
        Solve inverse kinematics for a target link pose.

        Args:
            pose: 4x4 target pose of the link
            seed: Initial joint configuration

        Returns:
            Distinct converged solutions, seed-started solution first
        """
        target = np.asarray(pose, dtype=np.float64)
        bounds = [tuple(limit) for limit in self.joint_limits]

        def objective(values):
            position_error, orientation_error = self._errors(target, values)
            return position_error**2 + (self.orientation_weight * orientation_error) ** 2

        solutions: List[np.ndarray] = []
        for start in [np.asarray(seed, dtype=np.float64)] + self.start_configurations:
            x0 = np.clip(start, self.joint_limits[:, 0], self.joint_limits[:, 1])
            result = minimize(
                objective,
                x0,
                method=self.method,
                bounds=bounds,
                tol=self.tolerance**2 * 1e-2,
                options={"maxiter": self.max_iterations},
            )
            position_error, orientation_error = self._errors(target, result.x)
            if position_error > self.tolerance or orientation_error > self.tolerance:
                continue

            if any(
                np.linalg.norm(result.x - existing) < self.duplicate_tolerance
                for existing in solutions
            ):
                continue
            solutions.append(np.array(result.x))

        return solutions
