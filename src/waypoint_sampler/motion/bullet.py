"""
Collision collaborator backed by PyBullet.

Sets the robot body to each queried joint state and measures interference
with PyBullet closest-point queries, both between non-adjacent robot links
and between the robot and every other body in the physics client.
"""

import threading
from typing import Dict, List, Optional, Sequence

import numpy as np
import pybullet as p

from waypoint_sampler.core.config import RobotConfig, SamplerSettings
from waypoint_sampler.core.exceptions import ConfigurationError
from waypoint_sampler.motion.types import CollisionResult

# Index of contactDistance in a PyBullet contact point tuple
_CONTACT_DISTANCE = 8


class BulletContactCollision:
    """
    Collision checking using PyBullet.

    A state collides when any pair of checked bodies/links is closer than
    ``margin``. The cost is the deepest violation, ``margin - distance``,
    so penetrating states cost more than merely too-close ones.

    A PyBullet client holds one body state at a time, so queries are
    serialized with a lock; samplers on several threads may share one
    instance.
    """

    def __init__(
        self,
        client_id: int,
        robot_id: int,
        joint_indices: Sequence[int],
        margin: float = 0.0,
        exclude_bodies: Optional[Sequence[int]] = None,
        check_self_collision: bool = True,
    ):
        """
        Initialize collision checker.

        Args:
            client_id: PyBullet physics client
            robot_id: Body id of the robot in that client
            joint_indices: PyBullet joint index for each joint state entry
            margin: Safety distance (m); closer pairs count as colliding
            exclude_bodies: Body ids ignored in environment checks
            check_self_collision: Also check non-adjacent robot links
        """
        if margin < 0.0:
            raise ConfigurationError(
                "Collision margin must be non-negative", details={"margin": margin}
            )
        self.client_id = client_id
        self.robot_id = robot_id
        self.joint_indices = list(joint_indices)
        self.margin = float(margin)
        self.exclude_bodies = set(exclude_bodies or [])
        self.check_self_collision = check_self_collision
        self._lock = threading.Lock()

    @classmethod
    def from_urdf(
        cls,
        client_id: int,
        urdf_path: str,
        joint_names: Sequence[str],
        base_position: Sequence[float] = (0, 0, 0),
        **kwargs,
    ) -> "BulletContactCollision":
        """
        Load a fixed-base robot into the client and map joint names.

        Args:
            client_id: PyBullet physics client
            urdf_path: Path to robot URDF file
            joint_names: Joint names in joint-state order
            base_position: Robot base position
            **kwargs: Forwarded to the constructor

        Raises:
            ConfigurationError: If a joint name is not in the URDF
        """
        robot_id = p.loadURDF(
            urdf_path,
            basePosition=list(base_position),
            useFixedBase=True,
            physicsClientId=client_id,
        )

        name_to_index: Dict[str, int] = {}
        for i in range(p.getNumJoints(robot_id, physicsClientId=client_id)):
            joint_info = p.getJointInfo(robot_id, i, physicsClientId=client_id)
            name_to_index[joint_info[1].decode("utf-8")] = i

        missing = [name for name in joint_names if name not in name_to_index]
        if missing:
            raise ConfigurationError(
                f"Joints not found in {urdf_path}: {missing}",
                details={"available": list(name_to_index)},
            )
        return cls(client_id, robot_id, [name_to_index[n] for n in joint_names], **kwargs)

    @classmethod
    def from_config(
        cls,
        client_id: int,
        urdf_path: str,
        robot: RobotConfig,
        settings: SamplerSettings,
        **kwargs,
    ) -> "BulletContactCollision":
        """
        Load a robot using its joint names and the sampler's collision margin.

        Args:
            client_id: PyBullet physics client
            urdf_path: Path to robot URDF file
            robot: Robot configuration; joint order defines joint-state order
            settings: Sampler settings providing ``collision_margin``
            **kwargs: Forwarded to :meth:`from_urdf`
        """
        return cls.from_urdf(
            client_id,
            urdf_path,
            robot.joint_names(),
            margin=settings.collision_margin,
            **kwargs,
        )

    def _set_state(self, state: np.ndarray) -> None:
        for joint_index, value in zip(self.joint_indices, state):
            p.resetJointState(
                self.robot_id, joint_index, float(value), physicsClientId=self.client_id
            )

    def _violations(self, points) -> List[float]:
        return [
            self.margin - point[_CONTACT_DISTANCE]
            for point in points or ()
            if point[_CONTACT_DISTANCE] < self.margin
        ]

    def _self_violations(self) -> List[float]:
        violations: List[float] = []
        num_joints = p.getNumJoints(self.robot_id, physicsClientId=self.client_id)
        # Adjacent links always touch, so start two links apart; -1 is the base
        for i in range(-1, num_joints):
            for j in range(i + 2, num_joints):
                violations.extend(
                    self._violations(
                        p.getClosestPoints(
                            bodyA=self.robot_id,
                            bodyB=self.robot_id,
                            distance=self.margin,
                            linkIndexA=i,
                            linkIndexB=j,
                            physicsClientId=self.client_id,
                        )
                    )
                )
        return violations

    def _environment_violations(self) -> List[float]:
        violations: List[float] = []
        for k in range(p.getNumBodies(physicsClientId=self.client_id)):
            body_id = p.getBodyUniqueId(k, physicsClientId=self.client_id)
            if body_id == self.robot_id or body_id in self.exclude_bodies:
                continue
            violations.extend(
                self._violations(
                    p.getClosestPoints(
                        bodyA=self.robot_id,
                        bodyB=body_id,
                        distance=self.margin,
                        physicsClientId=self.client_id,
                    )
                )
            )
        return violations

    def evaluate(self, state: np.ndarray) -> CollisionResult:
        """
        Check whether a joint state collides.

        Args:
            state: Joint values in joint-state order

        Returns:
            CollisionResult with the deepest margin violation as cost
        """
        with self._lock:
            self._set_state(state)
            p.performCollisionDetection(physicsClientId=self.client_id)

            violations = self._environment_violations()
            if self.check_self_collision:
                violations.extend(self._self_violations())

        if not violations:
            return CollisionResult(collision_free=True, cost=0.0)
        return CollisionResult(collision_free=False, cost=float(max(violations)))
