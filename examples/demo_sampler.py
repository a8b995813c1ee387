"""
Demonstration of waypoint candidate sampling.

This script shows how to:
1. Build a numerical IK solver for a small planar arm
2. Sample candidate joint states for one waypoint, sweeping the tool axis
3. Fall back to colliding states when no collision-free state exists
4. Sample a short path of waypoints concurrently
"""

import math

import numpy as np

from waypoint_sampler.core.logging import configure_logging
from waypoint_sampler.motion import (
    CollisionResult,
    NumericalIKSolver,
    RobotSampler,
    make_tool_axis_sampler,
    sample_waypoints,
)

LINKS = (0.5, 0.4, 0.1)
LIMITS = [[-math.pi, math.pi], [-2.5, 2.5], [-2.0 * math.pi, 2.0 * math.pi]]


def planar_fk(values):
    """Flange pose of a three-link planar arm rotating about z."""
    pose = np.eye(4)
    angle = 0.0
    for length, value in zip(LINKS, values):
        angle += float(value)
        pose[0, 3] += length * math.cos(angle)
        pose[1, 3] += length * math.sin(angle)
    pose[:2, :2] = [[math.cos(angle), -math.sin(angle)], [math.sin(angle), math.cos(angle)]]
    return pose


class WallCollision:
    """Flags states whose elbow is below y = wall; cost is the depth."""

    def __init__(self, wall):
        self.wall = wall

    def evaluate(self, state):
        elbow_y = LINKS[0] * math.sin(float(state[0]))
        depth = self.wall - elbow_y
        return CollisionResult(collision_free=depth <= 0.0, cost=max(depth, 0.0))


def make_target(x, y, heading):
    pose = np.eye(4)
    pose[:2, :2] = [[math.cos(heading), -math.sin(heading)], [math.sin(heading), math.cos(heading)]]
    pose[:2, 3] = [x, y]
    return pose


def main():
    """Run sampler demonstration."""
    configure_logging(level="WARNING")

    print("=" * 60)
    print("Waypoint Sampler Demo")
    print("=" * 60)

    # Elbow-up and elbow-down start points
    ik = NumericalIKSolver(
        planar_fk,
        LIMITS,
        start_configurations=[[0.5, -1.0, 0.5], [-0.5, 1.0, -0.5]],
    )
    sweep = make_tool_axis_sampler(math.radians(45.0))

    # 1. Single waypoint
    print("\n1. Sampling one waypoint")
    sampler = RobotSampler(
        target_pose=make_target(0.6, 0.2, 0.0),
        pose_sampler=sweep,
        ik=ik,
        collision=WallCollision(wall=-1.0),
        redundancy_joints=[2],
        joint_limits=LIMITS,
    )
    states = sampler.sample()
    print(f"   [OK] {len(states)} collision-free candidates")
    for state in states[:5]:
        print(f"     {[f'{math.degrees(v):7.1f}' for v in state.values]}")

    # 2. Collision fallback
    print("\n2. Collision fallback")
    blocked = dict(
        target_pose=make_target(0.6, 0.2, 0.0),
        pose_sampler=sweep,
        ik=ik,
        collision=WallCollision(wall=1.0),
        joint_limits=LIMITS,
    )
    print(f"   Strict:          {len(RobotSampler(**blocked).sample())} candidates")
    fallback = RobotSampler(allow_collision=True, **blocked).sample()
    print(f"   allow_collision: {len(fallback)} candidates, costs "
          f"{[round(s.cost, 3) for s in fallback[:3]]}...")

    # 3. A short path
    print("\n3. Sampling a path of waypoints")
    samplers = [
        RobotSampler(
            target_pose=make_target(0.6, y, 0.0),
            pose_sampler=sweep,
            ik=ik,
            collision=WallCollision(wall=-1.0),
            joint_limits=LIMITS,
        )
        for y in np.linspace(-0.2, 0.2, 5)
    ]
    for index, states in enumerate(sample_waypoints(samplers, max_workers=4)):
        print(f"   Waypoint {index}: {len(states)} candidates")

    print("\n" + "=" * 60)
    print("Demo complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
