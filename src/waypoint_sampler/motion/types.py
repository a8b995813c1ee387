"""
Value types shared by the sampler stages.
"""

from dataclasses import dataclass
from typing import Protocol, Sequence

import numpy as np


@dataclass(frozen=True)
class CollisionResult:
    """Collision query outcome. ``cost`` is ignored when collision free."""

    collision_free: bool
    cost: float = 0.0


@dataclass(frozen=True, eq=False)
class CandidateState:
    """
    One sampled joint configuration for a waypoint.

    Attributes:
        values: Joint values, length dof, in the sampler's dtype
        collision_free: True if the collision query found no interference
        cost: Collision cost; 0.0 when collision free, larger is worse
        valid: True once the state passed the validity predicate
    """

    values: np.ndarray
    collision_free: bool
    cost: float = 0.0
    valid: bool = True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CandidateState):
            return NotImplemented
        return (
            self.collision_free == other.collision_free
            and self.cost == other.cost
            and self.valid == other.valid
            and self.values.dtype == other.values.dtype
            and np.array_equal(self.values, other.values)
        )


class WaypointSampler(Protocol):
    """Anything that produces candidate states for one waypoint."""

    def sample(self) -> Sequence[CandidateState]:
        ...
