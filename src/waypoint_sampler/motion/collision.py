"""
Collision stage for the waypoint samplers.

Candidates are annotated, never rejected, because of collision here: the
allow-collision fallback needs to see colliding states later on.
"""

import math
from typing import List, Protocol, Sequence, Tuple, Union

import numpy as np

from waypoint_sampler.core.logging import get_logger
from waypoint_sampler.motion.types import CandidateState, CollisionResult

logger = get_logger(__name__)


class CollisionInterface(Protocol):
    """
    Collision collaborator shared by concurrent samplers.

    Must be safe to call from several threads at once.
    """

    def evaluate(self, state: np.ndarray) -> Union[CollisionResult, Tuple[bool, float]]:
        ...


class CollisionEvaluator:
    """Annotates joint states with collision status and cost."""

    def __init__(self, collision: CollisionInterface):
        self.collision = collision

    def annotate(self, states: Sequence[np.ndarray]) -> List[CandidateState]:
        """
        Query the collision collaborator for every state.

        Args:
            states: Joint states that passed the validity filter

        Returns:
            Candidates in input order. States whose reported cost is
            non-finite or negative are dropped as numerically degenerate.
        """
        candidates: List[CandidateState] = []
        for state in states:
            result = self.collision.evaluate(state)
            if isinstance(result, CollisionResult):
                collision_free, cost = result.collision_free, result.cost
            else:
                collision_free, cost = result

            if collision_free:
                candidates.append(CandidateState(values=state, collision_free=True, cost=0.0))
                continue

            cost = float(cost)
            if not math.isfinite(cost) or cost < 0.0:
                logger.debug("collision_cost_discarded", cost=cost)
                continue
            candidates.append(CandidateState(values=state, collision_free=False, cost=cost))
        return candidates
