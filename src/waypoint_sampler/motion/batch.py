"""
Running many waypoint samplers at once.

Waypoints are independent, so a planner can sample all of them on a
thread pool before building its graph. Each sampler stays synchronous;
collaborators shared between samplers must be thread-safe.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from waypoint_sampler.core.logging import get_logger, waypoint_context
from waypoint_sampler.motion.types import CandidateState, WaypointSampler

logger = get_logger(__name__)


def _sample_one(index: int, sampler: WaypointSampler) -> List[CandidateState]:
    with waypoint_context(waypoint=index):
        return list(sampler.sample())


def sample_waypoints(
    samplers: Sequence[WaypointSampler],
    max_workers: Optional[int] = None,
) -> List[List[CandidateState]]:
    """
    Sample every waypoint, concurrently.

    Args:
        samplers: One sampler per waypoint, in path order
        max_workers: Thread pool size (default: executor default)

    Returns:
        Candidate lists in the same order as ``samplers``. Exceptions
        raised by a sampler propagate to the caller.
    """
    if not samplers:
        return []

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(_sample_one, index, sampler)
            for index, sampler in enumerate(samplers)
        ]
        results = [future.result() for future in futures]

    infeasible = [i for i, states in enumerate(results) if not states]
    if infeasible:
        logger.info("waypoints_without_states", count=len(infeasible), waypoints=infeasible)
    return results
