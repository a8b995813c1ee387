"""
waypoint_sampler - Candidate joint states for Cartesian motion planning.

Given one target pose of a robot's tool point, produces the feasible joint
configurations that realize it, for use as graph vertices by a Cartesian
path planner.
"""

__version__ = "0.1.0"
__author__ = "waypoint-sampler contributors"

from waypoint_sampler.core.config import ConfigManager
from waypoint_sampler.motion.sampler import RobotSampler

__all__ = [
    "__version__",
    "ConfigManager",
    "RobotSampler",
]
