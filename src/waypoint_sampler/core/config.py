"""
Configuration management for waypoint_sampler.

Robot kinematic descriptions (joint limits, turn periods, redundancy-capable
joints, tool offset) and sampler settings are loaded from YAML files and
validated with pydantic before any sampler is built from them.
"""

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Literal

import numpy as np
import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from waypoint_sampler.core.exceptions import ConfigurationError
from waypoint_sampler.core.geometry import pose_from_xyzrpy


class JointConfig(BaseModel):
    """Single joint description."""

    name: str
    lower: float
    upper: float
    period: float = 2.0 * math.pi

    @model_validator(mode="after")
    def _check_limits(self) -> "JointConfig":
        if self.lower > self.upper:
            raise ValueError(f"joint '{self.name}': lower limit exceeds upper limit")
        if not self.period > 0.0:
            raise ValueError(f"joint '{self.name}': period must be positive")
        return self


class RobotConfig(BaseModel):
    """Robot configuration model."""

    name: str
    manufacturer: str = ""
    joints: list[JointConfig] = Field(default_factory=list)
    redundancy_joints: list[int] = Field(default_factory=list)
    tool_offset: list[float] = Field(default_factory=lambda: [0.0] * 6)

    @model_validator(mode="after")
    def _check_indices(self) -> "RobotConfig":
        dof = len(self.joints)
        bad = [i for i in self.redundancy_joints if not 0 <= i < dof]
        if bad:
            raise ValueError(f"redundancy joint indices {bad} outside [0, {dof})")
        if len(self.tool_offset) != 6:
            raise ValueError("tool_offset needs six values [x, y, z, rx, ry, rz]")
        return self

    @property
    def dof(self) -> int:
        """Number of joints."""
        return len(self.joints)

    def joint_names(self) -> list[str]:
        return [joint.name for joint in self.joints]

    def joint_limits(self) -> np.ndarray:
        """Joint limits as a (dof, 2) array of [lower, upper]."""
        return np.array([[j.lower, j.upper] for j in self.joints], dtype=np.float64).reshape(-1, 2)

    def joint_periods(self) -> np.ndarray:
        return np.array([j.period for j in self.joints], dtype=np.float64)

    def tool_offset_matrix(self) -> np.ndarray:
        """Tool offset as a 4x4 homogeneous matrix."""
        return pose_from_xyzrpy(self.tool_offset)


class SamplerSettings(BaseModel):
    """Per-waypoint sampler settings."""

    name: str
    allow_collision: bool = False
    pose_sampling: Literal["fixed", "tool_axis"] = "fixed"
    tool_axis: Literal["x", "y", "z"] = "z"
    resolution: float = Field(default=math.radians(10.0), gt=0.0)
    dtype: Literal["float32", "float64"] = "float64"
    collision_margin: float = Field(default=0.0, ge=0.0)

    def pose_sampler(self) -> Callable[[np.ndarray], list[np.ndarray]]:
        """Build the pose sampling function these settings describe."""
        from waypoint_sampler.motion.pose_samplers import make_tool_axis_sampler, sample_fixed

        if self.pose_sampling == "fixed":
            return sample_fixed
        return make_tool_axis_sampler(self.resolution, self.tool_axis)

    def numpy_dtype(self) -> type:
        return np.float32 if self.dtype == "float32" else np.float64


@dataclass
class ConfigManager:
    """
    Central configuration manager for waypoint_sampler.

    Loads and validates configurations from YAML files laid out as
    ``<config_dir>/robots/*.yaml`` and ``<config_dir>/samplers/*.yaml``.

    Example:
        >>> config = ConfigManager(config_dir=Path("config"))
        >>> robot = config.get_robot("ur10e")
        >>> settings = config.get_sampler("sweep_z")
    """

    config_dir: Path
    _robots: dict[str, RobotConfig] = field(default_factory=dict, init=False)
    _samplers: dict[str, SamplerSettings] = field(default_factory=dict, init=False)
    _loaded: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.config_dir = Path(self.config_dir)
        if not self.config_dir.exists():
            raise ConfigurationError(
                f"Configuration directory not found: {self.config_dir}"
            )

    def load(self) -> None:
        """Load all configurations from disk."""
        self._robots = self._load_section("robots", "robot", RobotConfig)
        self._samplers = self._load_section("samplers", "sampler", SamplerSettings)
        self._loaded = True

    def _load_section(self, directory: str, key: str, model: type) -> dict:
        section_dir = self.config_dir / directory
        loaded: dict = {}
        if not section_dir.exists():
            return loaded

        for config_file in sorted(section_dir.glob("*.yaml")):
            try:
                with open(config_file) as f:
                    data = yaml.safe_load(f)

                if data and key in data:
                    entry = dict(data[key])
                    entry.setdefault("name", config_file.stem)
                    # Robot files keep joints and tool in their own sections
                    if key == "robot":
                        if "joints" in data:
                            entry["joints"] = data["joints"]
                        if "tool" in data:
                            entry["tool_offset"] = data["tool"].get("offset", [0.0] * 6)
                    loaded[config_file.stem] = model(**entry)
            except (yaml.YAMLError, ValidationError) as e:
                raise ConfigurationError(
                    f"Failed to load {key} config: {config_file}",
                    details={"error": str(e)},
                ) from e
        return loaded

    def get_robot(self, name: str) -> RobotConfig:
        """
        Get robot configuration by name.

        Args:
            name: Robot configuration name (without .yaml extension)

        Returns:
            RobotConfig instance

        Raises:
            ConfigurationError: If robot not found
        """
        if not self._loaded:
            self.load()

        if name not in self._robots:
            raise ConfigurationError(
                f"Robot configuration not found: {name}",
                details={"available": list(self._robots.keys())},
            )
        return self._robots[name]

    def get_sampler(self, name: str) -> SamplerSettings:
        """
        Get sampler settings by name.

        Raises:
            ConfigurationError: If the settings are not found
        """
        if not self._loaded:
            self.load()

        if name not in self._samplers:
            raise ConfigurationError(
                f"Sampler configuration not found: {name}",
                details={"available": list(self._samplers.keys())},
            )
        return self._samplers[name]

    def list_robots(self) -> list[str]:
        """List available robot configurations."""
        if not self._loaded:
            self.load()
        return list(self._robots.keys())

    def list_samplers(self) -> list[str]:
        """List available sampler settings."""
        if not self._loaded:
            self.load()
        return list(self._samplers.keys())
