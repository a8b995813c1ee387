"""
Custom exceptions for waypoint_sampler.

All waypoint_sampler exceptions inherit from SamplerError for easy catching.
"No feasible state" is never an exception: it is an empty result list.
"""

from typing import Any


class SamplerError(Exception):
    """Base exception for all waypoint_sampler errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(SamplerError):
    """Raised when a sampler or configuration file violates its contract."""

    pass


class KinematicsError(SamplerError):
    """Raised when a kinematics collaborator cannot be built."""

    pass
