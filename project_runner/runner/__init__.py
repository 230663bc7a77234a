"""Process execution and package manager availability."""

from project_runner.runner.availability import AvailabilityResolver, AvailabilityState
from project_runner.runner.context import RunContext
from project_runner.runner.executor import CaptureResult, Executor

__all__ = [
    "AvailabilityResolver",
    "AvailabilityState",
    "CaptureResult",
    "Executor",
    "RunContext",
]
