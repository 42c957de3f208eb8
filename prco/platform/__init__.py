"""Platform abstraction layer."""

from .process import (
    CommandOutcome,
    ProcessError,
    TimeoutProfile,
    run_command,
)

__all__ = [
    "CommandOutcome",
    "ProcessError",
    "TimeoutProfile",
    "run_command",
]
