"""Core types, configuration and process helpers."""

from e2erun.core.errors import (
    CommandError,
    ConfigError,
    FetchError,
    MissingCommandError,
    RunnerError,
    ToolchainError,
)
from e2erun.core.types import CommandResult, RunConfig, RunResult, SuiteTarget

__all__ = [
    "CommandError",
    "CommandResult",
    "ConfigError",
    "FetchError",
    "MissingCommandError",
    "RunConfig",
    "RunResult",
    "RunnerError",
    "SuiteTarget",
    "ToolchainError",
]
