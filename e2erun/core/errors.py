"""Exceptions raised by the runner."""

from __future__ import annotations

from typing import Sequence


class RunnerError(Exception):
    """Base exception for runner errors."""

    exit_code: int = 1


class ConfigError(RunnerError):
    """Invalid configuration file or value."""

    pass


class MissingCommandError(RunnerError):
    """A required executable is not on PATH."""

    def __init__(self, name: str):
        super().__init__(f"Missing required command: {name}")
        self.name = name


class ToolchainError(RunnerError):
    """Node.js, Java or Allure could not be provisioned."""

    pass


class FetchError(RunnerError):
    """Downloading or extracting an archive failed."""

    pass


class CommandError(RunnerError):
    """An external command exited with a non-zero status."""

    def __init__(self, cmd: Sequence[str], returncode: int, stderr: str = ""):
        message = f"Command failed with exit code {returncode}: {' '.join(cmd)}"
        if stderr:
            message = f"{message}\n{stderr.strip()}"
        super().__init__(message)
        self.cmd = list(cmd)
        self.returncode = returncode
        self.exit_code = returncode if returncode > 0 else 1
