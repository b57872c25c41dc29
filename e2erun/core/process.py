"""External command execution."""

from __future__ import annotations

import os
import shutil
import subprocess
import time
from pathlib import Path
from typing import Mapping, Optional, Sequence

from e2erun.core.errors import CommandError, MissingCommandError
from e2erun.core.types import CommandResult
from e2erun.logging import get_logger


logger = get_logger("core.process")


def which(name: str, env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Locate a command on the PATH of ``env`` (os.environ by default)."""
    path = (env if env is not None else os.environ).get("PATH")
    return shutil.which(name, path=path)


def require_cmd(name: str, env: Optional[Mapping[str, str]] = None) -> str:
    """
    Return the full path of a required command.

    Raises:
        MissingCommandError: If the command is not on PATH
    """
    found = which(name, env)
    if found is None:
        raise MissingCommandError(name)
    return found


def run_command(
    cmd: Sequence[str],
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
    capture: bool = False,
    check: bool = True,
) -> CommandResult:
    """
    Run an external command to completion.

    Output is streamed to the console unless ``capture`` is set.

    Args:
        cmd: Command and arguments
        cwd: Working directory
        env: Full environment for the child (os.environ by default)
        capture: Capture stdout/stderr instead of streaming
        check: Raise CommandError on a non-zero exit

    Returns:
        CommandResult with execution details
    """
    cmd = [str(part) for part in cmd]
    logger.debug(f"Running: {' '.join(cmd)}")

    start_time = time.monotonic()
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            env=dict(env) if env is not None else None,
            capture_output=capture,
            text=True,
        )
    except FileNotFoundError as e:
        raise MissingCommandError(cmd[0]) from e

    result = CommandResult(
        cmd=cmd,
        returncode=proc.returncode,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
        elapsed_s=time.monotonic() - start_time,
    )

    if check and not result.success:
        raise CommandError(cmd, result.returncode, result.stderr)
    return result
