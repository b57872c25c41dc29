"""Node.js provisioning through nvm, with a system Node fallback."""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Optional

from e2erun.core.errors import ToolchainError
from e2erun.core.process import require_cmd, run_command, which
from e2erun.core.types import RunConfig
from e2erun.logging import get_logger


logger = get_logger("toolchain.node")

PATH_MARKER = "__E2ERUN_PATH__="


def load_nvm(nvm_dir: Path) -> Optional[Path]:
    """Return the nvm.sh script if nvm is installed in ``nvm_dir``."""
    script = Path(nvm_dir) / "nvm.sh"
    if script.is_file() and script.stat().st_size > 0:
        return script
    logger.warning(f"nvm not found in {nvm_dir}")
    return None


def nvm_install(script: Path, node_version: str, env: dict[str, str]) -> str:
    """
    Install and activate ``node_version`` with nvm.

    nvm is a shell function, so it runs inside bash. The PATH it leaves
    behind is printed after a marker and returned.
    """
    bash = require_cmd("bash", env)
    version = shlex.quote(node_version)
    script_body = (
        f". {shlex.quote(str(script))} && "
        f"nvm install {version} >/dev/null && "
        f"nvm use {version} >/dev/null && "
        f'printf "%s%s" {PATH_MARKER!r} "$PATH"'
    )
    env = {**env, "NVM_DIR": str(script.parent)}
    result = run_command([bash, "-c", script_body], env=env, capture=True)

    for line in result.stdout.splitlines():
        if line.startswith(PATH_MARKER):
            return line[len(PATH_MARKER):]
    raise ToolchainError(f"nvm did not report a PATH for Node.js {node_version}")


def ensure_node(config: RunConfig, env: dict[str, str]) -> dict[str, str]:
    """
    Make Node.js and npm available.

    Args:
        config: Run configuration
        env: Current child environment

    Returns:
        The environment to use for Node-based commands

    Raises:
        ToolchainError: If neither nvm nor a system Node.js is available
    """
    script = load_nvm(config.nvm_dir)
    if script is not None:
        logger.info(f"Installing Node.js {config.node_version} via nvm")
        path = nvm_install(script, config.node_version, env)
        return {**env, "PATH": path, "NVM_DIR": str(config.nvm_dir)}

    node = which("node", env)
    if node and which("npm", env):
        version = run_command([node, "--version"], env=env, capture=True).stdout.strip()
        logger.warning(f"nvm not found; falling back to system Node.js {version}")
        return env

    raise ToolchainError("Node.js is not available and nvm could not be sourced")
