"""Playwright installation inside the test workspace."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional

from e2erun.core.errors import MissingCommandError
from e2erun.core.process import run_command
from e2erun.core.types import RunConfig
from e2erun.logging import get_logger


logger = get_logger("toolchain.playwright")


def installed_playwright_version(
    cwd: Path,
    env: Optional[Mapping[str, str]] = None,
) -> str:
    """Version string reported by the workspace's Playwright, or "" if none."""
    try:
        result = run_command(
            ["npx", "--no-install", "playwright", "--version"],
            cwd=cwd,
            env=env,
            capture=True,
            check=False,
        )
    except MissingCommandError:
        return ""
    return result.stdout.strip() if result.success else ""


def needs_install(wanted: str, installed: str) -> bool:
    """True unless ``installed`` already matches the pinned ``wanted`` version."""
    if wanted == "latest" or not installed:
        return True
    return wanted not in installed


def install_playwright(
    config: RunConfig,
    cwd: Path,
    env: Optional[Mapping[str, str]] = None,
) -> None:
    """Install @playwright/test and its browsers if the version does not match."""
    installed = installed_playwright_version(cwd, env)
    if not needs_install(config.playwright_version, installed):
        logger.info(f"Playwright already installed with version {installed}")
        return

    logger.info(f"Installing Playwright {config.playwright_version}")
    run_command(
        ["npm", "install", "-D", f"@playwright/test@{config.playwright_version}", "allure-playwright"],
        cwd=cwd,
        env=env,
    )
    run_command(["npx", "--no-install", "playwright", "--version"], cwd=cwd, env=env)
    run_command(["npx", "playwright", "install", "--with-deps"], cwd=cwd, env=env)
    logger.info(f"Playwright version: {installed_playwright_version(cwd, env)}")
