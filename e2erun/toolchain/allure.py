"""Allure CLI installation and report generation."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from e2erun.core.errors import RunnerError
from e2erun.core.process import run_command
from e2erun.core.types import RunConfig, SuiteTarget
from e2erun.io.fetch import fetch_tarball
from e2erun.logging import get_logger


logger = get_logger("toolchain.allure")

RELEASE_URL = (
    "https://github.com/allure-framework/allure2/releases/download/"
    "{version}/allure-{version}.tgz"
)


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def allure_version(allure_bin: Path, env: Optional[Mapping[str, str]] = None) -> str:
    result = run_command([allure_bin, "--version"], env=env, capture=True)
    return result.stdout.strip()


def install_allure(config: RunConfig, env: Optional[Mapping[str, str]] = None) -> Path:
    """
    Install the Allure CLI into ``config.tools_dir`` unless already present.

    Returns:
        Path to the allure executable
    """
    allure_bin = config.allure_bin
    if _is_executable(allure_bin):
        logger.info(f"Allure CLI already present at {allure_bin}")
        return allure_bin

    logger.info(f"Installing Allure CLI {config.allure_version}")
    config.tools_dir.mkdir(parents=True, exist_ok=True)
    url = RELEASE_URL.format(version=config.allure_version)
    fetch_tarball(url, config.tools_dir, strip_components=0)
    logger.info(f"Allure CLI version: {allure_version(allure_bin, env)}")
    return allure_bin


def generate_report(
    config: RunConfig,
    target: SuiteTarget,
    tests_dir: Path,
    env: Optional[Mapping[str, str]] = None,
) -> Optional[Path]:
    """
    Render the Allure HTML report for a finished run.

    Never raises for a failed ``allure generate``; the test exit code is
    what the run reports.

    Returns:
        The report directory, or None if no report was produced
    """
    results_dir = target.results_dir(tests_dir)
    if not results_dir.is_dir():
        logger.warning(
            f"Allure results directory {target.allure_results_path} not found; "
            "skipping report generation"
        )
        return None

    allure_bin = config.allure_bin
    if not _is_executable(allure_bin):
        logger.warning(f"Allure CLI not found at {allure_bin}; skipping report generation")
        return None

    report_dir = config.artifacts_dir / target.suite
    logger.info(f"Generating Allure report for {target.suite}")
    try:
        report_dir.mkdir(parents=True, exist_ok=True)
        result = run_command(
            [allure_bin, "generate", results_dir, "-o", report_dir, "--clean"],
            env=env,
            check=False,
        )
    except (OSError, RunnerError) as e:
        logger.warning(f"Allure report generation failed: {e}")
        return None
    if not result.success:
        logger.warning(f"Allure report generation failed with exit code {result.returncode}")
        return None

    logger.info(f"Allure report written to {report_dir}")
    return report_dir
