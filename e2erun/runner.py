"""
End-to-end suite orchestration.

A run is a fixed sequence: set up the workspace, download the test
sources, provision the toolchain, load the suite's dotenv, run the Nx
target, and render the Allure report. The Nx exit code is the result of
the run; report generation never changes it.
"""
from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Mapping, Optional

from dotenv import dotenv_values

from e2erun.core.process import require_cmd, run_command
from e2erun.core.types import RunConfig, RunResult, SuiteTarget
from e2erun.io.fetch import fetch_tarball
from e2erun.logging import get_logger, timed_operation
from e2erun.toolchain import (
    ensure_java,
    ensure_node,
    generate_report,
    install_allure,
    install_playwright,
)
from e2erun.workspace import Workspace


logger = get_logger("runner")

NX_BASE_ARGS = ["--configuration=production", "--output-style=stream", "--skipInstall"]


def load_dotenv_file(
    tests_dir: Path,
    dotenv_file: str,
    env: Mapping[str, str],
) -> dict[str, str]:
    """
    Overlay the variables of a dotenv file onto ``env``.

    Values from the file win over inherited ones. References like
    ${VAR} are expanded from the process environment and earlier lines.

    Args:
        tests_dir: Workspace root
        dotenv_file: Path of the dotenv file relative to the workspace
        env: Current child environment

    Returns:
        New environment mapping
    """
    path = Path(tests_dir) / dotenv_file
    if not path.is_file():
        logger.warning(f"Dotenv file {dotenv_file} not found in {tests_dir}")
        return dict(env)

    loaded = {k: v for k, v in dotenv_values(path, interpolate=True).items() if v is not None}
    logger.debug(f"Loaded {len(loaded)} variables from {path}")
    return {**env, **loaded}


def shell_exit_code(returncode: int) -> int:
    """Map a child killed by signal N (returncode -N) to the shell's 128+N."""
    return 128 - returncode if returncode < 0 else returncode


def build_nx_command(target: SuiteTarget, extra_args: list[str]) -> list[str]:
    """Nx invocation for a suite, with passthrough arguments appended."""
    return ["npx", "nx", "run", target.nx_target, *NX_BASE_ARGS, *extra_args]


class E2ERunner:
    """
    Runs one test suite end to end.

    Example usage:
        config = RunConfig.from_env(suite="overlay")
        result = E2ERunner(config).run()
        sys.exit(result.exit_code)
    """

    def __init__(self, config: RunConfig, environ: Optional[Mapping[str, str]] = None):
        self.config = config
        self.target = config.target()
        self.env: dict[str, str] = dict(os.environ if environ is None else environ)

    def fetch_tests(self, tests_dir: Path) -> None:
        logger.info(f"Downloading test sources from {self.config.tarball_url}")
        fetch_tarball(self.config.tarball_url, tests_dir, strip_components=1)

    def install_test_dependencies(self, tests_dir: Path) -> None:
        """Provision Node.js, Java, Allure and Playwright."""
        if self.config.skip_test_install:
            logger.warning("SKIP_TEST_INSTALL set; skipping dependency installation")
            return

        self.env = ensure_node(self.config, self.env)
        ensure_java(self.env)
        install_allure(self.config, self.env)
        install_playwright(self.config, tests_dir, self.env)

    def run_tests(self, tests_dir: Path) -> tuple[int, list[str]]:
        """Run the Nx target and return its exit code and command."""
        self.env = load_dotenv_file(tests_dir, self.config.dotenv_file, self.env)
        require_cmd("npx", self.env)

        cmd = build_nx_command(self.target, self.config.nx_args)
        logger.info(f"Executing {' '.join(cmd)}")
        result = run_command(cmd, cwd=tests_dir, env=self.env, check=False)
        exit_code = shell_exit_code(result.returncode)
        logger.info(f"Test run finished with exit code {exit_code}")
        return exit_code, cmd

    def run(self) -> RunResult:
        """Execute the full sequence and return the outcome."""
        start_time = time.monotonic()
        workspace = Workspace(self.config.tests_dir, keep=self.config.keep_tests_dir)

        with workspace as tests_dir:
            with timed_operation(logger, "fetch"):
                self.fetch_tests(tests_dir)
            with timed_operation(logger, "install"):
                self.install_test_dependencies(tests_dir)
            with timed_operation(logger, "tests", suite=self.config.suite):
                exit_code, cmd = self.run_tests(tests_dir)
            with timed_operation(logger, "report"):
                report_dir = generate_report(self.config, self.target, tests_dir, self.env)

        return RunResult(
            suite=self.config.suite,
            exit_code=exit_code,
            tests_dir=tests_dir,
            report_dir=report_dir,
            duration_s=time.monotonic() - start_time,
            nx_command=cmd,
        )


def run_suite(config: RunConfig, environ: Optional[Mapping[str, str]] = None) -> RunResult:
    """Run a suite with the given configuration."""
    return E2ERunner(config, environ).run()
