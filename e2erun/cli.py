"""Click CLI for running an external e2e test suite."""

from __future__ import annotations

import signal
from pathlib import Path
from typing import Optional

import click

from e2erun import __version__
from e2erun.core.errors import RunnerError
from e2erun.core.types import RunConfig
from e2erun.logging import get_logger, new_run_id, setup_logging
from e2erun.runner import run_suite


logger = get_logger("cli")


def _raise_system_exit(signum, frame):
    # Unwind through the workspace cleanup like a normal exit
    raise SystemExit(128 + signum)


@click.command(
    context_settings={"ignore_unknown_options": True, "help_option_names": ["--help"]},
    epilog="Any arguments passed after `--` are forwarded to the `npx nx run ...` command.",
)
@click.version_option(version=__version__, prog_name="run-e2e-tests")
@click.option("--suite", help="Test suite to execute (chat, overlay, or nx target suffix).")
@click.option("--tarball", help="An URL to tar.gz with the tests source code.")
@click.option("--dotenv", help="Relative path inside the tests repo containing env vars to be sourced.")
@click.option(
    "--artifacts-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory where Allure reports will be written.",
)
@click.option("--keep-tests-dir", is_flag=True, help="Do not delete downloaded test workspace on exit.")
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file with run settings.",
)
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
@click.option("--json-logs", is_flag=True, help="Output structured JSON logs.")
@click.argument("nx_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def run_e2e_tests(
    ctx: click.Context,
    suite: Optional[str],
    tarball: Optional[str],
    dotenv: Optional[str],
    artifacts_dir: Optional[Path],
    keep_tests_dir: bool,
    config_file: Optional[Path],
    verbose: bool,
    json_logs: bool,
    nx_args: tuple[str, ...],
):
    """Download the chat e2e tests, run a suite and collect its Allure report.

    Defaults for every option come from the environment (TEST_SUITE,
    TESTS_TARBALL, DOTENV_FILE, ARTIFACTS_DIR, KEEP_TESTS_DIR).
    """
    new_run_id()
    setup_logging(verbose=verbose, structured=json_logs)
    signal.signal(signal.SIGTERM, _raise_system_exit)
    signal.signal(signal.SIGINT, _raise_system_exit)

    try:
        config = RunConfig.from_env(
            config_file=config_file,
            suite=suite,
            tarball_url=tarball,
            dotenv_file=dotenv,
            artifacts_dir=artifacts_dir,
            keep_tests_dir=True if keep_tests_dir else None,
            nx_args=list(nx_args) or None,
        )
        result = run_suite(config)
    except RunnerError as e:
        logger.error(str(e))
        ctx.exit(e.exit_code)

    click.echo("\n=== Test Run Complete ===")
    click.echo(f"Suite: {result.suite}")
    click.echo(f"Exit code: {result.exit_code}")
    click.echo(f"Report: {result.report_dir or 'N/A'}")
    click.echo(f"Duration: {result.duration_s:.1f} s")
    ctx.exit(result.exit_code)


def main():
    """Console script entry point."""
    run_e2e_tests()


if __name__ == "__main__":
    main()
