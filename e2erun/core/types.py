"""Core data structures for an e2e run."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_TARBALL = "https://github.com/nepalevov/ai-dial-chat/archive/refs/heads/development.tar.gz"
DEFAULT_DOTENV = "apps/chat-e2e/.env.ci"


class RunConfig(BaseModel):
    """Settings for a single test-suite run."""

    model_config = ConfigDict(extra="forbid")

    suite: str = "chat"
    tarball_url: str = DEFAULT_TARBALL
    dotenv_file: str = DEFAULT_DOTENV
    artifacts_dir: Path = Path("/tmp/reports")
    tests_dir: Optional[Path] = None  # None -> fresh temp dir
    keep_tests_dir: bool = False

    tools_dir: Path = Path("/tmp/e2e-tools")
    nvm_dir: Path = Field(default_factory=lambda: Path.home() / ".nvm")
    node_version: str = "lts/*"
    playwright_version: str = "1.57.0"  # @playwright/test version
    allure_version: str = "2.24.0"

    nx_target: Optional[str] = None
    allure_results_path: Optional[str] = None
    skip_test_install: bool = False
    nx_args: list[str] = Field(default_factory=list)

    @field_validator("suite")
    @classmethod
    def _suite_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("suite must not be empty")
        return value

    @property
    def allure_bin(self) -> Path:
        return self.tools_dir / f"allure-{self.allure_version}" / "bin" / "allure"

    def target(self) -> "SuiteTarget":
        """Resolve the Nx target and results path for this run."""
        from e2erun.core.suites import resolve_suite

        return resolve_suite(self.suite, self.nx_target, self.allure_results_path)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        config_file: Optional[Path] = None,
        **overrides: Any,
    ) -> "RunConfig":
        """Build config from defaults, a YAML file, the environment and overrides."""
        from e2erun.core.config import load_run_config

        return load_run_config(environ=environ, config_file=config_file, **overrides)


@dataclass(frozen=True)
class SuiteTarget:
    """Nx target and Allure results location for a suite."""

    suite: str
    nx_target: str
    allure_results_path: str

    def results_dir(self, tests_dir: Path) -> Path:
        """Absolute results directory inside the workspace."""
        return Path(tests_dir) / self.allure_results_path.removeprefix("./")


@dataclass
class CommandResult:
    """Result of an external command."""

    cmd: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    elapsed_s: float = 0.0

    @property
    def success(self) -> bool:
        return self.returncode == 0


@dataclass
class RunResult:
    """Outcome of a full suite run."""

    suite: str
    exit_code: int
    tests_dir: Path
    report_dir: Optional[Path] = None
    duration_s: float = 0.0
    nx_command: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.exit_code == 0
