"""Configuration loading and management."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import ValidationError

from e2erun.core.errors import ConfigError
from e2erun.core.types import RunConfig
from e2erun.logging import get_logger


logger = get_logger("core.config")

# RunConfig field -> environment variable supplying its default
ENV_VARS: dict[str, str] = {
    "suite": "TEST_SUITE",
    "tarball_url": "TESTS_TARBALL",
    "dotenv_file": "DOTENV_FILE",
    "artifacts_dir": "ARTIFACTS_DIR",
    "tests_dir": "TESTS_DIR",
    "keep_tests_dir": "KEEP_TESTS_DIR",
    "tools_dir": "TOOLS_DIR",
    "nvm_dir": "NVM_DIR",
    "node_version": "NODE_VERSION",
    "playwright_version": "PLAYWRIGHT_VERSION",
    "allure_version": "ALLURE_VERSION",
    "nx_target": "NX_TARGET",
    "allure_results_path": "ALLURE_RESULTS_PATH",
    "skip_test_install": "SKIP_TEST_INSTALL",
}

_FALSE_VALUES = {"0", "false", "no", "off"}


def load_yaml_config(path: str | Path) -> dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        path: Path to YAML file

    Returns:
        Configuration dictionary (empty for an empty file)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def parse_flag(value: str) -> bool:
    """Interpret a KEEP_TESTS_DIR style value."""
    return value.strip().lower() not in _FALSE_VALUES


def env_values(environ: Mapping[str, str]) -> dict[str, Any]:
    """Collect RunConfig values from environment variables. Empty values are ignored."""
    values: dict[str, Any] = {}
    for name, var in ENV_VARS.items():
        raw = environ.get(var, "")
        if not raw:
            continue
        if name == "keep_tests_dir":
            values[name] = parse_flag(raw)
        elif name == "skip_test_install":
            values[name] = True
        else:
            values[name] = raw
    return values


def load_run_config(
    environ: Optional[Mapping[str, str]] = None,
    config_file: Optional[str | Path] = None,
    **overrides: Any,
) -> RunConfig:
    """
    Build a RunConfig.

    Sources are layered as defaults < config file < environment < overrides.
    Overrides that are None are ignored.

    Args:
        environ: Environment mapping (defaults to os.environ)
        config_file: Optional YAML file with RunConfig fields
        **overrides: Explicit values, typically from the CLI

    Returns:
        RunConfig instance
    """
    environ = os.environ if environ is None else environ
    values: dict[str, Any] = {}

    if config_file:
        logger.debug(f"Loading config file: {config_file}")
        values.update(load_yaml_config(config_file))

    values.update(env_values(environ))
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return RunConfig(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
