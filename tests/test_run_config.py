"""Tests for run configuration loading."""

from pathlib import Path

import pytest

from e2erun.core.config import load_run_config, load_yaml_config, parse_flag
from e2erun.core.errors import ConfigError
from e2erun.core.types import DEFAULT_DOTENV, DEFAULT_TARBALL, RunConfig


class TestRunConfigDefaults:
    """Test RunConfig defaults."""

    def test_default_config(self):
        """Test default configuration values."""
        config = RunConfig()

        assert config.suite == "chat"
        assert config.tarball_url == DEFAULT_TARBALL
        assert config.dotenv_file == DEFAULT_DOTENV
        assert config.artifacts_dir == Path("/tmp/reports")
        assert config.tests_dir is None
        assert config.keep_tests_dir is False
        assert config.node_version == "lts/*"
        assert config.playwright_version == "1.57.0"
        assert config.allure_version == "2.24.0"
        assert config.nx_args == []

    def test_allure_bin(self):
        config = RunConfig(tools_dir=Path("/opt/tools"), allure_version="2.30.0")

        assert config.allure_bin == Path("/opt/tools/allure-2.30.0/bin/allure")

    def test_target_uses_overrides(self):
        config = RunConfig(suite="overlay", nx_target="other:e2e")

        target = config.target()
        assert target.nx_target == "other:e2e"
        assert target.allure_results_path == "./apps/chat-e2e/allure-overlay-results"

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            RunConfig(not_a_field=1)


class TestLoadRunConfig:
    """Test layering of defaults, config file, environment and overrides."""

    def test_from_env_empty(self):
        config = load_run_config(environ={})

        assert config.suite == "chat"

    def test_from_env_with_values(self):
        """Test config from environment variables."""
        env = {
            "TEST_SUITE": "overlay",
            "TESTS_TARBALL": "https://example.com/tests.tar.gz",
            "DOTENV_FILE": "apps/chat-e2e/.env.local",
            "ARTIFACTS_DIR": "/var/reports",
            "TESTS_DIR": "/tmp/ws",
            "NODE_VERSION": "20",
            "NX_TARGET": "chat-e2e:e2e:overlay-ci",
        }

        config = RunConfig.from_env(environ=env)

        assert config.suite == "overlay"
        assert config.tarball_url == "https://example.com/tests.tar.gz"
        assert config.dotenv_file == "apps/chat-e2e/.env.local"
        assert config.artifacts_dir == Path("/var/reports")
        assert config.tests_dir == Path("/tmp/ws")
        assert config.node_version == "20"
        assert config.target().nx_target == "chat-e2e:e2e:overlay-ci"

    def test_empty_env_values_ignored(self):
        config = load_run_config(environ={"TEST_SUITE": "", "TESTS_DIR": ""})

        assert config.suite == "chat"
        assert config.tests_dir is None

    @pytest.mark.parametrize(
        "raw,expected",
        [("1", True), ("true", True), ("yes", True), ("0", False), ("false", False), ("OFF", False)],
    )
    def test_keep_tests_dir_values(self, raw, expected):
        config = load_run_config(environ={"KEEP_TESTS_DIR": raw})

        assert config.keep_tests_dir is expected
        assert parse_flag(raw) is expected

    def test_skip_test_install_any_value(self):
        config = load_run_config(environ={"SKIP_TEST_INSTALL": "0"})

        assert config.skip_test_install is True

    def test_overrides_win_over_env(self):
        config = load_run_config(environ={"TEST_SUITE": "overlay"}, suite="chat")

        assert config.suite == "chat"

    def test_none_overrides_ignored(self):
        config = load_run_config(environ={"TEST_SUITE": "overlay"}, suite=None)

        assert config.suite == "overlay"

    def test_config_file_below_env(self, tmp_path):
        """YAML values apply unless the environment sets the same field."""
        config_file = tmp_path / "e2e.yaml"
        config_file.write_text(
            "suite: overlay\n"
            "playwright_version: latest\n"
            "nx_args: ['--grep', 'smoke']\n"
        )

        config = load_run_config(environ={"TEST_SUITE": "chat"}, config_file=config_file)

        assert config.suite == "chat"
        assert config.playwright_version == "latest"
        assert config.nx_args == ["--grep", "smoke"]

    def test_config_file_unknown_key(self, tmp_path):
        config_file = tmp_path / "e2e.yaml"
        config_file.write_text("suit: chat\n")

        with pytest.raises(ConfigError):
            load_run_config(environ={}, config_file=config_file)

    def test_blank_suite_rejected(self):
        with pytest.raises(ConfigError):
            load_run_config(environ={}, suite="   ")


class TestLoadYamlConfig:
    """Test YAML loading."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_yaml_config(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_yaml_config(path) == {}

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- chat\n- overlay\n")

        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_yaml_config(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("suite: [chat\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_yaml_config(path)
