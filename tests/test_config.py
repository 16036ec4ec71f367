"""
Tests for run configuration — SetupConfig and suite.yml overrides.
"""

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from suite_setup.core.config.settings import SetupConfig, build_config, load_overrides
from suite_setup.core.errors import ConfigError


class TestSetupConfig:
    def test_paths_resolve_against_project_dir(self, tmp_path: Path):
        config = SetupConfig(command="install", project_dir=tmp_path, tool_command=("/bin/x",))
        assert config.env_path == tmp_path / ".env"
        assert config.template_path == tmp_path / ".env.example"
        assert config.marker_path == tmp_path / ".installed"
        assert config.auth_path == tmp_path / ".suite-auth" / ".github-auth"
        assert config.keys_path == tmp_path / "keys"
        assert config.update_log_path == tmp_path / "update.log"

    def test_is_frozen(self, tmp_path: Path):
        config = SetupConfig(command="install", project_dir=tmp_path, tool_command=("/bin/x",))
        with pytest.raises(ValidationError):
            config.telemetry = True

    def test_unknown_command_rejected(self, tmp_path: Path):
        with pytest.raises(ValidationError):
            SetupConfig(command="destroy", project_dir=tmp_path, tool_command=("/bin/x",))


class TestOverrides:
    def test_defaults_without_file(self, tmp_path: Path):
        overrides = load_overrides(tmp_path)
        assert overrides.registry == "ghcr.io"
        assert overrides.compose_command == ["docker-compose"]
        assert overrides.install_retries == 1

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        (tmp_path / "suite.yml").write_text("")
        assert load_overrides(tmp_path).schedule == "0 0 * * 0"

    def test_values_applied(self, tmp_path: Path):
        (tmp_path / "suite.yml").write_text(textwrap.dedent("""\
            registry: registry.example.com
            registry_user: puller
            compose_command: docker compose
            schedule: "30 2 * * 6"
            key_size: 4096
        """))
        config = build_config("update", project_dir=tmp_path, tool_command=("/bin/x",))
        assert config.registry == "registry.example.com"
        assert config.registry_user == "puller"
        assert config.compose_command == ("docker", "compose")
        assert config.schedule == "30 2 * * 6"
        assert config.key_size == 4096
        assert config.telemetry is None

    def test_invalid_yaml(self, tmp_path: Path):
        (tmp_path / "suite.yml").write_text("registry: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_overrides(tmp_path)

    def test_not_a_mapping(self, tmp_path: Path):
        (tmp_path / "suite.yml").write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_overrides(tmp_path)

    @pytest.mark.parametrize("body", [
        "key_size: 1024\n",
        "install_retries: 99\n",
        "env_file: other.env\n",
    ])
    def test_rejected_settings(self, tmp_path: Path, body):
        (tmp_path / "suite.yml").write_text(body)
        with pytest.raises(ConfigError, match="Invalid settings"):
            load_overrides(tmp_path)
