"""
Run configuration — one immutable object per invocation.

The CLI builds a ``SetupConfig`` once from parsed arguments (plus the
optional ``suite.yml`` overrides) and passes it down to every use case.
Nothing below the CLI reads argv, env vars or module-level state.

``suite.yml`` may only carry collaborator settings (registry, compose
command, schedule, ...). Paths, the command and the telemetry choice
always come from the command line.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from suite_setup.core.errors import ConfigError

logger = logging.getLogger(__name__)

# Default override filename (looked up in the project directory)
SUITE_CONFIG_FILE = "suite.yml"

Command = Literal["install", "update", "start", "stop", "status", "logs"]


class Overrides(BaseModel):
    """Settings an operator may pin in ``suite.yml``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    registry: str = "ghcr.io"
    registry_user: str = "faizanalibhat"
    compose_command: list[str] = Field(default_factory=lambda: ["docker-compose"], min_length=1)
    schedule: str = "0 0 * * 0"
    key_size: int = Field(default=2048, ge=2048)
    install_retries: int = Field(default=1, ge=0, le=5)


class SetupConfig(BaseModel):
    """Everything a lifecycle command needs to know, frozen.

    File locations are relative names resolved against ``project_dir``
    through the ``*_path`` properties.
    """

    model_config = ConfigDict(frozen=True)

    command: Command
    telemetry: bool | None = None   # None → ask the operator
    project_dir: Path
    tool_command: tuple[str, ...]   # argv prefix the cron entry runs

    env_file: str = ".env"
    env_template: str = ".env.example"
    marker_file: str = ".installed"
    auth_file: str = ".suite-auth/.github-auth"
    keys_dir: str = "keys"
    update_log: str = "update.log"

    registry: str = "ghcr.io"
    registry_user: str = "faizanalibhat"
    compose_command: tuple[str, ...] = ("docker-compose",)
    schedule: str = "0 0 * * 0"
    key_size: int = 2048
    install_retries: int = 1

    @property
    def env_path(self) -> Path:
        return self.project_dir / self.env_file

    @property
    def template_path(self) -> Path:
        return self.project_dir / self.env_template

    @property
    def marker_path(self) -> Path:
        return self.project_dir / self.marker_file

    @property
    def auth_path(self) -> Path:
        return self.project_dir / self.auth_file

    @property
    def keys_path(self) -> Path:
        return self.project_dir / self.keys_dir

    @property
    def update_log_path(self) -> Path:
        return self.project_dir / self.update_log


def load_overrides(project_dir: Path) -> Overrides:
    """Read ``suite.yml`` from *project_dir*, or return the defaults.

    Raises:
        ConfigError: If the file exists but is unreadable or invalid.
    """
    path = project_dir / SUITE_CONFIG_FILE
    if not path.is_file():
        return Overrides()

    logger.debug("Loading overrides from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Overrides()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # A plain string is accepted for compose_command ("docker compose")
    if isinstance(data.get("compose_command"), str):
        data["compose_command"] = data["compose_command"].split()

    try:
        return Overrides.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e


def build_config(
    command: str,
    *,
    project_dir: Path,
    tool_command: tuple[str, ...],
    telemetry: bool | None = None,
) -> SetupConfig:
    """Assemble the frozen run configuration for one invocation."""
    project_dir = project_dir.resolve()
    overrides = load_overrides(project_dir)
    config = SetupConfig(
        command=command,
        telemetry=telemetry,
        project_dir=project_dir,
        tool_command=tuple(tool_command),
        registry=overrides.registry,
        registry_user=overrides.registry_user,
        compose_command=tuple(overrides.compose_command),
        schedule=overrides.schedule,
        key_size=overrides.key_size,
        install_retries=overrides.install_retries,
    )
    logger.debug("Run configuration: %s", config.model_dump(mode="json"))
    return config
