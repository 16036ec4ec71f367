"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from suite_setup.core.config.settings import SetupConfig
from suite_setup.core.observability.console import Console
from tests.helpers import ENV_TEMPLATE


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A suite directory with an ``.env.example`` template."""
    root = tmp_path / "suite"
    root.mkdir()
    (root / ".env.example").write_text(ENV_TEMPLATE)
    return root


@pytest.fixture
def make_config(project_dir: Path):
    """Factory for SetupConfig rooted at ``project_dir``."""

    def _make(command: str = "install", **kwargs) -> SetupConfig:
        kwargs.setdefault("tool_command", ("/opt/bin/suite-setup",))
        return SetupConfig(command=command, project_dir=project_dir, **kwargs)

    return _make


@pytest.fixture
def console() -> Console:
    return Console()
