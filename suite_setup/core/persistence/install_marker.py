"""
Installation marker — the zero-byte ``.installed`` sentinel.

Its existence is the only thing that separates "never installed" from
"installed". ``update``, ``start``, ``stop`` (and the read-only
``status`` / ``logs``) refuse to run without it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from suite_setup.core.errors import NotInstalledError

logger = logging.getLogger(__name__)


class InstallMarker:
    """Existence flag at *path*; content is never read."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def is_installed(self) -> bool:
        return self.path.is_file()

    def mark_installed(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.touch(exist_ok=True)
        logger.debug("Marker created at %s", self.path)

    def require_installed(self) -> None:
        """Raise unless the marker is present."""
        if not self.is_installed():
            raise NotInstalledError(
                "Application is not installed.",
                hint="Run 'suite-setup install' first.",
            )
