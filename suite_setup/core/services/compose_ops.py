"""
Compose CLI collaborator — pull, up, down, ps, logs, prune, login.

Thin wrappers over ``run_command``. Long-running calls (pull, up,
down, logs) stream straight to the operator's terminal; ``login`` is
captured so the token-bearing exchange never reaches the screen.
All calls run in the project directory, where the compose file lives.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from suite_setup.adapters.shell.command import run_command

logger = logging.getLogger(__name__)


class ComposeRunner:
    """Drive ``docker-compose`` (or whatever *compose_command* is) in *cwd*."""

    def __init__(self, cwd: Path, compose_command: tuple[str, ...] = ("docker-compose",)) -> None:
        self.cwd = cwd
        self.compose_command = tuple(compose_command)

    def _compose(self, *args: str, capture: bool = False) -> subprocess.CompletedProcess[str]:
        return run_command([*self.compose_command, *args], cwd=self.cwd, capture=capture)

    def pull(self) -> bool:
        return self._compose("pull").returncode == 0

    def up(self, *, remove_orphans: bool = False) -> bool:
        args = ["up", "-d"]
        if remove_orphans:
            args.append("--remove-orphans")
        return self._compose(*args).returncode == 0

    def down(self, *, remove_images: bool = False, quiet: bool = False) -> bool:
        """Stop the stack. ``quiet`` swallows output (used for the pre-start reset)."""
        args = ["down"]
        if remove_images:
            args += ["--rmi", "all"]
        return self._compose(*args, capture=quiet).returncode == 0

    def ps(self) -> bool:
        return self._compose("ps").returncode == 0

    def logs(self, *, follow: bool = True) -> bool:
        args = ["logs"]
        if follow:
            args.append("-f")
        return self._compose(*args).returncode == 0

    def prune_images(self) -> bool:
        """Remove dangling images (``docker image prune -f``)."""
        return run_command(["docker", "image", "prune", "-f"], cwd=self.cwd).returncode == 0

    def login(self, registry: str, username: str, token: str) -> bool:
        """``docker login`` with the token on stdin; output is discarded."""
        r = run_command(
            ["docker", "login", registry, "-u", username, "--password-stdin"],
            cwd=self.cwd,
            input_text=token + "\n",
            capture=True,
        )
        if r.returncode != 0:
            logger.debug("docker login to %s failed (exit %d)", registry, r.returncode)
        return r.returncode == 0
