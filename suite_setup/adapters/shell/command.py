"""
Shell command adapter — the single place ``subprocess.run`` is called.

Every external tool the installer drives (package managers, the compose
CLI, ``docker login``, ``crontab``) goes through ``run_command``. Calls
block until the tool exits; a non-zero return code is the only failure
signal callers look at. There is deliberately no timeout: an
operator-attended install waits for the tool, however long it takes.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from pathlib import Path

logger = logging.getLogger(__name__)

# Return code used when the executable itself could not be started
EXIT_NOT_FOUND = 127


def which(name: str) -> str | None:
    """Locate *name* on the executable search path."""
    return shutil.which(name)


def sudo_prefix() -> list[str]:
    """Prefix for commands that need root.

    Already root → no prefix. Otherwise ``sudo``, which prompts on the
    operator's terminal since output is not captured for these calls.
    """
    if os.geteuid() == 0:
        return []
    return ["sudo"]


def run_command(
    cmd: list[str],
    *,
    cwd: Path | None = None,
    input_text: str | None = None,
    capture: bool = False,
    needs_sudo: bool = False,
) -> subprocess.CompletedProcess[str]:
    """Run *cmd* and wait for it.

    Args:
        cmd: Command list.
        cwd: Working directory (default: inherit).
        input_text: Data piped to stdin (e.g. a registry token).
        capture: Capture stdout/stderr instead of streaming them to the
            operator's terminal.
        needs_sudo: Run with elevated privileges.

    Returns:
        The completed process. A missing executable is reported as
        return code 127 with the OS error in ``stderr``, never raised.
    """
    if needs_sudo:
        cmd = sudo_prefix() + cmd

    logger.debug("Executing: %s (cwd=%s)", " ".join(cmd), cwd)
    start = time.monotonic()

    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            input=input_text,
            capture_output=capture,
            text=True,
        )
    except OSError as e:
        logger.debug("Cannot start %s: %s", cmd[0], e)
        return subprocess.CompletedProcess(
            args=cmd, returncode=EXIT_NOT_FOUND, stdout="", stderr=str(e),
        )

    elapsed_ms = int((time.monotonic() - start) * 1000)
    logger.debug("Exit %d after %dms: %s", result.returncode, elapsed_ms, cmd[0])
    return result
