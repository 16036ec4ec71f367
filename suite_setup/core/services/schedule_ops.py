"""
Schedule registrar — weekly ``<tool> update`` in the user's crontab.

Best-effort: a host without ``crontab``, or a crontab call that fails,
produces a warning and the install carries on. The table is
read-modify-written as a whole; existing entries are preserved as-is.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Sequence
from pathlib import Path

from suite_setup.adapters.shell.command import run_command, which
from suite_setup.core.config.settings import SetupConfig
from suite_setup.core.observability.console import Console

logger = logging.getLogger(__name__)

UPDATE_COMMAND = "update"


def build_job_line(
    schedule: str, project_dir: Path, tool_command: Sequence[str], log_path: Path,
) -> str:
    """``0 0 * * 0 cd <dir> && <tool> update >> <dir>/update.log 2>&1``"""
    return (
        f"{schedule} cd {shlex.quote(str(project_dir))} && "
        f"{job_marker(tool_command)} "
        f">> {shlex.quote(str(log_path))} 2>&1"
    )


def job_marker(tool_command: Sequence[str]) -> str:
    """Substring that identifies this tool's update entry."""
    return shlex.join([*tool_command, UPDATE_COMMAND])


def has_job(table: str, tool_command: Sequence[str]) -> bool:
    marker = job_marker(tool_command)
    return any(marker in line for line in table.splitlines())


def read_table() -> str | None:
    """Current user's crontab.

    Returns:
        The table text ("" when the user has none yet), or None when the
        scheduler could not be queried at all.
    """
    r = run_command(["crontab", "-l"], capture=True)
    if r.returncode == 0:
        return r.stdout
    if "no crontab" in (r.stderr or "").lower():
        return ""
    logger.debug("crontab -l exited %d: %s", r.returncode, (r.stderr or "").strip())
    return None


def write_table(table: str) -> bool:
    return run_command(["crontab", "-"], input_text=table, capture=True).returncode == 0


def ensure_schedule(config: SetupConfig, console: Console) -> bool:
    """Register the weekly update job once.

    Returns:
        True if the job is (now or already) registered, False if the
        step was skipped.
    """
    console.step("Scheduling weekly maintenance...")

    if not which("crontab"):
        console.warn("Crontab not available, skipping cron setup.")
        return False

    table = read_table()
    if table is None:
        console.warn("Could not read the crontab, skipping cron setup.")
        return False

    if has_job(table, config.tool_command):
        console.info("Weekly update cron job is already scheduled.")
        return True

    console.info(f"Adding weekly update cron job ({config.schedule})...")
    line = build_job_line(
        config.schedule, config.project_dir, config.tool_command, config.update_log_path,
    )
    if table and not table.endswith("\n"):
        table += "\n"
    if not write_table(table + line + "\n"):
        console.warn("Failed to install the crontab entry, skipping cron setup.")
        return False

    console.success("Maintenance schedule established.")
    return True
