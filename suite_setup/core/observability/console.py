"""
Operator console — labeled, colored progress lines.

This is what the person running ``suite-setup install`` reads. Every
line is mirrored into the ``logging`` tree at INFO so a log file
captures the whole run; the stderr log handler sits at WARNING by
default, so nothing is printed twice.

click drops the ANSI colors when stdout is not a terminal, which keeps
the scheduled job's ``update.log`` plain.
"""

from __future__ import annotations

import logging

import click

logger = logging.getLogger(__name__)

BANNER_TITLE = "Snapsec On-Premises Setup Utility"


class Console:
    """Print operator-facing messages.

    Args:
        quiet: Suppress ``info`` lines (steps, successes, warnings and
            errors are always shown).
    """

    def __init__(self, *, quiet: bool = False) -> None:
        self.quiet = quiet

    def banner(self) -> None:
        rule = "=" * 46
        click.secho(f"\n{rule}\n    {BANNER_TITLE}\n{rule}\n", fg="magenta", bold=True)

    def step(self, message: str) -> None:
        logger.info("== %s", message)
        click.echo()
        click.secho(f"➜ {message}", fg="cyan", bold=True)

    def info(self, message: str) -> None:
        logger.info("[INFO] %s", message)
        if self.quiet:
            return
        click.secho("ℹ️  [INFO] ", fg="blue", bold=True, nl=False)
        click.echo(message)

    def success(self, message: str) -> None:
        logger.info("[SUCCESS] %s", message)
        click.secho("✅ [SUCCESS] ", fg="green", bold=True, nl=False)
        click.echo(message)

    def warn(self, message: str) -> None:
        logger.info("[WARN] %s", message)
        click.secho("⚠️  [WARN] ", fg="yellow", bold=True, nl=False)
        click.echo(message)

    def error(self, message: str) -> None:
        logger.info("[ERROR] %s", message)
        click.secho("❌ [ERROR] ", fg="red", bold=True, nl=False, err=True)
        click.echo(message, err=True)
