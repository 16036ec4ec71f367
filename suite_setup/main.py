"""
Suite Setup — CLI entrypoint.

Usage:
    suite-setup install [--telemetry | --no-telemetry]
    suite-setup update
    suite-setup start
    suite-setup stop
    python -m suite_setup.main --help
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from pathlib import Path

import click

from suite_setup import __version__
from suite_setup.core.observability.logging_config import setup_logging

logger = logging.getLogger(__name__)

PROG_NAME = "suite-setup"
MODULE_NAME = "suite_setup.main"

COMMAND_HELP = """\b
Commands:
  install   Run the interactive installation process
  update    Update the application and restart services
  start     Start the infrastructure services
  stop      Stop the infrastructure services
  status    Show service status
  logs      Follow service logs
"""


def _resolve_tool_command() -> tuple[str, ...]:
    """Argv prefix the weekly cron entry should invoke.

    An installed ``suite-setup`` script is preferred; when running from a
    source checkout (``python -m suite_setup.main``) the entry goes
    through the current interpreter instead.
    """
    argv0 = Path(sys.argv[0])
    if argv0.is_file() and argv0.suffix != ".py":
        return (str(argv0.resolve()),)
    found = shutil.which(PROG_NAME)
    if found:
        return (str(Path(found).resolve()),)
    return (sys.executable, "-m", MODULE_NAME)


def _telemetry_choice(enable: bool, disable: bool) -> bool | None:
    if enable and disable:
        raise click.UsageError("--telemetry and --no-telemetry are mutually exclusive.")
    if enable:
        return True
    if disable:
        return False
    return None


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=COMMAND_HELP,
)
@click.version_option(version=__version__, prog_name=PROG_NAME)
@click.argument(
    "command",
    metavar="COMMAND",
    type=click.Choice(["install", "update", "start", "stop", "status", "logs"]),
)
@click.option(
    "--telemetry", "telemetry_on", is_flag=True,
    help="Enable telemetry without asking (install only).",
)
@click.option(
    "--no-telemetry", "telemetry_off", is_flag=True,
    help="Disable telemetry without asking (install only).",
)
@click.option(
    "--project-dir",
    "-d",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    envvar="SUITE_PROJECT_DIR",
    help="Directory holding the compose file and .env (default: current directory).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
def cli(
    command: str,
    telemetry_on: bool,
    telemetry_off: bool,
    project_dir: Path | None,
    verbose: bool,
    quiet: bool,
    debug: bool,
) -> None:
    """Snapsec On-Premises Setup Utility — install and manage the suite."""
    telemetry = _telemetry_choice(telemetry_on, telemetry_off)
    project_dir = project_dir or Path.cwd()

    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("SUITE_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("SUITE_LOG_FILE"),
        log_file_level=os.environ.get("SUITE_LOG_FILE_LEVEL"),
        base_dir=project_dir,
    )

    from suite_setup.adapters.prompt import TerminalInput
    from suite_setup.core.config.settings import build_config
    from suite_setup.core.errors import SetupError, UserAbort
    from suite_setup.core.observability.console import Console
    from suite_setup.core.use_cases.lifecycle import build_context, run_lifecycle

    console = Console(quiet=quiet)

    try:
        config = build_config(
            command,
            project_dir=project_dir,
            tool_command=_resolve_tool_command(),
            telemetry=telemetry,
        )
        run_lifecycle(build_context(config, TerminalInput(), console))
    except UserAbort as e:
        console.info(e.message)
        sys.exit(e.exit_code)
    except SetupError as e:
        if debug:
            logger.exception("Command %s failed", command)
        console.error(e.message)
        if e.hint:
            console.info(e.hint)
        sys.exit(e.exit_code)
    except (KeyboardInterrupt, click.Abort):
        click.echo()
        console.error("Interrupted.")
        sys.exit(130)


if __name__ == "__main__":
    cli()
