"""
Lifecycle use cases — install, update, start, stop (+ status, logs).

Each command is a strict sequence of steps; any fatal step raises a
``SetupError`` and the command ends there. There is no rollback. Every
step is idempotent, so the fix for a half-finished install is to run
install again.

The orchestrator is optimistic about container state: it never asks
the runtime what is running before acting, it just resets the stack
(``down``, errors ignored) and brings it up.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from suite_setup.adapters.prompt import InputProvider, confirm
from suite_setup.core.config.settings import SetupConfig
from suite_setup.core.errors import ExternalToolFailure, UserAbort
from suite_setup.core.observability.console import Console
from suite_setup.core.persistence.install_marker import InstallMarker
from suite_setup.core.services.compose_ops import ComposeRunner
from suite_setup.core.services.dependency_ops import check_dependencies
from suite_setup.core.services.environment_ops import (
    apply_telemetry,
    materialize_environment,
    resolve_telemetry,
)
from suite_setup.core.services.keys_ops import ensure_keypair
from suite_setup.core.services.registry_auth import ensure_registry_auth
from suite_setup.core.services.schedule_ops import ensure_schedule

logger = logging.getLogger(__name__)

REINSTALL_PROMPT = "Re-installing will remove all images and start fresh. Continue?"


@dataclass(frozen=True)
class SetupContext:
    """Collaborators for one command run."""

    config: SetupConfig
    prompter: InputProvider
    console: Console
    compose: ComposeRunner
    marker: InstallMarker


def build_context(config: SetupConfig, prompter: InputProvider, console: Console) -> SetupContext:
    return SetupContext(
        config=config,
        prompter=prompter,
        console=console,
        compose=ComposeRunner(config.project_dir, config.compose_command),
        marker=InstallMarker(config.marker_path),
    )


# ── Shared steps ────────────────────────────────────────────────


def _pull_images(ctx: SetupContext, *, hint: str | None = None) -> None:
    if not ctx.compose.pull():
        raise ExternalToolFailure("Failed to pull docker images.", hint=hint)


def _reset_stack(ctx: SetupContext) -> None:
    """``down`` whatever is running; failure just means nothing was up."""
    if not ctx.compose.down(quiet=True):
        logger.debug("Pre-start down failed (nothing running?) — ignored")


def _start_stack(ctx: SetupContext) -> None:
    ctx.console.info("Starting services in detached mode...")
    if not ctx.compose.up():
        raise ExternalToolFailure("Failed to start services.")


# ── Commands ────────────────────────────────────────────────────


def run_install(ctx: SetupContext) -> None:
    """Fresh install, or a confirmed destructive reinstall."""
    console = ctx.console
    console.banner()

    if ctx.marker.is_installed():
        console.warn("Application is already installed.")
        if not confirm(ctx.prompter, REINSTALL_PROMPT, default=False):
            raise UserAbort("Aborting installation.")
        console.info("Removing existing infrastructure and images...")
        if not ctx.compose.down(remove_images=True):
            logger.warning("Teardown before reinstall exited non-zero — continuing")

    console.info("Starting fresh installation...")

    check_dependencies(ctx.prompter, console, max_attempts=ctx.config.install_retries)
    materialize_environment(ctx.config, ctx.prompter, console)
    ensure_keypair(ctx.config.keys_path, console, key_size=ctx.config.key_size)

    telemetry = resolve_telemetry(ctx.config, ctx.prompter, console)
    apply_telemetry(ctx.config, telemetry, console)

    ensure_registry_auth(ctx.config, ctx.compose, ctx.prompter, console)

    console.step("Provisioning Containers")
    console.info("Pulling latest docker images...")
    _pull_images(ctx, hint="Please ensure your token has the 'read:packages' scope.")

    console.info("Ensuring infrastructure is stopped before starting...")
    _reset_stack(ctx)
    _start_stack(ctx)

    ensure_schedule(ctx.config, console)

    ctx.marker.mark_installed()
    console.info("Installation state saved.")

    console.success("Installation completed successfully! 🌟")
    console.info(
        "You can now access the application. Detailed logs are available "
        "via 'suite-setup logs'."
    )


def run_update(ctx: SetupContext) -> None:
    """Pull new images and restart; also what the weekly cron job runs."""
    console = ctx.console
    console.banner()
    ctx.marker.require_installed()

    console.info("Starting update process...")
    ensure_registry_auth(ctx.config, ctx.compose, ctx.prompter, console)

    console.step("Fetching Updates")
    console.info("Updating container images...")
    _pull_images(ctx)

    console.info("Ensuring infrastructure is stopped before restarting...")
    _reset_stack(ctx)

    console.step("Restarting Services")
    if not ctx.compose.up(remove_orphans=True):
        raise ExternalToolFailure("Failed to restart services.")

    console.step("Cleaning up old images")
    if not ctx.compose.prune_images():
        console.warn("Image cleanup failed; old images were left in place.")

    console.success("Application updated successfully! 🌟")


def run_start(ctx: SetupContext) -> None:
    console = ctx.console
    console.banner()
    ctx.marker.require_installed()

    console.info("Starting infrastructure...")
    console.info("Ensuring infrastructure is stopped before starting...")
    _reset_stack(ctx)

    console.step("Starting services")
    _start_stack(ctx)
    console.success("Infrastructure started successfully! 🌟")


def run_stop(ctx: SetupContext) -> None:
    console = ctx.console
    console.banner()
    ctx.marker.require_installed()

    console.info("Stopping infrastructure...")
    if not ctx.compose.down():
        raise ExternalToolFailure("Failed to stop services.")
    console.success("Infrastructure stopped successfully!")


def run_status(ctx: SetupContext) -> None:
    """Show the compose service listing."""
    ctx.marker.require_installed()
    if not ctx.compose.ps():
        raise ExternalToolFailure("Failed to query service status.")


def run_logs(ctx: SetupContext) -> None:
    """Follow service logs until interrupted."""
    ctx.marker.require_installed()
    if not ctx.compose.logs(follow=True):
        raise ExternalToolFailure("Failed to read service logs.")


COMMANDS: dict[str, Callable[[SetupContext], None]] = {
    "install": run_install,
    "update": run_update,
    "start": run_start,
    "stop": run_stop,
    "status": run_status,
    "logs": run_logs,
}


def run_lifecycle(ctx: SetupContext) -> None:
    """Dispatch ``ctx.config.command``."""
    logger.debug("Running command %s in %s", ctx.config.command, ctx.config.project_dir)
    COMMANDS[ctx.config.command](ctx)
