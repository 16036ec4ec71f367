"""
Error taxonomy for lifecycle commands.

Services raise these; the CLI is the only place that turns them into
an exit code and a labeled message. Validation problems (bad URL,
empty token) never appear here — they are retried at the prompt.
"""

from __future__ import annotations


class SetupError(Exception):
    """Base class for every condition that ends a command early."""

    exit_code = 1

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class UserAbort(SetupError):
    """The operator declined a confirmation. Not a failure."""

    exit_code = 0


class MissingPrerequisite(SetupError):
    """Something the command needs is absent and cannot be provided."""


class NotInstalledError(MissingPrerequisite):
    """A lifecycle command ran before ``install``."""


class ConfigError(MissingPrerequisite):
    """``suite.yml`` exists but is not usable."""


class ExternalToolFailure(SetupError):
    """An external command (compose, registry login) exited non-zero."""
