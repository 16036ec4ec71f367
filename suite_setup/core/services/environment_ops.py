"""
Environment materializer — seed ``.env`` and inject generated settings.

Install-time only. Ensures the env file exists (copied from the
checked-in template), asks for the public base URL, generates fresh
``ENCRYPTION_KEY`` / ``SERVICE_KEY`` secrets and records the telemetry
choice. Everything else in the file is left alone.
"""

from __future__ import annotations

import logging
import re
import secrets
import shutil

from suite_setup.adapters.prompt import InputProvider, confirm
from suite_setup.core.config.settings import SetupConfig
from suite_setup.core.errors import MissingPrerequisite
from suite_setup.core.observability.console import Console
from suite_setup.core.services.env_file import EnvFile

logger = logging.getLogger(__name__)

BASE_URL = "BASE_URL"
ENCRYPTION_KEY = "ENCRYPTION_KEY"
SERVICE_KEY = "SERVICE_KEY"
ENABLE_TELEMETRY = "ENABLE_TELEMETRY"

# 32 random bytes → 64 lowercase hex characters
SECRET_BYTES = 32

_URL_RE = re.compile(r"^https?://")

URL_PROMPT = "Enter the URL on which the app will be hosted (e.g., https://suite.snapsec.co):"
TELEMETRY_PROMPT = (
    "Would you like to enable anonymous telemetry to help improve "
    "the platform and resolve bugs?"
)


def generate_secret() -> str:
    """A fresh 256-bit secret, hex-encoded."""
    return secrets.token_hex(SECRET_BYTES)


def is_valid_base_url(url: str) -> bool:
    return bool(_URL_RE.match(url))


def ensure_env_file(config: SetupConfig, console: Console) -> EnvFile:
    """Load the env file, seeding it from the template if absent.

    Raises:
        MissingPrerequisite: Neither the env file nor the template exists.
    """
    env_path = config.env_path
    if not env_path.is_file():
        template = config.template_path
        if not template.is_file():
            raise MissingPrerequisite(
                f"{template.name} not found! Cannot initialize {env_path.name}.",
                hint=f"Restore {template.name} next to the compose file and re-run install.",
            )
        console.info(f"Creating {env_path.name} from {template.name}...")
        try:
            shutil.copy2(str(template), str(env_path))
        except OSError as e:
            raise MissingPrerequisite(
                f"Cannot create {env_path}: {e.strerror or e}",
                hint=f"Check the permissions of {env_path.parent} and re-run.",
            ) from e
    return EnvFile.load(env_path)


def prompt_base_url(prompter: InputProvider, console: Console) -> str:
    """Ask until the answer starts with ``http://`` or ``https://``."""
    while True:
        url = prompter.ask(URL_PROMPT).strip()
        if is_valid_base_url(url):
            return url
        console.warn("URL must start with http:// or https://")


def materialize_environment(
    config: SetupConfig,
    prompter: InputProvider,
    console: Console,
) -> EnvFile:
    """Seed the env file and write ``BASE_URL`` plus both secrets."""
    console.step("Configuring environment variables...")

    env = ensure_env_file(config, console)
    base_url = prompt_base_url(prompter, console)

    console.info(f"Updating {BASE_URL}, {ENCRYPTION_KEY}, and {SERVICE_KEY}...")
    env.upsert(BASE_URL, base_url)
    env.upsert(ENCRYPTION_KEY, generate_secret())
    env.upsert(SERVICE_KEY, generate_secret())
    env.save()

    console.success(f"Environment configuration updated in {config.env_file}.")
    return env


def resolve_telemetry(
    config: SetupConfig,
    prompter: InputProvider,
    console: Console,
) -> bool:
    """Use ``--telemetry`` / ``--no-telemetry`` if given, else ask (default yes)."""
    console.step("Telemetry Opt-in")
    if config.telemetry is not None:
        logger.debug("Telemetry preset from command line: %s", config.telemetry)
        return config.telemetry
    return confirm(prompter, TELEMETRY_PROMPT, default=True)


def apply_telemetry(config: SetupConfig, enabled: bool, console: Console) -> None:
    """Record ``ENABLE_TELEMETRY`` in the env file."""
    env = EnvFile.load(config.env_path)
    env.upsert(ENABLE_TELEMETRY, "true" if enabled else "false")
    env.save()

    if enabled:
        console.success("Telemetry enabled.")
    else:
        console.info("Telemetry disabled.")
