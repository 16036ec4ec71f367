"""
Dependency resolver — make sure docker, docker-compose, openssl and
crontab are on PATH, installing them with the host package manager if
the operator agrees.

Package managers are a closed set of families. Each family carries its
own install command and the package renames it needs (the scheduler
ships as ``cronie`` outside the Debian world). After every install
attempt the whole tool list is re-scanned, not just the packages that
were installed, so partial installs and renamed binaries are caught.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from suite_setup.adapters.prompt import InputProvider, confirm
from suite_setup.adapters.shell.command import run_command, which
from suite_setup.core.errors import MissingPrerequisite
from suite_setup.core.observability.console import Console

logger = logging.getLogger(__name__)

# Executable → package that provides it (family renames applied later)
REQUIRED_TOOLS: dict[str, str] = {
    "docker": "docker",
    "docker-compose": "docker-compose",
    "openssl": "openssl",
    "crontab": "cron",
}

CONSENT_PROMPT = "Would you like to attempt to install missing dependencies automatically?"


class PackageFamily(enum.Enum):
    APT = "apt"
    YUM = "yum"
    PACMAN = "pacman"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class InstallRecipe:
    """How one package-manager family installs packages."""

    binary: str                                  # presence on PATH identifies the family
    install: tuple[str, ...]                     # packages are appended
    refresh: tuple[str, ...] | None = None       # run once before installing
    renames: dict[str, str] = field(default_factory=dict)

    def package_for(self, package: str) -> str:
        return self.renames.get(package, package)


RECIPES: dict[PackageFamily, InstallRecipe] = {
    PackageFamily.APT: InstallRecipe(
        binary="apt-get",
        install=("apt-get", "install", "-y"),
        refresh=("apt-get", "update", "-qq"),
    ),
    PackageFamily.YUM: InstallRecipe(
        binary="yum",
        install=("yum", "install", "-y"),
        renames={"cron": "cronie"},
    ),
    PackageFamily.PACMAN: InstallRecipe(
        binary="pacman",
        install=("pacman", "-Sy", "--nocolor", "--noconfirm"),
        renames={"cron": "cronie"},
    ),
}


def detect_package_family() -> PackageFamily:
    """First family whose binary is on PATH, in apt → yum → pacman order."""
    for family, recipe in RECIPES.items():
        if which(recipe.binary):
            logger.debug("Detected package manager family: %s", family.value)
            return family
    return PackageFamily.UNKNOWN


def find_missing(console: Console | None = None) -> list[str]:
    """Full scan of REQUIRED_TOOLS; returns the missing executables in order."""
    missing: list[str] = []
    for tool in REQUIRED_TOOLS:
        if which(tool):
            if console:
                console.info(f"{tool} found.")
        else:
            missing.append(tool)
    return missing


def install_packages(family: PackageFamily, tools: list[str], console: Console) -> bool:
    """Install the packages providing *tools* with elevated privileges.

    Returns:
        True if every package-manager call exited 0. The caller re-scans
        regardless; the return value only feeds the log.

    Raises:
        MissingPrerequisite: The family is UNKNOWN.
    """
    recipe = RECIPES.get(family)
    if recipe is None:
        raise MissingPrerequisite(
            "Unsupported package manager.",
            hint=f"Please install {', '.join(tools)} manually and try again.",
        )

    packages = [recipe.package_for(REQUIRED_TOOLS[t]) for t in tools]
    ok = True

    if recipe.refresh:
        ok = run_command(list(recipe.refresh), needs_sudo=True).returncode == 0

    for package in packages:
        console.info(f"Attempting to install {package} using {family.value}...")
        r = run_command([*recipe.install, package], needs_sudo=True)
        if r.returncode != 0:
            logger.warning("Installing %s exited %d", package, r.returncode)
            ok = False
    return ok


def check_dependencies(
    prompter: InputProvider,
    console: Console,
    *,
    max_attempts: int = 1,
) -> None:
    """Verify required tools, offering to install what is missing.

    Args:
        max_attempts: Install rounds allowed before giving up. Each round
            is followed by a full re-scan.

    Raises:
        MissingPrerequisite: Consent declined, unknown package manager,
            or tools still missing after ``max_attempts`` rounds.
    """
    console.step("Verifying system requirements...")
    missing = find_missing(console)
    attempts = 0

    while missing:
        console.warn(f"The following dependencies are missing: {' '.join(missing)}")

        if attempts >= max_attempts:
            raise MissingPrerequisite(
                f"Dependencies still missing after {attempts} install attempt(s): "
                f"{', '.join(missing)}",
                hint="Install them manually and try again.",
            )

        if not confirm(prompter, CONSENT_PROMPT, default=True):
            raise MissingPrerequisite(
                "Cannot proceed without dependencies.",
                hint="Please install them and try again.",
            )

        family = detect_package_family()
        ok = install_packages(family, missing, console)
        attempts += 1
        logger.debug("Install round %d finished (all ok: %s)", attempts, ok)

        missing = find_missing(console)

    console.success("All critical dependencies are present.")
