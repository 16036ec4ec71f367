"""
Registry authentication with a cached pull-only token.

Flow for one invocation::

    NoToken ──cache file──▶ CachedToken ─┐
       │                                 ├─ docker login ─▶ Authenticated (cache written)
       └──────prompt────▶ PromptedToken ─┘         │
                                                    └──────▶ Failed (cache evicted, abort)

There is no retry with a new token inside one run: a failed login
evicts the cached value and ends the command, and the next run asks.
"""

from __future__ import annotations

import enum
import logging
import os
import tempfile
from pathlib import Path

from suite_setup.adapters.prompt import InputProvider
from suite_setup.core.config.settings import SetupConfig
from suite_setup.core.errors import ExternalToolFailure
from suite_setup.core.observability.console import Console
from suite_setup.core.services.compose_ops import ComposeRunner

logger = logging.getLogger(__name__)

TOKEN_PROMPT = "Enter your GitHub Pull-Only Token:"


class AuthState(enum.Enum):
    NO_TOKEN = "no_token"
    CACHED_TOKEN = "cached_token"
    PROMPTED_TOKEN = "prompted_token"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


class CredentialCache:
    """Single-token cache file, readable and writable by the owner only."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> str | None:
        """Cached token, or None if there is no (non-empty) cache."""
        if not self.path.is_file():
            return None
        try:
            token = self.path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            # unusable cache: fall back to asking, store() overwrites it
            logger.warning("Ignoring unreadable credential cache %s: %s", self.path, e)
            return None
        return token or None

    def store(self, token: str) -> None:
        """Overwrite the cache with *token* (mode 0600, atomic)."""
        self.path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".token_", suffix=".tmp")
        tmp = Path(tmp_path)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(token + "\n")
            os.chmod(tmp, 0o600)
            tmp.replace(self.path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise

    def evict(self) -> bool:
        """Delete the cache file. Returns True if one was removed."""
        if not self.path.exists():
            return False
        self.path.unlink()
        return True


def prompt_token(prompter: InputProvider, console: Console) -> str:
    """Ask (masked) until something non-empty is entered."""
    while True:
        token = prompter.ask(TOKEN_PROMPT, secret=True).strip()
        if token:
            return token
        console.warn("Token cannot be empty.")


def ensure_registry_auth(
    config: SetupConfig,
    compose: ComposeRunner,
    prompter: InputProvider,
    console: Console,
) -> AuthState:
    """Log in to the image registry, preferring the cached token.

    Returns:
        ``AuthState.AUTHENTICATED`` on success.

    Raises:
        ExternalToolFailure: The registry rejected the token. A cached
            token is evicted first so the next run prompts again.
    """
    console.step("Registry Authentication")
    cache = CredentialCache(config.auth_path)
    state = AuthState.NO_TOKEN

    token = cache.read()
    if token:
        console.info(f"Using cached credentials from {config.auth_file}...")
        state = AuthState.CACHED_TOKEN
    else:
        token = prompt_token(prompter, console)
        state = AuthState.PROMPTED_TOKEN
    logger.debug("Registry token source: %s", state.value)

    console.info(f"Logging into {config.registry}...")
    if compose.login(config.registry, config.registry_user, token):
        cache.store(token)
        console.success(f"Successfully authenticated with {config.registry}.")
        return AuthState.AUTHENTICATED

    state = AuthState.FAILED
    logger.debug("Registry auth state: %s", state.value)
    if cache.evict():
        console.info("Cached token was invalid and has been removed.")
    raise ExternalToolFailure(
        f"Failed to authenticate with {config.registry}. Please check your token.",
        hint="Re-run the command and enter a valid pull-only token.",
    )
