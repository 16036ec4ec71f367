"""
Test doubles shared across test modules.
"""

from __future__ import annotations

import subprocess
import textwrap

ENV_TEMPLATE = textwrap.dedent("""\
    # Suite settings
    BASE_URL=
    ENCRYPTION_KEY=
    SERVICE_KEY=
    ENABLE_TELEMETRY=false

    POSTGRES_PASSWORD=changeme
    REDIS_PASSWORD=changeme
""")


def completed(rc: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    """Fake result of ``run_command``."""
    return subprocess.CompletedProcess(args=["fake"], returncode=rc, stdout=stdout, stderr=stderr)


class FakeCompose:
    """Stand-in for ComposeRunner that records calls.

    ``results`` maps a call name (``pull``, ``up``, ``down``, ``ps``,
    ``logs``, ``prune_images``, ``login``) to the boolean it returns.
    """

    def __init__(self, **results: bool) -> None:
        self.results = results
        self.calls: list[tuple] = []

    def _call(self, name: str, *args, **kwargs) -> bool:
        self.calls.append((name, args, kwargs))
        return self.results.get(name, True)

    def pull(self) -> bool:
        return self._call("pull")

    def up(self, *, remove_orphans: bool = False) -> bool:
        return self._call("up", remove_orphans=remove_orphans)

    def down(self, *, remove_images: bool = False, quiet: bool = False) -> bool:
        return self._call("down", remove_images=remove_images, quiet=quiet)

    def ps(self) -> bool:
        return self._call("ps")

    def logs(self, *, follow: bool = True) -> bool:
        return self._call("logs", follow=follow)

    def prune_images(self) -> bool:
        return self._call("prune_images")

    def login(self, registry: str, username: str, token: str) -> bool:
        return self._call("login", registry, username, token)

    @property
    def names(self) -> list[str]:
        return [c[0] for c in self.calls]
