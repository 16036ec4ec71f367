"""
``.env`` document — ordered ``KEY=VALUE`` lines with in-place upsert.

The whole file is loaded into memory as its original lines. ``upsert``
either rewrites the single line that starts with ``KEY=`` or appends a
new line; every other line (comments, blanks, settings this tool never
touches) stays byte-identical, including bytes that are not valid
UTF-8. ``save`` writes atomically: temp file in the same directory,
then rename.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import tempfile
from pathlib import Path

from suite_setup.core.errors import MissingPrerequisite

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Undecodable bytes round-trip as lone surrogates
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


class EnvFile:
    """In-memory view of a ``KEY=VALUE`` file.

    Only lines of the exact form ``KEY=...`` (no leading whitespace, no
    ``export``) count as settings, matching how the compose CLI reads
    the file.
    """

    def __init__(self, path: Path, lines: list[str] | None = None) -> None:
        self.path = path
        self.lines: list[str] = lines if lines is not None else []

    @classmethod
    def load(cls, path: Path) -> EnvFile:
        """Read *path*; a missing file yields an empty document.

        Raises:
            MissingPrerequisite: The file exists but cannot be read.
        """
        if not path.is_file():
            return cls(path)
        try:
            # bytes, so CRLF line endings survive untouched
            raw = path.read_bytes()
        except OSError as e:
            raise MissingPrerequisite(
                f"Cannot read {path}: {e.strerror or e}",
                hint=f"Check the permissions of {path} and re-run.",
            ) from e
        content = raw.decode(_ENCODING, errors=_ERRORS)
        return cls(path, content.splitlines(keepends=True))

    def _index_of(self, key: str) -> int | None:
        prefix = f"{key}="
        for i, line in enumerate(self.lines):
            if line.startswith(prefix):
                return i
        return None

    def get(self, key: str) -> str | None:
        i = self._index_of(key)
        if i is None:
            return None
        return self.lines[i].rstrip("\r\n").split("=", 1)[1]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._index_of(key) is not None

    def keys(self) -> list[str]:
        """Setting names in file order."""
        names: list[str] = []
        for line in self.lines:
            name, sep, _ = line.partition("=")
            if sep and _KEY_RE.match(name) and name not in names:
                names.append(name)
        return names

    def as_dict(self) -> dict[str, str]:
        return {k: self.get(k) or "" for k in self.keys()}

    def upsert(self, key: str, value: str) -> bool:
        """Set *key* to *value*.

        Returns:
            True if an existing line was rewritten, False if appended.
        """
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid setting name: {key!r}")
        if "\n" in value or "\r" in value:
            raise ValueError(f"Value for {key} must be a single line")

        i = self._index_of(key)
        if i is not None:
            old = self.lines[i]
            ending = old[len(old.rstrip("\r\n")):] or "\n"
            self.lines[i] = f"{key}={value}{ending}"
            logger.debug("Updated %s in %s", key, self.path.name)
            return True

        if self.lines and not self.lines[-1].endswith("\n"):
            self.lines[-1] += "\n"
        self.lines.append(f"{key}={value}\n")
        logger.debug("Appended %s to %s", key, self.path.name)
        return False

    def render(self) -> str:
        return "".join(self.lines)

    def save(self) -> None:
        """Write the document back atomically, keeping the file mode.

        Raises:
            MissingPrerequisite: The file or its directory is not writable.
        """
        try:
            self._write_atomic()
        except OSError as e:
            raise MissingPrerequisite(
                f"Cannot write {self.path}: {e.strerror or e}",
                hint=f"Check the permissions of {self.path.parent} and re-run.",
            ) from e
        logger.debug("Saved %s (%d lines)", self.path, len(self.lines))

    def _write_atomic(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}_",
            suffix=".tmp",
        )
        tmp = Path(tmp_path)
        try:
            with os.fdopen(fd, "w", encoding=_ENCODING, errors=_ERRORS, newline="") as fh:
                fh.write(self.render())
            if self.path.exists():
                shutil.copymode(self.path, tmp)
            tmp.replace(self.path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise
