"""
Logging configuration — one setup call at process start.

Called once by main.py. Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Terminal level, in precedence order:
    CLI flag  >  SUITE_LOG_LEVEL env var  >  WARNING (default)

``SUITE_LOG_FILE`` adds a transcript file. Operator messages from the
Console are logged at INFO, so the file records at INFO unless
``SUITE_LOG_FILE_LEVEL`` says otherwise: an unattended ``update`` run
leaves the full step-by-step account even though the terminal handler
stays at WARNING. A relative file name lands in the project directory,
next to ``update.log``.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_FMT_TERMINAL = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
}
_FMT_TERMINAL_DEFAULT = ("%(message)s", None)

_FMT_FILE = "%(asctime)s %(levelname)-5s [%(process)d] %(name)s — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# Console lines are mirrored at this level
TRANSCRIPT_LEVEL = logging.INFO


def setup_logging(
    level: str = "WARNING",
    log_file: str | Path | None = None,
    log_file_level: str | None = None,
    base_dir: Path | None = None,
) -> Path | None:
    """Configure Python logging for the entire process.

    Args:
        level: Terminal level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional transcript file; relative names are resolved
            against ``base_dir``.
        log_file_level: Level for the file. Defaults to INFO, or to the
            terminal level when that is more verbose.
        base_dir: Project directory used for relative ``log_file`` names.

    Returns:
        The absolute transcript path, or None when there is none.
    """
    terminal_level = _parse_level(level)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_terminal_handler(terminal_level))
    effective_level = terminal_level

    transcript: Path | None = None
    if log_file:
        transcript = _resolve_log_path(log_file, base_dir)
        if log_file_level:
            file_level = _parse_level(log_file_level)
        else:
            file_level = min(TRANSCRIPT_LEVEL, terminal_level)
        root.addHandler(_file_handler(transcript, file_level))
        effective_level = min(effective_level, file_level)

    root.setLevel(effective_level)
    return transcript


def _terminal_handler(level: int) -> logging.Handler:
    fmt, datefmt = _FMT_TERMINAL_DEFAULT
    for threshold in sorted(_FMT_TERMINAL):
        if level <= threshold:
            fmt, datefmt = _FMT_TERMINAL[threshold]
            break
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: Path, level: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
    return handler


def _resolve_log_path(log_file: str | Path, base_dir: Path | None) -> Path:
    path = Path(log_file).expanduser()
    if not path.is_absolute() and base_dir is not None:
        path = base_dir / path
    return path.resolve()


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
