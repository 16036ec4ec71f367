"""
Tests for observability — logging setup and the operator console.
"""

import logging
from pathlib import Path

import pytest

from suite_setup.core.observability.console import Console
from suite_setup.core.observability.logging_config import _parse_level, setup_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestParseLevel:
    @pytest.mark.parametrize("name,expected", [
        ("debug", logging.DEBUG),
        ("INFO", logging.INFO),
        ("bogus", logging.WARNING),
        (None, logging.WARNING),
    ])
    def test_levels(self, name, expected):
        assert _parse_level(name) == expected


class TestSetupLogging:
    def test_console_level(self):
        setup_logging("ERROR")
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.ERROR

    def test_file_handler_lowers_root_level(self, tmp_path: Path):
        log_file = tmp_path / "update.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")
        root = logging.getLogger()
        assert len(root.handlers) == 2
        assert root.level == logging.DEBUG

        logging.getLogger("suite_setup.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert "hello file" in log_file.read_text()

    def test_transcript_defaults_to_info(self, tmp_path: Path):
        transcript = setup_logging("WARNING", log_file="run.log", base_dir=tmp_path)
        assert transcript == (tmp_path / "run.log").resolve()

        Console(quiet=True).info("Pulling latest docker images...")
        for h in logging.getLogger().handlers:
            h.flush()
        assert "[INFO] Pulling latest docker images..." in transcript.read_text()

    def test_terminal_stays_at_warning_with_transcript(self, tmp_path: Path):
        setup_logging("WARNING", log_file=tmp_path / "run.log")
        terminal, file_handler = logging.getLogger().handlers
        assert terminal.level == logging.WARNING
        assert file_handler.level == logging.INFO

    def test_absolute_log_file_ignores_base_dir(self, tmp_path: Path):
        target = tmp_path / "logs" / "suite.log"
        transcript = setup_logging("INFO", log_file=str(target), base_dir=tmp_path / "elsewhere")
        assert transcript == target.resolve()
        assert target.parent.is_dir()

    def test_no_file_returns_none(self):
        assert setup_logging("INFO") is None


class TestConsole:
    def test_labels(self, capsys):
        console = Console()
        console.info("one")
        console.success("two")
        console.warn("three")
        console.error("four")
        captured = capsys.readouterr()
        assert "[INFO] one" in captured.out
        assert "[SUCCESS] two" in captured.out
        assert "[WARN] three" in captured.out
        assert "[ERROR] four" in captured.err

    def test_quiet_hides_info_only(self, capsys):
        console = Console(quiet=True)
        console.info("hidden")
        console.warn("shown")
        out = capsys.readouterr().out
        assert "hidden" not in out
        assert "shown" in out

    def test_mirrored_to_logging(self, caplog):
        with caplog.at_level(logging.INFO, logger="suite_setup"):
            Console().warn("disk almost full")
        assert "[WARN] disk almost full" in caplog.text
