"""
Tests for observability — logging setup and level resolution.
"""

import logging
from pathlib import Path

import pytest

from asset_recode.core.observability.logging_config import (
    _parse_level,
    resolve_level,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:
    def test_flags_win(self):
        assert resolve_level(True, True, True, "ERROR") == "DEBUG"
        assert resolve_level(False, True, True, "ERROR") == "INFO"
        assert resolve_level(False, False, True, "DEBUG") == "ERROR"

    def test_env_fallback(self):
        assert resolve_level(False, False, False, "INFO") == "INFO"

    def test_default(self):
        assert resolve_level(False, False, False, None) == "WARNING"


class TestParseLevel:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("debug", logging.DEBUG),
            ("INFO", logging.INFO),
            ("Error", logging.ERROR),
            (None, logging.WARNING),
            ("", logging.WARNING),
            ("chatty", logging.WARNING),
            ("Formatter", logging.WARNING),
        ],
    )
    def test_parse(self, name, expected):
        assert _parse_level(name) == expected


class TestSetupLogging:
    def test_console_only(self, restore_root_logger):
        setup_logging("INFO")
        root = restore_root_logger
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)

    def test_replaces_existing_handlers(self, restore_root_logger):
        setup_logging("WARNING")
        setup_logging("WARNING")
        assert len(restore_root_logger.handlers) == 1

    def test_log_file(self, tmp_path: Path, restore_root_logger):
        log_file = tmp_path / "recode.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")

        root = restore_root_logger
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2

        logging.getLogger("asset_recode.test").debug("encoding a.jpg")
        for h in root.handlers:
            h.flush()

        text = log_file.read_text()
        assert "encoding a.jpg" in text
        assert "asset_recode.test" in text

    def test_file_level_defaults_to_console_level(self, tmp_path: Path, restore_root_logger):
        setup_logging("ERROR", log_file=str(tmp_path / "recode.log"))
        assert restore_root_logger.level == logging.ERROR
