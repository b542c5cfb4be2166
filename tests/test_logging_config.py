# tests/test_logging_config.py

"""Tests for the per-run logging configuration."""

import logging
import sys
import unittest
from datetime import datetime

from bargainer.config.logging_config import (
    ProviderConsoleFilter,
    run_log_path,
    setup_logging,
)


class TestLoggingConfig(unittest.TestCase):
    """Verify logging setup behaviour."""

    def setUp(self) -> None:
        """Start each test with a bare bargainer logger."""
        logging.getLogger("bargainer").handlers.clear()

    def tearDown(self) -> None:
        root_logger = logging.getLogger("bargainer")
        for handler in root_logger.handlers:
            handler.close()
        root_logger.handlers.clear()

    def _console_handler(self) -> logging.Handler:
        return next(
            h
            for h in logging.getLogger("bargainer").handlers
            if not isinstance(h, logging.FileHandler)
        )

    def test_setup_creates_log_file(self) -> None:
        """setup_logging returns a path that exists on disk."""
        log_path = setup_logging()
        self.assertTrue(log_path.exists())

    def test_log_file_naming_convention(self) -> None:
        """Log file name matches run_YYYYMMDD_HHMMSS.log format."""
        log_path = setup_logging()
        self.assertRegex(log_path.name, r"^run_\d{8}_\d{6}\.log$")

    def test_file_handler_level_debug(self) -> None:
        """File handler records everything from DEBUG up."""
        setup_logging()
        file_handlers = [
            h
            for h in logging.getLogger("bargainer").handlers
            if isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(file_handlers[0].level, logging.DEBUG)

    def test_console_handler_on_stderr(self) -> None:
        """Console handler writes WARNING and up to stderr."""
        setup_logging()
        stream_handlers = [
            h
            for h in logging.getLogger("bargainer").handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(stream_handlers), 1)
        self.assertEqual(stream_handlers[0].level, logging.WARNING)
        self.assertIs(stream_handlers[0].stream, sys.stderr)

    def test_console_level_configurable(self) -> None:
        setup_logging(console_level=logging.INFO)
        levels = [
            h.level
            for h in logging.getLogger("bargainer").handlers
            if not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(levels, [logging.INFO])

    def test_repeated_calls_no_duplicate_handlers(self) -> None:
        """Calling setup_logging twice does not duplicate handlers."""
        setup_logging()
        root_logger = logging.getLogger("bargainer")
        count_before = len(root_logger.handlers)
        setup_logging()
        self.assertEqual(len(root_logger.handlers), count_before)

    def test_child_loggers_reach_file(self) -> None:
        """Provider loggers propagate into the run file."""
        log_path = setup_logging()
        logging.getLogger("bargainer.slickdeals").debug("provider debug line")
        for handler in logging.getLogger("bargainer").handlers:
            handler.flush()
        self.assertIn("provider debug line", log_path.read_text(encoding="utf-8"))

    def test_quiet_provider_still_written_to_file(self) -> None:
        """A provider held to ERROR on stderr keeps warnings in the file."""
        log_path = setup_logging(provider_levels={"dealnews": logging.ERROR})
        console = self._console_handler()
        record = logging.LogRecord(
            "bargainer.dealnews", logging.WARNING, __file__, 1,
            "layout changed", None, None,
        )
        self.assertFalse(console.filter(record))

        logging.getLogger("bargainer.dealnews").warning("layout changed")
        for handler in logging.getLogger("bargainer").handlers:
            handler.flush()
        self.assertIn("layout changed", log_path.read_text(encoding="utf-8"))

    def test_other_providers_unaffected(self) -> None:
        setup_logging(provider_levels={"dealnews": logging.ERROR})
        record = logging.LogRecord(
            "bargainer.slickdeals", logging.WARNING, __file__, 1,
            "timed out", None, None,
        )
        self.assertTrue(self._console_handler().filter(record))
        self.assertEqual(record.source, "slickdeals")

    def test_run_log_path_uses_start_time(self) -> None:
        path = run_log_path(datetime(2026, 2, 14, 15, 30, 45))
        self.assertEqual(path.name, "run_20260214_153045.log")

    def test_log_file_inside_logs_dir(self) -> None:
        """Log file is created inside the logs/ directory."""
        log_path = setup_logging()
        self.assertEqual(log_path.parent.name, "logs")


class TestProviderConsoleFilter(unittest.TestCase):
    """Per-provider console gating."""

    def _record(self, name: str, level: int) -> logging.LogRecord:
        return logging.LogRecord(name, level, __file__, 1, "msg", None, None)

    def test_child_of_provider_logger_gated(self) -> None:
        gate = ProviderConsoleFilter({"rapidapi": logging.ERROR})
        self.assertFalse(
            gate.filter(self._record("bargainer.rapidapi.http", logging.INFO))
        )
        self.assertTrue(
            gate.filter(self._record("bargainer.rapidapi", logging.ERROR))
        )

    def test_root_logger_source(self) -> None:
        record = self._record("bargainer", logging.INFO)
        self.assertTrue(ProviderConsoleFilter().filter(record))
        self.assertEqual(record.source, "bargainer")


if __name__ == "__main__":
    unittest.main()
