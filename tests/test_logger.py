"""
Test suite for the logger module.

This module contains unit tests for the logger module to ensure
it correctly creates and configures loggers.
"""

import logging
import os
import sys
import tempfile
import unittest
from unittest.mock import MagicMock, patch

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from bank_report.logger import (  # pylint: disable=wrong-import-position,import-error
    LOG_FORMAT,
    create_logger,
    get_logger,
    level_from_name,
)


class TestLogger(unittest.TestCase):
    """Test suite for the logger module."""

    def setUp(self):
        """Patch os.makedirs to avoid creating real directories."""
        self.makedirs_patcher = patch("bank_report.logger.os.makedirs")
        self.mock_makedirs = self.makedirs_patcher.start()

    def tearDown(self):
        """Stop patches and detach handlers from the test loggers."""
        self.makedirs_patcher.stop()
        for name in ("test_logger", "console_logger"):
            logging.getLogger(name).handlers.clear()

    @patch("logging.FileHandler")
    def test_logger_creation(self, mock_file_handler):
        """A logger is created with the right name, level and a single file handler."""
        mock_file_handler.return_value = MagicMock()

        created_logger = create_logger("test_logger")

        self.assertEqual(created_logger.name, "test_logger")
        self.assertEqual(created_logger.level, logging.INFO)
        self.mock_makedirs.assert_called_once_with("logs", exist_ok=True)
        mock_file_handler.assert_called_once()
        self.assertEqual(len(created_logger.handlers), 1)
        self.assertFalse(created_logger.propagate)

    @patch("logging.FileHandler")
    def test_logger_custom_level(self, mock_file_handler):
        """The logger and its handler use a custom level."""
        mock_file_handler.return_value = MagicMock()

        created_logger = create_logger("test_logger", level=logging.DEBUG)

        self.assertEqual(created_logger.level, logging.DEBUG)
        mock_file_handler.return_value.setLevel.assert_called_once_with(logging.DEBUG)

    @patch("bank_report.logger.datetime")
    @patch("logging.FileHandler")
    def test_timestamp_in_filename(self, mock_file_handler, mock_datetime):
        """The timestamp is included in the log filename."""
        mock_datetime.now.return_value.strftime.return_value = "20240101_120000"
        mock_file_handler.return_value = MagicMock()

        create_logger("test_logger")

        mock_file_handler.assert_called_once_with(
            os.path.join("logs", "test_logger_20240101_120000.log"), encoding="utf-8"
        )

    def test_handler_formatter(self):
        """The file handler uses the standard format string."""
        with patch("logging.FileHandler", autospec=True) as mock_file_handler:
            mock_handler = MagicMock()
            mock_file_handler.return_value = mock_handler

            create_logger("test_logger")

            formatter = mock_handler.setFormatter.call_args[0][0]
            self.assertEqual(
                formatter._fmt, LOG_FORMAT  # pylint: disable=protected-access
            )

    @patch("logging.FileHandler")
    def test_console_handler_added(self, mock_file_handler):
        """Console logging adds a stderr handler at WARNING or above."""
        mock_file_handler.return_value = MagicMock()

        created_logger = create_logger("console_logger", console=True)

        self.assertEqual(len(created_logger.handlers), 2)
        stream_handler = created_logger.handlers[1]
        self.assertIsInstance(stream_handler, logging.StreamHandler)
        self.assertEqual(stream_handler.level, logging.WARNING)

    def test_existing_handlers_cleared(self):
        """Existing handlers are cleared when creating a logger."""
        existing_logger = logging.getLogger("test_logger")
        handler = logging.NullHandler()
        existing_logger.addHandler(handler)

        with patch("logging.FileHandler", autospec=True):
            updated_logger = create_logger("test_logger")

            self.assertIs(updated_logger, existing_logger)
            self.assertNotIn(handler, updated_logger.handlers)
            self.assertEqual(len(updated_logger.handlers), 1)


class TestRealLogging(unittest.TestCase):
    """Writes to a real log file."""

    def test_real_logging(self):
        """Logs are actually written to a file."""
        with tempfile.TemporaryDirectory() as temp_logs_dir:
            created_logger = create_logger("file_logger", log_dir=temp_logs_dir)
            created_logger.info("Parsed statement.csv")
            created_logger.warning("File broken.csv: No data rows found")

            log_files = [
                f for f in os.listdir(temp_logs_dir) if f.startswith("file_logger_")
            ]
            self.assertEqual(len(log_files), 1)

            with open(
                os.path.join(temp_logs_dir, log_files[0]), "r", encoding="utf-8"
            ) as log_file:
                log_content = log_file.read()

            for handler in list(created_logger.handlers):
                handler.close()
                created_logger.removeHandler(handler)

            self.assertIn("Parsed statement.csv", log_content)
            self.assertIn("No data rows found", log_content)


def test_get_logger_sets_level():
    """get_logger returns the named logger and applies a level when given."""
    logger = get_logger("bank_report.test", logging.ERROR)
    assert logger.name == "bank_report.test"
    assert logger.level == logging.ERROR


def test_level_from_name():
    """Level names are case-insensitive and unknown names fall back."""
    assert level_from_name("debug") == logging.DEBUG
    assert level_from_name("WARNING") == logging.WARNING
    assert level_from_name("chatty") == logging.INFO


if __name__ == "__main__":
    unittest.main()
