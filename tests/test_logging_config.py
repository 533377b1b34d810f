import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from loguru import logger

from chess_timer.app_config import AppConfig, parse_app_config
from chess_timer.logging_config import setup_logging


class LoggingConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp_dir = Path(tempfile.mkdtemp(prefix="chess-timer-logs-"))

    def tearDown(self) -> None:
        logger.remove()
        shutil.rmtree(self._tmp_dir, ignore_errors=True)

    def _app(self, **config) -> AppConfig:
        config.setdefault("DbPath", str(self._tmp_dir / "data" / "timer.db"))
        with patch.dict(os.environ, {}, clear=True):
            return parse_app_config(config)

    def test_default_is_console_on_stderr(self) -> None:
        self.assertEqual(["console (stderr, INFO)"], setup_logging(self._app()))

    def test_file_consumer_defaults_to_log_next_to_database(self) -> None:
        app = self._app(LogLevel="DEBUG", LogConsumers=[{"type": "file"}])

        descriptions = setup_logging(app)

        expected = self._tmp_dir / "data" / "timer.log"
        self.assertEqual([f"file ({expected}, DEBUG)"], descriptions)
        logger.debug("session opened")
        logger.remove()
        self.assertIn("session opened", expected.read_text(encoding="utf-8"))

    def test_consumer_level_and_path_override_and_unknown_types_are_skipped(self) -> None:
        log_path = self._tmp_dir / "nested" / "timer.log"
        app = self._app(
            LogLevel="DEBUG",
            LogConsumers=[
                {"type": "file", "path": str(log_path), "level": "WARNING"},
                {"type": "syslog"},
            ],
        )

        descriptions = setup_logging(app)

        self.assertEqual([f"file ({log_path}, WARNING)"], descriptions)
        logger.info("dropped")
        logger.warning("kept")
        logger.remove()
        text = log_path.read_text(encoding="utf-8")
        self.assertIn("kept", text)
        self.assertIn("syslog", text)
        self.assertNotIn("dropped", text)


if __name__ == "__main__":
    unittest.main()
