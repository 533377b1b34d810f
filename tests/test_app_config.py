import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from chess_timer.app_config import DB_PATH_ENV_VAR, DEFAULT_DB_PATH, default_log_path, load_json_config, parse_app_config


class AppConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp_dir = Path(tempfile.mkdtemp(prefix="chess-timer-config-"))

    def tearDown(self) -> None:
        shutil.rmtree(self._tmp_dir, ignore_errors=True)

    def test_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            app = parse_app_config({})
        self.assertEqual(DEFAULT_DB_PATH, app.db_path)
        self.assertIsNone(app.default_scope)
        self.assertEqual(100, app.estimator_history_limit)
        self.assertEqual(30, app.recent_window_days)
        self.assertEqual("INFO", app.log_level)
        self.assertIsNone(app.log_consumers)
        self.assertEqual(default_log_path(DEFAULT_DB_PATH), app.log_path)
        self.assertTrue(app.log_path.endswith("chess-timer.log"))

    def test_values_from_config_file(self) -> None:
        db_path = str(self._tmp_dir / "timer.db")
        (self._tmp_dir / "config.json").write_text(
            json.dumps(
                {
                    "DbPath": db_path,
                    "DefaultScope": "project:demo",
                    "RecentWindowDays": 14,
                    "LogLevel": "DEBUG",
                    "LogConsumers": [{"type": "console"}],
                }
            ),
            encoding="utf-8",
        )

        with patch.dict(os.environ, {}, clear=True):
            app = parse_app_config(load_json_config(self._tmp_dir))

        self.assertEqual(db_path, app.db_path)
        self.assertEqual("project:demo", app.default_scope)
        self.assertEqual(14, app.recent_window_days)
        self.assertEqual("DEBUG", app.log_level)
        self.assertEqual([{"type": "console"}], app.log_consumers)

    def test_env_overrides_db_path(self) -> None:
        override = str(self._tmp_dir / "env.db")
        with patch.dict(os.environ, {DB_PATH_ENV_VAR: override}, clear=True):
            app = parse_app_config({"DbPath": "/somewhere/else.db"})
        self.assertEqual(override, app.db_path)
        self.assertEqual(str(self._tmp_dir / "env.log"), app.log_path)

    def test_explicit_log_path(self) -> None:
        log_path = str(self._tmp_dir / "logs" / "timer.log")
        with patch.dict(os.environ, {}, clear=True):
            app = parse_app_config({"DbPath": str(self._tmp_dir / "timer.db"), "LogPath": log_path})
        self.assertEqual(log_path, app.log_path)

    def test_missing_config_file_is_empty(self) -> None:
        self.assertEqual({}, load_json_config(self._tmp_dir))


if __name__ == "__main__":
    unittest.main()
