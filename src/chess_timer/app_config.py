from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DB_PATH = str(Path.home() / ".config" / "brain-jar" / "chess-timer.db")
DB_PATH_ENV_VAR = "CHESS_TIMER_DB_PATH"


@dataclass
class AppConfig:
    db_path: str
    default_scope: str | None
    estimator_history_limit: int
    recent_window_days: int
    log_level: str
    log_consumers: list | None
    log_path: str


def load_json_config(directory: Path | None = None) -> dict:
    config_path = (directory or Path.cwd()) / "config.json"
    if config_path.exists():
        with open(config_path) as f:
            return json.load(f)
    return {}


def _absolute(raw: str) -> str:
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = Path.cwd() / path
    return str(path)


def _resolve_db_path(config: dict) -> str:
    override = os.environ.get(DB_PATH_ENV_VAR, "").strip()
    return _absolute(override or str(config.get("DbPath", "")).strip() or DEFAULT_DB_PATH)


def default_log_path(db_path: str) -> str:
    return str(Path(db_path).with_suffix(".log"))


def parse_app_config(config: dict) -> AppConfig:
    db_path = _resolve_db_path(config)
    log_path = str(config.get("LogPath", "")).strip()
    return AppConfig(
        db_path=db_path,
        default_scope=str(config.get("DefaultScope", "")).strip() or None,
        estimator_history_limit=int(config.get("EstimatorHistoryLimit", 100)),
        recent_window_days=int(config.get("RecentWindowDays", 30)),
        log_level=config.get("LogLevel", "INFO"),
        log_consumers=config.get("LogConsumers"),
        log_path=_absolute(log_path) if log_path else default_log_path(db_path),
    )
