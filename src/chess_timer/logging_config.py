"""
Loguru sinks for the chess timer.

Stdout carries the MCP stdio transport, so sinks write to stderr or to a file.
A file sink without an explicit path logs to ``AppConfig.log_path``, which sits
next to the timer database unless configured otherwise.
"""

import sys
from pathlib import Path
from typing import Any, Callable

from loguru import logger

from chess_timer.app_config import AppConfig

_CONSOLE_FORMAT = "<level>{level:<8}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} - {message}"

FILE_ROTATION = "5 MB"
FILE_RETENTION = 3

DEFAULT_CONSUMERS: list[dict[str, Any]] = [{"type": "console"}]


def _add_console(options: dict[str, Any], level: str, app: AppConfig) -> str:
    logger.add(sys.stderr, level=level, format=_CONSOLE_FORMAT)
    return f"console (stderr, {level})"


def _add_file(options: dict[str, Any], level: str, app: AppConfig) -> str:
    path = Path(options.get("path") or app.log_path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        str(path),
        level=level,
        format=_FILE_FORMAT,
        rotation=options.get("rotation", FILE_ROTATION),
        retention=options.get("retention", FILE_RETENTION),
    )
    return f"file ({path}, {level})"


_SINKS: dict[str, Callable[[dict[str, Any], str, AppConfig], str]] = {
    "console": _add_console,
    "file": _add_file,
}


def setup_logging(app: AppConfig) -> list[str]:
    """Swap loguru's default sink for the configured ones. Returns one description per sink added."""
    logger.remove()

    descriptions: list[str] = []
    for options in app.log_consumers or DEFAULT_CONSUMERS:
        kind = options.get("type", "")
        add_sink = _SINKS.get(kind)
        if add_sink is None:
            logger.warning(f"Skipping unknown log consumer type: {kind!r}")
            continue
        descriptions.append(add_sink(options, options.get("level", app.log_level), app))

    return descriptions
