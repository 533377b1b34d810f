from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from chess_timer.app_config import AppConfig
from chess_timer.logging_config import setup_logging
from chess_timer.scope import detect_scope
from chess_timer.timer import DurationEstimator, SessionRepository, TimerStore
from chess_timer.timer.clock import Clock, utc_now


@dataclass
class AppRuntime:
    store: TimerStore
    sessions: SessionRepository
    estimator: DurationEstimator
    default_scope: str | None
    log_descriptions: list[str]

    def resolve_scope(self, scope: str | None) -> str:
        if scope and scope.strip():
            return scope.strip()
        return self.default_scope or detect_scope()

    def close(self) -> None:
        self.store.close()


def bootstrap_runtime(app: AppConfig, *, clock: Clock = utc_now, configure_logging: bool = True) -> AppRuntime:
    log_descriptions = setup_logging(app) if configure_logging else []

    store = TimerStore(app.db_path)
    sessions = SessionRepository(store, clock=clock)
    estimator = DurationEstimator(
        sessions,
        clock=clock,
        history_limit=app.estimator_history_limit,
        recent_window_days=app.recent_window_days,
    )
    logger.info(f"Chess timer ready (db={app.db_path})")

    return AppRuntime(
        store=store,
        sessions=sessions,
        estimator=estimator,
        default_scope=app.default_scope,
        log_descriptions=log_descriptions,
    )
