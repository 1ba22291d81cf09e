from __future__ import annotations

"""Fixed session constants and environment-driven runtime configuration."""

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from platformdirs import user_data_dir


APP_NAME = "pomodoro"

WORK_DURATION_SEC = 25 * 60
BREAK_DURATION_SEC = 5 * 60
TICK_INTERVAL_MS = 500
NOTIFICATION_DELAY_MS = 500

HISTORY_KEY = "pomodoro_sessions_v1"

CHANNEL_ID = "pomodoro_channel"
CHANNEL_PLATFORMS = frozenset({"android"})
NOTIFICATION_ICON = "ic_stat_icon"


@dataclass(frozen=True)
class AppConfig:
    db_path: Path
    log_level: str
    log_file: Path | None
    platform: str

    @property
    def requires_channel(self) -> bool:
        return self.platform in CHANNEL_PLATFORMS


def default_db_path() -> Path:
    return Path(user_data_dir(APP_NAME, appauthor=False)) / "pomodoro.db"


def load_config(env: Mapping[str, str] | None = None) -> AppConfig:
    """Build the runtime configuration from ``POMODORO_*`` environment variables."""
    if env is None:
        env = os.environ

    raw_db = env.get("POMODORO_DB_PATH", "").strip()
    raw_log_file = env.get("POMODORO_LOG_FILE", "").strip()
    platform = env.get("POMODORO_PLATFORM", "").strip().lower() or sys.platform

    return AppConfig(
        db_path=Path(raw_db).expanduser() if raw_db else default_db_path(),
        log_level=env.get("POMODORO_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        log_file=Path(raw_log_file).expanduser() if raw_log_file else None,
        platform=platform,
    )
