from __future__ import annotations

"""Application entry point.

Loads configuration, sets up logging and storage, restores the session
history and starts the Qt event loop.
"""

import sys

from loguru import logger
from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QApplication

from pomodoro.config import load_config
from pomodoro.core.app_state import AppState
from pomodoro.core.clock import SystemClock
from pomodoro.core.errors import StorageError
from pomodoro.core.history import HistoryStore
from pomodoro.core.notifications import bootstrap_notifications
from pomodoro.data.storage import Storage
from pomodoro.logging_config import setup_logging
from pomodoro.ui.main_window import MainWindow
from pomodoro.ui.services import QtConfirmDialog, QtHapticService, QtNotificationService, QtTickSource
from pomodoro.ui.styles import apply_theme


def main() -> int:
    """Create the application dependencies and run the UI loop."""
    config = load_config()
    for description in setup_logging(config.log_level, config.log_file):
        logger.debug(f"logging to {description}")

    app = QApplication(sys.argv)
    apply_theme(app)

    storage = Storage(config.db_path)
    try:
        storage.init_db()
    except StorageError as exc:
        # history reads and writes keep failing softly from here on
        logger.error(f"Opening {config.db_path} failed: {exc}")

    history = HistoryStore(storage)
    history.load()

    clock = SystemClock()
    notifications = QtNotificationService(clock)
    bootstrap_notifications(notifications, config.requires_channel)
    dialog = QtConfirmDialog()

    app_state = AppState(
        clock=clock,
        ticks=QtTickSource(),
        history=history,
        haptics=QtHapticService(),
        notifications=notifications,
        dialog=dialog,
        requires_channel=config.requires_channel,
    )

    window = MainWindow(app_state=app_state)
    dialog.set_parent(window)

    def on_application_state(state: Qt.ApplicationState) -> None:
        if state == Qt.ApplicationState.ApplicationActive:
            app_state.refresh()

    app.applicationStateChanged.connect(on_application_state)

    window.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
