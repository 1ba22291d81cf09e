from __future__ import annotations

from typing import Callable

from loguru import logger
from PyQt6.QtCore import QObject, QTimer
from PyQt6.QtWidgets import QApplication, QMessageBox, QStyle, QSystemTrayIcon, QWidget

from pomodoro.config import TICK_INTERVAL_MS
from pomodoro.core.clock import Clock
from pomodoro.core.coordinator import ConfirmPrompt, ImpactStyle
from pomodoro.core.errors import HapticError, NotificationError, PromptError
from pomodoro.core.notifications import NotificationChannel, NotificationRequest


class QtTickSource(QObject):
    """Fixed-interval tick driver backed by a ``QTimer``."""

    def __init__(self, interval_ms: int = TICK_INTERVAL_MS, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._callback: Callable[[], None] | None = None
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_timeout)

    @property
    def is_active(self) -> bool:
        return self._timer.isActive()

    def start(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        if not self._timer.isActive():
            self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def _on_timeout(self) -> None:
        if self._callback is not None:
            self._callback()


class QtHapticService:
    """Desktop stand-in for an impact pulse: the platform alert sound."""

    def impact(self, style: ImpactStyle) -> None:
        if QApplication.instance() is None:
            raise HapticError("no QApplication is running")
        logger.debug(f"haptic impact ({style.value})")
        QApplication.beep()


class QtNotificationService(QObject):
    """Shows scheduled notifications as system tray balloon messages."""

    def __init__(self, clock: Clock, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._clock = clock
        self._tray: QSystemTrayIcon | None = None
        self._channels: dict[str, NotificationChannel] = {}

    def request_permission(self) -> bool:
        return QSystemTrayIcon.isSystemTrayAvailable()

    def register_channel(self, channel: NotificationChannel) -> None:
        self._channels[channel.id] = channel
        logger.debug(f"registered notification channel {channel.id!r}")

    def schedule(self, request: NotificationRequest) -> None:
        if request.channel_id is not None and request.channel_id not in self._channels:
            raise NotificationError(f"channel {request.channel_id!r} is not registered")
        tray = self._ensure_tray()
        delay_ms = max(0, request.fire_at_ms - self._clock.now_ms())
        QTimer.singleShot(
            delay_ms,
            lambda: tray.showMessage(request.title, request.body, QSystemTrayIcon.MessageIcon.Information),
        )

    def _ensure_tray(self) -> QSystemTrayIcon:
        if self._tray is not None:
            return self._tray
        app = QApplication.instance()
        if app is None or not QSystemTrayIcon.isSystemTrayAvailable():
            raise NotificationError("system tray is not available")
        icon = QApplication.style().standardIcon(QStyle.StandardPixmap.SP_MessageBoxInformation)
        self._tray = QSystemTrayIcon(icon, self)
        self._tray.show()
        return self._tray


class QtConfirmDialog:
    """Modal question box; blocks the caller until the user answers."""

    def __init__(self, parent: QWidget | None = None) -> None:
        self._parent = parent

    def set_parent(self, parent: QWidget | None) -> None:
        self._parent = parent

    def confirm(self, prompt: ConfirmPrompt) -> bool:
        if QApplication.instance() is None:
            raise PromptError("no QApplication is running")
        box = QMessageBox(self._parent)
        box.setIcon(QMessageBox.Icon.Question)
        box.setWindowTitle(prompt.title)
        box.setText(prompt.message)
        accept = box.addButton(prompt.confirm_label, QMessageBox.ButtonRole.AcceptRole)
        box.addButton(prompt.decline_label, QMessageBox.ButtonRole.RejectRole)
        box.setDefaultButton(accept)
        box.exec()
        return box.clickedButton() == accept
