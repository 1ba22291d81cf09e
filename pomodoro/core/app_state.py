from __future__ import annotations

from datetime import datetime

from PyQt6.QtCore import QObject, pyqtSignal

from pomodoro.core.clock import Clock, TickSource
from pomodoro.core.coordinator import CompletionCoordinator, ConfirmDialog, HapticService
from pomodoro.core.history import HistoryStore, SessionRecord
from pomodoro.core.notifications import NotificationService
from pomodoro.core.timer import SessionKind, TimerController, TimerState, TimerStatus, format_remaining


KIND_LABELS = {
    SessionKind.WORK: "Work",
    SessionKind.BREAK: "Break",
}


def describe_record(record: SessionRecord) -> str:
    started = datetime.fromtimestamp(record.started_at_ms / 1000).strftime("%H:%M:%S")
    ended = datetime.fromtimestamp(record.ended_at_ms / 1000).strftime("%H:%M:%S")
    minutes = round(record.duration_seconds / 60)
    return f"{KIND_LABELS[record.kind]:<5} {started} - {ended} ({minutes}m)"


class AppState(QObject):
    """What the UI sees: the current session, its history, and the user actions."""

    state_changed = pyqtSignal()
    history_changed = pyqtSignal()
    session_completed = pyqtSignal(object)

    def __init__(
        self,
        clock: Clock,
        ticks: TickSource,
        history: HistoryStore,
        haptics: HapticService,
        notifications: NotificationService,
        dialog: ConfirmDialog,
        requires_channel: bool = False,
    ) -> None:
        super().__init__()
        self._history = history
        self._timer = TimerController(clock, ticks)
        self._coordinator = CompletionCoordinator(
            timer=self._timer,
            history=history,
            clock=clock,
            haptics=haptics,
            notifications=notifications,
            dialog=dialog,
            requires_channel=requires_channel,
        )
        self._timer.set_on_change(self._on_timer_changed)
        self._timer.set_on_expired(self._on_expired)
        self._history.set_on_change(self.history_changed.emit)

    @property
    def timer_state(self) -> TimerState:
        return self._timer.state

    @property
    def kind(self) -> SessionKind:
        return self._timer.state.kind

    @property
    def status(self) -> TimerStatus:
        return self._timer.state.status

    @property
    def is_running(self) -> bool:
        return self._timer.state.status == TimerStatus.RUNNING

    @property
    def remaining_seconds(self) -> int:
        return self._timer.state.remaining_seconds

    @property
    def formatted(self) -> str:
        return format_remaining(self._timer.state.remaining_seconds)

    @property
    def history(self) -> tuple[SessionRecord, ...]:
        return self._history.records

    def start(self) -> None:
        self._timer.start()

    def pause(self) -> None:
        self._timer.pause()

    def reset(self) -> None:
        self._timer.reset()

    def switch_type(self) -> None:
        self._timer.switch_type()

    def clear_history(self) -> None:
        self._history.clear()

    def refresh(self) -> None:
        """Recompute remaining time now, e.g. after the app returns to the foreground."""
        self._timer.tick()

    def _on_timer_changed(self, _state: TimerState) -> None:
        self.state_changed.emit()

    def _on_expired(self, kind: SessionKind, started_at_ms: int | None) -> None:
        report = self._coordinator.complete(kind, started_at_ms)
        self.session_completed.emit(report)
