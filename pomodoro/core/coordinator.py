from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Protocol

from loguru import logger

from pomodoro.config import CHANNEL_ID, NOTIFICATION_DELAY_MS, NOTIFICATION_ICON
from pomodoro.core.clock import Clock
from pomodoro.core.history import HistoryStore, SessionRecord
from pomodoro.core.notifications import NotificationRequest, NotificationService
from pomodoro.core.timer import SessionKind, TimerController


class ImpactStyle(str, Enum):
    HEAVY = "heavy"


@dataclass(frozen=True)
class ConfirmPrompt:
    title: str
    message: str
    confirm_label: str
    decline_label: str


class HapticService(Protocol):
    def impact(self, style: ImpactStyle) -> None: ...


class ConfirmDialog(Protocol):
    def confirm(self, prompt: ConfirmPrompt) -> bool: ...


@dataclass(frozen=True)
class StepResult:
    name: str
    ok: bool
    error: str | None = None


@dataclass
class CompletionReport:
    kind: SessionKind
    record: SessionRecord
    confirmed: bool = False
    steps: list[StepResult] = field(default_factory=list)

    @property
    def next_kind(self) -> SessionKind:
        return self.kind.other

    def step(self, name: str) -> StepResult | None:
        for result in self.steps:
            if result.name == name:
                return result
        return None


def _minutes(kind: SessionKind) -> int:
    return kind.duration_sec // 60


def notification_copy(kind: SessionKind) -> tuple[str, str]:
    if kind is SessionKind.WORK:
        return "Work session finished", f"Time for a {_minutes(SessionKind.BREAK)} minute break."
    return "Break finished", f"Break is over, back to {_minutes(SessionKind.WORK)} minutes of work."


def prompt_for(kind: SessionKind) -> ConfirmPrompt:
    if kind is SessionKind.WORK:
        message = f"Start a {_minutes(SessionKind.BREAK)} minute break?"
    else:
        message = f"Start {_minutes(SessionKind.WORK)} minutes of work?"
    return ConfirmPrompt(
        title="Switch session?",
        message=message,
        confirm_label="Start",
        decline_label="Later",
    )


class CompletionCoordinator:
    """Runs the fixed end-of-session sequence: record, haptic, notify, confirm, branch.

    Steps 1-3 are best-effort and absorb their own failures. The prompt is the
    only step whose outcome changes what happens next; a failing prompt counts
    as declined.
    """

    def __init__(
        self,
        timer: TimerController,
        history: HistoryStore,
        clock: Clock,
        haptics: HapticService,
        notifications: NotificationService,
        dialog: ConfirmDialog,
        requires_channel: bool = False,
    ) -> None:
        self._timer = timer
        self._history = history
        self._clock = clock
        self._haptics = haptics
        self._notifications = notifications
        self._dialog = dialog
        self._requires_channel = requires_channel
        self._last_notification_id = 0

    def complete(self, kind: SessionKind, started_at_ms: int | None = None) -> CompletionReport:
        ended_at = self._clock.now_ms()
        if started_at_ms is None:
            started_at_ms = ended_at - kind.duration_sec * 1000
        record = SessionRecord.create(kind, started_at_ms, ended_at)
        report = CompletionReport(kind=kind, record=record)

        report.steps.append(self._record(record))
        report.steps.append(self._attempt("haptic", lambda: self._haptics.impact(ImpactStyle.HEAVY)))
        report.steps.append(self._attempt("notification", lambda: self._notifications.schedule(self._notification_for(kind))))

        confirmed, prompt_step = self._ask(kind)
        report.steps.append(prompt_step)
        report.confirmed = confirmed

        self._timer.reset(kind.other)
        if confirmed:
            self._timer.start()
        logger.info(
            f"{kind.value} session recorded ({record.duration_seconds}s); "
            f"next {kind.other.value} {'started' if confirmed else 'waiting'}"
        )
        return report

    def _record(self, record: SessionRecord) -> StepResult:
        try:
            persisted = self._history.append(record)
        except Exception as exc:
            logger.opt(exception=exc).warning(f"record step failed: {exc}")
            return StepResult("record", False, str(exc) or type(exc).__name__)
        if persisted:
            return StepResult("record", True)
        return StepResult("record", False, "history was not persisted")

    def _attempt(self, name: str, call: Callable[[], None]) -> StepResult:
        try:
            call()
        except Exception as exc:
            logger.opt(exception=exc).warning(f"{name} step failed: {exc}")
            return StepResult(name, False, str(exc) or type(exc).__name__)
        return StepResult(name, True)

    def _ask(self, kind: SessionKind) -> tuple[bool, StepResult]:
        try:
            confirmed = bool(self._dialog.confirm(prompt_for(kind)))
        except Exception as exc:
            logger.opt(exception=exc).warning(f"Confirmation prompt failed, treating as declined: {exc}")
            return False, StepResult("prompt", False, str(exc) or type(exc).__name__)
        return confirmed, StepResult("prompt", True)

    def _notification_for(self, kind: SessionKind) -> NotificationRequest:
        now = self._clock.now_ms()
        # time-derived, but strictly increasing within the process
        self._last_notification_id = max(now, self._last_notification_id + 1)
        title, body = notification_copy(kind)
        return NotificationRequest(
            id=self._last_notification_id,
            title=title,
            body=body,
            fire_at_ms=now + NOTIFICATION_DELAY_MS,
            channel_id=CHANNEL_ID if self._requires_channel else None,
            small_icon=NOTIFICATION_ICON,
        )
