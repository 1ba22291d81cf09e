from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable

from loguru import logger

from pomodoro.config import BREAK_DURATION_SEC, WORK_DURATION_SEC
from pomodoro.core.clock import Clock, TickSource


class SessionKind(str, Enum):
    WORK = "work"
    BREAK = "break"

    @property
    def duration_sec(self) -> int:
        return WORK_DURATION_SEC if self is SessionKind.WORK else BREAK_DURATION_SEC

    @property
    def other(self) -> SessionKind:
        return SessionKind.BREAK if self is SessionKind.WORK else SessionKind.WORK


class TimerStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True)
class TimerState:
    kind: SessionKind
    status: TimerStatus
    remaining_seconds: int
    target_end_ms: int | None = None

    def __post_init__(self) -> None:
        if self.remaining_seconds < 0:
            raise ValueError("remaining_seconds must not be negative")
        if (self.target_end_ms is not None) != (self.status == TimerStatus.RUNNING):
            raise ValueError("target_end_ms must be set exactly when the timer is running")

    @classmethod
    def initial(cls, kind: SessionKind = SessionKind.WORK) -> TimerState:
        return cls(kind=kind, status=TimerStatus.IDLE, remaining_seconds=kind.duration_sec)


def seconds_until(target_end_ms: int, now_ms: int) -> int:
    return max(0, (target_end_ms - now_ms) // 1000)


def format_remaining(seconds: int) -> str:
    """Format *seconds* as ``MM:SS``."""
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


# -- transitions -------------------------------------------------------------
# Each returns the next state; the controller swaps it in as a single value.


def started(state: TimerState, now_ms: int) -> TimerState:
    if state.status == TimerStatus.RUNNING:
        return state
    # Idle at zero only happens between expiry and the follow-up reset
    if state.status == TimerStatus.IDLE and state.remaining_seconds <= 0:
        return state
    return replace(
        state,
        status=TimerStatus.RUNNING,
        target_end_ms=now_ms + state.remaining_seconds * 1000,
    )


def paused(state: TimerState, now_ms: int) -> TimerState:
    if state.status != TimerStatus.RUNNING or state.target_end_ms is None:
        return state
    return replace(
        state,
        status=TimerStatus.PAUSED,
        remaining_seconds=seconds_until(state.target_end_ms, now_ms),
        target_end_ms=None,
    )


def reset_to(kind: SessionKind) -> TimerState:
    return TimerState.initial(kind)


def ticked(state: TimerState, now_ms: int) -> TimerState:
    if state.status != TimerStatus.RUNNING or state.target_end_ms is None:
        return state
    sec = min(state.remaining_seconds, seconds_until(state.target_end_ms, now_ms))
    if sec <= 0:
        return TimerState(kind=state.kind, status=TimerStatus.IDLE, remaining_seconds=0)
    return replace(state, remaining_seconds=sec)


ExpiryHandler = Callable[[SessionKind, int | None], None]
ChangeHandler = Callable[[TimerState], None]


class TimerController:
    """Deadline-based session timer.

    Remaining time is recomputed from an absolute deadline on every tick, so
    suspended processes and late ticks catch up on the next callback instead
    of accumulating drift.
    """

    def __init__(self, clock: Clock, ticks: TickSource, kind: SessionKind = SessionKind.WORK) -> None:
        self._clock = clock
        self._ticks = ticks
        self._state = TimerState.initial(kind)
        self._started_at_ms: int | None = None
        self._completing = False
        self._on_expired: ExpiryHandler | None = None
        self._on_change: ChangeHandler | None = None

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def started_at_ms(self) -> int | None:
        return self._started_at_ms

    @property
    def is_completing(self) -> bool:
        return self._completing

    def set_on_expired(self, fn: ExpiryHandler) -> None:
        self._on_expired = fn

    def set_on_change(self, fn: ChangeHandler) -> None:
        self._on_change = fn

    def start(self) -> None:
        previous = self._state
        now = self._clock.now_ms()
        state = started(previous, now)
        if state is previous:
            return
        if previous.status == TimerStatus.IDLE or self._started_at_ms is None:
            self._started_at_ms = now
        self._set_state(state)
        self._ticks.start(self.tick)
        # catch up immediately instead of waiting for the first interval
        self.tick()

    def pause(self) -> None:
        state = paused(self._state, self._clock.now_ms())
        if state is self._state:
            return
        self._ticks.stop()
        self._set_state(state)

    def reset(self, kind: SessionKind | None = None) -> None:
        self._ticks.stop()
        self._started_at_ms = None
        self._set_state(reset_to(kind if kind is not None else self._state.kind))

    def switch_type(self) -> None:
        self.reset(self._state.kind.other)

    def tick(self) -> None:
        if self._completing:
            return
        previous = self._state
        state = ticked(previous, self._clock.now_ms())
        if state is previous:
            return
        if state.status == TimerStatus.RUNNING:
            self._set_state(state)
            return

        self._ticks.stop()
        started_at = self._started_at_ms
        self._started_at_ms = None
        self._completing = True
        try:
            self._set_state(state)
            logger.info(f"{previous.kind.value} session expired")
            if self._on_expired is not None:
                self._on_expired(previous.kind, started_at)
        finally:
            self._completing = False

    def _set_state(self, state: TimerState) -> None:
        if state.status != self._state.status or state.kind != self._state.kind:
            logger.debug(
                f"timer {self._state.kind.value}/{self._state.status.value} -> "
                f"{state.kind.value}/{state.status.value} ({state.remaining_seconds}s)"
            )
        self._state = state
        if self._on_change is not None:
            self._on_change(state)
