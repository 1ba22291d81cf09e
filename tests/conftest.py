from __future__ import annotations

import json
from typing import Any, Callable

import pytest

from pomodoro.core.coordinator import CompletionCoordinator, ConfirmPrompt, ImpactStyle
from pomodoro.core.errors import HapticError, NotificationError, StorageError
from pomodoro.core.history import HistoryStore
from pomodoro.core.notifications import NotificationRequest
from pomodoro.core.timer import TimerController


START_MS = 1_700_000_000_000


class FakeClock:
    def __init__(self, now_ms: int = START_MS) -> None:
        self.now = now_ms

    def now_ms(self) -> int:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += int(seconds * 1000)


class FakeTickSource:
    def __init__(self) -> None:
        self.callback: Callable[[], None] | None = None
        self.active = False
        self.start_calls = 0

    @property
    def is_active(self) -> bool:
        return self.active

    def start(self, callback: Callable[[], None]) -> None:
        self.callback = callback
        if not self.active:
            self.start_calls += 1
        self.active = True

    def stop(self) -> None:
        self.active = False

    def fire(self) -> None:
        if self.active and self.callback is not None:
            self.callback()


class MemoryStorage:
    """Key/value storage keeping JSON text, with switchable failures."""

    def __init__(self, events: list[str] | None = None) -> None:
        self.data: dict[str, str] = {}
        self.fail_reads = False
        self.fail_writes = False
        self.writes = 0
        self._events = events if events is not None else []

    def get_setting(self, key: str, default: Any = None) -> Any:
        if self.fail_reads:
            raise StorageError("disk unreadable")
        if key not in self.data:
            return default
        return json.loads(self.data[key])

    def set_setting(self, key: str, value: Any) -> None:
        self._events.append("record")
        if self.fail_writes:
            raise StorageError("disk full")
        self.writes += 1
        self.data[key] = json.dumps(value)


class FakeHaptics:
    def __init__(self, events: list[str] | None = None) -> None:
        self.calls: list[ImpactStyle] = []
        self.fail = False
        self._events = events if events is not None else []

    def impact(self, style: ImpactStyle) -> None:
        self._events.append("haptic")
        if self.fail:
            raise HapticError("no vibrator")
        self.calls.append(style)


class FakeNotifications:
    def __init__(self, events: list[str] | None = None) -> None:
        self.requests: list[NotificationRequest] = []
        self.fail = False
        self._events = events if events is not None else []

    def schedule(self, request: NotificationRequest) -> None:
        self._events.append("notification")
        if self.fail:
            raise NotificationError("permission denied")
        self.requests.append(request)


class FakeDialog:
    def __init__(self, events: list[str] | None = None) -> None:
        self.answer: bool | Exception = True
        self.prompts: list[ConfirmPrompt] = []
        self.on_confirm: Callable[[], None] | None = None
        self._events = events if events is not None else []

    def confirm(self, prompt: ConfirmPrompt) -> bool:
        self._events.append("prompt")
        self.prompts.append(prompt)
        if self.on_confirm is not None:
            self.on_confirm()
        if isinstance(self.answer, Exception):
            raise self.answer
        return self.answer


@pytest.fixture
def events() -> list[str]:
    return []


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ticks() -> FakeTickSource:
    return FakeTickSource()


@pytest.fixture
def storage(events) -> MemoryStorage:
    return MemoryStorage(events)


@pytest.fixture
def history(storage) -> HistoryStore:
    store = HistoryStore(storage)
    store.load()
    return store


@pytest.fixture
def haptics(events) -> FakeHaptics:
    return FakeHaptics(events)


@pytest.fixture
def notifications(events) -> FakeNotifications:
    return FakeNotifications(events)


@pytest.fixture
def dialog(events) -> FakeDialog:
    return FakeDialog(events)


@pytest.fixture
def timer(clock, ticks) -> TimerController:
    return TimerController(clock, ticks)


@pytest.fixture
def coordinator(timer, history, clock, haptics, notifications, dialog) -> CompletionCoordinator:
    coordinator = CompletionCoordinator(
        timer=timer,
        history=history,
        clock=clock,
        haptics=haptics,
        notifications=notifications,
        dialog=dialog,
    )
    timer.set_on_expired(coordinator.complete)
    return coordinator
