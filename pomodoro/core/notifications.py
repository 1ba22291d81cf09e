from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from loguru import logger

from pomodoro.config import CHANNEL_ID


@dataclass(frozen=True)
class NotificationRequest:
    id: int
    title: str
    body: str
    fire_at_ms: int
    channel_id: str | None = None
    small_icon: str | None = None


@dataclass(frozen=True)
class NotificationChannel:
    id: str
    name: str
    description: str
    importance: int
    sound: str | None
    visibility: int
    lights: bool
    vibration: bool


POMODORO_CHANNEL = NotificationChannel(
    id=CHANNEL_ID,
    name="Pomodoro",
    description="Alerts for work/break sessions",
    importance=5,
    sound="pomodoro_alert",
    visibility=1,
    lights=True,
    vibration=True,
)


class NotificationService(Protocol):
    def schedule(self, request: NotificationRequest) -> None: ...


class NotificationSetup(Protocol):
    def request_permission(self) -> bool: ...

    def register_channel(self, channel: NotificationChannel) -> None: ...


def bootstrap_notifications(service: NotificationSetup, requires_channel: bool) -> bool:
    """One-time setup at process start. Never raises; returns whether notifications are usable."""
    try:
        granted = bool(service.request_permission())
        if not granted:
            logger.warning("Notification permission was not granted")
        if requires_channel:
            service.register_channel(POMODORO_CHANNEL)
    except Exception as exc:
        logger.opt(exception=exc).warning(f"Init notifications failed: {exc}")
        return False
    return granted
