from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from loguru import logger

from pomodoro.config import HISTORY_KEY
from pomodoro.core.timer import SessionKind


class KeyValueStorage(Protocol):
    def get_setting(self, key: str, default: Any = None) -> Any: ...

    def set_setting(self, key: str, value: Any) -> None: ...


@dataclass(frozen=True)
class SessionRecord:
    id: str
    kind: SessionKind
    started_at_ms: int
    ended_at_ms: int
    duration_seconds: int

    @classmethod
    def create(cls, kind: SessionKind, started_at_ms: int, ended_at_ms: int) -> SessionRecord:
        return cls(
            id=str(uuid.uuid4()),
            kind=kind,
            started_at_ms=started_at_ms,
            ended_at_ms=ended_at_ms,
            duration_seconds=kind.duration_sec,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "startedAt": self.started_at_ms,
            "endedAt": self.ended_at_ms,
            "durationSeconds": self.duration_seconds,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> SessionRecord:
        return cls(
            id=str(raw["id"]),
            kind=SessionKind(raw["kind"]),
            started_at_ms=int(raw["startedAt"]),
            ended_at_ms=int(raw["endedAt"]),
            duration_seconds=int(raw["durationSeconds"]),
        )


class HistoryStore:
    """Newest-first log of completed sessions, persisted in full on every mutation.

    Persistence failures are logged and never roll back the in-memory log, so
    the running process stays consistent even when the disk does not.
    """

    def __init__(self, storage: KeyValueStorage, key: str = HISTORY_KEY) -> None:
        self._storage = storage
        self._key = key
        self._records: list[SessionRecord] = []
        self._on_change: Callable[[], None] | None = None

    @property
    def records(self) -> tuple[SessionRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def set_on_change(self, fn: Callable[[], None]) -> None:
        self._on_change = fn

    def load(self) -> tuple[SessionRecord, ...]:
        try:
            raw = self._storage.get_setting(self._key, [])
            if not isinstance(raw, list):
                raise ValueError(f"expected a list, got {type(raw).__name__}")
            records = [SessionRecord.from_dict(item) for item in raw]
        except Exception as exc:
            logger.opt(exception=exc).warning(f"Loading session history failed: {exc}")
            records = []
        self._records = records
        logger.debug(f"Loaded {len(records)} session(s) from history")
        self._notify()
        return self.records

    def append(self, record: SessionRecord) -> bool:
        self._records.insert(0, record)
        persisted = self._persist()
        self._notify()
        return persisted

    def clear(self) -> bool:
        self._records = []
        persisted = self._persist()
        self._notify()
        return persisted

    def _persist(self) -> bool:
        try:
            self._storage.set_setting(self._key, [record.to_dict() for record in self._records])
        except Exception as exc:
            logger.opt(exception=exc).warning(f"Saving session history failed: {exc}")
            return False
        return True

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()
