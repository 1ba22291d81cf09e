import json

import pytest

from pomodoro.config import HISTORY_KEY
from pomodoro.core.history import HistoryStore, SessionRecord
from pomodoro.core.timer import SessionKind


def _record(kind: SessionKind, started_at: int) -> SessionRecord:
    return SessionRecord.create(kind, started_at, started_at + kind.duration_sec * 1000)


def test_load_from_empty_storage_yields_empty_log(storage) -> None:
    store = HistoryStore(storage)
    assert store.load() == ()
    assert len(store) == 0


def test_record_uses_nominal_duration_and_unique_ids() -> None:
    first = SessionRecord.create(SessionKind.WORK, 0, 10_000)
    second = SessionRecord.create(SessionKind.WORK, 0, 10_000)

    assert first.duration_seconds == 1500
    assert first.id != second.id


def test_append_is_newest_first_and_persists_full_log(storage, history) -> None:
    older = _record(SessionKind.WORK, 1_000)
    newer = _record(SessionKind.BREAK, 2_000_000)

    assert history.append(older) is True
    assert history.append(newer) is True

    assert history.records == (newer, older)
    persisted = json.loads(storage.data[HISTORY_KEY])
    assert [item["id"] for item in persisted] == [newer.id, older.id]
    assert persisted[0] == {
        "id": newer.id,
        "kind": "break",
        "startedAt": 2_000_000,
        "endedAt": 2_300_000,
        "durationSeconds": 300,
    }


def test_reload_restores_the_same_records(storage, history) -> None:
    records = [_record(SessionKind.WORK, i * 10_000_000) for i in range(3)]
    for record in records:
        history.append(record)

    again = HistoryStore(storage)
    again.load()

    assert again.records == tuple(reversed(records))


def test_clear_empties_memory_and_storage(storage, history) -> None:
    history.append(_record(SessionKind.WORK, 0))
    history.clear()

    assert history.records == ()
    again = HistoryStore(storage)
    assert again.load() == ()


def test_read_failure_yields_empty_log(storage) -> None:
    storage.data[HISTORY_KEY] = json.dumps([_record(SessionKind.WORK, 0).to_dict()])
    storage.fail_reads = True

    store = HistoryStore(storage)

    assert store.load() == ()


def test_corrupt_payloads_yield_empty_log(storage) -> None:
    store = HistoryStore(storage)
    for payload in ('"not a list"', '[{"id": "x"}]', '[{"id": "x", "kind": "nap", "startedAt": 0, "endedAt": 0, "durationSeconds": 0}]'):
        storage.data[HISTORY_KEY] = payload
        assert store.load() == ()


def test_write_failure_keeps_in_memory_record_and_later_write_persists_all(storage, history) -> None:
    first = _record(SessionKind.WORK, 0)
    second = _record(SessionKind.BREAK, 5_000_000)

    storage.fail_writes = True
    assert history.append(first) is False
    assert history.records == (first,)
    assert HISTORY_KEY not in storage.data

    storage.fail_writes = False
    assert history.append(second) is True
    persisted = json.loads(storage.data[HISTORY_KEY])
    assert [item["id"] for item in persisted] == [second.id, first.id]


def test_change_handler_called_on_every_mutation(history) -> None:
    calls = []
    history.set_on_change(lambda: calls.append(len(history)))

    history.append(_record(SessionKind.WORK, 0))
    history.clear()

    assert calls == [1, 0]


def test_failing_change_handler_does_not_keep_record_off_disk(storage, history) -> None:
    def boom() -> None:
        raise RuntimeError("listener failed")

    history.set_on_change(boom)
    record = _record(SessionKind.WORK, 0)

    with pytest.raises(RuntimeError):
        history.append(record)

    assert [item["id"] for item in json.loads(storage.data[HISTORY_KEY])] == [record.id]
