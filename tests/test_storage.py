import pytest

from pomodoro.core.errors import StorageError
from pomodoro.core.history import HistoryStore, SessionRecord
from pomodoro.core.timer import SessionKind
from pomodoro.data.storage import Storage


def test_init_db_creates_file(tmp_path) -> None:
    db = tmp_path / "nested" / "pomodoro.db"
    storage = Storage(db)
    storage.init_db()
    assert db.exists()


def test_init_db_is_idempotent(tmp_path) -> None:
    storage = Storage(tmp_path / "pomodoro.db")
    storage.init_db()
    storage.set_setting("volume", 3)
    storage.init_db()
    assert storage.get_setting("volume") == 3


def test_set_get_setting(tmp_path) -> None:
    storage = Storage(tmp_path / "pomodoro.db")
    storage.init_db()
    storage.set_setting("sessions", [{"id": "a"}])
    assert storage.get_setting("sessions") == [{"id": "a"}]
    assert storage.get_setting("missing", "x") == "x"


def test_set_setting_overwrites_whole_value(tmp_path) -> None:
    storage = Storage(tmp_path / "pomodoro.db")
    storage.init_db()
    storage.set_setting("sessions", [1, 2, 3])
    storage.set_setting("sessions", [])
    assert storage.get_setting("sessions") == []


def test_delete_setting(tmp_path) -> None:
    storage = Storage(tmp_path / "pomodoro.db")
    storage.init_db()
    storage.set_setting("k", "v")
    storage.delete_setting("k")
    assert storage.get_setting("k") is None


def test_sqlite_errors_surface_as_storage_error(tmp_path) -> None:
    storage = Storage(tmp_path / "never-initialised.db")
    with pytest.raises(StorageError):
        storage.get_setting("sessions")
    with pytest.raises(StorageError):
        storage.set_setting("sessions", [])


def test_init_db_fails_with_storage_error_when_directory_is_a_file(tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    storage = Storage(blocker / "pomodoro.db")
    with pytest.raises(StorageError):
        storage.init_db()


def test_history_round_trips_through_sqlite(tmp_path) -> None:
    storage = Storage(tmp_path / "pomodoro.db")
    storage.init_db()
    store = HistoryStore(storage)
    store.load()
    record = SessionRecord.create(SessionKind.WORK, 1_000, 1_501_000)
    store.append(record)

    again = HistoryStore(Storage(tmp_path / "pomodoro.db"))
    assert again.load() == (record,)

    again.clear()
    assert HistoryStore(storage).load() == ()


def test_history_on_unusable_database_stays_in_memory(tmp_path) -> None:
    store = HistoryStore(Storage(tmp_path / "never-initialised.db"))
    assert store.load() == ()

    record = SessionRecord.create(SessionKind.BREAK, 0, 300_000)
    assert store.append(record) is False
    assert store.records == (record,)
