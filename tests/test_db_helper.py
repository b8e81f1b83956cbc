from datetime import datetime, timezone

import pytest

from app.errors import StorageError
from app.state import Result
from services.ledger import ScoreEntry, ScoreLedger
from utils.db_helper import SqliteScoreStore


def _entry(i, **kw):
    fields = dict(
        id=f"run-{i}",
        mode="words",
        duration_seconds=None,
        word_count=25,
        wpm=40.0 + i,
        accuracy=96.5,
        elapsed_seconds=31.2,
        typed_count=130,
        correct_count=125,
        created_at=datetime(2026, 3, 1, 12, i, tzinfo=timezone.utc),
    )
    fields.update(kw)
    return ScoreEntry(**fields)


@pytest.fixture
def db_store(tmp_path):
    return SqliteScoreStore(str(tmp_path / "data" / "scores.db"))


def test_empty_store(db_store):
    assert db_store.load_all() == []


def test_save_and_load_keep_insertion_order(db_store):
    entries = [_entry(3), _entry(1), _entry(2, mode="sentence", word_count=None)]
    for e in entries:
        db_store.save(e)
    assert db_store.load_all() == entries


def test_timed_entry_keeps_duration(db_store):
    e = _entry(0, duration_seconds=15.0, word_count=None)
    db_store.save(e)
    loaded = db_store.load_all()[0]
    assert loaded.duration_seconds == 15.0
    assert loaded.word_count is None


def test_clear(db_store):
    db_store.save(_entry(0))
    db_store.clear()
    assert db_store.load_all() == []


def test_duplicate_id_raises_storage_error(db_store):
    db_store.save(_entry(0))
    with pytest.raises(StorageError):
        db_store.save(_entry(0))


def test_ledger_history_survives_restart(db_store, clock):
    ledger = ScoreLedger(db_store, clock)
    entry = ledger.record(Result("sentence", None, None, 55.0, 98.0, 12.0, 60, 59))

    reopened = ScoreLedger(db_store, clock)
    assert reopened.entries == [entry]
    assert reopened.best_for("sentence") == entry


def test_corrupt_database_fails_ledger_startup(tmp_path, clock):
    path = tmp_path / "scores.db"
    path.write_bytes(b"not a sqlite database " * 20)
    with pytest.raises(StorageError):
        ScoreLedger(SqliteScoreStore(str(path)), clock)
