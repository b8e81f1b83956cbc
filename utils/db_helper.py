# utils/db_helper.py
from __future__ import annotations
from datetime import datetime
from typing import List
import logging
import os
import sqlite3

from app.errors import StorageError
from services.ledger import ScoreEntry

log = logging.getLogger(__name__)

DB_PATH = "data/scores.db"


def _ensure_schema(conn):
    conn.execute("""
    CREATE TABLE IF NOT EXISTS results(
        seq INTEGER PRIMARY KEY AUTOINCREMENT,
        id TEXT UNIQUE NOT NULL,
        mode TEXT NOT NULL,
        duration REAL,
        word_count INTEGER,
        wpm REAL NOT NULL,
        accuracy REAL NOT NULL,
        elapsed REAL NOT NULL,
        typed INTEGER NOT NULL,
        correct INTEGER NOT NULL,
        created_at TEXT NOT NULL
    );
    """)


class SqliteScoreStore:
    """Durable score store; one row per finished run, read back in insertion order."""

    def __init__(self, path: str = DB_PATH):
        self.path = path

    def get_conn(self):
        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        conn = sqlite3.connect(self.path)
        _ensure_schema(conn)
        return conn

    def save(self, entry: ScoreEntry) -> None:
        conn = None
        try:
            conn = self.get_conn()
            conn.execute(
                "INSERT INTO results(id, mode, duration, word_count, wpm, accuracy, elapsed, typed, correct, created_at)"
                " VALUES (?,?,?,?,?,?,?,?,?,?)",
                (
                    entry.id, entry.mode, entry.duration_seconds, entry.word_count,
                    entry.wpm, entry.accuracy, entry.elapsed_seconds,
                    entry.typed_count, entry.correct_count, entry.created_at.isoformat(),
                ),
            )
            conn.commit()
        except sqlite3.Error as e:
            log.error("Failed to save result %s: %s", entry.id, e)
            raise StorageError(str(e)) from e
        finally:
            if conn is not None:
                conn.close()

    def load_all(self) -> List[ScoreEntry]:
        conn = None
        try:
            conn = self.get_conn()
            rows = conn.execute(
                "SELECT id, mode, duration, word_count, wpm, accuracy, elapsed, typed, correct, created_at"
                " FROM results ORDER BY seq"
            ).fetchall()
        except sqlite3.Error as e:
            log.error("Failed to load results from %s: %s", self.path, e)
            raise StorageError(str(e)) from e
        finally:
            if conn is not None:
                conn.close()
        return [
            ScoreEntry(
                id=row[0],
                mode=row[1],
                duration_seconds=row[2],
                word_count=row[3],
                wpm=row[4],
                accuracy=row[5],
                elapsed_seconds=row[6],
                typed_count=row[7],
                correct_count=row[8],
                created_at=datetime.fromisoformat(row[9]),
            )
            for row in rows
        ]

    def clear(self) -> None:
        conn = None
        try:
            conn = self.get_conn()
            conn.execute("DELETE FROM results")
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e
        finally:
            if conn is not None:
                conn.close()
