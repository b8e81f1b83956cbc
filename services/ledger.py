# services/ledger.py
from __future__ import annotations
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Protocol
import logging
import uuid

from app.modes import TestConfig
from app.state import Result
from app.timer import Clock, SystemClock

log = logging.getLogger(__name__)

ALL_MODES = "all"
TREND_LIMIT = 50


@dataclass(frozen=True)
class ScoreEntry:
    id: str
    mode: str
    duration_seconds: Optional[float]
    word_count: Optional[int]
    wpm: float
    accuracy: float
    elapsed_seconds: float
    typed_count: int
    correct_count: int
    created_at: datetime

    @classmethod
    def from_result(cls, result: Result, created_at: datetime, entry_id: Optional[str] = None) -> "ScoreEntry":
        return cls(
            id=entry_id or uuid.uuid4().hex,
            created_at=created_at,
            **asdict(result),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["created_at"] = self.created_at.isoformat()
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ScoreEntry":
        created = d["created_at"]
        if isinstance(created, str):
            created = datetime.fromisoformat(created)
        duration = d.get("duration_seconds")
        word_count = d.get("word_count")
        return cls(
            id=str(d["id"]),
            mode=str(d["mode"]),
            duration_seconds=float(duration) if duration is not None else None,
            word_count=int(word_count) if word_count is not None else None,
            wpm=float(d["wpm"]),
            accuracy=float(d["accuracy"]),
            elapsed_seconds=float(d["elapsed_seconds"]),
            typed_count=int(d["typed_count"]),
            correct_count=int(d["correct_count"]),
            created_at=created,
        )

    def matches(self, mode: str, duration_seconds: Optional[float], word_count: Optional[int]) -> bool:
        return (
            self.mode == mode
            and self.duration_seconds == duration_seconds
            and self.word_count == word_count
        )


@dataclass(frozen=True)
class LedgerSummary:
    count: int = 0
    average_wpm: float = 0.0
    average_accuracy: float = 0.0
    max_wpm: float = 0.0


class ScoreStore(Protocol):
    def save(self, entry: ScoreEntry) -> None:
        ...

    def load_all(self) -> List[ScoreEntry]:
        ...

    def clear(self) -> None:
        ...


class MemoryScoreStore:
    def __init__(self, entries: Optional[List[ScoreEntry]] = None):
        self.entries: List[ScoreEntry] = list(entries or [])

    def save(self, entry: ScoreEntry) -> None:
        self.entries.append(entry)

    def load_all(self) -> List[ScoreEntry]:
        return list(self.entries)

    def clear(self) -> None:
        self.entries.clear()


class ScoreLedger:
    """
    Append-only history of finished runs, backed by a store.

    The store is read once when the ledger is created; afterwards every new
    entry is written through to it.
    """

    def __init__(self, store: ScoreStore, clock: Optional[Clock] = None):
        self.store = store
        self.clock = clock or SystemClock()
        self._entries: List[ScoreEntry] = list(store.load_all())
        log.debug("Loaded %d score entries", len(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ScoreEntry]:
        return iter(list(self._entries))

    @property
    def entries(self) -> List[ScoreEntry]:
        return list(self._entries)

    def append(self, entry: ScoreEntry) -> ScoreEntry:
        self.store.save(entry)
        self._entries.append(entry)
        return entry

    def record(self, result: Result) -> ScoreEntry:
        created = datetime.fromtimestamp(self.clock.now(), tz=timezone.utc)
        entry = self.append(ScoreEntry.from_result(result, created))
        log.info("Recorded %s run at %.1f WPM", entry.mode, entry.wpm)
        return entry

    def clear(self) -> None:
        """Drop every entry. There is no undo."""
        self.store.clear()
        self._entries.clear()
        log.info("Score history cleared")

    # ---------- queries ----------
    def best_for(
        self,
        mode: str,
        duration_seconds: Optional[float] = None,
        word_count: Optional[int] = None,
    ) -> Optional[ScoreEntry]:
        best = None
        for entry in self._entries:
            if not entry.matches(mode, duration_seconds, word_count):
                continue
            # strict comparison keeps the earliest entry on ties
            if best is None or entry.wpm > best.wpm:
                best = entry
        return best

    def best_for_config(self, config: TestConfig) -> Optional[ScoreEntry]:
        return self.best_for(*config.key())

    def filter_by_mode(self, mode: str = ALL_MODES) -> List[ScoreEntry]:
        if mode == ALL_MODES:
            return list(self._entries)
        return [e for e in self._entries if e.mode == mode]

    def summary(self, mode: str = ALL_MODES) -> LedgerSummary:
        entries = self.filter_by_mode(mode)
        if not entries:
            return LedgerSummary()
        n = len(entries)
        return LedgerSummary(
            count=n,
            average_wpm=sum(e.wpm for e in entries) / n,
            average_accuracy=sum(e.accuracy for e in entries) / n,
            max_wpm=max(e.wpm for e in entries),
        )

    def trend(self, mode: str = ALL_MODES, limit: int = TREND_LIMIT) -> List[ScoreEntry]:
        """Most recent ``limit`` entries, oldest first."""
        if limit <= 0:
            return []
        return self.filter_by_mode(mode)[-limit:]

    def recent(self, mode: str = ALL_MODES, limit: int = TREND_LIMIT) -> List[ScoreEntry]:
        """Most recent ``limit`` entries, newest first."""
        return list(reversed(self.trend(mode, limit)))
