# app/state.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union
import logging

from app.modes import TestConfig
from app.timer import Clock
from services.metrics import LiveMetrics, compute_live_metrics

log = logging.getLogger(__name__)

ESCAPE = "Escape"
BACKSPACE = "Backspace"
TAB = "Tab"

# elapsed used when a run is ended before the first keystroke
MIN_ELAPSED_SECONDS = 0.001


class SessionState(str, Enum):
    IDLE = "idle"
    ARMED = "armed"
    RUNNING = "running"
    FINISHED = "finished"


class Control(str, Enum):
    """Keys the session hands back to its owner instead of typing them."""

    ABORT = "abort"
    REGENERATE = "regenerate"


@dataclass(frozen=True)
class KeyEvent:
    key: str


@dataclass(frozen=True)
class Tick:
    now: float


Event = Union[KeyEvent, Tick]


@dataclass(frozen=True)
class Result:
    mode: str
    duration_seconds: Optional[float]
    word_count: Optional[int]
    wpm: float
    accuracy: float
    elapsed_seconds: float
    typed_count: int
    correct_count: int


class TestSession:
    """
    One typing run: target text, typed buffer and the clock that starts on the
    first accepted character.

    Completion is checked after every key and every tick. The first check that
    succeeds freezes the session and fires ``on_finished`` with the Result;
    later checks do nothing.
    """

    __test__ = False

    def __init__(
        self,
        config: TestConfig,
        clock: Clock,
        on_finished: Optional[Callable[[Result], None]] = None,
    ):
        self.config = config
        self.clock = clock
        self.on_finished = on_finished
        self.target = ""
        self.typed = ""
        self.started_at: Optional[float] = None
        self.ended_at: Optional[float] = None
        self.finished = False
        self.result: Optional[Result] = None
        self.state = SessionState.IDLE
        self._exhausted = False

    @property
    def is_running(self) -> bool:
        return self.state is SessionState.RUNNING

    def start(self, target: str):
        self.target = target or ""
        self.typed = ""
        self.started_at = None
        self.ended_at = None
        self.finished = False
        self.result = None
        self.state = SessionState.ARMED
        self._exhausted = False
        log.debug("Session armed (%s, %d chars)", self.config.label, len(self.target))

    # ---------- input ----------
    def apply_key(self, key: str) -> Optional[Control]:
        if self.finished or self.state is SessionState.IDLE:
            return None
        if key == ESCAPE:
            return Control.ABORT
        if key == TAB:
            return Control.REGENERATE
        if key != BACKSPACE and len(key) != 1:
            return None

        now = self.clock.now()
        if key == BACKSPACE:
            if self.typed:
                self.typed = self.typed[:-1]
        else:
            if self.started_at is None:
                self.started_at = now
                self.state = SessionState.RUNNING
                log.debug("Session running")
            if len(self.typed) < len(self.target):
                self.typed += key

        if self.is_running:
            self.check_completion(self.metrics(now), now)
        return None

    def tick(self, now: float) -> LiveMetrics:
        metrics = self.metrics(now)
        if self.is_running:
            self.check_completion(metrics, now)
            if self.finished:
                metrics = self.metrics()
        return metrics

    def handle(self, event: Event) -> SessionState:
        if isinstance(event, KeyEvent):
            self.apply_key(event.key)
        elif isinstance(event, Tick):
            self.tick(event.now)
        else:
            raise TypeError(f"Unknown session event: {event!r}")
        return self.state

    # ---------- metrics ----------
    def elapsed(self, now: Optional[float] = None) -> float:
        if self.started_at is None:
            return 0.0
        end = self.ended_at if self.ended_at is not None else now
        if end is None:
            end = self.clock.now()
        return max(0.0, end - self.started_at)

    def metrics(self, now: Optional[float] = None) -> LiveMetrics:
        return compute_live_metrics(
            self.typed,
            self.target,
            self.elapsed(now),
            self.config.duration_seconds,
        )

    # ---------- completion ----------
    def check_completion(self, metrics: LiveMetrics, now: Optional[float] = None) -> Optional[Result]:
        if self.finished or not self.is_running:
            return None
        if self.config.duration_seconds is not None:
            done = metrics.remaining_seconds is not None and metrics.remaining_seconds <= 0
            if not done and len(self.typed) >= len(self.target) and not self._exhausted:
                self._exhausted = True
                log.warning(
                    "Timed run reached the end of its %d-char stream with %.1fs left",
                    len(self.target), metrics.remaining_seconds,
                )
        else:
            done = len(self.typed) >= len(self.target)
        if not done:
            return None
        return self.finish(now)

    def finish(self, now: Optional[float] = None) -> Optional[Result]:
        """End the run now and emit its Result. No-op once finished."""
        if self.finished or self.state is SessionState.IDLE:
            return None
        if now is None:
            now = self.clock.now()
        self.finished = True
        self.state = SessionState.FINISHED
        if self.started_at is None:
            self.started_at = now - MIN_ELAPSED_SECONDS
        self.ended_at = max(now, self.started_at)

        m = self.metrics()
        self.result = Result(
            mode=self.config.mode,
            duration_seconds=self.config.duration_seconds,
            word_count=self.config.word_count,
            wpm=m.wpm,
            accuracy=m.accuracy,
            elapsed_seconds=m.elapsed_seconds,
            typed_count=m.typed_count,
            correct_count=m.correct_count,
        )
        log.info(
            "Run finished: %s, %.1f WPM, %.1f%% accuracy, %.1fs",
            self.config.label, m.wpm, m.accuracy, m.elapsed_seconds,
        )
        if self.on_finished is not None:
            self.on_finished(self.result)
        return self.result
