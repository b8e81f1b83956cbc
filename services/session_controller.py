# services/session_controller.py
from __future__ import annotations
from datetime import datetime, timezone
from typing import Callable, List, Optional, Protocol, Union
import logging

from app.errors import StorageError
from app.modes import TestConfig, WordsTimed
from app.state import Control, Result, TestSession
from app.timer import Clock, SystemClock
from services.ledger import ScoreEntry, ScoreLedger
from services.metrics import LiveMetrics, WpmTrace
from services.windowing import RenderedChar, Viewport, build_viewport, render_full
from utils.file_handler import TextSource

log = logging.getLogger(__name__)


class Ticker(Protocol):
    def start(self) -> None:
        ...

    def stop(self) -> None:
        ...


class SessionController:
    """
    Owns the active TestSession and the periodic ticker.

    The ticker runs only while the session is running: it is started by the
    keystroke that arms the clock and stopped on finish, abort, regenerate and
    reconfiguration. Finished runs go to the ledger; aborted runs never do.
    """

    def __init__(
        self,
        text_source: TextSource,
        ledger: ScoreLedger,
        ticker: Ticker,
        clock: Optional[Clock] = None,
        line_width: int = 60,
        visible_lines: int = 3,
        on_finished: Optional[Callable[[ScoreEntry], None]] = None,
    ):
        self.text_source = text_source
        self.ledger = ledger
        self.ticker = ticker
        self.clock = clock or SystemClock()
        self.line_width = line_width
        self.visible_lines = visible_lines
        self.on_finished = on_finished

        self.config: Optional[TestConfig] = None
        self.session: Optional[TestSession] = None
        self.last_entry: Optional[ScoreEntry] = None
        # best for the config as it stood before last_entry was recorded
        self.previous_best: Optional[ScoreEntry] = None
        self.save_error: Optional[StorageError] = None
        self.trace = WpmTrace()

    @property
    def is_running(self) -> bool:
        return self.session is not None and self.session.is_running

    @property
    def is_windowed(self) -> bool:
        return isinstance(self.config, WordsTimed)

    # ---------- lifecycle ----------
    def begin(self, config: TestConfig) -> TestSession:
        self.ticker.stop()
        self.config = config
        self.last_entry = None
        self.previous_best = None
        self.session = TestSession(config, self.clock, on_finished=self._on_finished)
        self._load_target()
        log.info("New %s run", config.label)
        return self.session

    def retry(self) -> Optional[TestSession]:
        if self.config is None:
            return None
        return self.begin(self.config)

    def regenerate(self):
        if self.session is None:
            return
        self.ticker.stop()
        self._load_target()

    def abort(self):
        """Drop the current run without recording it."""
        self.ticker.stop()
        if self.session is not None and not self.session.finished:
            log.info("Run aborted")
        self.session = None
        self.trace.clear()

    def finish(self) -> Optional[Result]:
        if self.session is None:
            return None
        return self.session.finish()

    def _load_target(self):
        self.session.start(self.text_source.target_for(self.config))
        self.trace.clear()

    # ---------- events ----------
    def press(self, key: str) -> Optional[Control]:
        if self.session is None:
            return None
        was_running = self.session.is_running
        control = self.session.apply_key(key)
        if control is Control.REGENERATE:
            self.regenerate()
        elif control is Control.ABORT:
            self.abort()
        elif not was_running and self.session.is_running:
            self.ticker.start()
        return control

    def tick(self, now: Optional[float] = None) -> Optional[LiveMetrics]:
        if not self.is_running:
            return None
        session = self.session
        metrics = session.tick(self.clock.now() if now is None else now)
        if self.session is not session:
            # on_finished already moved on to another run
            return None
        if not session.finished:
            self.trace.add(metrics)
        return metrics

    def _on_finished(self, result: Result):
        self.ticker.stop()
        self.save_error = None
        self.trace.add(self.session.metrics())
        self.previous_best = self.best()
        try:
            self.last_entry = self.ledger.record(result)
        except StorageError as e:
            # the run still gets a summary, it is just not in the history
            log.error("Could not save result: %s", e)
            self.save_error = e
            created = datetime.fromtimestamp(self.clock.now(), tz=timezone.utc)
            self.last_entry = ScoreEntry.from_result(result, created)
        if self.on_finished is not None:
            self.on_finished(self.last_entry)

    # ---------- views ----------
    def metrics(self) -> LiveMetrics:
        if self.session is None:
            return LiveMetrics()
        return self.session.metrics()

    def render(self) -> Union[Viewport, List[RenderedChar]]:
        if self.session is None:
            return []
        if self.is_windowed:
            return build_viewport(self.session.target, self.session.typed, self.line_width, self.visible_lines)
        return render_full(self.session.target, self.session.typed)

    def best(self) -> Optional[ScoreEntry]:
        if self.config is None:
            return None
        return self.ledger.best_for_config(self.config)
