# core/chrono.py
from PySide6.QtCore import QObject, QTimer, Signal

from app.timer import SystemClock


class RealtimeTimer(QObject):
    """Emits ``ticked(now)`` every ``tick_ms`` between start() and stop()."""

    ticked = Signal(float)

    def __init__(self, tick_ms: int = 100, clock=None, parent=None):
        super().__init__(parent)
        self._clock = clock or SystemClock()
        self._tick = QTimer(self)
        self._tick.setInterval(tick_ms)
        self._tick.timeout.connect(self._on_tick)

    def start(self):
        if not self._tick.isActive():
            self._tick.start()

    def stop(self):
        self._tick.stop()

    def _on_tick(self):
        self.ticked.emit(self._clock.now())
