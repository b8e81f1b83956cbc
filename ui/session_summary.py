# ui/session_summary.py
from __future__ import annotations
from typing import Optional

from PySide6.QtWidgets import QDialog, QGridLayout, QVBoxLayout, QHBoxLayout, QLabel, QPushButton
import pyqtgraph as pg

from services.ledger import ScoreEntry
from services.metrics import instant_wpm_series, smooth_wpm
from utils.graph_helper import setup_wpm_plot, update_curve


def _mode_label(entry: ScoreEntry) -> str:
    if entry.mode == "sentence":
        return "Sentence"
    if entry.duration_seconds is not None:
        return f"Words · {entry.duration_seconds:g}s"
    return f"Words · {entry.word_count} words"


class SessionSummary(QDialog):
    """
    Final stats of the run next to the best run for the same configuration,
    with a WPM-over-time graph.
    """

    RETRY = 2

    def __init__(
        self,
        entry: ScoreEntry,
        best: Optional[ScoreEntry],
        times: list[float],
        wpms: list[float],
        parent=None,
    ):
        super().__init__(parent)
        self.setWindowTitle("Session Summary")
        self.resize(720, 460)

        root = QVBoxLayout(self)
        grid = QGridLayout()
        grid.addWidget(QLabel(f"<b>Current run</b> · {_mode_label(entry)}"), 0, 0)
        grid.addWidget(QLabel(f"WPM: {round(entry.wpm)}"), 1, 0)
        grid.addWidget(QLabel(f"Accuracy: {entry.accuracy:.1f}%"), 2, 0)
        grid.addWidget(QLabel(f"Time: {entry.elapsed_seconds:.1f}s"), 3, 0)
        grid.addWidget(QLabel(f"Keystrokes: {entry.typed_count}"), 4, 0)
        grid.addWidget(QLabel(f"Correct chars: {entry.correct_count}"), 5, 0)

        grid.addWidget(QLabel("<b>Previous best for this mode</b>"), 0, 1)
        if best is not None:
            played = best.created_at.astimezone().strftime("%Y-%m-%d %H:%M")
            grid.addWidget(QLabel(f"Best WPM: {round(best.wpm)}"), 1, 1)
            grid.addWidget(QLabel(f"Best Accuracy: {best.accuracy:.1f}%"), 2, 1)
            grid.addWidget(QLabel(f"Best Time: {best.elapsed_seconds:.1f}s"), 3, 1)
            grid.addWidget(QLabel(f"Played at: {played}"), 4, 1)
        else:
            grid.addWidget(QLabel("No previous runs found for this configuration yet."), 1, 1)
        root.addLayout(grid)

        plot = pg.PlotWidget()
        curve = setup_wpm_plot(plot, "#c8c8ff", x_label="Time (s)")
        times = [float(t) for t in times]
        instant = instant_wpm_series(times, [float(v) for v in wpms])
        update_curve(curve, smooth_wpm(times, instant), x=times)
        root.addWidget(plot, stretch=1)

        row = QHBoxLayout()
        row.addStretch(1)
        btn_retry = QPushButton("Retry same mode", self)
        btn_retry.clicked.connect(lambda: self.done(self.RETRY))
        btn_menu = QPushButton("Back to menu", self)
        btn_menu.clicked.connect(self.accept)
        row.addWidget(btn_retry)
        row.addWidget(btn_menu)
        root.addLayout(row)
