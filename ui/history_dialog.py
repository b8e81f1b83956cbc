# ui/history_dialog.py
from PySide6.QtWidgets import (
    QDialog,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QComboBox,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QFileDialog,
    QMessageBox,
)
import csv
import logging
import pyqtgraph as pg

from app.errors import StorageError
from services.ledger import ALL_MODES, ScoreLedger
from utils.graph_helper import setup_wpm_plot, update_curve

log = logging.getLogger(__name__)

_FILTERS = [("All modes", ALL_MODES), ("Sentence", "sentence"), ("Words", "words")]


class HistoryDialog(QDialog):
    def __init__(self, ledger: ScoreLedger, trend_limit: int = 50, parent=None):
        super().__init__(parent)
        self.setWindowTitle("History")
        self.resize(720, 560)
        self.ledger = ledger
        self.trend_limit = trend_limit

        root = QVBoxLayout(self)

        # --- controls ---
        ctrl = QHBoxLayout()
        ctrl.addWidget(QLabel("Show:"))
        self.cmb_mode = QComboBox()
        for label, _ in _FILTERS:
            self.cmb_mode.addItem(label)
        self.cmb_mode.currentIndexChanged.connect(self._render)
        ctrl.addWidget(self.cmb_mode)
        ctrl.addStretch(1)
        self.btn_export = QPushButton("Export CSV…")
        self.btn_export.clicked.connect(self._export_csv)
        ctrl.addWidget(self.btn_export)
        self.btn_clear = QPushButton("Clear history…")
        self.btn_clear.clicked.connect(self._clear)
        ctrl.addWidget(self.btn_clear)
        root.addLayout(ctrl)

        self.lbl_summary = QLabel("")
        root.addWidget(self.lbl_summary)

        # --- plot (single curve, reused) ---
        self.plot = pg.PlotWidget()
        self._curve = setup_wpm_plot(self.plot, "#eab308")
        root.addWidget(self.plot, stretch=2)

        # --- table ---
        self.table = QTableWidget(0, 5)
        self.table.setHorizontalHeaderLabels(["Date", "Mode", "WPM", "Accuracy", "Time"])
        self.table.horizontalHeader().setStretchLastSection(True)
        root.addWidget(self.table, stretch=1)

        self._render()

    def _mode(self) -> str:
        return _FILTERS[max(0, self.cmb_mode.currentIndex())][1]

    def _render(self):
        mode = self._mode()
        s = self.ledger.summary(mode)
        self.lbl_summary.setText(
            f"Runs: {s.count} · Avg WPM: {s.average_wpm:.1f} · "
            f"Avg accuracy: {s.average_accuracy:.1f}% · Best WPM: {s.max_wpm:.1f}"
        )

        trend = self.ledger.trend(mode, self.trend_limit)
        update_curve(self._curve, [e.wpm for e in trend])

        recent = self.ledger.recent(mode, self.trend_limit)
        self.table.setRowCount(len(recent))
        for i, e in enumerate(recent):
            if e.mode == "sentence":
                mode_text = "Sentence"
            elif e.duration_seconds is not None:
                mode_text = f"Words {e.duration_seconds:g}s"
            else:
                mode_text = f"Words {e.word_count}"
            self.table.setItem(i, 0, QTableWidgetItem(e.created_at.astimezone().strftime("%Y-%m-%d %H:%M")))
            self.table.setItem(i, 1, QTableWidgetItem(mode_text))
            self.table.setItem(i, 2, QTableWidgetItem(f"{e.wpm:.0f}"))
            self.table.setItem(i, 3, QTableWidgetItem(f"{e.accuracy:.1f}%"))
            self.table.setItem(i, 4, QTableWidgetItem(f"{e.elapsed_seconds:.1f}s"))

    def _clear(self):
        answer = QMessageBox.question(
            self,
            "Clear history",
            "Delete every saved result? This cannot be undone.",
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No,
        )
        if answer != QMessageBox.Yes:
            return
        try:
            self.ledger.clear()
        except StorageError as e:
            log.error("Clearing history failed: %s", e)
            QMessageBox.warning(self, "Clear history", str(e))
        self._render()

    def _export_csv(self):
        path, _ = QFileDialog.getSaveFileName(
            self, "Export History", "history.csv", "CSV (*.csv)"
        )
        if not path:
            return
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow(["CreatedAt", "Mode", "Duration", "WordCount", "WPM", "Accuracy", "Elapsed", "Typed", "Correct"])
            for e in self.ledger.filter_by_mode(self._mode()):
                w.writerow([
                    e.created_at.isoformat(), e.mode, e.duration_seconds or "", e.word_count or "",
                    f"{e.wpm:.2f}", f"{e.accuracy:.2f}", f"{e.elapsed_seconds:.2f}",
                    e.typed_count, e.correct_count,
                ])
