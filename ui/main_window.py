# ui/main_window.py
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QLabel, QMessageBox, QPushButton, QStackedWidget
)
from PySide6.QtCore import Qt

from app.settings import Settings
from app.timer import SystemClock
from core.chrono import RealtimeTimer
from services.ledger import ScoreLedger
from services.session_controller import SessionController
from ui.history_dialog import HistoryDialog
from ui.session_summary import SessionSummary
from ui.test_ui import TestUI
from ui.widgets.session_dialog import SessionDialog
from utils.db_helper import SqliteScoreStore
from utils.file_handler import TextSource


_QSS = """
QWidget { background: #0f1115; color: #e5e7eb; }
QLabel#lblTimer, QLabel#lblAcc, QLabel#lblHint, QLabel#lblMode { color: #6b7280; }
QLabel#lblWPM { color: #eab308; }
QWidget#TopBar {
    background: rgba(255,255,255,0.04);
    border: 1px solid rgba(255,255,255,0.08);
    border-radius: 14px;
}
QPushButton#TopBtn {
    background: transparent;
    border: 1px solid rgba(255,255,255,0.10);
    border-radius: 9px;
    padding: 6px 12px;
}
QPushButton#TopBtn:hover {
    border-color: rgba(255,255,255,0.32);
    background: rgba(255,255,255,0.06);
}
"""


class MainWindow(QMainWindow):
    def __init__(self, settings: Settings):
        super().__init__()
        self.setWindowTitle("Typepace")
        self.resize(1200, 720)
        self.settings = settings

        clock = SystemClock()
        self.ledger = ScoreLedger(SqliteScoreStore(settings.db_path), clock)
        text_source = TextSource.from_files(settings.texts_dir, timed_word_count=settings.timed_word_count)
        self.ticker = RealtimeTimer(tick_ms=settings.tick_ms, clock=clock, parent=self)
        self.controller = SessionController(
            text_source,
            self.ledger,
            self.ticker,
            clock=clock,
            line_width=settings.line_width,
            visible_lines=settings.visible_lines,
        )

        root = QWidget(self)
        root_v = QVBoxLayout(root)
        root_v.setContentsMargins(16, 40, 16, 16)
        root_v.setSpacing(24)
        self._build_top_bar(root_v)

        self.stack = QStackedWidget(self)
        self.menu_page = self._build_menu_page()
        self.test = TestUI(self.controller, self.ticker, self)
        self.test.finished.connect(self._on_test_finished)
        self.test.aborted.connect(self._show_menu)
        self.stack.addWidget(self.menu_page)
        self.stack.addWidget(self.test)
        root_v.addWidget(self.stack, 1)
        self.setCentralWidget(root)

        self.setFocusPolicy(Qt.NoFocus)
        self.menuBar().setVisible(False)
        self.setStyleSheet(_QSS)
        self._show_menu()

    # ---------------- Top Bar ----------------
    def _build_top_bar(self, parent_layout):
        bar = QWidget(self)
        bar.setObjectName("TopBar")
        h = QHBoxLayout(bar)
        h.setContentsMargins(14, 16, 14, 16)
        h.setSpacing(10)

        for text, handler in [
            ("New test…", self._open_session),
            ("History…", self._open_history),
        ]:
            btn = QPushButton(text, bar)
            btn.clicked.connect(handler)
            btn.setObjectName("TopBtn")
            btn.setFocusPolicy(Qt.NoFocus)
            h.addWidget(btn)

        h.addStretch(1)

        self.btnRetry = QPushButton("Retry", bar)
        self.btnFinish = QPushButton("Finish", bar)
        self.btnExit = QPushButton("Exit", bar)
        for button, handler in [
            (self.btnRetry, self._on_retry),
            (self.btnFinish, self._on_finish),
            (self.btnExit, self._on_exit),
        ]:
            button.clicked.connect(handler)
            button.setObjectName("TopBtn")
            button.setFocusPolicy(Qt.NoFocus)
            h.addWidget(button)

        parent_layout.addWidget(bar)

    def _build_menu_page(self) -> QWidget:
        page = QWidget(self)
        v = QVBoxLayout(page)
        v.addStretch(1)
        title = QLabel("<h2>Welcome</h2>", page)
        title.setAlignment(Qt.AlignCenter)
        v.addWidget(title)
        blurb = QLabel(
            "Choose a mode to practise your typing speed and accuracy.\n"
            "The timer starts with your first keystroke. Results are saved locally.",
            page,
        )
        blurb.setAlignment(Qt.AlignCenter)
        v.addWidget(blurb)
        btn = QPushButton("Start…", page)
        btn.setObjectName("TopBtn")
        btn.clicked.connect(self._open_session)
        v.addWidget(btn, alignment=Qt.AlignHCenter)
        v.addStretch(1)
        return page

    # ---------------- Navigation ----------------
    def _show_menu(self):
        self.controller.abort()
        self.stack.setCurrentWidget(self.menu_page)
        self.btnRetry.setEnabled(False)
        self.btnFinish.setEnabled(False)
        self.btnExit.setEnabled(False)
        self.setWindowTitle("Typepace")

    def _start(self, config):
        self.stack.setCurrentWidget(self.test)
        self.test.start_test(config)
        self.btnRetry.setEnabled(True)
        self.btnFinish.setEnabled(True)
        self.btnExit.setEnabled(True)
        self.setWindowTitle(f"Typepace — {config.label}")

    def _open_session(self):
        dlg = SessionDialog(self)
        if not dlg.exec():
            return
        self._start(dlg.config)

    def _open_history(self):
        HistoryDialog(self.ledger, self.settings.trend_limit, self).exec()

    def _on_retry(self):
        if self.controller.config is not None:
            self._start(self.controller.config)

    def _on_finish(self):
        self.test.finish_test()

    def _on_exit(self):
        self.test.abort_test()

    # ---------------- Result ----------------
    def _on_test_finished(self, entry):
        self.setWindowTitle(f"Typepace — {entry.wpm:.1f} WPM")
        if self.controller.save_error is not None:
            QMessageBox.warning(self, "Save result", f"Result was not saved: {self.controller.save_error}")
        times, wpms = self.controller.trace.series()
        dlg = SessionSummary(entry, self.controller.previous_best, times, wpms, parent=self)
        if dlg.exec() == SessionSummary.RETRY:
            self._on_retry()
        else:
            self._show_menu()
