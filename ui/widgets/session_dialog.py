# ui/widgets/session_dialog.py
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout,
    QLabel, QPushButton, QComboBox
)

from app.modes import TIMED_DURATIONS, WORD_COUNTS, Sentence, WordsFixed, WordsTimed

MODE_SENTENCE = "Sentence"
MODE_TIMED = "Words (timed)"
MODE_FIXED = "Words (fixed count)"


class SessionDialog(QDialog):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("New Session")
        self.setFixedSize(340, 210)

        layout = QVBoxLayout(self)
        layout.setSpacing(14)

        layout.addWidget(QLabel("Mode:", self))
        self.cmb_mode = QComboBox(self)
        self.cmb_mode.addItems([MODE_SENTENCE, MODE_TIMED, MODE_FIXED])
        self.cmb_mode.currentTextChanged.connect(self._mode_changed)
        layout.addWidget(self.cmb_mode)

        self.lbl_option = QLabel("", self)
        layout.addWidget(self.lbl_option)
        self.cmb_option = QComboBox(self)
        layout.addWidget(self.cmb_option)

        row = QHBoxLayout()
        btn_start = QPushButton("Start", self)
        btn_start.clicked.connect(self.accept)
        btn_cancel = QPushButton("Cancel", self)
        btn_cancel.clicked.connect(self.reject)
        row.addWidget(btn_start)
        row.addWidget(btn_cancel)

        layout.addStretch(1)
        layout.addLayout(row)
        self._mode_changed(self.cmb_mode.currentText())

    def _mode_changed(self, mode: str):
        self.cmb_option.clear()
        if mode == MODE_TIMED:
            self.lbl_option.setText("Duration (seconds):")
            self.cmb_option.addItems([str(d) for d in TIMED_DURATIONS])
            self.cmb_option.setCurrentText("30")
        elif mode == MODE_FIXED:
            self.lbl_option.setText("Words:")
            self.cmb_option.addItems([str(c) for c in WORD_COUNTS])
        else:
            self.lbl_option.setText("")
        self.lbl_option.setVisible(mode != MODE_SENTENCE)
        self.cmb_option.setVisible(mode != MODE_SENTENCE)

    @property
    def config(self):
        mode = self.cmb_mode.currentText()
        if mode == MODE_TIMED:
            return WordsTimed(int(self.cmb_option.currentText()))
        if mode == MODE_FIXED:
            return WordsFixed(int(self.cmb_option.currentText()))
        return Sentence()
