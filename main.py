# main.py
from __future__ import annotations
import sys
import logging

from PySide6.QtWidgets import QApplication, QMessageBox

from app.errors import ConfigError, StorageError
from app.settings import load_settings
from ui.main_window import MainWindow


def setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler("app.log", encoding="utf-8"),
        ],
    )

    # Log any uncaught exceptions rather than silently dying
    def excepthook(exctype, value, tb):
        logging.exception("Unhandled exception", exc_info=(exctype, value, tb))
        if QApplication.instance() is not None:
            QMessageBox.critical(
                None, "Application Error", f"{exctype.__name__}: {value}"
            )
        sys.exit(1)

    sys.excepthook = excepthook


def main() -> int:
    setup_logging()

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("Typepace")
    app.setOrganizationName("Typepace")

    try:
        settings = load_settings()
    except ConfigError as e:
        logging.error("Invalid settings: %s", e)
        QMessageBox.critical(None, "Settings", str(e))
        return 2

    try:
        win = MainWindow(settings)
    except StorageError as e:
        logging.error("Cannot open score history at %s: %s", settings.db_path, e)
        QMessageBox.critical(
            None, "Score history",
            f"Could not open the score history at {settings.db_path}:\n{e}",
        )
        return 3
    win.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
