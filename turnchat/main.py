from __future__ import annotations

import logging
import sys

from PySide6.QtWidgets import QApplication, QMessageBox

from .config import AppConfig
from .persistence import load_session
from .resources import load_stylesheet
from .store import SettingsStore, StoreError
from .ui import MainWindow

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    # Qt アプリのエントリポイント。設定→ストア→セッション→メインウィンドウの順に組み立てる
    config = AppConfig()
    configure_logging(config.log_level)
    app = QApplication(sys.argv)
    app.setStyleSheet(load_stylesheet())
    try:
        store = SettingsStore(config.store_path)
        session, report = load_session(store)
    except StoreError as exc:
        logger.error("Cannot open settings store: %s", exc)
        QMessageBox.critical(
            None,
            "Turn-Chat",
            f"The settings store could not be opened.\n\n{exc}\n\n"
            f"Move or delete {config.store_path} to start with default settings.",
        )
        sys.exit(1)
    window = MainWindow(config, store, session, report)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
