from __future__ import annotations

from typing import Iterable

from PySide6.QtWidgets import QTextBrowser, QWidget

from ..rendering import render_results_html


class ResultView(QTextBrowser):
    """Shows the last completions (or the error text) one after another."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setReadOnly(True)
        self.setOpenExternalLinks(True)
        self.setMinimumHeight(200)

    def set_results(self, results: Iterable[str], is_error: bool = False) -> None:
        self.setHtml(render_results_html(results, is_error))
