from __future__ import annotations

from typing import Iterable

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from ..models import Template


class TemplatePanel(QWidget):
    """Read-only list of saved templates with delete and load actions."""

    structure_changed = Signal()
    load_requested = Signal(object)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._rows: list[QWidget] = []

        self._container = QWidget(self)
        self._rows_layout = QVBoxLayout()
        self._rows_layout.setContentsMargins(4, 4, 4, 4)
        self._rows_layout.addStretch()
        self._container.setLayout(self._rows_layout)

        scroll = QScrollArea(self)
        scroll.setWidgetResizable(True)
        scroll.setWidget(self._container)

        layout = QVBoxLayout()
        layout.addWidget(scroll)
        layout.setContentsMargins(0, 0, 0, 0)
        self.setLayout(layout)

    def set_templates(self, templates: Iterable[Template]) -> None:
        for row in self._rows:
            self._rows_layout.removeWidget(row)
            row.deleteLater()
        self._rows = []
        for template in templates:
            row = self._build_row(template)
            # 末尾の stretch より前に差し込む
            self._rows_layout.insertWidget(self._rows_layout.count() - 1, row)
            self._rows.append(row)

    def _build_row(self, template: Template) -> QWidget:
        row = QFrame(self._container)
        row.setFrameShape(QFrame.StyledPanel)

        delete_button = QPushButton("-", row)
        delete_button.setFixedWidth(28)
        delete_button.clicked.connect(lambda: self._mark_deleted(template))

        role_label = QLabel("System" if template.role == "system" else "User", row)
        role_label.setStyleSheet("font-weight: 600;")
        name_label = QLabel(template.label or "(untitled)", row)

        load_button = QPushButton("Load", row)
        load_button.clicked.connect(lambda: self.load_requested.emit(template))

        header = QHBoxLayout()
        header.addWidget(delete_button)
        header.addWidget(role_label)
        header.addWidget(name_label, stretch=1)
        header.addWidget(load_button)

        content = QPlainTextEdit(row)
        content.setPlainText(template.content)
        content.setReadOnly(True)
        content.setFixedHeight(80)

        layout = QVBoxLayout()
        layout.addLayout(header)
        layout.addWidget(content)
        layout.setContentsMargins(6, 6, 6, 6)
        row.setLayout(layout)
        return row

    def _mark_deleted(self, template: Template) -> None:
        template.delete = True
        self.structure_changed.emit()
