from __future__ import annotations

from typing import Iterable

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QButtonGroup,
    QFrame,
    QHBoxLayout,
    QLineEdit,
    QPlainTextEdit,
    QPushButton,
    QRadioButton,
    QVBoxLayout,
    QWidget,
)

from ..models import InputTurn


class TurnRowWidget(QFrame):
    """Editor for one input turn; edits are written straight into the turn."""

    structure_changed = Signal()
    save_requested = Signal(object)

    def __init__(self, turn: InputTurn, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._turn = turn
        self.setFrameShape(QFrame.StyledPanel)

        delete_button = QPushButton("-", self)
        delete_button.setFixedWidth(28)
        delete_button.clicked.connect(self._handle_delete)

        self._system_radio = QRadioButton("System", self)
        self._user_radio = QRadioButton("User", self)
        self._role_group = QButtonGroup(self)
        self._role_group.addButton(self._system_radio)
        self._role_group.addButton(self._user_radio)
        self._system_radio.setChecked(turn.role == "system")
        self._user_radio.setChecked(turn.role == "user")
        self._system_radio.toggled.connect(self._handle_role_toggled)

        self._label_edit = QLineEdit(turn.label, self)
        self._label_edit.setPlaceholderText("Name")
        self._label_edit.textChanged.connect(self._handle_label_changed)

        save_button = QPushButton("Save", self)
        save_button.clicked.connect(lambda: self.save_requested.emit(self._turn))
        up_button = QPushButton("▲", self)
        up_button.setFixedWidth(28)
        up_button.clicked.connect(self._handle_move_up)
        down_button = QPushButton("▼", self)
        down_button.setFixedWidth(28)
        down_button.clicked.connect(self._handle_move_down)

        header = QHBoxLayout()
        header.addWidget(delete_button)
        header.addWidget(self._system_radio)
        header.addWidget(self._user_radio)
        header.addWidget(self._label_edit, stretch=1)
        header.addWidget(save_button)
        header.addWidget(up_button)
        header.addWidget(down_button)

        self._content_edit = QPlainTextEdit(self)
        self._content_edit.setPlainText(turn.content)
        self._content_edit.setFixedHeight(110)
        self._content_edit.textChanged.connect(self._handle_content_changed)

        layout = QVBoxLayout()
        layout.addLayout(header)
        layout.addWidget(self._content_edit)
        layout.setContentsMargins(6, 6, 6, 6)
        self.setLayout(layout)

    @property
    def turn(self) -> InputTurn:
        return self._turn

    def _handle_role_toggled(self, system_checked: bool) -> None:
        self._turn.role = "system" if system_checked else "user"

    def _handle_label_changed(self, text: str) -> None:
        self._turn.label = text

    def _handle_content_changed(self) -> None:
        self._turn.content = self._content_edit.toPlainText()

    def _handle_delete(self) -> None:
        self._turn.delete = True
        self.structure_changed.emit()

    def _handle_move_up(self) -> None:
        self._turn.move_up = True
        self.structure_changed.emit()

    def _handle_move_down(self) -> None:
        self._turn.move_down = True
        self.structure_changed.emit()


class TurnEditor(QWidget):
    structure_changed = Signal()
    save_requested = Signal(object)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._rows: list[TurnRowWidget] = []
        self._layout = QVBoxLayout()
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(6)
        self.setLayout(self._layout)

    def set_turns(self, turns: Iterable[InputTurn]) -> None:
        # 行ウィジェットは毎回作り直す。ボタンのシグナル処理中に破棄しないよう deleteLater を使う
        for row in self._rows:
            self._layout.removeWidget(row)
            row.deleteLater()
        self._rows = []
        for turn in turns:
            row = TurnRowWidget(turn, self)
            row.structure_changed.connect(self.structure_changed.emit)
            row.save_requested.connect(self.save_requested.emit)
            self._layout.addWidget(row)
            self._rows.append(row)
