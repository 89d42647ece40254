from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QButtonGroup,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QRadioButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from ..models import ChatModel, DEFAULT_TEMPERATURE, MAX_TEMPERATURE, MIN_TEMPERATURE, Session

SLIDER_SCALE = 100


class SettingsPanel(QGroupBox):
    """Collapsible group holding model, temperature and API key controls."""

    api_key_submitted = Signal(str)

    def __init__(self, session: Session, parent: QWidget | None = None) -> None:
        super().__init__("Settings", parent)
        self._session = session
        settings = session.settings
        self._settings = settings
        self.setCheckable(True)
        self.setChecked(False)

        self._body = QWidget(self)
        self.toggled.connect(self._body.setVisible)

        self._model_group = QButtonGroup(self)
        model_row = QHBoxLayout()
        for model in ChatModel.selectable():
            button = QRadioButton(model.label, self._body)
            button.setProperty("model_identifier", model.identifier)
            button.setChecked(model == settings.model)
            self._model_group.addButton(button)
            model_row.addWidget(button)
        model_row.addStretch()
        self._model_group.buttonToggled.connect(self._handle_model_toggled)

        self._slider = QSlider(Qt.Horizontal, self._body)
        self._slider.setRange(int(MIN_TEMPERATURE * SLIDER_SCALE), int(MAX_TEMPERATURE * SLIDER_SCALE))
        self._slider.setValue(round(settings.temperature * SLIDER_SCALE))
        self._slider.valueChanged.connect(self._handle_temperature_changed)
        self._temperature_label = QLabel(self._format_temperature(settings.temperature), self._body)
        self._temperature_label.setMinimumWidth(40)
        reset_button = QPushButton("Reset", self._body)
        reset_button.clicked.connect(self._handle_reset)

        temperature_row = QHBoxLayout()
        temperature_row.addWidget(self._slider, stretch=1)
        temperature_row.addWidget(self._temperature_label)
        temperature_row.addWidget(reset_button)

        self._api_key_input = QLineEdit(self._body)
        self._api_key_input.setEchoMode(QLineEdit.Password)
        self._api_key_input.setPlaceholderText("sk-..." if not settings.api_key else "(saved)")
        save_button = QPushButton("Save", self._body)
        save_button.clicked.connect(self._handle_save_key)

        api_key_row = QHBoxLayout()
        api_key_row.addWidget(self._api_key_input, stretch=1)
        api_key_row.addWidget(save_button)

        body_layout = QVBoxLayout()
        body_layout.addWidget(QLabel("Model", self._body))
        body_layout.addLayout(model_row)
        body_layout.addWidget(QLabel("Temperature", self._body))
        body_layout.addLayout(temperature_row)
        body_layout.addWidget(QLabel("API Key", self._body))
        body_layout.addLayout(api_key_row)
        body_layout.setContentsMargins(0, 0, 0, 0)
        self._body.setLayout(body_layout)
        self._body.setVisible(False)

        layout = QVBoxLayout()
        layout.addWidget(self._body)
        self.setLayout(layout)

    def mark_api_key_saved(self) -> None:
        self._api_key_input.clear()
        self._api_key_input.setPlaceholderText("(saved)" if self._settings.api_key else "sk-...")

    def _handle_model_toggled(self, button: QRadioButton, checked: bool) -> None:
        if checked:
            self._settings.model = ChatModel.from_identifier(button.property("model_identifier"))

    def _handle_temperature_changed(self, value: int) -> None:
        self._session.set_temperature(value / SLIDER_SCALE)
        self._temperature_label.setText(self._format_temperature(self._settings.temperature))

    def _handle_reset(self) -> None:
        self._slider.blockSignals(True)
        self._slider.setValue(round(DEFAULT_TEMPERATURE * SLIDER_SCALE))
        self._slider.blockSignals(False)
        self._session.reset_temperature()
        self._temperature_label.setText(self._format_temperature(self._settings.temperature))

    def _handle_save_key(self) -> None:
        self.api_key_submitted.emit(self._api_key_input.text())

    @staticmethod
    def _format_temperature(value: float) -> str:
        return f"{value:.2f}"
