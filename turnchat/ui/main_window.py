from __future__ import annotations

import logging

from PySide6.QtCore import QTimer, Qt
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QDockWidget,
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from ..config import AppConfig
from ..models import InputTurn, Session, Template
from ..persistence import LoadReport, save_api_key, save_session
from ..reconcile import reconcile
from ..send import CompletionOutcome, CompletionRequest, apply_outcome
from ..store import SettingsStore, StoreError
from .result_view import ResultView
from .settings_panel import SettingsPanel
from .template_panel import TemplatePanel
from .turn_editor import TurnEditor
from .workers import CompletionWorker

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(
        self,
        config: AppConfig,
        store: SettingsStore,
        session: Session,
        load_report: LoadReport | None = None,
    ) -> None:
        super().__init__()
        self._config = config
        self._store = store
        self._session = session
        self._pending: list[CompletionWorker] = []
        self._closing = False
        self._reconcile_scheduled = False

        self.setWindowTitle("OpenAI API Chat")
        self.resize(*config.window_size)

        self._settings_panel = SettingsPanel(session, self)
        self._settings_panel.api_key_submitted.connect(self._handle_api_key_submitted)

        self._turn_editor = TurnEditor(self)
        self._turn_editor.structure_changed.connect(self._schedule_reconcile)
        self._turn_editor.save_requested.connect(self._handle_save_template)

        add_button = QPushButton("+", self)
        add_button.setFixedWidth(36)
        add_button.clicked.connect(self._handle_add_turn)
        self._send_button = QPushButton("Send", self)
        self._send_button.clicked.connect(self.send)
        templates_button = QPushButton("Templates", self)

        buttons_row = QHBoxLayout()
        buttons_row.addWidget(add_button)
        buttons_row.addWidget(self._send_button)
        buttons_row.addStretch()
        buttons_row.addWidget(templates_button)

        self._status_label = QLabel("", self)
        self._status_label.setObjectName("StatusLabel")
        self._status_label.setWordWrap(True)

        self._result_view = ResultView(self)

        content = QWidget(self)
        layout = QVBoxLayout()
        layout.addWidget(self._settings_panel)
        layout.addWidget(self._turn_editor)
        layout.addWidget(_separator(content))
        layout.addLayout(buttons_row)
        layout.addWidget(self._status_label)
        layout.addWidget(_separator(content))
        layout.addWidget(self._result_view, stretch=1)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(10)
        content.setLayout(layout)

        scroll = QScrollArea(self)
        scroll.setWidgetResizable(True)
        scroll.setWidget(content)
        self.setCentralWidget(scroll)

        self._template_panel = TemplatePanel(self)
        self._template_panel.structure_changed.connect(self._schedule_reconcile)
        self._template_panel.load_requested.connect(self._handle_load_template)
        self._template_dock = QDockWidget("Template", self)
        self._template_dock.setWidget(self._template_panel)
        self.addDockWidget(Qt.RightDockWidgetArea, self._template_dock)
        self._template_dock.hide()
        templates_button.clicked.connect(self._template_dock.show)

        self._render()
        if load_report and load_report.warnings:
            self._status_label.setText("\n".join(load_report.warnings))

    @property
    def session(self) -> Session:
        return self._session

    # Actions ------------------------------------------------------------
    def send(self) -> None:
        request = CompletionRequest.snapshot(self._session)
        worker = CompletionWorker(request, self._config.client_options())
        # 複数送信しても止めない。最後に返ってきた結果が表示される
        worker.finished.connect(self._handle_outcome)
        self._pending.append(worker)
        logger.info("Dispatching request with %d message(s)", len(request.messages))
        self._refresh_status()
        worker.start()

    def _handle_outcome(self, outcome: CompletionOutcome) -> None:
        self._forget(self.sender())
        if self._closing:
            logger.debug("Discarding completion that arrived during shutdown")
            return
        apply_outcome(self._session, outcome)
        self._result_view.set_results(self._session.last_results, outcome.is_error)

    def _forget(self, worker: object) -> None:
        if worker not in self._pending:
            return
        self._pending.remove(worker)
        worker.deleteLater()
        self._refresh_status()

    def _handle_add_turn(self) -> None:
        self._session.add_turn()
        self._render_editors()

    def _handle_save_template(self, turn: InputTurn) -> None:
        self._session.save_template(turn)
        self._template_panel.set_templates(self._session.templates)

    def _handle_load_template(self, template: Template) -> None:
        self._session.load_template(template)
        self._render_editors()

    def _handle_api_key_submitted(self, raw_key: str) -> None:
        try:
            save_api_key(self._store, self._session, raw_key)
        except StoreError as exc:
            logger.error("Failed to save API key: %s", exc)
            self._status_label.setText(str(exc))
            return
        self._settings_panel.mark_api_key_saved()
        self._status_label.setText("API key saved.")

    # Reconciliation -----------------------------------------------------
    def _schedule_reconcile(self) -> None:
        # フラグは次のイベントループで反映する（ボタン処理中にウィジェットを作り直さない）
        if self._reconcile_scheduled:
            return
        self._reconcile_scheduled = True
        QTimer.singleShot(0, self._run_reconcile)

    def _run_reconcile(self) -> None:
        self._reconcile_scheduled = False
        self._session.turns, self._session.templates = reconcile(
            self._session.turns, self._session.templates
        )
        self._render_editors()

    def _render(self) -> None:
        self._render_editors()
        self._result_view.set_results(self._session.last_results)

    def _render_editors(self) -> None:
        self._turn_editor.set_turns(self._session.turns)
        self._template_panel.set_templates(self._session.templates)

    def _refresh_status(self) -> None:
        if self._pending:
            self._status_label.setText(f"Sending… ({len(self._pending)} pending)")
        elif self._status_label.text().startswith("Sending"):
            self._status_label.clear()

    # Shutdown -----------------------------------------------------------
    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802 - Qt override
        self._closing = True
        try:
            save_session(self._store, self._session)
        except StoreError as exc:
            logger.error("Failed to save session on exit: %s", exc)
        finally:
            self._store.close()
        super().closeEvent(event)


def _separator(parent: QWidget) -> QFrame:
    line = QFrame(parent)
    line.setFrameShape(QFrame.HLine)
    line.setFrameShadow(QFrame.Sunken)
    return line
