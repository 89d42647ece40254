from __future__ import annotations

import threading
from typing import Any

from PySide6.QtCore import QObject, Signal

from ..send import CompletionOutcome, CompletionRequest, run_request


class CompletionWorker(QObject):
    finished = Signal(object)

    def __init__(self, request: CompletionRequest, client_options: dict[str, Any] | None = None) -> None:
        super().__init__()
        self._request = request
        self._client_options = dict(client_options or {})
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        # 終了時に通信の完了を待たないよう daemon スレッドで実行する
        self._thread = threading.Thread(target=self.run, name="completion-request", daemon=True)
        self._thread.start()

    def run(self) -> None:
        # シグナルは GUI スレッドのスロットへキュー経由で届く
        outcome: CompletionOutcome = run_request(self._request, **self._client_options)
        self.finished.emit(outcome)
