"""Tests for the Qt layer that need a (headless) QApplication."""
import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PySide6.QtWidgets")

from turnchat import main as main_module  # noqa: E402
from turnchat.config import AppConfig  # noqa: E402
from turnchat.models import Session  # noqa: E402
from turnchat.ui.settings_panel import SLIDER_SCALE, SettingsPanel  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


class TestSettingsPanel:
    """Tests for temperature handling in the settings panel."""

    def test_slider_updates_session(self, qapp):
        """Test that moving the slider goes through the session setter."""
        session = Session()
        panel = SettingsPanel(session)

        panel._slider.setValue(35)

        assert session.settings.temperature == 35 / SLIDER_SCALE

    def test_reset_restores_default(self, qapp):
        """Test that reset restores 1.0 even when the slider already shows it."""
        session = Session()
        session.set_temperature(1.004)
        panel = SettingsPanel(session)

        panel._handle_reset()

        assert session.settings.temperature == 1.0
        assert panel._slider.value() == SLIDER_SCALE


class FakeApplication:
    def __init__(self, argv):
        self.stylesheet = None

    def setStyleSheet(self, stylesheet):  # noqa: N802 - mirrors Qt
        self.stylesheet = stylesheet

    def exec(self):
        return 0


class RecordingMessageBox:
    messages = []

    @classmethod
    def critical(cls, parent, title, text):
        cls.messages.append((title, text))


class TestMain:
    """Tests for startup failures."""

    def test_corrupt_store_shows_message_and_exits(self, tmp_path, monkeypatch):
        """Test that an unreadable database ends with a dialog, not a traceback."""
        (tmp_path / "chat.db").write_bytes(b"this is not a sqlite database" * 64)
        RecordingMessageBox.messages = []
        monkeypatch.setattr(main_module, "AppConfig", lambda: AppConfig(tmp_path))
        monkeypatch.setattr(main_module, "QApplication", FakeApplication)
        monkeypatch.setattr(main_module, "QMessageBox", RecordingMessageBox)

        with pytest.raises(SystemExit) as excinfo:
            main_module.main()

        assert excinfo.value.code == 1
        assert len(RecordingMessageBox.messages) == 1
        assert "chat.db" in RecordingMessageBox.messages[0][1]
