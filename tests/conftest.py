"""Pytest configuration and shared fixtures."""
import io
import json
from urllib.error import HTTPError

import pytest

from turnchat.store import SettingsStore


class FakeResponse(io.BytesIO):
    """Minimal stand-in for the object returned by ``urlopen``."""

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class RecordingOpener:
    """Replacement for ``urlopen`` that records requests and replays a body."""

    def __init__(self, body: bytes = b"", status: int = 200, error: Exception | None = None):
        self.body = body
        self.status = status
        self.error = error
        self.requests = []
        self.timeouts = []

    def __call__(self, request, timeout=None):
        self.requests.append(request)
        self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error
        if self.status >= 400:
            raise HTTPError(request.full_url, self.status, "error", {}, io.BytesIO(self.body))
        return FakeResponse(self.body)

    @property
    def last_payload(self) -> dict:
        return json.loads(self.requests[-1].data.decode("utf-8"))


@pytest.fixture
def opener(monkeypatch):
    """Patch the completion client's ``urlopen`` and return the recorder."""
    recorder = RecordingOpener()
    monkeypatch.setattr("turnchat.completion_client.urlopen", recorder)
    return recorder


@pytest.fixture
def store(tmp_path):
    """Return an open settings store in a temporary directory."""
    with SettingsStore(tmp_path / "chat.db") as settings_store:
        yield settings_store
