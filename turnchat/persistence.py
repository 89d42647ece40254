"""Mapping between the in-memory :class:`Session` and the settings store.

Each persisted value lives under a fixed key with its own encoding. A value
that cannot be decoded is replaced by the key's default and reported as a
warning instead of aborting startup.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from .models import (
    ChatModel,
    DEFAULT_TEMPERATURE,
    InputTurn,
    Session,
    Settings,
    Template,
    is_valid_temperature,
)
from .store import SettingsStore

logger = logging.getLogger(__name__)

KEY_API_KEY = "api_key"
KEY_MODEL = "model"
KEY_TEMPERATURE = "temperature"
KEY_LAST_RESULT = "last_result"
KEY_USER_INPUT = "user_input"
KEY_TEMPLATE = "template"

T = TypeVar("T")


@dataclass
class LoadReport:
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings


# Encoders -----------------------------------------------------------------
def encode_api_key(value: str) -> bytes:
    return value.encode("utf-8")


def encode_model(value: ChatModel) -> bytes:
    return _dump_json(value.identifier)


def encode_temperature(value: float) -> bytes:
    return repr(float(value)).encode("utf-8")


def encode_results(value: list[str]) -> bytes:
    return _dump_json(list(value))


def encode_turns(value: list[InputTurn]) -> bytes:
    return _dump_json([turn.to_dict() for turn in value])


def encode_templates(value: list[Template]) -> bytes:
    return _dump_json([template.to_dict() for template in value])


# Decoders -----------------------------------------------------------------
def decode_api_key(raw: bytes) -> str:
    return raw.decode("utf-8")


def decode_model(raw: bytes) -> ChatModel:
    identifier = _load_json(raw)
    if not isinstance(identifier, str):
        raise ValueError("model must be a JSON string")
    return ChatModel.from_identifier(identifier)


def decode_temperature(raw: bytes) -> float:
    value = float(raw.decode("utf-8"))
    if not is_valid_temperature(value):
        raise ValueError(f"temperature out of range: {value}")
    return value


def decode_results(raw: bytes) -> list[str]:
    payload = _load_json(raw)
    if not isinstance(payload, list) or not all(isinstance(item, str) for item in payload):
        raise ValueError("last results must be a list of strings")
    return payload


def decode_turns(raw: bytes) -> list[InputTurn]:
    return [InputTurn.from_dict(item) for item in _load_list(raw)]


def decode_templates(raw: bytes) -> list[Template]:
    return [Template.from_dict(item) for item in _load_list(raw)]


# Session level ------------------------------------------------------------
def load_session(store: SettingsStore) -> tuple[Session, LoadReport]:
    report = LoadReport()
    settings = Settings(
        model=_load_key(store, KEY_MODEL, decode_model, ChatModel.default, report),
        temperature=_load_key(store, KEY_TEMPERATURE, decode_temperature, lambda: DEFAULT_TEMPERATURE, report),
        api_key=_load_key(store, KEY_API_KEY, decode_api_key, str, report),
    )
    session = Session(
        turns=_load_key(store, KEY_USER_INPUT, decode_turns, lambda: [InputTurn()], report),
        templates=_load_key(store, KEY_TEMPLATE, decode_templates, list, report),
        settings=settings,
        last_results=_load_key(store, KEY_LAST_RESULT, decode_results, list, report),
    )
    return session, report


def save_session(store: SettingsStore, session: Session) -> None:
    """Write every persisted value except the API key, then flush."""

    store.save(KEY_TEMPERATURE, encode_temperature(session.settings.temperature))
    store.save(KEY_MODEL, encode_model(session.settings.model))
    store.save(KEY_LAST_RESULT, encode_results(session.last_results))
    store.save(KEY_USER_INPUT, encode_turns(session.turns))
    store.save(KEY_TEMPLATE, encode_templates(session.templates))
    store.flush()
    logger.info(
        "Saved session: %d turn(s), %d template(s), %d result(s)",
        len(session.turns),
        len(session.templates),
        len(session.last_results),
    )


def save_api_key(store: SettingsStore, session: Session, raw_key: str) -> str:
    api_key = raw_key.strip()
    store.save(KEY_API_KEY, encode_api_key(api_key))
    store.flush()
    session.settings.api_key = api_key
    logger.info("API key updated")
    return api_key


def _load_key(
    store: SettingsStore,
    key: str,
    decoder: Callable[[bytes], T],
    default: Callable[[], T],
    report: LoadReport,
) -> T:
    raw = store.load(key)
    if raw is None:
        return default()
    try:
        return decoder(raw)
    except (UnicodeDecodeError, ValueError, TypeError) as exc:
        logger.warning("Stored value for %r is invalid (%s); using default.", key, exc)
        report.warnings.append(f"Stored value for '{key}' is invalid ({exc}); using default.")
        return default()


def _dump_json(value: Any) -> bytes:
    return json.dumps(value, ensure_ascii=False).encode("utf-8")


def _load_json(raw: bytes) -> Any:
    # json.JSONDecodeError は ValueError のサブクラス
    return json.loads(raw.decode("utf-8"))


def _load_list(raw: bytes) -> list:
    payload = _load_json(raw)
    if not isinstance(payload, list):
        raise ValueError("expected a JSON list")
    return payload
