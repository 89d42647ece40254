from __future__ import annotations

import json
import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "turnchat_settings.json"

DEFAULT_SETTINGS: dict[str, Any] = {
    "api": {
        "endpoint": "https://api.openai.com/v1/chat/completions",
        "timeout_sec": 120.0,
    },
    "store": {
        "path": "chat.db",
    },
    "logging": {
        "level": "INFO",
    },
    "window": {
        "width": 900,
        "height": 760,
    },
}


def settings_path(root: Path) -> Path:
    return root / SETTINGS_FILENAME


def load_settings(root: Path) -> dict[str, Any]:
    path = settings_path(root)
    if not path.exists():
        return deepcopy(DEFAULT_SETTINGS)

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Ignoring unreadable config file %s", path)
        return deepcopy(DEFAULT_SETTINGS)

    if not isinstance(payload, Mapping):
        logger.warning("Ignoring config file %s: top level is not an object", path)
        return deepcopy(DEFAULT_SETTINGS)
    return _deep_merge(DEFAULT_SETTINGS, payload)


def get_setting(settings: Mapping[str, Any], dotted_key: str, default: Any = None) -> Any:
    current: Any = settings
    for part in dotted_key.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current


def get_int_setting(settings: Mapping[str, Any], dotted_key: str, default: int) -> int:
    value = get_setting(settings, dotted_key, default)
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def get_float_setting(settings: Mapping[str, Any], dotted_key: str, default: float) -> float:
    value = get_setting(settings, dotted_key, default)
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def get_str_setting(settings: Mapping[str, Any], dotted_key: str, default: str) -> str:
    value = get_setting(settings, dotted_key, default)
    if not isinstance(value, str) or not value.strip():
        return default
    return value


def resolve_path_setting(settings: Mapping[str, Any], dotted_key: str, root: Path) -> Path | None:
    value = get_setting(settings, dotted_key)
    if not isinstance(value, str) or not value.strip():
        return None
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = (root / path).resolve()
    else:
        path = path.resolve()
    return path


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged
