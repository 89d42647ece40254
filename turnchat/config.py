from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .completion_client import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT_SEC
from .settings import (
    get_float_setting,
    get_int_setting,
    get_str_setting,
    load_settings,
    resolve_path_setting,
)

HOME_ENV_VAR = "TURNCHAT_HOME"
DEFAULT_HOME_DIRNAME = ".turnchat"
DEFAULT_STORE_FILENAME = "chat.db"


@dataclass(frozen=True)
class AppPaths:
    root: Path

    @property
    def default_store_path(self) -> Path:
        return self.root / DEFAULT_STORE_FILENAME


def default_root() -> Path:
    override = os.getenv(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser().resolve()
    return (Path.home() / DEFAULT_HOME_DIRNAME).resolve()


@dataclass
class AppConfig:
    """Application-wide configuration passed explicitly to the components."""

    root: Path | None = None
    paths: AppPaths = field(init=False)
    settings: dict[str, Any] = field(init=False)

    def __post_init__(self) -> None:
        root = Path(self.root).expanduser().resolve() if self.root else default_root()
        root.mkdir(parents=True, exist_ok=True)
        self.root = root
        self.paths = AppPaths(root=root)
        self.settings = load_settings(root)

    @property
    def api_endpoint(self) -> str:
        return get_str_setting(self.settings, "api.endpoint", DEFAULT_ENDPOINT)

    @property
    def request_timeout(self) -> float:
        timeout = get_float_setting(self.settings, "api.timeout_sec", DEFAULT_TIMEOUT_SEC)
        return timeout if timeout > 0 else DEFAULT_TIMEOUT_SEC

    @property
    def store_path(self) -> Path:
        return resolve_path_setting(self.settings, "store.path", self.paths.root) or self.paths.default_store_path

    @property
    def log_level(self) -> str:
        return get_str_setting(self.settings, "logging.level", "INFO").upper()

    @property
    def window_size(self) -> tuple[int, int]:
        return (
            get_int_setting(self.settings, "window.width", 900),
            get_int_setting(self.settings, "window.height", 760),
        )

    def client_options(self) -> dict[str, Any]:
        return {"endpoint": self.api_endpoint, "timeout": self.request_timeout}
