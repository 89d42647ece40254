from __future__ import annotations

import logging
import sys
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _package_root() -> Path:
    """Return the base directory for bundled/static resources."""

    base = getattr(sys, "_MEIPASS", None)
    if base:
        # PyInstaller で固めた場合は一時展開ディレクトリを指す
        return Path(base).resolve()
    return Path(__file__).resolve().parent.parent


def resource_path(*relative_parts: str) -> Path:
    """Resolve a resource path that works for PyInstaller bundles as well."""

    if not relative_parts:
        return _package_root()
    return _package_root().joinpath(*relative_parts)


def load_stylesheet(name: str = "turnchat.qss") -> str:
    path = resource_path("turnchat", "assets", name)
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.warning("Stylesheet %s not loaded: %s", path, exc)
        return ""
