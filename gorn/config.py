"""Configuration management for gorn.

Two layers live here: ``Settings``, derived from an explicit environment
mapping (``HOME``, ``PATH``, ``XDG_CACHE_HOME``, ``XDG_CONFIG_HOME``), and
``Config``, the small set of user preferences persisted in ``config.json``.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

APP_NAME = "gorn"
CACHE_FILENAME = "cache.json"
CONFIG_FILENAME = "config.json"
DEFAULT_MENU = "dmenu"
DEFAULT_HISTORY_LIMIT = 1000
CURRENT_DIR_ENTRIES = frozenset({".", ""})
LOG_LEVEL_ENV = "GORN_LOG_LEVEL"

# None means "derive from the environment"; tests patch these directly.
CONFIG_DIR: Path | None = None
CACHE_DIR: Path | None = None
_CONFIG_DIR_OVERRIDE: ContextVar[Path | None] = ContextVar(
    "gorn_config_dir_override",
    default=None,
)


@dataclass
class Config:
    menu: str = DEFAULT_MENU
    history_limit: int = DEFAULT_HISTORY_LIMIT


@dataclass(frozen=True)
class Settings:
    """Everything a session needs from the process environment."""

    cache_dir: Path
    search_paths: tuple[str, ...]
    menu_command: str = DEFAULT_MENU
    history_limit: int = DEFAULT_HISTORY_LIMIT

    @property
    def cache_file(self) -> Path:
        return self.cache_dir / CACHE_FILENAME


def _home_dir(env: Mapping[str, str]) -> Path:
    home = (env.get("HOME") or "").strip()
    if home:
        return Path(home)
    return Path(os.path.expanduser("~"))


def resolve_cache_dir(env: Mapping[str, str] | None = None) -> Path:
    """Return ``$XDG_CACHE_HOME/gorn`` or ``$HOME/.cache/gorn``."""

    if env is None:
        if CACHE_DIR is not None:
            return CACHE_DIR
        env = os.environ
    xdg = (env.get("XDG_CACHE_HOME") or "").strip()
    if xdg:
        return Path(xdg) / APP_NAME
    return _home_dir(env) / ".cache" / APP_NAME


def resolve_config_dir(env: Mapping[str, str] | None = None) -> Path:
    """Return ``$XDG_CONFIG_HOME/gorn`` or ``$HOME/.config/gorn``."""

    override = _CONFIG_DIR_OVERRIDE.get()
    if override is not None:
        return override
    if env is None:
        if CONFIG_DIR is not None:
            return CONFIG_DIR
        env = os.environ
    xdg = (env.get("XDG_CONFIG_HOME") or "").strip()
    if xdg:
        return Path(xdg) / APP_NAME
    return _home_dir(env) / ".config" / APP_NAME


def config_file_path(env: Mapping[str, str] | None = None) -> Path:
    return resolve_config_dir(env) / CONFIG_FILENAME


@contextmanager
def config_dir_context(path: Path | str | None):
    """Temporarily override the config directory for the current context."""

    if path is None:
        yield
        return
    dir_path = Path(path).expanduser().resolve()
    if dir_path.exists() and not dir_path.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {dir_path}")
    token = _CONFIG_DIR_OVERRIDE.set(dir_path)
    try:
        yield
    finally:
        _CONFIG_DIR_OVERRIDE.reset(token)


def split_search_path(value: str | None) -> tuple[str, ...]:
    """Split a ``PATH`` value, dropping current-directory and repeated entries."""

    if not value:
        return ()
    seen: set[str] = set()
    result: list[str] = []
    for entry in value.split(os.pathsep):
        if entry in CURRENT_DIR_ENTRIES or entry in seen:
            continue
        seen.add(entry)
        result.append(entry)
    return tuple(result)


def _coerce_history_limit(raw: object) -> int:
    try:
        value = int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return DEFAULT_HISTORY_LIMIT
    return value if value >= 0 else DEFAULT_HISTORY_LIMIT


def load_config(path: Path | None = None) -> Config:
    config_file = path or config_file_path()
    if not config_file.exists():
        return Config()
    raw = json.loads(config_file.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError("config root must be a JSON object")
    return Config(
        menu=(raw.get("menu") or "").strip() or DEFAULT_MENU,
        history_limit=_coerce_history_limit(
            raw.get("history_limit", DEFAULT_HISTORY_LIMIT)
        ),
    )


def save_config(config: Config, path: Path | None = None) -> Path:
    config_file = path or config_file_path()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    data: Dict[str, Any] = {}
    if config.menu and config.menu != DEFAULT_MENU:
        data["menu"] = config.menu
    data["history_limit"] = config.history_limit
    config_file.write_text(
        json.dumps(data, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    return config_file


def set_menu(value: str | None) -> Config:
    config = load_config()
    config.menu = (value or "").strip() or DEFAULT_MENU
    save_config(config)
    return config


def settings_from_env(
    env: Mapping[str, str] | None = None,
    config: Config | None = None,
) -> Settings:
    """Build session settings from *env* (defaults to ``os.environ``)."""

    source = os.environ if env is None else env
    effective = config if config is not None else Config()
    return Settings(
        cache_dir=resolve_cache_dir(env),
        search_paths=split_search_path(source.get("PATH")),
        menu_command=effective.menu or DEFAULT_MENU,
        history_limit=effective.history_limit,
    )
