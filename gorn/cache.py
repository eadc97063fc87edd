"""PATH index cache for gorn backed by a single JSON file."""

from __future__ import annotations

import json
import logging
import os
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Iterator, Mapping, Sequence

from .config import CURRENT_DIR_ENTRIES
from .history import HistoryList

logger = logging.getLogger(__name__)

CACHE_VERSION = 1
EXECUTABLE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH

StatFunc = Callable[[str], os.stat_result]


@dataclass(slots=True)
class PathIndex:
    directory: str
    executables: list[str] = field(default_factory=list)
    mtime: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "directory": self.directory,
            "executables": list(self.executables),
            "mtime": self.mtime,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, object]) -> "PathIndex":
        directory = raw["directory"]
        executables = raw.get("executables") or []
        mtime = raw.get("mtime", 0)
        if not isinstance(directory, str) or not isinstance(executables, list):
            raise ValueError("malformed path index")
        if not all(isinstance(name, str) for name in executables):
            raise ValueError("malformed executable list")
        return cls(directory=directory, executables=list(executables), mtime=int(mtime))


def _mtime_of(st: os.stat_result) -> int:
    return int(st.st_mtime)


def is_executable_mode(mode: int) -> bool:
    return not stat.S_ISDIR(mode) and bool(mode & EXECUTABLE_BITS)


def _is_utf8_name(name: str) -> bool:
    try:
        os.fsencode(name).decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True


def scan_directory(directory: str, mtime: int | None = None) -> PathIndex:
    """List the executable, non-directory entries directly inside *directory*.

    A missing or unreadable directory yields an empty index instead of an
    error. Symlinks are followed; dangling links are skipped, as are names
    that are not valid UTF-8 since they cannot be offered to the menu.
    """

    if mtime is None:
        try:
            mtime = _mtime_of(os.stat(directory))
        except OSError:
            mtime = 0
    names: list[str] = []
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                if not _is_utf8_name(entry.name):
                    logger.debug("Skipping non-UTF-8 name %r in %s", entry.name, directory)
                    continue
                try:
                    mode = entry.stat(follow_symlinks=True).st_mode
                except OSError:
                    continue
                if is_executable_mode(mode):
                    names.append(entry.name)
    except OSError as exc:
        logger.debug("Unable to scan %s: %s", directory, exc)
        return PathIndex(directory=directory, executables=[], mtime=mtime)
    names.sort()
    return PathIndex(directory=directory, executables=names, mtime=mtime)


class PathCache:
    """Directory -> PathIndex mapping refreshed lazily by modification time."""

    def __init__(
        self,
        entries: Mapping[str, PathIndex] | None = None,
        *,
        scanner: Callable[[str, int], PathIndex] | None = None,
        stat_func: StatFunc | None = None,
    ) -> None:
        self._entries: dict[str, PathIndex] = dict(entries or {})
        self._scanner = scanner or scan_directory
        self._stat = stat_func or os.stat

    def __contains__(self, directory: object) -> bool:
        return directory in self._entries

    def __getitem__(self, directory: str) -> PathIndex:
        return self._entries[directory]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, directory: str) -> PathIndex | None:
        return self._entries.get(directory)

    def items(self):
        return self._entries.items()

    def refresh(self, search_paths: Iterable[str]) -> list[str]:
        """Rescan every directory whose mtime changed; return the rescanned ones.

        Directories that cannot be stat'ed keep whatever entry they had.
        Equal mtimes are trusted without looking at the directory contents.
        """

        rescanned: list[str] = []
        seen: set[str] = set()
        for directory in search_paths:
            if directory in CURRENT_DIR_ENTRIES or directory in seen:
                continue
            seen.add(directory)
            try:
                mtime = _mtime_of(self._stat(directory))
            except OSError as exc:
                logger.debug("Skipping unreadable PATH entry %s: %s", directory, exc)
                continue
            cached = self._entries.get(directory)
            if cached is not None and cached.mtime == mtime:
                continue
            self._entries[directory] = self._scanner(directory, mtime)
            rescanned.append(directory)
        if rescanned:
            logger.debug("Rescanned %d PATH directories", len(rescanned))
        return rescanned

    def executables(self, directories: Sequence[str] | None = None) -> Iterator[str]:
        """Yield executable names once each, across *directories* (default all)."""

        keys = self._entries.keys() if directories is None else directories
        seen: set[str] = set()
        for directory in keys:
            index = self._entries.get(directory)
            if index is None:
                continue
            for name in index.executables:
                if name in seen:
                    continue
                seen.add(name)
                yield name

    def to_dict(self) -> dict[str, dict[str, object]]:
        return {key: value.to_dict() for key, value in self._entries.items()}

    @classmethod
    def from_dict(cls, raw: Mapping[str, object], **kwargs) -> "PathCache":
        entries: dict[str, PathIndex] = {}
        for key, value in raw.items():
            if not isinstance(value, Mapping):
                raise ValueError(f"malformed entry for {key!r}")
            entries[key] = PathIndex.from_dict(value)
        return cls(entries, **kwargs)


@dataclass
class CacheState:
    """Root aggregate persisted between runs."""

    paths: PathCache = field(default_factory=PathCache)
    history: HistoryList = field(default_factory=HistoryList)

    def to_dict(self) -> dict[str, object]:
        return {
            "version": CACHE_VERSION,
            "paths": self.paths.to_dict(),
            "history": self.history.to_list(),
        }

    @classmethod
    def from_dict(
        cls,
        raw: Mapping[str, object],
        *,
        history_limit: int | None = None,
    ) -> "CacheState":
        if raw.get("version") != CACHE_VERSION:
            raise ValueError(f"unsupported cache version {raw.get('version')!r}")
        paths_raw = raw.get("paths") or {}
        history_raw = raw.get("history") or []
        if not isinstance(paths_raw, Mapping) or not isinstance(history_raw, list):
            raise ValueError("malformed cache document")
        if not all(isinstance(item, str) for item in history_raw):
            raise ValueError("history entries must be strings")
        return cls(
            paths=PathCache.from_dict(paths_raw),
            history=HistoryList.from_iterable(history_raw, max_length=history_limit),
        )


class CacheStore:
    """Reads and writes the cache aggregate at one fixed file location."""

    def __init__(self, path: Path, *, history_limit: int | None = None) -> None:
        self.path = Path(path)
        self.history_limit = history_limit

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> CacheState:
        """Return the persisted state, or an empty one if missing or corrupt."""

        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return self._empty()
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Ignoring unreadable cache %s: %s", self.path, exc)
            return self._empty()
        try:
            raw = json.loads(text)
            if not isinstance(raw, dict):
                raise ValueError("cache root must be a JSON object")
            return CacheState.from_dict(raw, history_limit=self.history_limit)
        except (ValueError, KeyError, TypeError) as exc:
            logger.debug("Ignoring corrupt cache %s: %s", self.path, exc)
            return self._empty()

    def load_strict(self) -> CacheState:
        """Like :meth:`load` but propagate parse errors (used by diagnostics)."""

        raw = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError("cache root must be a JSON object")
        return CacheState.from_dict(raw, history_limit=self.history_limit)

    def save(self, state: CacheState) -> Path:
        ensure_private_dir(self.path.parent)
        payload = json.dumps(state.to_dict(), ensure_ascii=False, separators=(",", ":"))
        tmp_path = self.path.with_name(f".{self.path.name}.tmp")
        try:
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except (OSError, UnicodeEncodeError):
            tmp_path.unlink(missing_ok=True)
            raise
        return self.path

    def clear(self) -> bool:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        return True

    def _empty(self) -> CacheState:
        return CacheState(history=HistoryList(max_length=self.history_limit))


def ensure_private_dir(path: Path) -> Path:
    """Create *path* with owner-only permissions when it does not exist."""

    if not path.exists():
        path.mkdir(mode=0o700, parents=True, exist_ok=True)
    return path
