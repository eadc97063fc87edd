"""Process boundaries: the menu program, launching, PATH lookup, diagnostics."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Sequence

from ..cache import CacheStore, ensure_private_dir
from ..config import CURRENT_DIR_ENTRIES, Settings
from ..errors import LaunchError, MenuUnavailableError
from ..output import plural_suffix
from ..text import Messages
from .candidate_service import format_menu_input

logger = logging.getLogger(__name__)


class MenuPrompt(Protocol):
    def select(self, candidates: Sequence[str]) -> str:
        """Return the chosen line, or an empty string when cancelled."""


class ProcessLauncher(Protocol):
    def launch(self, path: str, name: str, args: Sequence[str]) -> None:
        """Start *path* with argv ``[name, *args]`` without waiting for it."""


class SubprocessMenu:
    """Run an external menu program, feeding candidates on its stdin."""

    def __init__(self, command: str, args: Sequence[str] = ()) -> None:
        self.command = command
        self.args = list(args)

    def select(self, candidates: Sequence[str]) -> str:
        try:
            completed = subprocess.run(
                [self.command, *self.args],
                input=format_menu_input(candidates),
                stdout=subprocess.PIPE,
                check=False,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as exc:
            raise MenuUnavailableError(self.command, exc.strerror or str(exc)) from exc
        if completed.returncode != 0:
            logger.debug("%s exited with status %s", self.command, completed.returncode)
        return (completed.stdout or "").strip()


class DetachedLauncher:
    """Spawn a child in its own session with stdin detached."""

    def launch(self, path: str, name: str, args: Sequence[str]) -> None:
        try:
            subprocess.Popen(
                [name, *args],
                executable=path,
                stdin=subprocess.DEVNULL,
                start_new_session=True,
                close_fds=True,
            )
        except OSError as exc:
            raise LaunchError(path, exc.strerror or str(exc)) from exc
        logger.debug("Launched %s with %d argument(s)", path, len(args))


def searchable_path(search_paths: Sequence[str]) -> str:
    return os.pathsep.join(
        entry for entry in search_paths if entry not in CURRENT_DIR_ENTRIES
    )


def resolve_executable(name: str, search_paths: Sequence[str]) -> Optional[str]:
    """Return the absolute path for *name* on *search_paths*, if any.

    Names containing a separator are accepted only when absolute, so nothing
    is ever resolved relative to the working directory.
    """

    if not name:
        return None
    if os.sep in name:
        if not os.path.isabs(name):
            return None
        if os.path.isfile(name) and os.access(name, os.X_OK):
            return name
        return None
    lookup = searchable_path(search_paths)
    if not lookup:
        return None
    found = shutil.which(name, path=lookup)
    if found is None:
        return None
    return os.path.abspath(found)


def split_selection(selection: str) -> tuple[str, list[str]]:
    """Split on literal spaces: first token is the program, the rest its args."""

    parts = selection.split(" ")
    return parts[0], parts[1:]


def find_command_on_path(command: str, search_paths: Sequence[str]) -> Optional[str]:
    """Return the resolved path for *command* if present on PATH."""

    return resolve_executable(command, search_paths)


@dataclass
class DoctorCheckResult:
    """Result of a single doctor check."""

    name: str
    passed: bool
    message: str
    detail: str | None = None


def check_menu_on_path(settings: Settings) -> DoctorCheckResult:
    """Check if the configured menu program is available on PATH."""
    path = find_command_on_path(settings.menu_command, settings.search_paths)
    if path:
        return DoctorCheckResult(
            name="Menu",
            passed=True,
            message=Messages.DOCTOR_MENU_FOUND.format(
                command=settings.menu_command, path=path
            ),
        )
    return DoctorCheckResult(
        name="Menu",
        passed=False,
        message=Messages.DOCTOR_MENU_MISSING.format(command=settings.menu_command),
        detail=Messages.DOCTOR_MENU_MISSING_DETAIL,
    )


def check_search_path(settings: Settings) -> DoctorCheckResult:
    count = len(settings.search_paths)
    if count:
        return DoctorCheckResult(
            name="PATH",
            passed=True,
            message=Messages.DOCTOR_PATH_OK.format(count=count, plural=plural_suffix(count)),
        )
    return DoctorCheckResult(
        name="PATH",
        passed=False,
        message=Messages.DOCTOR_PATH_EMPTY,
        detail=Messages.DOCTOR_PATH_EMPTY_DETAIL,
    )


def check_cache_directory(cache_dir: Path) -> DoctorCheckResult:
    """Check if cache directory exists and is writable."""

    if not cache_dir.exists():
        try:
            ensure_private_dir(cache_dir)
            return DoctorCheckResult(
                name="Cache Dir",
                passed=True,
                message=Messages.DOCTOR_CACHE_CREATED.format(path=cache_dir),
            )
        except OSError as exc:
            return DoctorCheckResult(
                name="Cache Dir",
                passed=False,
                message=Messages.DOCTOR_CACHE_CANNOT_CREATE.format(path=cache_dir),
                detail=str(exc),
            )

    test_file = cache_dir / ".doctor_test"
    try:
        test_file.write_text("test", encoding="utf-8")
        test_file.unlink()
        return DoctorCheckResult(
            name="Cache Dir",
            passed=True,
            message=Messages.DOCTOR_CACHE_WRITABLE.format(path=cache_dir),
        )
    except OSError as exc:
        return DoctorCheckResult(
            name="Cache Dir",
            passed=False,
            message=Messages.DOCTOR_CACHE_NOT_WRITABLE.format(path=cache_dir),
            detail=str(exc),
        )


def check_cache_file(store: CacheStore) -> DoctorCheckResult:
    """Report whether the cache file parses. A broken file is only a warning."""

    if not store.exists():
        return DoctorCheckResult(
            name="Cache File",
            passed=True,
            message=Messages.DOCTOR_CACHE_FILE_MISSING,
        )
    try:
        state = store.load_strict()
    except (OSError, UnicodeDecodeError, ValueError, KeyError, TypeError) as exc:
        return DoctorCheckResult(
            name="Cache File",
            passed=True,
            message=Messages.DOCTOR_CACHE_FILE_INVALID.format(path=store.path),
            detail=str(exc),
        )
    dirs = len(state.paths)
    history = len(state.history)
    return DoctorCheckResult(
        name="Cache File",
        passed=True,
        message=Messages.DOCTOR_CACHE_FILE_OK.format(
            dirs=dirs,
            plural=plural_suffix(dirs),
            history=history,
            hplural=plural_suffix(history),
        ),
    )


def run_all_doctor_checks(settings: Settings) -> list[DoctorCheckResult]:
    """Run all doctor checks and return results."""
    store = CacheStore(settings.cache_file)
    return [
        check_menu_on_path(settings),
        check_search_path(settings),
        check_cache_directory(settings.cache_dir),
        check_cache_file(store),
    ]
