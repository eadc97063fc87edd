"""One launcher session: load, refresh, prompt, launch, remember, save."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

from ..cache import CacheState, CacheStore
from ..config import Settings
from ..errors import SelectionCancelled, UnresolvedExecutableError
from .candidate_service import build_candidates
from .system_service import (
    MenuPrompt,
    ProcessLauncher,
    resolve_executable,
    split_selection,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SessionResult:
    selection: str
    path: str
    args: list[str]
    rescanned: list[str] = field(default_factory=list)
    pruned: list[str] = field(default_factory=list)


class SessionRunner:
    """Drive a single pass of the launcher.

    Nothing is written back unless the selection resolved and the child was
    spawned; cancellation and resolution failures leave the cache file as it
    was. A failed write after a successful launch is logged, not raised.
    """

    def __init__(
        self,
        settings: Settings,
        prompt: MenuPrompt,
        launcher: ProcessLauncher,
        *,
        store: CacheStore | None = None,
        resolver: Callable[[str], str | None] | None = None,
    ) -> None:
        self.settings = settings
        self.prompt = prompt
        self.launcher = launcher
        self.store = store or CacheStore(
            settings.cache_file,
            history_limit=settings.history_limit,
        )
        self._resolver = resolver or self._resolve_on_search_path

    def _resolve_on_search_path(self, name: str) -> str | None:
        return resolve_executable(name, self.settings.search_paths)

    def resolve(self, name: str) -> str | None:
        return self._resolver(name)

    def load(self) -> CacheState:
        return self.store.load()

    def refresh(self, state: CacheState) -> list[str]:
        return state.paths.refresh(self.settings.search_paths)

    def candidates(self, state: CacheState) -> list[str]:
        return build_candidates(state.history, state.paths, self.settings.search_paths)

    def run(self) -> SessionResult:
        state = self.load()
        rescanned = self.refresh(state)
        candidates = self.candidates(state)
        logger.debug("Offering %d candidates to %s", len(candidates), self.settings.menu_command)

        selection = self.prompt.select(candidates).strip()
        if not selection:
            raise SelectionCancelled()

        name, args = split_selection(selection)
        path = self.resolve(name)
        if path is None:
            raise UnresolvedExecutableError(name)

        self.launcher.launch(path, name, args)

        state.history.add(selection)
        pruned = self.prune(state)
        try:
            self.store.save(state)
        except OSError as exc:
            logger.warning("Launched %s but could not save %s: %s", name, self.store.path, exc)
        return SessionResult(
            selection=selection,
            path=path,
            args=args,
            rescanned=rescanned,
            pruned=pruned,
        )

    def prune(self, state: CacheState) -> list[str]:
        pruned = state.history.prune(lambda name: self.resolve(name) is not None)
        if pruned:
            logger.debug("Pruned %d stale history entries", len(pruned))
        return pruned


def refresh_and_save(settings: Settings, store: CacheStore | None = None) -> list[str]:
    """Refresh the PATH index without prompting and persist it."""

    target = store or CacheStore(settings.cache_file, history_limit=settings.history_limit)
    state = target.load()
    rescanned = state.paths.refresh(settings.search_paths)
    target.save(state)
    return rescanned


def prune_history(settings: Settings, store: CacheStore | None = None) -> list[str]:
    target = store or CacheStore(settings.cache_file, history_limit=settings.history_limit)
    state = target.load()
    pruned = state.history.prune(
        lambda name: resolve_executable(name, settings.search_paths) is not None
    )
    if pruned:
        target.save(state)
    return pruned


def clear_history(settings: Settings, store: CacheStore | None = None) -> int:
    target = store or CacheStore(settings.cache_file, history_limit=settings.history_limit)
    state = target.load()
    count = state.history.clear()
    if count:
        target.save(state)
    return count


def history_entries(settings: Settings, store: CacheStore | None = None) -> Sequence[str]:
    target = store or CacheStore(settings.cache_file, history_limit=settings.history_limit)
    return target.load().history.to_list()
