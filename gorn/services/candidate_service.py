"""Build the newline-delimited list offered to the menu program."""

from __future__ import annotations

from typing import Sequence

from ..cache import PathCache
from ..history import HistoryList


def build_candidates(
    history: HistoryList,
    paths: PathCache,
    search_paths: Sequence[str] | None = None,
) -> list[str]:
    """Return history entries (MRU order) followed by unseen executables.

    Executables found in several directories appear once. When *search_paths*
    is given, cached directories that are no longer on it do not contribute.
    This narrowing is deliberate: a directory dropped from PATH stays in the
    cache file, but its programs could not be resolved, so they are not offered.
    """

    candidates = history.to_list()
    unseen = sorted(
        name for name in paths.executables(search_paths) if name not in history
    )
    candidates.extend(unseen)
    return candidates


def format_menu_input(candidates: Sequence[str]) -> str:
    return "\n".join(candidates)
