from __future__ import annotations

from gorn.history import HistoryList, executable_name


def test_add_moves_existing_entry_to_front():
    history = HistoryList.from_iterable(["b", "a", "c"])

    history.add("a")

    assert history.to_list() == ["a", "b", "c"]


def test_add_twice_keeps_single_occurrence():
    history = HistoryList.from_iterable(["x", "y", "z"])

    history.add("w")
    history.add("w")

    assert history.to_list() == ["w", "x", "y", "z"]
    assert history.to_list().count("w") == 1


def test_lookup_stays_consistent_across_many_adds():
    history = HistoryList()
    for item in ["a", "b", "c", "b", "a", "d", "c"]:
        history.add(item)

    assert history.to_list() == ["c", "d", "a", "b"]
    for idx, item in enumerate(history):
        assert history.position(item) == idx
    assert history.build_lookup() == {"c": 0, "d": 1, "a": 2, "b": 3}


def test_membership_tracks_full_command_line():
    history = HistoryList()
    history.add("vim notes.txt")

    assert "vim notes.txt" in history
    assert "vim" not in history


def test_prune_drops_unresolved_and_preserves_order():
    history = HistoryList.from_iterable(["vim file.txt", "ghost arg", "ls -la"])

    dropped = history.prune(lambda name: name != "ghost")

    assert dropped == ["ghost arg"]
    assert history.to_list() == ["vim file.txt", "ls -la"]
    assert "ghost arg" not in history
    assert history.position("ls -la") == 1


def test_prune_asks_resolver_once_per_executable():
    history = HistoryList.from_iterable(["vim a", "vim b", "ls"])
    calls: list[str] = []

    def resolver(name: str) -> bool:
        calls.append(name)
        return True

    assert history.prune(resolver) == []
    assert sorted(calls) == ["ls", "vim"]


def test_from_iterable_drops_duplicates_and_empty_entries():
    history = HistoryList.from_iterable(["a", "", "b", "a"])

    assert history.to_list() == ["a", "b"]


def test_max_length_truncates_tail_on_add():
    history = HistoryList.from_iterable(["a", "b", "c"], max_length=3)

    history.add("d")

    assert history.to_list() == ["d", "a", "b"]
    assert "c" not in history


def test_clear_returns_count():
    history = HistoryList.from_iterable(["a", "b"])

    assert history.clear() == 2
    assert len(history) == 0
    assert "a" not in history


def test_executable_name_splits_on_first_space():
    assert executable_name("vim file.txt") == "vim"
    assert executable_name("ls") == "ls"
    assert executable_name("echo  two  spaces") == "echo"
