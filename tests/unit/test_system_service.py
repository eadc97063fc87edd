from __future__ import annotations

import subprocess
from pathlib import Path
from types import SimpleNamespace

import pytest

from gorn.cache import CacheState, CacheStore, PathCache, PathIndex
from gorn.config import Settings
from gorn.errors import LaunchError, MenuUnavailableError
from gorn.services import system_service


def _make_exec(directory: Path, name: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text("#!/bin/sh\n", encoding="utf-8")
    path.chmod(0o755)
    return path


def test_resolve_executable_finds_on_search_path(tmp_path):
    tool = _make_exec(tmp_path / "bin", "tool")

    assert system_service.resolve_executable("tool", [str(tmp_path / "bin")]) == str(tool)


def test_resolve_executable_ignores_current_directory(tmp_path, monkeypatch):
    _make_exec(tmp_path, "local-tool")
    monkeypatch.chdir(tmp_path)

    assert system_service.resolve_executable("local-tool", [".", ""]) is None
    assert system_service.resolve_executable("./local-tool", [str(tmp_path)]) is None


def test_resolve_executable_accepts_absolute_paths(tmp_path):
    tool = _make_exec(tmp_path / "opt", "abs-tool")
    plain = tmp_path / "opt" / "plain.txt"
    plain.write_text("x")

    assert system_service.resolve_executable(str(tool), []) == str(tool)
    assert system_service.resolve_executable(str(plain), []) is None


def test_resolve_executable_missing(tmp_path):
    assert system_service.resolve_executable("nope", [str(tmp_path)]) is None
    assert system_service.resolve_executable("", [str(tmp_path)]) is None


def test_split_selection_uses_literal_spaces():
    assert system_service.split_selection("vim file.txt") == ("vim", ["file.txt"])
    assert system_service.split_selection("ls") == ("ls", [])
    assert system_service.split_selection('echo "a b"') == ("echo", ['"a', 'b"'])
    assert system_service.split_selection("echo  x") == ("echo", ["", "x"])


def test_subprocess_menu_feeds_candidates_and_strips_output(monkeypatch):
    captured = {}

    def fake_run(cmd, **kwargs):
        captured["cmd"] = cmd
        captured["input"] = kwargs["input"]
        return SimpleNamespace(returncode=0, stdout="  firefox --private \n")

    monkeypatch.setattr(system_service.subprocess, "run", fake_run)

    menu = system_service.SubprocessMenu("dmenu", ["-i", "-l", "10"])
    selection = menu.select(["firefox", "vim"])

    assert selection == "firefox --private"
    assert captured["cmd"] == ["dmenu", "-i", "-l", "10"]
    assert captured["input"] == "firefox\nvim"


def test_subprocess_menu_cancel_returns_empty(monkeypatch):
    monkeypatch.setattr(
        system_service.subprocess,
        "run",
        lambda cmd, **kwargs: SimpleNamespace(returncode=1, stdout=""),
    )

    assert system_service.SubprocessMenu("dmenu").select(["a"]) == ""


def test_subprocess_menu_missing_program_raises(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise FileNotFoundError(2, "No such file or directory")

    monkeypatch.setattr(system_service.subprocess, "run", fake_run)

    with pytest.raises(MenuUnavailableError) as exc:
        system_service.SubprocessMenu("no-menu").select([])
    assert exc.value.command == "no-menu"


def test_detached_launcher_starts_new_session(monkeypatch):
    captured = {}

    def fake_popen(argv, **kwargs):
        captured["argv"] = argv
        captured.update(kwargs)
        return SimpleNamespace(pid=1234)

    monkeypatch.setattr(system_service.subprocess, "Popen", fake_popen)

    system_service.DetachedLauncher().launch("/usr/bin/vim", "vim", ["notes.txt"])

    assert captured["argv"] == ["vim", "notes.txt"]
    assert captured["executable"] == "/usr/bin/vim"
    assert captured["start_new_session"] is True
    assert captured["stdin"] is subprocess.DEVNULL
    assert "stdout" not in captured


def test_detached_launcher_wraps_spawn_errors(monkeypatch):
    def fake_popen(argv, **kwargs):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(system_service.subprocess, "Popen", fake_popen)

    with pytest.raises(LaunchError) as exc:
        system_service.DetachedLauncher().launch("/bin/x", "x", [])
    assert exc.value.reason == "Permission denied"


def _settings(tmp_path: Path, search_paths: tuple[str, ...], menu: str = "dmenu") -> Settings:
    return Settings(
        cache_dir=tmp_path / "cache" / "gorn",
        search_paths=search_paths,
        menu_command=menu,
    )


def test_doctor_checks_pass_with_menu_on_path(tmp_path):
    bin_dir = tmp_path / "bin"
    _make_exec(bin_dir, "dmenu")
    settings = _settings(tmp_path, (str(bin_dir),))

    results = system_service.run_all_doctor_checks(settings)

    assert [r.name for r in results] == ["Menu", "PATH", "Cache Dir", "Cache File"]
    assert all(r.passed for r in results)
    assert settings.cache_dir.is_dir()


def test_doctor_reports_missing_menu_and_empty_path(tmp_path):
    settings = _settings(tmp_path, ())

    results = {r.name: r for r in system_service.run_all_doctor_checks(settings)}

    assert results["Menu"].passed is False
    assert results["PATH"].passed is False


def test_check_cache_file_reports_contents(tmp_path):
    store = CacheStore(tmp_path / "cache.json")
    store.save(CacheState(paths=PathCache({"/bin": PathIndex("/bin", ["ls"], 1)})))

    result = system_service.check_cache_file(store)

    assert result.passed is True
    assert "1 directory" in result.message


def test_check_cache_file_flags_corruption_without_failing(tmp_path):
    path = tmp_path / "cache.json"
    path.write_text("garbage", encoding="utf-8")

    result = system_service.check_cache_file(CacheStore(path))

    assert result.passed is True
    assert result.detail
