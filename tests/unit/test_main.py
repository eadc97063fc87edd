from __future__ import annotations

import runpy
import sys

import pytest


def test_main_invokes_run(monkeypatch):
    import gorn.__main__ as gorn_main

    called = {}

    def fake_run():
        called["ok"] = True

    monkeypatch.setattr("gorn.__main__.run", fake_run)

    gorn_main.main()

    assert called["ok"] is True


def test_module_runs_as_script(monkeypatch):
    import gorn.cli

    called = {"ok": False}

    def fake_run() -> None:
        called["ok"] = True

    monkeypatch.setattr(gorn.cli, "run", fake_run)

    sys.modules.pop("gorn.__main__", None)

    with pytest.raises(SystemExit) as exc:
        runpy.run_module("gorn.__main__", run_name="__main__")

    assert called["ok"] is True
    assert exc.value.code is None
