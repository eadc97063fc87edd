import json
from pathlib import Path

import pytest

from gorn import config as config_module


def _prepare_config(tmp_path, monkeypatch):
    config_dir = tmp_path / "config"
    monkeypatch.setattr(config_module, "CONFIG_DIR", config_dir)
    return config_dir / "config.json"


def test_load_config_defaults(tmp_path, monkeypatch):
    _prepare_config(tmp_path, monkeypatch)

    cfg = config_module.load_config()

    assert cfg.menu == config_module.DEFAULT_MENU
    assert cfg.history_limit == config_module.DEFAULT_HISTORY_LIMIT


def test_set_menu_persists_and_resets(tmp_path, monkeypatch):
    config_file = _prepare_config(tmp_path, monkeypatch)

    config_module.set_menu("rofi")

    stored = json.loads(config_file.read_text())
    assert stored["menu"] == "rofi"
    assert config_module.load_config().menu == "rofi"

    config_module.set_menu(None)
    stored = json.loads(config_file.read_text())
    assert "menu" not in stored
    assert config_module.load_config().menu == config_module.DEFAULT_MENU


def test_load_config_coerces_bad_history_limit(tmp_path, monkeypatch):
    config_file = _prepare_config(tmp_path, monkeypatch)
    config_file.parent.mkdir(parents=True)
    config_file.write_text(json.dumps({"history_limit": "lots"}))

    assert config_module.load_config().history_limit == config_module.DEFAULT_HISTORY_LIMIT


def test_load_config_rejects_non_object(tmp_path, monkeypatch):
    config_file = _prepare_config(tmp_path, monkeypatch)
    config_file.parent.mkdir(parents=True)
    config_file.write_text("[]")

    with pytest.raises(ValueError):
        config_module.load_config()


def test_config_dir_context_overrides(tmp_path, monkeypatch):
    _prepare_config(tmp_path, monkeypatch)
    override = tmp_path / "other"

    with config_module.config_dir_context(override):
        assert config_module.config_file_path() == override.resolve() / "config.json"
    assert config_module.config_file_path() == tmp_path / "config" / "config.json"


def test_resolve_cache_dir_prefers_xdg():
    env = {"HOME": "/home/u", "XDG_CACHE_HOME": "/tmp/xdg"}

    assert config_module.resolve_cache_dir(env) == Path("/tmp/xdg/gorn")


def test_resolve_cache_dir_falls_back_to_home():
    env = {"HOME": "/home/u", "XDG_CACHE_HOME": ""}

    assert config_module.resolve_cache_dir(env) == Path("/home/u/.cache/gorn")


def test_resolve_config_dir_from_env():
    assert config_module.resolve_config_dir({"HOME": "/home/u"}) == Path("/home/u/.config/gorn")
    assert config_module.resolve_config_dir({"XDG_CONFIG_HOME": "/c"}) == Path("/c/gorn")


def test_split_search_path_skips_current_dir_and_duplicates():
    value = ":".join(["/usr/bin", ".", "", "/bin", "/usr/bin"])

    assert config_module.split_search_path(value) == ("/usr/bin", "/bin")
    assert config_module.split_search_path("") == ()
    assert config_module.split_search_path(None) == ()


def test_settings_from_env_uses_explicit_mapping():
    env = {"HOME": "/home/u", "PATH": "/opt/bin:.:/usr/bin"}

    settings = config_module.settings_from_env(env, config_module.Config(menu="bemenu"))

    assert settings.search_paths == ("/opt/bin", "/usr/bin")
    assert settings.cache_dir == Path("/home/u/.cache/gorn")
    assert settings.cache_file == Path("/home/u/.cache/gorn/cache.json")
    assert settings.menu_command == "bemenu"
