# -*- coding: utf-8 -*-
from pathlib import Path

import pytest

from core.config import ConfigLoader


def _write_ini(tmp_path, body):
    path = tmp_path / "settings.ini"
    path.write_text(body, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("CRAFTPRO_STORE", raising=False)
    monkeypatch.delenv("CRAFTPRO_STORE_PATH", raising=False)


def test_defaults_without_file(tmp_path):
    loader = ConfigLoader(tmp_path / "missing.ini")
    cfg = loader.store_config()
    assert cfg.backend == "json"
    assert cfg.path == loader.project_root / "data" / "crafting_data.json"
    assert cfg.log_level == "warning"


def test_ini_values(tmp_path):
    ini = _write_ini(tmp_path, "[STORE]\nBACKEND = sqlite\nPATH = /srv/craft.sqlite\n\n[LOGGING]\nLEVEL = DEBUG\n")
    cfg = ConfigLoader(ini).store_config()
    assert cfg.backend == "sqlite"
    assert cfg.path == Path("/srv/craft.sqlite")
    assert cfg.log_level == "debug"


def test_sqlite_default_path(tmp_path):
    ini = _write_ini(tmp_path, "[STORE]\nBACKEND = sqlite\n")
    loader = ConfigLoader(ini)
    assert loader.store_config().path == loader.project_root / "data" / "crafting_data.sqlite"


def test_precedence_args_over_env_over_ini(tmp_path, monkeypatch):
    ini = _write_ini(tmp_path, "[STORE]\nBACKEND = json\nPATH = data/from_ini.json\n")
    loader = ConfigLoader(ini)
    assert loader.store_config().path == loader.project_root / "data" / "from_ini.json"

    monkeypatch.setenv("CRAFTPRO_STORE_PATH", str(tmp_path / "env.json"))
    assert loader.store_config().path == tmp_path / "env.json"

    assert loader.store_config(path=str(tmp_path / "arg.json")).path == tmp_path / "arg.json"

    monkeypatch.setenv("CRAFTPRO_STORE", "memory")
    assert loader.store_config().path is None
    assert loader.store_config(backend="json").backend == "json"


def test_unknown_backend(tmp_path):
    loader = ConfigLoader(tmp_path / "missing.ini")
    with pytest.raises(ValueError):
        loader.store_config(backend="redis")


def test_get_expands_user(tmp_path):
    ini = _write_ini(tmp_path, "[STORE]\nPATH = ~/craft.json\n")
    assert not ConfigLoader(ini).get("STORE", "PATH").startswith("~")


def test_version_file_reading(tmp_path):
    from core.version import VersionInfo, read_version_file

    assert read_version_file(tmp_path / "missing.json") == VersionInfo()

    path = tmp_path / "version.json"
    path.write_text('{"project_version": " 1.2.0 ", "snapshot_version": ""}', encoding="utf-8")
    info = read_version_file(path)
    assert info.project == "1.2.0"
    assert info.snapshot is None
    assert info.as_dict() == {"project_version": "1.2.0", "snapshot_version": "1"}

    path.write_text("not json", encoding="utf-8")
    assert read_version_file(path).project == "unknown"
